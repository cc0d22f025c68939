"""Docblock extraction from annotated shell scripts.

A script is read in two passes over its lines:

1. The header (shebang and leading comments) is scanned for file-level
   metadata, which goes to docblock 0.
2. The whole script is scanned again. Tag lines build function docblocks,
   function declarations name and close them, and any other line ends the
   current tag block.

A tag block that ends without acquiring a function name documented the file,
so its tags are replayed onto docblock 0.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .config import Config
from .errors import CapacityExceeded
from .grammars import parse_shellcheck
from .lines import (
    LineCursor,
    LineKind,
    classify_line,
    collect_continuation,
    extract_tag,
    function_name,
    is_comment,
    is_function_declaration,
    is_tag_line,
    shebang_interpreter,
)
from .models import BlockKind, Docblock, ExtractionResult, Field, NameMismatch, TagUpdate
from .tags import FILE_LEVEL_TAGS, SHARED_TAGS, Scope, interpret, rule_for

log = logging.getLogger(__name__)


class _Extractor:
    """State for one extraction. Never shared between files."""

    def __init__(self, lines: list[str], config: Config, file_name: str | None):
        self.lines = lines
        self.config = config
        self.source = file_name or "<lines>"
        self.blocks = [Docblock(kind=BlockKind.FILE, file_name=file_name)]
        self.current = self.blocks[0]
        self.in_docblock = False
        self.pending_tags: list[tuple[str, str]] = []  # Tags seen by an unnamed block
        self.consumed: set[int] = set()  # Line indexes the header pass handled
        self.mismatches: list[NameMismatch] = []
        self.truncated = False

    @property
    def file_block(self) -> Docblock:
        return self.blocks[0]

    def run(self) -> ExtractionResult:
        self._read_header()
        try:
            self._read_body()
        except CapacityExceeded as e:
            log.warning("%s: %s, ignoring the rest of the file", self.source, e)
            self.truncated = True
        self._release_unnamed()
        self._finalize()
        return ExtractionResult(
            docblocks=self.blocks,
            mismatches=self.mismatches,
            truncated=self.truncated,
        )

    # Header pass

    def _read_header(self) -> None:
        end = 0
        while end < len(self.lines) and is_comment(self.lines[end]):
            end += 1

        # A header directly on top of a function shares its description
        attached = end < len(self.lines) and is_function_declaration(self.lines[end])
        allowed = FILE_LEVEL_TAGS - SHARED_TAGS if attached else FILE_LEVEL_TAGS

        cursor = LineCursor(self.lines[:end])
        while not cursor.exhausted:
            start = cursor.position
            line = cursor.next()

            if start == 0:
                interpreter = shebang_interpreter(line)
                if interpreter:
                    self.file_block.interpreter = interpreter
                    continue

            if not is_tag_line(line):
                continue
            tag = extract_tag(line)
            if tag is None or tag[0] not in allowed:
                continue

            name, content = tag
            rule = rule_for(name)
            if rule.continued:
                content = collect_continuation(cursor, content, keep_indent=rule.keep_indent)
            self._apply(self.file_block, name, content)
            self.consumed.update(range(start, cursor.position))

    # Body pass

    def _read_body(self) -> None:
        cursor = LineCursor(self.lines)
        while not cursor.exhausted:
            index = cursor.position
            line = cursor.next()
            if index in self.consumed:
                continue

            kind = classify_line(line)
            if self.config.debug:
                log.debug("%s:%d %s %r", self.source, index + 1, kind.value, line)

            if kind is LineKind.SHELLCHECK:
                if not self.current.is_file:
                    self.current.shellcheck.extend(parse_shellcheck(line))
            elif kind is LineKind.TAG:
                self._handle_tag(line, cursor, index)
            elif kind is LineKind.FUNCTION:
                self._handle_declaration(function_name(line), index)
            elif kind in (LineKind.BLANK, LineKind.CODE):
                self._end_tag_block()

    def _handle_tag(self, line: str, cursor: LineCursor, index: int) -> None:
        tag = extract_tag(line)
        if tag is None:
            return
        name, content = tag

        rule = rule_for(name)
        if rule is not None and rule.continued:
            content = collect_continuation(cursor, content, keep_indent=rule.keep_indent)

        if rule is not None and rule.scope is Scope.FILE_ONLY:
            self._apply(self.file_block, name, content)
            return

        if name == "function":
            if not self._has_unnamed_block():
                self._open_block(index)
            self.in_docblock = True
            update = interpret(name, content)
            if update is not None:
                self._keep_current()
                self.current.apply(update)
            return

        if not self.in_docblock:
            self._open_block(index)
            self.in_docblock = True

        self._apply(self.current, name, content)
        if self._has_unnamed_block():
            self.pending_tags.append((name, content))

    def _handle_declaration(self, name: str, index: int) -> None:
        if self.in_docblock and not self.current.is_file:
            block = self.current
        else:
            block = self._open_block(index)

        if block.function_name is None:
            self._keep_current()
            block.apply(TagUpdate(Field.FUNCTION_NAME, name))
        elif block.function_name != name:
            log.warning(
                "%s:%d: function %s is documented as %s",
                self.source,
                index + 1,
                name,
                block.function_name,
            )
            self.mismatches.append(
                NameMismatch(documented=block.function_name, declared=name, line_number=index + 1)
            )

        self.in_docblock = False
        self.pending_tags = []

    def _end_tag_block(self) -> None:
        if self.in_docblock:
            self.in_docblock = False
            self._release_unnamed()

    # Block bookkeeping

    def _has_unnamed_block(self) -> bool:
        return self.in_docblock and not self.current.is_file and self.current.function_name is None

    def _open_block(self, index: int) -> Docblock:
        self._release_unnamed()
        block = Docblock(kind=BlockKind.FUNCTION, line_number=index + 1)
        self.blocks.append(block)
        self.current = block
        self.pending_tags = []
        return block

    def _keep_current(self) -> None:
        """Count the current block against the limit before it gets a name.

        Unnamed blocks are not counted, since they may still fall back to the
        file. A block over the limit is discarded along with its tags.
        """
        if len(self.blocks) <= self.config.max_docblocks:
            return
        self.blocks.pop()
        self.current = self.blocks[-1]
        self.pending_tags = []
        self.in_docblock = False
        raise CapacityExceeded(self.config.max_docblocks)

    def _release_unnamed(self) -> None:
        """Hand the tags of a block that never got a name back to the file."""
        block = self.current
        if block.is_file or block.function_name is not None:
            return

        self.blocks.pop()
        self.current = self.blocks[-1]
        for name, content in self.pending_tags:
            self._apply(self.file_block, name, content)
        self.pending_tags = []

    def _apply(self, block: Docblock, name: str, content: str) -> None:
        update = interpret(name, content)
        if update is not None:
            block.apply(update)

    def _finalize(self) -> None:
        fallback = self.file_block.description or ""
        for block in self.blocks:
            if block.section is not None and not block.section.description:
                block.section.description = fallback


def parse_lines(
    lines: list[str],
    config: Config | None = None,
    file_name: str | None = None,
) -> ExtractionResult:
    """Extract docblocks from script lines (without line terminators)."""
    return _Extractor(list(lines), config or Config(), file_name).run()


def parse_file(path: Path | str, config: Config | None = None) -> ExtractionResult | None:
    """Extract docblocks from a shell script.

    Args:
        path: Script to read.
        config: Limits and tracing switches; defaults when omitted.

    Returns:
        ExtractionResult whose first docblock describes the file, or None when
        the file cannot be read.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            lines = [line.rstrip("\r\n") for line in handle]
    except OSError as e:
        log.warning("Cannot read %s: %s", path, e)
        return None

    result = parse_lines(lines, config, file_name=path.name)
    result.path = str(path)
    return result
