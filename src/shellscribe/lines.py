"""Line classification, tag extraction and comment continuation."""

from __future__ import annotations

import re
from enum import Enum


class LineKind(Enum):
    BLANK = "blank"
    SHEBANG = "shebang"
    COMMENT = "comment"
    TAG = "tag"
    SHELLCHECK = "shellcheck"
    FUNCTION = "function"
    CODE = "code"


_COMMENT = re.compile(r"^\s*#")
# "# @name ..." with any whitespace (possibly none) between '#' and '@'
_STANDARD_TAG = re.compile(r"^\s*#\s*@[^\s:]")
# "@name:" anywhere inside a comment
_COLON_TAG = re.compile(r"@[^\s:@]+:")
_SHELLCHECK = re.compile(r"^\s*#\s*shellcheck\b", re.IGNORECASE)
# name() {   name () {
_BARE_FUNCTION = re.compile(r"^\s*([A-Za-z0-9_]+)\s*\(\s*\)\s*\{")
# function name   function name() {   function name {
_KEYWORD_FUNCTION = re.compile(r"^\s*function\s+([^\s(){}]+)\s*(?:\(\s*\))?\s*(?:\{.*)?$")


def is_comment(line: str) -> bool:
    return bool(_COMMENT.match(line))


def is_shebang(line: str) -> bool:
    return line.startswith("#!")


def is_shellcheck_directive(line: str) -> bool:
    return bool(_SHELLCHECK.match(line))


def is_tag_line(line: str) -> bool:
    """Check whether a comment line carries a tag.

    Shellcheck directives never count as tags, even when they contain '@'.
    """
    if not is_comment(line) or is_shellcheck_directive(line):
        return False
    if _STANDARD_TAG.match(line):
        return True
    return bool(_COLON_TAG.search(line))


def function_name(line: str) -> str | None:
    """Return the declared function name, or None if this is not a declaration."""
    match = _KEYWORD_FUNCTION.match(line) or _BARE_FUNCTION.match(line)
    return match.group(1) if match else None


def is_function_declaration(line: str) -> bool:
    return function_name(line) is not None


def classify_line(line: str) -> LineKind:
    """Classify a single line. Pure: depends on nothing but the text."""
    if not line.strip():
        return LineKind.BLANK
    if is_shebang(line):
        return LineKind.SHEBANG
    if is_comment(line):
        if is_shellcheck_directive(line):
            return LineKind.SHELLCHECK
        if is_tag_line(line):
            return LineKind.TAG
        return LineKind.COMMENT
    if is_function_declaration(line):
        return LineKind.FUNCTION
    return LineKind.CODE


def shebang_interpreter(line: str) -> str | None:
    """Interpreter named by a shebang, e.g. "/usr/bin/env bash"."""
    if not is_shebang(line):
        return None
    interpreter = line[2:].strip()
    return interpreter or None


def extract_tag(line: str) -> tuple[str, str] | None:
    """Split a tag line into (name, content).

    The name runs from the first '@' up to whitespace or ':'. The content is
    what follows, after an optional ':' and leading whitespace.
    """
    at = line.find("@")
    if at < 0:
        return None

    end = at + 1
    while end < len(line) and not line[end].isspace() and line[end] != ":":
        end += 1

    name = line[at + 1 : end]
    if not name:
        return None

    content = line[end:]
    if content.startswith(":"):
        content = content[1:]
    return name, content.strip()


def comment_text(line: str, keep_indent: bool = False) -> str:
    """Text after the first '#'.

    With keep_indent only a single separating space is removed, so indented
    example code keeps its shape.
    """
    text = line[line.index("#") + 1 :].rstrip()
    if keep_indent:
        return text[1:] if text.startswith(" ") else text
    return text.lstrip()


class LineCursor:
    """Read position over an in-memory list of lines."""

    def __init__(self, lines: list[str]):
        self.lines = lines
        self.position = 0

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.lines)

    def peek(self) -> str | None:
        if self.exhausted:
            return None
        return self.lines[self.position]

    def next(self) -> str:
        line = self.lines[self.position]
        self.position += 1
        return line


def _continues(line: str | None) -> bool:
    return (
        line is not None
        and is_comment(line)
        and not is_tag_line(line)
        and not is_shellcheck_directive(line)
    )


def collect_continuation(cursor: LineCursor, initial: str, keep_indent: bool = False) -> str:
    """Extend tag content with the plain comment lines that follow it.

    Stops before the first line that is not a comment, or that is another tag
    or a shellcheck directive; that line is left for the caller.
    """
    parts = [initial] if initial else []
    while _continues(cursor.peek()):
        parts.append(comment_text(cursor.next(), keep_indent=keep_indent))
    # Bare '#' lines closing a block are layout, not content
    while parts and not parts[-1].strip():
        parts.pop()
    return "\n".join(parts)
