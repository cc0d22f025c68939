"""Data models for shell script documentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class BlockKind(Enum):
    """What a docblock documents."""

    FILE = "file"
    FUNCTION = "function"


class AlertType(Enum):
    """Admonition categories rendered as block quotes."""

    NOTE = "NOTE"
    TIP = "TIP"
    IMPORTANT = "IMPORTANT"
    WARNING = "WARNING"
    CAUTION = "CAUTION"
    INFO = "INFO"
    DANGER = "DANGER"


@dataclass
class Argument:
    """Positional argument from @arg."""

    name: str  # "$1", "$@", "name"
    type: str = ""  # Second token when present
    description: str = ""


@dataclass
class Parameter:
    """Named parameter from @param."""

    name: str
    description: str = ""


@dataclass
class ReturnValue:
    """One documented return value from @retval."""

    value: str
    description: str = ""


@dataclass
class ExitCode:
    """Exit status from @exitcode."""

    code: str
    description: str = ""


@dataclass
class Option:
    """Command-line option from @option."""

    short_opt: str | None = None  # "-v"
    long_opt: str | None = None  # "--verbose"
    arg_spec: str | None = None  # "FILE" from "<FILE>"
    description: str = ""

    @property
    def flag(self) -> str:
        return self.long_opt or self.short_opt or ""


@dataclass
class EnvVar:
    """Environment variable read by the script, from @env."""

    name: str
    default: str | None = None
    description: str = ""


@dataclass
class SetVariable:
    """Global variable set by a function, from @set or @readonly."""

    name: str
    type: str = ""
    default: str | None = None
    description: str = ""
    is_readonly: bool = False


@dataclass
class SeeAlso:
    """Cross reference from @see."""

    name: str
    url: str | None = None  # Only for [name](url) references
    is_internal: bool = True


@dataclass
class Section:
    """Grouping heading from @section."""

    name: str
    description: str = ""  # Falls back to the file description


@dataclass
class Alert:
    """Admonition from @note, @tip, @warning, ..."""

    type: AlertType
    content: str


@dataclass
class Deprecation:
    """Deprecation state from @deprecated, @replacement and @eol."""

    is_deprecated: bool = False
    version: str | None = None
    replacement: str | None = None
    eol: str | None = None


@dataclass
class ShellcheckDirective:
    """A `# shellcheck disable=...` comment inside a function docblock."""

    code: str  # "SC2034"
    directive: str  # Full directive text after '#'
    reason: str | None = None  # Text after a trailing '#'


@dataclass(frozen=True)
class Author:
    """Author line split into name and optional contact."""

    name: str
    contact: str | None = None


class Field(Enum):
    """Docblock fields a tag can update.

    Each member knows how it merges into a docblock, see Docblock.apply.
    """

    FILE_NAME = "file_name"
    BRIEF = "brief"
    DESCRIPTION = "description"
    VERSION = "version"
    AUTHOR = "author"
    SINCE = "since"
    PROJECT = "project"
    LICENSE = "license"
    COPYRIGHT = "copyright"
    REPOSITORY = "repository"
    SKIP = "is_skipped"
    FUNCTION_NAME = "function_name"
    ALIAS = "alias"
    SECTION = "section"
    ARGUMENTS = "arguments"
    PARAMS = "params"
    NO_ARGS = "no_args"
    RETURN_DESC = "return_desc"
    RETURNS = "returns"
    STDIN = "stdin_doc"
    STDOUT = "stdout_doc"
    STDERR = "stderr_doc"
    EXIT_CODES = "exit_codes"
    OPTIONS = "options"
    ENV_VARS = "env_vars"
    SET_VARS = "set_vars"
    EXAMPLE = "example"
    ALERTS = "alerts"
    WARNINGS = "warnings"
    DEPENDENCIES = "dependencies"
    INTERNAL_CALLS = "internal_calls"
    REQUIRES = "requires"
    USED_BY = "used_by"
    CALLS = "calls"
    PROVIDES = "provides"
    SEE_ALSO = "see_also"
    INTERNAL = "is_internal"
    DEPRECATED = "deprecated"
    REPLACEMENT = "replacement"
    EOL = "eol"


@dataclass(frozen=True)
class TagUpdate:
    """Result of interpreting one tag: which field changes, and to what."""

    field: Field
    value: Any = None


_OVERWRITE = frozenset(
    {
        Field.FILE_NAME,
        Field.VERSION,
        Field.SINCE,
        Field.PROJECT,
        Field.LICENSE,
        Field.COPYRIGHT,
        Field.REPOSITORY,
        Field.ALIAS,
        Field.SECTION,
        Field.RETURN_DESC,
        Field.STDIN,
        Field.STDOUT,
        Field.STDERR,
    }
)

_APPEND = frozenset(
    {
        Field.ARGUMENTS,
        Field.PARAMS,
        Field.RETURNS,
        Field.EXIT_CODES,
        Field.OPTIONS,
        Field.ENV_VARS,
        Field.SET_VARS,
        Field.ALERTS,
        Field.WARNINGS,
        Field.DEPENDENCIES,
        Field.INTERNAL_CALLS,
        Field.REQUIRES,
        Field.USED_BY,
        Field.CALLS,
        Field.PROVIDES,
        Field.SEE_ALSO,
    }
)

_FLAGS = frozenset({Field.SKIP, Field.NO_ARGS, Field.INTERNAL})

EXAMPLE_SEPARATOR = "\n\n"


@dataclass
class Docblock:
    """Documentation for one file or one function.

    Docblock 0 of every extraction has kind FILE and holds the file-level
    metadata; the others have kind FUNCTION and, once extraction finishes,
    always carry a function name.
    """

    kind: BlockKind = BlockKind.FUNCTION
    line_number: int = 0  # 1-based line that opened the block, 0 for the file

    # File identity
    file_name: str | None = None
    brief: str | None = None
    description: str | None = None
    version: str | None = None
    author: str | None = None
    author_contact: str | None = None
    since: str | None = None
    project: str | None = None
    license: str | None = None
    copyright: str | None = None
    repository: str | None = None
    interpreter: str | None = None  # From the shebang

    # Function identity
    function_name: str | None = None
    function_brief: str | None = None
    function_description: str | None = None
    alias: str | None = None
    section: Section | None = None

    # Parameters
    arguments: list[Argument] = field(default_factory=list)
    params: list[Parameter] = field(default_factory=list)
    no_args: bool = False

    # Contract
    return_desc: str | None = None
    returns: list[ReturnValue] = field(default_factory=list)
    stdin_doc: str | None = None
    stdout_doc: str | None = None
    stderr_doc: str | None = None
    exit_codes: list[ExitCode] = field(default_factory=list)

    # Interface and environment
    options: list[Option] = field(default_factory=list)
    env_vars: list[EnvVar] = field(default_factory=list)
    set_vars: list[SetVariable] = field(default_factory=list)

    # Narrative
    example: str | None = None  # Examples joined by a blank line
    alerts: list[Alert] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    # Relationships
    dependencies: list[str] = field(default_factory=list)
    internal_calls: list[str] = field(default_factory=list)
    requires: list[str] = field(default_factory=list)
    used_by: list[str] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)
    provides: list[str] = field(default_factory=list)
    see_also: list[SeeAlso] = field(default_factory=list)

    # Flags
    is_internal: bool = False
    is_skipped: bool = False
    deprecation: Deprecation = field(default_factory=Deprecation)

    shellcheck: list[ShellcheckDirective] = field(default_factory=list)

    @property
    def is_file(self) -> bool:
        return self.kind is BlockKind.FILE

    @property
    def title(self) -> str:
        """Heading used for this block when rendered."""
        if self.is_file:
            return self.file_name or ""
        return self.function_name or ""

    @property
    def summary(self) -> str | None:
        return self.brief if self.is_file else self.function_brief

    @property
    def details(self) -> str | None:
        return self.description if self.is_file else self.function_description

    @property
    def examples(self) -> list[str]:
        """Individual examples, split on the blank-line separator."""
        if not self.example:
            return []
        return [part for part in self.example.split(EXAMPLE_SEPARATOR) if part.strip()]

    @property
    def has_multiple_examples(self) -> bool:
        return bool(self.example) and EXAMPLE_SEPARATOR in self.example

    @property
    def has_relationships(self) -> bool:
        return bool(
            self.dependencies
            or self.internal_calls
            or self.requires
            or self.used_by
            or self.calls
            or self.provides
        )

    def apply(self, update: TagUpdate) -> None:
        """Merge a tag's effect into this block."""
        f = update.field
        value = update.value

        if f in _OVERWRITE:
            setattr(self, f.value, value)
        elif f in _APPEND:
            getattr(self, f.value).append(value)
        elif f in _FLAGS:
            setattr(self, f.value, True)
        elif f is Field.BRIEF:
            if self.is_file:
                self.brief = value
            else:
                self.function_brief = value
        elif f is Field.DESCRIPTION:
            attr = "description" if self.is_file else "function_description"
            current = getattr(self, attr)
            setattr(self, attr, value if current is None else f"{current}\n{value}")
        elif f is Field.EXAMPLE:
            if self.example is None:
                self.example = value
            else:
                self.example = f"{self.example}{EXAMPLE_SEPARATOR}{value}"
        elif f is Field.FUNCTION_NAME:
            # First name wins; a later declaration cannot rename the block
            if self.function_name is None:
                self.function_name = value
        elif f is Field.AUTHOR:
            self.author = value.name
            if value.contact:
                self.author_contact = value.contact
        elif f is Field.DEPRECATED:
            self.deprecation.is_deprecated = True
            if value:
                self.deprecation.version = value
        elif f is Field.REPLACEMENT:
            self.deprecation.replacement = value
        elif f is Field.EOL:
            self.deprecation.eol = value
        else:
            raise ValueError(f"Unhandled docblock field: {f}")


@dataclass
class NameMismatch:
    """A function declaration whose name differs from its @function tag."""

    documented: str  # Name from the tag, kept on the docblock
    declared: str  # Name from the declaration line
    line_number: int


@dataclass
class ExtractionResult:
    """Docblocks extracted from one script."""

    docblocks: list[Docblock]
    path: str | None = None
    mismatches: list[NameMismatch] = field(default_factory=list)
    truncated: bool = False  # Docblock limit reached before end of file

    @property
    def file(self) -> Docblock:
        return self.docblocks[0]

    @property
    def functions(self) -> list[Docblock]:
        return self.docblocks[1:]

    @property
    def is_skipped(self) -> bool:
        return self.docblocks[0].is_skipped

    def __len__(self) -> int:
        return len(self.docblocks)

    def __getitem__(self, index: int) -> Docblock:
        return self.docblocks[index]

    def __iter__(self):
        return iter(self.docblocks)


@dataclass
class ValidationResult:
    """Results from documentation validation."""

    errors: list[str] = field(default_factory=list)  # Fails the run if non-empty
    warnings: list[str] = field(default_factory=list)  # Printed but allowed
