"""Canonical tag vocabulary.

TAGS maps every recognized tag name to the rule that interprets it. The
extractor consults nothing else to decide what a tag means.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from . import grammars
from .models import Field, TagUpdate

log = logging.getLogger(__name__)

Interpretation = Optional[TagUpdate]


class Scope(Enum):
    ANY = "any"  # Goes to whatever docblock is current
    FILE_LEVEL = "file-level"  # Also read by the header pre-pass
    FILE_ONLY = "file-only"  # Always goes to docblock 0


@dataclass(frozen=True)
class TagRule:
    """How one tag is read."""

    interpret: Callable[[str, str], Interpretation]  # (tag, content) -> update(s)
    scope: Scope = Scope.ANY
    continued: bool = False  # Collect following plain comment lines
    keep_indent: bool = False  # Continuation keeps indentation (examples)


def _text(target: Field) -> Callable[[str, str], Interpretation]:
    """Plain text, kept even when empty."""

    def interpret(tag: str, content: str) -> Interpretation:
        return TagUpdate(target, content)

    return interpret


def _required(target: Field) -> Callable[[str, str], Interpretation]:
    """Non-empty text; empty content drops the tag."""

    def interpret(tag: str, content: str) -> Interpretation:
        value = grammars.non_empty(content)
        return TagUpdate(target, value) if value is not None else None

    return interpret


def _parsed(target: Field, parse: Callable[[str], object]) -> Callable[[str, str], Interpretation]:
    def interpret(tag: str, content: str) -> Interpretation:
        value = parse(content)
        return TagUpdate(target, value) if value is not None else None

    return interpret


def _flag(target: Field) -> Callable[[str, str], Interpretation]:
    def interpret(tag: str, content: str) -> Interpretation:
        return TagUpdate(target, True)

    return interpret


def _function_name(tag: str, content: str) -> Interpretation:
    name = content.strip()
    if name.endswith("()"):
        name = name[:-2].rstrip()
    return TagUpdate(Field.FUNCTION_NAME, name) if name else None


def _argument(tag: str, content: str) -> Interpretation:
    # "@arg -v | verbose" documents an option, not a positional argument
    if content.lstrip().startswith("-"):
        option = grammars.parse_option(content)
        return TagUpdate(Field.OPTIONS, option) if option else None
    argument = grammars.parse_argument(content)
    return TagUpdate(Field.ARGUMENTS, argument) if argument else None


def _alert(tag: str, content: str) -> Interpretation:
    return TagUpdate(Field.ALERTS, grammars.parse_alert(tag, content))


def _deprecated(tag: str, content: str) -> Interpretation:
    return TagUpdate(Field.DEPRECATED, grammars.parse_deprecated(content))


def _readonly(tag: str, content: str) -> Interpretation:
    variable = grammars.parse_set_variable(content, readonly=True)
    return TagUpdate(Field.SET_VARS, variable) if variable else None


_FILE_NAME = TagRule(_required(Field.FILE_NAME), scope=Scope.FILE_ONLY)
_PROJECT = TagRule(_required(Field.PROJECT), scope=Scope.FILE_ONLY)
_REPOSITORY = TagRule(_required(Field.REPOSITORY), scope=Scope.FILE_ONLY)
_ARGUMENT = TagRule(_argument)
_RETURN = TagRule(_text(Field.RETURN_DESC))
_ALERT = TagRule(_alert)

TAGS: dict[str, TagRule] = {
    # File metadata
    "file": _FILE_NAME,
    "name": _FILE_NAME,
    "version": TagRule(_required(Field.VERSION), scope=Scope.FILE_ONLY),
    "author": TagRule(_parsed(Field.AUTHOR, grammars.parse_author), scope=Scope.FILE_ONLY),
    "since": TagRule(_required(Field.SINCE), scope=Scope.FILE_ONLY),
    "license": TagRule(_required(Field.LICENSE), scope=Scope.FILE_ONLY),
    "copyright": TagRule(_required(Field.COPYRIGHT), scope=Scope.FILE_ONLY),
    "package": _PROJECT,
    "module": _PROJECT,
    "link": _REPOSITORY,
    "repo": _REPOSITORY,
    "skip": TagRule(_flag(Field.SKIP), scope=Scope.FILE_ONLY),
    # Shared between the file header and functions
    "description": TagRule(_text(Field.DESCRIPTION), scope=Scope.FILE_LEVEL, continued=True),
    "see": TagRule(_parsed(Field.SEE_ALSO, grammars.parse_see), scope=Scope.FILE_LEVEL),
    "env": TagRule(_parsed(Field.ENV_VARS, grammars.parse_env_var), scope=Scope.FILE_LEVEL),
    "brief": TagRule(_text(Field.BRIEF)),
    # Function identity
    "function": TagRule(_function_name),
    "alias": TagRule(_required(Field.ALIAS)),
    "section": TagRule(_parsed(Field.SECTION, grammars.parse_section)),
    "internal": TagRule(_flag(Field.INTERNAL)),
    # Parameters
    "arg": _ARGUMENT,
    "argument": _ARGUMENT,
    "param": TagRule(_parsed(Field.PARAMS, grammars.parse_parameter)),
    "noargs": TagRule(_flag(Field.NO_ARGS)),
    "option": TagRule(_parsed(Field.OPTIONS, grammars.parse_option)),
    # Contract
    "return": _RETURN,
    "returns": _RETURN,
    "retval": TagRule(_parsed(Field.RETURNS, grammars.parse_return_value)),
    "exitcode": TagRule(_parsed(Field.EXIT_CODES, grammars.parse_exit_code)),
    "stdin": TagRule(_text(Field.STDIN)),
    "stdout": TagRule(_text(Field.STDOUT), continued=True),
    "stderr": TagRule(_text(Field.STDERR)),
    # Variables
    "set": TagRule(_parsed(Field.SET_VARS, grammars.parse_set_variable)),
    "readonly": TagRule(_readonly),
    # Narrative
    "example": TagRule(_text(Field.EXAMPLE), continued=True, keep_indent=True),
    "note": _ALERT,
    "tip": _ALERT,
    "hint": _ALERT,
    "important": _ALERT,
    "warning": _ALERT,
    "caution": _ALERT,
    "info": _ALERT,
    "danger": _ALERT,
    "warn": TagRule(_required(Field.WARNINGS)),
    # Deprecation
    "deprecated": TagRule(_deprecated),
    "replacement": TagRule(_required(Field.REPLACEMENT)),
    "eol": TagRule(_required(Field.EOL)),
    # Relationships
    "dependency": TagRule(_required(Field.DEPENDENCIES)),
    "internal-call": TagRule(_required(Field.INTERNAL_CALLS)),
    "requires": TagRule(_required(Field.REQUIRES)),
    "used-by": TagRule(_required(Field.USED_BY)),
    "calls": TagRule(_required(Field.CALLS)),
    "provides": TagRule(_required(Field.PROVIDES)),
}

# Tags the header pre-pass may claim for docblock 0
FILE_LEVEL_TAGS = frozenset(
    name for name, rule in TAGS.items() if rule.scope in (Scope.FILE_ONLY, Scope.FILE_LEVEL)
)
# Tags the header leaves for a function when the header sits on top of one
SHARED_TAGS = frozenset(name for name, rule in TAGS.items() if rule.scope is Scope.FILE_LEVEL)


def rule_for(tag: str) -> TagRule | None:
    return TAGS.get(tag)


def interpret(tag: str, content: str) -> TagUpdate | None:
    """Interpret a tag's content into the update it causes.

    Unknown tags and content the tag's grammar rejects give None.
    """
    rule = TAGS.get(tag)
    if rule is None:
        log.debug("Ignoring unknown tag @%s", tag)
        return None

    result = rule.interpret(tag, content)
    if result is None:
        log.debug("Dropping @%s: cannot parse %r", tag, content)
    return result
