"""Grammars for structured tag content.

Every parser takes the tag content and returns a typed record, or None when
the content does not fit the grammar. A None result means the tag is dropped;
it never aborts extraction.
"""

from __future__ import annotations

import re

from .models import (
    Alert,
    AlertType,
    Argument,
    Author,
    EnvVar,
    ExitCode,
    Option,
    Parameter,
    ReturnValue,
    Section,
    SeeAlso,
    SetVariable,
    ShellcheckDirective,
)

_PLACEHOLDER = re.compile(r"<([^>]*)>")
_LEADING_PLACEHOLDER = re.compile(r"^<[^>]*>\s*")
_LINK = re.compile(r"^\[([^\]]*)\]\(([^)]*)\)")
_AUTHOR_CONTACT = re.compile(r"^(.*?)\s*<([^>]+)>\s*$")
_FROM = re.compile(r"\bfrom\b\s*", re.IGNORECASE)
_SHELLCHECK_CODES = re.compile(r"\b(?:disable|enable)=([^\s#]+)")

ALERT_TYPES: dict[str, AlertType] = {
    "note": AlertType.NOTE,
    "tip": AlertType.TIP,
    "hint": AlertType.TIP,
    "important": AlertType.IMPORTANT,
    "warning": AlertType.WARNING,
    "caution": AlertType.CAUTION,
    "info": AlertType.INFO,
    "danger": AlertType.DANGER,
}


def _split(content: str, parts: int) -> list[str]:
    """Split on whitespace into at most `parts` pieces."""
    return content.strip().split(None, parts - 1)


def non_empty(content: str) -> str | None:
    content = content.strip()
    return content or None


def parse_argument(content: str) -> Argument | None:
    """`<name> [<type>] <description...>`.

    The second token is always taken as the type when it exists, so
    "@arg $1 name" documents an argument of type "name".
    """
    tokens = _split(content, 3)
    if not tokens:
        return None
    name = tokens[0]
    arg_type = tokens[1] if len(tokens) > 1 else ""
    description = tokens[2] if len(tokens) > 2 else ""
    return Argument(name=name, type=arg_type, description=description)


def parse_parameter(content: str) -> Parameter | None:
    tokens = _split(content, 2)
    if not tokens:
        return None
    return Parameter(name=tokens[0], description=tokens[1] if len(tokens) > 1 else "")


def parse_exit_code(content: str) -> ExitCode | None:
    tokens = _split(content, 2)
    if not tokens:
        return None
    return ExitCode(code=tokens[0], description=tokens[1] if len(tokens) > 1 else "")


def parse_return_value(content: str) -> ReturnValue | None:
    tokens = _split(content, 2)
    if not tokens:
        return None
    return ReturnValue(value=tokens[0], description=tokens[1] if len(tokens) > 1 else "")


def parse_option(content: str) -> Option | None:
    """Parse an option in any of these shapes.

        -v | verbose output
        -o | <FILE> output file
        -o <FILE> output file
        --output=<FILE> output file
        --verbose verbose output

    The flag decides the slot: one leading dash is a short option, exactly
    two a long one. Anything else is rejected.
    """
    content = content.strip()
    if not content:
        return None

    if "|" in content:
        token, _, description = content.partition("|")
        token = token.strip()
        description = description.strip()
    else:
        pieces = content.split(None, 1)
        token = pieces[0]
        description = pieces[1] if len(pieces) > 1 else ""

    arg_spec = None
    match = _PLACEHOLDER.search(token) or _PLACEHOLDER.search(description)
    if match:
        arg_spec = match.group(1).strip() or None
    description = _LEADING_PLACEHOLDER.sub("", description, count=1).strip()

    flag = re.split(r"[=<\s]", token, maxsplit=1)[0]
    if re.match(r"^--[^-]", flag):
        return Option(long_opt=flag, arg_spec=arg_spec, description=description)
    if re.match(r"^-[^-]", flag):
        return Option(short_opt=flag, arg_spec=arg_spec, description=description)
    return None


def parse_see(content: str) -> SeeAlso | None:
    """`[Name](https://...)` is an external link; anything else names an internal item."""
    content = content.strip()
    if not content:
        return None
    match = _LINK.match(content)
    if match:
        return SeeAlso(name=match.group(1), url=match.group(2), is_internal=False)
    return SeeAlso(name=content)


def parse_set_variable(content: str, readonly: bool = False) -> SetVariable | None:
    """`<name>[=<default>] [<type> [<description...>]]`."""
    tokens = _split(content, 3)
    if not tokens:
        return None
    name, sep, default = tokens[0].partition("=")
    if not name:
        return None
    return SetVariable(
        name=name,
        type=tokens[1] if len(tokens) > 1 else "",
        default=default if sep else None,
        description=tokens[2] if len(tokens) > 2 else "",
        is_readonly=readonly,
    )


def parse_env_var(content: str) -> EnvVar | None:
    """`<NAME>[=<default>] <description...>`."""
    tokens = _split(content, 2)
    if not tokens:
        return None
    name, sep, default = tokens[0].partition("=")
    if not name:
        return None
    return EnvVar(
        name=name,
        default=default if sep else None,
        description=tokens[1] if len(tokens) > 1 else "",
    )


def parse_section(content: str) -> Section | None:
    tokens = _split(content, 2)
    if not tokens:
        return None
    return Section(name=tokens[0], description=tokens[1] if len(tokens) > 1 else "")


def parse_author(content: str) -> Author | None:
    """Keep the author line as written, lifting out a single `<contact>`."""
    content = content.strip()
    if not content:
        return None
    match = _AUTHOR_CONTACT.match(content)
    if match and match.group(1) and "<" not in match.group(1):
        return Author(name=match.group(1), contact=match.group(2))
    return Author(name=content)


def alert_type(tag: str) -> AlertType:
    """Map an alert tag to its category. Unknown tags are notes."""
    return ALERT_TYPES.get(tag.lower(), AlertType.NOTE)


def parse_alert(tag: str, content: str) -> Alert:
    return Alert(type=alert_type(tag), content=content)


def parse_deprecated(content: str) -> str | None:
    """Return the version a function was deprecated in, if stated.

    "from 2.1" and "since we moved, from 2.1" both give "2.1"; content
    without "from" is taken whole.
    """
    content = content.strip()
    match = _FROM.search(content)
    if match:
        return content[match.end() :].strip() or None
    return content or None


def parse_shellcheck(line: str) -> list[ShellcheckDirective]:
    """Parse a `# shellcheck ...` comment into one record per code.

    "shellcheck disable=SC2034,SC2154 # set by caller" gives two records
    sharing the directive text and the reason.
    """
    text = line[line.index("#") + 1 :].strip()
    directive, hash_, reason = text.partition("#")
    directive = directive.strip()
    reason = reason.strip() if hash_ else ""

    match = _SHELLCHECK_CODES.search(directive)
    if not match:
        return [ShellcheckDirective(code=directive, directive=directive, reason=reason or None)]

    codes = [code for code in match.group(1).split(",") if code]
    return [
        ShellcheckDirective(code=code, directive=directive, reason=reason or None)
        for code in codes
    ]
