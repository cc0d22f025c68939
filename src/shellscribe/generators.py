"""Markdown generation for extracted docblocks."""

from __future__ import annotations

import re
import textwrap
from typing import Sequence

from .config import Config
from .models import Docblock, ExtractionResult, ShellcheckDirective

SHELLCHECK_WIKI = "https://www.shellcheck.net/wiki/"

_GITHUB_HANDLE = re.compile(r"^(.*?)\s*\(@([A-Za-z0-9-]+)\)$")
_SHELLCHECK_CODE = re.compile(r"^SC\d+$")


def _slugify(name: str) -> str:
    """Convert a heading to a GitHub-style markdown anchor."""
    slug = re.sub(r"[^\w\- ]", "", name.strip().lower())
    return slug.replace(" ", "-")


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def _code_fence(config: Config) -> str:
    if config.highlight_code and config.highlight_language:
        return f"```{config.highlight_language}"
    return "```"


def _render_authors(author: str, linkify: bool) -> str:
    """Render "Jane (@jane), Bob" with optional GitHub profile links."""
    rendered = []
    for name in (part.strip() for part in author.split(",")):
        if not name:
            continue
        match = _GITHUB_HANDLE.match(name) if linkify else None
        if match:
            handle = match.group(2)
            link = f"[@{handle}](https://github.com/{handle})"
            rendered.append(f"{match.group(1)} ({link})" if match.group(1) else link)
        else:
            rendered.append(name)
    return ", ".join(rendered)


def _shellcheck_link(code: str) -> str:
    if _SHELLCHECK_CODE.match(code):
        return f"[{code}]({SHELLCHECK_WIKI}{code})"
    return f"`{code}`"


def _unique_by_code(directives: list[ShellcheckDirective]) -> list[ShellcheckDirective]:
    seen: set[str] = set()
    unique = []
    for directive in directives:
        if directive.code not in seen:
            seen.add(directive.code)
            unique.append(directive)
    return unique


def _render_about(lines: list[str], block: Docblock, config: Config) -> None:
    facts = []
    if block.interpreter:
        facts.append(("Interpreter", f"`{block.interpreter}`"))
    if block.project:
        facts.append(("Project", block.project))
    if block.version and config.version_placement == "about":
        facts.append(("Version", block.version))
    if block.since:
        facts.append(("Since", block.since))
    if block.license and config.license_placement == "about":
        facts.append(("License", block.license))
    if block.copyright and config.copyright_placement == "about":
        facts.append(("Copyright", block.copyright))
    if block.repository:
        facts.append(("Repository", block.repository))
    if block.author:
        facts.append(("Authors", _render_authors(block.author, config.linkify_usernames)))
    if block.author_contact:
        facts.append(("Contact", block.author_contact))

    if not facts and not block.description:
        return

    lines.extend(["## About", ""])
    for label, value in facts:
        lines.append(f"* **{label}:** {value}")
    if facts:
        lines.append("")
    if block.description:
        lines.extend([block.description, ""])
    lines.extend(["---", ""])


def _render_index(lines: list[str], functions: list[Docblock]) -> None:
    lines.extend(["## Index", ""])
    for block in functions:
        entry = f"* [{block.function_name}](#{_slugify(block.function_name)})"
        if block.function_brief:
            entry += f" - {block.function_brief}"
        lines.append(entry)
    lines.append("")


def _render_alerts(lines: list[str], block: Docblock) -> None:
    for alert in block.alerts:
        content = alert.content.replace("\n", "\n> ")
        lines.extend([f"> **{alert.type.value}:** {content}", ""])


def _render_deprecation(lines: list[str], block: Docblock) -> None:
    deprecation = block.deprecation
    if not deprecation.is_deprecated:
        return
    notice = "> **DEPRECATED**"
    if deprecation.version:
        notice += f" since {deprecation.version}"
    notice += "."
    if deprecation.replacement:
        notice += f" Use `{deprecation.replacement}` instead."
    if deprecation.eol:
        notice += f" Scheduled for removal in {deprecation.eol}."
    lines.extend([notice, ""])


def _render_examples(lines: list[str], block: Docblock, config: Config, heading: str) -> None:
    examples = [textwrap.dedent(example).strip("\n") for example in block.examples]
    if not examples:
        return

    fence = _code_fence(config)
    if len(examples) == 1:
        lines.extend([f"{heading} Example", "", fence, examples[0], "```", ""])
        return

    lines.extend([f"{heading} Examples", ""])
    for number, example in enumerate(examples, start=1):
        if config.example_display == "tabs":
            opening = "<details open>" if number == 1 else "<details>"
            lines.extend(
                [
                    opening,
                    f"<summary>Example {number}</summary>",
                    "",
                    fence,
                    example,
                    "```",
                    "",
                    "</details>",
                    "",
                ]
            )
        else:
            lines.extend([fence, example, "```", ""])


def _render_arguments(lines: list[str], block: Docblock, config: Config, heading: str) -> None:
    if block.arguments:
        lines.extend([f"{heading} Arguments", ""])
        if config.arguments_display == "table":
            lines.extend(["| Argument | Type | Description |", "|----------|------|-------------|"])
            for arg in block.arguments:
                lines.append(
                    f"| `{_escape_cell(arg.name)}` | {_escape_cell(arg.type)} | {_escape_cell(arg.description)} |"
                )
        else:
            for arg in block.arguments:
                entry = f"* **{arg.name}**"
                if arg.type:
                    entry += f" ({arg.type})"
                if arg.description:
                    entry += f": {arg.description}"
                lines.append(entry)
        lines.append("")
    elif block.no_args and not block.is_file:
        lines.extend([f"{heading} Arguments", "", "_Function has no arguments._", ""])

    if block.params:
        lines.extend([f"{heading} Parameters", ""])
        if config.arguments_display == "table":
            lines.extend(["| Parameter | Description |", "|-----------|-------------|"])
            for param in block.params:
                lines.append(f"| `{_escape_cell(param.name)}` | {_escape_cell(param.description)} |")
        else:
            for param in block.params:
                suffix = f": {param.description}" if param.description else ""
                lines.append(f"* **{param.name}**{suffix}")
        lines.append("")


def _render_options(lines: list[str], block: Docblock, heading: str) -> None:
    if not block.options:
        return
    lines.extend([f"{heading} Options", ""])
    for option in block.options:
        entry = f"* **{option.flag}**"
        if option.arg_spec:
            entry += f" `<{option.arg_spec}>`"
        if option.description:
            entry += f": {option.description}"
        lines.append(entry)
    lines.append("")


def _render_variables(lines: list[str], block: Docblock, heading: str) -> None:
    if block.env_vars:
        lines.extend([f"{heading} Environment Variables", ""])
        for var in block.env_vars:
            entry = f"* **{var.name}**"
            if var.default is not None:
                entry += f" (default: `{var.default}`)"
            if var.description:
                entry += f": {var.description}"
            lines.append(entry)
        lines.append("")

    if block.set_vars:
        lines.extend([f"{heading} Variables Set", ""])
        for var in block.set_vars:
            qualifiers = [q for q in (var.type, "readonly" if var.is_readonly else "") if q]
            entry = f"* **{var.name}**"
            if qualifiers:
                entry += f" ({', '.join(qualifiers)})"
            if var.default is not None:
                entry += f" = `{var.default}`"
            if var.description:
                entry += f": {var.description}"
            lines.append(entry)
        lines.append("")


def _render_contract(lines: list[str], block: Docblock, heading: str) -> None:
    if block.return_desc or block.returns:
        lines.extend([f"{heading} Return Values", ""])
        if block.return_desc:
            lines.extend([block.return_desc, ""])
        for ret in block.returns:
            suffix = f": {ret.description}" if ret.description else ""
            lines.append(f"* **{ret.value}**{suffix}")
        if block.returns:
            lines.append("")

    if block.exit_codes:
        lines.extend([f"{heading} Exit Codes", ""])
        for exit_code in block.exit_codes:
            suffix = f": {exit_code.description}" if exit_code.description else ""
            lines.append(f"* **{exit_code.code}**{suffix}")
        lines.append("")

    for title, text in (
        ("Input on stdin", block.stdin_doc),
        ("Output on stdout", block.stdout_doc),
        ("Output on stderr", block.stderr_doc),
    ):
        if text:
            lines.extend([f"{heading} {title}", "", text, ""])

    if block.warnings:
        lines.extend([f"{heading} Warnings", ""])
        lines.extend(f"* {warning}" for warning in block.warnings)
        lines.append("")


def _render_relationships(lines: list[str], block: Docblock, heading: str) -> None:
    if not block.has_relationships:
        return
    lines.extend([f"{heading} Dependencies", ""])
    for title, items in (
        ("Required Dependencies", block.requires),
        ("Used By", block.used_by),
        ("External Calls", block.calls),
        ("Internal Calls", block.internal_calls),
        ("Provides", block.provides),
        ("Other Dependencies", block.dependencies),
    ):
        if items:
            lines.extend([f"{heading}# {title}", ""])
            lines.extend(f"* `{item}`" for item in items)
            lines.append("")


def _render_see_also(lines: list[str], block: Docblock, heading: str) -> None:
    if not block.see_also:
        return
    lines.extend([f"{heading} See also", ""])
    for ref in block.see_also:
        if ref.is_internal:
            lines.append(f"* [{ref.name}](#{_slugify(ref.name)})")
        else:
            lines.append(f"* [{ref.name}]({ref.url})")
    lines.append("")


def _render_shellcheck(lines: list[str], block: Docblock, config: Config, heading: str) -> None:
    directives = _unique_by_code(block.shellcheck)
    if not directives:
        return

    lines.extend([f"{heading} Shellcheck Exceptions", ""])
    if config.shellcheck_display == "table":
        lines.extend(["| Code | Reason |", "|------|--------|"])
        for d in directives:
            lines.append(f"| {_shellcheck_link(d.code)} | {_escape_cell(d.reason or '')} |")
        lines.append("")
    elif config.shellcheck_display == "list":
        for d in directives:
            suffix = f" - {d.reason}" if d.reason else ""
            lines.append(f"* {_shellcheck_link(d.code)}{suffix}")
        lines.append("")
    else:
        for d in directives:
            lines.append(f"**{_shellcheck_link(d.code)}**")
            lines.append("")
            if d.reason:
                lines.extend([d.reason, ""])


def _render_details(lines: list[str], block: Docblock, config: Config, heading: str) -> None:
    """Render everything below a block's title and prose."""
    if config.show_alerts:
        _render_alerts(lines, block)
    _render_examples(lines, block, config, heading)
    _render_arguments(lines, block, config, heading)
    _render_options(lines, block, heading)
    _render_variables(lines, block, heading)
    _render_contract(lines, block, heading)
    _render_relationships(lines, block, heading)
    _render_see_also(lines, block, heading)
    if config.show_shellcheck:
        _render_shellcheck(lines, block, config, heading)


def _render_function(lines: list[str], block: Docblock, config: Config) -> None:
    lines.extend([f"### {block.function_name}", ""])
    _render_deprecation(lines, block)
    if block.function_brief:
        lines.extend([block.function_brief, ""])
    if block.function_description:
        lines.extend([block.function_description, ""])
    if block.alias:
        lines.extend([f"**Alias:** `{block.alias}`", ""])
    if block.section:
        section = f"**Section:** {block.section.name}"
        if block.section.description:
            section += f" - {block.section.description}"
        lines.extend([section, ""])
    _render_details(lines, block, config, "####")


def _render_footer(lines: list[str], block: Docblock, config: Config) -> None:
    pre_footer = []
    if block.license and config.license_placement == "pre-footer":
        pre_footer.append(f"**License:** {block.license}")
    if block.copyright and config.copyright_placement == "pre-footer":
        pre_footer.append(f"**Copyright:** {block.copyright}")
    if pre_footer:
        lines.extend(["---", ""])
        for entry in pre_footer:
            lines.extend([entry, ""])

    footer = []
    if block.license and config.license_placement == "footer":
        footer.append(f"License: {block.license}")
    if block.copyright and config.copyright_placement == "footer":
        footer.append(f"Copyright: {block.copyright}")
    if config.footer_text:
        footer.append(config.footer_text)
    if footer:
        lines.extend(["---", ""])
        lines.extend(f"<sub>{entry}</sub>  " for entry in footer[:-1])
        lines.extend([f"<sub>{footer[-1]}</sub>", ""])


def render_markdown(
    docblocks: Sequence[Docblock],
    config: Config | None = None,
    source_name: str | None = None,
) -> str:
    """Render one script's docblocks as a markdown page.

    Functions flagged @internal are left out of the page and its index.

    Args:
        docblocks: Extracted docblocks, file docblock first
        config: Layout settings; defaults when omitted
        source_name: Page title when the script has no @file name
    """
    config = config or Config()
    file_block = docblocks[0]
    functions = [b for b in docblocks[1:] if b.function_name and not b.is_internal]

    title = file_block.file_name or source_name or "Script"
    if config.version_placement == "filename" and file_block.version:
        title += f" (v{file_block.version})"

    lines = [f"# {title}", ""]
    if file_block.brief:
        lines.extend([file_block.brief, ""])

    _render_about(lines, file_block, config)

    usage: list[str] = []
    _render_details(usage, file_block, config, "###")
    if usage:
        lines.extend(["## Usage", "", *usage])

    if config.show_toc and functions:
        _render_index(lines, functions)

    if functions:
        lines.extend(["## Functions", ""])
    for block in functions:
        _render_function(lines, block, config)

    _render_footer(lines, file_block, config)
    return "\n".join(lines).rstrip("\n") + "\n"


def generate_index(pages: list[tuple[str, ExtractionResult]]) -> str:
    """Generate the README.md that links every page of a directory run.

    Args:
        pages: (relative markdown path, extraction result) pairs.
    """
    lines = [
        "# Documentation Index",
        "",
        "| Script | Description | Functions |",
        "|--------|-------------|-----------|",
    ]
    for page, result in sorted(pages, key=lambda item: item[0]):
        file_block = result.file
        name = file_block.file_name or page
        public = [b for b in result.functions if not b.is_internal]
        lines.append(f"| [{_escape_cell(name)}]({page}) | {_escape_cell(file_block.brief or '')} | {len(public)} |")
    lines.append("")
    return "\n".join(lines)
