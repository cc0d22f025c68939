"""
Tests for docblock extraction.

These cover the two passes over a script:

1. The header pass that fills docblock 0 with file metadata
2. The body pass that builds one docblock per function
3. Tag blocks that never meet a function and fall back to the file
"""

import logging

from shellscribe import Config, parse_file, parse_lines
from shellscribe.models import BlockKind


class TestFileDocblock:
    """Docblock 0 always exists and describes the file."""

    def test_empty_input(self):
        result = parse_lines([])
        assert len(result) == 1
        assert result[0].kind is BlockKind.FILE

    def test_code_only(self, extract):
        result = extract("echo hi")
        assert len(result) == 1

    def test_header_metadata(self, extract, deploy_script):
        result = extract(deploy_script)
        file_block = result[0]

        assert file_block.interpreter == "/usr/bin/env bash"
        assert file_block.file_name == "deploy.sh"
        assert file_block.brief == "Deployment helpers"
        assert file_block.description == "Functions used by the\nrelease pipeline."
        assert file_block.author == "Jane Doe"
        assert file_block.author_contact == "jane@example.com"
        assert file_block.version == "1.2.0"
        assert file_block.license == "MIT"

    def test_skip(self, extract):
        result = extract("""
            #!/bin/bash
            # @skip
            echo hi
        """)
        assert result.is_skipped

    def test_file_only_tags_in_body_go_to_file(self, extract):
        result = extract("""
            echo start
            # @brief Does foo.
            # @license MIT
            foo() {
            }
        """)
        assert result[0].license == "MIT"
        assert result[1].license is None
        assert result[1].function_brief == "Does foo."

    def test_shellcheck_outside_functions_ignored(self, extract):
        result = extract("""
            # shellcheck disable=SC1090
            source ./lib.sh
        """)
        assert result[0].shellcheck == []


class TestFunctionDocblocks:
    """Tags before a declaration document that function."""

    def test_brief_and_description(self, extract):
        result = extract("""
            # @brief Says hello
            # @description Prints a greeting.
            hello() {
              echo hi
            }
        """)
        assert len(result) == 2
        assert result[1].function_name == "hello"
        assert result[1].function_brief == "Says hello"
        assert result[1].function_description == "Prints a greeting."
        assert result[0].brief is None

    def test_one_docblock_per_declaration(self, extract, deploy_script):
        result = extract(deploy_script)
        assert [b.function_name for b in result.functions] == ["build", "deploy"]

        build = result[1]
        assert build.function_description == "Builds the project."
        assert [(a.name, a.type, a.description) for a in build.arguments] == [("$1", "string", "Target name")]
        assert [c.code for c in build.exit_codes] == ["0", "1"]
        assert result[2].function_brief == "Deploys."

    def test_undocumented_function(self, extract):
        result = extract("""
            helper() {
              :
            }
        """)
        assert len(result) == 2
        assert result[1].function_name == "helper"
        assert result[1].function_brief is None

    def test_n_functions(self, extract):
        script = "\n".join(f"# @brief Function {i}\nf{i}() {{ :; }}\n" for i in range(5))
        result = extract(script)
        assert len(result) == 6
        assert all(b.function_name for b in result.functions)

    def test_description_continuation(self, extract):
        result = extract("""
            # @description First line.
            # Second line.
            # Third line.
            foo() {
        """)
        assert result[1].function_description == "First line.\nSecond line.\nThird line."

    def test_repeated_description_appends(self, extract):
        result = extract("""
            # @description A
            # @description B
            foo() {
        """)
        assert result[1].function_description == "A\nB"

    def test_multiple_examples(self, extract):
        result = extract("""
            # @brief Adds.
            # @example
            #   add 1 2
            # @example
            #   add 3 4
            add() {
        """)
        block = result[1]
        assert block.example == "  add 1 2\n\n  add 3 4"
        assert block.has_multiple_examples

    def test_option(self, extract):
        result = extract("""
            # @option -v | verbose output
            run() {
        """)
        [option] = result[1].options
        assert option.short_opt == "-v"
        assert option.description == "verbose output"

    def test_arg_without_name_appends_nothing(self, extract):
        result = extract("""
            # @arg
            foo() {
        """)
        assert result[1].arguments == []

    def test_deprecated(self, extract):
        result = extract("""
            # @deprecated from 2.1
            # @replacement new_fn
            old_fn() {
        """)
        deprecation = result[1].deprecation
        assert deprecation.is_deprecated
        assert deprecation.version == "2.1"
        assert deprecation.replacement == "new_fn"

    def test_colon_form(self, extract):
        result = extract("""
            # @brief: Colon form.
            foo() {
        """)
        assert result[1].function_brief == "Colon form."

    def test_shellcheck_directives(self, extract):
        result = extract("""
            # @brief Uses globals.
            # shellcheck disable=SC2034 # assigned for callers
            setup() {
              # shellcheck disable=SC2155
              local x="$(date)"
            }
        """)
        directives = result[1].shellcheck
        assert [d.code for d in directives] == ["SC2034", "SC2155"]
        assert directives[0].reason == "assigned for callers"


class TestFunctionTag:
    """@function names a docblock explicitly."""

    def test_without_declaration(self, extract):
        result = extract("""
            # @function greet
            # @brief Greets.

            echo "loose code"
        """)
        assert len(result) == 2
        assert result[1].function_name == "greet"
        assert result[1].function_brief == "Greets."

    def test_names_pending_block(self, extract):
        result = extract("""
            # @brief Greets.
            # @function greet
            greet() {
        """)
        assert len(result) == 2
        assert result[1].function_brief == "Greets."
        assert result.mismatches == []

    def test_name_mismatch_keeps_tag_name(self, extract, caplog):
        caplog.set_level(logging.WARNING, logger="shellscribe.extractors")
        result = extract("""
            # @function documented_name
            # @brief Something.
            actual_name() {
        """)
        assert len(result) == 2
        assert result[1].function_name == "documented_name"

        [mismatch] = result.mismatches
        assert mismatch.declared == "actual_name"
        assert mismatch.documented == "documented_name"
        assert mismatch.line_number == 3
        assert "actual_name" in caplog.text


class TestUnboundTags:
    """Tags that never reach a function describe the file."""

    def test_replayed_onto_file(self, extract):
        result = extract("""
            #!/bin/bash

            # @brief Orphaned brief.
            # @description Orphaned description.

            echo "no function here"
        """)
        assert len(result) == 1
        assert result[0].brief == "Orphaned brief."
        assert result[0].description == "Orphaned description."

    def test_released_at_end_of_file(self, extract):
        result = extract("# @brief Trailing.")
        assert len(result) == 1
        assert result[0].brief == "Trailing."

    def test_header_attached_to_function(self, extract):
        result = extract("""
            #!/bin/bash
            # @file tool.sh
            # @description Does the thing.
            main() {
        """)
        assert result[0].file_name == "tool.sh"
        assert result[0].description is None
        assert result[1].function_description == "Does the thing."

    def test_section_falls_back_to_file_description(self, extract):
        result = extract("""
            #!/bin/bash
            # @file lib.sh
            # @description Library of helpers.

            # @section Strings
            # @brief Uppercases.
            upper() {
        """)
        assert result[1].section.name == "Strings"
        assert result[1].section.description == "Library of helpers."


class TestLimits:
    def test_docblock_limit_truncates(self, extract, caplog):
        script = "\n".join(f"f{i}() {{ :; }}" for i in range(5))
        result = extract(script, config=Config(max_docblocks=3))
        assert len(result) == 3
        assert result.truncated
        assert "docblock limit" in caplog.text

    def test_file_tags_at_limit_still_reach_file(self, extract, caplog):
        """Tags with no function after them do not count against the limit."""
        result = extract("""
            # @brief A
            foo() {
            }
            # @note trailing file note
        """, config=Config(max_docblocks=2))
        assert len(result) == 2
        assert not result.truncated
        assert [a.content for a in result[0].alerts] == ["trailing file note"]
        assert "docblock limit" not in caplog.text

    def test_function_over_limit_is_dropped(self, extract):
        result = extract("""
            # @brief A
            foo() {
            }
            # @brief B
            bar() {
            }
        """, config=Config(max_docblocks=2))
        assert [b.function_name for b in result.functions] == ["foo"]
        assert result.truncated
        assert result[0].brief is None

    def test_idempotent(self, extract, deploy_script):
        assert extract(deploy_script).docblocks == extract(deploy_script).docblocks

    def test_debug_trace(self, extract, caplog):
        caplog.set_level(logging.DEBUG, logger="shellscribe.extractors")
        extract("foo() {", config=Config(debug=True))
        assert "function 'foo() {'" in caplog.text


class TestParseFile:
    def test_reads_file(self, write_script, deploy_script):
        path = write_script("deploy.sh", deploy_script)
        result = parse_file(path)
        assert result.path == str(path)
        assert len(result) == 3

    def test_default_file_name(self, write_script):
        path = write_script("tool.sh", "# @brief Tool.\nrun() {\n}\n")
        assert parse_file(path)[0].file_name == "tool.sh"

    def test_crlf(self, tmp_path):
        path = tmp_path / "win.sh"
        path.write_bytes(b"# @brief Windows.\r\nrun() {\r\n}\r\n")
        result = parse_file(path)
        assert result[1].function_brief == "Windows."

    def test_missing_file(self, tmp_path, caplog):
        assert parse_file(tmp_path / "missing.sh") is None
        assert "Cannot read" in caplog.text
