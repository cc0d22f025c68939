"""Tests for documentation lint and coverage."""

from shellscribe import Config
from shellscribe.validators import compute_coverage, validate_docs


def test_missing_brief_is_warning(extract, deploy_script):
    result = validate_docs([extract(deploy_script)])
    assert result.errors == []
    assert any("build: missing @brief" in w for w in result.warnings)


def test_missing_brief_is_error_when_strict(extract, deploy_script):
    result = validate_docs([extract(deploy_script)], strict=True)
    assert any("build: missing @brief" in e for e in result.errors)


def test_name_mismatch_reported(extract):
    result = validate_docs([extract("""
        # @function documented
        # @brief Something.
        declared() {
    """)])
    assert any("declared() is documented as @function documented" in w for w in result.warnings)


def test_deprecated_without_replacement(extract):
    result = validate_docs([extract("""
        # @brief Old.
        # @deprecated from 1.0
        old() {
    """)])
    assert any("old: deprecated without @replacement" in w for w in result.warnings)


def test_truncated_file(extract):
    script = "\n".join(f"f{i}() {{ :; }}" for i in range(3))
    extraction = extract(script, config=Config(max_docblocks=2))
    assert any("too many docblocks" in w for w in validate_docs([extraction]).warnings)
    assert any("too many docblocks" in e for e in validate_docs([extraction], strict=True).errors)


def test_internal_functions_ignored(extract):
    result = validate_docs([extract("""
        # @internal
        hidden() {
    """)])
    assert result.warnings == []


class TestCoverage:
    def test_partial(self, extract, deploy_script):
        assert compute_coverage([extract(deploy_script)]) == 0.5

    def test_no_functions(self, extract):
        assert compute_coverage([extract("echo hi")]) == 1.0

    def test_internal_not_counted(self, extract):
        result = extract("""
            # @brief Public.
            shown() {
            }

            # @internal
            hidden() {
            }
        """)
        assert compute_coverage([result]) == 1.0
