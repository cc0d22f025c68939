"""Documentation validation and quality checks."""

from __future__ import annotations

from .models import ExtractionResult, ValidationResult


def validate_docs(results: list[ExtractionResult], strict: bool = False) -> ValidationResult:
    """Validate extracted documentation.

    Checks:
    1. Public functions should have @brief (warning in normal mode, error in strict)
    2. @function names should match their declarations (warning)
    3. Deprecated functions should name a @replacement (warning)
    4. Files cut short by the docblock limit (error in strict)

    Args:
        results: Extraction results, one per script
        strict: If True, missing docs are errors instead of warnings

    Returns:
        ValidationResult with errors and warnings
    """
    result = ValidationResult()

    for extraction in results:
        source = extraction.path or extraction.file.file_name or "<script>"

        if extraction.truncated:
            msg = f"{source}: too many docblocks, the rest of the file was ignored"
            if strict:
                result.errors.append(msg)
            else:
                result.warnings.append(msg)

        for mismatch in extraction.mismatches:
            result.warnings.append(
                f"{source}:{mismatch.line_number}: {mismatch.declared}() is documented as "
                f"@function {mismatch.documented}"
            )

        for block in extraction.functions:
            if block.is_internal:
                continue

            # Check for missing brief
            if not block.function_brief:
                msg = f"{source}: {block.function_name}: missing @brief (undocumented)"
                if strict:
                    result.errors.append(msg)
                else:
                    result.warnings.append(msg)
                continue

            if block.deprecation.is_deprecated and not block.deprecation.replacement:
                result.warnings.append(
                    f"{source}: {block.function_name}: deprecated without @replacement"
                )

    return result


def compute_coverage(results: list[ExtractionResult]) -> float:
    """Compute the share of public functions that have a @brief.

    Returns:
        Coverage between 0.0 and 1.0; 1.0 when there are no functions.
    """
    total = 0
    documented = 0
    for extraction in results:
        for block in extraction.functions:
            if block.is_internal:
                continue
            total += 1
            if block.function_brief:
                documented += 1
    return documented / total if total else 1.0
