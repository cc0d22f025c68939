"""Command-line documentation generator.

Generates:
    <doc_path>/<dir>/<script>.md  - One page per documented script
    <doc_path>/README.md          - Index of all pages (generate_index = true)
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .config import Config, load_config
from .errors import ConfigError
from .extractors import parse_file
from .generators import generate_index, render_markdown
from .models import ExtractionResult
from .validators import compute_coverage, validate_docs

log = logging.getLogger(__name__)

SCRIPT_SUFFIXES = (".sh", ".bash", ".zsh")
ELF_MAGIC = b"\x7fELF"

# config.format -> (renderer, page suffix)
OUTPUT_FORMATS = {"markdown": (render_markdown, ".md")}

OK = "ok"
SKIPPED = "skipped"
FAILED = "failed"


def is_elf_binary(path: Path) -> bool:
    try:
        with open(path, "rb") as handle:
            return handle.read(4) == ELF_MAGIC
    except OSError:
        return False


def collect_scripts(root: Path, follow_symlinks: bool = True) -> list[Path]:
    """Find shell scripts below `root`, in a stable order."""
    scripts = []
    for dirpath, dirnames, filenames in os.walk(root, followlinks=follow_symlinks):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if not filename.endswith(SCRIPT_SUFFIXES):
                continue
            if path.is_symlink() and not follow_symlinks:
                continue
            scripts.append(path)
    return scripts


def output_path(script: Path, input_root: Path | None, doc_path: Path, suffix: str = ".md") -> Path:
    """Mirror the script's place under `input_root` inside `doc_path`."""
    if input_root is None:
        return doc_path / f"{script.stem}{suffix}"
    relative = script.relative_to(input_root)
    return doc_path / relative.parent / f"{script.stem}{suffix}"


def process_script(script: Path, target: Path, config: Config) -> tuple[str, str, ExtractionResult | None]:
    """Extract, render and write one page.

    Returns:
        (status, reason, extraction result) where status is OK, SKIPPED or FAILED
    """
    if is_elf_binary(script):
        return SKIPPED, "binary file", None

    result = parse_file(script, config)
    if result is None:
        return FAILED, "cannot read file", None
    if result.is_skipped:
        return SKIPPED, "marked with @skip", result

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        renderer, _ = OUTPUT_FORMATS[config.format]
        target.write_text(renderer(result, config, source_name=script.name), encoding="utf-8")
    except OSError as e:
        return FAILED, f"cannot write {target}: {e.strerror or e}", result
    return OK, "", result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shellscribe",
        description="Generate markdown documentation from annotated shell scripts",
    )
    parser.add_argument("input", type=Path, help="Shell script or directory of scripts")
    parser.add_argument("-c", "--config-file", type=Path, help="Configuration file (default: ./.scribeconf)")
    parser.add_argument("-o", "--output", type=Path, help="Output directory (overrides doc_path)")
    parser.add_argument("--stdout", action="store_true", help="Print the page of a single script instead of writing it")
    parser.add_argument("--strict", action="store_true", help="Treat undocumented functions as errors")
    parser.add_argument("--debug", action="store_true", help="Trace every line the extractor reads")
    parser.add_argument("--verbose", action="store_true", help="Log progress details")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Generate documentation for a script or a directory tree."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config_file)
    except ConfigError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    overrides = {}
    if args.output is not None:
        overrides["doc_path"] = str(args.output)
    if args.debug:
        overrides["debug"] = True
    if args.verbose:
        overrides["verbose"] = True
    if overrides:
        config = config.model_copy(update=overrides)

    logging.basicConfig(
        level=config.logging_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log.debug("Configuration: %s", config)

    source: Path = args.input
    if not source.exists():
        print(f"✗ {source}: no such file or directory", file=sys.stderr)
        return 1

    if args.stdout:
        if source.is_dir():
            print("✗ --stdout needs a single script, not a directory", file=sys.stderr)
            return 1
        result = parse_file(source, config)
        if result is None:
            print(f"✗ {source}: cannot read file", file=sys.stderr)
            return 1
        renderer, _ = OUTPUT_FORMATS[config.format]
        sys.stdout.write(renderer(result, config, source_name=source.name))
        return 0

    doc_path = Path(config.doc_path)
    _, suffix = OUTPUT_FORMATS[config.format]
    if source.is_dir():
        input_root: Path | None = source
        scripts = collect_scripts(source, follow_symlinks=config.traverse_symlinks)
        if not scripts:
            print(f"⚠ No shell scripts found in {source}", file=sys.stderr)
    else:
        input_root = None
        scripts = [source]

    print("Generating documentation...", file=sys.stderr)

    counts = {OK: 0, SKIPPED: 0, FAILED: 0}
    results: list[ExtractionResult] = []
    pages: list[tuple[str, ExtractionResult]] = []

    for script in scripts:
        target = output_path(script, input_root, doc_path, suffix)
        status, reason, result = process_script(script, target, config)
        counts[status] += 1

        if status == OK:
            results.append(result)
            pages.append((target.relative_to(doc_path).as_posix(), result))
            print(f"  ✓ {script} -> {target}", file=sys.stderr)
        elif status == SKIPPED:
            print(f"  - {script} (skipped: {reason})", file=sys.stderr)
        else:
            print(f"  ✗ {script} ({reason})", file=sys.stderr)

    if config.generate_index and pages:
        index = doc_path / "README.md"
        try:
            index.write_text(generate_index(pages), encoding="utf-8")
            print(f"  ✓ {index}", file=sys.stderr)
        except OSError as e:
            print(f"  ✗ {index} ({e.strerror or e})", file=sys.stderr)
            counts[FAILED] += 1

    total = sum(counts.values())
    print(
        f"\nSummary: {counts[OK]} OK, {counts[SKIPPED]} SKIPPED, "
        f"{counts[FAILED]} FAILED (total: {total})",
        file=sys.stderr,
    )

    # Validation
    validation = validate_docs(results, strict=args.strict)
    for warning in validation.warnings:
        print(f"  ⚠ {warning}", file=sys.stderr)
    if validation.errors:
        print("\nValidation errors:", file=sys.stderr)
        for err in validation.errors:
            print(f"  ✗ {err}", file=sys.stderr)

    if results:
        print(f"\nCoverage: {compute_coverage(results):.0%}", file=sys.stderr)

    if counts[FAILED] or validation.errors:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
