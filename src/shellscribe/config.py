"""Configuration for extraction and rendering.

Settings come from a `.scribeconf` file of `key = value` lines:

    # Where generated pages go
    doc_path = ./docs
    show_toc = true
    example_display = tabs   # or sequential
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError

log = logging.getLogger(__name__)

CONFIG_FILENAME = ".scribeconf"
DEBUG_ENV = "SHELLSCRIBE_DEBUG"
DEFAULT_FOOTER = (
    "This documentation was auto generated with "
    "[shellscribe](https://github.com/tomcdj71/shellscribe)"
)

Placement = Literal["about", "pre-footer", "footer", "none"]


class Config(BaseModel):
    """All recognized `.scribeconf` keys with their defaults."""

    # Engine
    debug: bool = False
    verbose: bool = False
    max_docblocks: int = Field(default=1000, ge=1)
    log_level: Literal["minimal", "normal", "detailed", "debug", "verbose"] = "normal"

    # Output
    doc_path: str = "./docs"
    format: Literal["markdown"] = "markdown"
    generate_index: bool = False
    footer_text: str = DEFAULT_FOOTER
    traverse_symlinks: bool = True

    # Page layout
    version_placement: Literal["about", "filename", "none"] = "about"
    license_placement: Placement = "pre-footer"
    copyright_placement: Placement = "pre-footer"
    linkify_usernames: bool = False
    show_toc: bool = True
    show_alerts: bool = True
    show_shellcheck: bool = True
    example_display: Literal["sequential", "tabs"] = "sequential"
    arguments_display: Literal["sequential", "table"] = "sequential"
    shellcheck_display: Literal["sequential", "table", "list"] = "sequential"
    highlight_code: bool = True
    highlight_language: str = "bash"

    @property
    def logging_level(self) -> int:
        if self.debug or self.log_level == "debug":
            return logging.DEBUG
        if self.verbose or self.log_level in ("detailed", "verbose"):
            return logging.INFO
        if self.log_level == "minimal":
            return logging.ERROR
        return logging.WARNING


# Keys older configuration files carry that no longer do anything
_OBSOLETE_KEYS = frozenset({"memory_tracking", "memory_stats", "no_output"})


def _strip_inline_comment(value: str) -> str:
    # '#' starts a comment only when preceded by whitespace, so "#fff" survives
    for i, char in enumerate(value):
        if char == "#" and (i == 0 or value[i - 1].isspace()):
            return value[:i].strip()
    return value.strip()


def parse_scribeconf(text: str, source: str = CONFIG_FILENAME) -> dict[str, str]:
    """Parse `key = value` lines into raw string settings.

    Blank lines and `#` comments are skipped; malformed lines are logged and
    ignored, unknown keys are logged and dropped.
    """
    settings: dict[str, str] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            log.warning("%s:%d: expected key = value, got %r", source, lineno, raw)
            continue

        value = _strip_inline_comment(value)
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]

        if key in _OBSOLETE_KEYS:
            log.debug("%s:%d: ignoring obsolete key %s", source, lineno, key)
            continue
        if key not in Config.model_fields:
            log.warning("%s:%d: unknown configuration key %s", source, lineno, key)
            continue
        settings[key] = value
    return settings


def default_config_paths() -> list[Path]:
    """Locations searched when no configuration file is given."""
    xdg = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return [Path.cwd() / CONFIG_FILENAME, Path(xdg) / "shellscribe" / "scribeconf"]


def build_config(settings: dict[str, str], source: str = CONFIG_FILENAME) -> Config:
    """Validate raw settings, applying the debug environment override."""
    if os.environ.get(DEBUG_ENV) == "1":
        settings = {**settings, "debug": "true"}
    try:
        return Config(**settings)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration in {source}: {problems}", path=source) from e


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from `path`, or from the first default location found.

    Args:
        path: Explicit configuration file. It must exist.

    Returns:
        Validated Config; defaults when no file is given or found.

    Raises:
        ConfigError: The explicit file cannot be read, or a value is invalid.
    """
    if path is not None:
        config_path = Path(path)
        try:
            text = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {config_path}: {e}", path=str(config_path)) from e
        log.debug("Loaded configuration from %s", config_path)
        return build_config(parse_scribeconf(text, str(config_path)), str(config_path))

    for candidate in default_config_paths():
        if candidate.is_file():
            try:
                text = candidate.read_text(encoding="utf-8")
            except OSError as e:
                log.warning("Skipping unreadable configuration %s: %s", candidate, e)
                continue
            log.debug("Loaded configuration from %s", candidate)
            return build_config(parse_scribeconf(text, str(candidate)), str(candidate))

    return build_config({}, "defaults")
