"""shellscribe - markdown documentation from annotated shell scripts."""

from shellscribe.config import Config, load_config
from shellscribe.errors import ConfigError, ShellscribeError
from shellscribe.extractors import parse_file, parse_lines
from shellscribe.generators import render_markdown
from shellscribe.models import BlockKind, Docblock, ExtractionResult

__version__ = "1.0.0"

__all__ = [
    "BlockKind",
    "Config",
    "ConfigError",
    "Docblock",
    "ExtractionResult",
    "ShellscribeError",
    "load_config",
    "parse_file",
    "parse_lines",
    "render_markdown",
]
