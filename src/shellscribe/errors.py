"""Exceptions raised by shellscribe."""

from __future__ import annotations


class ShellscribeError(Exception):
    """Base exception for shellscribe operations."""

    pass


class ConfigError(ShellscribeError):
    """Raised when a configuration file cannot be read or holds invalid values."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class CapacityExceeded(ShellscribeError):
    """Raised inside the extractor when a file declares too many docblocks.

    Never escapes the engine: the extractor stops scanning and marks the
    result as truncated.
    """

    def __init__(self, limit: int):
        super().__init__(f"docblock limit of {limit} reached")
        self.limit = limit
