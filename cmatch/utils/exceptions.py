"""cmatch exception hierarchy.

A small exception tree for the two places the tool can fail: building the
palette at startup and reading the input stream. Everything is fatal; the
CLI maps any CmatchError to a non-zero exit status.
"""
from __future__ import annotations


class CmatchError(Exception):
    """Base class for all cmatch exceptions."""


class ConfigError(CmatchError):
    """Palette construction failed; no partial config is ever used."""


class SourceUnreadableError(ConfigError):
    """Config path exists but cannot be opened or parsed as a palette document."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"config source '{path}' is unreadable: {reason}")
        self.path = path
        self.reason = reason


class InvalidPatternError(ConfigError):
    """A regular expression string failed to compile."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid regexp '{pattern}': {reason}")
        self.pattern = pattern
        self.reason = reason


class InvalidColorError(ConfigError):
    """A palette color value cannot be parsed."""

    def __init__(self, color: str, reason: str):
        super().__init__(f"invalid color '{color}': {reason}")
        self.color = color
        self.reason = reason


class InputError(CmatchError):
    """Reading from the input stream failed for a reason other than end of input."""


__all__ = [
    "CmatchError",
    "ConfigError",
    "SourceUnreadableError",
    "InvalidPatternError",
    "InvalidColorError",
    "InputError",
]
