"""Unified logging setup for cmatch.

stdout carries the highlighted text, so every diagnostic goes to stderr.
"""
from __future__ import annotations

import logging
import sys
from typing import TextIO

from .color_logging import ColorFormatter, ansi_supported, log_color_theme
from .env_flags import get_str_env

DEFAULT_FORMAT = '%(levelname)s %(name)s: %(message)s'
VERBOSE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LEVEL = 'WARNING'

LEVEL_CHOICES = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def resolve_level(level: str | None = None) -> int:
    """Map an explicit level or CMATCH_LOG_LEVEL (name or number) to a logging level."""
    name = level or get_str_env('CMATCH_LOG_LEVEL', DEFAULT_LEVEL)
    if name.isdigit():
        return int(name)
    return getattr(logging, name.upper(), logging.WARNING)


def setup_logging(level: str | None = None, stream: TextIO | None = None, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """Configure the root logger with a single stderr handler.

    Existing handlers are removed so repeated calls (tests, embedding) do not
    duplicate output.
    """
    log_level = resolve_level(level)
    stream = stream if stream is not None else sys.stderr
    root = logging.getLogger()
    root.setLevel(log_level)
    for h in root.handlers[:]:
        root.removeHandler(h)
        h.flush()

    handler = logging.StreamHandler(stream)
    handler.setLevel(log_level)
    if log_level <= logging.DEBUG and fmt == DEFAULT_FORMAT:
        fmt = VERBOSE_FORMAT
    handler.setFormatter(ColorFormatter(fmt, use_color=ansi_supported(stream), theme=log_color_theme()))
    root.addHandler(handler)
    return root


__all__ = ["setup_logging", "resolve_level", "LEVEL_CHOICES", "DEFAULT_FORMAT"]
