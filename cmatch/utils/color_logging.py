"""Colorized log level names for the diagnostic stream.

Applies ANSI colors to level names when stderr is a TTY. Falls back to plain
formatting when:
  * stderr is not a TTY
  * TERM is "dumb"
  * CMATCH_NO_COLOR or NO_COLOR is set (any non-empty value)

Themes are selected with CMATCH_LOG_COLOR_THEME (default, vivid, mono).
"""
from __future__ import annotations

import logging
import sys
from typing import TextIO

from .env_flags import get_str_env

RESET = "\x1b[0m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
FG_RED = "\x1b[31m"
FG_GREEN = "\x1b[32m"
FG_YELLOW = "\x1b[33m"
FG_BLUE = "\x1b[34m"
FG_MAGENTA = "\x1b[35m"
FG_CYAN = "\x1b[36m"
FG_WHITE = "\x1b[37m"
BG_RED = "\x1b[41m"


def _build_themes() -> dict:
    return {
        'default': {
            "DEBUG": DIM + FG_GREEN,
            "INFO": FG_GREEN,
            "WARNING": FG_YELLOW,
            "ERROR": FG_RED,
            "CRITICAL": BOLD + FG_RED + BG_RED,
        },
        'vivid': {
            "DEBUG": FG_CYAN,
            "INFO": FG_GREEN + BOLD,
            "WARNING": BOLD + FG_YELLOW,
            "ERROR": BOLD + FG_RED,
            "CRITICAL": BOLD + FG_WHITE + BG_RED,
        },
        'mono': {
            "DEBUG": '',
            "INFO": '',
            "WARNING": '',
            "ERROR": '',
            "CRITICAL": BOLD,
        },
    }


_THEMES = _build_themes()

_TAG_COLORS = {
    'config': FG_CYAN,
    'stream': FG_MAGENTA,
    'render': FG_BLUE,
}


class ColorFormatter(logging.Formatter):
    def __init__(self, fmt: str, datefmt: str | None = None, use_color: bool = True, theme: str = 'default'):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color
        self.theme = theme if theme in _THEMES else 'default'

    def _color_level(self, level: str) -> str:
        style = _THEMES[self.theme].get(level, '')
        if not style:
            return level
        return f"{style}{level}{RESET}"

    def _color_tags(self, message: str) -> str:
        # Colorize leading [tag] tokens separated by space
        parts = message.split(' ')
        for i, p in enumerate(parts):
            if not (p.startswith('[') and p.endswith(']') and len(p) > 2):
                break
            color = _TAG_COLORS.get(p.strip('[]').lower())
            if color:
                parts[i] = f"{color}{p}{RESET}"
        return ' '.join(parts)

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)
        original_level = record.levelname
        original_msg, original_args = record.msg, record.args
        record.levelname = self._color_level(original_level)
        record.msg = self._color_tags(record.getMessage())
        record.args = None
        try:
            return super().format(record)
        finally:
            record.levelname = original_level
            record.msg, record.args = original_msg, original_args


def ansi_supported(stream: TextIO | None = None) -> bool:
    if get_str_env('CMATCH_NO_COLOR') or get_str_env('NO_COLOR'):
        return False
    if get_str_env('TERM') == 'dumb':
        return False
    stream = stream if stream is not None else sys.stderr
    isatty = getattr(stream, 'isatty', None)
    return bool(isatty and isatty())


def log_color_theme() -> str:
    theme = get_str_env('CMATCH_LOG_COLOR_THEME', 'default').lower()
    return theme if theme in _THEMES else 'default'


__all__ = ["ColorFormatter", "ansi_supported", "log_color_theme"]
