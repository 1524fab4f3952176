"""Terminal rendering of segmented lines.

Slot colors are turned into escape sequences with rich's Style. Policy:
  * neither color set   -> foreground = config.fallback_color
  * foreground only     -> foreground
  * background only     -> background, foreground = config.contrast_color
                           (plain background when contrast is disabled)
  * both                -> both

Unstyled spans are written through unchanged.

Color mode resolution (first match wins):
  --color flag (auto/always/never)
  CMATCH_COLOR env: 1/true/on/force/always, 0/false/off/never, auto
  auto: color only when the output stream is a terminal and NO_COLOR is unset
"""
from __future__ import annotations

import logging
from typing import TextIO

from rich.color import ColorSystem
from rich.console import COLOR_SYSTEMS, Console
from rich.style import Style

from ..config.palette import PaletteConfig, PaletteSlot
from ..utils.env_flags import get_str_env, is_falsy, is_truthy
from .segmenter import segment, span_text

logger = logging.getLogger(__name__)

COLOR_MODES = ('auto', 'always', 'never')


def color_mode_from_env() -> str:
    value = get_str_env('CMATCH_COLOR', 'auto').lower()
    if is_truthy(value) or value in ('force', 'always'):
        return 'always'
    if is_falsy(value) or value == 'never':
        return 'never'
    return 'auto'


def resolve_color_system(mode: str | None, stream: TextIO) -> ColorSystem | None:
    """Pick the escape-code flavour for stream, or None for plain output."""
    mode = mode or color_mode_from_env()
    if mode == 'never':
        return None
    if mode == 'auto' and get_str_env('NO_COLOR'):
        return None
    console = Console(file=stream, force_terminal=True if mode == 'always' else None)
    name = console.color_system
    if name is None and mode == 'always':
        name = 'truecolor'
    system = COLOR_SYSTEMS.get(name) if name else None
    logger.debug("[render] color mode=%s system=%s", mode, name)
    return system


def slot_style(slot: PaletteSlot, config: PaletteConfig) -> Style:
    fg, bg = slot.foreground, slot.background
    if not fg and not bg:
        return Style(color=config.fallback_color)
    if fg and not bg:
        return Style(color=fg)
    if bg and not fg:
        return Style(color=config.contrast_color, bgcolor=bg)
    return Style(color=fg, bgcolor=bg)


class LineRenderer:
    """Segments lines against a palette and renders them for a terminal."""

    def __init__(self, config: PaletteConfig, color_system: ColorSystem | None = ColorSystem.TRUECOLOR):
        self.config = config
        self.color_system = color_system
        self._styles = tuple(slot_style(slot, config) for slot in config.slots)

    def render_span(self, text: str, slot: int | None) -> str:
        if slot is None or self.color_system is None:
            return text
        return self._styles[slot].render(text, color_system=self.color_system)

    def render_line(self, line: str) -> str:
        if self.color_system is None or not line:
            return line
        return ''.join(self.render_span(text, slot) for text, slot in span_text(line, segment(line, self.config)))


__all__ = ["COLOR_MODES", "LineRenderer", "color_mode_from_env", "resolve_color_system", "slot_style"]
