"""PaletteConfig construction.

A palette is an ordered tuple of slots; a slot's index is its priority rank
(later index wins when matches overlap). The config is built once at startup
and never mutated afterwards, so it can be shared by reference with every
segmentation call.

Build order:
  1. slots from the config source, or the default palette when it yields none
  2. extra patterns (e.g. from -r flags), one per slot, round-robin
  3. match groups (config file first, then caller supplied), one whole group
     per slot, continuing the same round-robin cursor
  4. compile every pattern and parse every color; the first failure aborts
"""
from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from rich.color import Color, ColorParseError

from ..utils.exceptions import InvalidColorError, InvalidPatternError
from .loader import RawConfig, load_config_source

logger = logging.getLogger(__name__)

DEFAULT_PALETTE: tuple[str, ...] = (
    "#089400",
    "#1b96f3",
    "#ef0195",
    "#fcdf87",
    "#f68741",
    "#8CCBEA",
    "#A4E57E",
    "#FFDB72",
    "#ad4c35",
    "#FF7272",
    "#FFB3FF",
    "#9999FF",
    "#4C2A85",
    "#6B7FD7",
    "#BCEDF6",
    "#DDFBD2",
    "#D664BE",
    "#DF99F0",
    "#B191FF",
    "#F4BFDB",
    "#FFE9F3",
    "#87BAAB",
)

DEFAULT_FALLBACK_COLOR = "#ff3333"
DEFAULT_CONTRAST_COLOR = "#000000"


@dataclass(frozen=True)
class PaletteSlot:
    foreground: str | None = None
    background: str | None = None
    patterns: tuple[re.Pattern, ...] = ()


@dataclass(frozen=True)
class PaletteConfig:
    slots: tuple[PaletteSlot, ...]
    fallback_color: str = DEFAULT_FALLBACK_COLOR
    contrast_color: str | None = DEFAULT_CONTRAST_COLOR

    def __post_init__(self) -> None:
        if not self.slots:
            raise ValueError("PaletteConfig requires at least one slot")

    def __len__(self) -> int:
        return len(self.slots)

    def to_document(self) -> dict[str, Any]:
        """Effective config in the same shape the loader reads."""
        palette = []
        for slot in self.slots:
            entry: dict[str, Any] = {}
            if slot.foreground:
                entry['fg'] = slot.foreground
            if slot.background:
                entry['bg'] = slot.background
            if slot.patterns:
                entry['regexp'] = [p.pattern for p in slot.patterns]
            palette.append(entry)
        return {
            'palette': palette,
            'fallback_color': self.fallback_color,
            'contrast_color': self.contrast_color,
        }


@dataclass
class RoundRobinCursor:
    """Slot index shared by every round-robin distribution pass."""
    size: int
    index: int = 0

    def advance(self) -> int:
        current = self.index
        self.index = (self.index + 1) % self.size
        return current


@dataclass
class _SlotDraft:
    fg: str | None = None
    bg: str | None = None
    regexp: list[str] = field(default_factory=list)


def default_slots() -> list[_SlotDraft]:
    return [_SlotDraft(bg=color) for color in DEFAULT_PALETTE]


def distribute_patterns(drafts: Sequence[_SlotDraft], patterns: Iterable[str], cursor: RoundRobinCursor) -> None:
    """Append one pattern per slot, wrapping back to slot 0."""
    for pattern in patterns:
        drafts[cursor.advance()].regexp.append(pattern)


def distribute_groups(drafts: Sequence[_SlotDraft], groups: Iterable[Sequence[str]], cursor: RoundRobinCursor) -> None:
    """Append each whole group to one slot, then move the cursor on."""
    for group in groups:
        drafts[cursor.advance()].regexp.extend(group)


def compile_pattern(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def check_color(color: str | None) -> str | None:
    if color is None:
        return None
    try:
        Color.parse(color)
    except ColorParseError as e:
        raise InvalidColorError(color, str(e)) from e
    return color


def _freeze(draft: _SlotDraft) -> PaletteSlot:
    return PaletteSlot(
        foreground=check_color(draft.fg),
        background=check_color(draft.bg),
        patterns=tuple(compile_pattern(p) for p in draft.regexp),
    )


def _drafts_from(raw: RawConfig | None) -> list[_SlotDraft]:
    if raw is None:
        return []
    return [_SlotDraft(fg=s.fg, bg=s.bg, regexp=list(s.regexp)) for s in raw.palette]


def build_palette(
    raw: RawConfig | None,
    extra_patterns: Iterable[str] = (),
    match_groups: Iterable[Sequence[str]] = (),
) -> PaletteConfig:
    """Build an immutable PaletteConfig from an already loaded config source."""
    drafts = _drafts_from(raw)
    if not drafts:
        logger.debug("[config] no palette entries, using %d default colors", len(DEFAULT_PALETTE))
        drafts = default_slots()

    cursor = RoundRobinCursor(len(drafts))
    distribute_patterns(drafts, extra_patterns, cursor)
    groups: list[Sequence[str]] = list(raw.match) if raw is not None else []
    groups.extend(match_groups)
    distribute_groups(drafts, groups, cursor)

    slots = tuple(_freeze(d) for d in drafts)
    fallback = DEFAULT_FALLBACK_COLOR
    contrast: str | None = DEFAULT_CONTRAST_COLOR
    if raw is not None and raw.has('fallback_color') and raw.fallback_color:
        fallback = raw.fallback_color
    if raw is not None and raw.has('contrast_color'):
        contrast = raw.contrast_color
    config = PaletteConfig(slots=slots, fallback_color=check_color(fallback) or DEFAULT_FALLBACK_COLOR,
                           contrast_color=check_color(contrast))
    logger.debug("[config] palette ready: %d slots, %d patterns",
                 len(slots), sum(len(s.patterns) for s in slots))
    return config


def build_palette_config(
    config_path: str | os.PathLike[str] | None = None,
    extra_patterns: Iterable[str] = (),
    match_groups: Iterable[Sequence[str]] = (),
) -> PaletteConfig:
    """Load the optional config source and build the palette.

    Raises SourceUnreadableError, InvalidPatternError or InvalidColorError
    (all ConfigError); a missing config path silently selects the defaults.
    """
    return build_palette(load_config_source(config_path), extra_patterns, match_groups)


__all__ = [
    "DEFAULT_PALETTE",
    "DEFAULT_FALLBACK_COLOR",
    "DEFAULT_CONTRAST_COLOR",
    "PaletteSlot",
    "PaletteConfig",
    "RoundRobinCursor",
    "distribute_patterns",
    "distribute_groups",
    "compile_pattern",
    "check_color",
    "build_palette",
    "build_palette_config",
]
