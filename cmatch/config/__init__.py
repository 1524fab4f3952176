"""Palette configuration: YAML loading and immutable PaletteConfig construction."""
from .loader import DEFAULT_CONFIG_PATH, RawConfig, RawSlot, load_config_source
from .palette import (
    DEFAULT_PALETTE,
    PaletteConfig,
    PaletteSlot,
    build_palette,
    build_palette_config,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_PALETTE",
    "PaletteConfig",
    "PaletteSlot",
    "RawConfig",
    "RawSlot",
    "build_palette",
    "build_palette_config",
    "load_config_source",
]
