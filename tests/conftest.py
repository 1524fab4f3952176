"""Shared fixtures for cmatch tests."""
from __future__ import annotations

import logging
import textwrap

import pytest

from cmatch.config.loader import RawConfig, RawSlot
from cmatch.config.palette import build_palette


@pytest.fixture(autouse=True)
def _reset_root_logging():
    yield
    root = logging.getLogger()
    for h in root.handlers[:]:
        root.removeHandler(h)
    root.setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def _neutral_color_env(monkeypatch):
    for name in ("CMATCH_COLOR", "CMATCH_NO_COLOR", "NO_COLOR", "FORCE_COLOR", "TTY_COMPATIBLE",
                 "CMATCH_LOG_LEVEL", "CMATCH_LOG_COLOR_THEME"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def write_config(tmp_path):
    """Write dedented YAML to a temp file and return its path."""
    def _write(text: str, name: str = "config.yml") -> str:
        path = tmp_path / name
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture()
def palette_of():
    """Build a PaletteConfig with one slot per pattern list."""
    def _build(*pattern_lists, fg=None, bg=None):
        raw = RawConfig(palette=[RawSlot(fg=fg, bg=bg, regexp=list(p)) for p in pattern_lists])
        return build_palette(raw)
    return _build
