"""Config source loading.

Reads the optional YAML palette document into plain string-valued records.
No regex compilation or color parsing happens here; see palette.py.

Document shape::

    palette:
      - fg: "#ffffff"
        bg: "#aa0000"
        regexp: [ERROR, FATAL]
    match:
      - regexp: ['\\d+\\.\\d+\\.\\d+\\.\\d+']
    fallback_color: "#ff3333"
    contrast_color: "#000000"

A path that does not exist is not an error: the caller falls back to the
default palette.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

import yaml

from ..utils.exceptions import SourceUnreadableError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "./config.yml"

_UNSET: Any = object()


@dataclass
class RawSlot:
    fg: str | None = None
    bg: str | None = None
    regexp: list[str] = field(default_factory=list)


@dataclass
class RawConfig:
    palette: list[RawSlot] = field(default_factory=list)
    match: list[list[str]] = field(default_factory=list)
    # _UNSET means "key absent"; None is a legal explicit value for contrast_color
    fallback_color: Any = _UNSET
    contrast_color: Any = _UNSET

    def has(self, key: str) -> bool:
        return getattr(self, key) is not _UNSET


def _color_value(path: str, where: str, value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SourceUnreadableError(path, f"{where} must be a color string, got {type(value).__name__}")
    value = value.strip()
    return value or None


def _regexp_list(path: str, where: str, value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SourceUnreadableError(path, f"{where}.regexp must be a string or a list of strings")
    return list(value)


def _entries(path: str, doc: dict, key: str) -> list[dict]:
    items = doc.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise SourceUnreadableError(path, f"'{key}' must be a list")
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise SourceUnreadableError(path, f"{key}[{i}] must be a mapping")
    return items


def parse_config_document(doc: Any, path: str = "<config>") -> RawConfig:
    """Convert a decoded YAML document into a RawConfig."""
    if doc is None:
        return RawConfig()
    if not isinstance(doc, dict):
        raise SourceUnreadableError(path, "top level must be a mapping")
    raw = RawConfig()
    for i, entry in enumerate(_entries(path, doc, 'palette')):
        where = f"palette[{i}]"
        raw.palette.append(RawSlot(
            fg=_color_value(path, f"{where}.fg", entry.get('fg')),
            bg=_color_value(path, f"{where}.bg", entry.get('bg')),
            regexp=_regexp_list(path, where, entry.get('regexp')),
        ))
    for i, entry in enumerate(_entries(path, doc, 'match')):
        raw.match.append(_regexp_list(path, f"match[{i}]", entry.get('regexp')))
    for key in ('fallback_color', 'contrast_color'):
        if key in doc:
            setattr(raw, key, _color_value(path, key, doc[key]))
    return raw


def load_config_source(path: str | os.PathLike[str] | None) -> RawConfig | None:
    """Load the config file at path.

    Returns None when no path is given or nothing exists there. Raises
    SourceUnreadableError when the path exists but is a directory, cannot be
    opened, or does not hold a palette document.
    """
    if path is None or str(path) == "":
        return None
    path = os.fspath(path)
    if not os.path.exists(path):
        logger.debug("[config] no config source at %s, using defaults", path)
        return None
    if os.path.isdir(path):
        raise SourceUnreadableError(path, "is a directory")
    try:
        with open(path, encoding='utf-8') as fh:
            doc = yaml.safe_load(fh)
    except OSError as e:
        raise SourceUnreadableError(path, e.strerror or str(e)) from e
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise SourceUnreadableError(path, f"not valid YAML ({e})") from e
    raw = parse_config_document(doc, path)
    logger.info("[config] loaded %d palette entries and %d match groups from %s",
                len(raw.palette), len(raw.match), path)
    return raw


__all__ = ["RawSlot", "RawConfig", "DEFAULT_CONFIG_PATH", "parse_config_document", "load_config_source"]
