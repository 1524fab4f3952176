"""Environment flag helpers.

Interprets environment variables as tri-state switches using the canonical
truthy set {"1","true","yes","on"} and falsy set {"0","false","no","off"}
(case-insensitive).

Usage examples:
    from cmatch.utils.env_flags import get_str_env, is_truthy
    if is_truthy(get_str_env('CMATCH_COLOR')):
        ...
"""
from __future__ import annotations

import os

TRUTHY_SET: set[str] = {"1", "true", "yes", "on"}
FALSY_SET: set[str] = {"0", "false", "no", "off"}

def is_truthy(value: str | None) -> bool:
    if not value:
        return False
    return value.strip().lower() in TRUTHY_SET

def is_falsy(value: str | None) -> bool:
    if not value:
        return False
    return value.strip().lower() in FALSY_SET

def get_str_env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    if v is None:
        return default
    v = v.strip()
    return v if v else default

__all__ = [
    'TRUTHY_SET',
    'FALSY_SET',
    'is_truthy',
    'is_falsy',
    'get_str_env',
]
