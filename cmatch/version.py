"""Central version metadata for cmatch.

Resolution order for get_version():
1. Env override CMATCH_VERSION (e.g., injected by CI)
2. __version__ constant below
"""
from __future__ import annotations

import os

__version__ = "0.3.0"

def get_version() -> str:
    return os.environ.get("CMATCH_VERSION", __version__)

__all__ = ["__version__", "get_version"]
