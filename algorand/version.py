"""
Version helpers for the algorand package.

- Exposes __version__ (PEP 440).
- ALGORAND_VERSION env var overrides the in-tree default (useful for CI builds).
"""

from __future__ import annotations

import os

DEFAULT_VERSION = "0.1.0"

__version__ = os.environ.get("ALGORAND_VERSION", "").strip() or DEFAULT_VERSION


def get_version() -> str:
    return __version__


__all__ = ["__version__", "DEFAULT_VERSION", "get_version"]
