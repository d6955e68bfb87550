"""Identifier, filename and date helpers used by exports and asset imports."""

from __future__ import annotations

import re
import time
from datetime import date
from typing import Final

_FNV_OFFSET_BASIS: Final[int] = 0xCBF29CE484222325
_FNV_PRIME: Final[int] = 0x100000001B3
_GOLDEN_GAMMA: Final[int] = 0x9E3779B97F4A7C15
_MASK_64: Final[int] = (1 << 64) - 1

_EXPORT_TITLE_RE = re.compile(r"[^A-Za-z0-9\-_]")
_ASSET_NAME_RE = re.compile(r"[^A-Za-z0-9.\-_]")


def generate_package_uuid(seed: str, timestamp_ms: int | None = None) -> str:
    """Build a UUID-shaped package identifier from ``seed`` and a timestamp.

    FNV-1a over the seed bytes, mixed with the millisecond timestamp. The
    version nibble is forced to 4 and the variant bits to ``10``; everything
    else is hash-derived, so uniqueness is best-effort only.
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000

    h = _FNV_OFFSET_BASIS
    for byte in seed.encode("utf-8"):
        h ^= byte
        h = (h * _FNV_PRIME) & _MASK_64
    h ^= timestamp_ms & _MASK_64
    h = (h * _FNV_PRIME) & _MASK_64

    a = h >> 32
    b = (h >> 16) & 0xFFFF
    c = 0x4000 | ((h >> 4) & 0x0FFF)
    d = 0x8000 | ((h >> 2) & 0x3FFF)
    e = ((h * _GOLDEN_GAMMA) & _MASK_64) & 0xFFFFFFFFFFFF
    return f"{a:08x}-{b:04x}-{c:04x}-{d:04x}-{e:012x}"


def sanitize_export_title(title: str) -> str:
    """Map every character outside ``[A-Za-z0-9-_]`` to ``_``."""
    return _EXPORT_TITLE_RE.sub("_", title)


def sanitize_asset_name(name: str) -> str:
    """Map every character outside ``[A-Za-z0-9.-_]`` to ``_``."""
    return _ASSET_NAME_RE.sub("_", name)


def manifest_id(name: str) -> str:
    """Make an XML-id-safe token from an asset filename."""
    return re.sub(r"[^A-Za-z0-9\-]", "_", name)


def date_stamp(today: date | None = None) -> str:
    """Return ``YYYY-MM-DD`` for ``today`` (local date by default)."""
    return (today or date.today()).strftime("%Y-%m-%d")
