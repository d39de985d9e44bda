"""Shared utility functions."""

from __future__ import annotations

import os
from pathlib import Path

_UNIT = 1024
_MAGNITUDES = "KMGTPE"


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def is_hidden(name: str) -> bool:
    """Whether a base name denotes a hidden entry."""
    return name.startswith(".")


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string.

    Uses binary (1024-based) magnitudes with a single decimal place,
    e.g. ``1536 -> "1.5 KB"``. Counts under 1024 are printed as-is.
    """
    if size_bytes < 0:
        return f"-{bytes_to_human(-size_bytes)}"
    if size_bytes < _UNIT:
        return f"{size_bytes} B"

    div, exp = _UNIT, 0
    n = size_bytes // _UNIT
    while n >= _UNIT and exp < len(_MAGNITUDES) - 1:
        div *= _UNIT
        exp += 1
        n //= _UNIT
    return f"{size_bytes / div:.1f} {_MAGNITUDES[exp]}B"


def format_elapsed(seconds: float) -> str:
    """Format an elapsed time as a human-readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds) // 60
    secs = seconds - minutes * 60
    return f"{minutes}m {secs:.0f}s"
