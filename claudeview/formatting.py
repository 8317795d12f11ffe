"""Human-friendly formatting of ages and byte sizes."""

from __future__ import annotations

from datetime import timedelta

_KB = 1024
_MB = 1024 * _KB

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR


def format_age(d: timedelta) -> str:
    """Render a duration compactly, e.g. ``"42s"``, ``"5m"``, ``"2h"`` or ``"3d"``."""
    seconds = d.total_seconds()
    if seconds < _MINUTE:
        return f"{int(seconds)}s"
    if seconds < _HOUR:
        return f"{int(seconds / _MINUTE)}m"
    if seconds < _DAY:
        return f"{int(seconds / _HOUR)}h"
    return f"{int(seconds / _DAY)}d"


def format_size(b: int) -> str:
    """Render a byte count as ``"1.5MB"``, ``"2.0KB"`` or ``"512 bytes"``."""
    if b >= _MB:
        return f"{b / _MB:.1f}MB"
    if b >= _KB:
        return f"{b / _KB:.1f}KB"
    return f"{b} bytes"