"""Math helpers — half-up rounding, ms/px snapping, clamping. No engine imports."""

from __future__ import annotations

import math

# Anything closer to zero than half a unit is treated as exactly zero.
_SNAP_TO_ZERO = 0.5


def round_half_up(value: float) -> int:
    """Round .5 away from zero on the positive side (1.5 -> 2, -1.5 -> -1).

    Python's ``round`` uses banker's rounding, which would turn 0.5px into 0px
    and 2.5px into 2px. Timeline values need the conventional behaviour.
    """
    return int(math.floor(value + 0.5))


def round_ms(seconds: float) -> int:
    """Seconds -> integer milliseconds, sub-0.5ms values snapped to 0."""
    ms = seconds * 1000.0
    if abs(ms) < _SNAP_TO_ZERO:
        return 0
    return round_half_up(ms)


def round_px(pixels: float) -> int:
    """Pixels -> integer pixels, sub-0.5px values snapped to 0."""
    if abs(pixels) < _SNAP_TO_ZERO:
        return 0
    return round_half_up(pixels)


def round_to(value: float, digits: int = 2) -> float:
    """Half-up rounding to a fixed number of decimals."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def signed(value: float | int, unit: str = "") -> str:
    """Format a change with an explicit sign: 12 -> '+12px', -4 -> '-4px'."""
    prefix = "+" if value >= 0 else ""
    return f"{prefix}{_clean_number(value)}{unit}"


def _clean_number(value: float | int) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_number(value: float | int) -> str:
    """100.0 -> '100', 0.25 -> '0.25'."""
    return _clean_number(value)
