"""
Display formatting helpers shared by both report surfaces.
"""

import zlib
from typing import List, Optional, Sequence, Tuple, TypeVar

from ..core import constants

T = TypeVar("T")


def format_number(value: Optional[float], decimals: int = constants.DECIMAL_PLACES) -> str:
    """Format a number with fixed decimals; None becomes '-'."""
    if value is None:
        return "-"
    return f"{value:.{decimals}f}"


def unit_for(label: str) -> str:
    """Display unit of a parameter label ('' when unitless or unknown)."""
    return constants.PARAMETER_UNITS.get(label, "")


def format_value(value: Optional[float], label: str) -> str:
    """Format a number with the unit of its parameter label."""
    text = format_number(value)
    unit = unit_for(label)
    if value is None or not unit:
        return text
    return f"{text} {unit}"


def format_percent(value: float) -> str:
    return f"{format_number(value)}%"


def color_for(label: str) -> str:
    """
    Chart colour of a parameter label.

    Unknown labels get a palette colour chosen from a stable hash, so a
    label keeps its colour across runs.
    """
    color = constants.MEASUREMENT_COLORS.get(label)
    if color:
        return color
    palette = constants.FALLBACK_COLORS
    return palette[zlib.crc32(label.encode("utf-8")) % len(palette)]


def truncate_rows(rows: Sequence[T], limit: int) -> Tuple[List[T], Optional[str]]:
    """
    Cap a table at a row limit.

    Args:
        rows: All rows, in display order
        limit: Maximum rows shown

    Returns:
        Tuple of (shown rows, footer); footer is 'showing X of N' when rows
        were dropped, otherwise None
    """
    shown = list(rows[:limit])
    if len(rows) > limit:
        return shown, f"showing {limit} of {len(rows)}"
    return shown, None
