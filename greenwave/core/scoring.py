"""Smoothness-based star rating and display helpers."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

MAX_STARS: int = 3

# Normalised speed-change thresholds (km/h per 100 world units).
_THREE_STAR_LIMIT: float = 20.0
_TWO_STAR_LIMIT: float = 50.0


def stars_for(speed_change: float, level_distance: float) -> int:
    """Rate a finished attempt from 1 to 3 stars.

    The accumulated speed change is normalised per 100 units of level
    distance so that long levels are not penalised for simply taking
    longer::

        normalized = speed_change / (level_distance / 100)

    Returns 3 below 20, 2 below 50, otherwise 1.

    Args:
        speed_change: Accumulated pedal-driven speed change in km/h (>= 0).
        level_distance: Finish position of the level (> 0).

    Raises:
        ValueError: If level_distance <= 0 or speed_change < 0.
    """
    if level_distance <= 0.0:
        raise ValueError("level_distance must be > 0.")
    if speed_change < 0.0:
        raise ValueError("speed_change must be >= 0.")

    normalized: float = speed_change / (level_distance / 100.0)
    if normalized < _THREE_STAR_LIMIT:
        return 3
    if normalized < _TWO_STAR_LIMIT:
        return 2
    return 1


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3).

    Python's built-in ``round`` uses banker's rounding, which would show
    2.5 average stars as two glyphs.
    """
    return math.floor(value + 0.5)


def round_tenths(value: float) -> float:
    """Round to one decimal with halves going up (2.25 -> 2.3).

    The exact binary value is rounded, so 2.25 (exact) goes up while
    1.15 (stored just below) goes down.
    """
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def star_display(stars: int) -> str:
    """Render a rating as filled and hollow star glyphs, e.g. ``"★★☆"``."""
    filled = max(0, min(MAX_STARS, stars))
    return "★" * filled + "☆" * (MAX_STARS - filled)


def format_time(seconds: float) -> str:
    """Format a duration with one decimal place."""
    return f"{seconds:.1f}"
