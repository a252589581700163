"""Rounding and clamping shared by every scoring step."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity.

    Python's round() uses banker's rounding (round(72.5) == 72); scores
    shown to reviewers expect 72.5 -> 73.
    """
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def clamp_score(value: float) -> int:
    """Round and clamp a value into an integer score in [0, 100]."""
    return int(clamp(round_half_up(value), 0, 100))


def mean(values: list[float]) -> float:
    """Arithmetic mean of a non-empty list."""
    return sum(values) / len(values)


def in_score_range(value: float) -> bool:
    """True for a value within [0, 100]; NaN is never in range."""
    return 0 <= value <= 100
