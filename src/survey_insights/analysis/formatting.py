from __future__ import annotations

import math
from typing import Literal

from .models import number_label


PercentageLevel = Literal["high", "medium", "low"]
RatingLevel = Literal["excellent", "good", "fair", "poor"]


def round_half_up(value: float, decimals: int = 2) -> float:
    # Half-up rounding (2.125 -> 2.13), not Python's round-half-even.
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


def format_percentage(value: float) -> str:
    """Render a percentage with one decimal, dropping a trailing ".0" (40 -> "40%")."""
    return f"{number_label(round_half_up(value, 1))}%"


def format_number(value: float, decimals: int = 2) -> str:
    # Fixed decimals, rounded half-up like the stored statistics.
    return f"{round_half_up(value, decimals):.{decimals}f}"


def format_percentage_fixed(value: float) -> str:
    """Report form of a percentage: always one decimal (6.25 -> "6.3%", 40 -> "40.0%")."""
    return f"{format_number(value, 1)}%"


def percentage_level(percentage: float) -> PercentageLevel:
    if percentage >= 70:
        return "high"
    if percentage >= 40:
        return "medium"
    return "low"


def rating_level(average: float) -> RatingLevel:
    if average >= 4.5:
        return "excellent"
    if average >= 3.5:
        return "good"
    if average >= 2.5:
        return "fair"
    return "poor"
