# delivery_analytics/utils/__init__.py
"""Utility functions package"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def round_half_up(value: Optional[Union[int, float, Decimal]], places: int = 2) -> Optional[float]:
    """
    Round the way SQL ROUND does (half away from zero), returning a float.

    None passes through so that null ratios stay null.

    Examples:
    - 2.675 -> 2.68 (binary float rounding would give 2.67)
    - 45 -> 45.0
    """
    if value is None:
        return None
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def month_label(year: int, month: int) -> str:
    """Format a calendar month as YYYY-MM, which sorts chronologically."""
    return f"{int(year):04d}-{int(month):02d}"


def weekday_name(day_index: int) -> str:
    """Name for a day-of-week index where 0 is Sunday (SQL `dow` convention)."""
    return WEEKDAY_NAMES[int(day_index)]
