"""Weekend and workday classification."""
from __future__ import annotations

from datetime import date, timedelta
from typing import Callable

BusinessDayOracle = Callable[[date], bool]


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def is_workday(day: date, is_business_day: BusinessDayOracle) -> bool:
    """Whether the rotation advances on ``day``.

    Only a non-business day that follows another non-business day freezes
    the rotation; a lone holiday between business days still rotates.
    """
    if is_business_day(day):
        return True
    return is_business_day(day - timedelta(days=1))


__all__ = ["BusinessDayOracle", "is_weekend", "is_workday"]
