"""Business day adjustment for valuation schedules.

Weekends only; holiday calendars are not modelled.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import assert_never

from returnleg.core.types import BusinessDayConvention

_DAY = timedelta(days=1)


def is_business_day(d: date) -> bool:
    return d.weekday() < 5


def _roll(d: date, step: timedelta) -> date:
    while not is_business_day(d):
        d += step
    return d


def adjust_date(d: date, convention: BusinessDayConvention) -> date:
    """Roll a date to a business day.

    MOD_FOLLOWING rolls forward unless that leaves the month, then back.
    """
    match convention:
        case "NONE":
            return d
        case "FOLLOWING":
            return _roll(d, _DAY)
        case "PRECEDING":
            return _roll(d, -_DAY)
        case "MOD_FOLLOWING":
            forward = _roll(d, _DAY)
            return forward if forward.month == d.month else _roll(d, -_DAY)
        case _never:
            assert_never(_never)


def add_business_days(start: date, days: int) -> date:
    """Move ``days`` business days from start; negative moves backwards."""
    step = _DAY if days >= 0 else -_DAY
    current = start
    for _ in range(abs(days)):
        current = _roll(current + step, step)
    return current
