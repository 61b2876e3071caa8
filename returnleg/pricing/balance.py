"""Outstanding balance of the underlying through its amortization events.

Balances are in units where 1 is the full initial face. The feed is
sparse and sorted by date; balance_at() is a pure scan that threads
an explicit cursor instead of mutating shared state.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import final

from returnleg.core.errors import FieldViolation, ValidationError, validation_error
from returnleg.core.numeric import BALANCE_TOLERANCE, ONE
from returnleg.core.result import Err, Ok
from returnleg.pricing.protocols import NotionalChangeInfo


@final
@dataclass(frozen=True, slots=True)
class NotionalChangeEvent:
    """One amortization event of the underlying."""

    change_date: date
    notional_before_change: Decimal
    notional_after_change: Decimal
    credit_risk_end_date: date | None = None


def _feed_violations(events: tuple[NotionalChangeInfo, ...]) -> list[FieldViolation]:
    violations: list[FieldViolation] = []
    for i, e in enumerate(events):
        if i > 0 and e.change_date < events[i - 1].change_date:
            violations.append(FieldViolation(
                path=f"events[{i}].change_date",
                constraint=f"must be >= events[{i - 1}].change_date ({events[i - 1].change_date})",
                actual_value=str(e.change_date),
            ))
        if e.notional_after_change < -BALANCE_TOLERANCE:
            violations.append(FieldViolation(
                path=f"events[{i}].notional_after_change",
                constraint=f"must be >= -{BALANCE_TOLERANCE}",
                actual_value=str(e.notional_after_change),
            ))
    return violations


@final
@dataclass(frozen=True, slots=True)
class NotionalChangeFeed:
    """Amortization events sorted ascending by date.

    Events sharing a date are kept separate, in feed order.
    """

    events: tuple[NotionalChangeInfo, ...] = ()

    def __post_init__(self) -> None:
        violations = _feed_violations(self.events)
        if violations:
            v = violations[0]
            raise TypeError(f"NotionalChangeFeed: {v.path} {v.constraint}, got {v.actual_value}")

    @staticmethod
    def create(events: Iterable[NotionalChangeInfo]) -> Ok[NotionalChangeFeed] | Err[ValidationError]:
        """Validate ordering and balance floor at the boundary."""
        materialized = tuple(events)
        violations = _feed_violations(materialized)
        if violations:
            return Err(validation_error(
                "NotionalChangeFeed: malformed amortization events",
                "INVALID_NOTIONAL_FEED",
                "pricing.balance.NotionalChangeFeed.create",
                tuple(violations),
            ))
        return Ok(NotionalChangeFeed(events=materialized))

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, index: int) -> NotionalChangeInfo:
        return self.events[index]

    def __iter__(self) -> Iterator[NotionalChangeInfo]:
        return iter(self.events)


NO_AMORTIZATION = NotionalChangeFeed()


def balance_at(feed: NotionalChangeFeed, on: date, cursor: int) -> tuple[Decimal, int]:
    """Balance in effect on a date, and the advanced cursor.

    Scans forward from cursor: an event dated after ``on`` is not yet
    consumed and its pre-change notional applies; an event dated on
    ``on`` is consumed and its post-change notional applies. Callers
    must query non-decreasing dates and never rewind the cursor.
    """
    n = len(feed.events)
    if n == 0:
        return ONE, cursor
    for i in range(cursor, n):
        event = feed.events[i]
        if on < event.change_date:
            return event.notional_before_change, i
        if on == event.change_date:
            return event.notional_after_change, i + 1
    return feed.events[n - 1].notional_after_change, n
