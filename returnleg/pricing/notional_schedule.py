"""Piecewise notional factor of the return leg through time.

Used by consumers that need the TRS notional level on a date without
re-deriving it from the payments. A static notional (fixed mode and no
amortization after from_date) has no schedule: the builder returns None.
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, localcontext
from itertools import pairwise
from typing import final

from returnleg.core.errors import ReturnLegError
from returnleg.core.numeric import BALANCE_TOLERANCE, RETURNLEG_DECIMAL_CONTEXT, ZERO
from returnleg.core.result import Err, Ok
from returnleg.instrument.return_leg import AssetReturnLeg
from returnleg.pricing.balance import NotionalChangeFeed, balance_at
from returnleg.pricing.protocols import PriceCalculator
from returnleg.pricing.sequencer import notional_scale


@final
@dataclass(frozen=True, slots=True)
class NotionalFactor:
    """Notional of one interval: units, times the price at value_date when resetting."""

    price_calculator: PriceCalculator | None
    value_date: date
    notional_units: Decimal

    def __call__(self) -> Ok[Decimal] | Err[ReturnLegError]:
        if self.price_calculator is None:
            return Ok(self.notional_units)
        return (
            self.price_calculator.price(self.value_date)
            .map(self._units_at)
            .map_err(lambda e: e.with_context(f"notional factor on {self.value_date}"))
        )

    def _units_at(self, price: Decimal) -> Decimal:
        with localcontext(RETURNLEG_DECIMAL_CONTEXT):
            return price * self.notional_units


@final
@dataclass(frozen=True, slots=True)
class NotionalFactorSchedule:
    """Breakpoint dates and one more factor than dates.

    factors[k] covers dates up to and including dates[k]; factors[-1]
    covers everything after the last breakpoint.
    """

    dates: tuple[date, ...]
    factors: tuple[NotionalFactor, ...]

    def __post_init__(self) -> None:
        if len(self.factors) != len(self.dates) + 1:
            raise TypeError(
                f"NotionalFactorSchedule: expected {len(self.dates) + 1} factors, "
                f"got {len(self.factors)}"
            )
        if any(b <= a for a, b in pairwise(self.dates)):
            raise TypeError("NotionalFactorSchedule: dates must be strictly increasing")

    def factor_for(self, on: date) -> NotionalFactor:
        return self.factors[bisect_left(self.dates, on)]

    def factor_at(self, on: date) -> Ok[Decimal] | Err[ReturnLegError]:
        return self.factor_for(on)()


def build_notional_schedule(
    leg: AssetReturnLeg,
    from_date: date,
    notional_changes: NotionalChangeFeed,
    price_calculator: PriceCalculator | None = None,
) -> NotionalFactorSchedule | None:
    """Notional factor step function, or None when the notional is static.

    The price calculator is only consulted for a resetting notional. A
    period contributes a breakpoint at its payment date when it ends
    after from_date and either the notional resets or amortization
    occurred in it.
    """
    p0 = leg.initial_price.value
    resetting = leg.resetting_notional
    calculator = price_calculator if resetting else None

    begin = leg.effective_date
    cursor = 0
    balance, cursor = balance_at(notional_changes, begin, cursor)
    if balance <= ZERO:
        return None

    dates: list[date] = []
    factors: list[NotionalFactor] = []
    for period in leg.valuation_schedule:
        value_dt, pay_dt = period.value_date, period.payment_date
        if value_dt <= begin:
            raise TypeError(
                f"build_notional_schedule: value date {value_dt} must be after {begin}"
            )
        last_cursor, last_balance = cursor, balance
        balance, cursor = balance_at(notional_changes, pay_dt, cursor)
        if from_date >= pay_dt or (calculator is None and cursor == last_cursor):
            if balance <= ZERO:
                return None
        else:
            if balance <= -BALANCE_TOLERANCE:
                raise TypeError(
                    f"build_notional_schedule: balance {balance} on {pay_dt} "
                    f"below -{BALANCE_TOLERANCE}"
                )
            # A period paying on its predecessor's date adds no interval.
            if not dates or dates[-1] != pay_dt:
                dates.append(pay_dt)
                factors.append(NotionalFactor(
                    price_calculator=calculator,
                    value_date=begin,
                    notional_units=notional_scale(last_balance, p0, calculator is not None),
                ))
        begin = value_dt

    if not dates:
        return None
    factors.append(NotionalFactor(
        price_calculator=calculator,
        value_date=begin,
        notional_units=notional_scale(balance, p0, calculator is not None),
    ))
    return NotionalFactorSchedule(dates=tuple(dates), factors=tuple(factors))
