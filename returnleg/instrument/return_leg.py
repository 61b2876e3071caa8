"""Asset return leg of a total return swap, and its valuation schedule.

The return leg pays the capital gains/losses of an underlying asset
observed on a sequence of value dates after the effective date, with
cash settling on lagged payment dates. Let P_0 be the contractual
initial price, P_i the price on value date T_i and N_0 the initial
investment. The price return of period i is

    Y_i = (P_i - P_{i-1}) / P_{i-1} * N_{i-1}

where N_i = N_0 with a fixed notional, and N_i = P_i * N_0 / P_0 when
the notional resets each period.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from itertools import pairwise
from typing import final

from dateutil.relativedelta import relativedelta

from returnleg.core.calendar import add_business_days, adjust_date
from returnleg.core.errors import FieldViolation, ValidationError, validation_error
from returnleg.core.numeric import NonEmptyStr, PositiveDecimal
from returnleg.core.result import Err, Ok
from returnleg.core.types import BusinessDayConvention

# ---------------------------------------------------------------------------
# Valuation schedule
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class ValuationPeriod:
    """One (value date, payment date) pair. Payment never precedes value."""

    value_date: date
    payment_date: date

    def __post_init__(self) -> None:
        if self.payment_date < self.value_date:
            raise TypeError(
                f"ValuationPeriod: payment_date ({self.payment_date}) "
                f"must be >= value_date ({self.value_date})"
            )


def _schedule_violations(periods: tuple[ValuationPeriod, ...]) -> list[FieldViolation]:
    violations: list[FieldViolation] = []
    for i, (prev, cur) in enumerate(pairwise(periods), start=1):
        if cur.value_date <= prev.value_date:
            violations.append(FieldViolation(
                path=f"periods[{i}].value_date",
                constraint=f"must be > periods[{i - 1}].value_date ({prev.value_date})",
                actual_value=str(cur.value_date),
            ))
        # Payment dates may repeat but never go backwards.
        if cur.payment_date < prev.payment_date:
            violations.append(FieldViolation(
                path=f"periods[{i}].payment_date",
                constraint=f"must be >= periods[{i - 1}].payment_date ({prev.payment_date})",
                actual_value=str(cur.payment_date),
            ))
    return violations


@final
@dataclass(frozen=True, slots=True)
class ValuationSchedule:
    """Valuation periods: value dates strictly increasing, payment dates non-decreasing."""

    periods: tuple[ValuationPeriod, ...]

    def __post_init__(self) -> None:
        violations = _schedule_violations(self.periods)
        if violations:
            v = violations[0]
            raise TypeError(f"ValuationSchedule: {v.path} {v.constraint}, got {v.actual_value}")

    @staticmethod
    def create(
        periods: Iterable[tuple[date, date] | ValuationPeriod],
    ) -> Ok[ValuationSchedule] | Err[ValidationError]:
        """Validate and build a schedule from periods or (value, payment) pairs."""
        _src = "instrument.return_leg.ValuationSchedule.create"
        built: list[ValuationPeriod] = []
        violations: list[FieldViolation] = []
        for i, p in enumerate(periods):
            if isinstance(p, ValuationPeriod):
                built.append(p)
                continue
            value_date, payment_date = p
            if payment_date < value_date:
                violations.append(FieldViolation(
                    path=f"periods[{i}].payment_date",
                    constraint=f"must be >= value_date ({value_date})",
                    actual_value=str(payment_date),
                ))
                continue
            built.append(ValuationPeriod(value_date=value_date, payment_date=payment_date))
        if not violations:
            violations = _schedule_violations(tuple(built))
        if violations:
            return Err(validation_error(
                "ValuationSchedule: invalid periods", "INVALID_SCHEDULE",
                _src, tuple(violations),
            ))
        return Ok(ValuationSchedule(periods=tuple(built)))

    @staticmethod
    def from_value_dates(
        value_dates: Iterable[date] | None,
        *,
        effective: date,
        maturity: date,
        payment_lag: int = 0,
        convention: BusinessDayConvention = "FOLLOWING",
    ) -> ValuationSchedule:
        """Schedule whose payment dates lag the value dates by business days."""
        dates = normalize_value_dates(value_dates, payment_lag, effective, maturity, convention)
        return ValuationSchedule(periods=tuple(
            ValuationPeriod(value_date=d, payment_date=add_business_days(d, payment_lag))
            for d in dates
        ))

    @property
    def count(self) -> int:
        return len(self.periods)

    def value_date_at(self, index: int) -> date:
        return self.periods[index].value_date

    def payment_date_at(self, index: int) -> date:
        return self.periods[index].payment_date

    def __len__(self) -> int:
        return len(self.periods)

    def __getitem__(self, index: int) -> ValuationPeriod:
        return self.periods[index]

    def __iter__(self) -> Iterator[ValuationPeriod]:
        return iter(self.periods)


def normalize_value_dates(
    value_dates: Iterable[date] | None,
    payment_lag: int,
    effective: date,
    maturity: date,
    convention: BusinessDayConvention = "FOLLOWING",
) -> tuple[date, ...]:
    """Roll, filter and sort value dates, ending on the final value date.

    The final value date is ``payment_lag`` business days before the
    rolled maturity. Without explicit value dates the schedule is that
    single final value date.
    """
    final_payment = adjust_date(maturity, convention)
    final_value = add_business_days(final_payment, -payment_lag)
    if value_dates is None:
        return (final_value,)
    rolled = {adjust_date(d, convention) for d in value_dates}
    kept = {d for d in rolled if effective < d < final_value}
    kept.add(final_value)
    return tuple(sorted(kept))


def periodic_value_dates(effective: date, maturity: date, months: int) -> tuple[date, ...]:
    """Regular value dates every ``months`` months after effective, ending at maturity."""
    if months <= 0:
        raise TypeError(f"periodic_value_dates: months must be > 0, got {months}")
    dates: list[date] = []
    k = 1
    current = effective + relativedelta(months=months)
    while current < maturity:
        dates.append(current)
        k += 1
        current = effective + relativedelta(months=months * k)
    dates.append(maturity)
    return tuple(dates)


# ---------------------------------------------------------------------------
# AssetReturnLeg
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class AssetReturnLeg:
    """Return leg of a TRS on a single underlying asset.

    Incomes of the underlying are assumed passed through immediately and
    are not modelled here; only the capital gain/loss and the reference
    amounts on amortization are.
    """

    underlying_id: NonEmptyStr
    effective_date: date
    maturity_date: date
    currency: NonEmptyStr
    initial_price: PositiveDecimal
    valuation_schedule: ValuationSchedule
    resetting_notional: bool = False

    def __post_init__(self) -> None:
        if self.maturity_date <= self.effective_date:
            raise TypeError(
                f"AssetReturnLeg: maturity_date ({self.maturity_date}) "
                f"must be > effective_date ({self.effective_date})"
            )
        if self.valuation_schedule.count == 0:
            raise TypeError("AssetReturnLeg: valuation_schedule must be non-empty")
        first = self.valuation_schedule.value_date_at(0)
        if first <= self.effective_date:
            raise TypeError(
                f"AssetReturnLeg: first value date ({first}) "
                f"must be > effective_date ({self.effective_date})"
            )

    @staticmethod
    def create(
        underlying_id: str,
        effective_date: date,
        maturity_date: date,
        currency: str,
        initial_price: Decimal,
        valuation_schedule: ValuationSchedule,
        resetting_notional: bool = False,
    ) -> Ok[AssetReturnLeg] | Err[ValidationError]:
        """Validated construction, reporting every failing field."""
        violations: list[FieldViolation] = []
        match NonEmptyStr.parse(underlying_id):
            case Err(e):
                violations.append(FieldViolation("underlying_id", e, repr(underlying_id)))
            case Ok(uid):
                pass
        match NonEmptyStr.parse(currency):
            case Err(e):
                violations.append(FieldViolation("currency", e, repr(currency)))
            case Ok(ccy):
                pass
        match PositiveDecimal.parse(initial_price):
            case Err(e):
                violations.append(FieldViolation("initial_price", e, str(initial_price)))
            case Ok(price):
                pass
        if maturity_date <= effective_date:
            violations.append(FieldViolation(
                "maturity_date", f"must be > effective_date ({effective_date})",
                str(maturity_date),
            ))
        if valuation_schedule.count == 0:
            violations.append(FieldViolation("valuation_schedule", "must be non-empty", "()"))
        elif valuation_schedule.value_date_at(0) <= effective_date:
            violations.append(FieldViolation(
                "valuation_schedule.periods[0].value_date",
                f"must be > effective_date ({effective_date})",
                str(valuation_schedule.value_date_at(0)),
            ))
        if violations:
            return Err(validation_error(
                "AssetReturnLeg: invalid terms", "INVALID_RETURN_LEG",
                "instrument.return_leg.AssetReturnLeg.create", tuple(violations),
            ))
        return Ok(AssetReturnLeg(
            underlying_id=uid, effective_date=effective_date,
            maturity_date=maturity_date, currency=ccy, initial_price=price,
            valuation_schedule=valuation_schedule,
            resetting_notional=resetting_notional,
        ))

    def preceding_value_date(self, reference: date) -> date:
        """Last value date strictly before reference, else the effective date."""
        begin = self.effective_date
        for period in self.valuation_schedule:
            if period.value_date >= reference:
                break
            begin = period.value_date
        return begin
