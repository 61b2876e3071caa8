"""Payment records of the return leg and their lazy amounts.

Payment is a closed union of four frozen records:

    PriceReturnPayment | ReferenceAmountPayment | RecoveryReturnPayment
    | ScaledPayment(inner, factor)

Amounts are not stored. compute_amount() resolves prices through the
record's PriceCalculator when called, so a missing price fails that one
payment and nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, localcontext
from typing import assert_never, final

from returnleg.core.errors import PricingError, ReturnLegError
from returnleg.core.numeric import ONE, RETURNLEG_DECIMAL_CONTEXT, ZERO, NonEmptyStr, almost_one
from returnleg.core.result import Err, Ok
from returnleg.core.types import UtcDatetime
from returnleg.pricing.protocols import PriceCalculator, calculate_return

# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class PriceReturnPayment:
    """Capital gain/loss of one valuation period, per unit of scale.

    begin_price_override is the contractual initial price for the first
    period and None afterwards (price observed at begin_date).
    is_absolute selects P_end - P_begin (resetting notional) over
    (P_end - P_begin) / P_begin (fixed notional).
    """

    last_pay_date: date
    pay_date: date
    currency: NonEmptyStr
    begin_date: date
    end_date: date
    price_calculator: PriceCalculator
    begin_price_override: Decimal | None
    is_absolute: bool
    credit_risk_end_date: date | None = None
    cutoff_date: date | None = None

    def credit_risk_end(self) -> date:
        return self.pay_date if self.credit_risk_end_date is None else self.credit_risk_end_date


@final
@dataclass(frozen=True, slots=True)
class ReferenceAmountPayment:
    """Par-versus-price gap paid when part of the underlying redeems.

    Balances are per $1 of initial investment in the leg. The record is
    itself a NotionalChangeInfo so it can feed balance tracking.
    """

    pay_date: date
    currency: NonEmptyStr
    balance_before_change: Decimal
    principal_payment_amount: Decimal
    anchor_value_date: date
    price_calculator: PriceCalculator
    price_override: Decimal | None
    credit_risk_end_date: date | None = None
    cutoff_date: date | None = None

    def credit_risk_end(self) -> date:
        return self.pay_date if self.credit_risk_end_date is None else self.credit_risk_end_date

    @property
    def change_date(self) -> date:
        return self.pay_date

    @property
    def notional_before_change(self) -> Decimal:
        return self.balance_before_change

    @property
    def notional_after_change(self) -> Decimal:
        with localcontext(RETURNLEG_DECIMAL_CONTEXT):
            return self.balance_before_change - self.principal_payment_amount


@final
@dataclass(frozen=True, slots=True)
class RecoveryReturnPayment:
    """Return paid if the underlying defaults in [begin_date, end_date]."""

    begin_date: date
    end_date: date
    currency: NonEmptyStr
    recovery_rate: Decimal
    value_date: date
    price_calculator: PriceCalculator
    price_override: Decimal | None
    is_absolute: bool
    cutoff_date: date | None = None
    time_grids: tuple[date, ...] | None = None

    @property
    def pay_date(self) -> date:
        return self.end_date

    def credit_risk_end(self) -> date:
        return self.end_date


@final
@dataclass(frozen=True, slots=True)
class ScaledPayment:
    """A payment multiplied by a notional factor."""

    inner: Payment
    factor: Decimal

    @property
    def pay_date(self) -> date:
        return self.inner.pay_date

    @property
    def currency(self) -> NonEmptyStr:
        return self.inner.currency


type Payment = PriceReturnPayment | ReferenceAmountPayment | RecoveryReturnPayment | ScaledPayment

type ConcretePayment = PriceReturnPayment | ReferenceAmountPayment | RecoveryReturnPayment


# ---------------------------------------------------------------------------
# Scaling
# ---------------------------------------------------------------------------


def scale_by(payment: Payment, factor: Decimal) -> Payment:
    """Wrap in ScaledPayment unless factor is 1 within tolerance."""
    if almost_one(factor):
        return payment
    return ScaledPayment(inner=payment, factor=factor)


def flatten(payment: Payment) -> tuple[ConcretePayment, Decimal]:
    """Unwrap every ScaledPayment level: (concrete payment, cumulative factor)."""
    factor = ONE
    with localcontext(RETURNLEG_DECIMAL_CONTEXT):
        while isinstance(payment, ScaledPayment):
            factor *= payment.factor
            payment = payment.inner
    return payment, factor


def underlying_payment(payment: Payment) -> ConcretePayment:
    return flatten(payment)[0]


def scale_according_to(target: Payment, source: Payment, base: Decimal = ONE) -> Payment:
    """Scale target by base times the cumulative factor wrapped around source."""
    _, factor = flatten(source)
    with localcontext(RETURNLEG_DECIMAL_CONTEXT):
        return scale_by(target, base * factor)


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------


def _pricing_err(reason: str, fn: str) -> Err[ReturnLegError]:
    return Err(PricingError(
        message=reason, code="AMOUNT_UNDEFINED", timestamp=UtcDatetime.now(),
        source=f"pricing.payments.{fn}", instrument="asset-return-leg", reason=reason,
    ))


def _price(
    calculator: PriceCalculator, on: date, override: Decimal | None,
) -> Ok[Decimal] | Err[ReturnLegError]:
    if override is not None:
        return Ok(override)
    return calculator.price(on).map_err(lambda e: e.with_context(f"price on {on}"))


def _price_return_amount(p: PriceReturnPayment) -> Ok[Decimal] | Err[ReturnLegError]:
    match _price(p.price_calculator, p.begin_date, p.begin_price_override):
        case Err(e):
            return Err(e)
        case Ok(begin_price):
            pass
    match _price(p.price_calculator, p.end_date, None):
        case Err(e):
            return Err(e)
        case Ok(end_price):
            pass
    with localcontext(RETURNLEG_DECIMAL_CONTEXT):
        if p.is_absolute:
            return Ok(end_price - begin_price)
        if begin_price == ZERO:
            return _pricing_err(
                f"relative price return undefined: zero price on {p.begin_date}",
                "compute_amount",
            )
        return Ok((end_price - begin_price) / begin_price)


def _reference_amount(r: ReferenceAmountPayment) -> Ok[Decimal] | Err[ReturnLegError]:
    match _price(r.price_calculator, r.anchor_value_date, r.price_override):
        case Err(e):
            return Err(e)
        case Ok(price):
            pass
    with localcontext(RETURNLEG_DECIMAL_CONTEXT):
        return Ok((ONE - price) * r.principal_payment_amount)


def _recovery_return_amount(r: RecoveryReturnPayment) -> Ok[Decimal] | Err[ReturnLegError]:
    match _price(r.price_calculator, r.value_date, r.price_override):
        case Err(e):
            return Err(e)
        case Ok(price):
            pass
    if not r.is_absolute and price == ZERO:
        return _pricing_err(
            f"relative recovery return undefined: zero price on {r.value_date}",
            "compute_amount",
        )
    return Ok(calculate_return(price, r.recovery_rate, r.is_absolute))


def compute_amount(payment: Payment) -> Ok[Decimal] | Err[ReturnLegError]:
    """Resolve the cash amount of a payment (per unit of leg notional)."""
    match payment:
        case ScaledPayment(inner=inner, factor=factor):
            match compute_amount(inner):
                case Err(e):
                    return Err(e)
                case Ok(amount):
                    with localcontext(RETURNLEG_DECIMAL_CONTEXT):
                        return Ok(factor * amount)
        case PriceReturnPayment():
            return _price_return_amount(payment)
        case ReferenceAmountPayment():
            return _reference_amount(payment)
        case RecoveryReturnPayment():
            return _recovery_return_amount(payment)
        case _never:
            assert_never(_never)
