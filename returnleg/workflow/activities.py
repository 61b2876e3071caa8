"""Activity wrapping the return-leg payment sequencer.

The activity is a thin IO wrapper: all domain logic lives in
returnleg.pricing. It is idempotent (same input, same output) and
resolves every amount before returning, since price calculators do
not cross the workflow boundary.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from decimal import Decimal
from typing import assert_never

from temporalio import activity

from returnleg.core.result import Err, Ok
from returnleg.pricing.balance import NotionalChangeFeed
from returnleg.pricing.payments import (
    Payment,
    PriceReturnPayment,
    RecoveryReturnPayment,
    ReferenceAmountPayment,
    compute_amount,
    flatten,
)
from returnleg.pricing.protocols import TabulatedPriceCalculator
from returnleg.pricing.recovery import recovery_returns
from returnleg.pricing.sequencer import price_return_payments
from returnleg.workflow.types import (
    PaymentKind,
    ProjectedPayment,
    ProjectionInput,
    ProjectionOutput,
)


def _kind(payment: Payment) -> PaymentKind:
    match flatten(payment)[0]:
        case PriceReturnPayment():
            return PaymentKind.PRICE_RETURN
        case ReferenceAmountPayment():
            return PaymentKind.REFERENCE_AMOUNT
        case RecoveryReturnPayment():
            return PaymentKind.RECOVERY_RETURN
        case _never:
            assert_never(_never)


def _project(payment: Payment) -> ProjectedPayment:
    concrete, factor = flatten(payment)
    base = {
        "kind": _kind(payment),
        "pay_date": concrete.pay_date,
        "currency": concrete.currency.value,
        "scale_factor": factor,
    }
    match compute_amount(payment):
        case Err(e):
            return ProjectedPayment(**base, error=e.message)
        case Ok(amount):
            return ProjectedPayment(**base, amount=amount)


def _truncated_by_default(payments: tuple[Payment, ...], default_settle_date: date | None) -> bool:
    if default_settle_date is None or not payments:
        return False
    last = flatten(payments[-1])[0]
    return isinstance(last, PriceReturnPayment) and last.pay_date == default_settle_date


@activity.defn(name="project_return_leg_payments")
async def project_return_leg_payments(inp: ProjectionInput) -> ProjectionOutput:
    """Sequence, optionally project onto recovery, and price the payments.

    Timeout: 60s | Retries: 3 (deterministic; retries only cover worker loss)
    """
    leg_id = inp.leg.underlying_id.value
    activity.logger.info(
        "Projecting return leg payments for %s from %s", leg_id, inp.from_date,
    )

    match NotionalChangeFeed.create(inp.notional_changes):
        case Err(e):
            activity.logger.warning("Rejected amortization feed for %s: %s", leg_id, e.message)
            return ProjectionOutput(leg_id=leg_id, error=e.message)
        case Ok(feed):
            pass

    calculator = TabulatedPriceCalculator(underlying_id=leg_id, prices=inp.prices)
    try:
        raw = tuple(price_return_payments(
            inp.leg, inp.from_date, calculator, feed,
            default_settle_date=inp.default_settle_date,
        ))
    except TypeError as exc:
        activity.logger.warning("Contract violation for %s: %s", leg_id, exc)
        return ProjectionOutput(leg_id=leg_id, error=str(exc))

    truncated = _truncated_by_default(raw, inp.default_settle_date)
    payments = raw
    if inp.underlying_maturity is not None:
        flat_rate = inp.recovery_rate
        rate_fn: Callable[[date], Decimal] | None = (
            None if flat_rate is None else (lambda _d: flat_rate)
        )
        payments = tuple(recovery_returns(
            raw, inp.underlying_maturity, recovery_rate=rate_fn,
        ))

    projected = tuple(_project(p) for p in payments)
    for p in projected:
        if p.error is not None:
            activity.logger.warning(
                "Amount unavailable for %s %s payment on %s: %s",
                leg_id, p.kind.value, p.pay_date, p.error,
            )
    activity.logger.info(
        "Projected %d payments for %s (truncated by default: %s)",
        len(projected), leg_id, truncated,
    )
    return ProjectionOutput(
        leg_id=leg_id, payments=projected, truncated_by_default=truncated,
    )
