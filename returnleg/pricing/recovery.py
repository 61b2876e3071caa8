"""Recovery-contingent returns derived from a return-leg payment sequence.

If the underlying defaults during a period, the price observed at the
end of the period is replaced by the recovery rate. Each price return
and reference amount is turned into a RecoveryReturnPayment covering
its credit risk window, capped at the underlying's maturity.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date
from decimal import Decimal

from returnleg.core.numeric import ZERO
from returnleg.pricing.payments import (
    Payment,
    PriceReturnPayment,
    RecoveryReturnPayment,
    ReferenceAmountPayment,
    flatten,
    scale_according_to,
)
from returnleg.pricing.protocols import RecoveryRateFunction


def recovery_returns(
    payments: Iterable[Payment],
    underlying_maturity: date,
    time_grids: tuple[date, ...] | None = None,
    recovery_rate: RecoveryRateFunction | None = None,
) -> Iterator[Payment]:
    """Project price returns and reference amounts onto recovery returns.

    Outer scale factors on a source payment are carried over to its
    recovery payment. Payments of other kinds are dropped.
    """
    grids = time_grids or None

    def rate_on(d: date) -> Decimal:
        return ZERO if recovery_rate is None else recovery_rate(d)

    for payment in payments:
        match flatten(payment)[0]:
            case PriceReturnPayment() as p:
                end = min(p.credit_risk_end(), underlying_maturity)
                yield scale_according_to(
                    RecoveryReturnPayment(
                        begin_date=p.last_pay_date,
                        end_date=end,
                        currency=p.currency,
                        recovery_rate=rate_on(p.pay_date),
                        value_date=p.begin_date,
                        price_calculator=p.price_calculator,
                        price_override=p.begin_price_override,
                        is_absolute=p.is_absolute,
                        cutoff_date=p.cutoff_date,
                        time_grids=grids,
                    ),
                    payment,
                )
            case ReferenceAmountPayment() as r:
                end = min(r.credit_risk_end(), underlying_maturity)
                yield scale_according_to(
                    RecoveryReturnPayment(
                        begin_date=r.anchor_value_date,
                        end_date=end,
                        currency=r.currency,
                        recovery_rate=rate_on(r.pay_date),
                        value_date=r.anchor_value_date,
                        price_calculator=r.price_calculator,
                        price_override=r.price_override,
                        is_absolute=True,
                        cutoff_date=r.cutoff_date,
                        time_grids=grids,
                    ),
                    payment,
                    r.principal_payment_amount,
                )
            case _:
                continue


def merge_time_grids(payments: Iterable[Payment]) -> tuple[date, ...]:
    """Sorted unique dates over every recovery payment's grid.

    A payment without an explicit grid contributes its begin and end dates.
    Other payment kinds contribute nothing.
    """
    grid: set[date] = set()
    for payment in payments:
        match flatten(payment)[0]:
            case RecoveryReturnPayment(time_grids=tg) if tg:
                grid.update(tg)
            case RecoveryReturnPayment(begin_date=b, end_date=e):
                grid.update((b, e))
            case _:
                continue
    return tuple(sorted(grid))
