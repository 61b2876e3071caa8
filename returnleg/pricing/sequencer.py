"""Price return and reference amount payments of an asset return leg.

price_return_payments() walks the valuation schedule in lock-step with
the underlying's amortization feed and yields, per period, any
reference amounts for the notional redeemed in the period followed by
the period's price return. The walk stops early in exactly two cases:
a default settles on or before the period's payment date (one final
truncated price return), or the balance is exhausted.

Scaling: with a fixed notional each price return is scaled by the
remaining balance; with a resetting notional by balance / P_0, the
number of asset units held per $1 of initial investment.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, timedelta
from decimal import Decimal, localcontext

from returnleg.core.numeric import BALANCE_TOLERANCE, RETURNLEG_DECIMAL_CONTEXT, ZERO, NonEmptyStr
from returnleg.instrument.return_leg import AssetReturnLeg
from returnleg.pricing.balance import NotionalChangeFeed, balance_at
from returnleg.pricing.payments import (
    Payment,
    PriceReturnPayment,
    ReferenceAmountPayment,
    scale_by,
)
from returnleg.pricing.protocols import NotionalChangeInfo, PriceCalculator


def notional_scale(balance: Decimal, initial_price: Decimal, resetting_notional: bool) -> Decimal:
    """Scale factor applied to a price return for the given balance."""
    if not resetting_notional:
        return balance
    with localcontext(RETURNLEG_DECIMAL_CONTEXT):
        return balance / initial_price


def _credit_risk_end_of(change: NotionalChangeInfo) -> date | None:
    if isinstance(change, ReferenceAmountPayment):
        return change.credit_risk_end()
    return getattr(change, "credit_risk_end_date", None)


def reference_amounts(
    feed: NotionalChangeFeed,
    begin: int,
    end: int,
    currency: NonEmptyStr,
    initial_price: Decimal,
    anchor_value_date: date,
    price_calculator: PriceCalculator,
    price_override: Decimal | None,
) -> Iterator[ReferenceAmountPayment]:
    """One reference amount per consumed event feed[begin:end], in feed order."""
    for change in feed.events[begin:end]:
        with localcontext(RETURNLEG_DECIMAL_CONTEXT):
            before = change.notional_before_change / initial_price
            principal = (change.notional_before_change - change.notional_after_change) / initial_price
        yield ReferenceAmountPayment(
            pay_date=change.change_date,
            currency=currency,
            balance_before_change=before,
            principal_payment_amount=principal,
            anchor_value_date=anchor_value_date,
            price_calculator=price_calculator,
            price_override=price_override,
            credit_risk_end_date=_credit_risk_end_of(change),
        )


def price_return_payments(
    leg: AssetReturnLeg,
    from_date: date,
    price_calculator: PriceCalculator,
    notional_changes: NotionalChangeFeed,
    *,
    default_settle_date: date | None = None,
    initial_price: Decimal | None = None,
    resetting_notional: bool | None = None,
) -> Iterator[Payment]:
    """Yield the leg's payments relevant on or after from_date.

    initial_price and resetting_notional default to the leg's terms.
    The returned iterator is one-shot; call again to replay.
    """
    p0 = leg.initial_price.value if initial_price is None else initial_price
    resetting = leg.resetting_notional if resetting_notional is None else resetting_notional
    ccy = leg.currency

    if default_settle_date is not None and default_settle_date < from_date:
        return

    begin = last_pay_dt = leg.effective_date
    cursor = 0
    balance, cursor = balance_at(notional_changes, begin, cursor)
    if balance <= ZERO:
        return

    for i, period in enumerate(leg.valuation_schedule):
        value_dt, pay_dt = period.value_date, period.payment_date
        if value_dt <= begin:
            raise TypeError(
                f"price_return_payments: value date {value_dt} must be after {begin}"
            )
        override = p0 if i == 0 else None

        if default_settle_date is not None and default_settle_date <= pay_dt:
            balance, cursor = balance_at(notional_changes, default_settle_date, cursor)
            yield scale_by(
                PriceReturnPayment(
                    last_pay_date=last_pay_dt,
                    pay_date=default_settle_date,
                    currency=ccy,
                    begin_date=begin,
                    end_date=default_settle_date + timedelta(days=1),
                    price_calculator=price_calculator,
                    begin_price_override=override,
                    is_absolute=resetting,
                ),
                notional_scale(balance, p0, resetting),
            )
            return

        last_cursor = cursor
        balance, cursor = balance_at(notional_changes, pay_dt, cursor)

        if from_date < pay_dt:
            if balance <= -BALANCE_TOLERANCE:
                raise TypeError(
                    f"price_return_payments: balance {balance} on {pay_dt} "
                    f"below -{BALANCE_TOLERANCE}"
                )
            if cursor != last_cursor:
                yield from reference_amounts(
                    notional_changes, last_cursor, cursor, ccy, p0,
                    begin, price_calculator, override,
                )
            if balance <= ZERO:
                return
            yield scale_by(
                PriceReturnPayment(
                    last_pay_date=last_pay_dt,
                    pay_date=pay_dt,
                    currency=ccy,
                    begin_date=begin,
                    end_date=value_dt,
                    price_calculator=price_calculator,
                    begin_price_override=override,
                    is_absolute=resetting,
                ),
                notional_scale(balance, p0, resetting),
            )
        elif balance <= ZERO:
            return

        last_pay_dt = pay_dt
        begin = value_dt
