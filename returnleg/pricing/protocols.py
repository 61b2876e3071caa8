"""Capabilities consumed by the return-leg pricing functions.

The sequencer only stores a PriceCalculator reference and an anchor
date; prices are looked up when a payment amount is computed.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, localcontext
from typing import Protocol, final, runtime_checkable

from returnleg.core.errors import MissingObservableError
from returnleg.core.numeric import RETURNLEG_DECIMAL_CONTEXT
from returnleg.core.result import Err, Ok
from returnleg.core.types import FrozenMap, UtcDatetime


@runtime_checkable
class PriceCalculator(Protocol):
    """Observed or projected price of the underlying on a date."""

    def price(self, on: date) -> Ok[Decimal] | Err[MissingObservableError]: ...


@runtime_checkable
class NotionalChangeInfo(Protocol):
    """A change in the underlying's outstanding notional (amortization)."""

    @property
    def change_date(self) -> date: ...

    @property
    def notional_before_change(self) -> Decimal: ...

    @property
    def notional_after_change(self) -> Decimal: ...


type RecoveryRateFunction = Callable[[date], Decimal]


@final
@dataclass(frozen=True, slots=True)
class TabulatedPriceCalculator:
    """Price calculator backed by a snapshot of observed prices.

    Dates missing from the snapshot yield MissingObservableError.
    """

    underlying_id: str
    prices: FrozenMap[date, Decimal]

    def price(self, on: date) -> Ok[Decimal] | Err[MissingObservableError]:
        value = self.prices.get(on)
        if value is None:
            return Err(MissingObservableError(
                message=f"No price for {self.underlying_id} on {on}",
                code="MISSING_PRICE",
                timestamp=UtcDatetime.now(),
                source="pricing.protocols.TabulatedPriceCalculator.price",
                observable=self.underlying_id,
                as_of=on.isoformat(),
            ))
        return Ok(value)


def calculate_return(price: Decimal, recovery_rate: Decimal, is_absolute: bool) -> Decimal:
    """Return realised when the asset is replaced by its recovery value.

    Absolute: R - P (per unit of the asset).
    Relative: (R - P) / P (per unit of notional invested at P).
    """
    with localcontext(RETURNLEG_DECIMAL_CONTEXT):
        if is_absolute:
            return recovery_rate - price
        return (recovery_rate - price) / price
