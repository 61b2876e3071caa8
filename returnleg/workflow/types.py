"""Activity and workflow payloads for return-leg projection.

All types: @final @dataclass(frozen=True, slots=True), serializable by
returnleg.workflow.converter. Prices cross the boundary as a snapshot
(FrozenMap date -> price) rather than a live calculator.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import final

from returnleg.core.types import FrozenMap
from returnleg.instrument.return_leg import AssetReturnLeg
from returnleg.pricing.balance import NotionalChangeEvent


class PaymentKind(Enum):
    """Concrete payment kinds reported by the projection."""

    PRICE_RETURN = "PriceReturn"
    REFERENCE_AMOUNT = "ReferenceAmount"
    RECOVERY_RETURN = "RecoveryReturn"


@final
@dataclass(frozen=True, slots=True)
class ProjectionInput:
    """A return leg plus the market snapshot needed to project its payments.

    When underlying_maturity is set the payments are projected onto
    recovery returns with a flat recovery_rate (zero if absent).
    """

    leg: AssetReturnLeg
    prices: FrozenMap[date, Decimal]
    from_date: date
    notional_changes: tuple[NotionalChangeEvent, ...] = ()
    default_settle_date: date | None = None
    underlying_maturity: date | None = None
    recovery_rate: Decimal | None = None


@final
@dataclass(frozen=True, slots=True)
class ProjectedPayment:
    """One payment with its amount resolved, or the reason it could not be."""

    kind: PaymentKind
    pay_date: date
    currency: str
    scale_factor: Decimal
    amount: Decimal | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if (self.amount is None) == (self.error is None):
            raise TypeError("ProjectedPayment requires exactly one of amount or error")


@final
@dataclass(frozen=True, slots=True)
class ProjectionOutput:
    """Projected payments in emission order, or an error for the whole leg."""

    leg_id: str
    payments: tuple[ProjectedPayment, ...] = ()
    truncated_by_default: bool = False
    error: str | None = None
