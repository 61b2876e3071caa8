"""Decimal context, tolerances and the refined scalar types of a leg.

Balances, prices and scale factors are Decimal and every arithmetic
step runs under RETURNLEG_DECIMAL_CONTEXT.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import (
    ROUND_HALF_EVEN,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from typing import final

from returnleg.core.result import Err, Ok

RETURNLEG_DECIMAL_CONTEXT = Context(
    prec=28,
    rounding=ROUND_HALF_EVEN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

ZERO = Decimal("0")
ONE = Decimal("1")

# Balances may dip this far below zero from round-off in upstream
# amortization data; anything lower is a contract violation.
BALANCE_TOLERANCE = Decimal("1E-15")

# Scale factors within this distance of 1 are treated as unscaled.
UNIT_SCALE_TOLERANCE = Decimal("1E-14")


def almost_one(x: Decimal) -> bool:
    return abs(x - ONE) < UNIT_SCALE_TOLERANCE


@final
@dataclass(frozen=True, slots=True)
class PositiveDecimal:
    """Finite Decimal > 0 (initial prices)."""

    value: Decimal

    def __post_init__(self) -> None:
        match PositiveDecimal._check(self.value):
            case Err(reason):
                raise TypeError(reason)

    @staticmethod
    def _check(raw: object) -> Ok[Decimal] | Err[str]:
        if not isinstance(raw, Decimal):
            return Err(f"PositiveDecimal requires Decimal, got {type(raw).__name__}")
        if not raw.is_finite() or raw <= ZERO:
            return Err(f"PositiveDecimal requires finite > 0, got {raw}")
        return Ok(raw)

    @staticmethod
    def parse(raw: Decimal) -> Ok[PositiveDecimal] | Err[str]:
        return PositiveDecimal._check(raw).map(lambda v: PositiveDecimal(value=v))


@final
@dataclass(frozen=True, slots=True)
class NonEmptyStr:
    """Identifier or currency code; blank strings are rejected."""

    value: str

    def __post_init__(self) -> None:
        if not self.value.strip():
            raise TypeError(f"NonEmptyStr requires non-blank string, got {self.value!r}")

    @staticmethod
    def parse(raw: str) -> Ok[NonEmptyStr] | Err[str]:
        if not raw.strip():
            return Err(f"NonEmptyStr requires non-blank string, got {raw!r}")
        return Ok(NonEmptyStr(value=raw))
