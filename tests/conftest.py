"""Hypothesis profiles and shared fixtures for the return-leg tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from hypothesis import HealthCheck, settings

from returnleg.core.result import unwrap
from returnleg.core.types import FrozenMap
from returnleg.instrument.return_leg import AssetReturnLeg, ValuationSchedule
from returnleg.pricing.protocols import TabulatedPriceCalculator

settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.register_profile(
    "dev",
    max_examples=50,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.load_profile("dev")


@pytest.fixture
def quarterly_leg() -> AssetReturnLeg:
    """One-year fixed-notional leg on a bond, quarterly value dates, 2-day lag."""
    schedule = unwrap(ValuationSchedule.create((
        (date(2020, 4, 1), date(2020, 4, 3)),
        (date(2020, 7, 1), date(2020, 7, 3)),
        (date(2020, 10, 1), date(2020, 10, 5)),
        (date(2021, 1, 4), date(2021, 1, 6)),
    )))
    return unwrap(AssetReturnLeg.create(
        "XS0000000001", date(2020, 1, 1), date(2021, 1, 6), "USD",
        Decimal("0.98"), schedule,
    ))


@pytest.fixture
def quarterly_prices() -> TabulatedPriceCalculator:
    return TabulatedPriceCalculator(
        underlying_id="XS0000000001",
        prices=unwrap(FrozenMap.create({
            date(2020, 1, 1): Decimal("0.98"),
            date(2020, 4, 1): Decimal("1.01"),
            date(2020, 7, 1): Decimal("0.97"),
            date(2020, 10, 1): Decimal("0.99"),
            date(2021, 1, 4): Decimal("1.00"),
        })),
    )
