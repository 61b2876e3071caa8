"""Tests for returnleg.instrument.return_leg -- schedules and leg terms."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from itertools import pairwise

import pytest
from hypothesis import given
from hypothesis import strategies as st

from returnleg.core.errors import ValidationError
from returnleg.core.result import Err, Ok, unwrap
from returnleg.instrument.return_leg import (
    AssetReturnLeg,
    ValuationPeriod,
    ValuationSchedule,
    normalize_value_dates,
    periodic_value_dates,
)

_EFF = date(2024, 1, 2)
_MAT = date(2025, 1, 2)


def _schedule() -> ValuationSchedule:
    return unwrap(ValuationSchedule.create((
        (date(2024, 4, 2), date(2024, 4, 4)),
        (date(2024, 7, 2), date(2024, 7, 5)),
        (date(2025, 1, 2), date(2025, 1, 6)),
    )))


class TestValuationPeriod:
    def test_payment_before_value_rejected(self) -> None:
        with pytest.raises(TypeError, match="payment_date"):
            ValuationPeriod(value_date=date(2024, 4, 2), payment_date=date(2024, 4, 1))

    def test_same_day_payment_allowed(self) -> None:
        p = ValuationPeriod(value_date=date(2024, 4, 2), payment_date=date(2024, 4, 2))
        assert p.payment_date == p.value_date


class TestValuationSchedule:
    def test_accessors(self) -> None:
        s = _schedule()
        assert s.count == 3
        assert len(s) == 3
        assert s.value_date_at(1) == date(2024, 7, 2)
        assert s.payment_date_at(2) == date(2025, 1, 6)
        assert [p.value_date for p in s] == [date(2024, 4, 2), date(2024, 7, 2), date(2025, 1, 2)]

    def test_duplicate_value_dates_rejected(self) -> None:
        result = ValuationSchedule.create((
            (date(2024, 4, 2), date(2024, 4, 4)),
            (date(2024, 4, 2), date(2024, 4, 5)),
        ))
        match result:
            case Err(ValidationError(code=code, fields=fields)):
                assert code == "INVALID_SCHEDULE"
                assert fields[0].path == "periods[1].value_date"
            case _:
                pytest.fail("Expected Err(ValidationError)")

    def test_decreasing_payment_dates_rejected(self) -> None:
        result = ValuationSchedule.create((
            (date(2024, 4, 2), date(2024, 4, 10)),
            (date(2024, 4, 3), date(2024, 4, 5)),
        ))
        match result:
            case Err(ValidationError(code=code, fields=fields)):
                assert code == "INVALID_SCHEDULE"
                assert [f.path for f in fields] == ["periods[1].payment_date"]
            case _:
                pytest.fail("Expected Err(ValidationError)")

    def test_shared_payment_date_accepted(self) -> None:
        result = ValuationSchedule.create((
            (date(2024, 4, 2), date(2024, 4, 5)),
            (date(2024, 4, 3), date(2024, 4, 5)),
        ))
        assert isinstance(result, Ok)

    def test_decreasing_payment_dates_raise_on_direct_construction(self) -> None:
        with pytest.raises(TypeError, match="payment_date"):
            ValuationSchedule(periods=(
                ValuationPeriod(date(2024, 4, 2), date(2024, 4, 10)),
                ValuationPeriod(date(2024, 4, 3), date(2024, 4, 5)),
            ))

    def test_payment_before_value_is_err_not_raise(self) -> None:
        result = ValuationSchedule.create(((date(2024, 4, 2), date(2024, 4, 1)),))
        assert isinstance(result, Err)
        assert result.error.fields[0].path == "periods[0].payment_date"

    def test_direct_construction_raises(self) -> None:
        with pytest.raises(TypeError):
            ValuationSchedule(periods=(
                ValuationPeriod(date(2024, 7, 2), date(2024, 7, 2)),
                ValuationPeriod(date(2024, 4, 2), date(2024, 4, 2)),
            ))

    def test_from_value_dates_applies_payment_lag(self) -> None:
        # 2024-06-28 is a Friday: a 2-day lag pays on Tuesday 2024-07-02.
        s = ValuationSchedule.from_value_dates(
            [date(2024, 3, 28), date(2024, 6, 28)],
            effective=date(2024, 1, 2), maturity=date(2024, 9, 30), payment_lag=2,
        )
        assert s[1] == ValuationPeriod(date(2024, 6, 28), date(2024, 7, 2))
        assert s[-1].payment_date == date(2024, 9, 30)


class TestNormalizeValueDates:
    def test_no_value_dates_gives_single_final(self) -> None:
        assert normalize_value_dates(None, 0, _EFF, _MAT) == (_MAT,)

    def test_final_value_date_lags_maturity(self) -> None:
        # Maturity Monday 2024-07-01, lag 1 => final value date Friday 2024-06-28.
        out = normalize_value_dates(None, 1, _EFF, date(2024, 7, 1))
        assert out == (date(2024, 6, 28),)

    def test_rolls_filters_dedups_and_sorts(self) -> None:
        raw = [
            date(2024, 6, 15),   # Saturday -> Monday 2024-06-17
            date(2024, 6, 17),   # duplicate after rolling
            date(2023, 12, 1),   # before effective
            date(2026, 1, 1),    # after maturity
            date(2024, 3, 1),
        ]
        out = normalize_value_dates(raw, 0, _EFF, _MAT, "FOLLOWING")
        assert out == (date(2024, 3, 1), date(2024, 6, 17), _MAT)

    @given(st.lists(st.dates(min_value=date(2023, 1, 1), max_value=date(2026, 1, 1)), max_size=20))
    def test_strictly_increasing_and_inside_leg(self, raw: list[date]) -> None:
        out = normalize_value_dates(raw, 2, _EFF, _MAT)
        assert all(a < b for a, b in pairwise(out))
        assert all(_EFF < d for d in out)
        assert out[-1] == normalize_value_dates(None, 2, _EFF, _MAT)[0]


class TestPeriodicValueDates:
    def test_quarterly(self) -> None:
        out = periodic_value_dates(date(2024, 1, 31), date(2024, 12, 31), 3)
        assert out == (
            date(2024, 4, 30), date(2024, 7, 31), date(2024, 10, 31), date(2024, 12, 31),
        )

    def test_non_positive_months_rejected(self) -> None:
        with pytest.raises(TypeError):
            periodic_value_dates(_EFF, _MAT, 0)


class TestAssetReturnLeg:
    def test_create_ok(self) -> None:
        leg = unwrap(AssetReturnLeg.create(
            "US0378331005", _EFF, _MAT, "USD", Decimal("101.5"), _schedule(),
        ))
        assert leg.underlying_id.value == "US0378331005"
        assert leg.initial_price.value == Decimal("101.5")
        assert leg.resetting_notional is False

    def test_create_collects_all_violations(self) -> None:
        result = AssetReturnLeg.create("", _EFF, _EFF, "", Decimal("-1"), _schedule())
        match result:
            case Err(ValidationError(code="INVALID_RETURN_LEG", fields=fields)):
                paths = {f.path for f in fields}
                assert paths == {"underlying_id", "currency", "initial_price", "maturity_date"}
            case _:
                pytest.fail("Expected INVALID_RETURN_LEG")

    def test_first_value_date_must_follow_effective(self) -> None:
        result = AssetReturnLeg.create(
            "XS1", date(2024, 4, 2), _MAT, "USD", Decimal("1"), _schedule(),
        )
        assert isinstance(result, Err)
        assert result.error.fields[0].path == "valuation_schedule.periods[0].value_date"

    def test_empty_schedule_rejected(self) -> None:
        result = AssetReturnLeg.create(
            "XS1", _EFF, _MAT, "USD", Decimal("1"), ValuationSchedule(periods=()),
        )
        assert isinstance(result, Err)

    def test_nan_price_rejected(self) -> None:
        result = AssetReturnLeg.create("XS1", _EFF, _MAT, "USD", Decimal("NaN"), _schedule())
        assert isinstance(result, Err)

    def test_preceding_value_date(self) -> None:
        leg = unwrap(AssetReturnLeg.create("XS1", _EFF, _MAT, "USD", Decimal("1"), _schedule()))
        assert leg.preceding_value_date(date(2024, 3, 1)) == _EFF
        assert leg.preceding_value_date(date(2024, 4, 2)) == _EFF
        assert leg.preceding_value_date(date(2024, 4, 3)) == date(2024, 4, 2)
        assert leg.preceding_value_date(date(2030, 1, 1)) == date(2025, 1, 2)

    def test_create_returns_ok_instance(self) -> None:
        assert isinstance(
            AssetReturnLeg.create("XS1", _EFF, _MAT, "USD", Decimal("1"), _schedule()), Ok,
        )
