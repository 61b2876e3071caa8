"""Tests for returnleg.core.calendar -- weekend rolling and lags."""

from __future__ import annotations

from datetime import date, timedelta

from hypothesis import given
from hypothesis import strategies as st

from returnleg.core.calendar import add_business_days, adjust_date, is_business_day

_SAT = date(2024, 6, 15)
_SUN_MONTH_END = date(2024, 6, 30)


class TestAdjustDate:
    def test_following(self) -> None:
        assert adjust_date(_SAT, "FOLLOWING") == date(2024, 6, 17)

    def test_preceding(self) -> None:
        assert adjust_date(_SAT, "PRECEDING") == date(2024, 6, 14)

    def test_none(self) -> None:
        assert adjust_date(_SAT, "NONE") == _SAT

    def test_mod_following_stays_in_month(self) -> None:
        assert adjust_date(_SUN_MONTH_END, "FOLLOWING") == date(2024, 7, 1)
        assert adjust_date(_SUN_MONTH_END, "MOD_FOLLOWING") == date(2024, 6, 28)

    def test_business_day_unchanged(self) -> None:
        assert adjust_date(date(2024, 6, 14), "MOD_FOLLOWING") == date(2024, 6, 14)

    @given(st.dates(min_value=date(2000, 1, 1), max_value=date(2050, 12, 31)))
    def test_result_is_business_day(self, d: date) -> None:
        for conv in ("FOLLOWING", "PRECEDING", "MOD_FOLLOWING"):
            assert is_business_day(adjust_date(d, conv))


class TestAddBusinessDays:
    def test_skips_weekend(self) -> None:
        assert add_business_days(date(2024, 6, 28), 2) == date(2024, 7, 2)

    def test_backwards(self) -> None:
        assert add_business_days(date(2024, 7, 1), -1) == date(2024, 6, 28)

    def test_zero_is_identity(self) -> None:
        assert add_business_days(_SAT, 0) == _SAT

    @given(
        st.dates(min_value=date(2000, 1, 1), max_value=date(2050, 12, 31)),
        st.integers(min_value=1, max_value=30),
    )
    def test_forward_lands_on_business_day_after_start(self, d: date, n: int) -> None:
        out = add_business_days(d, n)
        assert out > d
        assert is_business_day(out)
        assert out - d <= timedelta(days=n + 2 * (n // 5 + 1))
