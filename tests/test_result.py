"""Tests for returnleg.core.result -- Ok/Err values."""

from __future__ import annotations

import dataclasses

import pytest
from hypothesis import given
from hypothesis import strategies as st

from returnleg.core.result import Err, Ok, unwrap


class TestOkErr:
    def test_ok_is_frozen(self) -> None:
        ok = Ok(42)
        with pytest.raises(dataclasses.FrozenInstanceError):
            ok.value = 99  # type: ignore[misc]

    def test_pattern_match(self) -> None:
        match Err("fail"):
            case Ok(_):
                pytest.fail("Should match Err")
            case Err(e):
                assert e == "fail"

    @given(st.integers())
    def test_map_applies_to_ok_only(self, n: int) -> None:
        assert Ok(n).map(lambda v: v * 2) == Ok(n * 2)
        assert Err("x").map(lambda v: v * 2) == Err("x")

    def test_map_err_applies_to_err_only(self) -> None:
        assert Err("x").map_err(str.upper) == Err("X")
        assert Ok(1).map_err(str.upper) == Ok(1)

    def test_unwrap(self) -> None:
        assert unwrap(Ok("v")) == "v"
        with pytest.raises(RuntimeError, match="boom"):
            unwrap(Err("boom"))
