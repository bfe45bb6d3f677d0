"""Tests for lib/result.py - Result type for monadic error handling."""

import pytest

from rosa_lifecycle.lib.result import Err, Ok, map_err, map_ok


class TestOkErr:
    """Tests for Ok and Err constructors."""

    def test_ok_holds_value(self) -> None:
        result = Ok(42)
        assert result.value == 42

    def test_err_holds_error(self) -> None:
        result = Err("something went wrong")
        assert result.error == "something went wrong"

    def test_ok_and_err_are_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Ok(1).value = 2  # type: ignore[misc]

    def test_pattern_matching(self) -> None:
        match Err("boom"):
            case Ok(_):
                pytest.fail("matched Ok")
            case Err(error):
                assert error == "boom"


class TestCombinators:
    """Tests for map_ok and map_err."""

    def test_map_ok_transforms_success(self) -> None:
        assert map_ok(Ok(2), lambda v: v * 10) == Ok(20)

    def test_map_ok_leaves_error(self) -> None:
        assert map_ok(Err("e"), lambda v: v * 10) == Err("e")

    def test_map_err_transforms_error(self) -> None:
        assert map_err(Err("e"), str.upper) == Err("E")

    def test_map_err_leaves_success(self) -> None:
        assert map_err(Ok(1), str.upper) == Ok(1)
