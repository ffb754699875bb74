"""Tests for shipit.core.result module."""

import pytest

from shipit.core.result import Err, Ok, Result


def test_ok_and_err_compare_by_payload() -> None:
    assert Ok("1.2.4") == Ok("1.2.4")
    assert Err("boom") == Err("boom")
    assert Ok("boom") != Err("boom")


def test_frozen() -> None:
    result = Ok(1)
    with pytest.raises(AttributeError):
        result.value = 2  # type: ignore[misc]


def test_pattern_matching() -> None:
    def describe(result: Result[str, str]) -> str:
        match result:
            case Ok(value):
                return f"ok {value}"
            case Err(error):
                return f"err {error}"

    assert describe(Ok("1.0.0")) == "ok 1.0.0"
    assert describe(Err("bad")) == "err bad"
