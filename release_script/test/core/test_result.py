from __future__ import annotations

import pytest

from release_script.core.result import Err, Ok, Result


def _halve(n: int) -> Result[int, str]:
    if n % 2:
        return Err(f"{n} is odd")
    return Ok(n // 2)


def test_ok_unwrap_and_map() -> None:
    assert Ok(4).unwrap() == 4
    assert Ok(2).map(lambda n: n * 10) == Ok(20)


def test_err_unwrap_raises() -> None:
    with pytest.raises(ValueError, match="boom"):
        Err("boom").unwrap()


def test_err_map_passes_error_through() -> None:
    err: Err[str] = Err("boom")
    assert err.map(lambda n: n + 1) is err


def test_pattern_matching() -> None:
    match _halve(3):
        case Ok(value):
            pytest.fail(f"unexpected value {value}")
        case Err(message):
            assert message == "3 is odd"
