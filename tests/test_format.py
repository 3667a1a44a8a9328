from __future__ import annotations

import math

import pytest

from pylaptime._format import format_duration


def test_zero_is_first_lap_sentinel() -> None:
    assert format_duration(0) == "0.00"


@pytest.mark.parametrize(
    ("ms", "expected"),
    [
        (1200, "1.20"),
        (1200.0, "1.20"),
        (501, "0.50"),
        (59999, "60.00"),
        (12345, "12.35"),
        (99989, "99.99"),
    ],
)
def test_two_decimal_seconds(ms: float, expected: str) -> None:
    assert format_duration(ms) == expected


def test_rounds_half_away_from_zero() -> None:
    assert format_duration(1005) == "1.01"
    assert format_duration(1004) == "1.00"
    assert format_duration(2015) == "2.02"


@pytest.mark.parametrize("ms", [99990, 99991, 99999, 100_000, 3_600_000])
def test_ceiling(ms: float) -> None:
    assert format_duration(ms) == "99.99"


def test_below_ceiling_is_not_clipped() -> None:
    assert format_duration(99_000) == "99.00"


def test_invalid_inputs_are_clamped() -> None:
    assert format_duration(-250) == "0.00"
    assert format_duration(math.nan) == "0.00"
    assert format_duration(math.inf) == "99.99"


def test_negative_zero_has_no_sign() -> None:
    assert format_duration(-0.0) == "0.00"
