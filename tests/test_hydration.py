"""Tests for lifeareas/hydration.py."""

import pytest

from lifeareas.hydration import daily_water_ml


@pytest.mark.parametrize(
    "weight, expected",
    [
        (70, 2450),
        ("70", 2450),
        (65.5, 2293),  # 2292.5 rounds up
        (0.1, 4),
        ("70kg", 2450),
        (" 70,5", 2450),  # stops at the comma
        ("1e2", 3500),
    ],
)
def test_daily_water(weight, expected):
    assert daily_water_ml(weight) == expected


@pytest.mark.parametrize("weight", [0, -3, "", "abc", "kg70", None, float("nan"), float("inf")])
def test_invalid_weight_gives_zero(weight):
    assert daily_water_ml(weight) == 0
