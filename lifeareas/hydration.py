"""Daily water intake estimate for the physical area."""

from __future__ import annotations

import math
import re

ML_PER_KG = 35

# leading decimal number, so "70kg" reads as 70
_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_weight(value: float | str | None) -> float | None:
    """Weight from user input, reading only its leading number. None if there is none."""
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    match = _LEADING_NUMBER.match(value)
    if match is None:
        return None
    return float(match.group())


def daily_water_ml(weight_kg: float | str | None) -> int:
    """35 ml per kg of body weight, halves rounded up. Invalid weight gives 0."""
    weight = parse_weight(weight_kg)
    if weight is None or not math.isfinite(weight) or weight <= 0:
        return 0
    return math.floor(weight * ML_PER_KG + 0.5)
