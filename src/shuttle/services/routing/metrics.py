"""Display-unit conversions for route distance and duration."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def _round_half_up(value: float, places: int) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)


def to_kilometers(meters: float) -> float:
    """Meters to kilometers, one decimal place."""
    return float(_round_half_up(max(0.0, meters) / 1000.0, 1))


def to_minutes(seconds: float) -> int:
    """Seconds to whole minutes, rounded to the nearest minute."""
    return int(_round_half_up(max(0.0, seconds) / 60.0, 0))
