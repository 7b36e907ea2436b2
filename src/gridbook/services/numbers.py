"""Numeric helpers shared by the calculation services."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int = 2) -> float:
    """Round ``value`` to ``places`` decimals, halves away from zero.

    Works on the shortest decimal representation of the float, so
    ``round_half_up(0.125) == 0.13`` where the builtin ``round`` gives 0.12.
    Non-finite values are returned unchanged.
    """

    if not math.isfinite(value):
        return value
    exact = Decimal(repr(float(value)))
    if exact.as_tuple().exponent >= -places:
        return float(value)
    quantum = Decimal(1).scaleb(-places)
    return float(exact.quantize(quantum, rounding=ROUND_HALF_UP))


__all__ = ["round_half_up"]
