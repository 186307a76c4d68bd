"""Dashboard-compatible value rounding."""

import math
import re
from decimal import ROUND_FLOOR, Decimal
from typing import Any

_HALF = Decimal("0.5")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _round_half_up_decimal(value: Decimal) -> Decimal:
    # Halves go toward +infinity: 2.5 -> 3, -2.5 -> -2
    return (value + _HALF).to_integral_value(rounding=ROUND_FLOOR)


def round_half_up(num: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(_round_half_up_decimal(Decimal(str(num))))


def round_value(num: float | None, decimals: int) -> float | None:
    """
    Round a value to a fixed number of decimal places.

    The value is taken at its shortest decimal representation before
    scaling, so 1.005 rounds to 1.01 at two decimals rather than
    falling victim to binary floating point error.

    Args:
        num: Value to round. None is passed through.
        decimals: Number of decimal places (0 rounds to an integer value).

    Returns:
        Rounded value, or None.
    """
    if num is None:
        return None
    if not math.isfinite(num):
        return num
    factor = Decimal(10) ** decimals
    scaled = Decimal(str(num)) * factor
    return float(_round_half_up_decimal(scaled) / factor)


def parse_decimals(raw: Any) -> int:
    """
    Parse a configured precision into an int.

    Numeric strings contribute their integer prefix ("2" -> 2, "3px" -> 3);
    anything unparsable, including None and the empty string, means 0.
    """
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else 0
    match = _INT_PREFIX.match(str(raw))
    return int(match.group(1)) if match else 0
