"""
Rounding and guarded division helpers.

Every ratio in the statistics goes through ``safe_divide`` so that a zero or
negative denominator produces "no data" (None) instead of an infinity or NaN.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from .constants import DECIMAL_PLACES

Number = Union[int, float, Decimal]

_QUANTUM = Decimal(1).scaleb(-DECIMAL_PLACES)


def round2(value: Optional[Number]) -> Optional[float]:
    """
    Round to two decimal places, half away from zero.

    Works from the decimal representation of the value, so 10.255 becomes
    10.26 even though the float is slightly below it.

    Examples:
        >>> round2(10.256)
        10.26
        >>> round2(None) is None
        True
    """
    if value is None:
        return None
    try:
        quantized = Decimal(str(value)).quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None
    if not quantized.is_finite():
        return None
    return float(quantized)


def round2_or_zero(value: Optional[Number]) -> float:
    rounded = round2(value)
    return rounded if rounded is not None else 0.0


def safe_divide(numerator: Optional[Number], denominator: Optional[Number]) -> Optional[float]:
    """
    Divide, returning None unless the denominator is strictly positive.

    Examples:
        >>> safe_divide(10, 4)
        2.5
        >>> safe_divide(10, 0) is None
        True
    """
    if numerator is None or denominator is None:
        return None
    if denominator <= 0:
        return None
    return float(numerator) / float(denominator)
