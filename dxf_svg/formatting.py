"""
Locale-independent number rendering for every numeric SVG attribute.
"""

import math
from decimal import Decimal

from .errors import GeometryError

MAX_FRACTION_DIGITS = 15
SIGNIFICANT_DIGITS = 15
FRACTION_QUANTUM = Decimal(1).scaleb(-MAX_FRACTION_DIGITS)


def format_number(value: float) -> str:
    """
    Render a number with '.' as decimal separator, at most 15 fractional digits,
    trailing zeros stripped but at least one fractional digit kept.

    >>> format_number(3)
    '3.0'
    >>> format_number(0.333333333333333456)
    '0.333333333333333'
    >>> format_number(1234.1)
    '1234.1'
    """
    value = float(value)
    if not math.isfinite(value):
        raise GeometryError(f"Cannot format non-finite value {value!r}")

    # round to the significant digits a double actually carries, then cap the fraction
    number = Decimal(f"{value:.{SIGNIFICANT_DIGITS}g}")
    if number.as_tuple().exponent < -MAX_FRACTION_DIGITS:
        number = number.quantize(FRACTION_QUANTUM)

    whole, _, fraction = format(number, "f").partition(".")
    fraction = fraction.rstrip("0") or "0"
    if whole == "-0" and fraction == "0":
        whole = "0"
    return f"{whole}.{fraction}"


def format_pair(x: float, y: float) -> str:
    return f"{format_number(x)} {format_number(y)}"
