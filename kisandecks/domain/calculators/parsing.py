"""Lenient numeric parsing for calculator inputs"""

import math
import re
from typing import Any

# Leading decimal number, optionally signed, with an optional exponent
_NUMERIC_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_float_or(value: Any, default: float) -> float:
    """
    Read a calculator field as a float, falling back to default.

    Strings are read up to the first character that cannot continue a number,
    so "2.5 acre" gives 2.5. Missing, boolean, non-numeric, NaN, infinite and
    zero values all give the default.
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return default
    elif isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value.strip())
        if not match:
            return default
        try:
            number = float(match.group(0))
        except ValueError:
            return default
    else:
        return default

    if math.isnan(number) or math.isinf(number) or number == 0:
        return default
    return number
