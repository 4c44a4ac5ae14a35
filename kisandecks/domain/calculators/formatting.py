"""Number formatting for calculator output (Indian digit grouping, rupee amounts)"""

import math
from typing import Union

Number = Union[int, float]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, as the web client expects. Overflowed figures show as 0"""
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def group_indian(whole: int) -> str:
    """Group digits the Indian way: 1,05,500 and 12,34,56,789"""
    digits = str(abs(whole))
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])
    return f"-{digits}" if whole < 0 else digits


def format_number(value: Number) -> str:
    """Plain number text without a trailing .0"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_grouped(value: Number) -> str:
    """Indian-grouped number with up to three decimals"""
    if not math.isfinite(value):
        value = 0
    text = f"{abs(value):.3f}"
    whole, fraction = text.split(".")
    fraction = fraction.rstrip("0")
    grouped = group_indian(int(whole))
    if fraction:
        grouped = f"{grouped}.{fraction}"
    if value < 0 and text.strip("0.") != "":
        grouped = f"-{grouped}"
    return grouped


def rupees(value: Number) -> str:
    return f"₹{format_grouped(value)}"


def fixed(value: float, digits: int) -> str:
    return f"{value:.{digits}f}"
