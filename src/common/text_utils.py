"""
Text Utilities

Lenient parsing helpers for loosely-typed product spreadsheet values.
"""

import math
import re
from typing import Any

_LEADING_FLOAT = re.compile(r'^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)')
_LEADING_INT = re.compile(r'^\s*([+-]?\d{1,9})')
_MARKUP_TAG = re.compile(r'<[^>]*>')


def parse_leading_float(value: Any, default: float = 0.0) -> float:
    """
    Parse a number the way spreadsheet exports tend to deliver it.

    Strings are read up to the first non-numeric character, so "19.99 USD"
    gives 19.99. Missing, non-numeric and non-finite values give the default.

    Examples:
        >>> parse_leading_float("19.99 USD")
        19.99
        >>> parse_leading_float("$19.99")
        0.0
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_FLOAT.match(value)
        if not match:
            return default
        number = float(match.group(1))
    else:
        return default

    if not math.isfinite(number):
        return default
    return number


def parse_leading_int(value: Any) -> int | None:
    """
    Parse an integer from an int, float or numeric-prefixed string.

    Returns None when nothing usable is found.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def strip_markup(text: str) -> str:
    """Remove HTML tags from text."""
    if not text:
        return text
    return _MARKUP_TAG.sub('', text)
