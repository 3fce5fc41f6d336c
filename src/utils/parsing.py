"""
Utility functions for reading loosely formatted report values
"""

import math
import re
from typing import Any, Optional


_LEADING_FLOAT = re.compile(r'^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)')
_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def leading_float(value: Any) -> Optional[float]:
    """
    Parse the numeric prefix of a value such as "12.5 g/dL"

    Args:
        value: Raw value, usually a string with a unit suffix

    Returns:
        The parsed number, or None when the value has no numeric prefix
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None

    match = _LEADING_FLOAT.match(value)
    if not match:
        return None
    return float(match.group(1))


def leading_int(value: Any) -> Optional[int]:
    """
    Parse the integer prefix of a value such as "95 mg/dL"

    Parsing stops at the first non-digit, so "7,200" reads as 7 and
    "110.9" reads as 110.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(1))
