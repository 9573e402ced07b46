# spansync/validators.py

import math
from typing import Any


def is_finite_number(value: Any) -> bool:
    """
    Return True for real ints/floats that are not NaN or infinite.
    bool is rejected even though it subclasses int.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def valid_match_range(start: Any, end: Any) -> bool:
    return is_finite_number(start) and is_finite_number(end) and end >= start


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))

