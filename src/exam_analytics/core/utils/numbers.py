"""
Numeric helpers shared by the models, the scoring store and the analysis.

Scores and marks travel through JSON, where ``2`` and ``2.0`` should be the
same value and histogram keys should read ``"2"`` rather than ``"2.0"``.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Union

Number = Union[int, float]


def normalize_number(value: Number) -> Number:
    """Return ints for integral floats so 2.0 serializes as 2."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def coerce_number(value: Any) -> Optional[Number]:
    """
    Convert a bare number or numeric string to a finite number.

    Args:
        value: Candidate value from user input or an imported document

    Returns:
        The normalized number, or None if the value is not a finite number.
        Booleans are rejected even though they are ints in Python.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return normalize_number(number)


def format_number(value: Number) -> str:
    """String form used for response strings and histogram keys."""
    return str(normalize_number(value))


def safe_pct(numerator: Number, denominator: Number) -> float:
    """
    Percentage clamped to [0, 100].

    A zero or negative denominator, or any non-finite result, yields 0.
    """
    if denominator <= 0:
        return 0.0
    pct = (numerator / denominator) * 100
    if not math.isfinite(pct):
        return 0.0
    return float(min(max(pct, 0.0), 100.0))
