"""
Floating-point precision correction.

Unit conversions chained through multiplication and division leave noise in
the last few bits (``50.1300000000034`` instead of ``50.13``). These helpers
snap such values back to the nearest short decimal when the difference is
below a threshold, and leave legitimately long decimals untouched.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

__all__ = [
    "DEFAULT_THRESHOLD",
    "MAX_DECIMAL_PLACES",
    "PrecisionCorrector",
    "correct_all",
    "correct_precision_error",
]

DEFAULT_THRESHOLD = 1e-10
MAX_DECIMAL_PLACES = 15


def correct_precision_error(value: float, threshold: float = DEFAULT_THRESHOLD) -> float:
    """Snap a value to its shortest rounded form when within ``threshold`` of it.

    Decimal places are tried from 0 upward and the first match wins, so
    ``9.99999999997`` becomes ``10.0`` rather than ``9.99999999997``. A value
    that already equals its rounding at some precision is returned as is.

    Args:
        value: Value to normalize
        threshold: Largest difference treated as conversion noise. Values
            ``<= 0`` disable correction.

    Returns:
        The corrected value, or ``value`` unchanged when no rounding
        qualifies, the value is 0, NaN or infinite.

    Examples:
        >>> correct_precision_error(50.1300000000034)
        50.13
        >>> correct_precision_error(12.3456789)
        12.3456789
    """
    if threshold <= 0 or value == 0 or math.isnan(value) or math.isinf(value):
        return value

    for decimal_places in range(MAX_DECIMAL_PLACES + 1):
        rounded = round(value, decimal_places)
        delta = value - rounded
        if delta == 0:
            return value
        if abs(delta) < threshold:
            return rounded

    return value


def correct_all(values: Iterable[float], threshold: float = DEFAULT_THRESHOLD) -> list[float]:
    """Apply :func:`correct_precision_error` to each value, preserving order."""
    return [correct_precision_error(value, threshold) for value in values]


class PrecisionCorrector:
    """Precision correction bound to a fixed threshold."""

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        self.threshold = threshold

    def correct(self, value: float) -> float:
        return correct_precision_error(value, self.threshold)

    def correct_all(self, values: Iterable[float]) -> list[float]:
        return correct_all(values, self.threshold)
