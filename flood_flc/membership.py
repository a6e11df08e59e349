"""
Membership functions for the flood-risk fuzzifier.

Two monotonic shapes cover every linguistic term used by the engine:

    is_low     falling ramp: 1.0 at/below `low`, 0.0 at/above `high`
    is_middle  triangle/trapezoid: 0.0 outside (`low`, `high`), 1.0 on the
               plateau [`peak_low`, `peak_high`]

Both are total over floats. Results are clamped to [0.0, 1.0], degenerate
spans collapse to step functions, and NaN yields 0.0.
"""

import math
from typing import Optional


def _clamp(degree: float) -> float:
    return max(0.0, min(1.0, degree))


def is_low(x: float, low: float, high: float) -> float:
    """
    Degree to which `x` is "low" on a falling ramp.

    Args:
        x (float): The crisp sensor reading.
        low (float): Breakpoint at or below which membership is 1.0.
        high (float): Breakpoint at or above which membership is 0.0.

    Returns:
        float: The degree of membership, from 0.0 to 1.0.
    """
    x = float(x)
    if math.isnan(x):
        return 0.0
    if x <= low:
        return 1.0
    if x >= high:
        return 0.0
    # low < x < high implies high - low > 0
    return _clamp((high - x) / (high - low))


def is_middle(
    x: float,
    low: float,
    peak_low: float,
    high: float,
    peak_high: Optional[float] = None,
) -> float:
    """
    Degree to which `x` sits in the middle band of a trapezoid.

    With `peak_high` omitted the plateau has zero width and the shape is a
    triangle peaking at `peak_low`.

    Args:
        x (float): The crisp sensor reading.
        low (float): Left foot (membership 0.0 at and below).
        peak_low (float): Start of the plateau (membership 1.0).
        high (float): Right foot (membership 0.0 at and above).
        peak_high (float, optional): End of the plateau. Defaults to `peak_low`.

    Returns:
        float: The degree of membership, from 0.0 to 1.0.
    """
    if peak_high is None:
        peak_high = peak_low
    x = float(x)
    if math.isnan(x):
        return 0.0
    if x <= low or x >= high:
        return 0.0
    if peak_low <= x <= peak_high:
        return 1.0
    # rising edge
    if x < peak_low:
        return _clamp((x - low) / (peak_low - low))
    # falling edge
    return _clamp((high - x) / (high - peak_high))
