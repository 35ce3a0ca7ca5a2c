from __future__ import annotations

import numpy as np

from chartgeom.model import MIN_SPAN, ValueRange


def to_pixel(value: float, value_range: ValueRange, length: float) -> float:
    return (float(value) - value_range.min) / value_range.span * float(length)


def to_value(pixel: float, value_range: ValueRange, length: float) -> float:
    return float(pixel) / _guard_length(length) * value_range.span + value_range.min


def to_pixels(values: np.ndarray, value_range: ValueRange, length: float) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    return (arr - value_range.min) / value_range.span * float(length)


def to_screen_y(value: float, value_range: ValueRange, height: float) -> float:
    """Screen y (origin top-left, y down) for a data value on a vertical axis."""
    return float(height) - to_pixel(value, value_range, height)


def from_screen_y(y_pixel: float, value_range: ValueRange, height: float) -> float:
    return to_value(float(height) - float(y_pixel), value_range, height)


def _guard_length(length: float) -> float:
    length = float(length)
    if abs(length) < MIN_SPAN:
        return MIN_SPAN if length >= 0 else -MIN_SPAN
    return length
