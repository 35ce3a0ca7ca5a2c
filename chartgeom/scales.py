from __future__ import annotations

from decimal import Decimal, InvalidOperation
import logging
import math
import sys
from typing import Callable, Iterable

import numpy as np

from chartgeom.model import AxisScale, BarDataSet, DataPoint, RangeOverride, ValueRange

LOGGER = logging.getLogger(__name__)

NICE_MULTIPLIERS = (1, 2, 5, 10)
DEFAULT_MAX_TICKS = 10
# Bar charts always show at least this much positive headroom.
MIN_BAR_AXIS_MAX = 0.1
_SNAP_TOLERANCE = 1e-9
# Largest {1, 2, 5} x 10^k below the float maximum.
_MAX_NICE_INTERVAL = 1e308


class AxisScaler:
    """Computes a readable axis scale (nice interval, outward-snapped bounds)."""

    def __init__(
        self,
        max_ticks: int = DEFAULT_MAX_TICKS,
        *,
        override_interval: float | None = None,
        override_range: RangeOverride | None = None,
    ) -> None:
        self.max_ticks = max_ticks
        self.override_interval = override_interval
        self.override_range = override_range

    def compute(self, value_range: ValueRange) -> AxisScale:
        return compute(
            value_range,
            self.max_ticks,
            override_interval=self.override_interval,
            override_range=self.override_range,
        )



def compute(
    value_range: ValueRange,
    max_ticks: int,
    override_interval: float | None = None,
    override_range: RangeOverride | ValueRange | None = None,
) -> AxisScale:
    if override_range is not None:
        if isinstance(override_range, ValueRange):
            override_range = RangeOverride(min=override_range.min, max=override_range.max)
        value_range = override_range.apply(value_range)
    ticks = max(1, int(max_ticks))
    lo, hi = value_range.min, value_range.max

    interval = _usable_interval(override_interval, lo, hi)
    if interval is None:
        if hi > lo:
            raw_step = (hi - lo) / ticks
            if not math.isfinite(raw_step):
                raw_step = hi / ticks - lo / ticks
        else:
            raw_step = max(abs(lo), 1.0) / ticks
        interval = nice_interval(raw_step)

    if hi == lo:
        # Centre a full interval on the value before snapping outward.
        lo = _finite(lo - interval * 0.5)
        hi = _finite(hi + interval * 0.5)

    axis_min = _snap(lo, interval, math.floor)
    axis_max = _snap(hi, interval, math.ceil)
    tick_count = int(round(axis_max / interval - axis_min / interval)) + 1
    return AxisScale(min=axis_min, max=axis_max, interval=interval, tick_count=tick_count)


def nice_interval(raw_step: float) -> float:
    """Smallest value of the form {1, 2, 5, 10} x 10^k that is >= `raw_step`.

    Steps beyond the float range resolve to the largest representable nice
    interval.
    """
    if math.isnan(raw_step) or raw_step <= 0:
        raw_step = 1e-6
    if raw_step >= _MAX_NICE_INTERVAL:
        return _MAX_NICE_INTERVAL
    exp = math.floor(math.log10(raw_step))
    for mult in NICE_MULTIPLIERS:
        candidate = float(Decimal(mult).scaleb(exp))
        if candidate >= raw_step * (1.0 - _SNAP_TOLERANCE):
            return min(candidate, _MAX_NICE_INTERVAL)
    return min(float(Decimal(1).scaleb(exp + 1)), _MAX_NICE_INTERVAL)


def line_chart_y_scale(
    points: Iterable[DataPoint],
    max_ticks: int = DEFAULT_MAX_TICKS,
    *,
    override_interval: float | None = None,
    override_range: RangeOverride | None = None,
) -> AxisScale:
    value_range = ValueRange.of(p.y_value for p in points)
    return compute(value_range, max_ticks, override_interval=override_interval, override_range=override_range)


def bar_chart_y_scale(
    datasets: Iterable[BarDataSet],
    max_ticks: int = DEFAULT_MAX_TICKS,
    *,
    override_interval: float | None = None,
    override_range: RangeOverride | None = None,
) -> AxisScale:
    sets = list(datasets)
    lo = min((d.negative_y_value for d in sets), default=0.0)
    hi = max((d.positive_y_value for d in sets), default=0.0)
    value_range = ValueRange(min(lo, 0.0), max(hi, MIN_BAR_AXIS_MAX))
    return compute(value_range, max_ticks, override_interval=override_interval, override_range=override_range)


def generate_ticks(scale: AxisScale) -> np.ndarray:
    step = scale.interval
    # Count in whole intervals so values like -4.44e-16 land on 0.
    ticks = (np.rint(scale.min / step) + np.arange(scale.tick_count, dtype=np.float64)) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * _SNAP_TOLERANCE)] = 0.0
    return np.clip(ticks, scale.min, scale.max)


def tick_labels(scale: AxisScale) -> list[str]:
    return [format_tick(float(v), scale.interval) for v in generate_ticks(scale)]


def format_tick(value: float, interval: float | None = None) -> str:
    """Axis label for `value` with as many decimals as `interval` needs.

    Very large or very small magnitudes, and labels on sub-1e-4 intervals,
    switch to scientific notation.
    """
    if not math.isfinite(value):
        return str(value)
    if interval is not None and abs(value) <= interval * _SNAP_TOLERANCE:
        value = 0.0
    magnitude = abs(value)
    if magnitude and (magnitude >= 1e6 or magnitude < 1e-6 or (interval is not None and interval < 1e-4)):
        return f"{value:.4e}"
    places = 6 if interval is None else _interval_decimals(interval)
    try:
        text = format(Decimal(repr(value)).quantize(Decimal(1).scaleb(-places)), "f")
    except InvalidOperation:
        text = repr(value)
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _usable_interval(interval: float | None, lo: float, hi: float) -> float | None:
    if interval is None:
        return None
    try:
        value = float(interval)
    except (TypeError, ValueError):
        value = math.nan
    if not math.isfinite(value) or value <= 0:
        LOGGER.warning("ignoring axis interval override %r; deriving a nice interval", interval)
        return None
    if not math.isfinite(hi / value - lo / value):
        LOGGER.warning("ignoring axis interval override %r; too fine for range %g..%g", interval, lo, hi)
        return None
    return value


def _snap(value: float, interval: float, rounding: Callable[[float], int]) -> float:
    quotient = value / interval
    if not math.isfinite(quotient):
        return _finite(value)
    nearest = round(quotient)
    if abs(quotient - nearest) <= _SNAP_TOLERANCE * max(1.0, abs(quotient)):
        quotient = float(nearest)
    snapped = rounding(quotient) * interval
    if not math.isfinite(snapped):
        return _finite(value)
    # Keep values like 0.30000000000000004 off the axis labels.
    try:
        return float(Decimal(repr(snapped)).quantize(Decimal(1).scaleb(-_interval_decimals(interval) - 2)))
    except InvalidOperation:
        return float(snapped)


def _finite(value: float) -> float:
    return max(-sys.float_info.max, min(sys.float_info.max, value))


def _interval_decimals(interval: float) -> int:
    if not math.isfinite(interval) or interval <= 0:
        return 6
    exponent = Decimal(repr(interval)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exponent)))
