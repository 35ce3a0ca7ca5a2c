from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Sequence

from chartgeom.bars import StackedBarGeometry
from chartgeom.coordinates import to_pixel
from chartgeom.model import DataPoint, SelectionResult, SelectionState, ValueRange
from chartgeom.path import ChartPath, Point, point_at

LOGGER = logging.getLogger(__name__)


def fractional_index(
    pointer_x: float,
    points: Sequence[DataPoint],
    scale_x: ValueRange,
    width: float,
) -> float:
    """Map a pointer x pixel to a fractional position in `points`.

    Pointers outside every bracket, including those right of the last point,
    fall back to 0.0.
    """
    x = float(pointer_x)
    pixels = [to_pixel(p.x_value, scale_x, width) for p in points]
    for i, current in enumerate(pixels):
        if x == current:
            return float(i)
        if i > 0:
            previous = pixels[i - 1]
            if previous < x < current:
                return (i - 1) + (x - previous) / (current - previous)
    return 0.0


def snap_to_index(fractional: float, count: int) -> int:
    """Round to the nearest index (ties round up), clamped to [0, count - 1]."""
    if count <= 0 or not math.isfinite(fractional):
        return 0
    base = math.floor(fractional)
    index = base + 1 if fractional - base >= 0.5 else base
    return int(max(0, min(count - 1, index)))


def resolve_selection(
    pointer_x: float,
    points: Sequence[DataPoint],
    scale_x: ValueRange,
    width: float,
) -> SelectionResult:
    fractional = fractional_index(pointer_x, points, scale_x, width)
    return SelectionResult(fractional_index=fractional, snapped_index=snap_to_index(fractional, len(points)))


def selector_position(
    path: ChartPath,
    points: Sequence[DataPoint],
    scale_x: ValueRange,
    width: float,
    selected_index: int,
    touching_x: float | None = None,
) -> Point | None:
    """Where the selector marker sits: under the finger while dragging, else on the selected point."""
    if not points or path.is_empty:
        return None
    if touching_x is None:
        index = max(0, min(len(points) - 1, int(selected_index)))
        x = to_pixel(points[index].x_value, scale_x, width)
    else:
        x = float(touching_x)
    y = point_at(path, x)
    if y is None:
        return None
    return (x, y)


@dataclass
class SelectionResolver:
    """Drag/release handling for one line chart layout pass."""

    points: Sequence[DataPoint]
    scale_x: ValueRange
    width: float
    path: ChartPath

    def drag(self, pointer_x: float, selected_index: int = 0) -> Point | None:
        return selector_position(self.path, self.points, self.scale_x, self.width, selected_index, touching_x=pointer_x)

    def release(self, pointer_x: float, state: SelectionState | None = None) -> SelectionResult:
        result = resolve_selection(pointer_x, self.points, self.scale_x, self.width)
        if state is not None and state.apply(result):
            LOGGER.debug("selection moved to index %d (fractional %.4f)", result.snapped_index, result.fractional_index)
        return result


def hit_test_bar(x: float, y: float, bars: Sequence[StackedBarGeometry]) -> int | None:
    for index, bar in enumerate(bars):
        left, top, width, height = bar.rect
        if left <= x <= left + width and top <= y <= top + height:
            return index
    return None


def toggle_bar_selection(current: int | None, tapped: int | None) -> int | None:
    """Tapping the selected bar clears the selection; tapping another selects it."""
    if tapped is None:
        return current
    if current == tapped:
        return None
    return tapped
