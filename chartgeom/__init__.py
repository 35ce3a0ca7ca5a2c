from chartgeom.bars import FractionLayout, StackedBarGeometry, layout_bar_chart, layout_stacked_bar
from chartgeom.coordinates import to_pixel, to_value
from chartgeom.errors import ChartConfigError, ChartDataError
from chartgeom.model import (
    AxisScale,
    BarDataSet,
    BarFraction,
    DataPoint,
    LineDataSet,
    RangeOverride,
    SelectionResult,
    SelectionState,
    ValueRange,
)
from chartgeom.path import ChartPath, build_path, point_at
from chartgeom.scales import AxisScaler, compute, nice_interval
from chartgeom.selection import SelectionResolver, fractional_index, resolve_selection, snap_to_index

__all__ = [
    "AxisScale",
    "AxisScaler",
    "BarDataSet",
    "BarFraction",
    "ChartConfigError",
    "ChartDataError",
    "ChartPath",
    "DataPoint",
    "FractionLayout",
    "LineDataSet",
    "RangeOverride",
    "SelectionResolver",
    "SelectionResult",
    "SelectionState",
    "StackedBarGeometry",
    "ValueRange",
    "build_path",
    "compute",
    "fractional_index",
    "layout_bar_chart",
    "layout_stacked_bar",
    "nice_interval",
    "point_at",
    "resolve_selection",
    "snap_to_index",
    "to_pixel",
    "to_value",
]
