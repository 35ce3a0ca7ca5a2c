from __future__ import annotations

from dataclasses import asdict, dataclass, field
import math
from pathlib import Path
import tomllib
from typing import Any, Mapping

from chartgeom.errors import ChartConfigError
from chartgeom.model import RangeOverride
from chartgeom.path import INTERPOLATIONS


@dataclass(frozen=True)
class AxisSettings:
    max_ticks: int = 10
    interval_override: float | None = None
    min_override: float | None = None
    max_override: float | None = None

    def override_range(self) -> RangeOverride | None:
        if self.min_override is None and self.max_override is None:
            return None
        return RangeOverride(min=self.min_override, max=self.max_override)


@dataclass(frozen=True)
class LineChartSettings:
    interpolation: str = "smoothed"
    close_shape: bool = True
    allow_user_interaction: bool = True
    show_appear_animation: bool = True
    line_animation_duration: float = 1.4
    label_view_offset: tuple[float, float] = (0.0, -12.0)


@dataclass(frozen=True)
class BarChartSettings:
    allow_user_interaction: bool = True
    show_appear_animation: bool = True
    label_view_offset: tuple[float, float] = (0.0, -10.0)
    minimum_top_edge_label_margin: float = 0.0
    minimum_bottom_edge_label_margin: float = 10.0


@dataclass(frozen=True)
class ChartConfig:
    axis: AxisSettings = field(default_factory=AxisSettings)
    line: LineChartSettings = field(default_factory=LineChartSettings)
    bar: BarChartSettings = field(default_factory=BarChartSettings)


DEFAULT_AXIS_SETTINGS = AxisSettings()
DEFAULT_LINE_SETTINGS = LineChartSettings()
DEFAULT_BAR_SETTINGS = BarChartSettings()


def validate_axis_settings(overrides: Mapping[str, Any] | None = None) -> AxisSettings:
    """Validate and merge axis overrides against defaults."""

    raw = _merge(asdict(DEFAULT_AXIS_SETTINGS), overrides, section="axis")
    max_ticks = raw["max_ticks"]
    if isinstance(max_ticks, bool) or not isinstance(max_ticks, int) or max_ticks < 1:
        raise ChartConfigError("Setting `axis.max_ticks` must be a positive integer")
    interval = _optional_number(raw["interval_override"], "axis.interval_override")
    if interval is not None and interval <= 0:
        raise ChartConfigError("Setting `axis.interval_override` must be > 0")
    lo = _optional_number(raw["min_override"], "axis.min_override")
    hi = _optional_number(raw["max_override"], "axis.max_override")
    if lo is not None and hi is not None and hi < lo:
        raise ChartConfigError("Setting `axis.max_override` must be >= `axis.min_override`")
    return AxisSettings(max_ticks=max_ticks, interval_override=interval, min_override=lo, max_override=hi)


def validate_line_settings(overrides: Mapping[str, Any] | None = None) -> LineChartSettings:
    """Validate and merge line chart overrides against defaults."""

    raw = _merge(asdict(DEFAULT_LINE_SETTINGS), overrides, section="line")
    if raw["interpolation"] not in INTERPOLATIONS:
        raise ChartConfigError(f"Setting `line.interpolation` must be one of {', '.join(INTERPOLATIONS)}")
    for key in ("close_shape", "allow_user_interaction", "show_appear_animation"):
        _require_bool(raw[key], f"line.{key}")
    duration = _optional_number(raw["line_animation_duration"], "line.line_animation_duration")
    if duration is None or duration < 0:
        raise ChartConfigError("Setting `line.line_animation_duration` must be >= 0")
    return LineChartSettings(
        interpolation=str(raw["interpolation"]),
        close_shape=bool(raw["close_shape"]),
        allow_user_interaction=bool(raw["allow_user_interaction"]),
        show_appear_animation=bool(raw["show_appear_animation"]),
        line_animation_duration=duration,
        label_view_offset=_offset(raw["label_view_offset"], "line.label_view_offset"),
    )


def validate_bar_settings(overrides: Mapping[str, Any] | None = None) -> BarChartSettings:
    """Validate and merge bar chart overrides against defaults."""

    raw = _merge(asdict(DEFAULT_BAR_SETTINGS), overrides, section="bar")
    for key in ("allow_user_interaction", "show_appear_animation"):
        _require_bool(raw[key], f"bar.{key}")
    margins = {}
    for key in ("minimum_top_edge_label_margin", "minimum_bottom_edge_label_margin"):
        value = _optional_number(raw[key], f"bar.{key}")
        if value is None:
            raise ChartConfigError(f"Setting `bar.{key}` must be a number")
        margins[key] = value
    return BarChartSettings(
        allow_user_interaction=bool(raw["allow_user_interaction"]),
        show_appear_animation=bool(raw["show_appear_animation"]),
        label_view_offset=_offset(raw["label_view_offset"], "bar.label_view_offset"),
        **margins,
    )


def load_chart_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    try:
        with config_path.open("rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ChartConfigError(f"invalid chart config {config_path}: {exc}") from exc
    unknown = set(raw) - {"axis", "line", "bar"}
    if unknown:
        raise ChartConfigError(f"Unknown chart config section(s): {', '.join(sorted(unknown))}")
    return ChartConfig(
        axis=validate_axis_settings(raw.get("axis")),
        line=validate_line_settings(raw.get("line")),
        bar=validate_bar_settings(raw.get("bar")),
    )


def _merge(defaults: dict[str, Any], overrides: Mapping[str, Any] | None, *, section: str) -> dict[str, Any]:
    if overrides is None:
        return defaults
    if not isinstance(overrides, Mapping):
        raise ChartConfigError(f"Section `{section}` must be a table")
    for key, value in overrides.items():
        if key not in defaults:
            raise ChartConfigError(f"Unknown {section} setting: {key}")
        defaults[key] = value
    return defaults


def _optional_number(value: Any, name: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ChartConfigError(f"Setting `{name}` must be a number")
    if not math.isfinite(value):
        raise ChartConfigError(f"Setting `{name}` must be finite")
    return float(value)


def _require_bool(value: Any, name: str) -> None:
    if not isinstance(value, bool):
        raise ChartConfigError(f"Setting `{name}` must be true or false")


def _offset(value: Any, name: str) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ChartConfigError(f"Setting `{name}` must be a [x, y] pair")
    x = _optional_number(value[0], name)
    y = _optional_number(value[1], name)
    if x is None or y is None:
        raise ChartConfigError(f"Setting `{name}` must be a [x, y] pair")
    return (x, y)
