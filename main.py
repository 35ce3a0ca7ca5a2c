from __future__ import annotations

import argparse
from dataclasses import asdict
import json
import logging
from pathlib import Path
import sys
from typing import Any

from chartgeom.adapters import normalize_bar_datasets, normalize_points
from chartgeom.bars import layout_bar_chart
from chartgeom.config import ChartConfig, load_chart_config
from chartgeom.errors import ChartConfigError, ChartDataError
from chartgeom.guides import gridline_positions
from chartgeom.model import AxisScale, ValueRange
from chartgeom.path import ClosePath, LineTo, MoveTo, QuadCurveTo, build_path, point_at
from chartgeom.scales import bar_chart_y_scale, compute, generate_ticks, line_chart_y_scale, tick_labels
from chartgeom.selection import resolve_selection

LOGGER = logging.getLogger("chartgeom.cli")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="chartgeom")
    parser.add_argument("--config", type=Path, default=None, help="Chart settings TOML ([axis], [line], [bar]).")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    scale = sub.add_parser("scale", help="Print a nice axis scale for {min, max} or {values}.")
    scale.add_argument("input", type=Path)

    line = sub.add_parser("line", help="Print the line path, y-axis scale and optional selection.")
    line.add_argument("input", type=Path)

    bars = sub.add_parser("bars", help="Print stacked bar layout for a bar chart.")
    bars.add_argument("input", type=Path)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    try:
        config = load_chart_config(args.config) if args.config is not None else ChartConfig()
        payload = json.loads(args.input.read_text(encoding="utf-8"))
        if args.command == "scale":
            out = _scale_command(payload, config)
        elif args.command == "line":
            out = _line_command(payload, config)
        else:
            out = _bars_command(payload, config)
    except (ChartConfigError, ChartDataError, KeyError, ValueError, OSError) as exc:
        LOGGER.error("%s", exc)
        return 2
    print(json.dumps(out, indent=2))
    return 0


def _scale_command(payload: dict[str, Any], config: ChartConfig) -> dict[str, Any]:
    if "values" in payload:
        value_range = ValueRange.of(float(v) for v in payload["values"])
    else:
        value_range = ValueRange(float(payload["min"]), float(payload["max"]))
    scale = compute(
        value_range,
        int(payload.get("max_ticks", config.axis.max_ticks)),
        override_interval=config.axis.interval_override,
        override_range=config.axis.override_range(),
    )
    return _scale_json(scale)


def _line_command(payload: dict[str, Any], config: ChartConfig) -> dict[str, Any]:
    points = normalize_points(payload["y"], x=payload.get("x"))
    width = float(payload.get("width", 320.0))
    height = float(payload.get("height", 200.0))
    scale_x = ValueRange.of(p.x_value for p in points)
    scale_y = line_chart_y_scale(
        points,
        config.axis.max_ticks,
        override_interval=config.axis.interval_override,
        override_range=config.axis.override_range(),
    )
    path = build_path(
        points,
        scale_x,
        scale_y.value_range,
        width,
        height,
        interpolation=config.line.interpolation,  # type: ignore[arg-type]
        close_shape=config.line.close_shape,
    )
    out: dict[str, Any] = {
        "scale": _scale_json(scale_y),
        "gridlines": gridline_positions(scale_y, height).tolist(),
        "segments": [_segment_json(seg) for seg in path],
    }
    if "pointer_x" in payload:
        result = resolve_selection(float(payload["pointer_x"]), points, scale_x, width)
        out["selection"] = asdict(result)
        out["selector_y"] = point_at(path, float(payload["pointer_x"]))
    return out


def _bars_command(payload: dict[str, Any], config: ChartConfig) -> dict[str, Any]:
    datasets = normalize_bar_datasets(payload["bars"])
    width = float(payload.get("width", 320.0))
    height = float(payload.get("height", 200.0))
    scale = bar_chart_y_scale(
        datasets,
        config.axis.max_ticks,
        override_interval=config.axis.interval_override,
        override_range=config.axis.override_range(),
    )
    geometries = layout_bar_chart(
        datasets,
        width,
        height,
        scale,
        label_offset_y=config.bar.label_view_offset[1],
        min_top_margin=config.bar.minimum_top_edge_label_margin,
        min_bottom_margin=config.bar.minimum_bottom_edge_label_margin,
    )
    return {"scale": _scale_json(scale), "bars": [asdict(g) for g in geometries]}


def _scale_json(scale: AxisScale) -> dict[str, Any]:
    return {**asdict(scale), "ticks": generate_ticks(scale).tolist(), "labels": tick_labels(scale)}


def _segment_json(seg: object) -> dict[str, Any]:
    if isinstance(seg, MoveTo):
        return {"op": "move", "point": list(seg.point)}
    if isinstance(seg, LineTo):
        return {"op": "line", "point": list(seg.point)}
    if isinstance(seg, QuadCurveTo):
        return {"op": "quad", "point": list(seg.point), "control": list(seg.control)}
    if isinstance(seg, ClosePath):
        return {"op": "close"}
    raise TypeError(f"unknown path segment: {seg!r}")


if __name__ == "__main__":
    sys.exit(main())
