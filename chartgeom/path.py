from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterator, Literal, Sequence, Union

import numpy as np

from chartgeom.coordinates import to_pixel, to_screen_y
from chartgeom.model import DataPoint, ValueRange


Interpolation = Literal["linear", "smoothed"]
INTERPOLATIONS: tuple[str, ...] = ("linear", "smoothed")
Point = tuple[float, float]


@dataclass(frozen=True)
class MoveTo:
    point: Point


@dataclass(frozen=True)
class LineTo:
    point: Point


@dataclass(frozen=True)
class QuadCurveTo:
    point: Point
    control: Point

    def evaluate(self, start: Point, t: float) -> Point:
        u = 1.0 - t
        x = u * u * start[0] + 2.0 * u * t * self.control[0] + t * t * self.point[0]
        y = u * u * start[1] + 2.0 * u * t * self.control[1] + t * t * self.point[1]
        return (x, y)


@dataclass(frozen=True)
class ClosePath:
    pass


PathSegment = Union[MoveTo, LineTo, QuadCurveTo, ClosePath]


@dataclass(frozen=True)
class ChartPath:
    """Abstract path in screen space (origin top-left, y down).

    `outline_length` counts the leading segments that trace the data points;
    anything after them is the closing contour added for area fills.
    """

    segments: tuple[PathSegment, ...] = ()
    outline_length: int = 0

    def __iter__(self) -> Iterator[PathSegment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @property
    def is_closed(self) -> bool:
        return bool(self.segments) and isinstance(self.segments[-1], ClosePath)

    def outline(self) -> tuple[PathSegment, ...]:
        return self.segments[: self.outline_length]


def midpoint(p0: Point, p1: Point) -> Point:
    return ((p0[0] + p1[0]) / 2.0, (p0[1] + p1[1]) / 2.0)


def control_point(a: Point, b: Point) -> Point:
    return (b[0], a[1])


def project_points(
    points: Sequence[DataPoint],
    scale_x: ValueRange,
    scale_y: ValueRange,
    width: float,
    height: float,
) -> list[Point]:
    return [
        (to_pixel(p.x_value, scale_x, width), to_screen_y(p.y_value, scale_y, height))
        for p in points
    ]


def build_path(
    points: Sequence[DataPoint],
    scale_x: ValueRange,
    scale_y: ValueRange,
    width: float,
    height: float,
    interpolation: Interpolation = "smoothed",
    close_shape: bool = False,
) -> ChartPath:
    if len(points) < 2:
        return ChartPath()
    pixels = project_points(points, scale_x, scale_y, width, height)

    segments: list[PathSegment] = [MoveTo(pixels[0])]
    for p0, p1 in zip(pixels, pixels[1:]):
        if interpolation == "smoothed":
            mid = midpoint(p0, p1)
            segments.append(QuadCurveTo(point=mid, control=control_point(mid, p0)))
            segments.append(QuadCurveTo(point=p1, control=control_point(mid, p1)))
        else:
            segments.append(LineTo(p1))
    outline_length = len(segments)

    if close_shape:
        segments.append(LineTo((float(width), float(height))))
        segments.append(LineTo((0.0, float(height))))
        segments.append(ClosePath())
    return ChartPath(segments=tuple(segments), outline_length=outline_length)


def point_at(path: ChartPath, x_pixel: float) -> float | None:
    """Return the y coordinate of the path outline at `x_pixel`.

    Positions left of the first point or right of the last one clamp to the
    nearest end point.
    """
    outline = path.outline()
    head = outline[0] if outline else None
    if not isinstance(head, MoveTo):
        return None
    x = float(x_pixel)
    first = start = head.point
    for seg in outline[1:]:
        if isinstance(seg, MoveTo):
            start = seg.point
            continue
        if isinstance(seg, ClosePath):
            continue
        end = seg.point
        if x == end[0]:
            return end[1]
        if x == start[0]:
            return start[1]
        if min(start[0], end[0]) < x < max(start[0], end[0]):
            if isinstance(seg, QuadCurveTo):
                t = _solve_quad_t(start[0], seg.control[0], end[0], x)
                return seg.evaluate(start, t)[1]
            t = (x - start[0]) / (end[0] - start[0])
            return start[1] + t * (end[1] - start[1])
        start = end

    if x < first[0]:
        return first[1]
    return start[1]


def flatten_path(path: ChartPath, samples_per_curve: int = 16) -> tuple[np.ndarray, np.ndarray]:
    """Sample the path outline into polyline vertices."""
    steps = max(1, int(samples_per_curve))
    xs: list[float] = []
    ys: list[float] = []
    start: Point | None = None
    for seg in path.outline():
        if isinstance(seg, MoveTo):
            start = seg.point
            xs.append(start[0])
            ys.append(start[1])
            continue
        if isinstance(seg, ClosePath) or start is None:
            continue
        if isinstance(seg, QuadCurveTo):
            for t in np.linspace(0.0, 1.0, steps + 1)[1:]:
                px, py = seg.evaluate(start, float(t))
                xs.append(px)
                ys.append(py)
        else:
            xs.append(seg.point[0])
            ys.append(seg.point[1])
        start = seg.point
    return np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64)


def _solve_quad_t(x0: float, cx: float, x1: float, x: float) -> float:
    # x(t) = a*t^2 + b*t + x0 with the control between the ends, so x(t) is monotone on [0, 1].
    a = x0 - 2.0 * cx + x1
    b = 2.0 * (cx - x0)
    c = x0 - x
    if abs(a) < 1e-12:
        if abs(b) < 1e-12:
            return 0.0
        return _clamp01(-c / b)
    disc = max(0.0, b * b - 4.0 * a * c)
    root = math.sqrt(disc)
    candidates = ((-b + root) / (2.0 * a), (-b - root) / (2.0 * a))
    for t in candidates:
        if -1e-9 <= t <= 1.0 + 1e-9:
            return _clamp01(t)
    return _clamp01(min(candidates, key=lambda t: abs(t - 0.5)))


def _clamp01(t: float) -> float:
    return max(0.0, min(1.0, t))
