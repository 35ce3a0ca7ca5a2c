"""Appear-animation geometry as pure functions of host-supplied progress.

Timing and easing stay with the host; every function here takes `t` in
[0, 1] (clamped) and returns the geometry to draw at that instant.
"""

from __future__ import annotations

from dataclasses import replace

import numpy as np

from chartgeom.bars import StackedBarGeometry
from chartgeom.path import ChartPath, flatten_path


DEFAULT_BAR_DELAY_STEP = 0.1


def trim_polyline(xs: np.ndarray, ys: np.ndarray, t: float) -> tuple[np.ndarray, np.ndarray]:
    """Keep the first `t` of the polyline's arc length."""
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    progress = _clamp01(t)
    if xs.size < 2 or progress >= 1.0:
        return xs.copy(), ys.copy()
    seg_len = np.hypot(np.diff(xs), np.diff(ys))
    cum = np.concatenate(([0.0], np.cumsum(seg_len)))
    total = float(cum[-1])
    if total <= 0.0 or progress <= 0.0:
        return xs[:1].copy(), ys[:1].copy()
    target = progress * total
    # Last vertex whose distance along the line is <= target.
    k = int(np.searchsorted(cum, target, side="right")) - 1
    k = min(k, xs.size - 2)
    frac = (target - cum[k]) / seg_len[k] if seg_len[k] > 0 else 0.0
    end_x = xs[k] + frac * (xs[k + 1] - xs[k])
    end_y = ys[k] + frac * (ys[k + 1] - ys[k])
    return np.append(xs[: k + 1], end_x), np.append(ys[: k + 1], end_y)


def reveal_path(path: ChartPath, t: float, samples_per_curve: int = 16) -> tuple[np.ndarray, np.ndarray]:
    xs, ys = flatten_path(path, samples_per_curve=samples_per_curve)
    return trim_polyline(xs, ys, t)


def grow_bar(geometry: StackedBarGeometry, t: float) -> StackedBarGeometry:
    """Scale a bar about the joint between its groups: positives grow up, negatives grow down."""
    k = _clamp01(t)
    joint = geometry.top_y + geometry.positive_height
    top = joint - geometry.positive_height * k
    fractions = tuple(
        replace(
            f,
            height=f.height * k,
            top_offset=f.top_offset * k,
            rect=(f.rect[0], top + f.top_offset * k, f.rect[2], f.height * k),
        )
        for f in geometry.fractions
    )
    return replace(
        geometry,
        fractions=fractions,
        positive_height=geometry.positive_height * k,
        negative_height=geometry.negative_height * k,
        anchor_y=top + geometry.total_height * k / 2.0,
    )


def bar_reveal_delay(index: int, step: float = DEFAULT_BAR_DELAY_STEP) -> float:
    return max(0, int(index)) * float(step)


def _clamp01(t: float) -> float:
    if not np.isfinite(t):
        return 0.0
    return float(max(0.0, min(1.0, t)))
