from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from chartgeom.coordinates import to_screen_y
from chartgeom.model import AxisScale
from chartgeom.scales import generate_ticks


@dataclass(frozen=True)
class MarkerLine:
    """Horizontal guide at a fixed data value, e.g. a target."""

    value: float
    label: str | None = None


def gridline_positions(scale: AxisScale, height: float) -> np.ndarray:
    ticks = generate_ticks(scale)
    return np.asarray([to_screen_y(float(v), scale.value_range, height) for v in ticks], dtype=np.float64)


def marker_line_y(marker: MarkerLine, scale: AxisScale, height: float) -> float:
    return to_screen_y(marker.value, scale.value_range, height)


def category_label_stride(count: int, width: float, min_label_width: float) -> int:
    """Smallest stride so every shown category label gets `min_label_width` pixels."""
    if count <= 0 or width <= 0 or min_label_width <= 0:
        return 1
    slot = width / count
    return max(1, int(math.ceil(min_label_width / slot)))
