from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Literal, Sequence

from chartgeom.coordinates import to_screen_y
from chartgeom.model import AxisScale, BarDataSet, BarFraction, SignGroup

LOGGER = logging.getLogger(__name__)

# Lower bounds used in place of zero plot sizes and spans.
MIN_PLOT_EXTENT = 0.1
MIN_BAR_WIDTH = 0.1

GrowthAnchor = Literal["bottom", "top", "center"]
Rect = tuple[float, float, float, float]


@dataclass(frozen=True)
class FractionLayout:
    index: int
    value: float
    sign_group: SignGroup
    height: float
    top_offset: float
    rect: Rect


@dataclass(frozen=True)
class StackedBarGeometry:
    """Layout of one stacked bar in screen space (y down).

    `anchor_y` is the vertical center used to position the combined bar;
    `top_y` is its upper edge. Fraction `top_offset`s are relative to `top_y`.
    """

    fractions: tuple[FractionLayout, ...]
    positive_height: float
    negative_height: float
    baseline_y: float
    anchor_y: float
    x_center: float
    width: float
    show_positive_label: bool
    show_negative_label: bool
    label: str | None = None

    @property
    def total_height(self) -> float:
        return self.positive_height + self.negative_height

    @property
    def top_y(self) -> float:
        return self.anchor_y - self.total_height / 2.0

    @property
    def bottom_y(self) -> float:
        return self.anchor_y + self.total_height / 2.0

    @property
    def rect(self) -> Rect:
        return (self.x_center - self.width / 2.0, self.top_y, self.width, self.total_height)

    def group(self, sign_group: SignGroup) -> tuple[FractionLayout, ...]:
        return tuple(f for f in self.fractions if f.sign_group == sign_group)


def layout_stacked_bar(
    fractions: Sequence[BarFraction],
    total_height: float,
    total_width: float,
    *,
    value_range: float | None = None,
    baseline_y: float | None = None,
    negative_baseline_y: float | None = None,
    x_center: float | None = None,
    label_offset_y: float = -10.0,
    min_top_margin: float = 0.0,
    min_bottom_margin: float = 10.0,
    label: str | None = None,
) -> StackedBarGeometry:
    """Lay out signed fractions as one bar stacked around a zero baseline.

    Without `value_range` the bar's own magnitude (positive sum plus absolute
    negative sum) is used, so the bar fills `total_height`. Without
    `baseline_y` the baseline sits right under the positive group, i.e. the
    bar's top edge is at y=0.
    """
    positives = [(i, f) for i, f in enumerate(fractions) if f.value >= 0]
    negatives = [(i, f) for i, f in enumerate(fractions) if f.value < 0]
    positive_sum = float(sum(f.value for _, f in positives))
    negative_sum = float(sum(abs(f.value) for _, f in negatives))

    span = positive_sum + negative_sum if value_range is None else float(value_range)
    if span <= 0:
        positive_height = negative_height = 0.0
    else:
        positive_height = positive_sum / span * total_height
        negative_height = negative_sum / span * total_height

    baseline = positive_height if baseline_y is None else float(baseline_y)
    negative_baseline = baseline if negative_baseline_y is None else float(negative_baseline_y)
    anchor = bar_anchor_y(positive_height, negative_height, baseline, negative_baseline)
    bar_top = anchor - (positive_height + negative_height) / 2.0
    center_x = total_width / 2.0 if x_center is None else float(x_center)
    left = center_x - total_width / 2.0

    layouts: dict[int, FractionLayout] = {}
    offset = 0.0
    for group_name, members, group_sum, group_height in (
        ("positive", positives, positive_sum, positive_height),
        ("negative", negatives, negative_sum, negative_height),
    ):
        for i, fraction in members:
            height = abs(fraction.value) / group_sum * group_height if group_sum > 0 else 0.0
            layouts[i] = FractionLayout(
                index=i,
                value=float(fraction.value),
                sign_group=group_name,  # type: ignore[arg-type]
                height=height,
                top_offset=offset,
                rect=(left, bar_top + offset, float(total_width), height),
            )
            offset += height

    positive_top = baseline - positive_height
    negative_bottom = negative_baseline + negative_height
    return StackedBarGeometry(
        fractions=tuple(layouts[i] for i in sorted(layouts)),
        positive_height=positive_height,
        negative_height=negative_height,
        baseline_y=baseline,
        anchor_y=anchor,
        x_center=center_x,
        width=float(total_width),
        show_positive_label=positive_top + label_offset_y > min_top_margin,
        show_negative_label=negative_bottom - label_offset_y < total_height - min_bottom_margin,
        label=label,
    )


def bar_anchor_y(
    positive_height: float,
    negative_height: float,
    positive_origin: float,
    negative_origin: float,
) -> float:
    """Vertical center of a two-sided bar, weighting each group's center by its share."""
    total = positive_height + negative_height
    if total <= 0:
        return positive_origin
    positive_center = positive_origin - positive_height / 2.0
    negative_center = negative_origin + negative_height / 2.0
    return (positive_height / total) * positive_center + (negative_height / total) * negative_center


def bar_width(total_width: float, count: int) -> float:
    return max((total_width / 2.0) / max(count, 1), MIN_BAR_WIDTH)


def bar_x_center(index: int, count: int, total_width: float) -> float:
    width = bar_width(total_width, count)
    slots = max(count, 1)
    spacer = (total_width - width * slots) / (slots + 1)
    return spacer + width / 2.0 + index * (spacer + width)


def layout_bar_chart(
    datasets: Sequence[BarDataSet],
    width: float,
    height: float,
    scale: AxisScale,
    *,
    label_offset_y: float = -10.0,
    min_top_margin: float = 0.0,
    min_bottom_margin: float = 10.0,
) -> list[StackedBarGeometry]:
    total_height = max(float(height), MIN_PLOT_EXTENT)
    total_width = max(float(width), MIN_PLOT_EXTENT)
    y_range = scale.value_range
    span = max(scale.max - scale.min, MIN_PLOT_EXTENT)
    count = len(datasets)
    w = bar_width(total_width, count)

    positive_origin = to_screen_y(max(0.0, scale.min), y_range, total_height)
    negative_origin = to_screen_y(min(0.0, scale.max), y_range, total_height)

    bars: list[StackedBarGeometry] = []
    for index, dataset in enumerate(datasets):
        geometry = layout_stacked_bar(
            dataset.fractions,
            total_height,
            w,
            value_range=span,
            baseline_y=positive_origin,
            negative_baseline_y=negative_origin,
            x_center=bar_x_center(index, count, total_width),
            label_offset_y=label_offset_y,
            min_top_margin=min_top_margin,
            min_bottom_margin=min_bottom_margin,
            label=dataset.label,
        )
        bars.append(geometry)
    LOGGER.debug("laid out %d bars (bar width %.3f, span %.3f)", count, w, span)
    return bars


def growth_anchor(dataset: BarDataSet) -> GrowthAnchor:
    if dataset.positive_y_value > 0 and dataset.negative_y_value < 0:
        return "center"
    if dataset.positive_y_value > 0:
        return "bottom"
    if dataset.negative_y_value < 0:
        return "top"
    return "center"

