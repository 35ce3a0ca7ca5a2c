from __future__ import annotations

import unittest

from chartgeom.bars import (
    bar_anchor_y,
    bar_width,
    bar_x_center,
    growth_anchor,
    layout_bar_chart,
    layout_stacked_bar,
)
from chartgeom.model import BarDataSet, BarFraction
from chartgeom.scales import bar_chart_y_scale


def _fractions(*values: float) -> tuple[BarFraction, ...]:
    return tuple(BarFraction(v) for v in values)


class StackedBarLayoutTests(unittest.TestCase):
    def test_fractions_split_into_sign_groups(self) -> None:
        geometry = layout_stacked_bar(_fractions(3.0, -2.0, 5.0, -1.0), 110.0, 40.0)
        self.assertAlmostEqual(geometry.positive_height, 80.0)
        self.assertAlmostEqual(geometry.negative_height, 30.0)
        heights = [f.height for f in geometry.fractions]
        offsets = [f.top_offset for f in geometry.fractions]
        for got, want in zip(heights, [30.0, 20.0, 50.0, 10.0]):
            self.assertAlmostEqual(got, want, places=9)
        for got, want in zip(offsets, [0.0, 80.0, 30.0, 100.0]):
            self.assertAlmostEqual(got, want, places=9)
        self.assertEqual([f.sign_group for f in geometry.fractions], ["positive", "negative", "positive", "negative"])

    def test_input_order_is_kept_within_each_group(self) -> None:
        geometry = layout_stacked_bar(_fractions(3.0, -2.0, 5.0, -1.0), 110.0, 40.0)
        self.assertEqual([f.index for f in geometry.group("positive")], [0, 2])
        self.assertEqual([f.index for f in geometry.group("negative")], [1, 3])

    def test_bar_fills_height_without_value_range(self) -> None:
        geometry = layout_stacked_bar(_fractions(3.0, -2.0, 5.0, -1.0), 110.0, 40.0)
        self.assertAlmostEqual(geometry.total_height, 110.0)
        self.assertAlmostEqual(geometry.anchor_y, 55.0)
        self.assertAlmostEqual(geometry.top_y, 0.0)
        left, top, width, height = geometry.fractions[2].rect
        self.assertEqual((left, width), (0.0, 40.0))
        self.assertAlmostEqual(top, 30.0)
        self.assertAlmostEqual(height, 50.0)

    def test_balanced_bar_is_centred(self) -> None:
        geometry = layout_stacked_bar(_fractions(5.0, -5.0), 100.0, 40.0)
        self.assertEqual(geometry.positive_height, 50.0)
        self.assertEqual(geometry.negative_height, 50.0)
        self.assertEqual(geometry.anchor_y, 50.0)
        self.assertFalse(geometry.show_positive_label)
        self.assertFalse(geometry.show_negative_label)

    def test_labels_shown_when_room_outside_the_bar(self) -> None:
        geometry = layout_stacked_bar(_fractions(5.0, -5.0), 100.0, 40.0, value_range=20.0, baseline_y=50.0)
        self.assertEqual(geometry.positive_height, 25.0)
        self.assertEqual(geometry.anchor_y, 50.0)
        self.assertTrue(geometry.show_positive_label)
        self.assertTrue(geometry.show_negative_label)

    def test_zero_bar_collapses_to_baseline(self) -> None:
        geometry = layout_stacked_bar(_fractions(0.0), 100.0, 40.0, value_range=10.0, baseline_y=70.0)
        self.assertEqual(geometry.total_height, 0.0)
        self.assertEqual(geometry.anchor_y, 70.0)
        self.assertEqual(geometry.fractions[0].height, 0.0)

    def test_empty_fractions(self) -> None:
        geometry = layout_stacked_bar((), 100.0, 40.0)
        self.assertEqual(geometry.fractions, ())
        self.assertEqual(geometry.total_height, 0.0)

    def test_anchor_weights_group_centres(self) -> None:
        self.assertEqual(bar_anchor_y(0.0, 0.0, 12.0, 30.0), 12.0)
        self.assertEqual(bar_anchor_y(40.0, 0.0, 100.0, 100.0), 80.0)
        self.assertEqual(bar_anchor_y(0.0, 40.0, 100.0, 100.0), 120.0)


class BarChartLayoutTests(unittest.TestCase):
    def setUp(self) -> None:
        self.datasets = [
            BarDataSet.single("a", 4.0),
            BarDataSet("b", _fractions(3.0, -2.0)),
        ]
        self.scale = bar_chart_y_scale(self.datasets)
        self.bars = layout_bar_chart(self.datasets, 400.0, 200.0, self.scale)

    def test_bars_share_the_zero_line(self) -> None:
        zero = 200.0 - 2.0 / 6.0 * 200.0
        for bar in self.bars:
            self.assertAlmostEqual(bar.baseline_y, zero, places=9)
        a, b = self.bars
        self.assertAlmostEqual(a.bottom_y, zero, places=9)
        self.assertAlmostEqual(a.anchor_y, 200.0 / 3.0, places=9)
        self.assertAlmostEqual(b.anchor_y, 350.0 / 3.0, places=9)
        self.assertAlmostEqual(b.top_y, zero - 100.0, places=9)
        self.assertAlmostEqual(b.bottom_y, 200.0, places=9)

    def test_bars_are_evenly_spaced(self) -> None:
        a, b = self.bars
        self.assertEqual(a.width, 100.0)
        self.assertAlmostEqual(a.x_center, 350.0 / 3.0, places=9)
        self.assertAlmostEqual(b.x_center, 850.0 / 3.0, places=9)
        self.assertEqual((a.label, b.label), ("a", "b"))

    def test_bar_width_has_a_floor(self) -> None:
        self.assertEqual(bar_width(400.0, 2), 100.0)
        self.assertEqual(bar_width(0.0, 3), 0.1)
        self.assertAlmostEqual(bar_x_center(0, 1, 100.0), 50.0)

    def test_zero_size_plot_does_not_fail(self) -> None:
        bars = layout_bar_chart(self.datasets, 0.0, 0.0, self.scale)
        self.assertEqual(len(bars), 2)

    def test_growth_anchor_follows_signs(self) -> None:
        self.assertEqual(growth_anchor(BarDataSet.single("p", 2.0)), "bottom")
        self.assertEqual(growth_anchor(BarDataSet.single("n", -2.0)), "top")
        self.assertEqual(growth_anchor(BarDataSet("m", _fractions(2.0, -1.0))), "center")


if __name__ == "__main__":
    unittest.main()
