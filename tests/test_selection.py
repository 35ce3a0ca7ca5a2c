from __future__ import annotations

import unittest

import numpy as np

from chartgeom.bars import layout_bar_chart
from chartgeom.model import BarDataSet, DataPoint, SelectionState, ValueRange
from chartgeom.path import build_path, point_at
from chartgeom.scales import bar_chart_y_scale
from chartgeom.selection import (
    SelectionResolver,
    fractional_index,
    hit_test_bar,
    resolve_selection,
    selector_position,
    snap_to_index,
    toggle_bar_selection,
)


POINTS = tuple(DataPoint(float(i), y) for i, y in enumerate((1.0, 3.0, 2.0, 4.0)))
SCALE_X = ValueRange(0.0, 3.0)
WIDTH = 300.0


class FractionalIndexTests(unittest.TestCase):
    def test_exact_pixel_match_returns_index(self) -> None:
        self.assertEqual(fractional_index(0.0, POINTS, SCALE_X, WIDTH), 0.0)
        self.assertEqual(fractional_index(200.0, POINTS, SCALE_X, WIDTH), 2.0)
        self.assertEqual(fractional_index(300.0, POINTS, SCALE_X, WIDTH), 3.0)

    def test_interpolates_between_neighbours(self) -> None:
        self.assertAlmostEqual(fractional_index(150.0, POINTS, SCALE_X, WIDTH), 1.5)
        self.assertAlmostEqual(fractional_index(260.0, POINTS, SCALE_X, WIDTH), 2.6)

    def test_outside_every_bracket_falls_back_to_zero(self) -> None:
        self.assertEqual(fractional_index(-5.0, POINTS, SCALE_X, WIDTH), 0.0)
        self.assertEqual(fractional_index(350.0, POINTS, SCALE_X, WIDTH), 0.0)
        self.assertEqual(fractional_index(10.0, (), SCALE_X, WIDTH), 0.0)

    def test_non_decreasing_across_the_plot_width(self) -> None:
        points = tuple(DataPoint(x, 0.0) for x in (0.0, 1.0, 3.0, 7.0, 8.0))
        scale_x = ValueRange(0.0, 8.0)
        previous = -1.0
        for pointer in np.arange(0.0, 200.0, 0.1):
            current = fractional_index(float(pointer), points, scale_x, 200.0)
            self.assertGreaterEqual(current, previous, msg=f"pointer {pointer}")
            previous = current
        self.assertGreater(previous, 3.9)


class SnapTests(unittest.TestCase):
    def test_half_rounds_up(self) -> None:
        self.assertEqual(snap_to_index(1.5, 4), 2)
        self.assertEqual(snap_to_index(1.49, 4), 1)

    def test_clamped_to_valid_indices(self) -> None:
        self.assertEqual(snap_to_index(2.7, 3), 2)
        self.assertEqual(snap_to_index(-0.3, 3), 0)

    def test_degenerate_inputs(self) -> None:
        self.assertEqual(snap_to_index(float("nan"), 3), 0)
        self.assertEqual(snap_to_index(1.0, 0), 0)

    def test_resolve_selection_combines_both_steps(self) -> None:
        result = resolve_selection(260.0, POINTS, SCALE_X, WIDTH)
        self.assertAlmostEqual(result.fractional_index, 2.6)
        self.assertEqual(result.snapped_index, 3)


class SelectionResolverTests(unittest.TestCase):
    def setUp(self) -> None:
        self.path = build_path(POINTS, SCALE_X, ValueRange(0.0, 4.0), WIDTH, 100.0, interpolation="linear")
        self.resolver = SelectionResolver(POINTS, SCALE_X, WIDTH, self.path)

    def test_drag_follows_pointer_on_the_path(self) -> None:
        x, y = self.resolver.drag(150.0)
        self.assertEqual(x, 150.0)
        self.assertAlmostEqual(y, point_at(self.path, 150.0))

    def test_release_updates_host_state(self) -> None:
        state = SelectionState()
        with self.assertLogs("chartgeom.selection", level="DEBUG"):
            result = self.resolver.release(160.0, state)
        self.assertEqual(result.snapped_index, 2)
        self.assertEqual(state.selected_index, 2)

    def test_release_without_state_is_pure(self) -> None:
        result = self.resolver.release(40.0)
        self.assertEqual(result.snapped_index, 0)

    def test_selector_rests_on_selected_point(self) -> None:
        position = selector_position(self.path, POINTS, SCALE_X, WIDTH, selected_index=1)
        self.assertEqual(position, (100.0, 25.0))
        clamped = selector_position(self.path, POINTS, SCALE_X, WIDTH, selected_index=9)
        self.assertEqual(clamped, (300.0, 0.0))

    def test_selector_needs_a_path(self) -> None:
        empty = build_path((), SCALE_X, ValueRange(0.0, 4.0), WIDTH, 100.0)
        self.assertIsNone(selector_position(empty, POINTS, SCALE_X, WIDTH, 0))


class BarSelectionTests(unittest.TestCase):
    def setUp(self) -> None:
        datasets = [BarDataSet.single("a", 4.0), BarDataSet.single("b", 2.0)]
        self.bars = layout_bar_chart(datasets, 400.0, 200.0, bar_chart_y_scale(datasets))

    def test_hit_test_finds_tapped_bar(self) -> None:
        self.assertEqual(hit_test_bar(self.bars[0].x_center, 150.0, self.bars), 0)
        self.assertEqual(hit_test_bar(self.bars[1].x_center, 190.0, self.bars), 1)
        self.assertIsNone(hit_test_bar(5.0, 5.0, self.bars))

    def test_tap_toggles_selection(self) -> None:
        self.assertEqual(toggle_bar_selection(None, 1), 1)
        self.assertIsNone(toggle_bar_selection(1, 1))
        self.assertEqual(toggle_bar_selection(1, 0), 0)
        self.assertEqual(toggle_bar_selection(1, None), 1)


if __name__ == "__main__":
    unittest.main()
