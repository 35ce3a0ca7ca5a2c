from __future__ import annotations

import unittest

from chartgeom.guides import MarkerLine, category_label_stride, gridline_positions, marker_line_y
from chartgeom.model import ValueRange
from chartgeom.scales import compute


class GuideTests(unittest.TestCase):
    def test_gridlines_sit_on_ticks(self) -> None:
        scale = compute(ValueRange(0.0, 4.0), 4)
        self.assertEqual(gridline_positions(scale, 100.0).tolist(), [100.0, 75.0, 50.0, 25.0, 0.0])

    def test_marker_line_maps_value_to_screen(self) -> None:
        scale = compute(ValueRange(0.0, 4.0), 4)
        self.assertEqual(marker_line_y(MarkerLine(2.0, label="target"), scale, 100.0), 50.0)

    def test_category_label_stride(self) -> None:
        self.assertEqual(category_label_stride(12, 240.0, 45.0), 3)
        self.assertEqual(category_label_stride(5, 500.0, 10.0), 1)
        self.assertEqual(category_label_stride(0, 500.0, 10.0), 1)
        self.assertEqual(category_label_stride(4, 0.0, 10.0), 1)


if __name__ == "__main__":
    unittest.main()
