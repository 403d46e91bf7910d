from __future__ import annotations

import unittest

import numpy as np

from streamdash.core.coordinates import EMPTY_BOUNDS, CoordinateMapper, compute_bounds
from streamdash.core.models import ChartDimensions, ConfigurationError, Padding, Sample


def _mapper(**overrides) -> CoordinateMapper:
    params = dict(
        dimensions=ChartDimensions(width=700, height=350, padding=Padding(top=20, right=20, bottom=40, left=60)),
        value_min=-10.0,
        value_max=90.0,
        time_min=1_000.0,
        time_max=61_000.0,
    )
    params.update(overrides)
    return CoordinateMapper(**params)


class CoordinateMapperTests(unittest.TestCase):
    def test_corners_map_to_padded_rectangle(self) -> None:
        m = _mapper()
        self.assertAlmostEqual(m.time_to_x(1_000.0), 60.0)
        self.assertAlmostEqual(m.time_to_x(61_000.0), 680.0)
        self.assertAlmostEqual(m.value_to_y(-10.0), 310.0)
        self.assertAlmostEqual(m.value_to_y(90.0), 20.0)

    def test_round_trip_inside_ranges(self) -> None:
        m = _mapper()
        for t in np.linspace(1_000.0, 61_000.0, 37):
            self.assertAlmostEqual(m.x_to_time(m.time_to_x(t)), t, places=6)
        for v in np.linspace(-10.0, 90.0, 41):
            self.assertAlmostEqual(m.y_to_value(m.value_to_y(v)), v, places=9)

    def test_degenerate_ranges_do_not_divide_by_zero(self) -> None:
        m = _mapper(value_min=5.0, value_max=5.0, time_min=100.0, time_max=100.0)
        x = m.time_to_x(100.0)
        y = m.value_to_y(5.0)
        self.assertAlmostEqual(x, 60.0 + 620.0 / 2)
        self.assertAlmostEqual(y, 310.0 - 290.0 / 2)
        self.assertEqual(m.x_to_time(x), 100.0)
        self.assertEqual(m.y_to_value(y), 5.0)

        xs, ys = m.map_arrays([100.0, 100.0], [5.0, 5.0])
        self.assertTrue(np.all(np.isfinite(xs)))
        self.assertTrue(np.all(np.isfinite(ys)))

    def test_map_series_matches_scalar_functions(self) -> None:
        m = _mapper()
        series = [Sample(timestamp=1_000 + i * 1_500, value=float(i * 2 - 10)) for i in range(40)]
        xs, ys = m.map_series(series)
        np.testing.assert_allclose(xs, [m.time_to_x(s.timestamp) for s in series])
        np.testing.assert_allclose(ys, [m.value_to_y(s.value) for s in series])

    def test_rejects_padding_larger_than_canvas(self) -> None:
        with self.assertRaises(ConfigurationError):
            _mapper(dimensions=ChartDimensions(width=50, height=350))


class ComputeBoundsTests(unittest.TestCase):
    def test_empty_series_uses_default_bounds(self) -> None:
        self.assertEqual(compute_bounds([]), EMPTY_BOUNDS)

    def test_value_range_padded_by_ten_percent(self) -> None:
        series = [Sample(timestamp=10, value=0.0), Sample(timestamp=30, value=100.0), Sample(timestamp=20, value=50.0)]
        b = compute_bounds(series)
        self.assertAlmostEqual(b.value_min, -10.0)
        self.assertAlmostEqual(b.value_max, 110.0)
        self.assertEqual(b.time_min, 10.0)
        self.assertEqual(b.time_max, 30.0)

    def test_from_series_handles_single_point(self) -> None:
        m = CoordinateMapper.from_series(ChartDimensions(), [Sample(timestamp=5, value=7.0)])
        self.assertAlmostEqual(m.y_to_value(m.value_to_y(7.0)), 7.0)
        self.assertAlmostEqual(m.x_to_time(m.time_to_x(5.0)), 5.0)


if __name__ == "__main__":
    unittest.main()
