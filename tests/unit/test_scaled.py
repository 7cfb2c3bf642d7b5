"""
Unit tests for scaled histograms.
"""

import json
import random
import unittest

from tiny_hist.algorithms.histogram import CountHistogram, TallyHistogram
from tiny_hist.algorithms.scaled import ScaledHistogram
from tiny_hist.core.errors import (
    DivisionByZeroError,
    InvalidArgumentError,
    InvalidRangeError,
)

SCENARIO = [-1.0, 0.0, 1.0, 3.0, 5.0, 7.0, 9.0, 11.0]


class TestScaledHistogram(unittest.TestCase):
    """Test cases for ScaledHistogram."""

    def setUp(self):
        self.tally = TallyHistogram(0.0, 10.0, 5)
        self.tally.update_batch(SCENARIO)

    def test_empty_view(self):
        view = ScaledHistogram(0.0, 4.0, 8)
        self.assertEqual(view.num_bins, 8)
        self.assertEqual(view.h, 0.5)
        self.assertEqual(view.get_heights(), [0.0] * 8)
        self.assertEqual(view.integral, 0.0)

        with self.assertRaises(InvalidRangeError):
            ScaledHistogram(1.0, 0.0, 3)

    def test_scenario(self):
        """Test scaling the interior counts {2, 1, 1, 1, 1} to integral 1."""
        view = ScaledHistogram.from_histogram(self.tally, 1.0)
        expected = [1 / 6, 1 / 12, 1 / 12, 1 / 12, 1 / 12]

        for got, want in zip(view.get_heights(), expected):
            self.assertAlmostEqual(got, want, places=12)
        self.assertEqual(view.integral, 1.0)
        self.assertAlmostEqual(sum(view.get_heights()) * view.h, 1.0, places=12)
        self.assertEqual(view.a, 0.0)
        self.assertEqual(view.b, 10.0)
        self.assertEqual(view.h, 2.0)

        # Overflow observations are reported, not folded into edge bins
        self.assertAlmostEqual(view.excluded_mass, 0.25)

    def test_relative_to_all(self):
        """Test normalization by every observation, outliers included."""
        view = ScaledHistogram.from_histogram(self.tally, 1.0, relative_to_all=True)
        expected = [2 / 16, 1 / 16, 1 / 16, 1 / 16, 1 / 16]

        for got, want in zip(view.get_heights(), expected):
            self.assertAlmostEqual(got, want, places=12)
        self.assertAlmostEqual(view.integral, 0.75, places=12)
        self.assertAlmostEqual(view.excluded_mass, 0.25)

    def test_from_count_histogram(self):
        hist = CountHistogram(0.0, 10.0, 5)
        hist.update_batch(SCENARIO)
        view = ScaledHistogram.from_histogram(hist, 2.0)
        self.assertAlmostEqual(sum(view.get_heights()) * view.h, 2.0, places=12)
        self.assertAlmostEqual(view.get_heights()[0], 2 * 2.0 / 12, places=12)

    def test_invalid_scaling(self):
        with self.assertRaises(DivisionByZeroError):
            ScaledHistogram.from_histogram(TallyHistogram(0.0, 1.0, 4))

        # Only outliers: nothing to normalize by
        outliers = TallyHistogram(0.0, 1.0, 4)
        outliers.add(5.0)
        with self.assertRaises(DivisionByZeroError):
            ScaledHistogram.from_histogram(outliers)

        # The zero-division error is also an invalid argument and a ZeroDivisionError
        with self.assertRaises(InvalidArgumentError):
            ScaledHistogram.from_histogram(CountHistogram(0.0, 1.0, 4))
        with self.assertRaises(ZeroDivisionError):
            ScaledHistogram.from_histogram(CountHistogram(0.0, 1.0, 4))

        with self.assertRaises(InvalidArgumentError):
            ScaledHistogram.from_histogram(self.tally, 0.0)
        with self.assertRaises(InvalidArgumentError):
            ScaledHistogram.from_histogram(self.tally, -1.0)

    def test_rescale(self):
        """Test rescaling and the round trip back to the original integral."""
        view = ScaledHistogram.from_histogram(self.tally, 1.0)
        doubled = view.rescale(2.0)

        self.assertEqual(doubled.integral, 2.0)
        for a, b in zip(view.get_heights(), doubled.get_heights()):
            self.assertAlmostEqual(b, 2 * a, places=12)

        back = doubled.rescale(1.0)
        for a, b in zip(view.get_heights(), back.get_heights()):
            self.assertAlmostEqual(a, b, places=12)

        # The original view is untouched
        self.assertEqual(view.integral, 1.0)

    def test_rescale_round_trip_random(self):
        random.seed(17)
        hist = TallyHistogram(0.0, 1.0, 50)
        for _ in range(5000):
            hist.add(random.betavariate(2, 5))

        view = ScaledHistogram.from_histogram(hist, 1.0)
        for target in (0.001, 3.5, 1234.0):
            back = view.rescale(target).rescale(1.0)
            for a, b in zip(view.get_heights(), back.get_heights()):
                self.assertAlmostEqual(a, b, places=10)

    def test_rescale_zero_integral(self):
        with self.assertRaises(DivisionByZeroError):
            ScaledHistogram(0.0, 1.0, 4).rescale(1.0)

    def test_from_heights(self):
        view = ScaledHistogram.from_heights(0.0, 1.0, [0.5, 1.5, 1.0, 1.0])
        self.assertEqual(view.num_bins, 4)
        self.assertAlmostEqual(view.integral, 1.0)

        with self.assertRaises(InvalidArgumentError):
            ScaledHistogram.from_heights(0.0, 1.0, [])
        with self.assertRaises(InvalidArgumentError):
            ScaledHistogram.from_heights(0.0, 1.0, [0.5, -0.1, 1.0])
        with self.assertRaises(InvalidArgumentError):
            ScaledHistogram.from_heights(0.0, 1.0, [0.5, float("nan"), 1.0])

    def test_smoothing_returns_new_view(self):
        view = ScaledHistogram.from_histogram(self.tally, 1.0)
        smooth = view.average_shifted_histogram(2)

        self.assertIsNot(smooth, view)
        self.assertEqual(smooth.num_bins, view.num_bins)
        self.assertAlmostEqual(
            smooth.integral, sum(smooth.get_heights()) * smooth.h, places=12
        )
        # Mass near the ends is lost, never gained
        self.assertLessEqual(smooth.integral, view.integral + 1e-12)
        self.assertEqual(smooth.excluded_mass, view.excluded_mass)

        identity = view.average_shifted_histogram(1)
        self.assertEqual(identity.get_heights(), view.get_heights())

    def test_metrics(self):
        uniform = ScaledHistogram.from_heights(0.0, 1.0, [1.0] * 10)
        self.assertEqual(uniform.ise_vs_uniform(), 0.0)
        self.assertEqual(uniform.ise_vs_uniform_polygonal(), 0.0)

    def test_heights_are_copies(self):
        view = ScaledHistogram.from_histogram(self.tally, 1.0)
        heights = view.get_heights()
        heights[0] = 99.0
        self.assertNotEqual(view.get_heights()[0], 99.0)

        clone = view.copy()
        self.assertEqual(clone.get_heights(), view.get_heights())
        self.assertEqual(clone.integral, view.integral)

    def test_to_string(self):
        dump = ScaledHistogram.from_histogram(self.tally, 1.0).to_string()
        self.assertIn("Integral = 1.0", dump)
        self.assertIn("Heights = {", dump)
        self.assertIn("0.166667", dump)

    def test_serialization(self):
        view = ScaledHistogram.from_histogram(self.tally, 1.0)
        restored = ScaledHistogram.from_dict(json.loads(json.dumps(view.to_dict())))
        self.assertEqual(restored.get_heights(), view.get_heights())
        self.assertEqual(restored.integral, view.integral)
        self.assertEqual(restored.excluded_mass, view.excluded_mass)


if __name__ == "__main__":
    unittest.main()
