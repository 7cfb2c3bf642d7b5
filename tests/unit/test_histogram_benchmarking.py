"""
Unit tests for histogram benchmarking hooks.
"""

import random
import time
import unittest

from tiny_hist.algorithms.histogram import CountHistogram, TallyHistogram
from tiny_hist.algorithms.scaled import ScaledHistogram


class TestHistogramBenchmarking(unittest.TestCase):
    """Test cases for size estimation and statistics reporting."""

    def test_estimate_size(self):
        """Test that memory estimation grows with the number of bins."""
        small = TallyHistogram(0.0, 1.0, 10)
        large = TallyHistogram(0.0, 1.0, 10000)
        self.assertGreater(small.estimate_size(), 50, "Empty histogram has a base size")
        self.assertGreater(
            large.estimate_size(),
            small.estimate_size(),
            "More bins should use more memory",
        )

        # The footprint stays bounded by the number of bins
        for _ in range(1000):
            small.add(random.random())
        self.assertLess(small.estimate_size(), large.estimate_size())

    def test_memory_limit(self):
        hist = CountHistogram(0.0, 1.0, 10)
        self.assertTrue(hist.check_memory_limit())

        limited = CountHistogram(0.0, 1.0, 10000, memory_limit_bytes=1024)
        self.assertFalse(limited.check_memory_limit())
        self.assertGreater(limited.get_stats()["memory_usage_pct"], 100)

    def test_get_stats_tally(self):
        hist = TallyHistogram(0.0, 10.0, 5)
        hist.update_batch([-1.0, 0.0, 1.0, 3.0, 5.0, 7.0, 9.0, 11.0])

        stats = hist.get_stats()
        self.assertEqual(stats["type"], "TallyHistogram")
        self.assertEqual(stats["items_processed"], 8)
        self.assertEqual(stats["num_bins"], 5)
        self.assertEqual(stats["h"], 2.0)
        self.assertEqual(stats["binned_count"], 6)
        self.assertEqual(stats["empty_bins"], 0)
        self.assertEqual(stats["underflow"], 1)
        self.assertEqual(stats["overflow"], 1)
        self.assertAlmostEqual(stats["mean"], 35.0 / 8)
        self.assertIn("memory_bytes", stats)

    def test_get_stats_count(self):
        hist = CountHistogram(0.0, 10.0, 5)
        hist.update_batch([0.5, 42.0])

        stats = hist.get_stats()
        self.assertEqual(stats["type"], "CountHistogram")
        self.assertEqual(stats["outside"], 1)
        self.assertEqual(stats["empty_bins"], 4)
        self.assertNotIn("mean", stats)

    def test_smoothing_throughput(self):
        """Test that the linear-time recurrence handles large radii quickly."""
        random.seed(0)
        heights = [random.random() for _ in range(20000)]
        view = ScaledHistogram.from_heights(0.0, 1.0, heights)

        start = time.time()
        smooth = view.average_shifted_histogram(500, method="recurrence")
        elapsed = time.time() - start

        self.assertEqual(smooth.num_bins, 20000)
        self.assertLess(elapsed, 5.0, "Recurrence should not depend on the radius")


if __name__ == "__main__":
    unittest.main()
