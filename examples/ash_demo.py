"""
Average Shifted Histogram Demo for TinyHist.

This example demonstrates how to bin simulated observations, merge the
histograms of independent replications, scale them into a density and smooth
it with the average shifted histogram.
"""

import logging
import random
import time

from tiny_hist.algorithms.ash import ASH_METHODS
from tiny_hist.algorithms.histogram import CountHistogram, TallyHistogram
from tiny_hist.algorithms.scaled import ScaledHistogram


def demonstrate_basic_histogram():
    """Demonstrate binning with overflow counters."""
    print("\n=== Basic TallyHistogram Demo ===")

    hist = TallyHistogram(0.0, 10.0, 5, name="example")
    for x in [-1.0, 0.0, 1.0, 3.0, 5.0, 7.0, 9.0, 11.0]:
        hist.add(x)

    print(hist)
    print(hist.report())

    print("Aggregated by 2:")
    print(hist.aggregate(2))


def demonstrate_replications(num_replications=8, obs_per_replication=5000):
    """Demonstrate merging per-replication histograms."""
    print("\n=== Merging Replications ===")

    replications = []
    for seed in range(num_replications):
        rng = random.Random(seed)
        hist = TallyHistogram(0.0, 1.0, 64)
        for _ in range(obs_per_replication):
            hist.add(rng.random())
        replications.append(hist)

    merged = replications[0]
    for hist in replications[1:]:
        merged = merged.merge(hist)

    print(f"Replications: {num_replications}")
    print(f"Total observations: {merged.items_processed}")
    print(f"Mean: {merged.mean():.5f} (expected 0.5)")
    print(f"Variance: {merged.variance():.5f} (expected {1 / 12:.5f})")
    return merged


def demonstrate_smoothing(hist):
    """Demonstrate the three ASH algorithms and the density metrics."""
    print("\n=== ASH Smoothing ===")

    view = ScaledHistogram.from_histogram(hist, 1.0)
    print(f"Raw histogram ISE vs U(0,1): {view.ise_vs_uniform():.6f}")
    print(f"Raw polygon ISE vs U(0,1): {view.ise_vs_uniform_polygonal():.6f}")

    for r in (2, 4, 8):
        print(f"\nRadius r = {r}")
        for method in ASH_METHODS:
            start = time.time()
            smooth = view.average_shifted_histogram(r, method)
            elapsed = (time.time() - start) * 1000
            print(
                f"  {method:>10}: ISE {smooth.ise_vs_uniform():.6f}, "
                f"integral {smooth.integral:.4f}, {elapsed:.2f} ms"
            )


def demonstrate_trim():
    """Demonstrate trimming empty bins from a sparse histogram."""
    print("\n=== Trimming Empty Bins ===")

    rng = random.Random(1)
    hist = CountHistogram(-10.0, 10.0, 40)
    for _ in range(1000):
        hist.add(rng.gauss(2.0, 0.8))

    trimmed = hist.trim()
    print(f"Before: [{hist.a}, {hist.b}] with {hist.num_bins} bins")
    print(f"After:  [{trimmed.a}, {trimmed.b}] with {trimmed.num_bins} bins")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    demonstrate_basic_histogram()
    merged = demonstrate_replications()
    demonstrate_smoothing(merged)
    demonstrate_trim()
