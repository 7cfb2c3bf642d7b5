"""
Algorithm implementations for TinyHist.
"""

from tiny_hist.algorithms.ash import (
    ASH_METHODS,
    DEFAULT_ASH_METHOD,
    ash_direct,
    ash_recurrence,
    ash_spreading,
    average_shifted_histogram,
    ise_vs_uniform,
    ise_vs_uniform_polygonal,
)
from tiny_hist.algorithms.histogram import CountHistogram, HistogramCore, TallyHistogram
from tiny_hist.algorithms.running_stats import RunningStats
from tiny_hist.algorithms.scaled import ScaledHistogram

__all__ = [
    "RunningStats",
    "HistogramCore",
    "TallyHistogram",
    "CountHistogram",
    "ScaledHistogram",
    "ASH_METHODS",
    "DEFAULT_ASH_METHOD",
    "ash_direct",
    "ash_recurrence",
    "ash_spreading",
    "average_shifted_histogram",
    "ise_vs_uniform",
    "ise_vs_uniform_polygonal",
]
