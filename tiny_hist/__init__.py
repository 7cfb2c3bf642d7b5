"""
tiny-hist - Streaming Fixed-Width Histograms

tiny-hist is a Python library for binning streams of real observations into
equal-width histograms, merging histograms from independent replications, and
turning them into density estimates smoothed with the average shifted
histogram (ASH).
"""

import logging

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from tiny_hist.algorithms.ash import average_shifted_histogram
from tiny_hist.algorithms.histogram import CountHistogram, HistogramCore, TallyHistogram
from tiny_hist.algorithms.running_stats import RunningStats
from tiny_hist.algorithms.scaled import ScaledHistogram
from tiny_hist.core.base import ObservationAccumulator, StreamSummary
from tiny_hist.core.errors import (
    DivisionByZeroError,
    HistogramError,
    IncompatibleHistogramsError,
    InvalidArgumentError,
    InvalidRangeError,
    UnsupportedOperationError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core base classes
    "StreamSummary",
    "ObservationAccumulator",
    # Errors
    "HistogramError",
    "InvalidArgumentError",
    "InvalidRangeError",
    "IncompatibleHistogramsError",
    "DivisionByZeroError",
    "UnsupportedOperationError",
    # Algorithm implementations
    "HistogramCore",
    "TallyHistogram",
    "CountHistogram",
    "RunningStats",
    "ScaledHistogram",
    "average_shifted_histogram",
]
