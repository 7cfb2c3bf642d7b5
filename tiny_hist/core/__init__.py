"""
Core functionality for TinyHist.
"""

from tiny_hist.core.base import ObservationAccumulator, StreamSummary
from tiny_hist.core.binning import bin_edges, bin_index, bin_width, check_grid
from tiny_hist.core.errors import (
    DivisionByZeroError,
    HistogramError,
    IncompatibleHistogramsError,
    InvalidArgumentError,
    InvalidRangeError,
    UnsupportedOperationError,
)

__all__ = [
    # Base classes
    "StreamSummary",
    "ObservationAccumulator",
    # Errors
    "HistogramError",
    "InvalidArgumentError",
    "InvalidRangeError",
    "IncompatibleHistogramsError",
    "DivisionByZeroError",
    "UnsupportedOperationError",
    # Utility functions
    "bin_index",
    "bin_width",
    "bin_edges",
    "check_grid",
]
