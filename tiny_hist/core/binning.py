"""
Grid helpers for fixed-width histograms.

All histogram variants classify observations through bin_index so that the
boundary convention lives in one place: bins are half-open [lo, hi), except
the last bin which is closed on the right and therefore absorbs x == b.
"""

import math
from typing import List

from tiny_hist.core.errors import InvalidArgumentError, InvalidRangeError


def check_grid(a: float, b: float, num_bins: int) -> None:
    """
    Validate an interval and bin count.

    Raises:
        InvalidRangeError: If b <= a.
        InvalidArgumentError: If num_bins is less than 1.
    """
    if not b > a:
        raise InvalidRangeError(a, b)
    if num_bins < 1:
        raise InvalidArgumentError("Number of bins must be at least 1")


def bin_width(a: float, b: float, num_bins: int) -> float:
    """Width of one bin when [a, b] is split into num_bins equal parts."""
    return (b - a) / num_bins


def bin_index(x: float, a: float, h: float, num_bins: int) -> int:
    """
    Map an observation inside [a, b] to its bin index.

    The caller is responsible for routing values outside [a, b]. The raw
    index floor((x - a) / h) is clamped to [0, num_bins - 1], which puts
    x == b (and anything pushed past the last edge by rounding) in the
    last bin.

    Args:
        x: The observation.
        a: Left boundary of the first bin.
        h: Bin width.
        num_bins: Number of bins.

    Returns:
        The bin index in [0, num_bins - 1].
    """
    i = math.floor((x - a) / h)
    if i < 0:
        return 0
    if i >= num_bins:
        return num_bins - 1
    return i


def bin_edges(a: float, h: float, num_bins: int) -> List[float]:
    """Return the num_bins + 1 bin boundaries a, a + h, ..., a + num_bins * h."""
    return [a + i * h for i in range(num_bins + 1)]
