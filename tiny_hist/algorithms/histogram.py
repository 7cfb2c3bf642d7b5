"""
Fixed-width histograms for TinyHist.

This module provides streaming histograms over an interval [a, b] split into
equal-width bins. Each observation is classified in O(1). Two variants are
available:

1. TallyHistogram keeps two extra counters for observations below a and
   above b, and feeds every observation to a running statistics accumulator
   (count, mean, variance).
2. CountHistogram keeps only the interior counters. Observations outside
   [a, b] are counted as processed but are not placed in any bin, and no
   moments are tracked.

Both variants support structural transformations that return new, fully
independent histograms: trim (drop empty bins at both ends), merge (sum two
histograms with the same number of bins) and aggregate (group g adjacent
bins into one). Merging is exact integer addition, so histograms produced by
independent replications can be combined in any order.

Bin convention: bins are half-open [lo, hi) except the last one, which is
closed on the right so that x == b falls in the last interior bin.
"""

import abc
import logging
import math
import sys
from typing import Any, Dict, List, Optional, Sequence, cast

from tiny_hist.algorithms.running_stats import RunningStats
from tiny_hist.core.base import ObservationAccumulator, StreamSummary
from tiny_hist.core.binning import bin_edges, bin_index, bin_width, check_grid
from tiny_hist.core.errors import (
    IncompatibleHistogramsError,
    InvalidArgumentError,
    UnsupportedOperationError,
)

logger = logging.getLogger(__name__)

_SEPARATOR = "-" * 39


class HistogramCore(StreamSummary[float, int], abc.ABC):
    """
    Shared grid and counter logic of the fixed-width histograms.

    Subclasses decide what happens to observations outside [a, b] and which
    extra state (overflow counters, accumulators) travels along with the
    interior counters during copy, trim, merge and aggregate.
    """

    def __init__(
        self,
        a: float,
        b: float,
        num_bins: int,
        name: Optional[str] = None,
        memory_limit_bytes: Optional[int] = None,
    ):
        """
        Initialize a new histogram.

        Args:
            a: Left boundary of the first bin.
            b: Right boundary of the last bin.
            num_bins: Number of equal-width bins in [a, b].
            name: Optional name shown in the text dump.
            memory_limit_bytes: Optional maximum memory usage in bytes.

        Raises:
            InvalidRangeError: If b <= a.
            InvalidArgumentError: If num_bins is less than 1.
        """
        super().__init__(memory_limit_bytes)
        self.name = name
        self.init(a, b, num_bins)

    def init(self, a: float, b: float, num_bins: int) -> None:
        """
        Re-initialize the grid and reset all counters.

        Args:
            a: Left boundary of the first bin.
            b: Right boundary of the last bin.
            num_bins: Number of bins.

        Raises:
            InvalidRangeError: If b <= a.
            InvalidArgumentError: If num_bins is less than 1.
        """
        check_grid(a, b, num_bins)

        self._a = a
        self._b = b
        self._num_bins = num_bins
        self._h = bin_width(a, b, num_bins)
        self._counts: List[int] = [0] * num_bins
        self.clear()

    @property
    def a(self) -> float:
        """Left boundary of the first bin."""
        return self._a

    @property
    def b(self) -> float:
        """Right boundary of the last bin."""
        return self._b

    @property
    def h(self) -> float:
        """Width of one bin."""
        return self._h

    @property
    def num_bins(self) -> int:
        """Number of interior bins."""
        return self._num_bins

    @property
    def binned_count(self) -> int:
        """Number of observations stored in interior bins."""
        return sum(self._counts)

    def number_obs(self) -> int:
        """Return the number of observations added since the last reset."""
        return self._items_processed

    def bin_counts(self) -> List[int]:
        """Return a copy of the interior bin counters."""
        return list(self._counts)

    @abc.abstractmethod
    def get_counters(self) -> List[int]:
        """Return a copy of every counter kept by the histogram."""
        pass

    def bin_edges(self) -> List[float]:
        """Return the num_bins + 1 boundaries of the interior bins."""
        return bin_edges(self._a, self._h, self._num_bins)

    def update(self, item: float) -> None:
        """
        Add one observation.

        Args:
            item: The observation.

        Raises:
            InvalidArgumentError: If item is NaN.
        """
        if math.isnan(item):
            raise InvalidArgumentError("Cannot bin a NaN observation")

        super().update(item)
        self._record(item)

    def add(self, x: float) -> None:
        """Add one observation (alias of update)."""
        self.update(x)

    @abc.abstractmethod
    def _record(self, x: float) -> None:
        """Place a validated observation in the right counter."""
        pass

    def fill_from_array(
        self, obs: Sequence[float], num_obs: Optional[int] = None
    ) -> None:
        """
        Reset the histogram and add the first num_obs observations of obs.

        Args:
            obs: The observations.
            num_obs: How many leading entries of obs to use (all if None).

        Raises:
            InvalidArgumentError: If num_obs is negative or exceeds len(obs),
                                  or if one of the used values is NaN.
        """
        if num_obs is None:
            num_obs = len(obs)
        if not 0 <= num_obs <= len(obs):
            raise InvalidArgumentError(
                f"num_obs must be between 0 and {len(obs)}, got {num_obs}"
            )

        values = [obs[i] for i in range(num_obs)]
        if any(math.isnan(x) for x in values):
            raise InvalidArgumentError("Cannot bin a NaN observation")

        self.clear()
        for x in values:
            self.update(x)

    def query(self, x: float) -> int:
        """
        Return the count of the counter that x would be recorded in.

        Args:
            x: A value on the real line.
        """
        if self._a <= x <= self._b:
            return self._counts[bin_index(x, self._a, self._h, self._num_bins)]
        return self._outside_count(x)

    @abc.abstractmethod
    def _outside_count(self, x: float) -> int:
        pass

    def _empty_like(
        self, a: float, b: float, num_bins: int, h: float
    ) -> "HistogramCore":
        """Create an empty histogram of the same class over a new grid."""
        result = self._new_empty(a, b, num_bins)
        # (b - a) / num_bins may round away from h
        result._h = h
        return result

    @abc.abstractmethod
    def _new_empty(self, a: float, b: float, num_bins: int) -> "HistogramCore":
        pass

    @abc.abstractmethod
    def _copy_state_into(self, result: "HistogramCore") -> None:
        """Copy everything except the interior counters into result."""
        pass

    def copy(self) -> "HistogramCore":
        """Return an independent deep copy of this histogram."""
        result = self._empty_like(self._a, self._b, self._num_bins, self._h)
        result._counts = list(self._counts)
        self._copy_state_into(result)
        return result

    def trim(self) -> "HistogramCore":
        """
        Remove the empty bins at both ends of the histogram.

        The bin width is unchanged; a moves right and b moves left by one bin
        width per removed bin. Overflow counters, if any, are kept as they are.
        A histogram whose interior bins are all empty is returned as a copy.

        Returns:
            A new trimmed histogram.
        """
        if not any(self._counts):
            return self.copy()

        left = 0
        while self._counts[left] == 0:
            left += 1
        right = 0
        while self._counts[self._num_bins - 1 - right] == 0:
            right += 1

        new_num_bins = self._num_bins - left - right
        result = self._empty_like(
            self._a + left * self._h,
            self._b - right * self._h,
            new_num_bins,
            self._h,
        )
        result._counts = self._counts[left : left + new_num_bins]
        self._copy_state_into(result)

        logger.debug(
            "Trimmed %d leading and %d trailing empty bins, %d bins left",
            left,
            right,
            new_num_bins,
        )
        return result

    def merge(self, other: "HistogramCore") -> "HistogramCore":
        """
        Merge this histogram with another histogram of the same class.

        Every counter is summed element-wise. The result uses the interval of
        this histogram.

        Args:
            other: Another histogram with the same number of bins.

        Returns:
            A new merged histogram.

        Raises:
            TypeError: If other is not of the same class.
            IncompatibleHistogramsError: If the numbers of bins differ.
        """
        self._check_same_type(other)

        if self._num_bins != other._num_bins:
            raise IncompatibleHistogramsError(
                f"Cannot merge histograms with different numbers of bins: "
                f"{self._num_bins} and {other._num_bins}"
            )

        result = self._empty_like(self._a, self._b, self._num_bins, self._h)
        result._counts = [x + y for x, y in zip(self._counts, other._counts)]
        self._merge_state_into(other, result)
        result._items_processed = self._combine_items_processed(other)

        logger.debug(
            "Merged two histograms of %d bins, %d observations in total",
            self._num_bins,
            result._items_processed,
        )
        return result

    @abc.abstractmethod
    def _merge_state_into(
        self, other: "HistogramCore", result: "HistogramCore"
    ) -> None:
        """Combine everything except the interior counters into result."""
        pass

    def aggregate(self, g: int) -> "HistogramCore":
        """
        Group every g adjacent bins into one.

        The new histogram has ceil(num_bins / g) bins of width g * h. When g
        does not divide num_bins, the last bin only holds the remaining
        original bins, and the new right boundary a + ceil(num_bins / g) * g * h
        lies past b.

        Args:
            g: Number of adjacent bins per group.

        Returns:
            A new, coarser histogram.

        Raises:
            InvalidArgumentError: If g is less than 1.
        """
        if g < 1:
            raise InvalidArgumentError("Group size must be at least 1")

        new_num_bins = -(-self._num_bins // g)
        new_h = self._h * g
        result = self._empty_like(
            self._a, self._a + new_num_bins * new_h, new_num_bins, new_h
        )
        result._counts = [
            sum(self._counts[j * g : (j + 1) * g]) for j in range(new_num_bins)
        ]
        self._copy_state_into(result)

        logger.debug(
            "Aggregated %d bins by %d into %d bins", self._num_bins, g, new_num_bins
        )
        return result

    def mean(self) -> float:
        raise UnsupportedOperationError(
            f"{self.__class__.__name__} does not track the mean"
        )

    def variance(self) -> float:
        raise UnsupportedOperationError(
            f"{self.__class__.__name__} does not track the variance"
        )

    def std_dev(self) -> float:
        raise UnsupportedOperationError(
            f"{self.__class__.__name__} does not track the standard deviation"
        )

    def report(self) -> str:
        raise UnsupportedOperationError(
            f"{self.__class__.__name__} does not produce statistical reports"
        )

    def _bin_lines(self) -> List[str]:
        edges = self.bin_edges()
        lines = []
        for i, count in enumerate(self._counts):
            close = "]" if i == self._num_bins - 1 else ")"
            lines.append(f"   [{edges[i]:6.3f}, {edges[i + 1]:6.3f}{close}    {count}")
        return lines

    def _header_lines(self, bins_label: str) -> List[str]:
        return [
            _SEPARATOR,
            self.name if self.name is not None else self.__class__.__name__,
            f"Interval = [ {self._a}, {self._b} ]",
            f"Number of bins = {bins_label}",
            "",
            "Counters = {",
        ]

    def to_string(self) -> str:
        """
        Return a multi-line dump of the bins and their counts.

        The layout is meant for diagnostic logging, not for parsing.
        """
        lines = self._header_lines(str(self._num_bins)) + self._bin_lines() + ["}"]
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(a={self._a!r}, b={self._b!r}, "
            f"num_bins={self._num_bins!r}, items_processed={self._items_processed})"
        )

    def _grid_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update(
            {
                "name": self.name,
                "a": self._a,
                "b": self._b,
                "h": self._h,
                "num_bins": self._num_bins,
                "counts": list(self._counts),
            }
        )
        return data

    @classmethod
    def _restore_grid(cls, data: Dict[str, Any]) -> "HistogramCore":
        hist = cls(
            data["a"],
            data["b"],
            data["num_bins"],
            name=data.get("name"),
            memory_limit_bytes=data.get("memory_limit_bytes"),
        )
        hist._h = data.get("h", hist._h)
        counts = list(data["counts"])
        if len(counts) != hist._num_bins:
            raise InvalidArgumentError(
                f"Expected {hist._num_bins} counters, got {len(counts)}"
            )
        hist._counts = counts
        hist._items_processed = data["items_processed"]
        return hist

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this histogram in bytes.

        Returns:
            Estimated memory usage in bytes.
        """
        size = super().estimate_size()
        size += sys.getsizeof(self._counts)
        size += sum(sys.getsizeof(c) for c in self._counts)
        return size

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the current state of the histogram.

        Returns:
            A dictionary with grid and occupancy information.
        """
        stats = super().get_stats()
        stats.update(
            {
                "a": self._a,
                "b": self._b,
                "h": self._h,
                "num_bins": self._num_bins,
                "binned_count": self.binned_count,
                "empty_bins": sum(1 for c in self._counts if c == 0),
            }
        )
        return stats

    def clear(self) -> None:
        """Reset every counter, keeping the grid."""
        super().clear()
        self._counts = [0] * self._num_bins


class TallyHistogram(HistogramCore):
    """
    Histogram with overflow counters and running statistics.

    Observations below a go to the underflow counter, observations above b
    go to the overflow counter, everything else to an interior bin. Every
    observation is also passed to the accumulator, so the mean and variance
    of the whole stream (inside and outside [a, b]) are available.

    The full counter layout returned by get_counters() is
    [underflow, bin_0, ..., bin_{n-1}, overflow].
    """

    def __init__(
        self,
        a: float,
        b: float,
        num_bins: int,
        name: Optional[str] = None,
        memory_limit_bytes: Optional[int] = None,
        accumulator: Optional[ObservationAccumulator] = None,
    ):
        """
        Initialize a new TallyHistogram.

        Args:
            a: Left boundary of the first bin.
            b: Right boundary of the last bin.
            num_bins: Number of equal-width bins in [a, b].
            name: Optional name shown in the text dump.
            memory_limit_bytes: Optional maximum memory usage in bytes.
            accumulator: Running statistics collaborator. A new RunningStats
                         is used when None.

        Raises:
            InvalidRangeError: If b <= a.
            InvalidArgumentError: If num_bins is less than 1.
        """
        self._accumulator: ObservationAccumulator = (
            accumulator if accumulator is not None else RunningStats()
        )
        self._underflow = 0
        self._overflow = 0
        super().__init__(a, b, num_bins, name, memory_limit_bytes)

    @property
    def underflow(self) -> int:
        """Number of observations strictly below a."""
        return self._underflow

    @property
    def overflow(self) -> int:
        """Number of observations strictly above b."""
        return self._overflow

    @property
    def accumulator(self) -> ObservationAccumulator:
        return self._accumulator

    def get_counters(self) -> List[int]:
        return [self._underflow] + self._counts + [self._overflow]

    def _record(self, x: float) -> None:
        self._accumulator.add(x)
        if x < self._a:
            self._underflow += 1
        elif x > self._b:
            self._overflow += 1
        else:
            self._counts[bin_index(x, self._a, self._h, self._num_bins)] += 1

    def _outside_count(self, x: float) -> int:
        return self._underflow if x < self._a else self._overflow

    def _new_empty(self, a: float, b: float, num_bins: int) -> "TallyHistogram":
        return TallyHistogram(
            a, b, num_bins, name=self.name, memory_limit_bytes=self._memory_limit_bytes
        )

    def _copy_state_into(self, result: HistogramCore) -> None:
        tally = cast(TallyHistogram, result)
        tally._underflow = self._underflow
        tally._overflow = self._overflow
        tally._accumulator = self._accumulator.copy()
        tally._items_processed = self._items_processed

    def _merge_state_into(self, other: HistogramCore, result: HistogramCore) -> None:
        peer = cast(TallyHistogram, other)
        tally = cast(TallyHistogram, result)
        tally._underflow = self._underflow + peer._underflow
        tally._overflow = self._overflow + peer._overflow
        tally._accumulator = self._accumulator.merge(peer._accumulator)

    def mean(self) -> float:
        """Mean of every observation added, inside or outside [a, b]."""
        return self._accumulator.mean()

    def variance(self) -> float:
        """Sample variance of every observation added."""
        return self._accumulator.variance()

    def std_dev(self) -> float:
        return math.sqrt(self.variance())

    def report(self) -> str:
        """Return a one-line summary of the observation statistics."""
        label = self.name if self.name is not None else self.__class__.__name__
        return (
            f"{label}: num obs = {self._items_processed}, "
            f"mean = {self.mean():.6g}, variance = {self.variance():.6g}, "
            f"below = {self._underflow}, above = {self._overflow}"
        )

    def to_string(self) -> str:
        lines = self._header_lines(f"{self._num_bins} + 2")
        lines.append(f"   (-inf, {self._a:6.3f})    {self._underflow}")
        lines.extend(self._bin_lines())
        lines.append(f"   ({self._b:6.3f}, inf)    {self._overflow}")
        lines.append("}")
        return "\n".join(lines) + "\n"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the histogram to a dictionary for serialization.

        Returns:
            A dictionary representation of the histogram.
        """
        data = self._grid_dict()
        data.update(
            {
                "underflow": self._underflow,
                "overflow": self._overflow,
                "accumulator": self._accumulator.to_dict(),
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TallyHistogram":
        """
        Create a histogram from a dictionary representation.

        The accumulator is restored as a RunningStats.

        Args:
            data: The dictionary containing the histogram state.

        Returns:
            A new TallyHistogram.
        """
        hist = cast(TallyHistogram, cls._restore_grid(data))
        hist._underflow = data["underflow"]
        hist._overflow = data["overflow"]
        hist._accumulator = RunningStats.from_dict(data["accumulator"])
        return hist

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats["underflow"] = self._underflow
        stats["overflow"] = self._overflow
        if self._items_processed > 0:
            stats["mean"] = self.mean()
        return stats

    def clear(self) -> None:
        super().clear()
        self._underflow = 0
        self._overflow = 0
        self._accumulator.clear()


class CountHistogram(HistogramCore):
    """
    Histogram of interior counts only.

    Observations outside [a, b] increase items_processed but are not stored
    anywhere. No moments are tracked: mean(), variance(), std_dev() and
    report() raise UnsupportedOperationError.
    """

    @property
    def outside(self) -> int:
        """Number of observations that fell outside [a, b]."""
        return self._items_processed - self.binned_count

    def get_counters(self) -> List[int]:
        return list(self._counts)

    def _record(self, x: float) -> None:
        if self._a <= x <= self._b:
            self._counts[bin_index(x, self._a, self._h, self._num_bins)] += 1

    def _outside_count(self, x: float) -> int:
        return 0

    def _new_empty(self, a: float, b: float, num_bins: int) -> "CountHistogram":
        return CountHistogram(
            a, b, num_bins, name=self.name, memory_limit_bytes=self._memory_limit_bytes
        )

    def _copy_state_into(self, result: HistogramCore) -> None:
        result._items_processed = self._items_processed

    def _merge_state_into(self, other: HistogramCore, result: HistogramCore) -> None:
        pass

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the histogram to a dictionary for serialization.

        Returns:
            A dictionary representation of the histogram.
        """
        return self._grid_dict()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CountHistogram":
        return cast(CountHistogram, cls._restore_grid(data))

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats["outside"] = self.outside
        return stats
