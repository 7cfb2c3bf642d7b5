"""
Scaled histograms for TinyHist.

A ScaledHistogram replaces the integer counts of a histogram with real
heights chosen so that the area under the histogram equals a target
integral. With an integral of 1 the heights form a density estimate, which
can then be smoothed with the average shifted histogram.

Only interior bins carry height. Observations that fell outside [a, b] are
never folded into the edge bins; the fraction they represent is reported as
excluded_mass.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from tiny_hist.algorithms.ash import (
    DEFAULT_ASH_METHOD,
    average_shifted_histogram,
    ise_vs_uniform,
    ise_vs_uniform_polygonal,
)
from tiny_hist.algorithms.histogram import HistogramCore
from tiny_hist.core.binning import bin_edges, bin_width, check_grid
from tiny_hist.core.errors import DivisionByZeroError, InvalidArgumentError

logger = logging.getLogger(__name__)


class ScaledHistogram:
    """
    Histogram of real heights over equal-width bins of [a, b].

    Instances are values: rescale and average_shifted_histogram return new
    objects and never modify the receiver.
    """

    def __init__(self, a: float, b: float, num_bins: int):
        """
        Create a view with every height set to zero.

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
        self._heights: List[float] = [0.0] * num_bins
        self._integral = 0.0
        self._excluded_mass = 0.0

    @classmethod
    def from_histogram(
        cls,
        hist: HistogramCore,
        integral: float = 1.0,
        *,
        relative_to_all: bool = False,
    ) -> "ScaledHistogram":
        """
        Scale the interior counts of a histogram to a target area.

        By default the heights are count * integral / (binned_count * h), so
        the area is exactly integral. With relative_to_all=True the divisor
        uses every processed observation instead, and the recorded integral
        is the area actually reached, which is smaller than requested when
        observations fell outside [a, b].

        Args:
            hist: A TallyHistogram or CountHistogram.
            integral: The target area, must be positive.
            relative_to_all: Normalize by all observations instead of the
                             binned ones.

        Returns:
            A new ScaledHistogram.

        Raises:
            InvalidArgumentError: If integral is not positive.
            DivisionByZeroError: If there is no observation to scale by.
        """
        if not integral > 0:
            raise InvalidArgumentError(f"Integral must be positive, got {integral}")

        counts = hist.bin_counts()
        binned = sum(counts)
        total = hist.items_processed
        divisor = total if relative_to_all else binned
        if divisor == 0:
            raise DivisionByZeroError(
                "Cannot scale a histogram without observations"
                if total == 0
                else "Cannot scale a histogram whose bins are all empty"
            )

        scale_factor = integral / (divisor * hist.h)
        view = cls._build(hist.a, hist.b, hist.h, [c * scale_factor for c in counts])
        view._integral = (
            sum(view._heights) * view._h if relative_to_all else integral
        )
        view._excluded_mass = (total - binned) / total if total else 0.0

        if total > binned:
            logger.debug(
                "%d of %d observations lie outside [%s, %s] and carry no height",
                total - binned,
                total,
                hist.a,
                hist.b,
            )
        return view

    @classmethod
    def from_heights(
        cls, a: float, b: float, heights: Sequence[float]
    ) -> "ScaledHistogram":
        """
        Build a view directly from bin heights.

        The integral is the area under the given heights.

        Raises:
            InvalidRangeError: If b <= a.
            InvalidArgumentError: If heights is empty, or a height is negative
                                  or NaN.
        """
        check_grid(a, b, len(heights))
        if any(not f >= 0.0 for f in heights):
            raise InvalidArgumentError("Heights must be non-negative numbers")
        view = cls._build(a, b, bin_width(a, b, len(heights)), list(heights))
        view._integral = sum(view._heights) * view._h
        return view

    @classmethod
    def _build(
        cls, a: float, b: float, h: float, heights: List[float]
    ) -> "ScaledHistogram":
        view = cls.__new__(cls)
        view._a = a
        view._b = b
        view._num_bins = len(heights)
        view._h = h
        view._heights = heights
        view._integral = 0.0
        view._excluded_mass = 0.0
        return view

    def _derive(
        self, heights: List[float], integral: Optional[float] = None
    ) -> "ScaledHistogram":
        view = self._build(self._a, self._b, self._h, heights)
        view._integral = integral if integral is not None else sum(heights) * self._h
        view._excluded_mass = self._excluded_mass
        return view

    @property
    def a(self) -> float:
        return self._a

    @property
    def b(self) -> float:
        return self._b

    @property
    def h(self) -> float:
        return self._h

    @property
    def num_bins(self) -> int:
        return self._num_bins

    @property
    def integral(self) -> float:
        """Area under the histogram."""
        return self._integral

    @property
    def excluded_mass(self) -> float:
        """Fraction of the observations that fell outside [a, b]."""
        return self._excluded_mass

    def get_heights(self) -> List[float]:
        """Return a copy of the bin heights."""
        return list(self._heights)

    def bin_edges(self) -> List[float]:
        return bin_edges(self._a, self._h, self._num_bins)

    def rescale(self, integral: float) -> "ScaledHistogram":
        """
        Return a copy whose heights are scaled to a new integral.

        Args:
            integral: The new area.

        Raises:
            DivisionByZeroError: If the current integral is zero.
        """
        if self._integral == 0:
            raise DivisionByZeroError("Cannot rescale a histogram with zero integral")

        factor = integral / self._integral
        return self._derive([f * factor for f in self._heights], integral)

    def average_shifted_histogram(
        self, r: int, method: str = DEFAULT_ASH_METHOD
    ) -> "ScaledHistogram":
        """
        Return the average shifted histogram of radius r.

        The integral of the result is its actual area, which is smaller than
        the original one when mass sits within r - 1 bins of either end.

        Args:
            r: Smoothing radius, 1 <= r <= num_bins.
            method: "direct", "recurrence" or "spreading".

        Raises:
            InvalidArgumentError: If r or method is invalid.
        """
        return self._derive(average_shifted_histogram(self._heights, r, method))

    def ise_vs_uniform(self) -> float:
        """Integrated squared error of the step density against Uniform(0, 1)."""
        return ise_vs_uniform(self._heights)

    def ise_vs_uniform_polygonal(self) -> float:
        """Integrated squared error of the frequency polygon against Uniform(0, 1)."""
        return ise_vs_uniform_polygonal(self._heights)

    def copy(self) -> "ScaledHistogram":
        return self._derive(list(self._heights), self._integral)

    def to_string(self) -> str:
        """Return a multi-line dump of the bins and their heights."""
        edges = self.bin_edges()
        lines = [
            "-" * 39,
            self.__class__.__name__,
            f"Interval = [ {self._a}, {self._b} ]",
            f"Number of bins = {self._num_bins}",
            f"Integral = {self._integral}",
            "",
            "Heights = {",
        ]
        for i, f in enumerate(self._heights):
            close = "]" if i == self._num_bins - 1 else ")"
            lines.append(f"   [{edges[i]:6.3f}, {edges[i + 1]:6.3f}{close}    {f:.6g}")
        lines.append("}")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return (
            f"ScaledHistogram(a={self._a!r}, b={self._b!r}, "
            f"num_bins={self._num_bins!r}, integral={self._integral!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.__class__.__name__,
            "a": self._a,
            "b": self._b,
            "h": self._h,
            "num_bins": self._num_bins,
            "heights": list(self._heights),
            "integral": self._integral,
            "excluded_mass": self._excluded_mass,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScaledHistogram":
        heights = list(data["heights"])
        if len(heights) != data["num_bins"]:
            raise InvalidArgumentError(
                f"Expected {data['num_bins']} heights, got {len(heights)}"
            )
        check_grid(data["a"], data["b"], data["num_bins"])
        view = cls._build(data["a"], data["b"], data["h"], heights)
        view._integral = data["integral"]
        view._excluded_mass = data.get("excluded_mass", 0.0)
        return view
