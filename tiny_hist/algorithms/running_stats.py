"""
Running statistics accumulator for TinyHist.

RunningStats keeps the count, mean, variance, minimum and maximum of a stream
of real observations in O(1) memory using Welford's online update. Two
accumulators built on disjoint streams merge exactly into the accumulator of
the combined stream using the pairwise formula of Chan et al.

References:
    - Welford, B. P. (1962). Note on a method for calculating corrected sums
      of squares and products. Technometrics, 4(3), 419-420.
    - Chan, T. F., Golub, G. H., & LeVeque, R. J. (1979). Updating formulae
      and a pairwise algorithm for computing sample variances.
"""

import math
from typing import Any, Dict


class RunningStats:
    """
    Count, mean and variance of an unbounded stream of observations.

    This is the default observation accumulator used by TallyHistogram. The
    variance is the unbiased sample variance (divisor n - 1).
    """

    def __init__(self):
        self._count = 0
        self._mean = 0.0
        self._m2 = 0.0
        self._min = math.inf
        self._max = -math.inf

    def add(self, x: float) -> None:
        """
        Add one observation.

        Args:
            x: The observation.
        """
        self._count += 1
        delta = x - self._mean
        self._mean += delta / self._count
        self._m2 += delta * (x - self._mean)
        if x < self._min:
            self._min = x
        if x > self._max:
            self._max = x

    def clear(self) -> None:
        """Forget all observations."""
        self._count = 0
        self._mean = 0.0
        self._m2 = 0.0
        self._min = math.inf
        self._max = -math.inf

    def number_obs(self) -> int:
        return self._count

    def mean(self) -> float:
        """
        Return the sample mean.

        Returns NaN when no observation has been added.
        """
        if self._count == 0:
            return math.nan
        return self._mean

    def variance(self) -> float:
        """
        Return the unbiased sample variance.

        Returns NaN when fewer than two observations have been added.
        """
        if self._count < 2:
            return math.nan
        return self._m2 / (self._count - 1)

    def std_dev(self) -> float:
        return math.sqrt(self.variance())

    def min(self) -> float:
        return self._min

    def max(self) -> float:
        return self._max

    def merge(self, other: "RunningStats") -> "RunningStats":
        """
        Combine two accumulators into a new one.

        Args:
            other: Another RunningStats.

        Returns:
            A new accumulator equivalent to having seen both streams.

        Raises:
            TypeError: If other is not a RunningStats.
        """
        if not isinstance(other, RunningStats):
            raise TypeError(f"Cannot merge with {other.__class__.__name__}")

        result = RunningStats()
        n = self._count + other._count
        if n == 0:
            return result

        delta = other._mean - self._mean
        result._count = n
        result._mean = self._mean + delta * other._count / n
        result._m2 = (
            self._m2 + other._m2 + delta * delta * self._count * other._count / n
        )
        result._min = min(self._min, other._min)
        result._max = max(self._max, other._max)
        return result

    def copy(self) -> "RunningStats":
        result = RunningStats()
        result._count = self._count
        result._mean = self._mean
        result._m2 = self._m2
        result._min = self._min
        result._max = self._max
        return result

    def to_dict(self) -> Dict[str, Any]:
        # Infinities are stored as None so the dict stays valid JSON.
        return {
            "count": self._count,
            "mean": self._mean,
            "m2": self._m2,
            "min": None if self._count == 0 else self._min,
            "max": None if self._count == 0 else self._max,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunningStats":
        stats = cls()
        stats._count = data["count"]
        stats._mean = data["mean"]
        stats._m2 = data["m2"]
        if data.get("min") is not None:
            stats._min = data["min"]
        if data.get("max") is not None:
            stats._max = data["max"]
        return stats

    def __repr__(self) -> str:
        return (
            f"RunningStats(count={self._count}, mean={self.mean()!r}, "
            f"variance={self.variance()!r})"
        )
