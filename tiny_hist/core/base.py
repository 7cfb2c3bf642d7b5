"""
Base classes and interfaces for TinyHist summaries.

This module defines the abstract base class shared by every histogram in the
library, so that histograms built by independent replications can be
updated, merged, inspected and serialized through one interface. It also
defines the protocol expected from an observation accumulator, the
collaborator that keeps running moments next to the bin counters.
"""

import abc
import json
import sys
from typing import Any, Dict, Generic, Iterable, Optional, Protocol, TypeVar, Union

T = TypeVar("T")  # Type for the items being processed
R = TypeVar("R")  # Type for the result of queries


class ObservationAccumulator(Protocol):
    """
    Running statistics over an unbounded stream of real observations.

    Histograms that track moments delegate to an object implementing this
    protocol. Any implementation works as long as merging two accumulators
    gives the accumulator of the concatenated streams.
    """

    def add(self, x: float) -> None:
        ...

    def clear(self) -> None:
        ...

    def number_obs(self) -> int:
        ...

    def mean(self) -> float:
        ...

    def variance(self) -> float:
        ...

    def merge(self, other: Any) -> Any:
        ...

    def copy(self) -> Any:
        ...

    def to_dict(self) -> Dict[str, Any]:
        ...


class StreamSummary(Generic[T, R], abc.ABC):
    """
    Abstract base class for all streaming summaries.

    Derived classes implement updating with new items, querying, merging with
    another summary of the same type, and dictionary serialization. Merging
    always produces a new summary and leaves both operands untouched.
    """

    def __init__(self, memory_limit_bytes: Optional[int] = None):
        """
        Initialize a new stream summary.

        Args:
            memory_limit_bytes: Optional maximum memory usage in bytes.
                                None means no explicit limit.
        """
        self._memory_limit_bytes = memory_limit_bytes
        self._items_processed = 0

    @abc.abstractmethod
    def update(self, item: T) -> None:
        """
        Update the summary with a new item from the stream.

        Args:
            item: The new item to process.
        """
        self._items_processed += 1

    def update_batch(self, items: Iterable[T]) -> None:
        """
        Update the summary with every item of an iterable, in order.

        Args:
            items: The items to process.
        """
        for item in items:
            self.update(item)

    @abc.abstractmethod
    def query(self, *args: Any, **kwargs: Any) -> R:
        """
        Query the current state of the summary.

        The parameters and return value depend on the specific summary.
        """
        pass

    @abc.abstractmethod
    def merge(self, other: "StreamSummary[T, R]") -> "StreamSummary[T, R]":
        """
        Merge this summary with another of the same type.

        Args:
            other: Another stream summary of the same type.

        Returns:
            A new merged stream summary.

        Raises:
            TypeError: If other is not of the same type.
        """
        pass

    def _check_same_type(self, other: "StreamSummary[T, R]") -> None:
        """
        Check that another summary is of the same type as this one.

        Raises:
            TypeError: If other is not of the same type.
        """
        if not isinstance(other, self.__class__):
            raise TypeError(f"Cannot merge with {other.__class__.__name__}")

    def _combine_items_processed(self, other: "StreamSummary[T, R]") -> int:
        """Return the combined count of processed items of two summaries."""
        return self._items_processed + other._items_processed

    @abc.abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the summary to a dictionary for serialization.

        Returns:
            A dictionary representation of the summary.
        """
        pass

    def _base_dict(self) -> Dict[str, Any]:
        """Create a dictionary with the attributes common to all summaries."""
        return {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
            "memory_limit_bytes": self._memory_limit_bytes,
        }

    @classmethod
    @abc.abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StreamSummary[T, R]":
        """
        Create a summary from a dictionary representation.

        Args:
            data: The dictionary containing the summary state.

        Returns:
            A new stream summary initialized with the given state.
        """
        pass

    def serialize(self, format: str = "json") -> Union[str, bytes]:
        """
        Serialize the summary to a string or bytes.

        Args:
            format: 'json' for a str, 'binary' for UTF-8 encoded JSON bytes.

        Returns:
            The serialized representation of the summary.

        Raises:
            ValueError: If the format is not supported.
        """
        if format == "json":
            return json.dumps(self.to_dict())
        elif format == "binary":
            return json.dumps(self.to_dict()).encode("utf-8")
        else:
            raise ValueError(f"Unsupported serialization format: {format}")

    @classmethod
    def deserialize(
        cls, data: Union[str, bytes], format: str = "json"
    ) -> "StreamSummary[T, R]":
        """
        Deserialize a summary from a string or bytes.

        Args:
            data: The serialized summary.
            format: The serialization format ('json' or 'binary').

        Returns:
            A new stream summary.

        Raises:
            ValueError: If the format is not supported.
        """
        if format not in ("json", "binary"):
            raise ValueError(f"Unsupported serialization format: {format}")
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return cls.from_dict(json.loads(data))

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this summary in bytes.

        Derived classes should override this method to add the size of their
        own counter storage.

        Returns:
            Estimated memory usage in bytes.
        """
        size = sys.getsizeof(self)
        if hasattr(self, "__dict__"):
            size += sys.getsizeof(self.__dict__)
        return size

    def check_memory_limit(self) -> bool:
        """
        Check if the current memory usage is within the configured limit.

        Returns:
            True if there is no limit or usage is within it, False otherwise.
        """
        if self._memory_limit_bytes is None:
            return True

        return self.estimate_size() <= self._memory_limit_bytes

    def clear(self) -> None:
        """
        Reset the summary to its initial empty state.

        Derived classes must override this to clear their own counters and
        call super().clear().
        """
        self._items_processed = 0

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the current state of the summary.

        Derived classes extend the returned dictionary with their own fields.
        """
        stats: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
            "memory_bytes": self.estimate_size(),
        }

        if self._memory_limit_bytes is not None:
            stats["memory_limit_bytes"] = self._memory_limit_bytes
            stats["memory_usage_pct"] = (
                self.estimate_size() / self._memory_limit_bytes
            ) * 100

        return stats

    @property
    def items_processed(self) -> int:
        """Get the total number of items processed by this summary."""
        return self._items_processed
