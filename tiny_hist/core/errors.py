"""
Exception types raised by TinyHist.

Every error subclasses the built-in exception a caller would expect
(ValueError, ZeroDivisionError, NotImplementedError), so code written
against plain Python exceptions keeps working.
"""


class HistogramError(Exception):
    """Base class for all TinyHist errors."""


class InvalidArgumentError(HistogramError, ValueError):
    """A parameter is outside its valid domain."""


class InvalidRangeError(InvalidArgumentError):
    """The interval [a, b] is empty or reversed (b <= a)."""

    def __init__(self, a: float, b: float):
        super().__init__(f"Invalid interval: b <= a (a={a!r}, b={b!r})")
        self.a = a
        self.b = b


class IncompatibleHistogramsError(HistogramError, ValueError):
    """Two histograms cannot be combined because their shapes differ."""


class DivisionByZeroError(InvalidArgumentError, ZeroDivisionError):
    """Scaling was requested against a zero observation count or zero integral."""


class UnsupportedOperationError(HistogramError, NotImplementedError):
    """The summary does not track the requested statistic."""
