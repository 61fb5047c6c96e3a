"""
Exceptions raised by ndsparse arrays.

All of them derive from NDArrayError, and additionally from the builtin
exception a caller would naturally expect (ValueError for bad shapes,
IndexError for bad coordinates), so plain `except IndexError` keeps working.
"""


class NDArrayError(Exception):
    """Base class for all ndsparse errors."""


class InvalidShape(NDArrayError, ValueError):
    """A shape was empty or had a non-positive extent."""


class OutOfRange(NDArrayError, IndexError):
    """A coordinate or flat offset fell outside the bounds of a shape."""


class ShapeMismatch(NDArrayError, ValueError):
    """A binary operation was given operands of different shapes."""
