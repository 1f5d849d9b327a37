"""
Point Capability for the KD-Tree

Any object exposing ``values`` (an ordered, fixed-length sequence of
floats) can be indexed. Plain sequences and NumPy rows without a
``values`` attribute are treated as their own coordinates.

The helpers here are the only place coordinates are read, so every
algorithm in the tree agrees on how dimensions wrap and how distance
is measured.
"""

from typing import Any, Protocol, Sequence, runtime_checkable
import numpy as np


# Per-coordinate tolerance used to suppress near-duplicate insertions
EQUALITY_TOLERANCE = 1e-6


@runtime_checkable
class KDElement(Protocol):
    """Structural type for anything the tree can index."""

    @property
    def values(self) -> Sequence[float]:
        ...


def values_of(element: Any) -> Sequence[float]:
    """Return the coordinate sequence of an element."""
    values = getattr(element, 'values', None)
    if values is None or callable(values):
        return element
    return values


def as_array(element: Any) -> np.ndarray:
    """Coordinates of an element as a float64 vector."""
    return np.asarray(values_of(element), dtype=np.float64)


def dimensions_of(element: Any) -> int:
    """Number of coordinates an element reports."""
    return len(values_of(element))


def coordinate(element: Any, dim: int) -> float:
    """
    Coordinate of an element along a dimension.

    The dimension index wraps modulo the element's dimensionality,
    so any non-negative integer is accepted.
    """
    values = values_of(element)
    return float(values[dim % len(values)])


def squared_distance(a: Any, b: Any) -> float:
    """
    Squared Euclidean distance between two elements.

    Monotonic with the true distance, so it can be compared directly
    without taking a square root.
    """
    diff = as_array(a) - as_array(b)
    return float(np.dot(diff, diff))


def approximately_equal(a: Any, b: Any, tolerance: float = EQUALITY_TOLERANCE) -> bool:
    """True if every coordinate pair differs by less than ``tolerance``."""
    diff = np.abs(as_array(a) - as_array(b))
    return bool(np.all(diff < tolerance))
