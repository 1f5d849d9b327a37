"""
Data Models for the KD-Tree Spatial Index

This module defines the plain data containers shared by the index,
the synthetic data generator and the command-line tools.
Uses Python dataclasses for clean, type-hinted data containers.

Data Flow:
    coordinates → Point → KDTree (geometry.kd_tree)
"""

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple, Optional


@dataclass(frozen=True)
class Point:
    """
    Default element type stored in a KDTree.

    A point is an immutable tuple of float coordinates. Freezing the
    dataclass means a point cannot be mutated after it has been indexed,
    which would otherwise silently break the tree's partition.

    Attributes:
        values: Coordinates, one per dimension
        label: Optional caller tag carried along with the point

    Example:
        >>> p = Point.of(1, 2)
        >>> p.values
        (1.0, 2.0)
    """
    values: Tuple[float, ...]
    label: Optional[str] = None

    def __post_init__(self):
        # Normalise any sequence (list, ndarray row) into a float tuple
        object.__setattr__(self, 'values', tuple(float(v) for v in self.values))

    @classmethod
    def of(cls, *coords: float, label: Optional[str] = None) -> 'Point':
        """Build a point from positional coordinates."""
        return cls(tuple(coords), label=label)

    @property
    def dimensions(self) -> int:
        """Number of coordinates."""
        return len(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    def __getitem__(self, dim: int) -> float:
        return self.values[dim]

    def __str__(self) -> str:
        return "(" + ", ".join(f"{v:g}" for v in self.values) + ")"


class DimensionMismatchError(ValueError):
    """
    Raised when a bulk-built tree is given points of differing length.

    Attributes:
        expected: Coordinate count of the first point
        found: Coordinate count of the first offending point
        index: Position of the first offending point in the input
    """

    def __init__(self, expected: int, found: int, index: int):
        self.expected = expected
        self.found = found
        self.index = index
        super().__init__(
            f"Point at index {index} has {found} coordinates, "
            f"expected {expected}"
        )


def points_from_array(coords: Sequence[Sequence[float]]) -> List[Point]:
    """
    Wrap every row of a 2D array-like into a Point.

    Args:
        coords: Array-like of shape (n, d)

    Returns:
        List of n Points
    """
    return [Point(tuple(row)) for row in coords]
