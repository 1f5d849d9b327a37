"""
KD-Tree Implementation for Fast Nearest-Neighbor Search

This module provides a KD-tree over points of any fixed dimensionality.
Elements are anything exposing ``values`` (see ``geometry.point``); the
tree stores them as given and returns the same objects from queries.

Key Features:
- Balanced bulk build by recursive median split
- Incremental insertion with near-duplicate suppression
- Nearest neighbor query (exact, with an optional cutoff hint)
- Radius (range) search ordered by distance
- Smallest element along any dimension
- Brute-force baselines for comparison

Complexity Analysis:
- Build: O(n log² n) with a sort per level
- Insert: O(depth), O(n) for adversarial insertion order
- Nearest Neighbor Query: O(log n) average, O(n) worst case
- Radius Search: O(√n + k) average, plus O(k log k) to order k results
- Smallest Element: O(n^(1-1/d)) average, O(n) worst case
- Space: O(n)

All queries walk the tree with an explicit stack, so degenerate trees
built by insertion never hit the interpreter's recursion limit.

Reference:
    Bentley, J. L. (1975). Multidimensional binary search trees used for
    associative searching. Communications of the ACM, 18(9), 509-517.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Tuple
import numpy as np

from ..data_models import DimensionMismatchError
from .point import (
    approximately_equal,
    as_array,
    coordinate,
    dimensions_of,
    squared_distance,
    values_of,
)

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class KDNode:
    """
    A node in the KD-tree.

    Attributes:
        value: The element stored at this node, exactly as supplied
        coords: The element's coordinates as a float64 vector
        split_dim: Dimension this node partitions on
        left: Left subtree (smaller coordinate on split_dim)
        right: Right subtree (larger or equal coordinate on split_dim)
    """
    value: Any
    coords: np.ndarray
    split_dim: int
    left: Optional['KDNode'] = None
    right: Optional['KDNode'] = None

    @property
    def split_value(self) -> float:
        """Coordinate of this node on its own split dimension."""
        return coordinate(self.coords, self.split_dim)


class KDTree:
    """
    KD-Tree for nearest neighbor and range queries.

    A binary space partitioning tree that recursively divides the point
    set, cycling through the dimensions one level at a time: the root
    splits on dimension 0, its children on dimension 1, and so on.

    Example:
        >>> from kdspace.data_models import Point
        >>> tree = KDTree([Point.of(1, 2), Point.of(3, 4), Point.of(5, 6)])
        >>> tree.nearest_neighbor(Point.of(3.5, 4.5))
        Point(values=(3.0, 4.0), label=None)
        >>> tree.radius_search(Point.of(0, 0), 3.0)
        [Point(values=(1.0, 2.0), label=None)]

    Attributes:
        root: Root node of the tree, None when empty
        n_points: Number of nodes in the tree
        n_dimensions: Dimensionality of the indexed points (0 until known)
    """

    def __init__(self, points: Iterable[Any] = ()):
        """
        Build a balanced KD-tree from a collection of points.

        Args:
            points: Elements that all report the same number of coordinates.
                Pass nothing to start an empty tree for incremental insertion.

        Raises:
            DimensionMismatchError: If the elements disagree on their
                coordinate count. No tree is built in that case.
        """
        elements = list(points)

        self.root: Optional[KDNode] = None
        self.n_points = 0
        self.n_dimensions = 0

        if not elements:
            return

        self.n_dimensions = _check_dimensions(elements)
        entries = [(element, as_array(element)) for element in elements]
        self.root = self._build(entries, depth=0)
        self.n_points = len(entries)

        logger.debug("Built KD-tree with %d points in %d dimensions",
                     self.n_points, self.n_dimensions)

    @classmethod
    def build(cls, points: Iterable[Any]) -> 'KDTree':
        """Alias for the constructor, reads better at call sites."""
        return cls(points)

    def _build(self, entries: List[Tuple[Any, np.ndarray]], depth: int) -> Optional[KDNode]:
        """
        Recursively build the KD-tree.

        At each level, we:
        1. Choose split dimension based on depth
        2. Stable-sort the entries along that dimension
        3. Take the lower median as this node
        4. Recursively build left and right subtrees

        Equal coordinates keep their input order, so the median for a
        given input is deterministic.
        """
        if not entries:
            return None

        split_dim = depth % self.n_dimensions
        entries = sorted(entries, key=lambda entry: entry[1][split_dim])

        median_pos = len(entries) // 2
        value, coords = entries[median_pos]

        node = KDNode(value=value, coords=coords, split_dim=split_dim)
        node.left = self._build(entries[:median_pos], depth + 1)
        node.right = self._build(entries[median_pos + 1:], depth + 1)

        return node

    def insert(self, point: Any) -> bool:
        """
        Insert a single point without rebalancing.

        The first point into an empty tree becomes the root and fixes the
        tree's dimensionality. Later points walk down from the root and go
        left when strictly smaller on the node's split dimension, right
        otherwise. A point approximately equal to one already in the tree
        is ignored.

        Args:
            point: Element to insert

        Returns:
            True if a node was added, False if the point was a duplicate
        """
        coords = as_array(point)
        if len(coords) == 0:
            raise ValueError("Points must have at least one coordinate")

        if self.root is None:
            self.root = KDNode(value=point, coords=coords, split_dim=0)
            self.n_dimensions = len(coords)
            self.n_points = 1
            return True

        node = self.root
        while True:
            if approximately_equal(coords, node.coords):
                logger.debug("Skipping near-duplicate insert of %s", point)
                return False

            split_dim = node.split_dim
            child_dim = (split_dim + 1) % self.n_dimensions

            if coordinate(coords, split_dim) < node.split_value:
                if node.left is None:
                    node.left = KDNode(value=point, coords=coords, split_dim=child_dim)
                    break
                node = node.left
            else:
                if node.right is None:
                    node.right = KDNode(value=point, coords=coords, split_dim=child_dim)
                    break
                node = node.right

        self.n_points += 1
        return True

    def nearest_neighbor(self, query: Any, within: Optional[float] = None) -> Optional[Any]:
        """
        Find the element closest to a query point.

        Uses branch-and-bound pruning: the far side of a splitting plane
        is only explored if the plane is closer than the best candidate
        found so far. The near side is always explored first so the bound
        is as tight as possible when the far side is considered.

        Equidistant candidates are resolved toward the one visited last.

        Args:
            query: Query point
            within: Search cutoff hint, not a filter. With a hint the
                search ends as soon as an exact match turns up, skipping
                only subtrees that cannot hold a strictly closer point.
                The result is always the global nearest neighbor, even
                when it lies farther away than ``within``. Negative
                values are ignored. Use ``nearest_neighbor_within_radius``
                to filter by distance.

        Returns:
            The nearest element, or None if the tree is empty

        Complexity:
            Time: O(log n) average, O(n) worst case
            Space: O(depth) for the work stack
        """
        if self.root is None:
            return None

        query = as_array(query)
        hinted = within is not None and within >= 0

        best = self.root
        best_dist = squared_distance(best.coords, query)

        # (node, squared distance to the parent's splitting plane, or None
        # when the node is on the query's side of it)
        stack: List[Tuple[KDNode, Optional[float]]] = [(self.root, None)]

        while stack:
            node, plane_dist = stack.pop()

            if plane_dist is not None and plane_dist >= best_dist:
                continue

            dist = squared_distance(node.coords, query)
            if dist <= best_dist:
                best_dist = dist
                best = node

            # Nothing can be strictly closer than an exact match
            if hinted and best_dist == 0.0:
                break

            delta = node.split_value - coordinate(query, node.split_dim)

            if delta > 0:
                near_child, far_child = node.left, node.right
            else:
                near_child, far_child = node.right, node.left

            # Far side goes on the stack first so the near side pops first
            if far_child is not None:
                stack.append((far_child, delta * delta))
            if near_child is not None:
                stack.append((near_child, None))

        return best.value

    def nearest_neighbor_within_radius(self, query: Any, radius: float) -> Optional[Any]:
        """
        Find the nearest element, but only if it lies within ``radius``.

        Unlike ``nearest_neighbor(query, within=radius)`` this is a strict
        filter: the result is the global nearest neighbor when its distance
        is at most ``radius``, and None otherwise.

        Args:
            query: Query point
            radius: Maximum accepted distance (inclusive)

        Returns:
            The nearest element within the radius, or None
        """
        if radius < 0:
            return None

        nearest = self.nearest_neighbor(query)
        if nearest is None:
            return None

        if squared_distance(nearest, query) <= radius * radius:
            return nearest
        return None

    def radius_search(self, query: Any, radius: float) -> List[Any]:
        """
        Find all elements within a given radius of the query point.

        Every visited node within the radius is collected. A subtree on
        the far side of a splitting plane is skipped only when the plane
        itself is farther than the radius.

        Args:
            query: Query point
            radius: Search radius (inclusive); negative radii match nothing

        Returns:
            Matching elements sorted by ascending distance to the query.
            Equidistant elements keep the order they were found in.

        Complexity:
            Time: O(√n + k log k) average where k is the number of results
            Space: O(k) for results
        """
        if self.root is None or radius < 0:
            return []

        query = as_array(query)
        max_dist = radius * radius
        results: List[Tuple[float, Any]] = []

        stack: List[KDNode] = [self.root]
        while stack:
            node = stack.pop()

            dist = squared_distance(node.coords, query)
            if dist <= max_dist:
                results.append((dist, node.value))

            delta = node.split_value - coordinate(query, node.split_dim)

            if delta > 0:
                near_child, far_child = node.left, node.right
            else:
                near_child, far_child = node.right, node.left

            if far_child is not None and delta * delta <= max_dist:
                stack.append(far_child)
            if near_child is not None:
                stack.append(near_child)

        results.sort(key=lambda item: item[0])
        return [value for _, value in results]

    def smallest_element(self, dimension: int) -> Optional[Any]:
        """
        Find the element with the smallest coordinate along a dimension.

        A node splitting on the requested dimension only needs its left
        subtree searched, since everything to its right is at least as
        large. Nodes splitting on other dimensions need both subtrees.

        Args:
            dimension: Dimension to minimise; wraps modulo dimensionality

        Returns:
            The element with the minimum coordinate, or None if empty

        Complexity:
            Time: O(n^(1-1/d)) average, O(n) worst case
        """
        if self.root is None:
            return None

        dimension = dimension % self.n_dimensions

        best = self.root
        best_value = coordinate(self.root.coords, dimension)

        stack: List[KDNode] = [self.root]
        while stack:
            node = stack.pop()

            value = coordinate(node.coords, dimension)
            if value < best_value:
                best, best_value = node, value

            if node.split_dim != dimension and node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

        return best.value

    @property
    def height(self) -> int:
        """Number of levels in the tree (0 when empty)."""
        if self.root is None:
            return 0

        height = 0
        stack: List[Tuple[KDNode, int]] = [(self.root, 1)]
        while stack:
            node, level = stack.pop()
            height = max(height, level)
            for child in (node.left, node.right):
                if child is not None:
                    stack.append((child, level + 1))
        return height

    def __len__(self) -> int:
        return self.n_points

    def __iter__(self) -> Iterator[Any]:
        """Yield every indexed element in pre-order."""
        stack = [self.root] if self.root is not None else []
        while stack:
            node = stack.pop()
            yield node.value
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def __repr__(self) -> str:
        return f"KDTree(n_points={self.n_points}, n_dimensions={self.n_dimensions})"


def _check_dimensions(elements: List[Any]) -> int:
    """Return the shared coordinate count, or raise on the first mismatch."""
    expected = dimensions_of(elements[0])
    if expected == 0:
        raise ValueError("Points must have at least one coordinate")
    for index, element in enumerate(elements):
        found = dimensions_of(element)
        if found != expected:
            raise DimensionMismatchError(expected, found, index)
    return expected


def _points_array(points: Iterable[Any]) -> np.ndarray:
    """Stack a collection of elements into an (n, d) float64 array."""
    if isinstance(points, np.ndarray):
        return np.asarray(points, dtype=np.float64)
    return np.array([values_of(p) for p in points], dtype=np.float64)


def brute_force_nearest_neighbor(points: Iterable[Any], query: Any) -> Tuple[int, float]:
    """
    Brute-force nearest neighbor search (baseline).

    Computes the squared distance to every point and returns the minimum.
    Used for correctness testing and benchmarking against the KD-tree.

    Args:
        points: Collection of elements, or an (n, d) array
        query: Query point

    Returns:
        Tuple of (index of nearest point, squared distance)

    Complexity:
        Time: O(n) - must check all points
    """
    points = _points_array(points)
    if len(points) == 0:
        raise ValueError("Cannot search an empty point set")

    diff = points - as_array(query)
    distances = np.sum(diff * diff, axis=1)

    nearest_idx = int(np.argmin(distances))
    return nearest_idx, float(distances[nearest_idx])


def brute_force_radius_search(points: Iterable[Any], query: Any, radius: float) -> List[int]:
    """
    Brute-force radius search (baseline).

    Args:
        points: Collection of elements, or an (n, d) array
        query: Query point
        radius: Search radius (inclusive)

    Returns:
        Indices of points within the radius, sorted by distance
    """
    points = _points_array(points)
    if len(points) == 0 or radius < 0:
        return []

    diff = points - as_array(query)
    distances = np.sum(diff * diff, axis=1)

    inside = np.nonzero(distances <= radius * radius)[0]
    order = np.argsort(distances[inside], kind='stable')
    return [int(i) for i in inside[order]]


def validate_kdtree(
    n_points: int = 2000,
    n_queries: int = 100,
    n_dimensions: int = 2,
    seed: int = 42
) -> bool:
    """
    Validate KD-tree correctness against brute force.

    Generates random points and queries, then verifies that the KD-tree
    returns a nearest neighbor at the same distance as brute force.

    Args:
        n_points: Number of random data points
        n_queries: Number of random query points
        n_dimensions: Dimensionality of the points
        seed: Random seed for reproducibility

    Returns:
        True if all queries match, False otherwise

    Example:
        >>> assert validate_kdtree(1000, 100, seed=42)
    """
    rng = np.random.default_rng(seed)

    points = rng.uniform(-100, 100, size=(n_points, n_dimensions))
    queries = rng.uniform(-100, 100, size=(n_queries, n_dimensions))

    tree = KDTree(points)

    all_match = True
    for query in queries:
        kd_dist = np.sqrt(squared_distance(tree.nearest_neighbor(query), query))
        _, bf_dist = brute_force_nearest_neighbor(points, query)
        bf_dist = np.sqrt(bf_dist)

        # Indices might differ for equidistant points, distances must not
        if abs(kd_dist - bf_dist) > 1e-6:
            logger.warning("Mismatch for query %s: KD-tree dist=%s, brute force dist=%s",
                           query, kd_dist, bf_dist)
            all_match = False

    return all_match


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    print("Validating KD-tree implementation...")
    if validate_kdtree() and validate_kdtree(n_dimensions=3):
        print("KD-tree validation passed!")
    else:
        print("KD-tree validation failed!")
