"""
Synthetic Point Generator for the KD-Tree

This module generates all point sets synthetically for tests, demos and
benchmarks. There is NO external dataset - all data is created
programmatically.

Key Features:
- Uniform point clouds in any dimensionality
- Gaussian clusters for more realistic, uneven densities
- Sorted (degenerate) sequences for worst-case insertion
- Small fixed demo sets with known answers
- Reproducible results via random seed control
- Optional matplotlib rendering of a 2D tree's partition

Example Usage:
    >>> from kdspace.synthetic_data import generate_points
    >>> points = generate_points(1000, n_dimensions=3, seed=42)
    >>> len(points)
    1000
"""

import logging
from enum import Enum
from typing import List, Optional, Tuple
import numpy as np

from .data_models import Point, points_from_array
from .geometry.kd_tree import KDTree, KDNode

logger = logging.getLogger(__name__)


class Distribution(Enum):
    """Shapes of generated point clouds."""
    UNIFORM = "uniform"       # Uniform in an axis-aligned box
    CLUSTERED = "clustered"   # Gaussian blobs around random centers
    SORTED = "sorted"         # Strictly increasing along every axis


def generate_points(
    n_points: int,
    n_dimensions: int = 2,
    distribution: Distribution = Distribution.UNIFORM,
    extent: float = 100.0,
    n_clusters: int = 8,
    cluster_std: float = 5.0,
    seed: Optional[int] = None
) -> List[Point]:
    """
    Generate a synthetic point cloud.

    Args:
        n_points: Number of points
        n_dimensions: Coordinates per point
        distribution: Shape of the cloud
        extent: Half-width of the box the points live in
        n_clusters: Number of blobs for CLUSTERED
        cluster_std: Blob standard deviation for CLUSTERED
        seed: Random seed for reproducibility

    Returns:
        List of Points

    Complexity:
        Time: O(n_points × n_dimensions)
    """
    coords = generate_coordinates(
        n_points,
        n_dimensions=n_dimensions,
        distribution=distribution,
        extent=extent,
        n_clusters=n_clusters,
        cluster_std=cluster_std,
        seed=seed
    )
    return points_from_array(coords)


def generate_coordinates(
    n_points: int,
    n_dimensions: int = 2,
    distribution: Distribution = Distribution.UNIFORM,
    extent: float = 100.0,
    n_clusters: int = 8,
    cluster_std: float = 5.0,
    seed: Optional[int] = None
) -> np.ndarray:
    """
    Same as ``generate_points`` but returns a raw (n, d) array.

    Raw arrays are cheaper to build and to hand to the vectorized
    brute-force baselines.
    """
    rng = np.random.default_rng(seed)

    if distribution == Distribution.UNIFORM:
        return rng.uniform(-extent, extent, size=(n_points, n_dimensions))

    if distribution == Distribution.CLUSTERED:
        centers = rng.uniform(-extent, extent, size=(max(1, n_clusters), n_dimensions))
        labels = rng.integers(0, len(centers), size=n_points)
        noise = rng.normal(0.0, cluster_std, size=(n_points, n_dimensions))
        return centers[labels] + noise

    if distribution == Distribution.SORTED:
        steps = np.linspace(-extent, extent, num=n_points)
        return np.repeat(steps[:, np.newaxis], n_dimensions, axis=1)

    raise ValueError(f"Unknown distribution: {distribution}")


def demo_points(n_dimensions: int = 2) -> List[Point]:
    """
    Small fixed point set with hand-checked answers.

    In 2D, the nearest neighbors of (8, 4) within radius 5 are
    (8, 4) and (6, 7). In 3D, the smallest elements along x, y, z are
    (1, 5, 6), (8, 4, 5) and (4, 10, 0).
    """
    if not 1 <= n_dimensions <= 3:
        raise ValueError(f"Demo points exist in 1 to 3 dimensions, got {n_dimensions}")

    coords = [
        (4, 10, 0), (3, 11, 2), (2, 12, 3), (5, 13, 4),
        (8, 4, 5), (1, 5, 6), (6, 7, 7), (3, 9, 8),
    ]
    return [Point(tuple(c[:n_dimensions])) for c in coords]


def _split_segments(tree: KDTree) -> List[Tuple[Tuple[float, float], Tuple[float, float]]]:
    """Line segments of every splitting plane of a 2D tree, clipped to its bounds."""
    if tree.root is None:
        return []

    coords = np.array(list(_all_coords(tree.root)))
    margin = 1.0
    lo = coords.min(axis=0) - margin
    hi = coords.max(axis=0) + margin

    segments = []
    stack = [(tree.root, lo.copy(), hi.copy())]
    while stack:
        node, box_lo, box_hi = stack.pop()
        split = node.split_value

        if node.split_dim == 0:
            segments.append(((split, box_lo[1]), (split, box_hi[1])))
        else:
            segments.append(((box_lo[0], split), (box_hi[0], split)))

        if node.left is not None:
            left_hi = box_hi.copy()
            left_hi[node.split_dim] = split
            stack.append((node.left, box_lo, left_hi))
        if node.right is not None:
            right_lo = box_lo.copy()
            right_lo[node.split_dim] = split
            stack.append((node.right, right_lo, box_hi))

    return segments


def _all_coords(root: KDNode):
    stack = [root]
    while stack:
        node = stack.pop()
        yield node.coords
        for child in (node.left, node.right):
            if child is not None:
                stack.append(child)


def visualize_tree(
    tree: KDTree,
    query: Optional[Point] = None,
    radius: Optional[float] = None,
    save_path: Optional[str] = None
) -> None:
    """
    Create a 2D visualization of a tree's partition.

    This function creates a matplotlib plot showing:
    - Blue dots: Indexed points
    - Gray lines: Splitting planes, vertical for x splits, horizontal for y
    - Red cross: Query point and its nearest neighbor, if a query is given
    - Red circle: Search radius, if a radius is given

    Args:
        tree: A tree over 2D points
        query: Optional query point to highlight
        radius: Optional search radius drawn around the query
        save_path: If provided, save figure to this path

    Note:
        Requires matplotlib (the ``viz`` extra).
    """
    if tree.n_dimensions != 2:
        raise ValueError(f"Can only visualize 2D trees, got {tree.n_dimensions}D")

    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(8, 8))

    for (x0, y0), (x1, y1) in _split_segments(tree):
        ax.plot([x0, x1], [y0, y1], 'gray', alpha=0.5, linewidth=0.8)

    if tree.root is not None:
        coords = np.array(list(_all_coords(tree.root)))
        ax.scatter(coords[:, 0], coords[:, 1], c='blue', s=20, label='Points')

    if query is not None:
        q = np.asarray(query.values)
        ax.scatter([q[0]], [q[1]], c='red', marker='x', s=100, label='Query')

        nearest = tree.nearest_neighbor(query)
        if nearest is not None:
            ax.plot([q[0], nearest.values[0]], [q[1], nearest.values[1]],
                    'r--', linewidth=1, label='Nearest')

        if radius is not None:
            ax.add_patch(plt.Circle((q[0], q[1]), radius, color='red',
                                    fill=False, alpha=0.5))

    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.set_title(f'KD-tree partition ({len(tree)} points)')
    ax.legend(loc='upper right')
    ax.set_aspect('equal', adjustable='box')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info("Visualization saved to %s", save_path)
    else:
        plt.show()

    plt.close(fig)
