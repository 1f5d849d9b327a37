"""
Geometry Module for the KD-Tree Spatial Index

This module provides the spatial search structures:
- Point capability helpers (coordinate access, squared distance)
- KD-tree construction, insertion and queries
- Brute-force baselines used to cross-check the tree
"""

from .point import (
    KDElement,
    EQUALITY_TOLERANCE,
    coordinate,
    squared_distance,
    approximately_equal
)
from .kd_tree import (
    KDTree,
    KDNode,
    brute_force_nearest_neighbor,
    brute_force_radius_search,
    validate_kdtree
)

__all__ = [
    'KDElement',
    'EQUALITY_TOLERANCE',
    'coordinate',
    'squared_distance',
    'approximately_equal',
    'KDTree',
    'KDNode',
    'brute_force_nearest_neighbor',
    'brute_force_radius_search',
    'validate_kdtree'
]
