"""
k-Dimensional Spatial Index

This package implements a KD-tree for exact nearest-neighbor lookup,
radius-bounded range queries, per-dimension minimum queries and
incremental insertion over points of any fixed dimensionality.

Main modules:
- data_models: Point type and errors
- geometry: Point capability helpers and the KD-tree itself
- synthetic_data: Random point clouds for tests, demos and benchmarks
- perf: Timing and benchmarking utilities
- main: Command-line interface
"""

from .data_models import Point, DimensionMismatchError
from .geometry.kd_tree import KDTree

__version__ = "1.0.0"

__all__ = [
    'Point',
    'DimensionMismatchError',
    'KDTree'
]
