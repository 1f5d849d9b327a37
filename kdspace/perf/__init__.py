"""
Performance Measurement Module

Utilities for timing the KD-tree against brute-force baselines.
"""

from .timing import (
    Timer,
    compute_speedup,
    BenchmarkResult,
    Benchmark
)

__all__ = [
    'Timer',
    'compute_speedup',
    'BenchmarkResult',
    'Benchmark'
]
