"""
KD-Tree vs Brute Force Benchmark Suite

Measures, for a range of problem sizes:

1. Build: balanced bulk construction of the tree
2. Insert: building the same tree one point at a time
3. Nearest neighbor: KD-tree queries vs a vectorized linear scan
4. Radius search: KD-tree range queries vs a vectorized linear scan

Results are plain dictionaries so callers can print them or write them
to CSV.
"""

import logging
from typing import Any, Dict, List

import numpy as np

from ..geometry.kd_tree import KDTree, brute_force_nearest_neighbor, brute_force_radius_search
from ..synthetic_data import Distribution, generate_coordinates
from .timing import Benchmark, BenchmarkResult, Timer

logger = logging.getLogger(__name__)


def benchmark_build(coords: np.ndarray, n_trials: int = 3) -> BenchmarkResult:
    """
    Benchmark bulk construction.

    Complexity: O(n log² n)
    """
    result = BenchmarkResult("KD-Tree Build", metadata={'num_points': len(coords)})

    for _ in range(n_trials):
        with Timer(verbose=False) as t:
            KDTree(coords)
        result.add_trial(t.elapsed_ms)

    return result


def benchmark_insert(coords: np.ndarray, n_trials: int = 3) -> BenchmarkResult:
    """
    Benchmark incremental construction from random-order points.

    Complexity: O(n log n) average for random input
    """
    result = BenchmarkResult("KD-Tree Insert", metadata={'num_points': len(coords)})

    for _ in range(n_trials):
        with Timer(verbose=False) as t:
            tree = KDTree()
            for row in coords:
                tree.insert(row)
        result.add_trial(t.elapsed_ms)

    return result


def benchmark_nearest(coords: np.ndarray, queries: np.ndarray, n_trials: int = 3) -> Benchmark:
    """
    Benchmark nearest neighbor queries, brute force first as the baseline.

    Complexity: O(m × n) brute force, O(m log n) KD-tree
    """
    tree = KDTree(coords)

    def run_brute_force(qs):
        for q in qs:
            brute_force_nearest_neighbor(coords, q)

    def run_kdtree(qs):
        for q in qs:
            tree.nearest_neighbor(q)

    bench = Benchmark("Nearest Neighbor")
    bench.add_implementation("brute_force", run_brute_force)
    bench.add_implementation("kdtree", run_kdtree)
    bench.run(queries, n_trials=n_trials)
    return bench


def benchmark_radius(
    coords: np.ndarray,
    queries: np.ndarray,
    radius: float,
    n_trials: int = 3
) -> Benchmark:
    """Benchmark radius search, brute force first as the baseline."""
    tree = KDTree(coords)

    def run_brute_force(qs):
        for q in qs:
            brute_force_radius_search(coords, q, radius)

    def run_kdtree(qs):
        for q in qs:
            tree.radius_search(q, radius)

    bench = Benchmark("Radius Search")
    bench.add_implementation("brute_force", run_brute_force)
    bench.add_implementation("kdtree", run_kdtree)
    bench.run(queries, n_trials=n_trials)
    return bench


def run_benchmark_suite(
    sizes: List[int],
    n_trials: int = 3,
    n_dimensions: int = 3,
    n_queries: int = 100,
    radius: float = 10.0,
    seed: int = 42
) -> List[Dict[str, Any]]:
    """
    Run the complete benchmark suite for multiple problem sizes.

    Args:
        sizes: List of problem sizes (number of points)
        n_trials: Number of timing trials per benchmark
        n_dimensions: Dimensionality of generated points
        n_queries: Queries per nearest/radius trial
        radius: Radius used for range queries
        seed: Base random seed

    Returns:
        List of result dictionaries, one per size
    """
    results = []

    for size in sizes:
        logger.info("Benchmarking %d points in %dD", size, n_dimensions)

        coords = generate_coordinates(size, n_dimensions, Distribution.UNIFORM, seed=seed + size)
        queries = generate_coordinates(n_queries, n_dimensions, Distribution.UNIFORM, seed=seed + 2 * size + 1)

        build = benchmark_build(coords, n_trials)
        insert = benchmark_insert(coords, n_trials)
        nearest = benchmark_nearest(coords, queries, n_trials)
        ranged = benchmark_radius(coords, queries, radius, n_trials)

        entry = {
            'num_points': size,
            'num_dimensions': n_dimensions,
            'num_queries': n_queries,
            'build_ms': build.mean_ms,
            'insert_ms': insert.mean_ms,
            'nn_brute_force_ms': nearest.results['brute_force'].mean_ms,
            'nn_kdtree_ms': nearest.results['kdtree'].mean_ms,
            'nn_speedup': nearest.get_speedups('brute_force')['kdtree'],
            'radius_brute_force_ms': ranged.results['brute_force'].mean_ms,
            'radius_kdtree_ms': ranged.results['kdtree'].mean_ms,
            'radius_speedup': ranged.get_speedups('brute_force')['kdtree'],
        }
        logger.debug("Result: %s", entry)
        results.append(entry)

    return results


def format_results_table(results: List[Dict[str, Any]]) -> str:
    """Format benchmark results as a fixed-width table."""
    lines = [
        "=" * 84,
        "BENCHMARK RESULTS SUMMARY",
        "=" * 84,
        f"{'Size':>8} {'Build(ms)':>10} {'Insert(ms)':>11} {'NN BF':>9} {'NN KD':>9} "
        f"{'NN x':>7} {'Rad BF':>9} {'Rad KD':>9} {'Rad x':>7}",
        "-" * 84,
    ]
    for r in results:
        lines.append(
            f"{r['num_points']:>8} {r['build_ms']:>10.2f} {r['insert_ms']:>11.2f} "
            f"{r['nn_brute_force_ms']:>9.2f} {r['nn_kdtree_ms']:>9.2f} {r['nn_speedup']:>6.2f}x "
            f"{r['radius_brute_force_ms']:>9.2f} {r['radius_kdtree_ms']:>9.2f} {r['radius_speedup']:>6.2f}x"
        )
    lines.append("=" * 84)
    return "\n".join(lines)
