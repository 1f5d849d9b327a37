#!/usr/bin/env python3
"""
Benchmark Script: KD-Tree vs Brute Force

This script measures and compares the performance of different approaches
for nearest neighbor and radius search:

1. Brute Force: vectorized squared-distance scan over every point
2. KD-Tree: this package's tree
3. SciPy cKDTree: compiled reference implementation, for scale

It also cross-checks that the KD-tree and cKDTree agree on every
radius query, so a benchmark run doubles as a correctness smoke test.

Usage:
    python benchmarks/benchmark_tree_vs_naive.py
    python benchmarks/benchmark_tree_vs_naive.py --sizes 1000,20000 --dimensions 3 --trials 5

Output:
    - Console table with timing results
    - CSV file with detailed results
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

import numpy as np
from scipy.spatial import cKDTree

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kdspace.geometry.kd_tree import KDTree
from kdspace.perf.benchmarks import format_results_table, run_benchmark_suite
from kdspace.perf.timing import BenchmarkResult, Timer, compute_speedup
from kdspace.synthetic_data import Distribution, generate_coordinates

logger = logging.getLogger("benchmark_tree_vs_naive")


def benchmark_scipy_nearest(
    coords: np.ndarray,
    queries: np.ndarray,
    n_trials: int = 3
) -> BenchmarkResult:
    """
    Benchmark SciPy's cKDTree nearest neighbor queries, one query at a time
    to match how the KD-tree is driven.
    """
    result = BenchmarkResult("SciPy cKDTree")
    tree = cKDTree(coords)

    for _ in range(n_trials):
        with Timer(verbose=False) as t:
            for q in queries:
                tree.query(q)
        result.add_trial(t.elapsed_ms)

    return result


def check_radius_agreement(coords: np.ndarray, queries: np.ndarray, radius: float) -> int:
    """
    Count radius queries where the KD-tree and cKDTree disagree.

    Returns:
        Number of mismatching queries
    """
    ours = KDTree(coords)
    reference = cKDTree(coords)

    mismatches = 0
    for q in queries:
        found = {tuple(p) for p in ours.radius_search(q, radius)}
        expected = {tuple(coords[i]) for i in reference.query_ball_point(q, radius)}
        if found != expected:
            logger.warning("Radius mismatch at %s: %d vs %d points", q, len(found), len(expected))
            mismatches += 1

    return mismatches


def run_scipy_comparison(
    sizes: List[int],
    results: List[Dict[str, Any]],
    n_trials: int,
    n_dimensions: int,
    n_queries: int,
    radius: float,
    seed: int
) -> None:
    """Add SciPy timings and agreement counts to each result entry."""
    for size, entry in zip(sizes, results):
        coords = generate_coordinates(size, n_dimensions, Distribution.UNIFORM, seed=seed + size)
        queries = generate_coordinates(n_queries, n_dimensions, Distribution.UNIFORM, seed=seed + 2 * size + 1)

        scipy_result = benchmark_scipy_nearest(coords, queries, n_trials)
        entry['nn_scipy_ms'] = scipy_result.mean_ms
        entry['kdtree_vs_scipy'] = compute_speedup(scipy_result.mean_ms, entry['nn_kdtree_ms'])
        entry['radius_mismatches'] = check_radius_agreement(coords, queries, radius)


def save_results_csv(results: List[Dict[str, Any]], filepath: str):
    """Save benchmark results to CSV file."""
    if not results:
        return

    with open(filepath, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=list(results[0].keys()))
        writer.writeheader()
        writer.writerows(results)

    print(f"\nResults saved to: {filepath}")


def print_analysis(results: List[Dict[str, Any]]):
    """Print analysis of benchmark results."""
    print("\nPERFORMANCE ANALYSIS")
    print("-" * 60)

    for r in results:
        print(f"  {r['num_points']:>8} points: nearest {r['nn_speedup']:.2f}x vs brute force, "
              f"cKDTree is {1 / r['kdtree_vs_scipy']:.1f}x faster than this tree")

    mismatches = sum(r['radius_mismatches'] for r in results)
    if mismatches:
        print(f"\n{mismatches} radius queries disagreed with cKDTree")
    else:
        print("\nAll radius queries agreed with cKDTree")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Benchmark KD-tree against brute force and SciPy'
    )
    parser.add_argument(
        '--sizes', type=str, default='1000,5000,20000',
        help='Comma-separated problem sizes (default: 1000,5000,20000)'
    )
    parser.add_argument(
        '--trials', type=int, default=3,
        help='Number of timing trials per benchmark (default: 3)'
    )
    parser.add_argument(
        '--dimensions', type=int, default=3,
        help='Point dimensionality (default: 3)'
    )
    parser.add_argument(
        '--queries', type=int, default=100,
        help='Queries per trial (default: 100)'
    )
    parser.add_argument(
        '--radius', type=float, default=10.0,
        help='Radius for range queries (default: 10.0)'
    )
    parser.add_argument(
        '--seed', type=int, default=42,
        help='Random seed (default: 42)'
    )
    parser.add_argument(
        '--output', type=str, default='benchmarks/benchmark_results.csv',
        help='Output CSV file path'
    )
    parser.add_argument(
        '--quiet', '-q', action='store_true',
        help='Minimal output'
    )

    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING if args.quiet else logging.INFO)

    sizes = [int(s.strip()) for s in args.sizes.split(',')]

    results = run_benchmark_suite(
        sizes,
        n_trials=args.trials,
        n_dimensions=args.dimensions,
        n_queries=args.queries,
        radius=args.radius,
        seed=args.seed
    )
    run_scipy_comparison(sizes, results, args.trials, args.dimensions,
                         args.queries, args.radius, args.seed)

    print(format_results_table(results))

    if not args.quiet:
        print_analysis(results)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    save_results_csv(results, str(output_path))

    return 0


if __name__ == "__main__":
    sys.exit(main())
