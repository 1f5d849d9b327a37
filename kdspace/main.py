"""
Main Entry Point for the KD-Tree Spatial Index

This script provides a command-line interface for exercising the tree:

1. Demo: build a tree over a small fixed point set and run every query
2. Validation: cross-check nearest neighbor results against brute force
3. Benchmark: time the tree against a linear scan for several sizes
4. Visualization: plot the partition of a random 2D tree

Usage:
    # Run the demo
    python -m kdspace.main

    # Validate 3D nearest neighbor search on 5000 random points
    python -m kdspace.main --validate --num-points 5000 --dimensions 3

    # Run benchmark comparison
    python -m kdspace.main --benchmark --sizes 1000,10000 --output results.csv

All data is synthetically generated - there is NO external dataset.
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .data_models import Point
from .geometry.kd_tree import KDTree, validate_kdtree
from .perf.benchmarks import format_results_table, run_benchmark_suite
from .perf.timing import Timer
from .synthetic_data import demo_points, generate_points, visualize_tree

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Set the root log level from the command-line flags."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )


def parse_sizes(text: str) -> List[int]:
    """Parse a comma-separated list of problem sizes."""
    try:
        sizes = [int(s.strip()) for s in text.split(',') if s.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid size list: {text!r}")
    if not sizes or any(s <= 0 for s in sizes):
        raise argparse.ArgumentTypeError(f"Sizes must be positive integers: {text!r}")
    return sizes


def parse_point(text: str) -> Point:
    """Parse a comma-separated coordinate list such as ``8,4``."""
    try:
        return Point(tuple(float(v) for v in text.split(',')))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid point: {text!r}")


def print_header():
    """Print application header."""
    print("=" * 60)
    print("  KD-TREE SPATIAL INDEX")
    print("=" * 60)
    print()


def run_demo(args) -> int:
    """
    Build a tree over the fixed demo set and print every query's result.

    Args:
        args: Command line arguments

    Returns:
        Exit status
    """
    points = demo_points(args.dimensions)
    tree = KDTree(points)

    query = args.query if args.query is not None else points[4]
    radius = args.radius

    print(f"Indexed {len(tree)} points in {tree.n_dimensions}D, height {tree.height}")
    print(f"  Root: {tree.root.value}")
    print(f"  Query: {query}, radius: {radius}")
    print()
    print(f"  Nearest neighbor: {tree.nearest_neighbor(query)}")
    print(f"  Nearest (cutoff hint {radius}): {tree.nearest_neighbor(query, within=radius)}")
    print(f"  Nearest strictly within {radius}: {tree.nearest_neighbor_within_radius(query, radius)}")

    neighbors = tree.radius_search(query, radius)
    print(f"  All within {radius}: {', '.join(str(p) for p in neighbors) or '(none)'}")

    for dim in range(tree.n_dimensions):
        print(f"  Smallest along dimension {dim}: {tree.smallest_element(dim)}")
    print()

    return 0


def run_validation(args) -> int:
    """
    Cross-check the tree against brute force on random data.

    Returns:
        0 if every query agreed, 1 otherwise
    """
    print(f"Validating {args.num_points} points, {args.num_queries} queries, "
          f"{args.dimensions}D, seed {args.seed}...")

    with Timer("Validation"):
        ok = validate_kdtree(
            n_points=args.num_points,
            n_queries=args.num_queries,
            n_dimensions=args.dimensions,
            seed=args.seed
        )

    print("  PASSED" if ok else "  FAILED")
    return 0 if ok else 1


def run_benchmark(args) -> int:
    """Run the benchmark suite and optionally save a CSV."""
    results = run_benchmark_suite(
        args.sizes,
        n_trials=args.trials,
        n_dimensions=args.dimensions,
        n_queries=args.num_queries,
        radius=args.radius,
        seed=args.seed
    )

    print(format_results_table(results))

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=results[0].keys())
            writer.writeheader()
            writer.writerows(results)

        print(f"\nResults saved to: {output_path}")

    return 0


def run_visualization(args) -> int:
    """Plot the partition of a random 2D tree."""
    points = generate_points(args.num_points, n_dimensions=2, extent=100.0, seed=args.seed)
    tree = KDTree(points)

    visualize_tree(tree, query=args.query, radius=args.radius, save_path=args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description='KD-tree spatial index: demo, validation and benchmarks',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Demo on the built-in 2D point set
  python -m kdspace.main --query 8,4 --radius 5

  # Cross-check against brute force
  python -m kdspace.main --validate --num-points 2000 --dimensions 3

  # Run benchmarks
  python -m kdspace.main --benchmark --sizes 1000,10000,20000
        """
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument('--demo', action='store_true',
                            help='Run queries on the built-in point set (default)')
    mode_group.add_argument('--validate', action='store_true',
                            help='Cross-check nearest neighbor against brute force')
    mode_group.add_argument('--benchmark', '-b', action='store_true',
                            help='Run performance benchmarks')
    mode_group.add_argument('--visualize', action='store_true',
                            help='Plot a random 2D tree (requires matplotlib)')

    data_group = parser.add_argument_group('Data')
    data_group.add_argument('--num-points', type=int, default=2000,
                            help='Number of random points (default: 2000)')
    data_group.add_argument('--num-queries', type=int, default=100,
                            help='Number of random queries (default: 100)')
    data_group.add_argument('--dimensions', '-d', type=int, default=2,
                            help='Point dimensionality (default: 2)')
    data_group.add_argument('--seed', type=int, default=42,
                            help='Random seed (default: 42)')

    query_group = parser.add_argument_group('Queries')
    query_group.add_argument('--query', type=parse_point, default=None,
                             help='Query point as comma-separated coordinates')
    query_group.add_argument('--radius', type=float, default=5.0,
                             help='Search radius (default: 5.0)')

    bench_group = parser.add_argument_group('Benchmarking')
    bench_group.add_argument('--sizes', type=parse_sizes, default=[1000, 5000, 20000],
                             help='Comma-separated problem sizes (default: 1000,5000,20000)')
    bench_group.add_argument('--trials', type=int, default=3,
                             help='Number of timing trials (default: 3)')

    out_group = parser.add_argument_group('Output')
    out_group.add_argument('--output', '-o', type=str, default=None,
                           help='CSV path for benchmarks, image path for --visualize')
    out_group.add_argument('--verbose', '-v', action='store_true',
                           help='Debug logging')
    out_group.add_argument('--quiet', '-q', action='store_true',
                           help='Only log warnings and errors')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    configure_logging(verbose=args.verbose, quiet=args.quiet)

    if not args.quiet:
        print_header()

    if args.validate:
        return run_validation(args)
    if args.benchmark:
        return run_benchmark(args)
    if args.visualize:
        return run_visualization(args)
    return run_demo(args)


if __name__ == "__main__":
    sys.exit(main())
