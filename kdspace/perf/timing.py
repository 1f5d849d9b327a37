"""
Timing and Benchmarking Utilities

This module provides utilities for measuring how the KD-tree compares
against a brute-force scan, both for tree construction and for queries.

Features:
- Timer context manager for easy timing
- Speedup calculation utilities
- Benchmark result containers
- Benchmark runner comparing several implementations on one input

Example:
    >>> with Timer("Build tree") as t:
    ...     tree = KDTree(points)
    >>> print(f"Took {t.elapsed_ms:.2f} ms")
"""

import logging
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class Timer:
    """
    Context manager for timing code blocks.

    Provides high-resolution timing using time.perf_counter().

    Attributes:
        name: Optional name for the timed operation
        elapsed: Elapsed time in seconds
        elapsed_ms: Elapsed time in milliseconds

    Example:
        >>> with Timer("Radius search") as t:
        ...     hits = tree.radius_search(query, 5.0)
        >>> t.elapsed_ms
        0.42
    """

    def __init__(self, name: Optional[str] = None, verbose: bool = True):
        """
        Initialize timer.

        Args:
            name: Optional name to log with timing
            verbose: Whether to log timing on exit
        """
        self.name = name
        self.verbose = verbose
        self._start: float = 0
        self.elapsed: float = 0

    def __enter__(self) -> 'Timer':
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args) -> None:
        self.elapsed = time.perf_counter() - self._start

        if self.verbose and self.name:
            logger.info("%s: %.2f ms", self.name, self.elapsed_ms)

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in milliseconds."""
        return self.elapsed * 1000


def compute_speedup(baseline_time: float, optimized_time: float) -> float:
    """
    Compute speedup ratio between baseline and optimized times.

    Speedup = baseline_time / optimized_time

    A speedup > 1 means the optimized version is faster.

    Example:
        >>> compute_speedup(100.0, 25.0)
        4.0
    """
    if optimized_time <= 0:
        return float('inf')
    return baseline_time / optimized_time


@dataclass
class BenchmarkResult:
    """
    Container for benchmark results.

    Stores multiple timing trials and computes statistics.

    Attributes:
        name: Name of the benchmarked operation
        times_ms: List of timing results in milliseconds
        metadata: Optional additional information
    """
    name: str
    times_ms: List[float] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_trial(self, time_ms: float) -> None:
        self.times_ms.append(time_ms)

    @property
    def mean_ms(self) -> float:
        if not self.times_ms:
            return 0.0
        return statistics.mean(self.times_ms)

    @property
    def std_ms(self) -> float:
        if len(self.times_ms) < 2:
            return 0.0
        return statistics.stdev(self.times_ms)

    @property
    def min_ms(self) -> float:
        if not self.times_ms:
            return 0.0
        return min(self.times_ms)

    @property
    def num_trials(self) -> int:
        return len(self.times_ms)

    def summary(self) -> str:
        """Generate summary string."""
        return (f"{self.name}: {self.mean_ms:.2f} +/- {self.std_ms:.2f} ms "
                f"(n={self.num_trials}, min={self.min_ms:.2f})")


class Benchmark:
    """
    Benchmark runner for comparing multiple implementations.

    Example:
        >>> bench = Benchmark("Nearest Neighbor Search")
        >>> bench.add_implementation("brute_force", run_brute_force)
        >>> bench.add_implementation("kdtree", run_kdtree)
        >>> results = bench.run(queries, n_trials=5)
        >>> print(bench.format_comparison(baseline="brute_force"))
    """

    def __init__(self, name: str):
        self.name = name
        self.implementations: Dict[str, Callable] = {}
        self.results: Dict[str, BenchmarkResult] = {}

    def add_implementation(self, name: str, func: Callable) -> None:
        """
        Add an implementation to benchmark.

        Args:
            name: Name of the implementation
            func: Callable to benchmark
        """
        self.implementations[name] = func
        self.results[name] = BenchmarkResult(name)

    def run(
        self,
        *args,
        n_trials: int = 5,
        warmup: int = 1,
        **kwargs
    ) -> Dict[str, BenchmarkResult]:
        """
        Run the benchmark on all implementations.

        Args:
            *args: Arguments to pass to implementations
            n_trials: Number of timing trials
            warmup: Number of warmup runs (not timed)
            **kwargs: Keyword arguments to pass to implementations

        Returns:
            Dictionary mapping implementation names to results
        """
        for impl_name, func in self.implementations.items():
            for _ in range(warmup):
                func(*args, **kwargs)

            result = self.results[impl_name]
            for _ in range(n_trials):
                with Timer(verbose=False) as t:
                    func(*args, **kwargs)
                result.add_trial(t.elapsed_ms)

            logger.debug("%s", result.summary())

        return self.results

    def get_speedups(self, baseline: str) -> Dict[str, float]:
        """Speedup of every implementation relative to ``baseline``."""
        baseline_time = self.results[baseline].mean_ms
        return {
            name: compute_speedup(baseline_time, result.mean_ms)
            for name, result in self.results.items()
        }

    def format_comparison(self, baseline: Optional[str] = None) -> str:
        """
        Format a comparison table of results.

        Args:
            baseline: Name of baseline implementation for speedup calculation,
                defaults to the first one added
        """
        if baseline is None:
            baseline = next(iter(self.results))
        speedups = self.get_speedups(baseline)

        lines = [
            f"Benchmark: {self.name}",
            "=" * 60,
            f"{'Implementation':<20} {'Mean (ms)':>12} {'Std (ms)':>10} {'Speedup':>10}",
            "-" * 60,
        ]
        for name, result in self.results.items():
            speedup_str = f"{speedups[name]:.2f}x" if name != baseline else "(baseline)"
            lines.append(f"{name:<20} {result.mean_ms:>12.2f} {result.std_ms:>10.2f} {speedup_str:>10}")

        return "\n".join(lines)
