"""
Tests for timing utilities and the benchmark suite.

Run with: pytest tests/test_timing.py -v
"""

import logging
import time

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kdspace.perf.timing import Timer, compute_speedup, BenchmarkResult, Benchmark
from kdspace.perf.benchmarks import (
    benchmark_build,
    benchmark_insert,
    run_benchmark_suite,
    format_results_table
)
from kdspace.synthetic_data import generate_coordinates


class TestTimer:
    """Tests for the Timer context manager."""

    def test_measures_elapsed(self):
        """Test that a sleep is measured."""
        with Timer(verbose=False) as t:
            time.sleep(0.01)
        assert t.elapsed >= 0.01
        assert t.elapsed_ms == pytest.approx(t.elapsed * 1000)

    def test_logs_when_named(self, caplog):
        """Test that a named verbose timer logs its duration."""
        with caplog.at_level(logging.INFO, logger="kdspace.perf.timing"):
            with Timer("Build"):
                pass
        assert "Build:" in caplog.text


class TestSpeedup:
    """Tests for speedup computation."""

    def test_ratio(self):
        assert compute_speedup(100.0, 25.0) == 4.0
        assert compute_speedup(10.0, 20.0) == 0.5

    def test_zero_time(self):
        assert compute_speedup(10.0, 0.0) == float('inf')


class TestBenchmarkResult:
    """Tests for result statistics."""

    def test_statistics(self):
        result = BenchmarkResult("nn")
        for t in (1.0, 2.0, 3.0):
            result.add_trial(t)

        assert result.num_trials == 3
        assert result.mean_ms == 2.0
        assert result.std_ms == 1.0
        assert result.min_ms == 1.0
        assert "nn: 2.00" in result.summary()

    def test_empty(self):
        result = BenchmarkResult("empty")
        assert result.mean_ms == 0.0
        assert result.std_ms == 0.0
        assert result.min_ms == 0.0


class TestBenchmark:
    """Tests for the implementation comparison runner."""

    def test_runs_every_implementation(self):
        calls = {"a": 0, "b": 0}

        def impl_a(n):
            calls["a"] += 1

        def impl_b(n):
            calls["b"] += 1

        bench = Benchmark("demo")
        bench.add_implementation("a", impl_a)
        bench.add_implementation("b", impl_b)
        results = bench.run(10, n_trials=3, warmup=1)

        assert calls == {"a": 4, "b": 4}
        assert results["a"].num_trials == 3
        assert set(bench.get_speedups("a")) == {"a", "b"}

        table = bench.format_comparison()
        assert "(baseline)" in table
        assert "demo" in table


class TestBenchmarkSuite:
    """Tests for the KD-tree benchmark suite."""

    def test_build_and_insert(self):
        coords = generate_coordinates(100, 2, seed=1)
        assert benchmark_build(coords, n_trials=2).num_trials == 2
        assert benchmark_insert(coords, n_trials=1).metadata["num_points"] == 100

    def test_suite_entries(self):
        results = run_benchmark_suite([100, 200], n_trials=1, n_dimensions=2, n_queries=5)

        assert [r["num_points"] for r in results] == [100, 200]
        for r in results:
            assert r["nn_kdtree_ms"] >= 0.0
            assert r["radius_brute_force_ms"] >= 0.0

        table = format_results_table(results)
        assert "BENCHMARK RESULTS SUMMARY" in table
        assert "200" in table


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
