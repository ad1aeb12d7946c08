"""Tests for the loop iteration benchmark."""

import pytest

from tensormeta.bench import STYLES, BenchmarkResult, run_loop_iteration
from tensormeta.metadata import MAX_RANK, CapacityExceeded


class TestLoopIteration:
    def test_runs_every_style(self):
        results = run_loop_iteration(rank=3, iterations=10)
        assert [r.style for r in results] == list(STYLES)
        assert all(isinstance(r, BenchmarkResult) for r in results)
        assert all(r.iterations == 10 for r in results)
        assert all(r.seconds >= 0 for r in results)

    def test_checksums_agree(self):
        """Value traversals all visit the same elements."""
        results = {r.style: r for r in run_loop_iteration(rank=3, iterations=4)}
        # 1 + 2 + 3 per traversal
        for style in ("list", "items", "indexed", "mitems"):
            assert results[style].checksum == 6 * 4
        # 0*1 + 1*2 + 2*3 per traversal
        assert results["pairs"].checksum == 8 * 4

    def test_style_subset(self):
        results = run_loop_iteration(rank=2, iterations=1, styles=["items"])
        assert [r.style for r in results] == ["items"]

    def test_unknown_style(self):
        with pytest.raises(ValueError):
            run_loop_iteration(rank=2, iterations=1, styles=["bogus"])

    def test_non_positive_iterations(self):
        with pytest.raises(ValueError):
            run_loop_iteration(rank=2, iterations=0)

    def test_rank_over_capacity(self):
        with pytest.raises(CapacityExceeded):
            run_loop_iteration(rank=MAX_RANK + 1, iterations=1)

    def test_ns_per_iteration(self):
        result = BenchmarkResult("items", iterations=4, seconds=2e-6, checksum=0)
        assert result.ns_per_iteration == pytest.approx(500.0)
