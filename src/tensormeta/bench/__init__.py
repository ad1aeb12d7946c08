"""Micro-benchmarks for traversing stack array metadata."""

from .loop_iteration import BenchmarkResult, run_loop_iteration, STYLES

__all__ = [
    "BenchmarkResult",
    "run_loop_iteration",
    "STYLES",
]
