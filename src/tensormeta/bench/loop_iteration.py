"""
Loop iteration benchmark.

Times repeated traversals of one rank-N Metadata with each traversal style
the container offers, next to a plain Python list as the baseline.
"""

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

from ..logging import get_logger
from ..metadata import Metadata, to_metadata

logger = get_logger(__name__)


@dataclass(frozen=True)
class BenchmarkResult:
    """Timing for one traversal style."""
    style: str
    iterations: int
    seconds: float
    checksum: int

    @property
    def ns_per_iteration(self) -> float:
        return self.seconds * 1e9 / self.iterations


def _loop_list(values: List[int], meta: Metadata, iterations: int) -> int:
    total = 0
    for _ in range(iterations):
        for value in values:
            total += value
    return total


def _loop_items(values: List[int], meta: Metadata, iterations: int) -> int:
    total = 0
    for _ in range(iterations):
        for value in meta:
            total += value
    return total


def _loop_pairs(values: List[int], meta: Metadata, iterations: int) -> int:
    total = 0
    for _ in range(iterations):
        for i, value in meta.pairs():
            total += i * value
    return total


def _loop_indexed(values: List[int], meta: Metadata, iterations: int) -> int:
    total = 0
    for _ in range(iterations):
        for i in range(len(meta)):
            total += meta[i]
    return total


def _loop_mitems(values: List[int], meta: Metadata, iterations: int) -> int:
    total = 0
    for _ in range(iterations):
        for ref in meta.mitems():
            ref.value = ref.value
            total += ref.value
    return total


_LOOPS: Dict[str, Callable[[List[int], Metadata, int], int]] = {
    "list": _loop_list,
    "items": _loop_items,
    "pairs": _loop_pairs,
    "indexed": _loop_indexed,
    "mitems": _loop_mitems,
}

STYLES = tuple(_LOOPS)


def run_loop_iteration(
    rank: int,
    iterations: int,
    styles: Sequence[str] = STYLES,
) -> List[BenchmarkResult]:
    """
    Run the loop iteration benchmark.

    Args:
        rank: Number of dimensions in the benchmarked metadata
        iterations: Number of full traversals per style
        styles: Subset of STYLES to run, in order

    Returns:
        One BenchmarkResult per style

    Raises:
        ValueError: If iterations is not positive or a style is unknown
        CapacityExceeded: If rank exceeds the metadata capacity
    """
    if iterations < 1:
        raise ValueError(f"iterations must be positive, got {iterations}")
    unknown = [style for style in styles if style not in _LOOPS]
    if unknown:
        raise ValueError(f"Unknown benchmark styles: {', '.join(unknown)}")

    values = list(range(1, rank + 1))
    meta = to_metadata(values)

    results = []
    for style in styles:
        loop = _LOOPS[style]
        start = time.perf_counter()
        checksum = loop(values, meta, iterations)
        elapsed = time.perf_counter() - start
        logger.debug(f"{style}: {iterations} iterations in {elapsed:.6f}s")
        results.append(BenchmarkResult(style, iterations, elapsed, checksum))

    return results
