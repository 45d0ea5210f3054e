"""Worst-case memory estimates computed without running an algorithm."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .algorithms.random_projection import BUFFER_COUNT, row_length
from .config import PageRankConfig, RandomProjectionConfig
from .exceptions import MemoryEstimationError
from .parallel import partition
from .utils import format_bytes

DOUBLE_BYTES = 8


def _double_array(length: int) -> int:
    return length * DOUBLE_BYTES


@dataclass
class MemoryEstimate:
    """Byte estimate with a per-component breakdown."""

    description: str
    components: Dict[str, int] = field(default_factory=dict)

    @property
    def total_bytes(self) -> int:
        return sum(self.components.values())

    def human_readable(self) -> str:
        lines = [f"{self.description}: {format_bytes(self.total_bytes)}"]
        for name, size in self.components.items():
            lines.append(f"  {name}: {format_bytes(size)}")
        return "\n".join(lines)

    def assert_fits(self, max_bytes: Optional[int]) -> None:
        if max_bytes is not None and self.total_bytes > max_bytes:
            raise MemoryEstimationError(
                f"{self.description} requires {format_bytes(self.total_bytes)}, "
                f"but only {format_bytes(max_bytes)} are available"
            )


def estimate_random_projection(node_count: int, config: RandomProjectionConfig) -> MemoryEstimate:
    """Two working buffers, the output rows and one scratch vector per worker."""
    dimension = config.embedding_dimension
    components = {
        f"buffer {name}": _double_array(node_count * dimension)
        for name in "AB"[:BUFFER_COUNT]
    }
    components["embeddings"] = _double_array(node_count * row_length(config))
    components["worker scratch"] = config.concurrency * _double_array(dimension)
    return MemoryEstimate(f"RandomProjection (nodes={node_count})", components)


def estimate_pagerank(node_count: int, config: PageRankConfig) -> MemoryEstimate:
    """Score vectors plus one accumulator per partition."""
    partitions = max(1, len(partition(node_count, config.concurrency)))
    components = {
        "base scores": _double_array(node_count),
        "scores": _double_array(node_count),
        "next scores": _double_array(node_count),
        "partition accumulators": partitions * _double_array(node_count),
    }
    return MemoryEstimate(f"PageRank (nodes={node_count})", components)
