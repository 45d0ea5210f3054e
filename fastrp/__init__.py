"""
Parallel random projection node embeddings.

Main components:
- Graph: read-only CSR graph accessor with per-worker concurrent copies
- RandomProjection: seed, propagate and combine node embedding vectors
- PageRank: damped rank propagation on the same execution model
- RandomProjectionConfig / PageRankConfig: validated configurations
- ProgressLogger / TerminationFlag: progress reporting and cancellation
"""

from .algorithms import (
    Algorithm,
    HighQualityRandom,
    PageRank,
    RandomProjection,
    average_similarity,
    cosine_similarity,
    embed,
    most_similar,
)
from .config import PageRankConfig, RandomProjectionConfig
from .exceptions import (
    ComputationError,
    ComputationTerminated,
    ConfigurationError,
    FastRPError,
    MemoryEstimationError,
)
from .graph import Graph, Orientation
from .memory import MemoryEstimate, estimate_pagerank, estimate_random_projection
from .progress import ProgressLogger, TerminationFlag
from .utils import setup_logger

__version__ = "0.1.0"

__all__ = [
    "Algorithm",
    "HighQualityRandom",
    "PageRank",
    "RandomProjection",
    "average_similarity",
    "cosine_similarity",
    "embed",
    "most_similar",
    "PageRankConfig",
    "RandomProjectionConfig",
    "ComputationError",
    "ComputationTerminated",
    "ConfigurationError",
    "FastRPError",
    "MemoryEstimationError",
    "Graph",
    "Orientation",
    "MemoryEstimate",
    "estimate_pagerank",
    "estimate_random_projection",
    "ProgressLogger",
    "TerminationFlag",
    "setup_logger",
]
