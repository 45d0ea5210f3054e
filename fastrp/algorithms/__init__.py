"""
Graph algorithms on the node-parallel execution model.

- RandomProjection: iterative random projection node embeddings
- PageRank: damped rank propagation, optionally personalized
- similarity helpers over embedding matrices
"""

from .base import Algorithm
from .high_quality_random import HighQualityRandom
from .pagerank import PageRank
from .random_projection import BUFFER_COUNT, RandomProjection, embed, row_length
from .similarity import average_similarity, cosine_similarity, most_similar

__all__ = [
    "Algorithm",
    "HighQualityRandom",
    "PageRank",
    "RandomProjection",
    "BUFFER_COUNT",
    "embed",
    "row_length",
    "average_similarity",
    "cosine_similarity",
    "most_similar",
]
