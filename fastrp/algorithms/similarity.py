"""
Embedding similarity helpers
Cosine similarity between node embedding rows
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

import numpy as np

logger = logging.getLogger(__name__)


def cosine_similarity(vec1: np.ndarray, vec2: np.ndarray) -> float:
    """
    Compute cosine similarity between two vectors

    Args:
        vec1: First vector
        vec2: Second vector

    Returns:
        Cosine similarity in [-1, 1], 0.0 when either vector is all zero
    """
    norm1 = np.linalg.norm(vec1)
    norm2 = np.linalg.norm(vec2)

    if norm1 == 0 or norm2 == 0:
        return 0.0

    return float(np.dot(vec1, vec2) / (norm1 * norm2))


def average_similarity(embeddings: np.ndarray, target: int, seeds: Iterable[int]) -> float:
    """
    Mean cosine similarity between a target node and a set of seed nodes

    Args:
        embeddings: Node embedding matrix
        target: Target node id
        seeds: Seed node ids, the target itself is skipped

    Returns:
        Average similarity, 0.0 when there are no seeds
    """
    similarities = [
        cosine_similarity(embeddings[target], embeddings[seed])
        for seed in seeds
        if seed != target
    ]
    result = float(np.mean(similarities)) if similarities else 0.0
    logger.debug(f"Average similarity for node {target}: {result:.4f} (from {len(similarities)} seeds)")
    return result


def most_similar(embeddings: np.ndarray, node_id: int, top_k: int = 10) -> List[Tuple[int, float]]:
    """Nodes with the highest cosine similarity to node_id, best first."""
    if top_k <= 0 or len(embeddings) <= 1:
        return []

    norms = np.linalg.norm(embeddings, axis=1)
    norms = np.where(norms > 0, norms, 1.0)
    unit = embeddings / norms[:, np.newaxis]
    similarities = unit @ unit[node_id]
    if not np.any(embeddings[node_id]):
        similarities = np.zeros(len(embeddings))
    similarities[node_id] = -np.inf

    k = min(top_k, len(embeddings) - 1)
    candidates = np.argpartition(-similarities, k - 1)[:k]
    ranked = sorted(candidates.tolist(), key=lambda idx: (-similarities[idx], idx))
    return [(idx, float(similarities[idx])) for idx in ranked]
