"""Random projection node embeddings.

Every node starts from a sparse random vector scaled by its degree. Each
iteration replaces a node's vector by the mean of its neighbours' vectors
from the previous iteration and folds the result into the node's output
row, either as its own slice or weighted into a running sum.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from ..config import RandomProjectionConfig
from ..exceptions import ComputationError
from ..graph import Graph
from ..parallel import partition, run_partitions
from ..progress import ProgressLogger, TerminationFlag
from ..utils import l2_normalize
from .base import Algorithm
from .high_quality_random import HighQualityRandom, derive_seed

logger = logging.getLogger(__name__)

# Working buffers A and B alternate between "current" and "previous".
BUFFER_COUNT = 2


def row_length(config: RandomProjectionConfig) -> int:
    return config.embedding_row_length


class RandomProjection(Algorithm):
    """Computes one embedding row per node of ``graph``."""

    def __init__(
        self,
        graph: Graph,
        config: RandomProjectionConfig,
        progress_logger: Optional[ProgressLogger] = None,
        termination_flag: Optional[TerminationFlag] = None,
    ):
        super().__init__(progress_logger, termination_flag)
        self.graph = graph
        self.config = config

        self.embedding_dimension = config.embedding_dimension
        self.sparsity = config.sparsity
        self.iterations = config.iterations
        self.iteration_weights = config.iteration_weights
        self.normalization_strength = config.normalization_strength
        self.normalize_l2 = config.normalize_l2
        self.concurrency = config.concurrency

        node_count = graph.node_count()
        self._embeddings: Optional[np.ndarray] = np.zeros((node_count, row_length(config)), dtype=np.float64)
        self._embedding_a: Optional[np.ndarray] = np.zeros((node_count, self.embedding_dimension), dtype=np.float64)
        self._embedding_b: Optional[np.ndarray] = np.zeros((node_count, self.embedding_dimension), dtype=np.float64)
        self._partitions = partition(node_count, self.concurrency)
        self._computed = False
        self._failed = False

    def compute(self) -> "RandomProjection":
        if self._computed:
            return self
        if self._failed:
            raise ComputationError("A previous run of this RandomProjection failed, create a new one")
        if self._embedding_a is None or self._embedding_b is None:
            raise ComputationError("Working buffers have been released, create a new RandomProjection")
        if self.graph.node_count() == 0:
            logger.warning("Graph has no nodes, returning empty embeddings")
        try:
            self.termination_flag.assert_running()
            self.init_random_vectors()
            self.propagate_embeddings()
        except BaseException:
            self._failed = True
            self._embeddings = None
            raise
        self._computed = True
        return self

    def embeddings(self) -> np.ndarray:
        """The ``node_count x row_length`` embedding matrix."""
        if self._failed or self._embeddings is None:
            raise ComputationError("Computation failed, no usable embeddings are available")
        if not self._computed:
            raise ComputationError("Embeddings are not available before compute() has finished")
        return self._embeddings

    def embedding(self, node_id: int) -> np.ndarray:
        return self.embeddings()[node_id]

    def current_embedding(self, iteration: int) -> np.ndarray:
        """Buffer written by ``iteration``."""
        return self._buffer(iteration % 2 == 0)

    def previous_embedding(self, iteration: int) -> np.ndarray:
        """Buffer read by ``iteration``; before iteration 0 it holds the seeds."""
        return self._buffer(iteration % 2 != 0)

    def _buffer(self, first: bool) -> np.ndarray:
        buffer = self._embedding_a if first else self._embedding_b
        if buffer is None:
            raise ComputationError("Working buffers have been released")
        return buffer

    def release(self) -> None:
        self._embedding_a = None
        self._embedding_b = None

    # -- phases -----------------------------------------------------------

    def init_random_vectors(self) -> None:
        probability = 1.0 / (2.0 * self.sparsity)
        sqrt_sparsity = math.sqrt(self.sparsity)
        sqrt_embedding_dimension = math.sqrt(self.embedding_dimension)
        seeds = self.previous_embedding(0)
        seed = self.config.random_seed

        self.progress_logger.reset(self.graph.node_count())
        self.progress_logger.log_message("Computing random vectors")
        logger.info(f"Computing random vectors for {self.graph.node_count()} nodes")

        def task(nodes: range) -> None:
            random = HighQualityRandom()
            for node_id in nodes:
                if seed is not None:
                    random.seed(derive_seed(seed, node_id))
                degree = self.graph.degree(node_id)
                scaling = 1.0 if degree == 0 else math.pow(degree, self.normalization_strength)
                entry_value = scaling * sqrt_sparsity / sqrt_embedding_dimension
                self._compute_random_vector(random, probability, entry_value, seeds[node_id])
                self.progress_logger.log_progress()

        run_partitions(self._partitions, self.concurrency, task)

    def _compute_random_vector(
        self,
        random: HighQualityRandom,
        probability: float,
        entry_value: float,
        out: np.ndarray,
    ) -> None:
        double_probability = probability * 2.0
        for i in range(self.embedding_dimension):
            value = random.next_double()
            if value < probability:
                out[i] = entry_value
            elif value < double_probability:
                out[i] = -entry_value
            else:
                out[i] = 0.0

    def propagate_embeddings(self) -> None:
        for i in range(self.iterations):
            self.termination_flag.assert_running()
            self.progress_logger.reset(self.graph.relationship_count())
            self.progress_logger.log_message(f"Start iteration {i}")
            logger.debug(f"Start iteration {i}")

            current = self.current_embedding(i)
            previous = self.previous_embedding(i)
            run_partitions(self._partitions, self.concurrency, lambda nodes: self._propagate(nodes, current, previous))
            self._combine(i, current)

        logger.info(f"Random projection finished after {self.iterations} iterations")

    def _propagate(self, nodes: range, current: np.ndarray, previous: np.ndarray) -> None:
        with self.graph.concurrent_copy() as graph:
            for node_id in nodes:
                current_embedding = current[node_id]
                current_embedding.fill(0.0)

                def add_target(source: int, target: int) -> bool:
                    np.add(current_embedding, previous[target], out=current_embedding)
                    return True

                graph.for_each_relationship(node_id, add_target)
                degree = graph.degree(node_id)
                self.progress_logger.log_progress(degree)
                current_embedding *= 1.0 / (1 if degree == 0 else degree)

    def _combine(self, iteration: int, current: np.ndarray) -> None:
        offset = self.embedding_dimension * iteration
        weight = self.iteration_weights[iteration] if self.iteration_weights else None
        embeddings = self._embeddings

        def task(nodes: range) -> None:
            for node_id in nodes:
                new_embedding = current[node_id]
                if self.normalize_l2:
                    l2_normalize(new_embedding)
                if weight is None:
                    embeddings[node_id, offset:offset + self.embedding_dimension] = new_embedding
                else:
                    new_embedding *= weight
                    embeddings[node_id] += new_embedding

        run_partitions(self._partitions, self.concurrency, task)


def embed(
    graph: Graph,
    config: Optional[RandomProjectionConfig] = None,
    progress_logger: Optional[ProgressLogger] = None,
) -> np.ndarray:
    """Compute random projection embeddings for graph and release working memory."""
    with RandomProjection(graph, config or RandomProjectionConfig(), progress_logger) as algorithm:
        return algorithm.compute().embeddings()
