"""Damped rank propagation (PageRank) on the node-parallel execution model."""

from __future__ import annotations

import logging
from typing import Dict, Hashable, Iterable, Optional

import numpy as np

from ..config import PageRankConfig
from ..exceptions import ComputationError
from ..graph import Graph
from ..parallel import partition, run_partitions
from ..progress import ProgressLogger, TerminationFlag
from .base import Algorithm

logger = logging.getLogger(__name__)


class PageRank(Algorithm):
    """Unnormalized PageRank; isolated nodes score ``1 - damping_factor``.

    Each iteration pushes ``damping_factor * score / degree`` along every
    relationship into a partition-local accumulator, then reduces the
    accumulators node by node. With ``source_nodes`` the teleport mass is
    restricted to those nodes (personalized PageRank).
    """

    def __init__(
        self,
        graph: Graph,
        config: Optional[PageRankConfig] = None,
        source_nodes: Optional[Iterable[int]] = None,
        progress_logger: Optional[ProgressLogger] = None,
        termination_flag: Optional[TerminationFlag] = None,
    ):
        super().__init__(progress_logger, termination_flag)
        self.graph = graph
        self.config = config or PageRankConfig()

        node_count = graph.node_count()
        alpha = 1.0 - self.config.damping_factor
        if source_nodes is None:
            self._base = np.full(node_count, alpha, dtype=np.float64)
        else:
            self._base = np.zeros(node_count, dtype=np.float64)
            sources = np.fromiter(source_nodes, dtype=np.int64)
            if len(sources) and (sources.min() < 0 or sources.max() >= node_count):
                raise ValueError(f"Source node outside [0, {node_count})")
            self._base[sources] = alpha

        self._scores = self._base.copy()
        self._next_scores = np.zeros(node_count, dtype=np.float64)
        self._partitions = partition(node_count, self.config.concurrency)
        self._partition_index = {nodes.start: idx for idx, nodes in enumerate(self._partitions)}
        self._partial: Optional[np.ndarray] = np.zeros((len(self._partitions), node_count), dtype=np.float64)
        self._iterations = 0
        self._did_converge = False
        self._computed = False

    def compute(self) -> "PageRank":
        if self._computed:
            return self
        if self._partial is None:
            raise ComputationError("Working buffers have been released, create a new PageRank")

        self.progress_logger.log_message(":: Start")
        for iteration in range(1, self.config.max_iterations + 1):
            self.termination_flag.assert_running()
            self.progress_logger.reset(self.graph.relationship_count())
            self.progress_logger.log_message(f"Iteration {iteration} :: Start")

            run_partitions(self._partitions, self.config.concurrency, self._push)
            run_partitions(self._partitions, self.config.concurrency, self._reduce)

            delta = float(np.max(np.abs(self._next_scores - self._scores))) if len(self._scores) else 0.0
            self._scores, self._next_scores = self._next_scores, self._scores
            self._iterations = iteration
            self.progress_logger.log_message(f"Iteration {iteration} :: Finished")
            logger.debug(f"PageRank iteration {iteration}: max change {delta:.3e}")

            if delta <= self.config.tolerance:
                self._did_converge = True
                break

        self.progress_logger.log_message(":: Finished")
        logger.info(
            f"PageRank computed for {self.graph.node_count()} nodes in {self._iterations} iterations"
            f" (converged: {self._did_converge})"
        )
        self._computed = True
        return self

    def _push(self, nodes: range) -> None:
        accumulator = self._partial[self._partition_index[nodes.start]]
        accumulator.fill(0.0)
        scores = self._scores
        damping_factor = self.config.damping_factor

        with self.graph.concurrent_copy() as graph:
            for source in nodes:
                degree = graph.degree(source)
                if degree == 0:
                    continue
                delta = damping_factor * scores[source] / degree

                def push(_source: int, target: int) -> bool:
                    accumulator[target] += delta
                    return True

                graph.for_each_relationship(source, push)
                self.progress_logger.log_progress(degree)

    def _reduce(self, nodes: range) -> None:
        window = slice(nodes.start, nodes.stop)
        self._next_scores[window] = self._base[window] + self._partial[:, window].sum(axis=0)

    def iterations(self) -> int:
        return self._iterations

    def did_converge(self) -> bool:
        return self._did_converge

    def scores(self) -> np.ndarray:
        if not self._computed:
            raise ComputationError("Scores are not available before compute() has finished")
        return self._scores

    def score(self, node_id: int) -> float:
        return float(self.scores()[node_id])

    def result(self) -> Dict[Hashable, float]:
        """Scores keyed by original node id."""
        scores = self.scores()
        return {self.graph.to_original_node_id(idx): float(value) for idx, value in enumerate(scores)}

    def release(self) -> None:
        self._partial = None
        self._next_scores = np.zeros(0, dtype=np.float64)
