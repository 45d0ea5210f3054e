"""Node-parallel execution on a fixed-size thread pool.

Work is split into contiguous node ranges. Every node of ``[0, node_count)``
belongs to exactly one range, each range is handed to exactly one task, and
the call returns only once every task has finished. numpy releases the GIL
for the vector arithmetic the tasks spend their time in.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, List, Sequence

logger = logging.getLogger(__name__)

MIN_BATCH_SIZE = 1000


def batch_size(node_count: int, concurrency: int, min_batch_size: int = MIN_BATCH_SIZE) -> int:
    """Nodes per partition for the given concurrency."""
    if concurrency <= 1:
        return max(node_count, 1)
    return max(math.ceil(node_count / concurrency), min_batch_size, 1)


def partition(node_count: int, concurrency: int, min_batch_size: int = MIN_BATCH_SIZE) -> List[range]:
    """Split ``[0, node_count)`` into contiguous, disjoint ranges."""
    if node_count <= 0:
        return []
    size = batch_size(node_count, concurrency, min_batch_size)
    return [range(start, min(start + size, node_count)) for start in range(0, node_count, size)]


def run_partitions(
    partitions: Sequence[range],
    concurrency: int,
    task: Callable[[range], None],
) -> None:
    """Run ``task`` once per partition and block until all have completed.

    The first failure is re-raised after the remaining running tasks have
    stopped; tasks that had not started yet are cancelled.
    """
    if not partitions:
        return
    if concurrency <= 1 or len(partitions) == 1:
        for nodes in partitions:
            task(nodes)
        return

    workers = min(concurrency, len(partitions))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fastrp") as executor:
        futures = [executor.submit(task, nodes) for nodes in partitions]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future in pending:
            future.cancel()
        # Futures complete in arbitrary order; report the lowest failing partition.
        for future in futures:
            if future.cancelled() or not future.done():
                continue
            error = future.exception()
            if error is not None:
                logger.debug(f"Parallel task failed, cancelled {len(pending)} pending tasks")
                raise error


def parallel_for_each_node(
    node_count: int,
    concurrency: int,
    consumer: Callable[[int], None],
    min_batch_size: int = MIN_BATCH_SIZE,
) -> None:
    """Apply ``consumer`` to every node id in ``[0, node_count)`` exactly once."""

    def run(nodes: range) -> None:
        for node_id in nodes:
            consumer(node_id)

    run_partitions(partition(node_count, concurrency, min_batch_size), concurrency, run)
