from __future__ import annotations

import threading
from collections import Counter

import pytest

from fastrp.parallel import batch_size, parallel_for_each_node, partition, run_partitions


@pytest.mark.parametrize("node_count, concurrency", [(0, 4), (1, 4), (999, 1), (10_000, 3), (10_001, 8)])
def test_partitions_cover_every_node_once(node_count: int, concurrency: int) -> None:
    partitions = partition(node_count, concurrency)
    covered = [node for nodes in partitions for node in nodes]

    assert covered == list(range(node_count))


def test_batch_size_respects_minimum() -> None:
    assert batch_size(100, 4) == 1000
    assert batch_size(100, 4, min_batch_size=10) == 25
    assert batch_size(100, 1) == 100


def test_parallel_for_each_node_visits_each_node_exactly_once() -> None:
    visits = Counter()
    threads = set()
    lock = threading.Lock()

    def consumer(node_id: int) -> None:
        with lock:
            visits[node_id] += 1
            threads.add(threading.get_ident())

    parallel_for_each_node(500, 4, consumer, min_batch_size=10)

    assert set(visits) == set(range(500))
    assert set(visits.values()) == {1}
    assert threading.get_ident() not in threads


def test_single_worker_runs_on_calling_thread() -> None:
    threads = set()
    parallel_for_each_node(20, 1, lambda node_id: threads.add(threading.get_ident()))

    assert threads == {threading.get_ident()}


def test_first_failure_is_propagated() -> None:
    def task(nodes: range) -> None:
        if 250 in nodes:
            raise ValueError("bad partition")

    with pytest.raises(ValueError, match="bad partition"):
        run_partitions(partition(1000, 4, min_batch_size=100), 4, task)


def test_failure_inline() -> None:
    with pytest.raises(KeyError):
        parallel_for_each_node(3, 1, lambda node_id: {}[node_id])
