"""Tests for the CSR graph accessor."""

from __future__ import annotations

import networkx as nx
import numpy as np
import pytest
from scipy import sparse

from fastrp import Graph, Orientation


def _targets(graph: Graph, node_id: int) -> list:
    seen = []
    graph.for_each_relationship(node_id, lambda source, target: seen.append((source, target)) or True)
    return seen


@pytest.mark.parametrize(
    "orientation, expected_degrees",
    [
        (Orientation.NATURAL, [1, 1, 0]),
        (Orientation.REVERSE, [0, 1, 1]),
        (Orientation.UNDIRECTED, [1, 2, 1]),
        ("undirected", [1, 2, 1]),
    ],
)
def test_orientation_degrees(orientation, expected_degrees) -> None:
    graph = Graph.from_edges(3, [(0, 1), (1, 2)], orientation=orientation)

    assert [graph.degree(n) for n in range(3)] == expected_degrees
    assert graph.relationship_count() == sum(expected_degrees)


def test_unknown_orientation() -> None:
    with pytest.raises(ValueError, match="Unknown orientation"):
        Graph.from_edges(2, [(0, 1)], orientation="sideways")


def test_relationships_keep_insertion_order_and_parallel_edges() -> None:
    graph = Graph.from_edges(4, [(0, 3), (1, 2), (0, 1), (0, 3)])

    assert _targets(graph, 0) == [(0, 3), (0, 1), (0, 3)]
    assert graph.adjacency_matrix()[0, 3] == 2.0


def test_visitor_can_stop_traversal() -> None:
    graph = Graph.from_edges(4, [(0, 1), (0, 2), (0, 3)])
    seen = []

    def visitor(source: int, target: int) -> bool:
        seen.append(target)
        return len(seen) < 2

    graph.for_each_relationship(0, visitor)
    assert seen == [1, 2]


def test_self_loop_in_undirected_graph_is_kept_once() -> None:
    graph = Graph.from_edges(2, [(0, 0), (0, 1)], orientation="undirected")

    assert graph.degree(0) == 2
    assert graph.degree(1) == 1


def test_edges_outside_node_range_are_rejected() -> None:
    with pytest.raises(ValueError):
        Graph.from_edges(2, [(0, 2)])


def test_concurrent_copies_traverse_independently() -> None:
    graph = Graph.from_edges(3, [(0, 1), (0, 2), (1, 2), (1, 0)])
    outer, inner = graph.concurrent_copy(), graph.concurrent_copy()
    pairs = []

    def visit_outer(source: int, target: int) -> bool:
        pairs.append((source, target, [t for _, t in _targets(inner, target)]))
        return True

    outer.for_each_relationship(0, visit_outer)
    assert pairs == [(0, 1, [2, 0]), (0, 2, [])]


def test_closed_handle_cannot_traverse() -> None:
    graph = Graph.from_edges(2, [(0, 1)])
    with graph.concurrent_copy() as copy:
        assert copy.degree(0) == 1

    with pytest.raises(RuntimeError):
        copy.for_each_relationship(0, lambda s, t: True)
    # the original handle is unaffected
    assert _targets(graph, 0) == [(0, 1)]


def test_from_networkx_maps_node_ids() -> None:
    nx_graph = nx.DiGraph([("x", "y"), ("y", "z")])
    graph = Graph.from_networkx(nx_graph)

    x = graph.to_mapped_node_id("x")
    assert graph.orientation is Orientation.NATURAL
    assert [graph.to_original_node_id(t) for _, t in _targets(graph, x)] == ["y"]
    with pytest.raises(KeyError):
        graph.to_mapped_node_id("missing")


def test_from_networkx_undirected_default() -> None:
    graph = Graph.from_networkx(nx.path_graph(3))

    assert graph.orientation is Orientation.UNDIRECTED
    assert [graph.degree(n) for n in range(3)] == [1, 2, 1]


def test_from_scipy_round_trips_adjacency() -> None:
    matrix = sparse.csr_matrix(np.array([[0, 1, 1], [0, 0, 1], [1, 0, 0]], dtype=float))
    graph = Graph.from_scipy(matrix)

    assert graph.relationship_count() == 4
    np.testing.assert_array_equal(graph.adjacency_matrix().toarray(), matrix.toarray())


def test_degrees_view_is_read_only() -> None:
    degrees = Graph.from_edges(2, [(0, 1)]).degrees()

    with pytest.raises(ValueError):
        degrees[0] = 5
