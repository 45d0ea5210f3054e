import pytest

from fastrp import Graph

# (a)-->(b)-->(c)
PATH_EDGES = [(0, 1), (1, 2)]

# Ten nodes, g..j isolated.
PAGERANK_EDGES = [
    (1, 2),  # b -> c
    (2, 1),  # c -> b
    (3, 0),  # d -> a
    (3, 1),  # d -> b
    (4, 1),  # e -> b
    (4, 3),  # e -> d
    (4, 5),  # e -> f
    (5, 1),  # f -> b
    (5, 4),  # f -> e
]
PAGERANK_NODES = list("abcdefghij")


@pytest.fixture
def path_graph() -> Graph:
    return Graph.from_edges(3, PATH_EDGES, original_ids=["a", "b", "c"])


@pytest.fixture
def pagerank_graph() -> Graph:
    return Graph.from_edges(len(PAGERANK_NODES), PAGERANK_EDGES, original_ids=PAGERANK_NODES)


@pytest.fixture
def reverse_pagerank_graph() -> Graph:
    return Graph.from_edges(
        len(PAGERANK_NODES), PAGERANK_EDGES, orientation="reverse", original_ids=PAGERANK_NODES
    )
