"""In-memory graph accessor in compressed sparse row form.

A :class:`Graph` is immutable once built. Traversal goes through an
:class:`AdjacencyCursor` owned by the graph handle, so a single handle must
not be traversed from several threads at once; every worker takes its own
handle from :meth:`Graph.concurrent_copy`.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np
from scipy import sparse

logger = logging.getLogger(__name__)

RelationshipVisitor = Callable[[int, int], Any]


class Orientation(enum.Enum):
    """How stored relationships are projected when the graph is built."""

    NATURAL = "natural"
    REVERSE = "reverse"
    UNDIRECTED = "undirected"

    @classmethod
    def parse(cls, value: "Orientation | str") -> "Orientation":
        if isinstance(value, Orientation):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown orientation {value!r}, expected one of {[o.value for o in cls]}"
            ) from None


class AdjacencyCursor:
    """Mutable position inside one node's adjacency list."""

    __slots__ = ("_indices", "_position", "_end")

    def __init__(self, indices: np.ndarray):
        self._indices = indices
        self._position = 0
        self._end = 0

    def init(self, start: int, end: int) -> "AdjacencyCursor":
        self._position = start
        self._end = end
        return self

    def has_next(self) -> bool:
        return self._position < self._end

    def next(self) -> int:
        target = int(self._indices[self._position])
        self._position += 1
        return target

    def remaining(self) -> int:
        return self._end - self._position


class Graph:
    """Read-only graph with dense node ids ``0 .. node_count() - 1``."""

    def __init__(
        self,
        indptr: np.ndarray,
        indices: np.ndarray,
        original_ids: Optional[Sequence[Hashable]] = None,
        orientation: Orientation = Orientation.NATURAL,
    ):
        if indptr.ndim != 1 or len(indptr) == 0:
            raise ValueError("indptr must be a non-empty one-dimensional array")
        if int(indptr[-1]) != len(indices):
            raise ValueError(f"indptr ends at {int(indptr[-1])} but there are {len(indices)} targets")
        self._indptr = indptr
        self._indices = indices
        self._degrees = np.diff(indptr)
        self._orientation = orientation
        self._original_ids: Optional[List[Hashable]] = list(original_ids) if original_ids is not None else None
        self._mapped_ids: Optional[Dict[Hashable, int]] = (
            {node: idx for idx, node in enumerate(self._original_ids)} if self._original_ids is not None else None
        )
        self._cursor: Optional[AdjacencyCursor] = AdjacencyCursor(indices)

    # -- builders ---------------------------------------------------------

    @classmethod
    def from_edges(
        cls,
        node_count: int,
        edges: Iterable[Tuple[int, int]],
        orientation: "Orientation | str" = Orientation.NATURAL,
        original_ids: Optional[Sequence[Hashable]] = None,
    ) -> "Graph":
        """Build a graph from ``(source, target)`` pairs of dense node ids.

        Parallel relationships are kept. Within a node, targets keep their
        insertion order.
        """
        orientation = Orientation.parse(orientation)
        pairs = np.asarray(list(edges), dtype=np.int64).reshape(-1, 2)
        if len(pairs) and (pairs.min() < 0 or pairs.max() >= node_count):
            raise ValueError(f"Relationship references a node outside [0, {node_count})")

        sources, targets = pairs[:, 0], pairs[:, 1]
        if orientation is Orientation.REVERSE:
            sources, targets = targets, sources
        elif orientation is Orientation.UNDIRECTED:
            not_loop = sources != targets
            sources, targets = (
                np.concatenate([sources, targets[not_loop]]),
                np.concatenate([targets, sources[not_loop]]),
            )

        order = np.argsort(sources, kind="stable")
        indices = targets[order].astype(np.int64, copy=False)
        counts = np.bincount(sources, minlength=node_count) if len(sources) else np.zeros(node_count, dtype=np.int64)
        indptr = np.zeros(node_count + 1, dtype=np.int64)
        np.cumsum(counts, out=indptr[1:])

        graph = cls(indptr, indices, original_ids=original_ids, orientation=orientation)
        logger.debug(f"Built graph with {graph.node_count()} nodes, {graph.relationship_count()} relationships")
        return graph

    @classmethod
    def from_networkx(
        cls,
        nx_graph: nx.Graph,
        orientation: "Orientation | str | None" = None,
        nodelist: Optional[Sequence[Hashable]] = None,
    ) -> "Graph":
        """Build a graph from a networkx graph.

        Undirected networkx graphs default to ``UNDIRECTED``, directed ones to
        ``NATURAL``. ``nodelist`` fixes the dense id of every node.
        """
        if orientation is None:
            orientation = Orientation.NATURAL if nx_graph.is_directed() else Orientation.UNDIRECTED
        node_list = list(nodelist) if nodelist is not None else list(nx_graph.nodes())
        index = {node: idx for idx, node in enumerate(node_list)}
        if len(index) != len(node_list):
            raise ValueError("nodelist contains duplicate nodes")

        edges = []
        for source, target in nx_graph.edges():
            if source in index and target in index:
                edges.append((index[source], index[target]))
        return cls.from_edges(len(node_list), edges, orientation=orientation, original_ids=node_list)

    @classmethod
    def from_scipy(cls, matrix: sparse.spmatrix, orientation: "Orientation | str" = Orientation.NATURAL) -> "Graph":
        """Build a graph from the non-zero pattern of a square sparse matrix."""
        rows, cols = matrix.shape
        if rows != cols:
            raise ValueError(f"Adjacency matrix must be square, got {matrix.shape}")
        coo = sparse.coo_matrix(matrix)
        coo.eliminate_zeros()
        return cls.from_edges(rows, zip(coo.row.tolist(), coo.col.tolist()), orientation=orientation)

    # -- accessor contract ------------------------------------------------

    def node_count(self) -> int:
        return len(self._degrees)

    def relationship_count(self) -> int:
        return len(self._indices)

    def degree(self, node_id: int) -> int:
        return int(self._degrees[node_id])

    def degrees(self) -> np.ndarray:
        """Read-only view of every node's degree."""
        view = self._degrees.view()
        view.flags.writeable = False
        return view

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    def for_each_relationship(self, node_id: int, visitor: RelationshipVisitor) -> None:
        """Call ``visitor(node_id, target)`` for every relationship of node_id.

        Traversal of this node stops as soon as the visitor returns a falsy value.
        """
        if self._cursor is None:
            raise RuntimeError("Graph handle has been closed")
        cursor = self._cursor.init(int(self._indptr[node_id]), int(self._indptr[node_id + 1]))
        while cursor.has_next():
            if not visitor(node_id, cursor.next()):
                return

    def targets(self, node_id: int) -> np.ndarray:
        """Targets of node_id in traversal order."""
        return self._indices[self._indptr[node_id]:self._indptr[node_id + 1]]

    def concurrent_copy(self) -> "Graph":
        """Independent handle over the same storage with its own cursor."""
        copy = type(self).__new__(type(self))
        copy.__dict__.update(self.__dict__)
        copy._cursor = AdjacencyCursor(self._indices)
        return copy

    def close(self) -> None:
        self._cursor = None

    def __enter__(self) -> "Graph":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- id mapping and export --------------------------------------------

    def to_original_node_id(self, node_id: int) -> Hashable:
        if self._original_ids is None:
            return node_id
        return self._original_ids[node_id]

    def to_mapped_node_id(self, original_id: Hashable) -> int:
        if self._mapped_ids is None:
            return int(original_id)  # type: ignore[arg-type]
        try:
            return self._mapped_ids[original_id]
        except KeyError:
            raise KeyError(f"Node {original_id!r} is not part of the graph") from None

    def adjacency_matrix(self) -> sparse.csr_matrix:
        """Relationship multiplicities as a ``node_count x node_count`` CSR matrix."""
        n = self.node_count()
        matrix = sparse.csr_matrix(
            (np.ones(len(self._indices), dtype=np.float64), self._indices, self._indptr),
            shape=(n, n),
            copy=True,
        )
        matrix.sum_duplicates()
        return matrix

    def __repr__(self) -> str:
        return (
            f"Graph(node_count={self.node_count()}, relationship_count={self.relationship_count()}, "
            f"orientation={self._orientation.value})"
        )
