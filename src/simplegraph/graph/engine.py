"""Graph engine using RustworkX.

Provides the core graph container: mutation, adjacency queries and
all-simple-paths enumeration. Vertices are never added directly; they are
derived from the endpoints of the stored edges.
"""

import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

import rustworkx as rx

from simplegraph.core.exceptions import InvalidArgumentError
from simplegraph.graph.models import Edge, GraphStats, Vertex, WeightedNeighbor
from simplegraph.utils.logging import get_logger

logger = get_logger(__name__)

_NO_EDGES: tuple[Edge, ...] = ()


@dataclass
class _GraphState:
    """Vertex and edge storage, only touched while holding the graph lock.

    Attributes:
        graph: Backing multigraph (node payload Vertex, edge payload Edge).
        vertex_index: Vertex name to node index.
        edge_index: Edge to edge index, in insertion order.
    """

    graph: rx.PyDiGraph = field(default_factory=lambda: rx.PyDiGraph(multigraph=True))
    vertex_index: dict[str, int] = field(default_factory=dict)
    edge_index: dict[Edge, int] = field(default_factory=dict)


class Graph:
    """A weighted directed graph, optionally mirroring every added edge.

    All reads and writes go through one re-entrant lock per instance, so
    readers never observe a half-applied add or remove. Accessors return
    fresh containers rather than internal storage.

    Note:
        Building a bidirectional graph from an edge collection does not
        synthesize reverse edges for that collection; only ``add_edge``
        does. Use ``from_edges`` to get reverse edges for the initial set.
    """

    def __init__(
        self,
        edges: Iterable[Edge] | None = _NO_EDGES,
        bidirectional: bool = False,
    ) -> None:
        """Initialize a graph from an edge collection.

        Args:
            edges: Initial edges, stored as given. Defaults to no edges.
            bidirectional: Mirror every edge later passed to ``add_edge``.

        Raises:
            InvalidArgumentError: If ``edges`` is None.
        """
        if edges is None:
            raise InvalidArgumentError("edges", "edge collection must not be None")

        self._lock = threading.RLock()
        self._bidirectional = bidirectional
        self._state = _GraphState()

        with self._lock:
            for edge in edges:
                if edge is not None:
                    self._insert_edge(edge)

    @classmethod
    def from_edges(cls, edges: Iterable[Edge] | None, bidirectional: bool = False) -> "Graph":
        """Create a graph by adding each edge through ``add_edge``.

        Unlike the constructor, a bidirectional graph built this way gets
        the reverse of every initial edge.

        Args:
            edges: Initial edges.
            bidirectional: Mirror every edge.

        Returns:
            New graph instance.

        Raises:
            InvalidArgumentError: If ``edges`` is None.
        """
        if edges is None:
            raise InvalidArgumentError("edges", "edge collection must not be None")

        graph = cls(bidirectional=bidirectional)
        for edge in edges:
            graph.add_edge(edge)
        return graph

    @property
    def bidirectional(self) -> bool:
        """Whether added edges are mirrored by a synthesized reverse edge."""
        return self._bidirectional

    @property
    def vertex_count(self) -> int:
        """Get the number of vertices in the graph."""
        with self._lock:
            return len(self._state.vertex_index)

    @property
    def edge_count(self) -> int:
        """Get the number of edges in the graph."""
        with self._lock:
            return len(self._state.edge_index)

    def get_vertices(self) -> set[Vertex]:
        """Get a snapshot of all vertices.

        Returns:
            A new set; later mutations of the graph do not affect it.
        """
        with self._lock:
            graph = self._state.graph
            return {graph[index] for index in self._state.vertex_index.values()}

    def get_edges(self) -> set[Edge]:
        """Get a snapshot of all edges.

        Returns:
            A new set; later mutations of the graph do not affect it.
        """
        with self._lock:
            return set(self._state.edge_index)

    def get_vertex(self, name: str | None) -> Vertex | None:
        """Get a vertex by its exact name.

        Args:
            name: The vertex name.

        Returns:
            The Vertex, or None if not found.
        """
        if name is None:
            return None
        with self._lock:
            index = self._state.vertex_index.get(name)
            if index is None:
                return None
            return self._state.graph[index]

    def has_edge(self, edge: Edge | None) -> bool:
        """Check if an edge (by structural equality) is stored."""
        if edge is None:
            return False
        with self._lock:
            return edge in self._state.edge_index

    def add_edge(self, edge: Edge | None) -> bool:
        """Add an edge, creating missing endpoint vertices.

        Does nothing if the edge is None or already present. In a
        bidirectional graph the reverse edge "{target} : {source}" with the
        same weight is added as well.

        Args:
            edge: The edge to add.

        Returns:
            True if the edge was stored, False if it was None or a duplicate.
        """
        if edge is None:
            return False

        with self._lock:
            if edge in self._state.edge_index:
                return False

            self._insert_edge(edge)
            if self._bidirectional:
                self._insert_edge(edge.reversed())

        logger.debug(
            "Added edge",
            edge=edge.name,
            source=edge.source,
            target=edge.target,
            weight=edge.weight,
            mirrored=self._bidirectional,
        )
        return True

    def remove_edge(self, edge: Edge | None) -> bool:
        """Remove an edge and any vertex left without incident edges.

        In a bidirectional graph the synthesized reverse edge is removed
        too. Removing None or an absent edge is a successful no-op.

        Args:
            edge: The edge to remove.

        Returns:
            True unless the edge was present but could not be removed.
        """
        if edge is None:
            return True

        with self._lock:
            if edge not in self._state.edge_index:
                return True

            removed = self._delete_edge(edge)
            if self._bidirectional:
                self._delete_edge(edge.reversed())
            pruned = self._prune_vertices()

        logger.debug(
            "Removed edge",
            edge=edge.name,
            source=edge.source,
            target=edge.target,
            pruned_vertices=pruned,
        )
        return removed

    def get_adjacency_list(self, source_name: str | None) -> list[Vertex]:
        """Get the destination vertex of every edge leaving a vertex.

        Args:
            source_name: Name of the source vertex.

        Returns:
            One entry per outgoing edge, in no defined order. Empty when
            the vertex is unknown.
        """
        if source_name is None:
            return []
        with self._lock:
            graph = self._state.graph
            return [graph[target] for _, target, _ in self._out_edges(source_name)]

    def get_adjacency_list_with_weight(
        self, source_name: str | None
    ) -> list[WeightedNeighbor]:
        """Get the destination vertex and weight of every edge leaving a vertex.

        Parallel edges to the same destination each produce their own entry.

        Args:
            source_name: Name of the source vertex.

        Returns:
            List of weighted neighbors, in no defined order.
        """
        if source_name is None:
            return []
        with self._lock:
            graph = self._state.graph
            return [
                WeightedNeighbor(vertex=graph[target], weight=edge.weight)
                for _, target, edge in self._out_edges(source_name)
            ]

    def show_connectivity(
        self, start_name: str | None, end_name: str | None
    ) -> list[list[str]]:
        """Enumerate every simple path from one vertex to another.

        A depth-first walk keeps the current path prefix and never extends
        it with a vertex already on it. A vertex matches the end vertex when
        the names are equal ignoring case.

        Warning:
            The number of simple paths grows exponentially with graph
            density. There is no depth limit, so only call this on small,
            sparse or acyclic graphs.

        Args:
            start_name: Name of the start vertex.
            end_name: Name of the end vertex.

        Returns:
            List of paths, each an ordered list of vertex names from start
            to end. Empty when either vertex is unknown or no path exists.
        """
        if start_name is None or end_name is None:
            return []

        with self._lock:
            if self.get_vertex(start_name) is None or self.get_vertex(end_name) is None:
                return []

            end_key = end_name.casefold()
            if start_name.casefold() == end_key:
                return [[start_name]]

            paths: list[list[str]] = []
            path = [start_name]
            pending: list[Iterator[str]] = [self._neighbor_names(start_name)]

            while pending:
                neighbor = next(pending[-1], None)
                if neighbor is None:
                    pending.pop()
                    path.pop()
                    continue
                if neighbor in path:
                    continue
                if neighbor.casefold() == end_key:
                    paths.append([*path, neighbor])
                    continue
                path.append(neighbor)
                pending.append(self._neighbor_names(neighbor))

        logger.debug(
            "Enumerated simple paths",
            start=start_name,
            end=end_name,
            path_count=len(paths),
        )
        return paths

    def get_stats(self) -> GraphStats:
        """Get statistics about the graph.

        Returns:
            GraphStats with counts, component count and density.
        """
        with self._lock:
            graph = self._state.graph
            n = len(self._state.vertex_index)
            e = len(self._state.edge_index)
            components = rx.connected_components(graph.to_undirected()) if n else []

        density = e / (n * (n - 1)) if n > 1 else 0.0
        return GraphStats(
            vertex_count=n,
            edge_count=e,
            bidirectional=self._bidirectional,
            connected_components=len(components),
            density=density,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert graph to dictionary for serialization.

        Vertices are not listed; they are derived from the edges on load.

        Returns:
            Dictionary representation of the graph.
        """
        with self._lock:
            edges = [edge.to_dict() for edge in self._state.edge_index]
        return {"bidirectional": self._bidirectional, "edges": edges}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Graph":
        """Create a graph from dictionary.

        Stored edges are restored as they are; no reverse edges are
        synthesized, since a saved bidirectional graph already holds them.

        Args:
            data: Dictionary representation.

        Returns:
            New graph instance.
        """
        edges = [Edge.from_dict(item) for item in data.get("edges", [])]
        return cls(edges, bidirectional=bool(data.get("bidirectional", False)))

    def __getstate__(self) -> dict[str, Any]:
        return self.to_dict()

    def __setstate__(self, state: dict[str, Any]) -> None:
        self._lock = threading.RLock()
        self._bidirectional = bool(state.get("bidirectional", False))
        self._state = _GraphState()
        for item in state.get("edges", []):
            self._insert_edge(Edge.from_dict(item))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(vertices={self.vertex_count}, "
            f"edges={self.edge_count}, bidirectional={self._bidirectional})"
        )

    # Helpers below expect the caller to hold the lock.

    def _ensure_vertex(self, name: str) -> int:
        index = self._state.vertex_index.get(name)
        if index is None:
            index = self._state.graph.add_node(Vertex(name))
            self._state.vertex_index[name] = index
        return index

    def _insert_edge(self, edge: Edge) -> None:
        state = self._state
        if edge in state.edge_index:
            return

        source_index = self._ensure_vertex(edge.source)
        target_index = self._ensure_vertex(edge.target)
        stored = Edge(
            name=edge.name,
            source=edge.source,
            target=edge.target,
            weight=edge.weight,
        )
        state.edge_index[stored] = state.graph.add_edge(source_index, target_index, stored)

    def _delete_edge(self, edge: Edge) -> bool:
        index = self._state.edge_index.pop(edge, None)
        if index is None:
            return False
        self._state.graph.remove_edge_from_index(index)
        return True

    def _prune_vertices(self) -> list[str]:
        state = self._state
        pruned = []
        for name, index in list(state.vertex_index.items()):
            if state.graph.in_degree(index) + state.graph.out_degree(index) == 0:
                state.graph.remove_node(index)
                del state.vertex_index[name]
                pruned.append(name)
        return pruned

    def _out_edges(self, source_name: str) -> list[tuple[int, int, Edge]]:
        index = self._state.vertex_index.get(source_name)
        if index is None:
            return []
        return list(self._state.graph.out_edges(index))

    def _neighbor_names(self, source_name: str) -> Iterator[str]:
        graph = self._state.graph
        return iter([graph[target].name for _, target, _ in self._out_edges(source_name)])
