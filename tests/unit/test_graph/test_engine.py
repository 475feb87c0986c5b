"""Tests for graph engine."""

import pickle
import threading

import pytest

from simplegraph.core.exceptions import InvalidArgumentError
from simplegraph.graph.engine import Graph
from simplegraph.graph.models import Edge, Vertex, WeightedNeighbor


class TestGraphConstruction:
    """Tests for building graphs."""

    def test_empty_graph(self) -> None:
        """Test empty graph properties."""
        graph = Graph()
        assert graph.vertex_count == 0
        assert graph.edge_count == 0
        assert graph.bidirectional is False

    def test_none_edges_raises(self) -> None:
        """Test that a missing edge collection is rejected."""
        with pytest.raises(InvalidArgumentError, match="edges"):
            Graph(None)

    def test_from_edges_none_raises(self) -> None:
        """Test that from_edges rejects a missing edge collection."""
        with pytest.raises(InvalidArgumentError):
            Graph.from_edges(None)

    def test_vertices_derived_from_edges(self, triangle_edges: set[Edge]) -> None:
        """Test every endpoint becomes a vertex."""
        graph = Graph(triangle_edges)
        assert graph.get_vertices() == {Vertex("Node_1"), Vertex("Node_2"), Vertex("Node_3")}
        assert graph.vertex_count == 3

    def test_edge_count_matches_input(self, network_edges: set[Edge]) -> None:
        """Test the stored edges equal the input set."""
        graph = Graph(network_edges)
        assert graph.edge_count == len(network_edges)
        assert graph.get_edges() == network_edges
        endpoints = {e.source for e in network_edges} | {e.target for e in network_edges}
        assert {v.name for v in graph.get_vertices()} == endpoints

    def test_duplicate_input_edges_stored_once(self) -> None:
        """Test structurally equal edges collapse."""
        graph = Graph([Edge("e", "a", "b", 1), Edge("e", "a", "b", 1)])
        assert graph.edge_count == 1

    def test_bidirectional_constructor_keeps_edges_as_given(
        self, triangle_edges: set[Edge]
    ) -> None:
        """Test the constructor does not mirror the initial edges."""
        graph = Graph(triangle_edges, bidirectional=True)
        assert graph.bidirectional is True
        assert graph.get_edges() == triangle_edges

    def test_from_edges_mirrors_initial_edges(self, triangle_edges: set[Edge]) -> None:
        """Test from_edges synthesizes reverse edges."""
        graph = Graph.from_edges(triangle_edges, bidirectional=True)
        assert graph.edge_count == len(triangle_edges) * 2
        for edge in triangle_edges:
            assert graph.has_edge(edge.reversed())

    def test_from_edges_directed(self, triangle_edges: set[Edge]) -> None:
        """Test from_edges on a directed graph adds edges as given."""
        graph = Graph.from_edges(triangle_edges)
        assert graph.get_edges() == triangle_edges


class TestGraphMutation:
    """Tests for adding and removing edges."""

    @pytest.fixture
    def new_edges(self) -> list[Edge]:
        """Edges that introduce Node_4."""
        return [
            Edge("Edge 1_4", "Node_1", "Node_4", 14),
            Edge("Edge 2_4", "Node_2", "Node_4", 24),
            Edge("Edge 3_4", "Node_3", "Node_4", 34),
        ]

    def test_add_edges_to_empty_graph(self, triangle_edges: set[Edge]) -> None:
        """Test adding edges one by one."""
        graph = Graph()
        for edge in triangle_edges:
            graph.add_edge(edge)
        assert graph.get_edges() == triangle_edges
        assert graph.vertex_count == 3

    def test_add_edges_bidirectional_doubles_edges(self, triangle_edges: set[Edge]) -> None:
        """Test every added edge gets a reverse edge."""
        graph = Graph(bidirectional=True)
        for edge in triangle_edges:
            graph.add_edge(edge)
        assert graph.get_edges() >= triangle_edges
        assert graph.edge_count == len(triangle_edges) * 2
        assert graph.has_edge(Edge("Node_2 : Node_1", "Node_2", "Node_1", 12))

    def test_add_edge_creates_vertices(
        self, triangle_edges: set[Edge], new_edges: list[Edge]
    ) -> None:
        """Test adding an edge to an unseen vertex creates it."""
        graph = Graph(triangle_edges)
        for edge in new_edges:
            graph.add_edge(edge)
        assert graph.get_vertex("Node_4") == Vertex("Node_4")
        assert graph.edge_count == len(triangle_edges) + len(new_edges)

    def test_add_none_is_noop(self) -> None:
        """Test adding None does nothing."""
        graph = Graph()
        assert graph.add_edge(None) is False
        assert graph.edge_count == 0

    def test_add_existing_edge_is_noop(self, triangle_edges: set[Edge]) -> None:
        """Test adding a present edge does nothing."""
        graph = Graph(triangle_edges, bidirectional=True)
        assert graph.add_edge(Edge("Edge 1_2", "Node_1", "Node_2", 12)) is False
        assert graph.edge_count == len(triangle_edges)
        assert graph.add_edge(Edge("Edge 3_1", "Node_3", "Node_1", 31)) is True

    def test_parallel_edges_are_distinct(self) -> None:
        """Test edges differing by name or weight are both stored."""
        graph = Graph()
        graph.add_edge(Edge("fast", "a", "b", 1))
        graph.add_edge(Edge("slow", "a", "b", 9))
        assert graph.edge_count == 2
        assert graph.vertex_count == 2

    def test_add_then_remove_restores_graph(
        self, triangle_edges: set[Edge], new_edges: list[Edge]
    ) -> None:
        """Test add followed by remove leaves the graph as it was."""
        graph = Graph(triangle_edges)
        for edge in new_edges:
            graph.add_edge(edge)
        for edge in new_edges:
            assert graph.remove_edge(edge) is True

        assert graph.get_edges() == triangle_edges
        assert graph.get_vertex("Node_4") is None
        assert graph.vertex_count == 3

    def test_add_then_remove_bidirectional(self, triangle_edges: set[Edge]) -> None:
        """Test removal also drops the synthesized reverse edge."""
        graph = Graph(bidirectional=True)
        edge = Edge("Edge 1_4", "Node_1", "Node_4", 14)
        graph.add_edge(edge)
        assert graph.edge_count == 2

        assert graph.remove_edge(edge) is True
        assert graph.edge_count == 0
        assert graph.vertex_count == 0

    def test_remove_without_reverse_edge(self, triangle_edges: set[Edge]) -> None:
        """Test removing an initial edge from a bidirectional graph succeeds."""
        graph = Graph(triangle_edges, bidirectional=True)
        assert graph.remove_edge(Edge("Edge 1_3", "Node_1", "Node_3", 13)) is True
        assert graph.edge_count == len(triangle_edges) - 1

    def test_remove_prunes_isolated_vertices(self) -> None:
        """Test vertices left without edges are removed."""
        graph = Graph([Edge("ab", "a", "b", 1), Edge("bc", "b", "c", 1)])
        graph.remove_edge(Edge("ab", "a", "b", 1))

        assert graph.get_vertices() == {Vertex("b"), Vertex("c")}

    def test_remove_keeps_vertex_with_incoming_edge(self) -> None:
        """Test a vertex with only incoming edges stays."""
        graph = Graph([Edge("ab", "a", "b", 1), Edge("cb", "c", "b", 1)])
        graph.remove_edge(Edge("ab", "a", "b", 1))

        assert graph.get_vertex("b") == Vertex("b")
        assert graph.get_vertex("a") is None

    def test_remove_self_loop(self) -> None:
        """Test removing a self loop drops its vertex."""
        loop = Edge("loop", "a", "a", 1)
        graph = Graph([loop])
        assert graph.vertex_count == 1
        graph.remove_edge(loop)
        assert graph.vertex_count == 0

    def test_remove_absent_edge_is_noop(self, triangle_edges: set[Edge]) -> None:
        """Test removing an unknown edge succeeds without change."""
        graph = Graph(triangle_edges)
        assert graph.remove_edge(Edge("Edge 1_2", "Node_1", "Node_2", 99)) is True
        assert graph.remove_edge(None) is True
        assert graph.get_edges() == triangle_edges

    def test_readd_after_prune(self) -> None:
        """Test a pruned vertex comes back with a new edge."""
        edge = Edge("ab", "a", "b", 1)
        graph = Graph([edge])
        graph.remove_edge(edge)
        graph.add_edge(Edge("ba", "b", "a", 2))
        assert graph.get_vertices() == {Vertex("a"), Vertex("b")}
        assert graph.get_adjacency_list("b") == [Vertex("a")]


class TestGraphQueries:
    """Tests for vertex and adjacency queries."""

    def test_snapshots_are_independent(self, triangle_edges: set[Edge]) -> None:
        """Test returned sets do not track or affect the graph."""
        graph = Graph(triangle_edges)
        vertices = graph.get_vertices()
        edges = graph.get_edges()

        graph.add_edge(Edge("Edge 3_4", "Node_3", "Node_4", 34))
        vertices.clear()
        edges.clear()

        assert graph.vertex_count == 4
        assert graph.edge_count == len(triangle_edges) + 1

    def test_get_vertex(self, triangle_edges: set[Edge]) -> None:
        """Test lookups by exact name."""
        graph = Graph(triangle_edges)
        assert graph.get_vertex("Node_1") == Vertex("Node_1")
        assert graph.get_vertex("node_1") is None
        assert graph.get_vertex("missing") is None
        assert graph.get_vertex(None) is None

    def test_get_adjacency_list(self, triangle_edges: set[Edge]) -> None:
        """Test destinations of outgoing edges."""
        graph = Graph(triangle_edges)
        assert sorted(graph.get_adjacency_list("Node_1")) == [Vertex("Node_2"), Vertex("Node_3")]
        assert graph.get_adjacency_list("Node_3") == []
        assert graph.get_adjacency_list("missing") == []
        assert graph.get_adjacency_list(None) == []

    def test_get_adjacency_list_with_weight(self, triangle_edges: set[Edge]) -> None:
        """Test destinations paired with weights."""
        graph = Graph(triangle_edges)
        neighbors = graph.get_adjacency_list_with_weight("Node_2")
        assert sorted(neighbors, key=lambda n: n.vertex) == [
            WeightedNeighbor(Vertex("Node_1"), 21),
            WeightedNeighbor(Vertex("Node_3"), 22),
        ]
        assert graph.get_adjacency_list_with_weight(None) == []

    def test_adjacency_keeps_parallel_edges(self) -> None:
        """Test parallel edges produce one entry each."""
        graph = Graph([Edge("fast", "a", "b", 1), Edge("slow", "a", "b", 9)])
        assert graph.get_adjacency_list("a") == [Vertex("b"), Vertex("b")]
        weights = sorted(n.weight for n in graph.get_adjacency_list_with_weight("a"))
        assert weights == [1, 9]

    def test_get_stats(self, triangle_edges: set[Edge]) -> None:
        """Test statistics."""
        graph = Graph(triangle_edges)
        graph.add_edge(Edge("xy", "x", "y", 1))
        stats = graph.get_stats()
        assert stats.vertex_count == 5
        assert stats.edge_count == 5
        assert stats.connected_components == 2
        assert stats.density == pytest.approx(5 / 20)

    def test_get_stats_empty(self) -> None:
        """Test statistics of an empty graph."""
        stats = Graph(bidirectional=True).get_stats()
        assert stats.vertex_count == 0
        assert stats.connected_components == 0
        assert stats.density == 0.0
        assert stats.bidirectional is True


class TestShowConnectivity:
    """Tests for all-simple-paths enumeration."""

    def test_two_paths(self, triangle_edges: set[Edge]) -> None:
        """Test the direct and the two-hop path are found."""
        graph = Graph(triangle_edges)
        paths = graph.show_connectivity("Node_1", "Node_3")
        assert sorted(paths) == [["Node_1", "Node_2", "Node_3"], ["Node_1", "Node_3"]]

    def test_without_back_edge(self) -> None:
        """Test the same result on an acyclic triangle."""
        graph = Graph(
            [
                Edge("Edge 1_2", "Node_1", "Node_2", 12),
                Edge("Edge 1_3", "Node_1", "Node_3", 13),
                Edge("Edge 2_3", "Node_2", "Node_3", 22),
            ]
        )
        paths = graph.show_connectivity("Node_1", "Node_3")
        assert len(paths) == 2
        assert ["Node_1", "Node_3"] in paths
        assert ["Node_1", "Node_2", "Node_3"] in paths

    def test_no_path(self, triangle_edges: set[Edge]) -> None:
        """Test unreachable end yields no paths."""
        graph = Graph(triangle_edges)
        assert graph.show_connectivity("Node_3", "Node_1") == []

    def test_unknown_vertices(self, triangle_edges: set[Edge]) -> None:
        """Test unknown or missing names yield no paths."""
        graph = Graph(triangle_edges)
        assert graph.show_connectivity("missing", "Node_3") == []
        assert graph.show_connectivity("Node_1", "missing") == []
        assert graph.show_connectivity(None, "Node_3") == []
        assert graph.show_connectivity("Node_1", None) == []

    def test_start_is_end(self, triangle_edges: set[Edge]) -> None:
        """Test a vertex is connected to itself by the one-vertex path."""
        graph = Graph(triangle_edges)
        assert graph.show_connectivity("Node_1", "Node_1") == [["Node_1"]]

    def test_cycles_are_not_followed(self) -> None:
        """Test simple paths never repeat a vertex."""
        graph = Graph.from_edges(
            [
                Edge("ab", "a", "b", 1),
                Edge("bc", "b", "c", 1),
                Edge("cd", "c", "d", 1),
                Edge("ac", "a", "c", 1),
            ],
            bidirectional=True,
        )
        paths = graph.show_connectivity("a", "d")
        assert sorted(paths) == [["a", "b", "c", "d"], ["a", "c", "d"]]
        for path in paths:
            assert len(path) == len(set(path))

    def test_case_insensitive_end_match(self) -> None:
        """Test the walk stops at a vertex matching the end name ignoring case."""
        graph = Graph(
            [
                Edge("aB", "a", "B", 1),
                Edge("ab", "a", "b", 1),
                Edge("Bc", "B", "c", 1),
            ]
        )
        paths = graph.show_connectivity("a", "b")
        assert sorted(paths) == [["a", "B"], ["a", "b"]]

    def test_network_paths(self, network_edges: set[Edge]) -> None:
        """Test every route through the sample network."""
        graph = Graph(network_edges)
        paths = graph.show_connectivity("Node_0", "Node_10")
        assert sorted(paths) == sorted(
            [
                ["Node_0", "Node_10"],
                ["Node_0", "Node_1", "Node_10"],
                ["Node_0", "Node_4", "Node_9", "Node_10"],
                ["Node_0", "Node_2", "Node_7", "Node_9", "Node_10"],
            ]
        )

    def test_long_chain(self) -> None:
        """Test a long chain does not hit a recursion limit."""
        edges = [Edge(f"e{i}", f"v{i}", f"v{i + 1}", 1) for i in range(3000)]
        graph = Graph(edges)
        paths = graph.show_connectivity("v0", "v3000")
        assert len(paths) == 1
        assert len(paths[0]) == 3001


class TestGraphSerialization:
    """Tests for dictionary and pickle round trips."""

    def test_dict_roundtrip(self, triangle_edges: set[Edge]) -> None:
        """Test to_dict/from_dict preserve vertices and edges."""
        graph = Graph.from_edges(triangle_edges, bidirectional=True)
        loaded = Graph.from_dict(graph.to_dict())

        assert loaded.get_vertices() == graph.get_vertices()
        assert loaded.get_edges() == graph.get_edges()
        assert loaded.bidirectional is True

    def test_pickle_roundtrip(self, triangle_edges: set[Edge]) -> None:
        """Test a pickled graph equals its source graph by value."""
        graph = Graph(triangle_edges)
        loaded = pickle.loads(pickle.dumps(graph))

        assert loaded.get_vertices() == graph.get_vertices()
        assert loaded.get_edges() == triangle_edges
        loaded.add_edge(Edge("Edge 3_4", "Node_3", "Node_4", 34))
        assert loaded.edge_count == graph.edge_count + 1

    def test_repr(self, triangle_edges: set[Edge]) -> None:
        """Test the repr shows counts."""
        assert repr(Graph(triangle_edges)) == "Graph(vertices=3, edges=4, bidirectional=False)"


class TestGraphConcurrency:
    """Tests for concurrent mutation."""

    def test_concurrent_add_and_remove(self) -> None:
        """Test concurrent writers and readers keep the graph consistent."""
        graph = Graph(bidirectional=True)
        errors: list[Exception] = []

        def writer(offset: int) -> None:
            try:
                for i in range(200):
                    edge = Edge(f"e{offset}_{i}", f"v{offset}", f"v{offset}_{i}", i)
                    graph.add_edge(edge)
                    if i % 2:
                        graph.remove_edge(edge)
            except Exception as e:  # pragma: no cover
                errors.append(e)

        def reader() -> None:
            try:
                for _ in range(200):
                    edges = graph.get_edges()
                    names = {v.name for v in graph.get_vertices()}
                    assert len(edges) % 2 == 0
                    assert names is not None
            except Exception as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        threads += [threading.Thread(target=reader) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert graph.edge_count == 4 * 100 * 2
        for edge in graph.get_edges():
            assert graph.get_vertex(edge.source) is not None
            assert graph.get_vertex(edge.target) is not None
