"""Graph models.

Defines the vertex and edge value objects stored in a graph,
along with query results returned by graph operations.
"""

from dataclasses import dataclass
from typing import Any

REVERSE_EDGE_SEPARATOR = " : "


@dataclass(frozen=True, order=True)
class Vertex:
    """A uniquely named node in the graph.

    Equality, hashing and ordering are by name only.

    Attributes:
        name: Unique identifier for the vertex.
    """

    name: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {"name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Vertex":
        """Create from dictionary."""
        return cls(name=data["name"])


@dataclass(frozen=True)
class Edge:
    """A named, weighted, directed connection between two vertex names.

    Equality is structural: two edges with the same endpoints but a
    different name or weight are distinct.

    Attributes:
        name: Name of the edge.
        source: Name of the vertex the edge starts from.
        target: Name of the vertex the edge points to.
        weight: Edge weight. Shortest paths assume it is non-negative.
    """

    name: str
    source: str
    target: str
    weight: int

    def reversed(self) -> "Edge":
        """Build the reverse edge synthesized by bidirectional graphs.

        The reverse edge is named "{target} : {source}" and keeps the weight.
        """
        return Edge(
            name=f"{self.target}{REVERSE_EDGE_SEPARATOR}{self.source}",
            source=self.target,
            target=self.source,
            weight=self.weight,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Edge":
        """Create from dictionary.

        Raises:
            KeyError: If a field is missing.
            ValueError: If a name is not a string or the weight is not an integer.
        """
        for key in ("name", "source", "target"):
            if not isinstance(data[key], str):
                raise ValueError(f"Edge {key} must be a string, got {data[key]!r}")
        weight = data["weight"]
        if isinstance(weight, bool) or not isinstance(weight, int):
            raise ValueError(f"Edge weight must be an integer, got {weight!r}")
        return cls(
            name=data["name"],
            source=data["source"],
            target=data["target"],
            weight=weight,
        )


@dataclass(frozen=True)
class WeightedNeighbor:
    """A destination vertex reached over one outgoing edge.

    Attributes:
        vertex: The destination vertex.
        weight: Weight of the edge leading to it.
    """

    vertex: Vertex
    weight: int


@dataclass(frozen=True)
class PathStep:
    """One vertex on a shortest path.

    Attributes:
        vertex: The vertex reached.
        distance: Cumulative distance from the source to this vertex.
    """

    vertex: Vertex
    distance: int

    def __str__(self) -> str:
        return f"{self.vertex.name} ({self.distance})"


@dataclass
class GraphStats:
    """Statistics about the graph.

    Attributes:
        vertex_count: Total number of vertices.
        edge_count: Total number of edges.
        bidirectional: Whether added edges are mirrored.
        connected_components: Number of weakly connected components.
        density: Graph density (edges / possible directed edges).
    """

    vertex_count: int
    edge_count: int
    bidirectional: bool = False
    connected_components: int = 0
    density: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "vertex_count": self.vertex_count,
            "edge_count": self.edge_count,
            "bidirectional": self.bidirectional,
            "connected_components": self.connected_components,
            "density": self.density,
        }
