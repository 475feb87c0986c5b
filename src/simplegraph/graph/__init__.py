"""Graph module for weighted graph analysis.

Provides the graph container, shortest paths and persistence.
"""

from simplegraph.graph.engine import Graph
from simplegraph.graph.models import (
    Edge,
    GraphStats,
    PathStep,
    Vertex,
    WeightedNeighbor,
)
from simplegraph.graph.persistence import GraphPersistence, create_persistence
from simplegraph.graph.shortest_path import ShortestPathGraph

__all__ = [
    # Engine
    "Graph",
    "ShortestPathGraph",
    # Models
    "Vertex",
    "Edge",
    "WeightedNeighbor",
    "PathStep",
    "GraphStats",
    # Persistence
    "GraphPersistence",
    "create_persistence",
]
