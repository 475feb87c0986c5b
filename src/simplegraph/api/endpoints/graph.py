"""Graph API endpoints.

Provides endpoints for mutating and querying the served graph.
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status
from pydantic import BaseModel, Field

from simplegraph.core.exceptions import NodeNotFoundError
from simplegraph.graph.models import Edge, PathStep
from simplegraph.graph.persistence import GraphPersistence, create_persistence
from simplegraph.graph.shortest_path import ShortestPathGraph
from simplegraph.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


# Request/Response models
class VertexInfo(BaseModel):
    """Graph vertex information."""

    name: str


class EdgeInfo(BaseModel):
    """Graph edge information."""

    name: str
    source: str
    target: str
    weight: int

    def to_edge(self) -> Edge:
        """Convert to a graph edge."""
        return Edge(name=self.name, source=self.source, target=self.target, weight=self.weight)

    @classmethod
    def from_edge(cls, edge: Edge) -> "EdgeInfo":
        """Create from a graph edge."""
        return cls(name=edge.name, source=edge.source, target=edge.target, weight=edge.weight)


class NeighborInfo(BaseModel):
    """Adjacent vertex, with the edge weight when requested."""

    name: str
    weight: int | None = None


class AdjacencyResponse(BaseModel):
    """Adjacency list of a vertex."""

    source: str
    weighted: bool
    neighbors: list[NeighborInfo]


class ConnectivityResponse(BaseModel):
    """All simple paths between two vertices."""

    start: str
    end: str
    paths: list[list[str]]
    total_paths: int


class PathStepInfo(BaseModel):
    """One step of a shortest path."""

    name: str
    distance: int


class ShortestPathResponse(BaseModel):
    """Shortest path between two vertices."""

    source: str
    target: str
    found: bool
    steps: list[PathStepInfo] = Field(default_factory=list)
    distance: int | None = None
    formatted: str = ""


class RemoveEdgeResponse(BaseModel):
    """Result of an edge removal."""

    removed: bool
    vertex_count: int
    edge_count: int


class GraphStatsResponse(BaseModel):
    """Graph statistics."""

    vertex_count: int
    edge_count: int
    bidirectional: bool
    connected_components: int
    density: float


class SnapshotResponse(BaseModel):
    """Saved or loaded graph snapshot."""

    name: str
    path: str
    vertex_count: int
    edge_count: int


# Dependency placeholder
_graph: ShortestPathGraph | None = None


def get_graph() -> ShortestPathGraph:
    """Get graph instance."""
    if _graph is None:
        raise HTTPException(status_code=503, detail="Graph service not initialized")
    return _graph


def set_graph(graph: ShortestPathGraph | None) -> None:
    """Set graph instance."""
    global _graph
    _graph = graph


def has_graph() -> bool:
    """Check whether a graph is being served."""
    return _graph is not None


def get_persistence() -> GraphPersistence:
    """Get persistence handler for the configured storage path."""
    return create_persistence()


def _step_to_info(step: PathStep) -> PathStepInfo:
    return PathStepInfo(name=step.vertex.name, distance=step.distance)


# Endpoints
# Handlers are plain functions so graph work runs in the threadpool, not on
# the event loop.
@router.get("/stats", response_model=GraphStatsResponse)
def get_stats(
    graph: ShortestPathGraph = Depends(get_graph),
) -> GraphStatsResponse:
    """Get graph statistics."""
    return GraphStatsResponse(**graph.get_stats().to_dict())


@router.get("/vertices", response_model=list[VertexInfo])
def list_vertices(
    graph: ShortestPathGraph = Depends(get_graph),
) -> list[VertexInfo]:
    """List all vertices, sorted by name."""
    return [VertexInfo(name=v.name) for v in sorted(graph.get_vertices())]


@router.get("/vertices/{name}", response_model=VertexInfo)
def get_vertex(
    name: str = Path(..., description="Vertex name"),
    graph: ShortestPathGraph = Depends(get_graph),
) -> VertexInfo:
    """Get vertex by name."""
    vertex = graph.get_vertex(name)
    if vertex is None:
        raise NodeNotFoundError(name)
    return VertexInfo(name=vertex.name)


@router.get("/edges", response_model=list[EdgeInfo])
def list_edges(
    source: str | None = Query(default=None, description="Filter by source vertex"),
    target: str | None = Query(default=None, description="Filter by target vertex"),
    graph: ShortestPathGraph = Depends(get_graph),
) -> list[EdgeInfo]:
    """List edges with optional filtering."""
    edges = sorted(
        graph.get_edges(),
        key=lambda e: (e.source, e.target, e.name, e.weight),
    )
    return [
        EdgeInfo.from_edge(e)
        for e in edges
        if (source is None or e.source == source) and (target is None or e.target == target)
    ]


@router.post("/edges", response_model=EdgeInfo, status_code=status.HTTP_201_CREATED)
def add_edge(
    edge: EdgeInfo,
    response: Response,
    graph: ShortestPathGraph = Depends(get_graph),
) -> EdgeInfo:
    """Add an edge; endpoint vertices are created as needed.

    Answers 201 when the edge was stored and 200 when it was already present.
    """
    if not graph.add_edge(edge.to_edge()):
        response.status_code = status.HTTP_200_OK
    return edge


@router.post("/edges/remove", response_model=RemoveEdgeResponse)
def remove_edge(
    edge: EdgeInfo,
    graph: ShortestPathGraph = Depends(get_graph),
) -> RemoveEdgeResponse:
    """Remove an edge and any vertex left without edges."""
    removed = graph.remove_edge(edge.to_edge())
    stats = graph.get_stats()
    return RemoveEdgeResponse(
        removed=removed,
        vertex_count=stats.vertex_count,
        edge_count=stats.edge_count,
    )


@router.get("/adjacency/{name}", response_model=AdjacencyResponse)
def get_adjacency(
    name: str = Path(..., description="Source vertex name"),
    weighted: bool = Query(default=False, description="Include edge weights"),
    graph: ShortestPathGraph = Depends(get_graph),
) -> AdjacencyResponse:
    """Get the destinations of every edge leaving a vertex."""
    if weighted:
        neighbors = [
            NeighborInfo(name=n.vertex.name, weight=n.weight)
            for n in graph.get_adjacency_list_with_weight(name)
        ]
    else:
        neighbors = [NeighborInfo(name=v.name) for v in graph.get_adjacency_list(name)]
    return AdjacencyResponse(source=name, weighted=weighted, neighbors=neighbors)


@router.get("/connectivity", response_model=ConnectivityResponse)
def get_connectivity(
    start: str = Query(..., description="Start vertex name"),
    end: str = Query(..., description="End vertex name"),
    graph: ShortestPathGraph = Depends(get_graph),
) -> ConnectivityResponse:
    """List every simple path between two vertices.

    Exponential in the worst case; intended for small graphs.
    """
    paths = graph.show_connectivity(start, end)
    return ConnectivityResponse(start=start, end=end, paths=paths, total_paths=len(paths))


@router.get("/shortest-path", response_model=ShortestPathResponse)
def get_shortest_path(
    source: str = Query(..., description="Source vertex name"),
    target: str = Query(..., description="Target vertex name"),
    graph: ShortestPathGraph = Depends(get_graph),
) -> ShortestPathResponse:
    """Find the shortest path between two vertices."""
    path = graph.find_shortest_path(source, target)
    if path is None:
        return ShortestPathResponse(source=source, target=target, found=False)

    return ShortestPathResponse(
        source=source,
        target=target,
        found=True,
        steps=[_step_to_info(step) for step in path],
        distance=path[-1].distance,
        formatted=graph.path_to_string(path),
    )


@router.post("/snapshots/{name}", response_model=SnapshotResponse)
def save_snapshot(
    name: str = Path(..., description="Snapshot name"),
    compress: bool = Query(default=False, description="Gzip the snapshot"),
    graph: ShortestPathGraph = Depends(get_graph),
    persistence: GraphPersistence = Depends(get_persistence),
) -> SnapshotResponse:
    """Save the served graph to storage."""
    # One consistent copy, so the file and the reported counts agree.
    snapshot = ShortestPathGraph.from_dict(graph.to_dict())
    file_path = persistence.save_json(snapshot, name, compress=compress)
    return SnapshotResponse(
        name=name,
        path=str(file_path),
        vertex_count=snapshot.vertex_count,
        edge_count=snapshot.edge_count,
    )


@router.post("/snapshots/{name}/load", response_model=SnapshotResponse)
def load_snapshot(
    name: str = Path(..., description="Snapshot name"),
    persistence: GraphPersistence = Depends(get_persistence),
) -> SnapshotResponse:
    """Replace the served graph with a stored snapshot."""
    file_path = persistence.find(name)
    if file_path is None:
        raise HTTPException(status_code=404, detail=f"Snapshot not found: {name}")

    graph = persistence.load_json(file_path, graph_cls=ShortestPathGraph)
    set_graph(graph)
    logger.info("Served graph replaced", snapshot=name, edge_count=graph.edge_count)
    return SnapshotResponse(
        name=name,
        path=str(file_path),
        vertex_count=graph.vertex_count,
        edge_count=graph.edge_count,
    )
