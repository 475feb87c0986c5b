#!/usr/bin/env python3
"""Demo of shortest path and simple path enumeration.

Builds an 11-node sample network and prints the shortest path from
Node_0 to Node_10 followed by every simple path between them. Run with:
    python scripts/demo.py
"""

import time

from simplegraph.graph import Edge, ShortestPathGraph
from simplegraph.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

NAMES = [f"Node_{i}" for i in range(11)]

# (from, to, weight)
SAMPLE_EDGES = [
    (0, 1, 1),
    (0, 2, 1),
    (0, 4, 1),
    (0, 10, 7),
    (1, 10, 5),
    (2, 6, 186),
    (2, 7, 103),
    (3, 7, 183),
    (4, 9, 2),
    (5, 8, 250),
    (7, 9, 1),
    (8, 9, 84),
    (9, 10, 1),
]


def build_sample_graph() -> ShortestPathGraph:
    """Build the sample network."""
    edges = {
        Edge(name=f"Edge {a}_{b}", source=NAMES[a], target=NAMES[b], weight=w)
        for a, b, w in SAMPLE_EDGES
    }
    return ShortestPathGraph(edges)


def main() -> None:
    setup_logging()
    graph = build_sample_graph()
    source, destination = NAMES[0], NAMES[-1]

    start_time = time.perf_counter()
    path = graph.find_shortest_path(source, destination)
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    if path is not None:
        print(f"Shortest Path found in {elapsed_ms:.2f} ms")
        print(graph.path_to_string(path))
    else:
        logger.warning("No path found", source=source, destination=destination)

    start_time = time.perf_counter()
    paths = graph.show_connectivity(source, destination)
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    print(f"\nShow paths in {elapsed_ms:.2f} ms")
    for names in paths:
        print(" -> ".join(names))


if __name__ == "__main__":
    main()
