"""Shortest paths with Dijkstra's algorithm.

Layered on the adjacency queries of Graph; the search never reads the
backing storage directly.
"""

import heapq
import itertools
from collections.abc import Sequence

from simplegraph.graph.engine import Graph
from simplegraph.graph.models import PathStep, Vertex
from simplegraph.utils.logging import get_logger

logger = get_logger(__name__)


class ShortestPathGraph(Graph):
    """A graph that can find single-source shortest paths.

    Edge weights are expected to be non-negative. Negative weights are not
    rejected, but the results are then not guaranteed to be shortest.
    """

    def find_shortest_path(
        self, from_name: str | None, dest_name: str | None
    ) -> list[PathStep] | None:
        """Find the shortest path between two vertices.

        Runs Dijkstra's algorithm over every vertex reachable from the
        source. The frontier is a binary heap that may hold stale entries
        for a vertex; they are skipped when popped once the vertex is
        settled. Equal distances are popped in insertion order.

        A vertex is never its own predecessor, so asking for the path from
        a vertex to itself returns None.

        Args:
            from_name: Name of the source vertex.
            dest_name: Name of the destination vertex.

        Returns:
            The path from source to destination inclusive, each step paired
            with its cumulative distance, or None if either vertex is
            unknown or the destination is unreachable.
        """
        with self._lock:
            source = self.get_vertex(from_name)
            destination = self.get_vertex(dest_name)
            if source is None or destination is None:
                return None

            distance: dict[Vertex, int] = {source: 0}
            previous: dict[Vertex, Vertex] = {}
            settled: set[str] = set()
            counter = itertools.count()
            frontier: list[tuple[int, int, Vertex]] = [(0, next(counter), source)]

            while frontier:
                _, _, current = heapq.heappop(frontier)
                if current.name in settled:
                    continue
                settled.add(current.name)

                for neighbor in self.get_adjacency_list_with_weight(current.name):
                    if neighbor.vertex.name in settled:
                        continue
                    candidate = distance[current] + neighbor.weight
                    known = distance.get(neighbor.vertex)
                    if known is None or candidate < known:
                        distance[neighbor.vertex] = candidate
                        previous[neighbor.vertex] = current
                        heapq.heappush(
                            frontier, (candidate, next(counter), neighbor.vertex)
                        )

        if destination not in previous:
            logger.debug(
                "No path found",
                source=from_name,
                destination=dest_name,
                settled=len(settled),
            )
            return None

        path = [PathStep(vertex=destination, distance=distance[destination])]
        step = destination
        while step in previous:
            step = previous[step]
            path.append(PathStep(vertex=step, distance=distance[step]))
        path.reverse()

        logger.debug(
            "Shortest path found",
            source=from_name,
            destination=dest_name,
            hops=len(path) - 1,
            distance=distance[destination],
        )
        return path

    @staticmethod
    def path_to_string(path: Sequence[PathStep] | None) -> str:
        """Render a path as "name1 (w1) -> name2 (w2) -> ...".

        Steps are rendered in the given order, including any repeats.

        Args:
            path: Steps returned by ``find_shortest_path``.

        Returns:
            The formatted path, or an empty string for None or no steps.
        """
        if not path:
            return ""
        return " -> ".join(str(step) for step in path)
