"""API endpoints module.

Contains all REST API endpoint routers.
"""

from simplegraph.api.endpoints import graph, health

__all__ = [
    "graph",
    "health",
]
