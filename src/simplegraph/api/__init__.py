"""Simple Graph API.

Provides a REST API over one in-memory graph.
"""

from simplegraph.api.router import api_router

__all__ = ["api_router"]
