"""Main API router aggregating all endpoint routers."""

from fastapi import APIRouter

from simplegraph.api.endpoints import graph, health

# Create main API router with version prefix
api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health.router)
api_router.include_router(graph.router, prefix="/graph", tags=["Graph"])
