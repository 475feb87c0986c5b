"""FastAPI application entry point for Simple Graph.

This module creates and configures the FastAPI application that serves
one in-memory graph, with middleware, routers and lifecycle hooks.
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from simplegraph import __version__
from simplegraph.api.endpoints.graph import set_graph
from simplegraph.api.router import api_router
from simplegraph.config import Settings, get_settings
from simplegraph.core.exceptions import ConfigurationError, SimpleGraphError
from simplegraph.graph.persistence import create_persistence
from simplegraph.graph.shortest_path import ShortestPathGraph
from simplegraph.utils.logging import (
    bind_request_context,
    clear_context,
    get_logger,
    setup_logging,
)

logger = get_logger(__name__)

# Performance threshold for slow request warnings (seconds)
_SLOW_REQUEST_THRESHOLD = 1.0


class PerformanceLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log request performance metrics.

    Binds a request id, the method and the path to the logging context for
    the duration of the request, logs its duration and warns when it exceeds
    the threshold. The request id is echoed in the X-Request-ID header.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = bind_request_context(
            method=request.method,
            path=request.url.path,
            request_id=request.headers.get("X-Request-ID"),
        )
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            log_data = {
                "duration_ms": round(duration * 1000, 2),
                "status_code": response.status_code,
            }
            if duration > _SLOW_REQUEST_THRESHOLD:
                logger.warning("Slow request detected", **log_data)
            else:
                logger.debug("Request completed", **log_data)
        finally:
            clear_context()

        response.headers["X-Response-Time"] = f"{duration * 1000:.2f}ms"
        response.headers["X-Request-ID"] = request_id

        return response


def build_graph(settings: Settings) -> ShortestPathGraph:
    """Build the graph to serve from settings.

    Loads the configured snapshot when one is set, otherwise starts empty.

    Args:
        settings: Application settings.

    Returns:
        The graph to serve.
    """
    if settings.graph.snapshot:
        persistence = create_persistence(settings.graph.storage_path)
        file_path = persistence.find(settings.graph.snapshot)
        if file_path is None:
            raise ConfigurationError(
                f"Graph snapshot not found: {settings.graph.snapshot}",
                details={"snapshot": settings.graph.snapshot},
            )
        graph: ShortestPathGraph = persistence.load_json(
            file_path, graph_cls=ShortestPathGraph
        )
        return graph

    return ShortestPathGraph(bidirectional=settings.graph.bidirectional)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Initializes logging and the served graph, and releases it on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control returns to the application.
    """
    setup_logging()
    settings = get_settings()

    logger.info(
        "Starting Simple Graph",
        version=__version__,
        environment=settings.app.env,
        debug=settings.app.debug,
    )

    graph = build_graph(settings)
    set_graph(graph)
    logger.info(
        "Graph initialized",
        vertex_count=graph.vertex_count,
        edge_count=graph.edge_count,
        bidirectional=graph.bidirectional,
        snapshot=settings.graph.snapshot,
    )

    yield

    logger.info("Shutting down Simple Graph")
    set_graph(None)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Simple Graph API",
        description="In-memory weighted graph with simple path enumeration and Dijkstra shortest paths",
        version=__version__,
        docs_url="/docs" if settings.app.debug else None,
        redoc_url="/redoc" if settings.app.debug else None,
        openapi_url="/openapi.json" if settings.app.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(PerformanceLoggingMiddleware)

    app.add_exception_handler(SimpleGraphError, simple_graph_exception_handler)

    app.include_router(api_router)

    return app


async def simple_graph_exception_handler(
    request: Request,
    exc: SimpleGraphError,
) -> JSONResponse:
    """Handle SimpleGraphError exceptions.

    Converts SimpleGraphError instances to consistent JSON responses.

    Args:
        request: The incoming request.
        exc: The SimpleGraphError exception.

    Returns:
        JSONResponse: Formatted error response.
    """
    logger.error(
        "Request failed",
        error=exc.__class__.__name__,
        message=exc.message,
        details=exc.details,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=_get_status_code(exc),
        content=exc.to_dict(),
    )


def _get_status_code(exc: SimpleGraphError) -> int:
    """Map exception types to HTTP status codes.

    Args:
        exc: The exception instance.

    Returns:
        int: Appropriate HTTP status code.
    """
    from simplegraph.core.exceptions import (
        GraphSerializationError,
        InvalidArgumentError,
        NodeNotFoundError,
    )

    status_map: dict[type, int] = {
        NodeNotFoundError: status.HTTP_404_NOT_FOUND,
        InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
        GraphSerializationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
        ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    }

    for exc_type, status_code in status_map.items():
        if isinstance(exc, exc_type):
            return status_code

    return status.HTTP_500_INTERNAL_SERVER_ERROR


# Create the application instance
app = create_app()


def main() -> None:
    """Run the application using uvicorn.

    This is the entry point for the CLI command.
    """
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "simplegraph.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
        workers=settings.api.workers if not settings.api.reload else 1,
        log_level=settings.app.log_level.lower(),
    )


if __name__ == "__main__":
    main()
