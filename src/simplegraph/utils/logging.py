"""Structured logging configuration for Simple Graph.

Graph operations log key/value events through structlog. Production
renders JSON lines; every other environment gets colored console output.
Request-scoped fields (request id, method, path) are carried in
contextvars so events logged while serving a request include them.
"""

import logging
import sys
import uuid

import structlog
from structlog.types import Processor

from simplegraph.config import Settings, get_settings


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        settings: Settings to configure from. Defaults to the cached settings.
    """
    settings = settings or get_settings()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.app.is_production:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    log_level = getattr(logging, settings.app.log_level)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(log_level)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("Added edge", edge="Edge 0_1", weight=1)
    """
    return structlog.get_logger(name)


def bind_request_context(method: str, path: str, request_id: str | None = None) -> str:
    """Start a fresh logging context for one HTTP request.

    Context left over from an earlier request on the same worker is dropped.

    Args:
        method: HTTP method.
        path: Request path.
        request_id: Caller supplied id. A new one is generated when missing.

    Returns:
        The request id bound to the context.
    """
    request_id = request_id or uuid.uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=method,
        path=path,
    )
    return request_id


def clear_context() -> None:
    """Clear all request context variables."""
    structlog.contextvars.clear_contextvars()
