"""Custom exceptions for Simple Graph.

This module defines the exception hierarchy used throughout the library.
Query-time "not found" conditions are not exceptions: the graph returns
None or an empty collection instead. Only invalid construction input and
the I/O layers raise.
"""

from typing import Any


class SimpleGraphError(Exception):
    """Base exception for all Simple Graph errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        result: dict[str, Any] = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SimpleGraphError):
    """Error in application configuration."""

    pass


# =============================================================================
# Graph Errors
# =============================================================================


class GraphError(SimpleGraphError):
    """Base class for graph-related errors."""

    pass


class InvalidArgumentError(GraphError):
    """An argument required to build a graph is missing or malformed."""

    def __init__(self, argument: str, reason: str) -> None:
        super().__init__(
            message=f"Invalid argument '{argument}': {reason}",
            details={"argument": argument, "reason": reason},
        )


class NodeNotFoundError(GraphError):
    """Requested vertex not found in graph."""

    def __init__(self, name: str) -> None:
        super().__init__(
            message=f"Vertex not found: {name}",
            details={"name": name},
        )


class GraphSerializationError(GraphError):
    """Error serializing/deserializing graph."""

    def __init__(self, operation: str, path: str, cause: Exception | None = None) -> None:
        super().__init__(
            message=f"Graph {operation} failed for {path}",
            details={"operation": operation, "path": path},
            cause=cause,
        )
