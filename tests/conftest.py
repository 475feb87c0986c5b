"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test modules.
"""

import os
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app modules
os.environ["APP_ENV"] = "development"
os.environ["APP_DEBUG"] = "true"
os.environ.setdefault("GRAPH_STORAGE_PATH", tempfile.mkdtemp(prefix="simplegraph-tests-"))

from simplegraph.graph.models import Edge  # noqa: E402

NETWORK_NAMES = [f"Node_{i}" for i in range(11)]

# (from, to, weight)
NETWORK_LINKS = [
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


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    """Create a temporary data directory for tests.

    Args:
        tmp_path: Pytest's temporary path fixture.

    Returns:
        Path: Temporary directory for test data.
    """
    data_dir = tmp_path / "data"
    (data_dir / "graphs").mkdir(parents=True)
    return data_dir


@pytest.fixture
def mock_settings(temp_data_dir: Path) -> Generator[Any, None, None]:
    """Provide mocked settings for testing.

    Args:
        temp_data_dir: Temporary data directory.

    Yields:
        Mocked settings instance.
    """
    with patch.dict(
        os.environ,
        {
            "APP_ENV": "development",
            "APP_DEBUG": "true",
            "GRAPH_STORAGE_PATH": str(temp_data_dir / "graphs"),
            "GRAPH_BIDIRECTIONAL": "false",
            "GRAPH_SNAPSHOT": "",
        },
    ):
        from simplegraph.config import get_settings

        get_settings.cache_clear()
        yield get_settings()
        get_settings.cache_clear()


@pytest.fixture
def app(mock_settings: Any) -> Any:
    """Create a test application instance.

    Args:
        mock_settings: Mocked settings fixture.

    Returns:
        FastAPI application instance.
    """
    from simplegraph.main import create_app

    return create_app()


@pytest.fixture
def client(app: Any) -> Generator[TestClient, None, None]:
    """Create a test client; entering it runs the app lifespan.

    Args:
        app: FastAPI application instance.

    Yields:
        TestClient instance.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def triangle_edges() -> set[Edge]:
    """Three vertices with a back edge from Node_2 to Node_1."""
    return {
        Edge("Edge 1_2", "Node_1", "Node_2", 12),
        Edge("Edge 1_3", "Node_1", "Node_3", 13),
        Edge("Edge 2_3", "Node_2", "Node_3", 22),
        Edge("Edge 2_1", "Node_2", "Node_1", 21),
    }


@pytest.fixture
def network_edges() -> set[Edge]:
    """The 11-node sample network used for shortest path tests."""
    return {
        Edge(f"Edge {a}_{b}", NETWORK_NAMES[a], NETWORK_NAMES[b], w)
        for a, b, w in NETWORK_LINKS
    }


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
