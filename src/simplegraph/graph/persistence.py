"""Graph persistence for saving and loading graphs.

Provides serialization to plain and gzip-compressed JSON.
"""

import gzip
import json
from pathlib import Path
from typing import Any

from simplegraph import __version__
from simplegraph.core.exceptions import GraphSerializationError
from simplegraph.graph.engine import Graph
from simplegraph.utils.logging import get_logger

logger = get_logger(__name__)

_EXTENSIONS = (".json.gz", ".json")


class GraphPersistence:
    """Handles saving and loading of graphs."""

    def __init__(self, storage_dir: Path | None = None) -> None:
        """Initialize persistence handler.

        Args:
            storage_dir: Directory for storing graphs. Defaults to current dir.
        """
        self.storage_dir = storage_dir or Path.cwd()
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def save_json(
        self,
        graph: Graph,
        filename: str,
        compress: bool = False,
    ) -> Path:
        """Save graph to JSON file.

        Args:
            graph: The graph to save.
            filename: Output filename (without extension).
            compress: Whether to gzip compress the output.

        Returns:
            Path to the saved file.
        """
        data = {"version": __version__, **graph.to_dict()}

        if compress:
            file_path = self.storage_dir / f"{filename}.json.gz"
            with gzip.open(file_path, "wt", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        else:
            file_path = self.storage_dir / f"{filename}.json"
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)

        logger.info(
            "Saved graph to JSON",
            file_path=str(file_path),
            vertex_count=graph.vertex_count,
            edge_count=graph.edge_count,
            compressed=compress,
        )
        return file_path

    def load_json(
        self,
        file_path: Path | str,
        graph_cls: type[Graph] = Graph,
    ) -> Graph:
        """Load graph from JSON file.

        Args:
            file_path: Path to the JSON file. Relative names are looked up
                in the storage directory when they don't exist as given.
            graph_cls: Graph class to build, e.g. ShortestPathGraph.

        Returns:
            The loaded graph.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            GraphSerializationError: If the file content is not a graph.
        """
        file_path = self._resolve(Path(file_path))

        if not file_path.exists():
            raise FileNotFoundError(f"Graph file not found: {file_path}")

        try:
            if file_path.name.endswith(".gz"):
                with gzip.open(file_path, "rt", encoding="utf-8") as f:
                    data = json.load(f)
            else:
                with open(file_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            graph = graph_cls.from_dict(self._validate(data))
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise GraphSerializationError("load", str(file_path), cause=e) from e

        logger.info(
            "Loaded graph from JSON",
            file_path=str(file_path),
            vertex_count=graph.vertex_count,
            edge_count=graph.edge_count,
        )
        return graph

    def find(self, filename: str) -> Path | None:
        """Find the stored file for a graph name.

        Args:
            filename: The graph name (without extension).

        Returns:
            Path of the stored file, or None.
        """
        for ext in _EXTENSIONS:
            file_path = self.storage_dir / f"{filename}{ext}"
            if file_path.exists():
                return file_path
        return None

    def exists(self, filename: str) -> bool:
        """Check if a graph file exists.

        Args:
            filename: The filename to check.

        Returns:
            True if the file exists.
        """
        return self.find(filename) is not None

    def delete(self, filename: str) -> bool:
        """Delete a graph file.

        Args:
            filename: The filename to delete.

        Returns:
            True if a file was deleted.
        """
        deleted = False
        for ext in _EXTENSIONS:
            file_path = self.storage_dir / f"{filename}{ext}"
            if file_path.exists():
                file_path.unlink()
                deleted = True
                logger.info("Deleted graph file", file_path=str(file_path))
        return deleted

    def list_graphs(self) -> list[str]:
        """List all saved graphs.

        Returns:
            List of graph filenames (without extensions).
        """
        graphs = set()
        for ext in _EXTENSIONS:
            for file_path in self.storage_dir.glob(f"*{ext}"):
                graphs.add(file_path.name[: -len(ext)])
        return sorted(graphs)

    def _resolve(self, file_path: Path) -> Path:
        if file_path.exists() or file_path.is_absolute():
            return file_path
        return self.storage_dir / file_path

    @staticmethod
    def _validate(data: Any) -> dict[str, Any]:
        if not isinstance(data, dict) or not isinstance(data.get("edges"), list):
            raise ValueError("expected an object with an 'edges' list")
        return data


def create_persistence(storage_dir: Path | str | None = None) -> GraphPersistence:
    """Create a GraphPersistence instance.

    Args:
        storage_dir: Storage directory path. Defaults to the configured
            graph storage path.

    Returns:
        GraphPersistence instance.
    """
    if storage_dir is None:
        from simplegraph.config import get_settings

        storage_dir = get_settings().graph.storage_path
    return GraphPersistence(Path(storage_dir))
