"""
Collection Manager - per-tenant ChromaDB collection lifecycle

Owns the collections of the vector index:
- recreate: drop (if present) and create an empty collection with a metric
  and a fixed vector dimension
- insert: append one (vector, text) record after checking its dimension
- versioned swap: build a new physical collection under a versioned name,
  then repoint an alias to it and drop the previous version

Design:
- The metric is stored as ``hnsw:space``, the dimension in the collection
  metadata, so both survive restarts of a PersistentClient
- Vectors always come from the Ollama embedder; the collection's own
  embedding function is never invoked
- Aliases live in a small JSON file beside the Chroma data (in memory when no
  path is configured)

Usage:
    from vector_store import CollectionManager

    manager = CollectionManager()
    manager.recreate("walmart_team", metric="cosine", dimension=768)
    manager.insert("walmart_team", vector, "Returns are accepted within 30 days.")
"""

from __future__ import annotations

import json
import logging
import threading
import time
import uuid
from pathlib import Path
from typing import Any, Optional

import chromadb

from common.exceptions import VectorIndexError

from .models import METRIC_ALIASES, StoreConfig, StoredRecord

logger = logging.getLogger(__name__)

VERSION_SEPARATOR = "__v"


class AliasTable:
    """alias -> physical collection name, optionally persisted as JSON."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path
        self._lock = threading.Lock()
        self._aliases: dict[str, str] = self._read()

    def get(self, alias: str) -> Optional[str]:
        with self._lock:
            return self._aliases.get(alias)

    def set(self, alias: str, name: str) -> Optional[str]:
        """Point ``alias`` at ``name`` and return the previous target."""
        with self._lock:
            previous = self._aliases.get(alias)
            self._aliases[alias] = name
            self._write()
            return previous

    def remove(self, alias: str) -> None:
        with self._lock:
            if self._aliases.pop(alias, None) is not None:
                self._write()

    def _read(self) -> dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        return {str(k): str(v) for k, v in data.items()}

    def _write(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as handle:
            json.dump(self._aliases, handle, indent=2, sort_keys=True)
        tmp.replace(self.path)


class CollectionManager:
    """
    Manages named collections in ChromaDB.
    """

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        chroma_client: Optional[chromadb.ClientAPI] = None,
        alias_path: Optional[str | Path] = None,
    ):
        """
        Initialize the manager.

        Args:
            config: Store configuration. Uses defaults if not provided.
            chroma_client: Optional pre-created ChromaDB client (for testing).
                           If not provided, a PersistentClient is created.
            alias_path: JSON file for collection aliases. Defaults to
                        ``<persist_directory>/aliases.json`` for the
                        persistent client, in-memory otherwise.
        """
        self.config = config or StoreConfig()
        if chroma_client is not None:
            self._client = chroma_client
        else:
            self._client = chromadb.PersistentClient(path=self.config.persist_directory)
            if alias_path is None:
                alias_path = Path(self.config.persist_directory) / "aliases.json"
        self.aliases = AliasTable(Path(alias_path) if alias_path else None)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def recreate(
        self,
        name: str,
        metric: Optional[str] = None,
        dimension: Optional[int] = None,
    ) -> None:
        """
        Drop ``name`` if it exists, then create it empty.

        An alias left by a versioned swap is removed and its target dropped,
        so the name refers to the new plain collection afterwards. A missing
        collection is not an error; it is only logged.

        Raises:
            ValueError: Unknown metric.
            VectorIndexError: The store refused to create the collection.
        """
        previous = self.aliases.get(name)
        if previous is not None:
            self.aliases.remove(name)
            self.drop(previous)
            logger.info(f"Released alias {name} -> {previous}")
        if not self.drop(name):
            logger.info(f"No existing collection to drop: {name}")
        self.create(name, metric=metric, dimension=dimension)

    def create(
        self,
        name: str,
        metric: Optional[str] = None,
        dimension: Optional[int] = None,
    ) -> None:
        metric = metric or self.config.distance_metric
        dimension = dimension or self.config.dimension
        space = _hnsw_space(metric)
        try:
            self._client.create_collection(
                name=name,
                metadata={"hnsw:space": space, "metric": metric, "dimension": dimension},
            )
        except Exception as e:
            raise VectorIndexError("Failed to create collection", name, e) from e
        logger.info(f"Created collection: {name} (metric={metric}, dimension={dimension})")

    def drop(self, name: str) -> bool:
        """Delete a physical collection. Returns False if it did not exist."""
        if not self.exists(name):
            return False
        try:
            self._client.delete_collection(name=name)
        except Exception as e:
            raise VectorIndexError("Failed to drop collection", name, e) from e
        logger.info(f"Dropped collection: {name}")
        return True

    def exists(self, name: str) -> bool:
        return name in self.list_collections()

    def list_collections(self) -> list[str]:
        # chromadb < 0.6 returns Collection objects, newer versions names.
        return sorted(getattr(c, "name", c) for c in self._client.list_collections())

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    def insert(
        self,
        collection_name: str,
        vector: list[float],
        text: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> str:
        """
        Append one record to a collection.

        Returns:
            The generated record ID.

        Raises:
            VectorIndexError: The collection does not exist, the vector has the
                wrong dimension, or the store rejected the write.
        """
        collection = self.get(collection_name)
        expected = self.dimension_of(collection)
        if len(vector) != expected:
            raise VectorIndexError(
                f"Vector dimension {len(vector)} does not match collection "
                f"dimension {expected}",
                collection_name,
            )

        record = StoredRecord(
            record_id=uuid.uuid4().hex,
            vector=vector,
            text=text,
            metadata=metadata or {},
        )
        params: dict[str, Any] = {
            "ids": [record.record_id],
            "embeddings": [record.vector],
            "documents": [record.text],
        }
        # ChromaDB rejects empty metadata dicts
        if record.metadata:
            params["metadatas"] = [_flatten_metadata(record.metadata)]
        try:
            collection.add(**params)
        except Exception as e:
            raise VectorIndexError("Failed to insert record", collection_name, e) from e
        return record.record_id

    def count(self, name: str) -> int:
        return self.get(name).count()

    def get(self, name: str) -> Any:
        """
        Return the ChromaDB collection for a name or alias.

        Raises:
            VectorIndexError: No such collection.
        """
        physical = self.resolve(name)
        if not self.exists(physical):
            raise VectorIndexError("Collection does not exist", physical)
        try:
            return self._client.get_collection(name=physical)
        except Exception as e:
            raise VectorIndexError("Failed to open collection", physical, e) from e

    @staticmethod
    def dimension_of(collection: Any) -> int:
        metadata = collection.metadata or {}
        return int(metadata.get("dimension", 0))

    @staticmethod
    def metric_of(collection: Any) -> str:
        metadata = collection.metadata or {}
        return str(metadata.get("metric") or metadata.get("hnsw:space") or "cosine")

    # -------------------------------------------------------------------------
    # Versioned swap
    # -------------------------------------------------------------------------

    def resolve(self, name: str) -> str:
        """Return the live physical collection for an alias (or the name itself)."""
        return self.aliases.get(name) or name

    def create_version(
        self,
        alias: str,
        metric: Optional[str] = None,
        dimension: Optional[int] = None,
    ) -> str:
        """Create an empty versioned collection for ``alias`` and return its name."""
        versioned = f"{alias}{VERSION_SEPARATOR}{time.time_ns()}"
        self.create(versioned, metric=metric, dimension=dimension)
        return versioned

    def promote(self, alias: str, versioned_name: str) -> None:
        """
        Point ``alias`` at ``versioned_name`` and drop what it pointed at before.

        A plain collection named like the alias (from the recreate strategy)
        is dropped as well, since the alias now shadows it.
        """
        if not self.exists(versioned_name):
            raise VectorIndexError("Cannot promote missing collection", versioned_name)
        previous = self.aliases.set(alias, versioned_name)
        logger.info(f"Alias {alias} -> {versioned_name}")
        for stale in {previous, alias} - {None, versioned_name}:
            if self.drop(stale):
                logger.info(f"Dropped previous version: {stale}")


def _hnsw_space(metric: str) -> str:
    try:
        return METRIC_ALIASES[metric.lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported metric '{metric}'. Use one of: {sorted(METRIC_ALIASES)}"
        ) from None


def _flatten_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """ChromaDB only supports flat str/int/float/bool metadata values."""
    flat: dict[str, Any] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, list):
            flat[key] = ",".join(str(item) for item in value)
        elif isinstance(value, dict):
            flat[key] = json.dumps(value, ensure_ascii=False)
        else:
            flat[key] = value
    return flat
