"""
Offline ingestion run: documents -> chunks -> embeddings -> collection.

Two strategies:
    recreate  Drop the target collection, create it empty and load into it.
              Queries issued during the run see a partially loaded collection.
    swap      Load into a new versioned collection, then point the target
              name (an alias) at it and drop the previous version.

Failures are isolated: an unsupported or unreadable file is skipped, a chunk
that fails to embed is skipped, and an insert failure aborts only the current
file. Only failing to create the target collection aborts the run.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional, Protocol

from pydantic import BaseModel

from chunking.models import Chunk, ChunkingConfig
from chunking.splitter import TextSplitter
from common.exceptions import EmbeddingError, VectorIndexError
from document_loader.loader import DocumentLoader
from document_loader.models import SourceDocument
from vector_store.collection_manager import CollectionManager

from .config import IngestionConfig

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    def embed(self, text: str) -> list[float]: ...


class IngestStats(BaseModel):
    collection: str
    files_loaded: int = 0
    files_skipped: int = 0
    files_aborted: int = 0
    chunks_stored: int = 0
    chunks_failed: int = 0


class IngestionService:
    def __init__(
        self,
        manager: CollectionManager,
        embedder: Embedder,
        config: Optional[IngestionConfig] = None,
        loader: Optional[DocumentLoader] = None,
    ):
        self.config = config or IngestionConfig()
        self.manager = manager
        self.embedder = embedder
        self.loader = loader or DocumentLoader()
        self.splitter = TextSplitter(
            ChunkingConfig(
                chunk_size=self.config.chunk_size,
                chunk_overlap=self.config.chunk_overlap,
            )
        )

    def run(
        self,
        paths: Iterable[str | Path],
        collection: Optional[str] = None,
        strategy: Optional[str] = None,
    ) -> IngestStats:
        collection = collection or self.config.collection
        strategy = strategy or self.config.strategy
        if strategy == "swap":
            target = self.manager.create_version(collection)
        elif strategy == "recreate":
            self.manager.recreate(collection)
            target = collection
        else:
            raise ValueError(f"Unknown ingestion strategy '{strategy}'")

        stats = IngestStats(collection=collection)
        logger.info(f"Ingesting into {target} (strategy={strategy})")

        def skipped(path: str | Path, error: Exception) -> None:
            stats.files_skipped += 1

        for document in self.loader.load_many(paths, on_skip=skipped):
            stats.files_loaded += 1
            try:
                self._ingest_document(document, target, stats)
            except VectorIndexError as e:
                logger.error(f"Aborting {document.name}, insert failed: {e}")
                stats.files_aborted += 1

        if strategy == "swap":
            self.manager.promote(collection, target)

        logger.info(
            f"Ingestion finished for {collection}: {stats.files_loaded} file(s) loaded, "
            f"{stats.files_skipped} skipped, {stats.files_aborted} aborted, "
            f"{stats.chunks_stored} chunk(s) stored, {stats.chunks_failed} failed"
        )
        return stats

    def _ingest_document(self, document: SourceDocument, target: str, stats: IngestStats) -> None:
        chunks = [c for c in self.splitter.split(document.text) if c.text.strip()]
        logger.info(f"{document.name}: {len(chunks)} chunk(s)")

        if self.config.workers <= 1:
            for chunk in chunks:
                self._count(self._store_chunk(document, chunk, target), stats)
            return

        with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
            futures: list[Future[bool]] = [
                pool.submit(self._store_chunk, document, chunk, target) for chunk in chunks
            ]
            try:
                for future in futures:
                    self._count(future.result(), stats)
            except VectorIndexError:
                for future in futures:
                    future.cancel()
                raise

    def _store_chunk(self, document: SourceDocument, chunk: Chunk, target: str) -> bool:
        try:
            vector = self.embedder.embed(chunk.text)
        except EmbeddingError as e:
            logger.error(f"{document.name} chunk {chunk.index}: embedding failed, skipping: {e}")
            return False

        self.manager.insert(
            target,
            vector,
            chunk.text,
            {"source": document.name, "chunk_index": chunk.index},
        )
        return True

    @staticmethod
    def _count(stored: bool, stats: IngestStats) -> None:
        if stored:
            stats.chunks_stored += 1
        else:
            stats.chunks_failed += 1
