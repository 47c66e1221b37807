"""
Retriever - top-K nearest-neighbor search over an authorized collection

Given a query vector, returns the most similar stored chunks ordered by
descending similarity. Retrieval never fails a query turn: a missing
collection, an empty collection or any index error is logged and turned into
an empty result, so the answer can still be attempted without context.

Usage:
    from vector_store import CollectionManager, Retriever

    retriever = Retriever(CollectionManager())
    hits = retriever.retrieve("walmart_team", query_vector, k=10)
"""

import logging
import math
from typing import Any, Optional

from common.exceptions import format_error_chain

from .collection_manager import CollectionManager
from .models import RetrievedChunk

logger = logging.getLogger(__name__)


class Retriever:
    """Similarity search with an empty-context fallback."""

    def __init__(self, manager: CollectionManager, default_k: int = 10):
        """
        Args:
            manager: Collection manager used to open (and alias-resolve) collections.
            default_k: Number of results when ``k`` is not given.
        """
        self.manager = manager
        self.default_k = default_k

    def retrieve(
        self,
        collection_name: str,
        query_vector: list[float],
        k: Optional[int] = None,
    ) -> list[RetrievedChunk]:
        """
        Return at most ``k`` chunks ordered by non-increasing score.

        Never raises: failures degrade to an empty list.
        """
        k = self.default_k if k is None else k
        if k <= 0:
            return []

        try:
            collection = self.manager.get(collection_name)
            total = collection.count()
            if total == 0:
                logger.warning(f"No relevant documents found: collection {collection_name} is empty")
                return []

            raw = collection.query(
                query_embeddings=[list(query_vector)],
                n_results=min(k, total),
                include=["documents", "metadatas", "distances"],
            )
            hits = self._parse(raw, CollectionManager.metric_of(collection))
        except Exception as e:
            logger.error(
                f"Retrieval failed for collection {collection_name}, "
                f"continuing without context:\n{format_error_chain(e)}"
            )
            return []

        if not hits:
            logger.warning(f"No relevant documents found in {collection_name}")
        return hits[:k]

    @staticmethod
    def _parse(raw: dict[str, Any], metric: str) -> list[RetrievedChunk]:
        if not raw.get("ids") or not raw["ids"][0]:
            return []

        documents = raw["documents"][0]
        distances = raw["distances"][0]
        metadatas = (raw.get("metadatas") or [[]])[0] or [None] * len(documents)

        hits: list[RetrievedChunk] = []
        for idx, record_id in enumerate(raw["ids"][0]):
            hits.append(
                RetrievedChunk(
                    text=documents[idx] or "",
                    score=round(distance_to_score(distances[idx], metric), 6),
                    record_id=record_id,
                    metadata=metadatas[idx] or {},
                )
            )
        # ChromaDB already orders by distance; keep the contract explicit.
        hits.sort(key=lambda hit: hit.score, reverse=True)
        return hits


def distance_to_score(distance: float, metric: str) -> float:
    """Convert a ChromaDB distance into a similarity (higher is better)."""
    metric = metric.lower()
    if metric in {"cosine", "ip", "dot_product"}:
        return 1.0 - float(distance)
    # l2 / euclidean: squared distance, map to (0, 1]
    return 1.0 / (1.0 + math.sqrt(max(float(distance), 0.0)))
