"""
Data Models for the Vector Store Pipeline

Defines:
1. StoreConfig - ChromaDB location, Ollama embedding model and vector settings
2. StoredRecord - The persisted unit: one chunk's vector and text
3. RetrievedChunk - A single retrieval hit with its similarity score

Design Principles:
- Pydantic v2 for validation (consistent with chunking)
- Similarity scores are "higher is better" regardless of the distance metric
"""

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Public metric names -> ChromaDB hnsw:space values.
METRIC_ALIASES = {
    "cosine": "cosine",
    "dot_product": "ip",
    "ip": "ip",
    "euclidean": "l2",
    "l2": "l2",
}


class StoreConfig(BaseModel):
    """Configuration for the vector store and the embedding client."""
    persist_directory: str = Field(
        "./chroma_db",
        description="Directory for ChromaDB persistent storage",
    )
    collection_name: str = Field(
        "customer_service",
        description="Default collection used by ingestion",
    )
    embedding_model: str = Field(
        "nomic-embed-text",
        description="Ollama embedding model name",
    )
    ollama_base_url: str = Field(
        "http://localhost:11434",
        description="Ollama API base URL",
    )
    dimension: int = Field(
        768,
        description="Embedding vector dimension (nomic-embed-text: 768)",
        ge=1,
    )
    distance_metric: str = Field(
        "cosine",
        description="Similarity metric (cosine, dot_product, euclidean)",
    )
    request_timeout: float = Field(
        30.0,
        description="Timeout for one embedding request in seconds",
        gt=0,
    )
    embedding_cache_size: int = Field(
        0,
        description="Number of embeddings kept in the in-memory LRU cache (0 = off)",
        ge=0,
    )

    @classmethod
    def from_env(cls) -> "StoreConfig":
        defaults = cls()
        return cls(
            persist_directory=os.environ.get("CHROMA_DIR", defaults.persist_directory),
            collection_name=os.environ.get("CHAT_COLLECTION", defaults.collection_name),
            embedding_model=os.environ.get("EMBEDDING_MODEL", defaults.embedding_model),
            ollama_base_url=os.environ.get("OLLAMA_BASE_URL", defaults.ollama_base_url),
            dimension=int(os.environ.get("EMBEDDING_DIMENSION", defaults.dimension)),
            distance_metric=os.environ.get("DISTANCE_METRIC", defaults.distance_metric),
            request_timeout=float(os.environ.get("EMBEDDING_TIMEOUT", defaults.request_timeout)),
            embedding_cache_size=int(
                os.environ.get("EMBEDDING_CACHE_SIZE", defaults.embedding_cache_size)
            ),
        )


class StoredRecord(BaseModel):
    """A vector and the chunk text it was computed from."""
    model_config = ConfigDict(frozen=True)

    record_id: str = Field(
        ...,
        description="Unique record ID inside its collection",
    )
    vector: list[float] = Field(
        ...,
        description="Embedding of the chunk text",
    )
    text: str = Field(
        ...,
        description="Original chunk text",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Flat metadata (source file, chunk index)",
    )


class RetrievedChunk(BaseModel):
    """A single retrieval hit."""
    text: str = Field(
        ...,
        description="Text of the stored chunk",
    )
    score: float = Field(
        ...,
        description="Similarity score (higher = more similar)",
    )
    record_id: str = Field(
        "",
        description="ID of the stored record",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Record metadata from ChromaDB",
    )
