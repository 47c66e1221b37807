"""
Vector Store Module - ChromaDB + Ollama local embedding pipeline

Stores document chunks as 768-dimension embeddings in per-tenant ChromaDB
collections and retrieves the nearest chunks for a query vector.

Quick Start:
    from vector_store import CollectionManager, OllamaEmbedder, Retriever

    manager = CollectionManager()
    embedder = OllamaEmbedder()

    # Ingest
    manager.recreate("walmart_team", metric="cosine", dimension=768)
    manager.insert("walmart_team", embedder.embed(chunk_text), chunk_text)

    # Search
    retriever = Retriever(manager)
    hits = retriever.retrieve("walmart_team", embedder.embed("return policy?"), k=10)
"""

__version__ = "1.0.0"

from .collection_manager import AliasTable, CollectionManager
from .embedder import OllamaEmbedder
from .models import RetrievedChunk, StoreConfig, StoredRecord
from .retriever import Retriever, distance_to_score

__all__ = [
    "__version__",
    "AliasTable",
    "CollectionManager",
    "OllamaEmbedder",
    "Retriever",
    "RetrievedChunk",
    "StoreConfig",
    "StoredRecord",
    "distance_to_score",
]
