"""
Chunking Module - Recursive, overlapping character chunking for RAG

Splits extracted document text into bounded-size chunks that overlap their
predecessor, so context crossing a boundary survives retrieval.

Quick Start:
    from chunking import TextSplitter, ChunkingConfig

    splitter = TextSplitter(ChunkingConfig(chunk_size=512, chunk_overlap=200))
    chunks = list(splitter.split(text))
"""

__version__ = "1.0.0"

from .models import DEFAULT_SEPARATORS, Chunk, ChunkingConfig
from .splitter import ChunkStream, TextSplitter, split

__all__ = [
    "__version__",
    "Chunk",
    "ChunkingConfig",
    "ChunkStream",
    "DEFAULT_SEPARATORS",
    "TextSplitter",
    "split",
]
