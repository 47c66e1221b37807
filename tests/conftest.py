"""
Pytest fixtures for the chatbot pipeline tests.

No test needs a running Ollama: embeddings come from a deterministic
bag-of-words fake and generation from a scripted fake. ChromaDB runs
in-memory.
"""

import re
import uuid
import zlib

import chromadb
import pytest

from common.exceptions import EmbeddingError
from vector_store.collection_manager import CollectionManager
from vector_store.models import StoreConfig

DIMENSION = 768


def bag_of_words_vector(text: str, dimension: int = DIMENSION) -> list[float]:
    """Deterministic embedding: one bucket per word stem, plus a bias term."""
    vector = [0.0] * dimension
    vector[0] = 0.1
    for word in re.findall(r"[a-z0-9]+", text.lower()):
        stem = word[:6]
        vector[1 + zlib.crc32(stem.encode()) % (dimension - 1)] += 1.0
    return vector


class FakeEmbedder:
    def __init__(self, dimension: int = DIMENSION, fail_on: tuple[str, ...] = ()):
        self.dimension = dimension
        self.fail_on = fail_on
        self.calls: list[str] = []

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if any(marker in text for marker in self.fail_on):
            raise EmbeddingError("fake embedding failure")
        return bag_of_words_vector(text, self.dimension)


class FakeGenerator:
    """Returns a canned response and remembers every prompt."""

    def __init__(self, response: str = "The answer is 30 days."):
        self.response = response
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.response


@pytest.fixture
def chroma_client():
    """In-memory ChromaDB client."""
    return chromadb.EphemeralClient()


@pytest.fixture
def collection_name():
    return f"test_{uuid.uuid4().hex[:8]}"


@pytest.fixture
def manager(chroma_client):
    config = StoreConfig(persist_directory="unused", dimension=DIMENSION)
    return CollectionManager(config=config, chroma_client=chroma_client)


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def fake_generator():
    return FakeGenerator()
