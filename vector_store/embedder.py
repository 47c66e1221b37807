"""
Ollama Embedder - Local embedding generation via the Ollama API

Wraps the Ollama Python client (``POST /api/embeddings {model, prompt}``) and
acts as a hard validation gate: every vector it returns has exactly the
configured dimension. Anything else raises EmbeddingError.

Design:
- Retry with backoff and a circuit breaker around the raw request
- Transport errors are normalized so the retry policy can classify them
- Optional in-memory LRU cache (embeddings are treated as a pure function)
- Health check to verify Ollama is running and the model is pulled

Usage:
    from vector_store.embedder import OllamaEmbedder

    embedder = OllamaEmbedder(model="nomic-embed-text", dimension=768)
    vector = embedder.embed("Returns are accepted within 30 days.")
"""

import logging
import threading
from collections import OrderedDict
from typing import Any, Optional

import httpx
import ollama

from common.exceptions import CircuitOpenError, EmbeddingError
from common.resilience import ResilientCall

from .models import StoreConfig

logger = logging.getLogger(__name__)


class OllamaEmbedder:
    """
    Generates fixed-dimension text embeddings using a local Ollama model.
    """

    def __init__(
        self,
        model: str = "nomic-embed-text",
        base_url: str = "http://localhost:11434",
        dimension: int = 768,
        timeout: float = 30.0,
        cache_size: int = 0,
        guard: Optional[ResilientCall] = None,
    ):
        """
        Initialize the embedder.

        Args:
            model: Ollama model name for embeddings.
            base_url: Ollama API base URL.
            dimension: Required vector length.
            timeout: Timeout for one request in seconds.
            cache_size: LRU cache entries (0 disables caching).
            guard: Retry / circuit-breaker wrapper for the raw request.
        """
        self.model = model
        self.base_url = base_url
        self.dimension = dimension
        self.timeout = timeout
        self._client = ollama.Client(host=base_url, timeout=timeout)
        self._guard = guard or ResilientCall(name=f"ollama-embed:{model}")
        self._cache_size = cache_size
        self._cache: OrderedDict[str, list[float]] = OrderedDict()
        self._cache_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: StoreConfig) -> "OllamaEmbedder":
        return cls(
            model=config.embedding_model,
            base_url=config.ollama_base_url,
            dimension=config.dimension,
            timeout=config.request_timeout,
            cache_size=config.embedding_cache_size,
        )

    def embed(self, text: str) -> list[float]:
        """
        Generate an embedding for a single text.

        Args:
            text: The text to embed.

        Returns:
            List of exactly ``dimension`` floats.

        Raises:
            EmbeddingError: Empty input, unreachable service, malformed
                response or wrong vector dimension.
        """
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed empty text")

        cached = self._cache_get(text)
        if cached is not None:
            return cached

        try:
            response = self._guard.call(self._request, text)
        except CircuitOpenError as e:
            raise EmbeddingError(
                f"Embedding service unavailable for model '{self.model}'", e
            ) from e
        except ollama.ResponseError as e:
            raise EmbeddingError(
                f"Ollama embedding failed for model '{self.model}'", e
            ) from e
        except (ConnectionError, TimeoutError) as e:
            raise EmbeddingError(
                f"Cannot reach Ollama at {self.base_url}. "
                f"Is Ollama running? Start it with: ollama serve",
                e,
            ) from e
        except Exception as e:
            raise EmbeddingError("Embedding generation failed", e) from e

        vector = self._validate(response)
        self._cache_put(text, vector)
        return list(vector)

    def health_check(self) -> dict[str, bool | str]:
        """
        Check if Ollama is running and the embedding model is available.

        Returns:
            Dict with 'healthy' (bool), 'ollama_running' (bool),
            'model_available' (bool), and 'error' (str, if any).
        """
        result = {
            "healthy": False,
            "ollama_running": False,
            "model_available": False,
            "model": self.model,
            "error": "",
        }

        try:
            models = self._client.list()
            result["ollama_running"] = True

            model_names = [m.model for m in models.models]
            # "nomic-embed-text" matches "nomic-embed-text:latest"
            result["model_available"] = any(
                m.startswith(self.model) for m in model_names
            )

            if not result["model_available"]:
                result["error"] = (
                    f"Model '{self.model}' not found. "
                    f"Available: {model_names}. "
                    f"Pull it with: ollama pull {self.model}"
                )
            else:
                result["healthy"] = True

        except Exception as e:
            result["error"] = f"Cannot connect to Ollama: {e}"

        return result

    # -------------------------------------------------------------------------
    # Internal methods
    # -------------------------------------------------------------------------

    def _request(self, text: str) -> Any:
        try:
            return self._client.embeddings(model=self.model, prompt=text)
        except httpx.TimeoutException as e:
            raise TimeoutError(
                f"Embedding request timed out after {self.timeout}s"
            ) from e
        except httpx.TransportError as e:
            raise ConnectionError(str(e)) from e

    def _validate(self, response: Any) -> list[float]:
        try:
            embedding = response["embedding"]
        except (KeyError, TypeError) as e:
            raise EmbeddingError("Malformed embedding response: no 'embedding' field", e) from e

        if not isinstance(embedding, (list, tuple)) or not all(
            isinstance(x, (int, float)) and not isinstance(x, bool) for x in embedding
        ):
            raise EmbeddingError("Malformed embedding response: 'embedding' is not a number list")

        if len(embedding) != self.dimension:
            logger.error(
                f"Embedding dimension mismatch for model '{self.model}': "
                f"expected {self.dimension}, got {len(embedding)}"
            )
            raise EmbeddingError(
                f"Invalid embedding size: expected {self.dimension}, got {len(embedding)}",
                expected_dimension=self.dimension,
                actual_dimension=len(embedding),
            )

        return [float(x) for x in embedding]

    def _cache_get(self, text: str) -> Optional[list[float]]:
        if not self._cache_size:
            return None
        with self._cache_lock:
            vector = self._cache.get(text)
            if vector is None:
                return None
            self._cache.move_to_end(text)
            return list(vector)

    def _cache_put(self, text: str, vector: list[float]) -> None:
        if not self._cache_size:
            return
        with self._cache_lock:
            self._cache[text] = vector
            self._cache.move_to_end(text)
            while len(self._cache) > self._cache_size:
                self._cache.popitem(last=False)
