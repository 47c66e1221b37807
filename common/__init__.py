"""
Shared building blocks: the pipeline exception hierarchy, logging setup and
the retry / circuit-breaker policy used at every external service boundary.
"""

from .exceptions import (
    ChatbotError,
    CircuitOpenError,
    DocumentError,
    EmbeddingError,
    GenerationError,
    LoadError,
    UnauthorizedError,
    UnsupportedFormatError,
    VectorIndexError,
    format_error_chain,
    is_retryable,
)
from .logging_config import setup_logging
from .resilience import CircuitBreaker, ResilientCall, RetryPolicy

__all__ = [
    "ChatbotError",
    "CircuitOpenError",
    "DocumentError",
    "EmbeddingError",
    "GenerationError",
    "LoadError",
    "UnauthorizedError",
    "UnsupportedFormatError",
    "VectorIndexError",
    "format_error_chain",
    "is_retryable",
    "setup_logging",
    "CircuitBreaker",
    "ResilientCall",
    "RetryPolicy",
]
