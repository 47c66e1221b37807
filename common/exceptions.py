"""
Custom Exceptions for the customer-service RAG pipeline.

Every stage of ingestion and of a query turn raises one of these, so callers
can decide per error kind whether to skip, degrade or fail.

Exception Hierarchy:
    ChatbotError (base)
    ├── DocumentError
    │   ├── UnsupportedFormatError
    │   └── LoadError
    ├── EmbeddingError
    ├── VectorIndexError
    ├── UnauthorizedError
    ├── GenerationError
    └── CircuitOpenError

Propagation policy:
    - Ingestion: UnsupportedFormatError / LoadError skip the file,
      EmbeddingError skips the chunk, VectorIndexError aborts the file.
    - Query turn: UnauthorizedError, EmbeddingError and GenerationError fail
      the turn; VectorIndexError during retrieval degrades to empty context.

Usage:
    from common.exceptions import EmbeddingError, UnauthorizedError

    try:
        answer = pipeline.answer(email, messages)
    except UnauthorizedError:
        ...
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class ChatbotError(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A chatbot pipeline error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


# =============================================================================
# DOCUMENT ERRORS
# =============================================================================


class DocumentError(ChatbotError):
    """Base class for errors tied to one source document."""

    def __init__(
        self,
        message: str = "Document error",
        path: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.path = path
        if path:
            message = f"{message} [{path}]"
        super().__init__(message, details)


class UnsupportedFormatError(DocumentError):
    """
    Raised when a document's extension has no loader.

    Attributes:
        path: Path to the skipped file
        extension: The unsupported extension (lower-case, with dot)
    """

    def __init__(self, path: str, extension: str = ""):
        self.extension = extension
        super().__init__(
            message=f"Unsupported file type '{extension or '<none>'}'",
            path=path,
        )


class LoadError(DocumentError):
    """
    Raised when a document cannot be read or parsed.

    Attributes:
        path: Path to the failing file
        original_error: The underlying error from the filesystem or parser
    """

    def __init__(
        self,
        path: str,
        original_error: Optional[Exception] = None,
        message: str = "Failed to load document",
    ):
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(message=message, path=path, details=details)


# =============================================================================
# SERVICE ERRORS
# =============================================================================


class EmbeddingError(ChatbotError):
    """
    Raised when the embedding service fails or returns an invalid vector.

    Attributes:
        original_error: The underlying client error, if any
        expected_dimension: Configured vector dimension (on mismatch)
        actual_dimension: Dimension actually returned (on mismatch)
    """

    def __init__(
        self,
        message: str = "Embedding request failed",
        original_error: Optional[Exception] = None,
        expected_dimension: Optional[int] = None,
        actual_dimension: Optional[int] = None,
    ):
        self.original_error = original_error
        self.expected_dimension = expected_dimension
        self.actual_dimension = actual_dimension
        details = str(original_error) if original_error else None
        super().__init__(message, details)


class VectorIndexError(ChatbotError):
    """
    Raised by the vector index: missing collection, dimension mismatch or a
    failure of the underlying store.

    Attributes:
        collection: Name of the collection involved
        original_error: The underlying store error, if any
    """

    def __init__(
        self,
        message: str = "Vector index error",
        collection: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.collection = collection
        self.original_error = original_error
        if collection:
            message = f"{message} [{collection}]"
        details = str(original_error) if original_error else None
        super().__init__(message, details)


class UnauthorizedError(ChatbotError):
    """
    Raised when an identity has no authorized collection.

    Attributes:
        identity: The identity that was denied
    """

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"No collection is authorized for identity: {identity}")


class GenerationError(ChatbotError):
    """
    Raised when the generation service fails.

    Attributes:
        original_error: The underlying transport/HTTP error
        status_code: HTTP status code if available
    """

    def __init__(
        self,
        message: str = "Generation request failed",
        original_error: Optional[Exception] = None,
        status_code: Optional[int] = None,
    ):
        self.original_error = original_error
        self.status_code = status_code
        if status_code:
            message = f"{message} (HTTP {status_code})"
        details = str(original_error) if original_error else None
        super().__init__(message, details)


class CircuitOpenError(ChatbotError):
    """
    Raised when a call is rejected because its circuit breaker is open.

    Attributes:
        name: Name of the protected dependency
        retry_after: Seconds until the breaker half-opens
    """

    def __init__(self, name: str, retry_after: float = 0.0):
        self.name = name
        self.retry_after = retry_after
        super().__init__(
            f"Circuit '{name}' is open",
            details=f"retry after {retry_after:.1f}s",
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """
    Check if an error is potentially recoverable by retrying.

    Returns True for:
    - Connection errors and timeouts
    - HTTP 5xx responses (any error exposing a ``status_code`` >= 500)

    Returns False for:
    - Open circuits (the breaker decides when to try again)
    - Validation failures (wrong dimension, malformed payload)
    - Anything else
    """
    if isinstance(error, CircuitOpenError):
        return False
    if isinstance(error, (ConnectionError, TimeoutError)):
        return True
    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int) and status_code >= 500:
        return True
    return False


def format_error_chain(error: Exception) -> str:
    """
    Format an exception and its chain for logging.

    Returns a multi-line string showing the error hierarchy.
    """
    lines = []
    current = error
    depth = 0

    while current is not None:
        prefix = "  " * depth + ("└─ " if depth > 0 else "")
        lines.append(f"{prefix}{type(current).__name__}: {current}")

        if getattr(current, "original_error", None) is not None:
            current = current.original_error
            depth += 1
        elif current.__cause__:
            current = current.__cause__
            depth += 1
        else:
            break

    return "\n".join(lines)
