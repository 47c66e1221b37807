"""
Data Models for the Chunking Pipeline

Defines:
1. ChunkingConfig - Chunk size, overlap and boundary configuration
2. Chunk - One immutable text segment with its offsets in the source text

Design Principles:
- Pydantic v2 for validation
- Offsets (start/end) make coverage and overlap checkable: the chunk text is
  always exactly ``text[start:end]``
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SEPARATORS: tuple[str, ...] = (
    "\n\n",  # paragraph
    "\n",    # line
    ". ",    # sentence
    "? ",
    "! ",
    "; ",
    " ",     # word
)


class ChunkingConfig(BaseModel):
    """
    Configuration for the text splitter.

    Sizes are measured in characters.
    """
    chunk_size: int = Field(
        512,
        description="Maximum characters per chunk",
        ge=1,
    )
    chunk_overlap: int = Field(
        200,
        description="Maximum characters shared with the previous chunk",
        ge=0,
    )
    separators: tuple[str, ...] = Field(
        DEFAULT_SEPARATORS,
        description="Structural boundaries, largest first",
    )
    allow_hard_split: bool = Field(
        True,
        description="Cut at arbitrary positions when no separator fits",
    )

    def model_post_init(self, __context: Any) -> None:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be less than "
                f"chunk_size ({self.chunk_size})"
            )
        if any(not sep for sep in self.separators):
            raise ValueError("separators must be non-empty strings")


class Chunk(BaseModel):
    """
    A segment of a document's text, ready for embedding.
    """
    model_config = ConfigDict(frozen=True)

    index: int = Field(
        ...,
        description="Position of the chunk in the ingestion stream (0-indexed)",
        ge=0,
    )
    text: str = Field(
        ...,
        description="Chunk text, equal to source[start:end]",
    )
    start: int = Field(
        ...,
        description="Start offset in the source text (inclusive)",
        ge=0,
    )
    end: int = Field(
        ...,
        description="End offset in the source text (exclusive)",
        ge=0,
    )

    @property
    def length(self) -> int:
        return self.end - self.start
