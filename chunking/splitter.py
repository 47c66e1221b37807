"""
Recursive Text Splitter - overlapping, bounded-size chunks for embedding

Algorithm:
1. Cut the text into pieces no longer than chunk_size, trying the largest
   structural boundary first (paragraph, line, sentence, word) and falling
   back to a hard cut when no separator helps. Separators stay attached to
   the piece they end, so pieces tile the text without gaps.
2. Greedily merge consecutive pieces into chunks of at most chunk_size.
3. When a chunk is full, the next one starts with the trailing pieces of the
   previous chunk that fit into chunk_overlap characters, then continues.

Guarantees:
- Every character of the input is covered by at least one chunk.
- Chunks are at most chunk_size characters long (unless allow_hard_split is
  disabled and a single piece without separators is longer).
- Output is deterministic for identical text and configuration.

Usage:
    from chunking import split

    for chunk in split(text, max_size=512, overlap=200):
        print(chunk.index, chunk.start, chunk.end)
"""

from __future__ import annotations

from collections import deque
from typing import Iterator, Optional

from .models import Chunk, ChunkingConfig


class ChunkStream:
    """
    Lazy, restartable sequence of chunks over one text.

    Each iteration re-runs the splitter from the beginning.
    """

    def __init__(self, splitter: "TextSplitter", text: str):
        self._splitter = splitter
        self._text = text

    def __iter__(self) -> Iterator[Chunk]:
        return self._splitter._generate(self._text)

    def __repr__(self) -> str:
        return (
            f"ChunkStream(chars={len(self._text)}, "
            f"chunk_size={self._splitter.config.chunk_size})"
        )


class TextSplitter:
    """Splits text into overlapping chunks along structural boundaries."""

    def __init__(self, config: Optional[ChunkingConfig] = None):
        self.config = config or ChunkingConfig()

    def split(self, text: str) -> ChunkStream:
        """Return a lazy, restartable stream of chunks for ``text``."""
        return ChunkStream(self, text or "")

    # -------------------------------------------------------------------------
    # Internal methods
    # -------------------------------------------------------------------------

    def _generate(self, text: str) -> Iterator[Chunk]:
        if not text.strip():
            return

        size = self.config.chunk_size
        overlap = self.config.chunk_overlap
        window: deque[tuple[int, int]] = deque()
        window_len = 0
        index = 0

        for start, end in self._pieces(text, 0, len(text), 0):
            piece_len = end - start
            if window and window_len + piece_len > size:
                yield self._make_chunk(text, index, window)
                index += 1
                # Keep the tail of the previous chunk as overlap, as long as
                # the incoming piece still fits after it.
                while window and (window_len > overlap or window_len + piece_len > size):
                    head_start, head_end = window.popleft()
                    window_len -= head_end - head_start
            window.append((start, end))
            window_len += piece_len

        if window:
            yield self._make_chunk(text, index, window)

    def _pieces(
        self, text: str, start: int, end: int, level: int
    ) -> Iterator[tuple[int, int]]:
        """Yield contiguous (start, end) spans of at most chunk_size chars."""
        size = self.config.chunk_size
        if end - start <= size:
            yield start, end
            return

        separators = self.config.separators
        while level < len(separators) and text.find(separators[level], start, end) == -1:
            level += 1

        if level >= len(separators):
            yield from self._hard_split(start, end)
            return

        separator = separators[level]
        segment_start = start
        while segment_start < end:
            pos = text.find(separator, segment_start, end)
            segment_end = end if pos == -1 else pos + len(separator)
            if segment_end - segment_start <= size:
                yield segment_start, segment_end
            else:
                yield from self._pieces(text, segment_start, segment_end, level + 1)
            segment_start = segment_end

    def _hard_split(self, start: int, end: int) -> Iterator[tuple[int, int]]:
        if not self.config.allow_hard_split:
            yield start, end
            return
        size = self.config.chunk_size
        for pos in range(start, end, size):
            yield pos, min(pos + size, end)

    @staticmethod
    def _make_chunk(text: str, index: int, window: deque[tuple[int, int]]) -> Chunk:
        start = window[0][0]
        end = window[-1][1]
        return Chunk(index=index, text=text[start:end], start=start, end=end)


def split(text: str, max_size: int = 512, overlap: int = 200) -> ChunkStream:
    """Split ``text`` with the default boundaries and the given sizes."""
    config = ChunkingConfig(chunk_size=max_size, chunk_overlap=overlap)
    return TextSplitter(config).split(text)
