"""
Document Loader - flat text extraction from PDF, DOCX and plain text files

Dispatches on the file extension:
- .pdf  -> PyMuPDF, text of every page in reading order, pages joined by a
           blank line
- .docx -> python-docx, paragraph text followed by table cell text
- .txt  -> UTF-8 read (undecodable bytes replaced)

Unsupported extensions raise UnsupportedFormatError, unreadable or corrupt
files raise LoadError. ``load_many`` isolates both per file so one bad
document never aborts a batch.

Usage:
    from document_loader import DocumentLoader

    loader = DocumentLoader()
    text = loader.load("documents/CostcoNotes.docx")

    for document in loader.load_many(paths):
        ...
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

import docx
import fitz  # PyMuPDF

from common.exceptions import LoadError, UnsupportedFormatError

from .models import FileType, SourceDocument

logger = logging.getLogger(__name__)


class DocumentLoader:
    """Extracts a single flat text string from a source document."""

    def __init__(self, sort_blocks: bool = True, include_tables: bool = True):
        """
        Args:
            sort_blocks: Order PDF text blocks top-to-bottom, left-to-right.
            include_tables: Append DOCX table cell text after the paragraphs.
        """
        self.sort_blocks = sort_blocks
        self.include_tables = include_tables

    def load(self, path: str | Path) -> str:
        """
        Extract the text of one document.

        Raises:
            UnsupportedFormatError: The extension has no loader.
            LoadError: The file is missing, unreadable or corrupt.
        """
        return self.load_document(path).text

    def load_document(self, path: str | Path) -> SourceDocument:
        path = Path(path)
        file_type = FileType.from_path(path)
        if file_type is None:
            raise UnsupportedFormatError(str(path), path.suffix.lower())

        if not path.is_file():
            raise LoadError(str(path), FileNotFoundError(f"No such file: {path}"))

        try:
            if file_type is FileType.PDF:
                text = self._load_pdf(path)
            elif file_type is FileType.DOCX:
                text = self._load_docx(path)
            else:
                text = self._load_text(path)
        except LoadError:
            raise
        except Exception as e:
            raise LoadError(str(path), e) from e

        logger.debug(f"Loaded {path.name} ({file_type.value}, {len(text)} chars)")
        return SourceDocument(path=str(path), file_type=file_type, text=text)

    def load_many(
        self,
        paths: Iterable[str | Path],
        on_skip: Optional[Callable[[str | Path, Exception], None]] = None,
    ) -> Iterator[SourceDocument]:
        """
        Load documents one by one, skipping the ones that fail.

        Unsupported formats are logged as warnings, load failures as errors.
        ``on_skip`` is called with the path and the error of each skipped file.
        """
        for path in paths:
            try:
                document = self.load_document(path)
            except UnsupportedFormatError as e:
                logger.warning(f"Skipping {path}: {e}")
                if on_skip is not None:
                    on_skip(path, e)
                continue
            except LoadError as e:
                logger.error(f"Skipping {path}: {e}")
                if on_skip is not None:
                    on_skip(path, e)
                continue
            yield document

    # -------------------------------------------------------------------------
    # Format-specific loaders
    # -------------------------------------------------------------------------

    def _load_pdf(self, path: Path) -> str:
        pages: list[str] = []
        with fitz.open(path) as doc:
            for page in doc:
                blocks = page.get_text("blocks", sort=False)
                if self.sort_blocks:
                    blocks = sorted(blocks, key=lambda b: (b[1], b[0]))
                texts = []
                for block in blocks:
                    if len(block) < 5:
                        continue
                    block_type = block[-1] if isinstance(block[-1], int) else 0
                    if block_type != 0:
                        continue  # image block
                    if block[4] and block[4].strip():
                        texts.append(block[4].strip())
                page_text = "\n".join(texts).strip()
                if page_text:
                    pages.append(page_text)
        return _clean_text("\n\n".join(pages))

    def _load_docx(self, path: Path) -> str:
        document = docx.Document(str(path))
        parts = [p.text for p in document.paragraphs]
        if self.include_tables:
            for table in document.tables:
                for row in table.rows:
                    cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                    if cells:
                        parts.append(" | ".join(cells))
        return _clean_text("\n".join(parts))

    def _load_text(self, path: Path) -> str:
        return _clean_text(path.read_text(encoding="utf-8", errors="replace"))


def _clean_text(text: str) -> str:
    if not text:
        return ""
    cleaned = text.replace("\r\n", "\n").replace("\r", "\n")
    # De-hyphenate line breaks: "ship-\nment" -> "shipment"
    cleaned = re.sub(r"(?<=\w)-\n(?=\w)", "", cleaned)
    cleaned = re.sub(r"[ \t]+", " ", cleaned)
    cleaned = re.sub(r" *\n *", "\n", cleaned)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    return cleaned.strip()
