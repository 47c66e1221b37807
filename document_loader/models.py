"""
Data Models for the Document Loader

Defines:
1. FileType - Supported source formats
2. SourceDocument - One loaded document and its extracted text
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class FileType(str, Enum):
    """Supported document formats."""
    PDF = "pdf"
    DOCX = "docx"
    TEXT = "text"

    @classmethod
    def from_path(cls, path: str | Path) -> Optional["FileType"]:
        """Return the file type for a path, or None if unsupported."""
        return _EXTENSIONS.get(Path(path).suffix.lower())


_EXTENSIONS = {
    ".pdf": FileType.PDF,
    ".docx": FileType.DOCX,
    ".txt": FileType.TEXT,
}

SUPPORTED_EXTENSIONS = tuple(_EXTENSIONS)


class SourceDocument(BaseModel):
    """
    A loaded source document.

    Lives only for the duration of an ingestion run: it is chunked and then
    discarded.
    """
    path: str = Field(..., description="Path the document was loaded from")
    file_type: FileType = Field(..., description="Format the text was extracted from")
    text: str = Field("", description="Flat extracted text")

    @property
    def name(self) -> str:
        return Path(self.path).name

    @property
    def char_count(self) -> int:
        return len(self.text)
