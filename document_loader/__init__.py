"""
Document Loader - PDF, DOCX and plain-text extraction for ingestion

Quick Start:
    from document_loader import DocumentLoader

    loader = DocumentLoader()
    for document in loader.load_many(["a.docx", "b.pdf", "notes.txt"]):
        print(document.name, document.char_count)
"""

__version__ = "1.0.0"

from .loader import DocumentLoader
from .models import SUPPORTED_EXTENSIONS, FileType, SourceDocument

__all__ = [
    "__version__",
    "DocumentLoader",
    "FileType",
    "SourceDocument",
    "SUPPORTED_EXTENSIONS",
]
