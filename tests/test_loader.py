"""Tests for document_loader.loader - DocumentLoader."""

import docx
import fitz
import pytest

from common.exceptions import LoadError, UnsupportedFormatError
from document_loader import DocumentLoader, FileType


@pytest.fixture
def loader():
    return DocumentLoader()


def _write_pdf(path, pages):
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    doc.save(str(path))
    doc.close()


def _write_docx(path, paragraphs, table_rows=()):
    document = docx.Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    if table_rows:
        table = document.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for r, row in enumerate(table_rows):
            for c, value in enumerate(row):
                table.cell(r, c).text = value
    document.save(str(path))


class TestTextFiles:
    def test_reads_utf8(self, loader, tmp_path):
        path = tmp_path / "policy.txt"
        path.write_text("Returns are accepted within 30 days.", encoding="utf-8")
        assert loader.load(path) == "Returns are accepted within 30 days."

    def test_normalizes_whitespace(self, loader, tmp_path):
        path = tmp_path / "policy.txt"
        path.write_text("Line  one\r\n\r\n\r\n\r\nLine\ttwo  ", encoding="utf-8")
        assert loader.load(path) == "Line one\n\nLine two"

    def test_dehyphenates_line_breaks(self, loader, tmp_path):
        path = tmp_path / "policy.txt"
        path.write_text("Free ship-\nment on all orders.", encoding="utf-8")
        assert loader.load(path) == "Free shipment on all orders."

    def test_extension_is_case_insensitive(self, loader, tmp_path):
        path = tmp_path / "POLICY.TXT"
        path.write_text("Hello", encoding="utf-8")
        assert loader.load(path) == "Hello"

    def test_load_document_metadata(self, loader, tmp_path):
        path = tmp_path / "faq.txt"
        path.write_text("Question and answer.", encoding="utf-8")
        document = loader.load_document(path)
        assert document.file_type is FileType.TEXT
        assert document.name == "faq.txt"
        assert document.char_count == len("Question and answer.")


class TestPdf:
    def test_extracts_all_pages(self, loader, tmp_path):
        path = tmp_path / "handbook.pdf"
        _write_pdf(path, ["Returns are accepted within 30 days.", "Refunds take 5 days."])
        text = loader.load(path)
        assert "Returns are accepted within 30 days." in text
        assert "Refunds take 5 days." in text
        assert text.index("Returns") < text.index("Refunds")
        assert "\n\n" in text

    def test_corrupt_pdf_raises_load_error(self, loader, tmp_path):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"this is not a pdf")
        with pytest.raises(LoadError) as exc_info:
            loader.load(path)
        assert exc_info.value.path == str(path)


class TestDocx:
    def test_paragraphs_and_tables(self, loader, tmp_path):
        path = tmp_path / "faq.docx"
        _write_docx(
            path,
            ["Shipping policy", "Orders ship within 2 business days."],
            table_rows=[("Plan", "Price"), ("Basic", "10 USD")],
        )
        text = loader.load(path)
        assert text.startswith("Shipping policy\nOrders ship within 2 business days.")
        assert "Plan | Price" in text
        assert "Basic | 10 USD" in text

    def test_tables_can_be_excluded(self, tmp_path):
        path = tmp_path / "faq.docx"
        _write_docx(path, ["Intro"], table_rows=[("A", "B")])
        assert DocumentLoader(include_tables=False).load(path) == "Intro"


class TestErrors:
    def test_unsupported_extension(self, loader, tmp_path):
        path = tmp_path / "sheet.xlsx"
        path.write_bytes(b"")
        with pytest.raises(UnsupportedFormatError) as exc_info:
            loader.load(path)
        assert exc_info.value.path == str(path)
        assert exc_info.value.extension == ".xlsx"

    def test_no_extension(self, loader, tmp_path):
        path = tmp_path / "README"
        path.write_text("x", encoding="utf-8")
        with pytest.raises(UnsupportedFormatError):
            loader.load(path)

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(LoadError) as exc_info:
            loader.load(tmp_path / "missing.txt")
        assert "missing.txt" in str(exc_info.value)


class TestLoadMany:
    def test_skips_failures(self, loader, tmp_path):
        good = tmp_path / "good.txt"
        good.write_text("Good document.", encoding="utf-8")
        unsupported = tmp_path / "slides.pptx"
        unsupported.write_bytes(b"")
        corrupt = tmp_path / "corrupt.pdf"
        corrupt.write_bytes(b"garbage")

        documents = list(loader.load_many([unsupported, corrupt, good, tmp_path / "gone.txt"]))
        assert [d.name for d in documents] == ["good.txt"]

    def test_on_skip_reports_each_failure(self, loader, tmp_path):
        good = tmp_path / "good.txt"
        good.write_text("Good document.", encoding="utf-8")
        unsupported = tmp_path / "slides.pptx"
        unsupported.write_bytes(b"")
        missing = tmp_path / "gone.txt"

        skipped = []
        documents = list(
            loader.load_many(
                [unsupported, good, missing],
                on_skip=lambda path, error: skipped.append((path, type(error))),
            )
        )
        assert [d.name for d in documents] == ["good.txt"]
        assert skipped == [(unsupported, UnsupportedFormatError), (missing, LoadError)]
