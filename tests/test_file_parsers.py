"""
Tests for document ingestion (.txt and .docx).
"""

from io import BytesIO

import pytest
from docx import Document
from docx.shared import Cm

from config_logging import FileError
from file_parsers import parse_document, get_file_type, calculate_checksum
from margin_checker import MarginSpec


def make_docx(paragraphs, top=3.0, bottom=2.5, left=2.5, right=2.5) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    section = doc.sections[0]
    section.top_margin = Cm(top)
    section.bottom_margin = Cm(bottom)
    section.left_margin = Cm(left)
    section.right_margin = Cm(right)
    output = BytesIO()
    doc.save(output)
    return output.getvalue()


class TestTextFiles:

    def test_plain_text(self):
        content = parse_document("Halo dunia".encode("utf-8"), "catatan.txt")
        assert content.text == "Halo dunia"
        assert content.margins is None
        assert content.word_count == 2
        assert content.checksum == calculate_checksum(b"Halo dunia")

    def test_bom_removed(self):
        content = parse_document(b"\xef\xbb\xbfHalo", "catatan.txt")
        assert content.text == "Halo"

    def test_invalid_utf8_replaced(self):
        content = parse_document(b"Halo \xff", "catatan.txt")
        assert content.text.startswith("Halo ")

    def test_from_path(self, tmp_path):
        path = tmp_path / "surat.txt"
        path.write_text("Saya pergi.", encoding="utf-8")
        content = parse_document(path)
        assert content.filename == "surat.txt"
        assert content.text == "Saya pergi."

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileError):
            parse_document(tmp_path / "tidak_ada.txt")


class TestDocxFiles:

    def test_text_and_margins(self):
        data = make_docx(["Paragraf satu.", "Paragraf dua."], top=2.0)
        content = parse_document(data, "laporan.docx")

        assert content.text.split("\n")[-2:] == ["Paragraf satu.", "Paragraf dua."]
        assert content.margins == MarginSpec(top=2.0, bottom=2.5, left=2.5, right=2.5)

    def test_to_dict(self):
        content = parse_document(make_docx(["Halo."]), "laporan.docx")
        data = content.to_dict()
        assert data['filename'] == "laporan.docx"
        assert data['margins'] == {'top': 3.0, 'bottom': 2.5, 'left': 2.5, 'right': 2.5}

    def test_corrupt_docx(self):
        with pytest.raises(FileError):
            parse_document(b"bukan dokumen word", "rusak.docx")


class TestFileTypes:

    def test_unsupported_extension(self):
        with pytest.raises(FileError) as exc_info:
            parse_document(b"%PDF-1.4", "dokumen.pdf")
        assert exc_info.value.status_code == 400

    def test_get_file_type(self):
        assert get_file_type("Laporan.DOCX") == ".docx"
        assert get_file_type("tanpa_ekstensi") == ""
