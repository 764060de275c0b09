"""
Tests for highlight segmentation and the report exporters.
"""

import csv
import io
import json

import pytest
from docx import Document
from openpyxl import load_workbook

from base_checker import DetectedError, ErrorKind
from export_module import (
    build_segments, split_lines, export_filename, get_exporter, export_report, canonical_format,
    HTMLExporter, DOCXExporter, PDFExporter, ExcelExporter, CSVExporter, JSONExporter
)

TEXT = "saya sayah pergi"
TYPO = DetectedError(ErrorKind.MISSPELLING, "sayah", 'Perbaiki menjadi "saya"', 5, 10)
MARGIN = DetectedError(ErrorKind.FORMAT, "Margin Atas", "Margin atas harus 3.0 cm", 0, 0)


class TestSegments:

    def test_highlight_split(self):
        segments = build_segments(TEXT, [TYPO])
        assert [s.text for s in segments] == ["saya ", "sayah", " pergi"]
        assert [s.error for s in segments] == [None, TYPO, None]

    def test_overlaps_clipped(self):
        text = "abcdefghij"
        first = DetectedError(ErrorKind.SPELLING, "abcde", "", 0, 5)
        second = DetectedError(ErrorKind.PUNCTUATION, "defgh", "", 3, 8)
        segments = build_segments(text, [second, first])

        assert ''.join(s.text for s in segments) == text
        assert [(s.text, s.error) for s in segments] == [
            ("abcde", first), ("fgh", second), ("ij", None)
        ]

    def test_format_errors_skipped(self):
        assert [s.text for s in build_segments(TEXT, [MARGIN])] == [TEXT]

    def test_empty_text(self):
        assert build_segments("", [MARGIN]) == []

    def test_split_lines(self):
        error = DetectedError(ErrorKind.PUNCTUATION, "\n\n", "", 4, 6)
        lines = split_lines(build_segments("satu\n\ndua", [error]))
        assert [[s.text for s in line] for line in lines] == [["satu"], [], ["dua"]]


class TestExportFilename:

    def test_from_docx(self):
        assert export_filename("laporan akhir.docx", "pdf") == "laporan_akhir_hasil_analisis.pdf"

    def test_default(self):
        assert export_filename("", "csv") == "dokumen_hasil_analisis.csv"


class TestExporters:

    def test_html_escapes_and_marks(self):
        text = "<b> sayah"
        error = DetectedError(ErrorKind.MISSPELLING, "sayah", 'Perbaiki "saya"', 4, 9)
        html = HTMLExporter().export(text, [error])

        assert html.startswith("&lt;b&gt; ")
        assert '<mark class="error error-misspelling" data-start="4" data-end="9"' in html
        assert "&#34;saya&#34;" in html or "&quot;saya&quot;" in html

    def test_docx(self):
        data = DOCXExporter().export(TEXT, [TYPO, MARGIN], "laporan")
        assert data[:2] == b"PK"

        doc = Document(io.BytesIO(data))
        texts = [p.text for p in doc.paragraphs]
        assert "Hasil Analisis - laporan" in texts
        assert "DETAIL KESALAHAN" in texts
        highlighted = [r.text for p in doc.paragraphs for r in p.runs if r.font.highlight_color is not None]
        assert highlighted == ["sayah"]

    def test_docx_without_errors(self):
        doc = Document(io.BytesIO(DOCXExporter().export("Baik.", [])))
        assert "Tidak ditemukan kesalahan." in [p.text for p in doc.paragraphs]

    def test_pdf(self):
        data = PDFExporter().export("Baris <satu> & dua\n\nsaya sayah", [
            DetectedError(ErrorKind.MISSPELLING, "sayah", "Perbaiki <saya>", 25, 30), MARGIN
        ])
        assert data.startswith(b"%PDF")

    def test_excel(self):
        data = ExcelExporter().export(TEXT, [TYPO, MARGIN], "laporan")
        wb = load_workbook(io.BytesIO(data))

        ws = wb["Kesalahan"]
        assert [c.value for c in ws[1]] == ['#', 'Jenis', 'Teks', 'Saran', 'Awal', 'Akhir']
        assert [c.value for c in ws[2]] == [1, 'Salah Ketik', 'sayah', 'Perbaiki menjadi "saya"', 5, 10]
        assert ws.max_row == 3
        assert wb["Ringkasan"]["B3"].value == 2

    def test_csv(self):
        rows = list(csv.DictReader(io.StringIO(CSVExporter().export(TEXT, [TYPO]))))
        assert rows == [{
            '#': '1', 'Type': 'misspelling', 'Text': 'sayah',
            'Suggestion': 'Perbaiki menjadi "saya"', 'Start': '5', 'End': '10',
        }]

    def test_json(self):
        data = json.loads(JSONExporter().export(TEXT, [TYPO], "laporan"))
        assert data['document'] == "laporan"
        assert data['error_count'] == 1
        assert data['errors'][0] == TYPO.to_dict()


class TestGetExporter:

    def test_aliases(self):
        assert isinstance(get_exporter('word'), DOCXExporter)
        assert isinstance(get_exporter('EXCEL'), ExcelExporter)
        assert canonical_format('word') == 'docx'

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_exporter('odt')

    def test_export_report_returns_bytes(self):
        assert isinstance(export_report('csv', TEXT, [TYPO]), bytes)
        assert isinstance(export_report('docx', TEXT, [TYPO]), bytes)
