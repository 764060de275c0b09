#!/usr/bin/env python3
"""
Resik Bahasa Export Module
==========================
Renders the sorted error list against the original text:
- HTML inline highlights
- Word (.docx) report with highlighted runs
- PDF report
- Excel error list
- CSV and JSON exports

Exporters use only the start/end/type/text/suggestion of each error and
never recompute offsets.
"""

import csv
import html
import io
import json
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Dict, Union
from xml.sax.saxutils import escape as xml_escape

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_COLOR_INDEX

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from base_checker import DetectedError, ErrorKind
from config_logging import APP_NAME

__version__ = "1.2.0"

KIND_LABELS = {
    ErrorKind.GRAMMAR: 'Tata Bahasa',
    ErrorKind.SPELLING: 'Ejaan',
    ErrorKind.MISSPELLING: 'Salah Ketik',
    ErrorKind.INFORMAL: 'Tidak Baku',
    ErrorKind.PUNCTUATION: 'Tanda Baca',
    ErrorKind.CAPITALIZATION: 'Kapitalisasi',
    ErrorKind.FORMAT: 'Format Dokumen',
}

KIND_COLORS = {
    ErrorKind.GRAMMAR: 'F8D7DA',
    ErrorKind.SPELLING: 'FFE08A',
    ErrorKind.MISSPELLING: 'F5A3A3',
    ErrorKind.INFORMAL: 'A8D1FF',
    ErrorKind.PUNCTUATION: 'F7B2D9',
    ErrorKind.CAPITALIZATION: 'B5E8B0',
    ErrorKind.FORMAT: 'FFD3A5',
}

DOCX_HIGHLIGHTS = {
    ErrorKind.GRAMMAR: WD_COLOR_INDEX.GRAY_25,
    ErrorKind.SPELLING: WD_COLOR_INDEX.YELLOW,
    ErrorKind.MISSPELLING: WD_COLOR_INDEX.RED,
    ErrorKind.INFORMAL: WD_COLOR_INDEX.TURQUOISE,
    ErrorKind.PUNCTUATION: WD_COLOR_INDEX.PINK,
    ErrorKind.CAPITALIZATION: WD_COLOR_INDEX.BRIGHT_GREEN,
}

EXPORT_MIMETYPES = {
    'html': 'text/html',
    'docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'pdf': 'application/pdf',
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'csv': 'text/csv',
    'json': 'application/json',
}


@dataclass(frozen=True)
class Segment:
    """A run of the original text, highlighted when `error` is set."""
    text: str
    error: Optional[DetectedError] = None


def build_segments(text: str, errors: Sequence[DetectedError]) -> List[Segment]:
    """
    Split text into plain and highlighted segments.

    Errors are taken in start order; a span overlapping an earlier highlight
    is clipped to the part not yet covered. Document-level errors are skipped.
    """
    segments: List[Segment] = []
    position = 0
    for error in sorted((e for e in errors if not e.is_document_level), key=lambda e: e.start):
        start = max(error.start, position)
        end = min(error.end, len(text))
        if end <= start:
            continue
        if start > position:
            segments.append(Segment(text[position:start]))
        segments.append(Segment(text[start:end], error))
        position = end
    if position < len(text):
        segments.append(Segment(text[position:]))
    return segments


def split_lines(segments: Sequence[Segment]) -> List[List[Segment]]:
    """Regroup segments into lines, splitting any segment that spans a newline."""
    lines: List[List[Segment]] = [[]]
    for segment in segments:
        parts = segment.text.split('\n')
        for i, part in enumerate(parts):
            if i > 0:
                lines.append([])
            if part:
                lines[-1].append(Segment(part, segment.error))
    return lines


def export_filename(source: str, extension: str) -> str:
    """'laporan.docx' -> 'laporan_hasil_analisis.pdf'"""
    stem = Path(source or 'dokumen').stem or 'dokumen'
    stem = re.sub(r'[^\w\-]+', '_', stem).strip('_') or 'dokumen'
    return f"{stem}_hasil_analisis.{extension}"


class HTMLExporter:
    """Inline highlighted HTML fragment for the web preview."""

    def export(self, text: str, errors: Sequence[DetectedError], filename: str = 'dokumen') -> str:
        parts = []
        for segment in build_segments(text, errors):
            content = html.escape(segment.text).replace('\n', '<br>')
            if segment.error is None:
                parts.append(content)
                continue
            error = segment.error
            parts.append(
                f'<mark class="error error-{error.kind.value}" '
                f'data-start="{error.start}" data-end="{error.end}" '
                f'title="{html.escape(error.suggestion)}">{content}</mark>'
            )
        return ''.join(parts)


class DOCXExporter:
    """Word report: the text with highlighted runs followed by error details."""

    def export(self, text: str, errors: Sequence[DetectedError], filename: str = 'dokumen') -> bytes:
        doc = Document()

        title = doc.add_heading(f'Hasil Analisis - {filename}', 1)
        title.alignment = WD_ALIGN_PARAGRAPH.CENTER
        doc.add_paragraph(f"Dibuat: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

        for line in split_lines(build_segments(text, errors)):
            paragraph = doc.add_paragraph()
            if not line:
                paragraph.add_run(' ')
            for segment in line:
                run = paragraph.add_run(segment.text)
                if segment.error is not None:
                    highlight = DOCX_HIGHLIGHTS.get(segment.error.kind)
                    if highlight is not None:
                        run.font.highlight_color = highlight
                    run.bold = True

        if errors:
            doc.add_heading('DETAIL KESALAHAN', 2)
            for i, error in enumerate(errors, 1):
                paragraph = doc.add_paragraph()
                paragraph.add_run(f"{i}. [{KIND_LABELS[error.kind]}] ").bold = True
                paragraph.add_run(f'"{error.matched_text}"').italic = True
                paragraph.add_run(f" - {error.suggestion}")
        else:
            doc.add_paragraph('Tidak ditemukan kesalahan.')

        output = io.BytesIO()
        doc.save(output)
        return output.getvalue()


class PDFExporter:
    """PDF report with inline highlights and an error table."""

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_styles()

    def _setup_styles(self):
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=20,
            spaceAfter=18
        ))
        self.styles.add(ParagraphStyle(
            name='SectionHeader',
            parent=self.styles['Heading2'],
            fontSize=14,
            spaceAfter=12,
            spaceBefore=20,
            textColor=colors.HexColor('#1E3A5F')
        ))
        self.styles.add(ParagraphStyle(
            name='Cell',
            parent=self.styles['Normal'],
            fontSize=9,
            leading=11
        ))

    def _annotated_markup(self, line: Sequence[Segment]) -> str:
        parts = []
        for segment in line:
            content = xml_escape(segment.text)
            if segment.error is None:
                parts.append(content)
            else:
                parts.append(f'<font backcolor="#{KIND_COLORS[segment.error.kind]}">{content}</font>')
        return ''.join(parts) or '&nbsp;'

    def export(self, text: str, errors: Sequence[DetectedError], filename: str = 'dokumen') -> bytes:
        output = io.BytesIO()
        doc = SimpleDocTemplate(
            output,
            pagesize=A4,
            rightMargin=0.75 * inch,
            leftMargin=0.75 * inch,
            topMargin=0.75 * inch,
            bottomMargin=0.75 * inch,
            title=f'Hasil Analisis - {filename}',
            author=APP_NAME,
        )

        story = [
            Paragraph(xml_escape(f'Hasil Analisis - {filename}'), self.styles['ReportTitle']),
            Paragraph(f"Dibuat: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}", self.styles['Normal']),
            Spacer(1, 12),
        ]

        for line in split_lines(build_segments(text, errors)):
            story.append(Paragraph(self._annotated_markup(line), self.styles['Normal']))

        story.append(Paragraph('Detail Kesalahan', self.styles['SectionHeader']))
        if errors:
            rows = [['#', 'Jenis', 'Teks', 'Saran']]
            for i, error in enumerate(errors, 1):
                rows.append([
                    str(i),
                    KIND_LABELS[error.kind],
                    Paragraph(xml_escape(error.matched_text), self.styles['Cell']),
                    Paragraph(xml_escape(error.suggestion), self.styles['Cell']),
                ])
            table = Table(rows, colWidths=[0.4 * inch, 1.1 * inch, 1.5 * inch, 3.8 * inch], repeatRows=1)
            table.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1E3A5F')),
                ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
                ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
                ('VALIGN', (0, 0), (-1, -1), 'TOP'),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('FONTSIZE', (0, 0), (-1, -1), 9),
                ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#DEE2E6')),
                ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#F8F9FA')]),
            ]))
            story.append(table)
        else:
            story.append(Paragraph('Tidak ditemukan kesalahan.', self.styles['Normal']))

        doc.build(story)
        return output.getvalue()


class ExcelExporter:
    """Error list as a formatted worksheet plus a per-type summary."""

    HEADER_FILL = PatternFill(start_color='D5E8F0', end_color='D5E8F0', fill_type='solid')
    HEADER_FONT = Font(bold=True, color='1E3A5F')

    def export(self, text: str, errors: Sequence[DetectedError], filename: str = 'dokumen') -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = 'Kesalahan'

        headers = ['#', 'Jenis', 'Teks', 'Saran', 'Awal', 'Akhir']
        ws.append(headers)
        for col in range(1, len(headers) + 1):
            cell = ws.cell(row=1, column=col)
            cell.fill = self.HEADER_FILL
            cell.font = self.HEADER_FONT

        for i, error in enumerate(errors, 1):
            ws.append([i, KIND_LABELS[error.kind], error.matched_text, error.suggestion,
                       error.start, error.end])
            ws.cell(row=i + 1, column=2).fill = PatternFill(
                start_color=KIND_COLORS[error.kind], end_color=KIND_COLORS[error.kind], fill_type='solid'
            )
            ws.cell(row=i + 1, column=4).alignment = Alignment(wrap_text=True, vertical='top')

        for col, width in enumerate([6, 16, 24, 60, 8, 8], 1):
            ws.column_dimensions[get_column_letter(col)].width = width
        ws.freeze_panes = 'A2'

        summary = wb.create_sheet('Ringkasan')
        summary.append(['Dokumen', filename])
        summary.append(['Jumlah karakter', len(text)])
        summary.append(['Total kesalahan', len(errors)])
        summary.append([])
        summary.append(['Jenis', 'Jumlah'])
        for kind in ErrorKind:
            summary.append([KIND_LABELS[kind], sum(1 for e in errors if e.kind is kind)])
        summary.column_dimensions['A'].width = 20

        output = io.BytesIO()
        wb.save(output)
        return output.getvalue()


class CSVExporter:
    """Export errors to CSV."""

    def export(self, text: str, errors: Sequence[DetectedError], filename: str = 'dokumen') -> str:
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=['#', 'Type', 'Text', 'Suggestion', 'Start', 'End'])
        writer.writeheader()
        for i, error in enumerate(errors, 1):
            writer.writerow({
                '#': i,
                'Type': error.kind.value,
                'Text': error.matched_text,
                'Suggestion': error.suggestion,
                'Start': error.start,
                'End': error.end,
            })
        return output.getvalue()


class JSONExporter:
    """Export errors (and the checked text) to JSON."""

    def export(self, text: str, errors: Sequence[DetectedError], filename: str = 'dokumen',
               pretty: bool = True) -> str:
        payload = {
            'document': filename,
            'generated_at': datetime.now().isoformat(timespec='seconds'),
            'text': text,
            'error_count': len(errors),
            'errors': [e.to_dict() for e in errors],
        }
        return json.dumps(payload, indent=2 if pretty else None, ensure_ascii=False)


_EXPORTERS = {
    'html': HTMLExporter,
    'docx': DOCXExporter,
    'word': DOCXExporter,
    'pdf': PDFExporter,
    'xlsx': ExcelExporter,
    'excel': ExcelExporter,
    'csv': CSVExporter,
    'json': JSONExporter,
}


def get_exporter(format_type: str):
    """Get appropriate exporter for format type."""
    exporter_class = _EXPORTERS.get((format_type or '').lower())
    if not exporter_class:
        raise ValueError(f"Unsupported export format: {format_type}")
    return exporter_class()


def export_report(format_type: str, text: str, errors: Sequence[DetectedError],
                  filename: str = 'dokumen') -> bytes:
    """Run an exporter and return the content as bytes."""
    content: Union[str, bytes] = get_exporter(format_type).export(text, errors, filename)
    return content.encode('utf-8') if isinstance(content, str) else content


def canonical_format(format_type: str) -> str:
    """Map aliases ('word', 'excel') to their file extension."""
    aliases: Dict[str, str] = {'word': 'docx', 'excel': 'xlsx'}
    fmt = (format_type or '').lower()
    return aliases.get(fmt, fmt)
