"""
Document ingestion: extracts plain text and page margins from uploaded files.

Supported formats:
- .txt  - UTF-8 text (a BOM is tolerated), no margin information
- .docx - paragraph text joined by newlines; margins from the first section
"""
import io
import hashlib
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union, Dict, Any

from docx import Document
from docx.opc.exceptions import PackageNotFoundError

from config_logging import get_logger, FileError
from margin_checker import MarginSpec

_logger = get_logger('file_parsers')

SUPPORTED_EXTENSIONS = ('.txt', '.docx')


@dataclass
class DocumentContent:
    """Text and optional margins handed to the checker."""
    filename: str
    text: str
    margins: Optional[MarginSpec] = None
    checksum: str = ""

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'filename': self.filename,
            'text': self.text,
            'margins': self.margins.to_dict() if self.margins else None,
            'word_count': self.word_count,
            'checksum': self.checksum,
        }


def calculate_checksum(data: bytes) -> str:
    """Calculate MD5 checksum of raw file content"""
    return hashlib.md5(data).hexdigest()


def get_file_type(filename: str) -> str:
    """Get lowercase extension (with dot) from filename"""
    return Path(filename).suffix.lower()


def parse_txt(data: bytes) -> str:
    """Decode a plain-text upload."""
    try:
        return data.decode('utf-8-sig')
    except UnicodeDecodeError:
        _logger.warning("Text file is not valid UTF-8; undecodable bytes replaced")
        return data.decode('utf-8', errors='replace')


def _length_cm(length) -> Optional[float]:
    if length is None:
        return None
    return round(length.cm, 2)


def extract_margins(document) -> Optional[MarginSpec]:
    """Read page margins (cm) from the first section of a python-docx Document."""
    if not document.sections:
        return None
    section = document.sections[0]
    values = {
        'top': _length_cm(section.top_margin),
        'bottom': _length_cm(section.bottom_margin),
        'left': _length_cm(section.left_margin),
        'right': _length_cm(section.right_margin),
    }
    if any(v is None for v in values.values()):
        return None
    return MarginSpec(**values)


def parse_docx(data: bytes):
    """Return (text, margins) for a .docx file."""
    try:
        document = Document(io.BytesIO(data))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
        raise FileError(f"Not a valid .docx document: {e}")
    text = '\n'.join(p.text for p in document.paragraphs)
    return text, extract_margins(document)


def parse_document(data: Union[bytes, str, Path], filename: Optional[str] = None) -> DocumentContent:
    """
    Parse raw bytes (or a file path) into a DocumentContent.

    Args:
        data: File content, or a path to read
        filename: Original file name; used to pick the parser

    Raises:
        FileError: unsupported extension or unreadable file
    """
    if isinstance(data, (str, Path)):
        path = Path(data)
        filename = filename or path.name
        try:
            data = path.read_bytes()
        except OSError as e:
            raise FileError(f"Cannot read file: {e}", filename=filename)

    filename = filename or 'document.txt'
    file_type = get_file_type(filename)

    if file_type == '.txt':
        text, margins = parse_txt(data), None
    elif file_type == '.docx':
        text, margins = parse_docx(data)
    else:
        raise FileError(
            f"Unsupported file type. Supported: {', '.join(SUPPORTED_EXTENSIONS)}",
            filename=filename
        )

    _logger.info("Document parsed", filename=filename, file_type=file_type,
                 characters=len(text), has_margins=margins is not None)
    return DocumentContent(filename=filename, text=text, margins=margins,
                           checksum=calculate_checksum(data))
