from pathlib import Path
from typing import Callable, Dict, Optional
import io

import docx2txt

from errors import ExtractionError
from models import DocumentKind
from pdf_parser import extract_text_from_pdf

Extractor = Callable[[bytes], str]


def _read_txt(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _read_docx(data: bytes) -> str:
    return docx2txt.process(io.BytesIO(data)) or ""


# One entry per kind; anything unknown is read as plain text
EXTRACTORS: Dict[DocumentKind, Extractor] = {
    DocumentKind.PDF: extract_text_from_pdf,
    DocumentKind.DOCX: _read_docx,
    DocumentKind.TEXT: _read_txt,
}


def detect_kind(filename: str) -> DocumentKind:
    ext = Path(filename).suffix.lower()
    if ext == ".pdf":
        return DocumentKind.PDF
    if ext == ".docx":
        return DocumentKind.DOCX
    return DocumentKind.TEXT


def extract_text(filename: str, data: bytes, kind: Optional[DocumentKind] = None) -> str:
    """Return plain text for a file's bytes or raise ExtractionError."""
    kind = kind or detect_kind(filename)
    reader = EXTRACTORS.get(kind, _read_txt)
    try:
        return reader(data)
    except Exception as e:
        raise ExtractionError(filename, str(e)) from e
