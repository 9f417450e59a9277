"""Document parsers that turn files into text and metadata."""

from __future__ import annotations

import base64
import io
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol, Sequence, runtime_checkable

import docx
import openpyxl
from PIL import Image
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from airename.errors import ParserError

from .models import IMAGE_MARKER_PREFIX, DocumentMetadata, ParseResult

LOGGER = logging.getLogger(__name__)

_KEYWORD_SPLIT = re.compile(r"[;,]")
_SCANNED_MIN_CHARS = 50
_SCANNED_MIN_WORDS = 10
_SCANNED_MAX_NON_ALPHA = 0.9
_SCAN_IMAGE_MAX_SIDE = 1600


@runtime_checkable
class DocumentParser(Protocol):
    """Capability that extracts text from one family of document formats."""

    def supports(self, path: Path) -> bool:
        """Return True when this parser handles ``path``."""

    def parse(self, path: Path) -> ParseResult:
        """Return the text content and metadata of ``path``."""


class ExtensionParser:
    """Base class for parsers selected purely by file extension."""

    extensions: frozenset[str] = frozenset()
    label = "document"

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions

    def parse(self, path: Path) -> ParseResult:
        try:
            return self._parse(path)
        except ParserError:
            raise
        except Exception as exc:
            raise ParserError(f"Failed to parse {self.label}: {exc}") from exc

    def _parse(self, path: Path) -> ParseResult:
        raise NotImplementedError


class PDFParser(ExtensionParser):
    """Extract text from PDFs, falling back to the first page image for scans."""

    extensions = frozenset({".pdf"})
    label = "PDF file"

    def _parse(self, path: Path) -> ParseResult:
        reader = PdfReader(str(path))
        text = "\n".join((page.extract_text() or "") for page in reader.pages).strip()
        metadata = self._metadata(reader, text)

        if reader.pages and is_scanned_text(text):
            marker = self._first_page_image(reader)
            if marker is not None:
                LOGGER.info("%s looks like a scanned document; using page image.", path.name)
                return ParseResult(content=marker, metadata=metadata)

        return ParseResult(content=text, metadata=metadata)

    def _metadata(self, reader: PdfReader, text: str) -> DocumentMetadata:
        info = reader.metadata
        if info is None:
            return DocumentMetadata(pages=len(reader.pages), word_count=_word_count(text))

        return DocumentMetadata(
            title=_clean(info.title),
            author=_clean(info.author),
            creator=_clean(info.creator),
            subject=_clean(info.subject),
            keywords=_split_keywords(info.get("/Keywords")),
            creation_date=_safe_date(lambda: info.creation_date),
            modification_date=_safe_date(lambda: info.modification_date),
            pages=len(reader.pages),
            word_count=_word_count(text),
        )

    def _first_page_image(self, reader: PdfReader) -> Optional[str]:
        try:
            images = reader.pages[0].images
            if not images:
                return None
            image = images[0].image
        except (PyPdfError, NotImplementedError, OSError, ValueError) as exc:
            LOGGER.debug("Unable to extract page image: %s", exc)
            return None
        if image is None:
            return None
        return encode_image_marker(image)


class WordParser(ExtensionParser):
    """Extract paragraphs and table text from Word documents."""

    extensions = frozenset({".docx", ".doc"})
    label = "Word document"

    def _parse(self, path: Path) -> ParseResult:
        if path.suffix.lower() == ".doc":
            raise ParserError("Failed to parse Word document: legacy .doc files are not supported")
        document = docx.Document(str(path))
        chunks = [paragraph.text for paragraph in document.paragraphs if paragraph.text.strip()]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    chunks.append(" | ".join(cells))
        text = "\n".join(chunks).strip()

        props = document.core_properties
        metadata = DocumentMetadata(
            title=_clean(props.title),
            author=_clean(props.author),
            creator=_clean(props.last_modified_by),
            subject=_clean(props.subject),
            keywords=_split_keywords(props.keywords),
            creation_date=props.created,
            modification_date=props.modified,
            word_count=_word_count(text),
        )
        return ParseResult(content=text, metadata=metadata)


class SpreadsheetParser(ExtensionParser):
    """Render every worksheet as comma-separated rows."""

    extensions = frozenset({".xlsx", ".xls"})
    label = "Excel file"

    def _parse(self, path: Path) -> ParseResult:
        if path.suffix.lower() == ".xls":
            raise ParserError("Failed to parse Excel file: legacy .xls workbooks are not supported")
        workbook = openpyxl.load_workbook(str(path), read_only=True, data_only=True)
        try:
            sheets: list[str] = []
            for sheet in workbook.worksheets:
                rows: list[str] = []
                for row in sheet.iter_rows(values_only=True):
                    values = ["" if value is None else str(value) for value in row]
                    if any(values):
                        rows.append(",".join(values))
                if rows:
                    sheets.append(f"Sheet: {sheet.title}\n" + "\n".join(rows))
            props = workbook.properties
        finally:
            workbook.close()

        text = "\n\n".join(sheets).strip()
        metadata = DocumentMetadata(
            title=_clean(props.title),
            author=_clean(props.creator),
            creator=_clean(props.lastModifiedBy),
            subject=_clean(props.subject),
            keywords=_split_keywords(props.keywords),
            creation_date=props.created,
            modification_date=props.modified,
            word_count=_word_count(text),
        )
        return ParseResult(content=text, metadata=metadata)


class TextParser(ExtensionParser):
    """Read plain-text formats as UTF-8."""

    extensions = frozenset({".txt", ".md", ".rtf"})
    label = "text file"

    def _parse(self, path: Path) -> ParseResult:
        text = path.read_text(encoding="utf-8", errors="replace").strip()
        return ParseResult(content=text, metadata=DocumentMetadata(word_count=_word_count(text)))


class ParserRegistry:
    """Select the first parser that supports a path."""

    def __init__(self, parsers: Sequence[DocumentParser] | None = None) -> None:
        self._parsers: list[DocumentParser] = list(
            parsers
            if parsers is not None
            else (PDFParser(), WordParser(), SpreadsheetParser(), TextParser())
        )

    def get_parser(self, path: Path) -> Optional[DocumentParser]:
        """Return the first parser supporting ``path`` or None."""
        for parser in self._parsers:
            if parser.supports(path):
                return parser
        return None

    def supported_extensions(self) -> list[str]:
        """Return the extensions handled by extension-based parsers."""
        extensions: set[str] = set()
        for parser in self._parsers:
            extensions.update(getattr(parser, "extensions", ()))
        return sorted(extensions)


def is_scanned_text(text: str) -> bool:
    """Return True when extracted text is too sparse to describe the document."""
    stripped = text.strip()
    words = stripped.split()
    non_alpha = sum(1 for char in text if not char.isascii() or not char.isalpha())
    non_alpha_ratio = non_alpha / max(len(text), 1)
    return (
        len(stripped) < _SCANNED_MIN_CHARS
        or len(words) < _SCANNED_MIN_WORDS
        or non_alpha_ratio > _SCANNED_MAX_NON_ALPHA
    )


def encode_image_marker(image: Image.Image) -> str:
    """Return ``image`` as a downscaled JPEG data URL."""
    converted = image.convert("RGB")
    converted.thumbnail((_SCAN_IMAGE_MAX_SIDE, _SCAN_IMAGE_MAX_SIDE))
    buffer = io.BytesIO()
    converted.save(buffer, format="JPEG", quality=90)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"{IMAGE_MARKER_PREFIX}jpeg;base64,{encoded}"


def _clean(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _split_keywords(value: object) -> list[str]:
    text = _clean(value)
    if not text:
        return []
    return [part.strip() for part in _KEYWORD_SPLIT.split(text) if part.strip()]


def _safe_date(getter) -> Optional[datetime]:
    try:
        return getter()
    except (ValueError, TypeError):
        return None


def _word_count(text: str) -> Optional[int]:
    count = len(text.split())
    return count or None


__all__ = [
    "DocumentParser",
    "ExtensionParser",
    "PDFParser",
    "ParserRegistry",
    "SpreadsheetParser",
    "TextParser",
    "WordParser",
    "encode_image_marker",
    "is_scanned_text",
]
