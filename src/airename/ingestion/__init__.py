"""Directory scanning and document parsing."""

from .discovery import DirectoryScanner
from .models import DocumentMetadata, FileInfo, ParseResult, is_image_marker
from .parsers import DocumentParser, ParserRegistry

__all__ = [
    "DirectoryScanner",
    "DocumentMetadata",
    "DocumentParser",
    "FileInfo",
    "ParseResult",
    "ParserRegistry",
    "is_image_marker",
]
