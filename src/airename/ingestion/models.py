"""Data models produced while scanning and parsing files."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

IMAGE_MARKER_PREFIX = "data:image/"


class DocumentMetadata(BaseModel):
    """Properties embedded in a document by its authoring tool.

    Attributes:
        title: Document title.
        author: Primary author.
        creator: Application or person that created the document.
        subject: Subject line.
        keywords: Keywords in document order; duplicates are kept.
        creation_date: Creation timestamp recorded in the document.
        modification_date: Last modification timestamp recorded in the document.
        pages: Page count.
        word_count: Word count.
    """

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    author: Optional[str] = None
    creator: Optional[str] = None
    subject: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    creation_date: Optional[datetime] = None
    modification_date: Optional[datetime] = None
    pages: Optional[int] = None
    word_count: Optional[int] = None


class ParseResult(BaseModel):
    """Text and metadata extracted from one document."""

    model_config = ConfigDict(frozen=True)

    content: str
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)

    @property
    def is_image(self) -> bool:
        """Return True when the content is an embedded image rather than text."""
        return is_image_marker(self.content)


class FileInfo(BaseModel):
    """Filesystem facts about a file queued for renaming.

    Attributes:
        path: Absolute path to the file.
        name: Filename including extension.
        extension: Lowercase extension including the leading dot.
        size: Size in bytes.
        created_at: Creation (or metadata change) timestamp.
        modified_at: Last modification timestamp.
        accessed_at: Last access timestamp.
        parent_folder: Name of the directory holding the file.
        folder_path: Trailing segments of the directory path, outermost first.
        document_metadata: Metadata attached after the file has been parsed.
    """

    path: Path
    name: str
    extension: str
    size: int
    created_at: datetime
    modified_at: datetime
    accessed_at: datetime
    parent_folder: str = ""
    folder_path: List[str] = Field(default_factory=list)
    document_metadata: Optional[DocumentMetadata] = None

    @property
    def stem(self) -> str:
        """Return the filename without its extension."""
        if self.extension and self.name.lower().endswith(self.extension):
            return self.name[: -len(self.extension)]
        return Path(self.name).stem


def is_image_marker(content: str) -> bool:
    """Return True when ``content`` is a base64 data URL produced for scanned pages."""
    return content.startswith(IMAGE_MARKER_PREFIX)


__all__ = [
    "DocumentMetadata",
    "FileInfo",
    "IMAGE_MARKER_PREFIX",
    "ParseResult",
    "is_image_marker",
]
