"""Heuristic category classification for files queued for renaming.

The classifier resolves the ``auto`` category into one of the concrete
template categories. Folder names win over everything else, a video whose
name or content mentions seasons or episodes is treated as a series, and the
extension class decides the remaining cases.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from airename.ingestion.models import FileInfo
from airename.naming.types import Category

LOGGER = logging.getLogger(__name__)

_TOKEN = re.compile(r"[a-z0-9]+")
_EPISODE_CODE = re.compile(r"s\d{1,2}e\d{1,3}")

DOCUMENT_EXTENSIONS = frozenset({".pdf", ".docx", ".doc", ".txt", ".rtf"})
VIDEO_EXTENSIONS = frozenset({".mp4", ".mkv", ".avi", ".mov", ".wmv", ".flv", ".webm"})
AUDIO_EXTENSIONS = frozenset({".mp3", ".flac", ".wav", ".aac", ".ogg", ".m4a"})
IMAGE_EXTENSIONS = frozenset(
    {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".heic", ".webp"}
)
EBOOK_EXTENSIONS = frozenset({".epub", ".mobi", ".azw", ".azw3"})

SERIES_KEYWORDS = frozenset(
    {
        "s01",
        "s02",
        "s03",
        "s04",
        "s05",
        "season",
        "episode",
        "e01",
        "e02",
        "e03",
        "series",
        "show",
        "tv",
    }
)
# Series keywords that still count when glued to other text ("season2", "s01x264").
SERIES_PREFIXES = ("season", "episode", "s01", "s02", "s03", "s04", "s05", "e01", "e02", "e03")
BOOK_KEYWORDS = frozenset(
    {"chapter", "author", "book", "novel", "ebook", "isbn", "publisher", "edition"}
)
DOCUMENT_KEYWORDS = frozenset(
    {
        "contract",
        "agreement",
        "license",
        "certificate",
        "diploma",
        "invoice",
        "receipt",
        "report",
        "application",
        "form",
    }
)

# Ordered: series is checked before movie.
FOLDER_CATEGORIES: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "series": frozenset({"series", "shows", "tv", "television"}),
        "movie": frozenset({"movies", "films", "cinema", "video"}),
        "music": frozenset({"music", "audio", "songs", "albums"}),
        "photo": frozenset({"photos", "images", "pictures", "gallery"}),
        "book": frozenset({"books", "ebooks", "library", "reading"}),
        "document": frozenset({"documents", "docs", "papers", "files"}),
    }
)


class CategoryClassifier:
    """Resolve a concrete template category for a file.

    The classifier never returns ``auto``; anything it cannot place is
    ``general``.
    """

    def categorize(
        self,
        path: Path,
        content: Optional[str] = None,
        file_info: Optional[FileInfo] = None,
    ) -> Category:
        """Return the category for ``path``.

        Args:
            path: File being classified.
            content: Extracted text, if available.
            file_info: Filesystem context including folder names and metadata.

        Returns:
            Category: One of the seven concrete categories.
        """
        folders = self._folder_hints(path, file_info)
        folder_category = self._category_from_folders(folders)
        if folder_category is not None:
            LOGGER.debug("%s classified as %s from folder context.", path.name, folder_category)
            return folder_category

        tokens = self._hint_tokens(path, content, file_info, folders)
        extension = path.suffix.lower()

        if extension in VIDEO_EXTENSIONS and self._has_series_hint(tokens):
            return "series"

        if extension in DOCUMENT_EXTENSIONS:
            if tokens & DOCUMENT_KEYWORDS:
                return "document"
            if extension in EBOOK_EXTENSIONS or tokens & BOOK_KEYWORDS:
                return "book"
            return "document"
        if extension in VIDEO_EXTENSIONS:
            return "movie"
        if extension in AUDIO_EXTENSIONS:
            return "music"
        if extension in IMAGE_EXTENSIONS:
            return "photo"
        if extension in EBOOK_EXTENSIONS:
            return "book"
        return "general"

    # ------------------------------------------------------------------ #
    # Hint helpers                                                       #
    # ------------------------------------------------------------------ #

    def _folder_hints(self, path: Path, file_info: Optional[FileInfo]) -> list[str]:
        if file_info is not None:
            segments = [*file_info.folder_path, file_info.parent_folder]
        else:
            segments = list(path.parent.parts[-3:])
        return [segment.lower() for segment in segments if segment]

    def _category_from_folders(self, folders: Iterable[str]) -> Optional[Category]:
        names = set(folders)
        for category, folder_names in FOLDER_CATEGORIES.items():
            if names & folder_names:
                return category  # type: ignore[return-value]
        return None

    def _hint_tokens(
        self,
        path: Path,
        content: Optional[str],
        file_info: Optional[FileInfo],
        folders: Iterable[str],
    ) -> set[str]:
        texts = [*folders, path.stem, content or ""]
        metadata = file_info.document_metadata if file_info is not None else None
        if metadata is not None:
            texts.extend(
                value
                for value in (metadata.title, metadata.author, metadata.creator, metadata.subject)
                if value
            )
            texts.extend(metadata.keywords)

        tokens: set[str] = set()
        for text in texts:
            tokens.update(_TOKEN.findall(text.lower()))
        return tokens

    def _has_series_hint(self, tokens: set[str]) -> bool:
        if tokens & SERIES_KEYWORDS:
            return True
        return any(
            token.startswith(SERIES_PREFIXES) or _EPISODE_CODE.search(token) for token in tokens
        )


def categorize_file(
    path: Path,
    content: Optional[str] = None,
    file_info: Optional[FileInfo] = None,
) -> Category:
    """Classify ``path`` with a default :class:`CategoryClassifier`."""
    return CategoryClassifier().categorize(path, content, file_info)


__all__ = [
    "AUDIO_EXTENSIONS",
    "BOOK_KEYWORDS",
    "CategoryClassifier",
    "DOCUMENT_EXTENSIONS",
    "DOCUMENT_KEYWORDS",
    "EBOOK_EXTENSIONS",
    "FOLDER_CATEGORIES",
    "IMAGE_EXTENSIONS",
    "SERIES_KEYWORDS",
    "SERIES_PREFIXES",
    "VIDEO_EXTENSIONS",
    "categorize_file",
]
