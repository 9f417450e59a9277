"""File discovery utilities."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator

from airename.errors import ValidationError

from .models import FileInfo

LOGGER = logging.getLogger(__name__)

FOLDER_CONTEXT_DEPTH = 3


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def _created_timestamp(stat: os.stat_result) -> float:
    # st_birthtime is only reported on macOS/BSD; fall back to ctime elsewhere.
    return getattr(stat, "st_birthtime", stat.st_ctime)


class DirectoryScanner:
    """Discover renameable files directly inside a directory.

    Only regular files whose extension is in ``extensions`` are returned; the
    scan never descends into subdirectories.
    """

    def __init__(
        self,
        *,
        extensions: Iterable[str],
        include_hidden: bool = False,
        folder_depth: int = FOLDER_CONTEXT_DEPTH,
    ) -> None:
        self.extensions = {ext.lower() for ext in extensions}
        self.include_hidden = include_hidden
        self.folder_depth = folder_depth

    def scan(self, directory: Path) -> Iterator[FileInfo]:
        """Yield file descriptions for matching files, ordered by name.

        Args:
            directory: Directory to scan.

        Raises:
            ValidationError: If ``directory`` does not exist or is not a directory.
        """
        root = directory.expanduser().resolve()
        if not root.exists():
            raise ValidationError(f"{directory} does not exist")
        if not root.is_dir():
            raise ValidationError(f"{directory} is not a directory")

        for path in sorted(root.iterdir(), key=lambda item: item.name):
            if not path.is_file():
                continue
            if not self.include_hidden and _is_hidden(path):
                continue
            extension = path.suffix.lower()
            if extension not in self.extensions:
                continue
            try:
                yield self.describe(path)
            except OSError as exc:
                LOGGER.warning("Skipping %s: %s", path, exc)

    def describe(self, path: Path) -> FileInfo:
        """Build a ``FileInfo`` for a single file."""
        stat = path.stat()
        parent = path.parent
        segments = [part for part in parent.parts if part not in (parent.anchor, "")]
        return FileInfo(
            path=path,
            name=path.name,
            extension=path.suffix.lower(),
            size=stat.st_size,
            created_at=datetime.fromtimestamp(_created_timestamp(stat), tz=timezone.utc),
            modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            accessed_at=datetime.fromtimestamp(stat.st_atime, tz=timezone.utc),
            parent_folder=parent.name,
            folder_path=segments[-self.folder_depth :] if self.folder_depth > 0 else [],
        )


__all__ = ["DirectoryScanner", "FOLDER_CONTEXT_DEPTH"]
