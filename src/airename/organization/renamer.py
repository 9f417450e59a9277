"""Sequential rename pipeline applied to scanned files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from airename.classification import CategoryClassifier
from airename.config.models import AIRenameConfig
from airename.errors import (
    AIProviderError,
    AIRenameError,
    ConflictError,
    EmptyContentError,
    FilesystemError,
    NoParserError,
    SizeLimitError,
)
from airename.ingestion.models import FileInfo, is_image_marker
from airename.ingestion.parsers import ParserRegistry
from airename.naming.conventions import apply_naming_convention
from airename.naming.templates import apply_template, template_fields_for
from airename.naming.types import Category
from airename.providers.base import AIProvider

from .models import RenameBatch, RenameResult

LOGGER = logging.getLogger(__name__)

_BYTES_PER_MB = 1024 * 1024
FALLBACK_NAME = "untitled document"


class FileRenamer:
    """Run every file through parse, classify, name, template and rename steps.

    Files are handled one at a time in input order. A failure in one file is
    recorded as a failed :class:`RenameResult` and never stops the batch.
    """

    def __init__(
        self,
        parsers: ParserRegistry,
        provider: AIProvider,
        config: AIRenameConfig,
        classifier: Optional[CategoryClassifier] = None,
    ) -> None:
        self.parsers = parsers
        self.provider = provider
        self.config = config
        self.classifier = classifier or CategoryClassifier()

    @property
    def dry_run(self) -> bool:
        return self.config.processing.dry_run

    def rename_files(self, files: Iterable[FileInfo]) -> RenameBatch:
        """Process ``files`` sequentially.

        Args:
            files: Files to rename, in the order they should be processed.

        Returns:
            RenameBatch: One result per file in input order.
        """
        batch = RenameBatch(dry_run=self.dry_run)
        for file_info in files:
            LOGGER.info("Processing %s", file_info.name)
            batch.results.append(self.rename_file(file_info))
        summary = batch.summary()
        LOGGER.info(
            "Processed %d file(s): %d successful, %d failed.",
            summary["processed"],
            summary["successful"],
            summary["failed"],
        )
        return batch

    def rename_file(self, file_info: FileInfo) -> RenameResult:
        """Process a single file and capture any failure in the result."""
        try:
            return self._rename(file_info)
        except AIRenameError as exc:
            LOGGER.warning("Failed to rename %s: %s", file_info.name, exc)
            return self._failure(file_info, str(exc))
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Unexpected error while renaming %s", file_info.name)
            return self._failure(file_info, str(exc) or exc.__class__.__name__)

    # ------------------------------------------------------------------ #
    # Pipeline                                                           #
    # ------------------------------------------------------------------ #

    def _rename(self, file_info: FileInfo) -> RenameResult:
        self._check_size(file_info)

        parser = self.parsers.get_parser(file_info.path)
        if parser is None:
            raise NoParserError(f"No parser available for file type: {file_info.extension}")
        parsed = parser.parse(file_info.path)
        if not parsed.content or not parsed.content.strip():
            raise EmptyContentError("No content could be extracted from the file")
        file_info = file_info.model_copy(update={"document_metadata": parsed.metadata})

        category = self._resolve_category(file_info, parsed.content)
        naming = self.config.naming

        core_name = self.provider.generate_file_name(
            parsed.content,
            file_info.name,
            naming.convention,
            category,
            file_info,
        )
        if not core_name or not core_name.strip():
            raise AIProviderError("AI service failed to generate a filename")

        stem = apply_template(
            core_name,
            category,
            naming.template_options(),
            naming.convention,
            template_fields_for(file_info, category),
        )
        if not stem:
            LOGGER.warning(
                "Suggestion %r for %s left no usable characters; using %r.",
                core_name,
                file_info.name,
                FALLBACK_NAME,
            )
            stem = apply_naming_convention(FALLBACK_NAME, naming.convention)

        new_name = f"{stem}{file_info.extension}"
        target = file_info.path.with_name(new_name)

        if target != file_info.path:
            self._check_conflict(file_info.path, target)

        if self.dry_run or target == file_info.path:
            LOGGER.debug("Leaving %s in place (dry_run=%s).", file_info.name, self.dry_run)
            return RenameResult(
                original_path=file_info.path,
                new_path=file_info.path,
                suggested_name=new_name,
                success=True,
                category=category,
            )

        try:
            file_info.path.rename(target)
        except OSError as exc:
            raise FilesystemError(f"Failed to rename {file_info.name}: {exc}") from exc
        LOGGER.info("Renamed %s -> %s", file_info.name, new_name)
        return RenameResult(
            original_path=file_info.path,
            new_path=target,
            suggested_name=new_name,
            success=True,
            category=category,
        )

    def _check_size(self, file_info: FileInfo) -> None:
        limit = self.config.processing.max_file_size_bytes
        if file_info.size > limit:
            raise SizeLimitError(
                f"File size ({_round_mb(file_info.size)}MB) exceeds maximum allowed size "
                f"({_round_mb(limit)}MB)"
            )

    def _resolve_category(self, file_info: FileInfo, content: str) -> Category:
        configured = self.config.naming.category
        if configured != "auto":
            return configured
        text = None if is_image_marker(content) else content
        category = self.classifier.categorize(file_info.path, text, file_info)
        LOGGER.debug("Resolved category for %s: %s", file_info.name, category)
        return category

    def _check_conflict(self, source: Path, target: Path) -> None:
        # Check-then-rename is not atomic; a file created in between is overwritten
        # or rejected depending on the platform.
        if not target.exists():
            return
        try:
            same_file = target.samefile(source)
        except OSError:
            same_file = False
        if same_file:
            return  # case-only rename on a case-insensitive filesystem
        raise ConflictError(f"Target filename already exists: {target.name}")

    def _failure(self, file_info: FileInfo, message: str) -> RenameResult:
        return RenameResult(
            original_path=file_info.path,
            new_path=file_info.path,
            suggested_name="",
            success=False,
            error=message,
        )


def _round_mb(size: int) -> int:
    return int(size / _BYTES_PER_MB + 0.5)


__all__ = ["FALLBACK_NAME", "FileRenamer"]
