"""Rename outcome data models."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from airename.naming.types import Category


class RenameResult(BaseModel):
    """Outcome of processing one file.

    Attributes:
        original_path: Path of the file before processing.
        new_path: Path after processing; equals ``original_path`` unless the
            file was actually renamed.
        suggested_name: Final filename computed for the file, including the
            extension. Empty when processing failed before a name existed.
        success: Whether the file reached a successful terminal state.
        error: Human-readable failure reason; required when ``success`` is False.
        category: Category used for templating, when one was resolved.
    """

    model_config = ConfigDict(frozen=True)

    original_path: Path
    new_path: Path
    suggested_name: str = ""
    success: bool
    error: Optional[str] = None
    category: Optional[Category] = None

    @model_validator(mode="after")
    def _require_error_on_failure(self) -> "RenameResult":
        if not self.success and not (self.error and self.error.strip()):
            raise ValueError("failed rename results must carry an error message")
        return self

    @property
    def renamed(self) -> bool:
        """Return True when the file was moved on disk."""
        return self.new_path != self.original_path


class RenameBatch(BaseModel):
    """Ordered results for one run.

    Attributes:
        results: One result per input file in input order.
        dry_run: Whether the run only previewed renames.
    """

    results: List[RenameResult] = Field(default_factory=list)
    dry_run: bool = False

    @property
    def successful(self) -> list[RenameResult]:
        """Return the successful results."""
        return [result for result in self.results if result.success]

    @property
    def failed(self) -> list[RenameResult]:
        """Return the failed results."""
        return [result for result in self.results if not result.success]

    def summary(self) -> dict[str, int]:
        """Return counts of processed, successful, failed and renamed files."""
        return {
            "processed": len(self.results),
            "successful": len(self.successful),
            "failed": len(self.failed),
            "renamed": sum(1 for result in self.results if result.renamed),
        }


__all__ = ["RenameBatch", "RenameResult"]
