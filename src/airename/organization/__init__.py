"""File rename orchestration."""

from .models import RenameBatch, RenameResult
from .renamer import FileRenamer

__all__ = ["FileRenamer", "RenameBatch", "RenameResult"]
