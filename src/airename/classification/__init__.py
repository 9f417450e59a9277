"""Category classification package."""

from .engine import CategoryClassifier, categorize_file

__all__ = ["CategoryClassifier", "categorize_file"]
