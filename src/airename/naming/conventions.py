"""Naming convention transformations applied to generated filenames."""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Mapping

from .types import NamingConvention

LOGGER = logging.getLogger(__name__)

_DISALLOWED = re.compile(r"[^A-Za-z0-9_\s-]")
_WHITESPACE = re.compile(r"\s+")
_SEPARATORS = re.compile(r"[\s_-]+")
# Word boundaries already encoded in camelCase/PascalCase input.
_CASE_HUMP = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

NAMING_INSTRUCTIONS: Mapping[str, str] = MappingProxyType(
    {
        "kebab-case": 'Use lowercase with hyphens between words (e.g., "meeting-notes-2024")',
        "snake_case": 'Use lowercase with underscores between words (e.g., "meeting_notes_2024")',
        "camelCase": 'Use camelCase format starting with lowercase (e.g., "meetingNotes2024")',
        "PascalCase": 'Use PascalCase format starting with uppercase (e.g., "MeetingNotes2024")',
        "lowercase": 'Use single lowercase word with no separators (e.g., "meetingnotes2024")',
        "UPPERCASE": 'Use single uppercase word with no separators (e.g., "MEETINGNOTES2024")',
    }
)


def normalize_text(text: str) -> str:
    """Drop characters other than ASCII letters, digits, ``_``, ``-`` and whitespace.

    Whitespace runs collapse to one space and the result is trimmed.
    """
    stripped = _DISALLOWED.sub("", text)
    return _WHITESPACE.sub(" ", stripped).strip()


def apply_naming_convention(text: str, convention: NamingConvention | str) -> str:
    """Reformat ``text`` according to ``convention``.

    Args:
        text: Arbitrary text, typically a template-expanded filename stem.
        convention: One of the supported naming conventions. Unknown values
            are treated as ``kebab-case``.

    Returns:
        str: The transformed name; empty when ``text`` holds no usable characters.
    """
    normalized = normalize_text(text)
    if not normalized:
        return ""

    if convention == "snake_case":
        return _WHITESPACE.sub("_", normalized.lower()).replace("-", "_")
    if convention == "camelCase":
        words = _split_words(normalized)
        return "".join(
            word.lower() if index == 0 else _capitalize(word) for index, word in enumerate(words)
        )
    if convention == "PascalCase":
        return "".join(_capitalize(word) for word in _split_words(normalized))
    if convention == "lowercase":
        return _SEPARATORS.sub("", normalized.lower())
    if convention == "UPPERCASE":
        return _SEPARATORS.sub("", normalized.upper())
    if convention != "kebab-case":
        LOGGER.warning("Unknown naming convention %r; using kebab-case.", convention)
    return _kebab(normalized)


def naming_instructions(convention: NamingConvention | str) -> str:
    """Return the prompt instruction describing ``convention``."""
    return NAMING_INSTRUCTIONS.get(convention, NAMING_INSTRUCTIONS["kebab-case"])


def _kebab(normalized: str) -> str:
    return _WHITESPACE.sub("-", normalized.lower()).replace("_", "-")


def _split_words(normalized: str) -> list[str]:
    words: list[str] = []
    for chunk in _SEPARATORS.split(normalized):
        words.extend(part for part in _CASE_HUMP.split(chunk) if part)
    return words


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


__all__ = [
    "NAMING_INSTRUCTIONS",
    "apply_naming_convention",
    "naming_instructions",
    "normalize_text",
]
