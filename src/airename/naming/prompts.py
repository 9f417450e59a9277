"""Prompt construction shared by every AI provider."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from airename.ingestion.models import DocumentMetadata, FileInfo

from .conventions import naming_instructions
from .templates import template_instructions
from .types import CategoryChoice, NamingConvention

CONTENT_EXCERPT_CHARS = 2000

AI_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates descriptive filenames based on document "
    "content. Always respond with just the filename, no explanation or additional text."
)


def build_file_name_prompt(
    content: str,
    original_name: str,
    convention: NamingConvention | str = "kebab-case",
    category: CategoryChoice | str = "general",
    file_info: Optional[FileInfo] = None,
) -> str:
    """Return the user prompt asking a model for a descriptive filename.

    Args:
        content: Extracted document text; only the first 2000 characters are used.
        original_name: Current filename including extension.
        convention: Naming convention the model should follow.
        category: Category whose template guidance is included.
        file_info: Optional filesystem and document metadata.

    Returns:
        str: Prompt text.
    """
    lines = [
        "Based on the following document information, generate a descriptive filename that "
        "captures the main topic/purpose of the document. The filename should be:",
        "- Descriptive and meaningful",
        "- Professional and clean",
        "- Between 3-10 words",
        f"- {naming_instructions(convention)}",
        f"- {template_instructions(category)}",
        "- Do not include file extension",
        "- If the document is specifically for/about a person (based on content), include "
        "their name at the beginning",
        "- Include dates only if they are essential to the document's identity "
        "(e.g., contracts, certificates)",
        "- Ignore irrelevant folder names that don't describe the document content",
        "- Only use letters, numbers, and appropriate separators for the naming convention",
        "- Focus on the document's actual content and purpose, not just metadata",
        "",
    ]
    if file_info is not None:
        lines.extend(_file_information(original_name, file_info))
        if file_info.document_metadata is not None:
            lines.extend(_document_properties(file_info.document_metadata))
        lines.append("")

    lines.extend(
        [
            f"Document content (first {CONTENT_EXCERPT_CHARS} characters):",
            content[:CONTENT_EXCERPT_CHARS],
            "",
            "Important: If this document is specifically for or about a particular person "
            "mentioned in the content, start the filename with their name. Otherwise, focus on "
            "the document's main purpose and content.",
            "",
            "Respond with only the filename using the specified naming convention, no explanation.",
        ]
    )
    return "\n".join(lines)


def _file_information(original_name: str, file_info: FileInfo) -> list[str]:
    return [
        "File Information:",
        f"- Original filename: {original_name}",
        f"- File size: {round(file_info.size / 1024)}KB",
        f"- Created: {_format_date(file_info.created_at)}",
        f"- Modified: {_format_date(file_info.modified_at)}",
        f"- Parent folder: {file_info.parent_folder}",
        f"- Folder path: {' > '.join(file_info.folder_path)}",
    ]


def _document_properties(meta: DocumentMetadata) -> list[str]:
    lines = ["Document Properties:"]
    if meta.title:
        lines.append(f"- Title: {meta.title}")
    if meta.author:
        lines.append(f"- Author: {meta.author}")
    if meta.creator:
        lines.append(f"- Creator: {meta.creator}")
    if meta.subject:
        lines.append(f"- Subject: {meta.subject}")
    if meta.keywords:
        lines.append(f"- Keywords: {', '.join(meta.keywords)}")
    if meta.creation_date:
        lines.append(f"- Created: {_format_date(meta.creation_date)}")
    if meta.modification_date:
        lines.append(f"- Modified: {_format_date(meta.modification_date)}")
    if meta.pages:
        lines.append(f"- Pages: {meta.pages}")
    if meta.word_count:
        lines.append(f"- Word count: {meta.word_count}")
    return lines


def _format_date(value: datetime) -> str:
    return value.date().isoformat()


__all__ = ["AI_SYSTEM_PROMPT", "CONTENT_EXCERPT_CHARS", "build_file_name_prompt"]
