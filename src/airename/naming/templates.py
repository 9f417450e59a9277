"""Category templates that wrap the AI-generated core name."""

from __future__ import annotations

import re
from datetime import date
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from airename.errors import ConfigurationError
from airename.ingestion.models import FileInfo

from .conventions import apply_naming_convention
from .types import Category, CategoryChoice, DateFormat, NamingConvention

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")
_HYPHEN_RUN = re.compile(r"-+")
_YEAR = re.compile(r"(?<!\d)(19\d{2}|20\d{2})(?!\d)")
_EPISODE = re.compile(r"(?<![a-z0-9])s(\d{1,2})[ ._-]?e(\d{1,3})(?!\d)", re.IGNORECASE)

# Placeholders filled from file context rather than from options.
CONTEXT_FIELDS = ("year", "season", "episode", "artist", "author")


class TemplateOptions(BaseModel):
    """User choices that feed template expansion."""

    model_config = ConfigDict(frozen=True)

    category: CategoryChoice = "general"
    personal_name: Optional[str] = None
    date_format: DateFormat = "none"


class FileTemplate(BaseModel):
    """Pattern and prompt guidance for one category."""

    model_config = ConfigDict(frozen=True)

    category: Category
    pattern: str
    description: str
    examples: Tuple[str, ...]


FILE_TEMPLATES: Mapping[str, FileTemplate] = MappingProxyType(
    {
        "document": FileTemplate(
            category="document",
            pattern="{content}-{personalName}-{date}",
            description="Personal documents with name and date",
            examples=(
                "driving-license-amirhossein-20250213.pdf",
                "dennemeyer-working-contract-amirhossein-20240314.pdf",
                "university-diploma-sarah-20220615.pdf",
            ),
        ),
        "movie": FileTemplate(
            category="movie",
            pattern="{content}-{year}",
            description="Movies with release year",
            examples=("the-dark-knight-2008.mkv", "inception-2010.mp4", "pulp-fiction-1994.avi"),
        ),
        "music": FileTemplate(
            category="music",
            pattern="{artist}-{content}",
            description="Music files with artist name",
            examples=(
                "the-beatles-hey-jude.mp3",
                "queen-bohemian-rhapsody.flac",
                "pink-floyd-wish-you-were-here.wav",
            ),
        ),
        "series": FileTemplate(
            category="series",
            pattern="{content}-s{season}e{episode}",
            description="TV series with season and episode",
            examples=(
                "breaking-bad-s01e01.mkv",
                "game-of-thrones-s04e09.mp4",
                "the-office-s02e01.avi",
            ),
        ),
        "photo": FileTemplate(
            category="photo",
            pattern="{content}-{personalName}-{date}",
            description="Photos with personal name and date",
            examples=(
                "vacation-paris-john-20240715.jpg",
                "wedding-ceremony-maria-20231009.png",
                "birthday-party-alex-20240320.heic",
            ),
        ),
        "book": FileTemplate(
            category="book",
            pattern="{author}-{content}",
            description="Books with author name",
            examples=(
                "george-orwell-1984.pdf",
                "j-k-rowling-harry-potter-philosophers-stone.epub",
                "stephen-king-the-shining.mobi",
            ),
        ),
        "general": FileTemplate(
            category="general",
            pattern="{content}",
            description="General files without special formatting",
            examples=(
                "meeting-notes-q4-2024.txt",
                "project-requirements.docx",
                "financial-report.xlsx",
            ),
        ),
    }
)

AUTO_TEMPLATE_INSTRUCTIONS = (
    "Generate a filename that suits the kind of file this is (document, movie, music, "
    "series, photo, book or general). Examples: driving-license-amirhossein-20250213.pdf, "
    "the-dark-knight-2008.mkv, meeting-notes-q4-2024.txt"
)


def apply_template(
    core_name: str,
    category: CategoryChoice | str,
    options: TemplateOptions,
    convention: NamingConvention | str,
    fields: Mapping[str, str] | None = None,
) -> str:
    """Expand the category pattern around ``core_name`` and apply ``convention``.

    Args:
        core_name: Name fragment suggested by the AI provider.
        category: Concrete category whose pattern is used.
        options: Personal name and date format choices.
        convention: Naming convention applied to the expanded name.
        fields: Optional context values for ``year``, ``season``, ``episode``,
            ``artist`` and ``author``.

    Returns:
        str: Final filename stem without extension.

    Raises:
        ConfigurationError: If ``category`` is ``auto`` or unknown.
    """
    if category == "auto":
        raise ConfigurationError(
            "Category 'auto' must be resolved to a concrete category before applying a template."
        )
    template = FILE_TEMPLATES.get(category)
    if template is None:
        raise ConfigurationError(f"No template defined for category '{category}'.")

    values: dict[str, str] = {"content": core_name}
    if options.personal_name:
        values["personalName"] = options.personal_name
    if options.date_format != "none":
        values["date"] = format_date(date.today(), options.date_format)

    context = {key: value for key, value in (fields or {}).items() if value}
    core_slug = f"-{_slug(core_name)}-"

    segments: list[str] = []
    for segment in template.pattern.split("-"):
        names = _PLACEHOLDER.findall(segment)
        if any(name not in values and name not in context for name in names):
            continue
        rendered = _PLACEHOLDER.sub(
            lambda match: values.get(match.group(1), context.get(match.group(1), "")), segment
        )
        if any(name in context for name in names) and f"-{_slug(rendered)}-" in core_slug:
            # The AI already put this context value into the core name.
            continue
        segments.append(rendered)

    result = _HYPHEN_RUN.sub("-", "-".join(segments)).strip("-")
    return apply_naming_convention(result, convention)


def format_date(value: date, date_format: DateFormat | str) -> str:
    """Render ``value`` with zero padding according to ``date_format``."""
    year = f"{value.year:04d}"
    month = f"{value.month:02d}"
    day = f"{value.day:02d}"
    if date_format == "YYYY-MM-DD":
        return f"{year}-{month}-{day}"
    if date_format == "YYYY":
        return year
    return f"{year}{month}{day}"


def template_instructions(category: CategoryChoice | str) -> str:
    """Return the prompt guidance for ``category``."""
    template = FILE_TEMPLATES.get(category)
    if template is None:
        return AUTO_TEMPLATE_INSTRUCTIONS
    return (
        f"Generate filename for {category} type files. {template.description}. "
        f"Examples: {', '.join(template.examples)}"
    )


def template_fields_for(file_info: FileInfo, category: CategoryChoice | str) -> dict[str, str]:
    """Collect context placeholder values for ``category`` from the file and its metadata."""
    fields: dict[str, str] = {}
    stem = file_info.stem
    metadata = file_info.document_metadata

    if category == "movie":
        match = _YEAR.search(stem)
        if match:
            fields["year"] = match.group(1)
    elif category == "series":
        match = _EPISODE.search(stem)
        if match:
            fields["season"] = match.group(1).zfill(2)
            fields["episode"] = match.group(2).zfill(2)
    elif category == "book" and metadata is not None and metadata.author:
        fields["author"] = metadata.author
    elif category == "music" and metadata is not None:
        artist = metadata.author or metadata.creator
        if artist:
            fields["artist"] = artist
    return fields


def _slug(text: str) -> str:
    return apply_naming_convention(text, "kebab-case")


__all__ = [
    "AUTO_TEMPLATE_INSTRUCTIONS",
    "CONTEXT_FIELDS",
    "FILE_TEMPLATES",
    "FileTemplate",
    "TemplateOptions",
    "apply_template",
    "format_date",
    "template_fields_for",
    "template_instructions",
]
