"""Tests for category templates and template field extraction."""

from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from airename.errors import ConfigurationError
from airename.ingestion.models import DocumentMetadata, FileInfo
from airename.naming import (
    CATEGORIES,
    FILE_TEMPLATES,
    TemplateOptions,
    apply_template,
    format_date,
    template_fields_for,
    template_instructions,
)


def _file_info(name: str, metadata: DocumentMetadata | None = None) -> FileInfo:
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)
    return FileInfo(
        path=Path("/library") / name,
        name=name,
        extension=Path(name).suffix.lower(),
        size=1024,
        created_at=now,
        modified_at=now,
        accessed_at=now,
        parent_folder="library",
        folder_path=["library"],
        document_metadata=metadata,
    )


def test_document_template_with_name_and_date() -> None:
    options = TemplateOptions(category="document", personal_name="alice", date_format="YYYYMMDD")

    result = apply_template("driving-license", "document", options, "kebab-case")

    assert result.startswith("driving-license-alice-")
    assert result.endswith(date.today().strftime("%Y%m%d"))
    assert len(result) == len("driving-license-alice-") + 8


def test_movie_template_without_year_keeps_core_name() -> None:
    options = TemplateOptions(category="movie", date_format="YYYY")

    assert apply_template("the-matrix", "movie", options, "kebab-case") == "the-matrix"


def test_document_template_without_options_drops_placeholders() -> None:
    result = apply_template("tax return", "document", TemplateOptions(), "snake_case")

    assert result == "tax_return"


def test_series_template_drops_unfilled_episode_segment() -> None:
    result = apply_template("breaking-bad-pilot", "series", TemplateOptions(), "kebab-case")

    assert result == "breaking-bad-pilot"


def test_context_fields_fill_placeholders() -> None:
    options = TemplateOptions()

    assert (
        apply_template("the-matrix", "movie", options, "kebab-case", {"year": "1999"})
        == "the-matrix-1999"
    )
    assert (
        apply_template(
            "pilot", "series", options, "kebab-case", {"season": "01", "episode": "02"}
        )
        == "pilot-s01e02"
    )
    assert (
        apply_template("hey-jude", "music", options, "kebab-case", {"artist": "The Beatles"})
        == "the-beatles-hey-jude"
    )
    assert (
        apply_template("animal-farm", "book", options, "PascalCase", {"author": "George Orwell"})
        == "GeorgeOrwellAnimalFarm"
    )


def test_context_field_already_in_core_name_is_not_repeated() -> None:
    result = apply_template(
        "the-dark-knight-2008", "movie", TemplateOptions(), "kebab-case", {"year": "2008"}
    )

    assert result == "the-dark-knight-2008"


def test_template_applies_naming_convention_last() -> None:
    options = TemplateOptions(personal_name="Alice Smith", date_format="YYYY-MM-DD")

    result = apply_template("Driving License", "document", options, "UPPERCASE")

    assert result == f"DRIVINGLICENSEALICESMITH{date.today().strftime('%Y%m%d')}"


@pytest.mark.parametrize("category", CATEGORIES)
@pytest.mark.parametrize("personal_name", [None, "bob"])
@pytest.mark.parametrize("date_format", ["none", "YYYY", "YYYY-MM-DD", "YYYYMMDD"])
def test_templates_never_leave_placeholders(
    category: str, personal_name: str | None, date_format: str
) -> None:
    options = TemplateOptions(personal_name=personal_name, date_format=date_format)

    result = apply_template("{weird} core name", category, options, "kebab-case")

    assert "{" not in result and "}" not in result
    assert result.startswith("weird-core-name") or result.endswith("weird-core-name")


def test_auto_category_raises_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        apply_template("anything", "auto", TemplateOptions(category="auto"), "kebab-case")


def test_unknown_category_raises_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        apply_template("anything", "podcast", TemplateOptions(), "kebab-case")


@pytest.mark.parametrize(
    ("fmt", "expected"),
    [("YYYY-MM-DD", "2024-03-07"), ("YYYY", "2024"), ("YYYYMMDD", "20240307")],
)
def test_format_date_zero_pads(fmt: str, expected: str) -> None:
    assert format_date(date(2024, 3, 7), fmt) == expected


def test_template_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        FILE_TEMPLATES["general"] = FILE_TEMPLATES["movie"]  # type: ignore[index]


def test_template_instructions_include_examples() -> None:
    text = template_instructions("movie")

    assert text.startswith("Generate filename for movie type files. Movies with release year.")
    assert "the-dark-knight-2008.mkv" in text


def test_template_instructions_for_auto_are_generic() -> None:
    text = template_instructions("auto")

    assert "auto" not in text
    assert "Generate a filename" in text


def test_template_fields_for_media_names() -> None:
    assert template_fields_for(_file_info("The.Matrix.1999.1080p.mkv"), "movie") == {
        "year": "1999"
    }
    assert template_fields_for(_file_info("show.S1E4.mkv"), "series") == {
        "season": "01",
        "episode": "04",
    }
    assert template_fields_for(_file_info("untitled.mkv"), "series") == {}


def test_template_fields_for_metadata() -> None:
    book = _file_info("book.pdf", DocumentMetadata(author="George Orwell"))
    song = _file_info("song.txt", DocumentMetadata(creator="Queen"))

    assert template_fields_for(book, "book") == {"author": "George Orwell"}
    assert template_fields_for(song, "music") == {"artist": "Queen"}
    assert template_fields_for(book, "general") == {}
