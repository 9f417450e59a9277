"""Tests for the sequential rename pipeline."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import pytest

from airename.config import AIRenameConfig, resolve_with_precedence
from airename.errors import AIProviderError, ParserError
from airename.ingestion import DirectoryScanner, ParserRegistry
from airename.ingestion.models import DocumentMetadata, FileInfo, ParseResult
from airename.organization import FileRenamer, RenameResult


class StubProvider:
    """Return queued suggestions and remember every call."""

    name = "Stub"

    def __init__(self, *suggestions: str | Exception) -> None:
        self.suggestions = list(suggestions)
        self.calls: list[dict[str, Any]] = []

    def generate_file_name(
        self,
        content: str,
        original_name: str,
        convention: str = "kebab-case",
        category: str = "general",
        file_info: FileInfo | None = None,
    ) -> str:
        self.calls.append(
            {
                "content": content,
                "original_name": original_name,
                "convention": convention,
                "category": category,
                "file_info": file_info,
            }
        )
        suggestion = self.suggestions.pop(0) if self.suggestions else "renamed file"
        if isinstance(suggestion, Exception):
            raise suggestion
        return suggestion

    def close(self) -> None:
        pass


class StaticParser:
    """Parser returning fixed content for every path."""

    def __init__(self, content: str, metadata: DocumentMetadata | None = None) -> None:
        self.content = content
        self.metadata = metadata or DocumentMetadata()

    def supports(self, path: Path) -> bool:
        return True

    def parse(self, path: Path) -> ParseResult:
        return ParseResult(content=self.content, metadata=self.metadata)


@pytest.fixture
def rename_calls(monkeypatch: pytest.MonkeyPatch) -> list[tuple[Path, Path]]:
    calls: list[tuple[Path, Path]] = []
    original = Path.rename

    def _recording_rename(self: Path, target: Any) -> Path:
        calls.append((self, Path(target)))
        return original(self, target)

    monkeypatch.setattr(Path, "rename", _recording_rename)
    return calls


def _config(**overrides: Any) -> AIRenameConfig:
    return resolve_with_precedence(defaults=AIRenameConfig(), cli_overrides=overrides)


def _scan(directory: Path) -> list[FileInfo]:
    return list(DirectoryScanner(extensions=[".txt", ".md", ".pdf"]).scan(directory))


def _write(directory: Path, name: str, text: str = "Quarterly budget planning notes") -> Path:
    target = directory / name
    target.write_text(text, encoding="utf-8")
    return target


def test_renames_file_with_template_and_extension(
    tmp_path: Path, rename_calls: list[tuple[Path, Path]]
) -> None:
    _write(tmp_path, "scan001.txt")
    provider = StubProvider("Budget Planning")
    renamer = FileRenamer(ParserRegistry(), provider, _config())

    batch = renamer.rename_files(_scan(tmp_path))

    result = batch.results[0]
    assert result.success
    assert result.suggested_name == "budget-planning.txt"
    assert result.new_path == tmp_path.resolve() / "budget-planning.txt"
    assert result.new_path.exists()
    assert not result.original_path.exists()
    assert result.category == "general"
    assert len(rename_calls) == 1
    assert provider.calls[0]["original_name"] == "scan001.txt"
    assert provider.calls[0]["file_info"].document_metadata is not None


def test_oversized_file_fails_without_ai_call(tmp_path: Path) -> None:
    _write(tmp_path, "huge.txt", "x" * (1024 * 1024 + 1))
    provider = StubProvider()
    renamer = FileRenamer(ParserRegistry(), provider, _config(**{"processing.max_file_size_mb": 1}))

    result = renamer.rename_files(_scan(tmp_path)).results[0]

    assert not result.success
    assert "File size" in (result.error or "")
    assert result.error == "File size (1MB) exceeds maximum allowed size (1MB)"
    assert result.new_path == result.original_path
    assert provider.calls == []


def test_empty_content_fails_without_ai_call(tmp_path: Path) -> None:
    _write(tmp_path, "blank.txt", "   \n\t ")
    provider = StubProvider()
    renamer = FileRenamer(ParserRegistry(), provider, _config())

    result = renamer.rename_files(_scan(tmp_path)).results[0]

    assert not result.success
    assert "No content could be extracted" in (result.error or "")
    assert provider.calls == []


def test_missing_parser_fails(tmp_path: Path) -> None:
    _write(tmp_path, "notes.md")
    provider = StubProvider()
    renamer = FileRenamer(ParserRegistry(parsers=[]), provider, _config())

    result = renamer.rename_files(_scan(tmp_path)).results[0]

    assert result.error == "No parser available for file type: .md"
    assert provider.calls == []


def test_parser_error_becomes_failed_result(tmp_path: Path) -> None:
    class FailingParser(StaticParser):
        def parse(self, path: Path) -> ParseResult:
            raise ParserError("Failed to parse text file: boom")

    _write(tmp_path, "a.txt")
    renamer = FileRenamer(ParserRegistry([FailingParser("")]), StubProvider(), _config())

    result = renamer.rename_files(_scan(tmp_path)).results[0]

    assert result.error == "Failed to parse text file: boom"


def test_dry_run_calls_ai_for_every_file_but_never_renames(
    tmp_path: Path, rename_calls: list[tuple[Path, Path]]
) -> None:
    for name in ("one.txt", "two.txt", "three.txt"):
        _write(tmp_path, name, f"Content of {name}")
    provider = StubProvider("alpha report", "beta report", "gamma report")
    renamer = FileRenamer(ParserRegistry(), provider, _config(**{"processing.dry_run": True}))

    batch = renamer.rename_files(_scan(tmp_path))

    assert batch.dry_run
    assert len(provider.calls) == 3
    assert rename_calls == []
    assert all(result.success for result in batch.results)
    for result in batch.results:
        assert result.new_path == result.original_path
        assert result.original_path.exists()
        assert result.suggested_name != result.original_path.name
    assert sorted(path.name for path in tmp_path.iterdir()) == ["one.txt", "three.txt", "two.txt"]
    assert batch.summary() == {"processed": 3, "successful": 3, "failed": 0, "renamed": 0}


def test_conflict_with_existing_file_fails(
    tmp_path: Path, rename_calls: list[tuple[Path, Path]]
) -> None:
    _write(tmp_path, "draft.txt")
    _write(tmp_path, "final-report.txt", "Already here")
    provider = StubProvider("Final Report", "something else")
    renamer = FileRenamer(ParserRegistry(), provider, _config())

    batch = renamer.rename_files(_scan(tmp_path))

    draft = batch.results[0]
    assert draft.original_path.name == "draft.txt"
    assert not draft.success
    assert "already exists" in (draft.error or "")
    assert draft.error == "Target filename already exists: final-report.txt"
    assert all(source.name != "draft.txt" for source, _ in rename_calls)


def test_unchanged_name_is_success_without_rename(
    tmp_path: Path, rename_calls: list[tuple[Path, Path]]
) -> None:
    _write(tmp_path, "budget-plan.txt")
    renamer = FileRenamer(ParserRegistry(), StubProvider("Budget Plan"), _config())

    result = renamer.rename_files(_scan(tmp_path)).results[0]

    assert result.success
    assert result.new_path == result.original_path
    assert result.suggested_name == "budget-plan.txt"
    assert rename_calls == []


def test_failures_do_not_abort_batch_and_keep_order(tmp_path: Path) -> None:
    for name in ("a.txt", "b.txt", "c.txt"):
        _write(tmp_path, name, f"Document {name}")
    provider = StubProvider("first doc", AIProviderError("Stub API request failed: 500"), "")
    renamer = FileRenamer(ParserRegistry(), provider, _config())

    batch = renamer.rename_files(_scan(tmp_path))

    assert [result.original_path.name for result in batch.results] == ["a.txt", "b.txt", "c.txt"]
    assert [result.success for result in batch.results] == [True, False, False]
    assert batch.results[1].error == "Stub API request failed: 500"
    assert batch.results[2].error == "AI service failed to generate a filename"
    assert len(batch.successful) == 1
    assert len(batch.failed) == 2


def test_unexpected_exception_is_captured(tmp_path: Path) -> None:
    _write(tmp_path, "a.txt")
    renamer = FileRenamer(ParserRegistry(), StubProvider(RuntimeError("kaboom")), _config())

    result = renamer.rename_files(_scan(tmp_path)).results[0]

    assert not result.success
    assert result.error == "kaboom"


def test_auto_category_is_resolved_before_templating(tmp_path: Path) -> None:
    movies = tmp_path / "movies"
    movies.mkdir()
    _write(movies, "notes.txt", "Some notes")
    provider = StubProvider("the matrix")
    config = _config(**{"naming.category": "auto", "processing.dry_run": True})

    result = FileRenamer(ParserRegistry(), provider, config).rename_files(_scan(movies)).results[0]

    assert provider.calls[0]["category"] == "movie"
    assert result.category == "movie"
    assert result.suggested_name == "the-matrix.txt"


def test_document_template_options_and_convention(tmp_path: Path) -> None:
    _write(tmp_path, "license.txt", "Driving license issued to Alice")
    config = _config(
        **{
            "naming.category": "document",
            "naming.personal_name": "Alice",
            "naming.date_format": "YYYYMMDD",
            "naming.convention": "snake_case",
            "processing.dry_run": True,
        }
    )
    provider = StubProvider("driving-license")

    renamer = FileRenamer(ParserRegistry(), provider, config)
    result = renamer.rename_files(_scan(tmp_path)).results[0]

    stamp = date.today().strftime("%Y%m%d")
    assert result.suggested_name == f"driving_license_alice_{stamp}.txt"
    assert provider.calls[0]["convention"] == "snake_case"
    assert provider.calls[0]["category"] == "document"


def test_suggestion_without_usable_characters_uses_fallback(tmp_path: Path) -> None:
    _write(tmp_path, "a.txt")
    config = _config(**{"processing.dry_run": True})

    renamer = FileRenamer(ParserRegistry(), StubProvider("!!!"), config)
    result = renamer.rename_files(_scan(tmp_path)).results[0]

    assert result.suggested_name == "untitled-document.txt"


def test_parsed_metadata_feeds_template_fields(tmp_path: Path) -> None:
    _write(tmp_path, "book.txt")
    parser = StaticParser("Chapter one", DocumentMetadata(author="George Orwell"))
    config = _config(**{"naming.category": "book", "processing.dry_run": True})

    renamer = FileRenamer(ParserRegistry([parser]), StubProvider("Animal Farm"), config)
    result = renamer.rename_files(_scan(tmp_path)).results[0]

    assert result.suggested_name == "george-orwell-animal-farm.txt"


def test_failed_result_requires_error() -> None:
    with pytest.raises(ValueError):
        RenameResult(original_path=Path("a"), new_path=Path("a"), success=False)
