"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from airename.config import (
    AIRenameConfig,
    ConfigError,
    ConfigManager,
    resolve_with_precedence,
)
from airename.config.resolver import split_key
from airename.naming.templates import TemplateOptions


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager()


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".ai-rename" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "ai-rename configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert isinstance(config, AIRenameConfig)
    assert config.llm.provider == "claude"
    assert config.naming.convention == "kebab-case"


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.save({"llm": {"model": "gpt-4o"}, "processing": {"max_file_size_mb": 64}})

    env = {"AIRENAME__NAMING__CONVENTION": "snake_case", "AIRENAME__LLM__TEMPERATURE": "0.7"}
    cli = {"llm.temperature": 0.2}

    config = manager.load(cli_overrides=cli, env_overrides=env)

    assert config.llm.model == "gpt-4o"
    assert config.processing.max_file_size_mb == 64
    assert config.naming.convention == "snake_case"
    # CLI overrides take precedence over environment
    assert config.llm.temperature == pytest.approx(0.2)


def test_environment_ignored_when_disabled(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    manager = ConfigManager(env={"AIRENAME__LLM__PROVIDER": "ollama"})

    assert manager.load().llm.provider == "ollama"
    assert manager.load(include_env=False).llm.provider == "claude"


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


@pytest.mark.parametrize(
    "overrides",
    [
        {"processing": {"max_file_size_mb": "not-an-int"}},
        {"processing": {"max_file_size_mb": 0}},
        {"naming": {"convention": "Title Case"}},
        {"naming": {"category": "podcast"}},
        {"llm": {"provider": "bard"}},
        {"llm": {"unknown_field": True}},
    ],
)
def test_resolve_with_precedence_invalid_value_raises(overrides: dict) -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=AIRenameConfig(), file_overrides=overrides)


def test_supported_extensions_are_normalized() -> None:
    config = resolve_with_precedence(
        defaults=AIRenameConfig(),
        cli_overrides={"processing.supported_extensions": ["PDF", ".Txt", "pdf", " "]},
    )

    assert config.processing.supported_extensions == [".pdf", ".txt"]


def test_naming_options_build_template_options() -> None:
    config = resolve_with_precedence(
        defaults=AIRenameConfig(),
        cli_overrides={
            "naming.category": "document",
            "naming.personal_name": "alice",
            "naming.date_format": "YYYY",
        },
    )

    assert config.naming.template_options() == TemplateOptions(
        category="document", personal_name="alice", date_format="YYYY"
    )
    assert config.processing.max_file_size_bytes == 10 * 1024 * 1024


def test_provider_key_variable_fills_missing_api_key(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    fallback = ConfigManager(env={"CLAUDE_API_KEY": "sk-from-env"}).load()
    explicit = ConfigManager(
        env={"CLAUDE_API_KEY": "sk-from-env", "AIRENAME__LLM__API_KEY": "sk-explicit"}
    ).load()

    assert fallback.llm.api_key == "sk-from-env"
    assert explicit.llm.api_key == "sk-explicit"


def test_provider_key_variable_matches_selected_provider(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    manager = ConfigManager(env={"OPENAI_API_KEY": "sk-openai"})

    assert not manager.load().llm.api_key
    assert manager.load(cli_overrides={"llm.provider": "openai"}).llm.api_key == "sk-openai"
    assert not manager.load(include_env=False, cli_overrides={"llm.provider": "openai"}).llm.api_key


def test_free_form_environment_values_stay_strings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    manager = ConfigManager(
        env={"AIRENAME__LLM__API_KEY": "0123", "AIRENAME__NAMING__PERSONAL_NAME": "yes"}
    )

    config = manager.load()

    assert config.llm.api_key == "0123"
    assert config.naming.personal_name == "yes"


def test_set_value_persists_and_reports_changes(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    assert manager.set_value("naming.convention", "snake_case") is True
    assert manager.set_value("naming.convention", "snake_case") is False
    assert manager.set_value("naming.personal_name", "no") is True

    config = manager.load(include_env=False)
    assert config.naming.convention == "snake_case"
    assert config.naming.personal_name == "no"


def test_set_value_leaves_file_untouched_when_invalid(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()
    before = manager.read_text()

    with pytest.raises(ConfigError, match="Invalid configuration values"):
        manager.set_value("processing.max_file_size_mb", "0")

    assert manager.read_text() == before


def test_dotted_and_nested_overrides_merge() -> None:
    config = resolve_with_precedence(
        defaults=AIRenameConfig(),
        file_overrides={"llm": {"model": "mistral"}, "llm.temperature": 0.5},
    )

    assert config.llm.model == "mistral"
    assert config.llm.temperature == pytest.approx(0.5)
    assert config.llm.provider == "claude"


@pytest.mark.parametrize("key", ["", "...", " . "])
def test_split_key_rejects_empty_paths(key: str) -> None:
    with pytest.raises(ConfigError, match="dotted path"):
        split_key(key)
