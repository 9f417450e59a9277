"""CLI tests for configuration commands."""

import os
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from airename.cli import cli
from airename.config import PROVIDER_KEY_VARIABLES, ConfigManager


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = {
        key: value
        for key, value in os.environ.items()
        if not key.startswith("AIRENAME__") and key not in PROVIDER_KEY_VARIABLES.values()
    }
    env["HOME"] = str(tmp_path)
    return env


def _config_path(tmp_path: Path) -> Path:
    return tmp_path / ".ai-rename" / "config.yaml"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "view"], env=env)

    assert result.exit_code == 0
    assert "llm:" in result.output
    assert "naming:" in result.output
    assert _config_path(tmp_path).exists()


def test_config_view_masks_api_key(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    env["AIRENAME__LLM__API_KEY"] = "sk-secret-value"

    result = runner.invoke(cli, ["config", "view"], env=env)

    assert result.exit_code == 0
    assert "sk-secret-value" not in result.output
    assert "********" in result.output


def test_config_set_updates_value_and_writes_diff(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(
        cli, ["config", "set", "naming.convention", "--value", "snake_case"], env=env
    )

    assert result.exit_code == 0
    assert "snake_case" in result.output

    manager = ConfigManager(config_path=_config_path(tmp_path))
    config = manager.load(include_env=False)
    assert config.naming.convention == "snake_case"


def test_config_set_rejects_invalid_value(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(
        cli, ["config", "set", "processing.max_file_size_mb", "--value", "0"], env=env
    )

    assert result.exit_code != 0
    assert "Invalid configuration values" in result.output

    manager = ConfigManager(config_path=_config_path(tmp_path))
    assert manager.load(include_env=False).processing.max_file_size_mb == 10


def test_config_set_reports_unchanged_value(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "set", "llm.provider", "--value", "claude"], env=env)

    assert result.exit_code == 0
    assert "No changes applied" in result.output


@pytest.mark.parametrize("key", ["", "..."])
def test_config_set_requires_dotted_key(tmp_path: Path, key: str) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["config", "set", key, "--value", "1"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code != 0
    assert "dotted path" in result.output


def test_config_set_masks_api_key_in_diff(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(
        cli, ["config", "set", "llm.api_key", "--value", "sk-secret-123"], env=env
    )

    assert result.exit_code == 0, result.output
    assert "sk-secret-123" not in result.output
    assert "********" in result.output

    manager = ConfigManager(config_path=_config_path(tmp_path))
    assert manager.load(include_env=False).llm.api_key == "sk-secret-123"
