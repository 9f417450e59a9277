"""Configuration management for ai-rename."""

from __future__ import annotations

import logging
import os
import textwrap
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import AIRenameConfig, LLMSettings, NamingOptions, ProcessingOptions
from .resolver import (
    ENV_PREFIX,
    PROVIDER_KEY_VARIABLES,
    apply_provider_key,
    parse_value,
    read_env_overrides,
    resolve_with_precedence,
    set_dotted,
    split_key,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.ai-rename/config.yaml")
TIMESTAMP_PREFIX = "# Last updated:"
_CONFIG_HEADER = textwrap.dedent(
    """\
    # ai-rename configuration file
    # Generated automatically; manage via `ai-rename config set KEY --value VALUE`.
    # Environment variables of the form AIRENAME__SECTION__KEY override these values;
    # CLAUDE_API_KEY and OPENAI_API_KEY supply a missing llm.api_key.
    """
)


class ConfigManager:
    """Read, validate and update the user's ``config.yaml``.

    The file only stores values; validation always happens against
    :class:`AIRenameConfig` after layering environment and CLI overrides.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> AIRenameConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Dotted keys supplied by command-line options.
            include_env: Whether ``AIRENAME__`` and provider key variables apply.
            ensure_file: Whether to create the default file first.
            env_overrides: Environment to read instead of the manager's own.

        Returns:
            AIRenameConfig: Validated configuration.

        Raises:
            ConfigError: If the file or any override is invalid.
        """
        if ensure_file:
            self.ensure_exists()

        env = (env_overrides if env_overrides is not None else self._env) if include_env else {}
        config = resolve_with_precedence(
            defaults=AIRenameConfig(),
            file_overrides=self.read_overrides(),
            env_overrides=read_env_overrides(env) or None,
            cli_overrides=cli_overrides,
        )
        return apply_provider_key(config, env)

    def read_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored on disk, or an empty mapping."""
        if not self._config_path.exists():
            return {}
        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def set_value(self, key: str, raw_value: str) -> bool:
        """Persist ``raw_value`` at the dotted ``key`` after validating the result.

        The file is left untouched when validation fails or the stored value
        already matches.

        Returns:
            bool: True when the file was rewritten.

        Raises:
            ConfigError: If the key is empty, the value cannot be parsed, or the
                updated configuration is invalid.
        """
        path = split_key(key)
        value = parse_value(".".join(path), raw_value, strict=True)
        data = self.read_overrides()
        previous = deepcopy(data)
        set_dotted(data, path, value)
        resolve_with_precedence(defaults=AIRenameConfig(), file_overrides=data)
        if data == previous:
            return False
        self.save(data)
        LOGGER.debug("Updated %s in %s", ".".join(path), self._config_path)
        return True

    def save(self, data: AIRenameConfig | Mapping[str, Any]) -> None:
        """Write ``data`` to disk with the standard header and a fresh timestamp."""
        if isinstance(data, AIRenameConfig):
            data = data.model_dump(mode="python")
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}{TIMESTAMP_PREFIX} {stamp}\n{body}", encoding="utf-8"
        )

    def ensure_exists(self) -> Path:
        """Create a configuration file with defaults if one does not exist."""
        if not self._config_path.exists():
            LOGGER.debug("Writing default configuration to %s", self._config_path)
            self.save(AIRenameConfig())
        return self._config_path

    def read_text(self) -> str:
        """Return the current configuration file contents."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")


__all__ = [
    "AIRenameConfig",
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "LLMSettings",
    "NamingOptions",
    "PROVIDER_KEY_VARIABLES",
    "ProcessingOptions",
    "TIMESTAMP_PREFIX",
    "resolve_with_precedence",
]
