"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from types import MappingProxyType
from typing import Any, Mapping, Sequence

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import AIRenameConfig

ENV_PREFIX = "AIRENAME__"

# Provider credentials may also come from the conventional variables.
PROVIDER_KEY_VARIABLES: Mapping[str, str] = MappingProxyType(
    {"claude": "CLAUDE_API_KEY", "openai": "OPENAI_API_KEY"}
)

# Free-form strings; parsing them as YAML would turn "0123" or "yes" into numbers or booleans.
VERBATIM_KEYS = frozenset({"llm.api_key", "llm.model", "llm.base_url", "naming.personal_name"})


def split_key(key: str) -> list[str]:
    """Split a dotted configuration key into its segments.

    Raises:
        ConfigError: If ``key`` contains no segments.
    """
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise ConfigError("KEY must specify a dotted path such as 'naming.convention'.")
    return segments


def set_dotted(target: dict[str, Any], key: str | Sequence[str], value: Any) -> None:
    """Assign ``value`` at ``key`` inside ``target``, creating sections as needed.

    Raises:
        ConfigError: If an intermediate segment holds a scalar.
    """
    path = split_key(key) if isinstance(key, str) else list(key)
    node = target
    for segment in path[:-1]:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise ConfigError(f"Cannot assign into '{segment}' because it is not a mapping.")
        node = child
    node[path[-1]] = value


def parse_value(key: str, raw: str, *, strict: bool = False) -> Any:
    """Interpret a textual override for ``key``.

    Values for :data:`VERBATIM_KEYS` are kept as strings; everything else is
    read as a YAML literal. With ``strict`` unset, unparsable text is kept as
    a plain string.

    Raises:
        ConfigError: If ``strict`` is set and ``raw`` is not valid YAML.
    """
    if key in VERBATIM_KEYS:
        return raw
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        if strict:
            raise ConfigError(f"Unable to parse value for {key}: {exc}") from exc
        return raw


def read_env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``AIRENAME__SECTION__KEY`` variables into a nested mapping."""
    overrides: dict[str, Any] = {}
    for name, raw in env.items():
        if not name.startswith(ENV_PREFIX):
            continue
        path = [segment.lower() for segment in name[len(ENV_PREFIX) :].split("__") if segment]
        if not path:
            continue
        set_dotted(overrides, path, parse_value(".".join(path), raw))
    return overrides


def apply_provider_key(config: AIRenameConfig, env: Mapping[str, str]) -> AIRenameConfig:
    """Fill a missing API key from the provider's conventional environment variable."""
    if config.llm.api_key:
        return config
    variable = PROVIDER_KEY_VARIABLES.get(config.llm.provider)
    value = (env.get(variable) or "").strip() if variable else ""
    if not value:
        return config
    llm = config.llm.model_copy(update={"api_key": value})
    return config.model_copy(update={"llm": llm})


def resolve_with_precedence(
    *,
    defaults: AIRenameConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AIRenameConfig:
    """Merge configuration sources: defaults < file < environment < CLI.

    Each source may use nested sections, dotted keys, or both.

    Args:
        defaults: Baseline configuration.
        file_overrides: Mapping read from the YAML configuration file.
        env_overrides: Mapping derived from ``AIRENAME__`` environment variables.
        cli_overrides: Mapping of dotted keys supplied by command-line options.

    Returns:
        AIRenameConfig: Validated configuration.

    Raises:
        ConfigError: If an override is malformed or the merged values are invalid.
    """
    merged = defaults.model_dump(mode="python")
    for name, source in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    ):
        if source is not None:
            _merge_into(merged, _expand(source, source_name=name))

    try:
        return AIRenameConfig.model_validate(merged)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigError(f"Invalid configuration values: {problems}") from exc


def _expand(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    expanded: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        node: Any = value
        if isinstance(value, MappingABC):
            node = _expand(value, source_name=source_name)
        for segment in reversed(split_key(key)):
            node = {segment: node}
        _merge_into(expanded, node)
    return expanded


def _merge_into(target: dict[str, Any], overrides: Mapping[str, Any]) -> None:
    for key, value in overrides.items():
        current = target.get(key)
        if isinstance(value, MappingABC) and isinstance(current, dict):
            _merge_into(current, value)
        else:
            target[key] = deepcopy(value)


__all__ = [
    "ENV_PREFIX",
    "PROVIDER_KEY_VARIABLES",
    "VERBATIM_KEYS",
    "apply_provider_key",
    "parse_value",
    "read_env_overrides",
    "resolve_with_precedence",
    "set_dotted",
    "split_key",
]
