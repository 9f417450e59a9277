"""AI providers and the factory that selects one from configuration."""

from __future__ import annotations

from typing import Optional

import httpx

from airename.config.models import LLMSettings
from airename.errors import ValidationError

from .base import AIProvider, sanitize_file_name
from .cloud import ClaudeProvider, CloudProvider, OpenAIProvider
from .local import LMStudioProvider, LocalProvider, OllamaProvider

PROVIDER_CLASSES: dict[str, type[AIProvider]] = {
    "claude": ClaudeProvider,
    "openai": OpenAIProvider,
    "ollama": OllamaProvider,
    "lmstudio": LMStudioProvider,
}


def create_provider(settings: LLMSettings, *, client: Optional[httpx.Client] = None) -> AIProvider:
    """Instantiate the provider named by ``settings.provider``.

    Args:
        settings: LLM configuration section.
        client: Optional HTTP client shared with the provider.

    Returns:
        AIProvider: Configured provider instance.

    Raises:
        ValidationError: If the provider is unknown or a required API key is missing.
    """
    provider_cls = PROVIDER_CLASSES.get(settings.provider)
    if provider_cls is None:
        raise ValidationError(f"Unsupported AI provider: {settings.provider}")

    options = {
        "model": settings.model,
        "base_url": settings.base_url,
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
        "timeout": settings.timeout_seconds,
        "client": client,
    }
    if issubclass(provider_cls, CloudProvider):
        return provider_cls(settings.api_key, **options)
    return provider_cls(**options)


__all__ = [
    "AIProvider",
    "ClaudeProvider",
    "CloudProvider",
    "LMStudioProvider",
    "LocalProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "PROVIDER_CLASSES",
    "create_provider",
    "sanitize_file_name",
]
