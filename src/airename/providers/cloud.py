"""Hosted AI providers authenticated with an API key."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from airename.errors import AIProviderError, ValidationError
from airename.naming.prompts import AI_SYSTEM_PROMPT

from .base import AIProvider, split_image_marker

ANTHROPIC_VERSION = "2023-06-01"


class CloudProvider(AIProvider):
    """Base class for providers that require an API key."""

    supports_vision = True

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 100,
        timeout: float = 60.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ValidationError(f"{self.name} requires an API key.")
        self.api_key = api_key.strip()
        super().__init__(
            model=model,
            base_url=base_url,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            client=client,
        )


class ClaudeProvider(CloudProvider):
    """Anthropic Messages API."""

    name = "Claude"
    default_base_url = "https://api.anthropic.com"
    default_model = "claude-3-haiku-20240307"

    def _complete(self, prompt: str, image: Optional[str]) -> str:
        content: Any = prompt
        if image is not None:
            media_type, data = split_image_marker(image)
            content = [
                {
                    "type": "image",
                    "source": {"type": "base64", "media_type": media_type, "data": data},
                },
                {"type": "text", "text": prompt},
            ]

        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "system": AI_SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": content}],
        }
        headers = {"x-api-key": self.api_key, "anthropic-version": ANTHROPIC_VERSION}
        data = self._post("/v1/messages", payload, headers=headers)

        blocks = data.get("content") if isinstance(data, dict) else None
        for block in blocks or []:
            if isinstance(block, dict) and block.get("type") == "text":
                return str(block.get("text") or "")
        raise AIProviderError(f"No response content from {self.name}")


class OpenAIProvider(CloudProvider):
    """OpenAI Chat Completions API."""

    name = "OpenAI"
    default_base_url = "https://api.openai.com"
    default_model = "gpt-4o-mini"

    def _complete(self, prompt: str, image: Optional[str]) -> str:
        user_content: Any = prompt
        if image is not None:
            user_content = [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": image}},
            ]

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": AI_SYSTEM_PROMPT},
                {"role": "user", "content": user_content},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        data = self._post("/v1/chat/completions", payload, headers=headers)
        return chat_completion_text(data, self.name)


def chat_completion_text(data: Any, provider_name: str) -> str:
    """Extract the first choice's message text from a chat completion body."""
    try:
        message = data["choices"][0]["message"]
    except (KeyError, IndexError, TypeError) as exc:
        raise AIProviderError(f"No response content from {provider_name}") from exc
    if not isinstance(message, dict):
        raise AIProviderError(f"No response content from {provider_name}")
    return str(message.get("content") or "")


__all__ = [
    "ANTHROPIC_VERSION",
    "ClaudeProvider",
    "CloudProvider",
    "OpenAIProvider",
    "chat_completion_text",
]
