"""Providers backed by unauthenticated local LLM servers."""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Any, Optional

from airename.errors import AIProviderError
from airename.naming.prompts import AI_SYSTEM_PROMPT

from .base import AIProvider
from .cloud import chat_completion_text

LOGGER = logging.getLogger(__name__)


class LocalProvider(AIProvider):
    """Base class for local servers that expose a model-list endpoint."""

    models_path = ""

    def is_available(self) -> bool:
        """Return True when the server answers its model-list endpoint."""
        try:
            self._get(self.models_path)
        except AIProviderError as exc:
            LOGGER.debug("%s is not reachable at %s: %s", self.name, self.base_url, exc)
            return False
        return True

    def list_models(self) -> list[str]:
        """Return model identifiers reported by the server, or an empty list."""
        try:
            data = self._get(self.models_path)
        except AIProviderError as exc:
            LOGGER.debug("Unable to list %s models: %s", self.name, exc)
            return []
        return self._model_names(data)

    @abstractmethod
    def _model_names(self, data: Any) -> list[str]:
        """Extract model identifiers from the model-list response body."""


class OllamaProvider(LocalProvider):
    """Ollama chat API."""

    name = "Ollama"
    default_base_url = "http://localhost:11434"
    default_model = "llama3.1"
    models_path = "/api/tags"

    def _complete(self, prompt: str, image: Optional[str]) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": AI_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "stream": False,
            "options": {"temperature": self.temperature, "num_predict": self.max_tokens},
        }
        data = self._post("/api/chat", payload)
        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict):
            raise AIProviderError(f"No response content from {self.name}")
        return str(message.get("content") or "")

    def _model_names(self, data: Any) -> list[str]:
        models = data.get("models") if isinstance(data, dict) else None
        return [
            str(item["name"]) for item in models or [] if isinstance(item, dict) and "name" in item
        ]


class LMStudioProvider(LocalProvider):
    """LM Studio's OpenAI-compatible server."""

    name = "LM Studio"
    default_base_url = "http://localhost:1234"
    default_model = "local-model"
    models_path = "/v1/models"

    def _complete(self, prompt: str, image: Optional[str]) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": AI_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": False,
        }
        data = self._post("/v1/chat/completions", payload)
        return chat_completion_text(data, self.name)

    def _model_names(self, data: Any) -> list[str]:
        models = data.get("data") if isinstance(data, dict) else None
        return [
            str(item["id"]) for item in models or [] if isinstance(item, dict) and "id" in item
        ]


__all__ = ["LMStudioProvider", "LocalProvider", "OllamaProvider"]
