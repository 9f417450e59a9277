"""Shared behaviour for AI providers that suggest filenames."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

import httpx

from airename.errors import AIProviderError
from airename.ingestion.models import FileInfo, is_image_marker
from airename.naming.prompts import build_file_name_prompt
from airename.naming.types import CategoryChoice, NamingConvention

LOGGER = logging.getLogger(__name__)

_WRAPPING_QUOTES = re.compile(r"^[\"']|[\"']$")
_ECHOED_EXTENSION = re.compile(r"\.(txt|pdf|docx?|xlsx?|md|rtf)$", re.IGNORECASE)
_INVALID_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE = re.compile(r"\s+")

SCANNED_CONTENT_PLACEHOLDER = (
    "[Scanned document: the attached image shows the first page of the document.]"
)


def sanitize_file_name(text: str) -> str:
    """Clean a raw model reply into a filename fragment.

    Wrapping quotes and an echoed document extension are removed, characters
    that are invalid on common filesystems become hyphens, whitespace runs
    collapse to a hyphen and the result is lowercased.
    """
    cleaned = _WRAPPING_QUOTES.sub("", text.strip())
    cleaned = _ECHOED_EXTENSION.sub("", cleaned)
    cleaned = _INVALID_CHARS.sub("-", cleaned)
    cleaned = _WHITESPACE.sub("-", cleaned)
    return cleaned.lower()


def split_image_marker(marker: str) -> tuple[str, str]:
    """Return ``(media_type, base64_data)`` from a ``data:`` URL."""
    header, _, data = marker.partition(",")
    media_type = header[len("data:") :].split(";", 1)[0] or "image/jpeg"
    return media_type, data


class AIProvider(ABC):
    """Capability that turns document content into a suggested filename.

    Subclasses implement :meth:`_complete`, issuing exactly one request per
    call. Providers own an :class:`httpx.Client` unless one is injected.

    Attributes:
        name: Human-readable provider name used in messages.
        default_base_url: Endpoint used when no base URL is configured.
        default_model: Model used when no model is configured.
        supports_vision: Whether image markers are sent to the model.
    """

    name = "AI"
    default_base_url = ""
    default_model = ""
    supports_vision = False

    def __init__(
        self,
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 100,
        timeout: float = 60.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.model = model or self.default_model
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def generate_file_name(
        self,
        content: str,
        original_name: str,
        convention: NamingConvention | str = "kebab-case",
        category: CategoryChoice | str = "general",
        file_info: Optional[FileInfo] = None,
    ) -> str:
        """Ask the model for a descriptive filename.

        Args:
            content: Extracted text or an image marker for scanned documents.
            original_name: Current filename including extension.
            convention: Naming convention to request.
            category: Category whose template guidance is included.
            file_info: Optional filesystem and document metadata.

        Returns:
            str: Sanitised name suggestion without extension.

        Raises:
            AIProviderError: On transport failure, HTTP error status or an
                empty reply.
        """
        image: Optional[str] = None
        if is_image_marker(content):
            if not self.supports_vision:
                LOGGER.info(
                    "%s cannot read scanned pages; keeping a cleaned original name for %s.",
                    self.name,
                    original_name,
                )
                return sanitize_file_name(original_name)
            image, content = content, SCANNED_CONTENT_PLACEHOLDER

        prompt = build_file_name_prompt(content, original_name, convention, category, file_info)
        reply = self._complete(prompt, image)
        if not reply or not reply.strip():
            raise AIProviderError(f"No response content from {self.name}")
        return sanitize_file_name(reply)

    @abstractmethod
    def _complete(self, prompt: str, image: Optional[str]) -> str:
        """Send ``prompt`` (and optional image marker) and return the reply text."""

    # ------------------------------------------------------------------ #
    # Transport helpers                                                  #
    # ------------------------------------------------------------------ #

    def _post(
        self,
        path: str,
        payload: Mapping[str, Any],
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        LOGGER.debug("POST %s (model=%s)", url, self.model)
        try:
            response = self._client.post(url, json=dict(payload), headers=headers)
        except httpx.HTTPError as exc:
            raise AIProviderError(f"{self.name} request failed: {exc}") from exc
        return self._decode(response)

    def _get(self, path: str, *, headers: Optional[Mapping[str, str]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            raise AIProviderError(f"{self.name} request failed: {exc}") from exc
        return self._decode(response)

    def _decode(self, response: httpx.Response) -> Any:
        if response.is_error:
            raise AIProviderError(
                f"{self.name} API request failed: {response.status_code} "
                f"{response.reason_phrase} - {response.text}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise AIProviderError(f"{self.name} returned invalid JSON: {exc}") from exc

    def close(self) -> None:
        """Close the underlying HTTP client when this provider created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "AIProvider":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = [
    "AIProvider",
    "SCANNED_CONTENT_PLACEHOLDER",
    "sanitize_file_name",
    "split_image_marker",
]
