"""Configuration models describing ai-rename settings."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from airename.naming.templates import TemplateOptions
from airename.naming.types import (
    CategoryChoice,
    DateFormat,
    NamingConvention,
    ProviderName,
)

DEFAULT_SUPPORTED_EXTENSIONS = [".pdf", ".docx", ".doc", ".xlsx", ".xls", ".txt", ".md", ".rtf"]


class AIRenameBaseModel(BaseModel):
    """Shared configuration for ai-rename Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class LLMSettings(AIRenameBaseModel):
    """LLM configuration options.

    Attributes:
        provider: Identifier for the language-model provider.
        api_key: Credential for hosted providers; ignored by local providers.
        model: Model name override; each provider has its own default.
        base_url: Endpoint override for local providers.
        temperature: Sampling temperature for generative calls.
        max_tokens: Maximum number of tokens in responses.
        timeout_seconds: Transport timeout applied to each request.
    """

    provider: ProviderName = "claude"
    api_key: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.3
    max_tokens: int = 100
    timeout_seconds: float = 60.0


class ProcessingOptions(AIRenameBaseModel):
    """Processing options governing which files are renamed.

    Attributes:
        max_file_size_mb: Maximum file size processed; larger files fail.
        supported_extensions: Extensions picked up when scanning a directory.
        dry_run: Whether to preview renames without touching the filesystem.
    """

    max_file_size_mb: int = Field(default=10, ge=1)
    supported_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SUPPORTED_EXTENSIONS)
    )
    dry_run: bool = False

    @field_validator("supported_extensions")
    @classmethod
    def _normalize_extensions(cls, value: List[str]) -> List[str]:
        normalized: list[str] = []
        for raw in value:
            ext = raw.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            if ext not in normalized:
                normalized.append(ext)
        return normalized

    @property
    def max_file_size_bytes(self) -> int:
        """Return the size limit expressed in bytes."""
        return self.max_file_size_mb * 1024 * 1024


class NamingOptions(AIRenameBaseModel):
    """Settings that shape the generated filename.

    Attributes:
        convention: Casing and separator style applied last.
        category: Template category, or ``auto`` to infer one per file.
        personal_name: Name substituted into templates that reference a person.
        date_format: Format of the date stamped into templates.
    """

    convention: NamingConvention = "kebab-case"
    category: CategoryChoice = "general"
    personal_name: Optional[str] = None
    date_format: DateFormat = "none"

    def template_options(self) -> TemplateOptions:
        """Return the template options derived from these settings."""
        return TemplateOptions(
            category=self.category,
            personal_name=self.personal_name or None,
            date_format=self.date_format,
        )


class LoggingSettings(AIRenameBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(AIRenameBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class AIRenameConfig(AIRenameBaseModel):
    """Top-level configuration struct for ai-rename.

    Attributes:
        llm: Language model settings.
        processing: File selection and dry-run settings.
        naming: Convention and template settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    llm: LLMSettings = Field(default_factory=LLMSettings)
    processing: ProcessingOptions = Field(default_factory=ProcessingOptions)
    naming: NamingOptions = Field(default_factory=NamingOptions)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "AIRenameBaseModel",
    "AIRenameConfig",
    "CLIOptions",
    "DEFAULT_SUPPORTED_EXTENSIONS",
    "LLMSettings",
    "LoggingSettings",
    "NamingOptions",
    "ProcessingOptions",
]
