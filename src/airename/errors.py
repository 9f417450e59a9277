"""Exception hierarchy shared by the renaming pipeline."""


class AIRenameError(Exception):
    """Base exception for ai-rename operations."""


class ValidationError(AIRenameError):
    """Raised when run-level input is unusable (directory, provider, API key)."""


class ConfigurationError(AIRenameError):
    """Raised when a component is invoked with an unresolved or invalid setting."""


class SizeLimitError(AIRenameError):
    """Raised when a file exceeds the configured maximum size."""


class ParserError(AIRenameError):
    """Raised when a document parser cannot read a file."""


class NoParserError(ParserError):
    """Raised when no registered parser supports a file extension."""


class EmptyContentError(ParserError):
    """Raised when a parser returns no usable text."""


class AIProviderError(AIRenameError):
    """Raised when an AI provider fails to return a usable suggestion."""


class ConflictError(AIRenameError):
    """Raised when the target path of a rename already exists."""


class FilesystemError(AIRenameError):
    """Raised when the filesystem rename itself fails."""


__all__ = [
    "AIRenameError",
    "AIProviderError",
    "ConfigurationError",
    "ConflictError",
    "EmptyContentError",
    "FilesystemError",
    "NoParserError",
    "ParserError",
    "SizeLimitError",
    "ValidationError",
]
