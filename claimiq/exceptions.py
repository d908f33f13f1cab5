"""
Exception hierarchy for the ClaimIQ claim analysis system.
"""


class ClaimIQError(Exception):
    """Base exception for all ClaimIQ errors."""


class LLMUnavailableError(ClaimIQError):
    """Raised when a completion is requested but no provider holds a credential."""


class LLMResponseError(ClaimIQError):
    """Raised when the completion service returns content that cannot be used."""


class DocumentError(ClaimIQError):
    """Base class for per-file ingestion errors."""

    def __init__(self, file_name: str, message: str):
        self.file_name = file_name
        super().__init__(f"{file_name}: {message}")


class UnsupportedDocumentError(DocumentError):
    """Raised when a file's media type has no text extractor."""

    def __init__(self, file_name: str, media_type: str):
        self.media_type = media_type
        super().__init__(file_name, f"Unsupported file type: {media_type}")


class DocumentExtractionError(DocumentError):
    """Raised when text extraction from a supported file fails."""
