"""
Exception hierarchy for the resume enhancement pipeline.

Every failure the pipeline can report derives from ``CVEnhancerError`` and
carries a short ``kind`` tag, so callers can tell an unreachable provider
apart from a provider that answered with something unusable.
"""

from typing import Optional


class CVEnhancerError(Exception):
    """Base class for all pipeline errors."""

    kind = "internal"


class FileValidationError(CVEnhancerError):
    """Uploaded file is too large or of an unsupported type."""

    kind = "validation"


class ExtractionError(CVEnhancerError):
    """Document could not be decoded (corrupt PDF, unreadable image, ...)."""

    kind = "extraction"


class ConfigurationError(CVEnhancerError):
    """Provider settings are missing or incomplete."""

    kind = "configuration"


class ProviderError(CVEnhancerError):
    """AI provider returned a non-success status or could not be reached."""

    kind = "provider"

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.body = body


class ResponseFormatError(CVEnhancerError):
    """Provider answered, but the reply holds no usable resume JSON."""

    kind = "response_format"


class InvalidTransitionError(CVEnhancerError):
    """Pipeline state machine was asked for a transition it does not allow."""

    kind = "state"


class PipelineBusyError(CVEnhancerError):
    """Another pipeline run is still in flight."""

    kind = "busy"
