"""
Provider failure types.

Every failure of a provider call is one of these, tagged with the provider
name. Only ProviderRateLimitError is retryable.
"""

from typing import Optional

from shared.errors import PipelineError, RateLimitError


class ProviderError(PipelineError):
    """Base class for a failed provider call."""

    def __init__(self, message: str, provider: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code

    def __str__(self) -> str:
        return f"{self.provider} provider failed: {self.message}"


class ProviderTransportError(ProviderError):
    """Network failure or timeout."""


class ProviderProtocolError(ProviderError):
    """Non-2xx status, unreadable envelope, empty choices or a provider error payload."""


class ProviderRateLimitError(ProviderError, RateLimitError):
    """HTTP 429 from the provider."""


class ProviderResponseError(ProviderError):
    """Model reply could not be decoded into a JSON object."""


class ProviderRejectedError(ProviderError):
    """Decoded reply failed normalization (unrecognized aura color)."""
