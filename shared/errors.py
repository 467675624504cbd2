"""
Error hierarchy.

Base exceptions shared by the analysis engine, service layer and API routes.
"""

from typing import Optional


class PipelineError(Exception):
    """Base error for all aura analysis failures."""

    def __init__(self, message: str, reading_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reading_id = reading_id

    def __str__(self) -> str:
        if self.reading_id:
            return f"{self.message} (reading_id={self.reading_id})"
        return self.message


class ConfigError(PipelineError):
    """Raised when configuration is missing or invalid."""


class ValidationError(PipelineError):
    """Raised when caller input fails validation."""


class RetryableError(PipelineError):
    """Raised for transient failures that may succeed on retry."""


class RateLimitError(RetryableError):
    """Raised when an upstream service reports a rate limit."""


class NotFoundError(PipelineError):
    """Raised when a requested reading does not exist for the user."""


class EligibilityError(PipelineError):
    """Raised when a user has no scans remaining for the day."""

    def __init__(self, message: str, remaining: int = 0):
        super().__init__(message)
        self.remaining = remaining
