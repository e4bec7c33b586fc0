"""Exceptions raised by Stream Captions."""
from __future__ import annotations

from typing import Optional

from .models import CANCEL_ERROR


class CaptionError(Exception):
    """Base class for exceptions in this package."""
    pass


class ConfigurationError(CaptionError):
    """Raised when caption settings are outside their valid bounds."""
    pass


class UpstreamCancellation(CaptionError):
    """Raised when the recognizer ends a session with an error.

    Attributes:
        reason: Cancellation reason reported by the recognizer
        error_code: Optional numeric error code
        details: Optional human-readable error details
    """

    def __init__(self, reason: str, error_code: Optional[int] = None, details: Optional[str] = None):
        self.reason = reason
        self.error_code = error_code
        self.details = details
        super().__init__(self._message())

    def _message(self) -> str:
        if self.reason != CANCEL_ERROR:
            return f"Request was cancelled for an unrecognized reason: {self.reason}."
        parts = ["Encountered error."]
        if self.error_code is not None:
            parts.append(f"Error code: {self.error_code}")
        if self.details:
            parts.append(f"Error details: {self.details}")
        return "\n".join(parts)
