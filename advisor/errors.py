"""Errors raised by the relay pipeline.

Each error knows the HTTP status and the user-facing text the endpoint should
answer with, so the handler can map any of them to a response in one place.
"""

from __future__ import annotations

from typing import Optional


GENERIC_FAILURE_TEXT = "Error processing your request. Please try again."


class RelayError(Exception):
    """Base exception for all relay failures."""

    status_code: int = 500
    text: str = GENERIC_FAILURE_TEXT

    def __init__(self, text: Optional[str] = None, status_code: Optional[int] = None) -> None:
        if text is not None:
            self.text = text
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.text)


class ConfigurationError(RelayError):
    """Raised when the model credential is missing."""

    status_code = 500
    text = "API key not configured"


class InvalidPromptError(RelayError):
    """Raised when the request body carries no usable prompt."""

    status_code = 400
    text = "Invalid prompt"


class ModelInvocationError(RelayError):
    """Raised when the model call or the text extraction fails.

    The underlying exception is chained as ``__cause__``; it is logged but
    never surfaced in ``text``.
    """

    status_code = 500
    text = GENERIC_FAILURE_TEXT
