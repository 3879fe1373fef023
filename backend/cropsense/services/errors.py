"""Failure taxonomy for the AI forecast path.

Every error here is recoverable at the Forecast Orchestrator, which turns it
into a mock forecast plus an advisory. None of them reach HTTP callers.
"""

from __future__ import annotations


class ForecastError(Exception):
    """Base class. ``reason`` is the short text surfaced in the advisory."""

    reason = "AI forecast failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.reason)
        self.message = message or self.reason


class ForecastUnavailableError(ForecastError):
    """No API credential configured."""

    reason = "AI service not configured"


class ForecastTimeoutError(ForecastError):
    reason = "AI request timed out"


class ForecastTransportError(ForecastError):
    """Network or SDK fault while talking to the model."""

    reason = "AI transport error"


class MalformedResponseError(ForecastError):
    """No parseable JSON object in the model output."""

    reason = "AI returned malformed output"


class ResponseValidationError(ForecastError):
    """JSON parsed, but a required field is missing or has an unknown value."""

    reason = "AI response failed validation"
