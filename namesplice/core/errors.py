# File: namesplice/core/errors.py
"""
Error taxonomy shared by every feature.

Each error carries a human-readable ``reason`` (safe to show an end user) and a
``details`` dict with raw diagnostics (transcript, upstream status, ...) so the
caller can decide whether to retry or ask the user to re-record.
"""
from typing import Any, Dict, Optional


class NamespliceError(Exception):
    """Base class for all pipeline errors."""

    retryable: bool = False

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(reason)
        self.reason = reason
        self.details: Dict[str, Any] = dict(details or {})

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.reason, "details": self.details}


class ValidationError(NamespliceError):
    """Bad input shape, size or type. Never retried."""


class TransientUpstreamError(NamespliceError):
    """Network or service failure from a transcription/synthesis provider. Safe to retry."""

    retryable = True

    def __init__(
        self,
        reason: str,
        provider: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        merged = {"provider": provider, "status_code": status_code}
        merged.update(details or {})
        super().__init__(reason, merged)
        self.provider = provider
        self.status_code = status_code


class DegradedTranscriptError(NamespliceError):
    """
    The transcript came back without any word timing.
    This is a degraded service, not an absent placeholder.
    """

    def __init__(self, reason: str, transcript: str = ""):
        super().__init__(reason, {"transcript": transcript})
        self.transcript = transcript


class NonRetryableReferenceError(NamespliceError):
    """A referenced entity (voice profile, project span) does not exist."""


class ConcurrentUpdateError(NamespliceError):
    """An optimistic version check failed while overwriting persisted state."""


class CompositionError(NamespliceError):
    """The reference compositor failed to render a spliced asset."""
