# File: namesplice/features/detection/domain/models.py
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from namesplice.core.shared_types import TimeRange


@dataclass(frozen=True)
class PlaceholderSpan:
    """
    Where the placeholder word sits in the source recording.
    Detection is binary, so confidence is a fixed value on match rather than
    something derived from the acoustic signal.
    """
    start: float
    end: float
    confidence: float = 1.0

    def __post_init__(self):
        # Reuses the shared invariant: non-negative and strictly increasing.
        TimeRange(self.start, self.end)
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be within [0, 1], got {self.confidence}")

    @property
    def duration(self) -> float:
        return self.end - self.start

    def as_time_range(self) -> TimeRange:
        return TimeRange(self.start, self.end)


@dataclass(frozen=True)
class PlaceholderFound:
    span: PlaceholderSpan
    transcript: str
    occurrences: int = 1

    detected = True

    @property
    def reason(self) -> str:
        return f"Placeholder found at {self.span.start:.1f}s - {self.span.end:.1f}s"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "detected": True,
            "startTime": self.span.start,
            "endTime": self.span.end,
            "confidence": self.span.confidence,
            "transcript": self.transcript,
            "formattedTime": f"{self.span.start:.1f}s - {self.span.end:.1f}s",
            "occurrences": self.occurrences,
        }


@dataclass(frozen=True)
class NotFound:
    """
    A valid outcome, not a failure: the speaker never said the placeholder.
    The raw transcript is kept verbatim so the user can see what was heard.
    """
    transcript: str
    placeholder: str = "prospect"

    detected = False

    @property
    def reason(self) -> str:
        return (
            f'Could not detect "{self.placeholder.upper()}" in your audio. Please re-record and clearly say '
            f'"{self.placeholder.upper()}" where you want the first name to appear.'
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "detected": False,
            "startTime": 0.0,
            "endTime": 0.0,
            "confidence": 0.0,
            "transcript": self.transcript,
            "reason": self.reason,
        }


DetectionResult = Union[PlaceholderFound, NotFound]


@dataclass(frozen=True)
class StoredSpan:
    """The single span retained for a project, with its optimistic-lock version."""
    project_id: str
    span: PlaceholderSpan
    version: int
    transcript: Optional[str] = None
