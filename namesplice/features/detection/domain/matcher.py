# File: namesplice/features/detection/domain/matcher.py
"""
Placeholder matching over a word-timed transcript.

The policy is first-match: the earliest word whose normalized token contains
the placeholder wins, regardless of how many times it appears. The occurrence
count is reported so callers can warn about accidental repeats.
"""
from typing import Optional

from namesplice.core.errors import DegradedTranscriptError
from namesplice.features.transcription.domain.models import TranscriptionResult
from .models import DetectionResult, NotFound, PlaceholderFound, PlaceholderSpan

MATCH_CONFIDENCE = 1.0

# Word times are float32-derived while the reported duration is rounded
DURATION_TOLERANCE_SECONDS = 0.05


def find_placeholder(transcript: TranscriptionResult,
                     placeholder: str,
                     duration_seconds: Optional[float] = None) -> DetectionResult:
    """
    Args:
        transcript: Word-timed transcript of the recording.
        placeholder: Substring to look for, matched case-insensitively.
        duration_seconds: Recording length, when known. Bounds the span.

    Returns:
        PlaceholderFound for the first matching word, NotFound otherwise.

    Raises:
        DegradedTranscriptError: Words came back but none had timing, or the
            matched word's timing is unusable.
    """
    needle = placeholder.strip().lower()
    words = transcript.all_words
    text = transcript.full_text

    if not needle or (not words and not text.strip()):
        return NotFound(transcript=text, placeholder=needle or placeholder)

    # Speech was heard but no word carries a timestamp
    if not any(w.has_timing for w in words):
        raise DegradedTranscriptError(
            "Speech recognition returned no word timings. The service may be degraded; please try again.",
            transcript=text,
        )

    matches = [w for w in words if needle in w.token]
    if not matches:
        return NotFound(transcript=text, placeholder=needle)

    first = matches[0]
    if not first.has_timing:
        raise DegradedTranscriptError(
            f'Heard "{first.word}" but the service did not report when it was spoken.',
            transcript=text,
        )

    limit = duration_seconds if duration_seconds is not None else transcript.duration_seconds
    try:
        span = PlaceholderSpan(start=first.start, end=first.end, confidence=MATCH_CONFIDENCE)
    except ValueError as e:
        raise DegradedTranscriptError(f"Placeholder timing is invalid: {e}", transcript=text) from e
    if limit is not None and not span.as_time_range().fits_within(limit, DURATION_TOLERANCE_SECONDS):
        raise DegradedTranscriptError(
            f"Placeholder timing ({span.end:.3f}s) exceeds the recording length ({limit:.3f}s).",
            transcript=text,
        )

    return PlaceholderFound(span=span, transcript=text, occurrences=len(matches))
