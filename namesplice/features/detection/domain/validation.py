# File: namesplice/features/detection/domain/validation.py
from typing import Iterable

from namesplice.core.errors import ValidationError
from namesplice.core.shared_types import Recording

# Browsers and mimetypes disagree on a few spellings.
_MEDIA_TYPE_ALIASES = {
    "audio/mp3": "audio/mpeg",
    "audio/x-wav": "audio/wav",
    "audio/wave": "audio/wav",
    "audio/x-m4a": "audio/mp4",
    "audio/m4a": "audio/mp4",
}


def normalize_media_type(media_type: str) -> str:
    base = (media_type or "").split(";", 1)[0].strip().lower()
    return _MEDIA_TYPE_ALIASES.get(base, base)


def validate_recording(recording: Recording, max_bytes: int, allowed_types: Iterable[str]) -> None:
    """
    Pre-flight checks run before any upload.

    Raises:
        ValidationError: Missing, empty, oversized, or unsupported file.
    """
    if not recording.exists():
        raise ValidationError(f"Recording not found: {recording.path}", {"path": str(recording.path)})

    if recording.size_bytes <= 0:
        raise ValidationError("Recording is empty.", {"path": str(recording.path)})

    if recording.size_bytes > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise ValidationError(
            f"File size must be less than {limit_mb:.0f}MB",
            {"size_bytes": recording.size_bytes, "max_bytes": max_bytes},
        )

    allowed = {normalize_media_type(t) for t in allowed_types}
    if normalize_media_type(recording.media_type) not in allowed:
        raise ValidationError(
            "Unsupported file type. Use MP3, MP4, WAV, or WebM",
            {"media_type": recording.media_type, "allowed": sorted(allowed)},
        )
