import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class TimeRange:
    """
    Value Object representing a valid span of time.
    Enforces that start_seconds is strictly before end_seconds.
    """
    start_seconds: float
    end_seconds: float

    def __post_init__(self):
        if self.start_seconds < 0 or self.end_seconds < 0:
            raise ValueError("Timestamps cannot be negative.")
        if self.start_seconds >= self.end_seconds:
            raise ValueError(f"Start time ({self.start_seconds}) must be before end time ({self.end_seconds}).")

    @property
    def duration(self) -> float:
        return self.end_seconds - self.start_seconds

    def fits_within(self, total_seconds: float, tolerance: float = 0.0) -> bool:
        return self.end_seconds <= total_seconds + tolerance


@dataclass(frozen=True)
class Recording:
    """
    An audio or audio-bearing video file supplied by the caller.
    duration_seconds is informational until a transcript confirms it.
    """
    path: Path
    media_type: str
    size_bytes: int
    duration_seconds: Optional[float] = None

    def __post_init__(self):
        if str(self.path).strip() in (".", ""):
            raise ValueError("File path cannot be empty.")

    @classmethod
    def from_path(cls, path, media_type: Optional[str] = None, duration_seconds: Optional[float] = None) -> "Recording":
        """Builds a Recording from a file on disk, guessing the media type when not declared."""
        p = Path(path)
        if media_type is None:
            media_type, _ = mimetypes.guess_type(p.name)
        return cls(
            path=p,
            media_type=media_type or "application/octet-stream",
            size_bytes=p.stat().st_size if p.exists() else 0,
            duration_seconds=duration_seconds,
        )

    def exists(self) -> bool:
        return self.path.exists()
