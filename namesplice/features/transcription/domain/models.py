# File: namesplice/features/transcription/domain/models.py
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


@dataclass(frozen=True)
class WordTiming:
    """
    One spoken word with its position in the recording.
    start/end are None when the provider returned the word without timing.
    """
    word: str
    start: Optional[float] = None
    end: Optional[float] = None
    confidence: Optional[float] = None

    @property
    def token(self) -> str:
        """Normalized form used for matching."""
        return self.word.strip().lower()

    @property
    def has_timing(self) -> bool:
        return self.start is not None and self.end is not None


@dataclass(frozen=True)
class TranscriptionSegment:
    """
    A phrase with exact timing, as grouped by the ASR engine.
    """
    start: float
    end: float
    text: str
    confidence: float = 0.0
    words: List[WordTiming] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TranscriptionResult:
    """
    The complete output of the ASR engine. Never mutated once produced.

    Providers differ in where they put word timings: the hosted API returns a
    flat list, local Whisper nests them inside segments. `all_words` hides that.
    """
    source_file: str
    language: str
    model_used: str
    full_text: str
    words: List[WordTiming] = field(default_factory=list)
    segments: List[TranscriptionSegment] = field(default_factory=list)

    duration_seconds: Optional[float] = None
    processing_meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def all_words(self) -> List[WordTiming]:
        if self.words:
            return list(self.words)
        return [w for seg in self.segments for w in seg.words]
