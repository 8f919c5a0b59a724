# File: namesplice/features/voice/domain/models.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from namesplice.core.errors import ValidationError


@dataclass(frozen=True)
class StyleParams:
    """
    Synthesis dials. Numeric dials are bounded to [0, 1].

    stability: voice consistency vs expressiveness.
    similarity_boost: how closely to track the cloned speaker.
    style: expressiveness weight.
    use_speaker_boost: extra speaker fidelity at a small latency cost.
    """
    stability: float = 0.5
    similarity_boost: float = 0.8
    style: float = 0.5
    use_speaker_boost: bool = True

    @classmethod
    def general(cls) -> "StyleParams":
        return cls()

    @classmethod
    def for_names(cls) -> "StyleParams":
        """Tuned for a single spoken name: steadier and less expressive."""
        return cls(stability=0.6, similarity_boost=0.9, style=0.3, use_speaker_boost=True)

    def errors(self) -> List[str]:
        problems = []
        if not 0.0 <= self.stability <= 1.0:
            problems.append("Stability must be between 0 and 1")
        if not 0.0 <= self.similarity_boost <= 1.0:
            problems.append("Similarity boost must be between 0 and 1")
        if not 0.0 <= self.style <= 1.0:
            problems.append("Style must be between 0 and 1")
        return problems

    def validate(self) -> None:
        problems = self.errors()
        if problems:
            raise ValidationError("; ".join(problems), {"errors": problems})

    def to_payload(self) -> Dict[str, Any]:
        return {
            "stability": self.stability,
            "similarityBoost": self.similarity_boost,
            "style": self.style,
            "useSpeakerBoost": self.use_speaker_boost,
        }


@dataclass(frozen=True)
class VoiceProfile:
    """Reference to a cloned voice held by the synthesis provider."""
    voice_id: str
    name: str = ""
    preview_url: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.voice_id or not self.voice_id.strip():
            raise ValidationError("Voice profile has no voice id.")


@dataclass(frozen=True)
class SynthesizedClip:
    """
    One synthesized name. duration_seconds is measured from the audio,
    never copied from the placeholder span.
    """
    audio_bytes: bytes
    text: str
    voice: VoiceProfile
    duration_seconds: float
    audio_url: Optional[str] = None
    storage_key: Optional[str] = None
    content_type: str = "audio/mpeg"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "audioUrl": self.audio_url,
            "storageKey": self.storage_key,
            "text": self.text,
            "voiceId": self.voice.voice_id,
            "durationSeconds": self.duration_seconds,
            "temporary": self.audio_url is None,
        }
