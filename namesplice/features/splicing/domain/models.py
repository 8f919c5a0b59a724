# File: namesplice/features/splicing/domain/models.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class CompositorPolicy(str, Enum):
    """How a compositor fits a clip whose length differs from the gap it fills."""
    STRETCH = "stretch"
    PAD_SILENCE = "pad-silence"
    CROSSFADE_TRIM = "crossfade-trim"


@dataclass(frozen=True)
class SpliceInstruction:
    """
    Where to cut the original audio and how long the gap is.

    Keep the original up to before_end, play the replacement clip,
    resume the original at after_start. replacement_duration is the gap
    in the original; clip_duration is the measured length of the clip.
    They rarely match, so both are carried and the compositor decides.
    """
    before_end: float
    after_start: float
    replacement_duration: float
    clip_duration: float

    @property
    def duration_delta(self) -> float:
        """Positive when the clip is longer than the gap."""
        return self.clip_duration - self.replacement_duration

    @property
    def tempo_ratio(self) -> float:
        """Playback speed that would make the clip exactly fill the gap."""
        return self.clip_duration / self.replacement_duration

    def to_payload(self) -> Dict[str, Any]:
        return {
            "beforeEnd": self.before_end,
            "afterStart": self.after_start,
            "replacementDuration": self.replacement_duration,
            "clipDuration": self.clip_duration,
        }
