from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from namesplice.core.shared_types import Recording
from .models import StyleParams, VoiceProfile
from .records import ProspectClipRecord


class IVoiceProvider(ABC):
    """
    Contract for a voice-cloning TTS provider.
    Allows swapping ElevenLabs for another vendor without touching the engine.
    """

    @abstractmethod
    def synthesize(self, text: str, voice_id: str, style: StyleParams) -> bytes:
        """
        Returns encoded audio for the text in the given voice.

        Raises:
            NonRetryableReferenceError: The voice does not exist.
            TransientUpstreamError: Provider unreachable, throttled, or failing.
        """
        pass

    @abstractmethod
    def clone_voice(self,
                    sample: Recording,
                    name: str,
                    description: Optional[str] = None,
                    labels: Optional[Dict[str, str]] = None) -> VoiceProfile:
        """Creates an instant voice clone from a speech sample."""
        pass

    @abstractmethod
    def get_voice(self, voice_id: str) -> VoiceProfile:
        pass

    @abstractmethod
    def list_voices(self) -> List[VoiceProfile]:
        pass

    @abstractmethod
    def delete_voice(self, voice_id: str) -> None:
        pass


class IVoiceRepository(ABC):
    """Per-project voice reference and per-prospect clip records."""

    @abstractmethod
    def save_profile(self, project_id: str, profile: VoiceProfile) -> None:
        pass

    @abstractmethod
    def get_profile(self, project_id: str) -> Optional[VoiceProfile]:
        pass

    @abstractmethod
    def save_clip(self, record: ProspectClipRecord) -> None:
        """Upserts by prospect_id: regenerating replaces the previous clip."""
        pass

    @abstractmethod
    def get_clip(self, prospect_id: str) -> Optional[ProspectClipRecord]:
        pass
