# File: namesplice/features/voice/service/synthesizer.py
import logging
from typing import Optional

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.errors import ValidationError
from namesplice.core.media_probe import FFprobeDurationProbe
from namesplice.features.storage.domain.interfaces import IBlobStore
from ..domain.interfaces import IVoiceProvider
from ..domain.models import StyleParams, SynthesizedClip, VoiceProfile

logger = logging.getLogger(__name__)


class VoiceSynthesisEngine:
    """
    Turns a short text (a prospect's first name) into speech in a cloned voice.

    The returned duration is always measured from the produced audio.
    Spoken length varies with the text and the voice, so it is never
    assumed to match the placeholder it replaces.
    """

    def __init__(self,
                 provider: IVoiceProvider,
                 probe: Optional[FFprobeDurationProbe] = None,
                 blob_store: Optional[IBlobStore] = None,
                 config: Settings = default_settings):
        self.provider = provider
        self.probe = probe or FFprobeDurationProbe(config)
        self.blob_store = blob_store
        self.config = config

    def synthesize(self,
                   text: str,
                   voice: VoiceProfile,
                   style: Optional[StyleParams] = None,
                   storage_key: Optional[str] = None) -> SynthesizedClip:
        clean_text = self._validate_text(text)
        style = style or StyleParams.general()
        style.validate()

        audio = self.provider.synthesize(clean_text, voice.voice_id, style)
        duration = self.probe.duration_of_bytes(audio, suffix=".mp3")
        logger.info(f"Synthesized {clean_text!r}: {duration:.2f}s")

        audio_url = None
        if self.blob_store is not None and storage_key:
            audio_url = self.blob_store.put(storage_key, audio, content_type="audio/mpeg")
        elif storage_key:
            logger.warning(f"No blob store configured; clip for {storage_key} is returned inline only")

        return SynthesizedClip(
            audio_bytes=audio,
            text=clean_text,
            voice=voice,
            duration_seconds=duration,
            audio_url=audio_url,
            storage_key=storage_key if audio_url else None,
        )

    def _validate_text(self, text: str) -> str:
        clean = (text or "").strip()
        if not clean:
            raise ValidationError("Text is required for speech generation.")
        if len(clean) > self.config.MAX_NAME_LENGTH:
            raise ValidationError(
                f"Text too long (max {self.config.MAX_NAME_LENGTH} characters for names)",
                {"length": len(clean), "max_length": self.config.MAX_NAME_LENGTH},
            )
        return clean
