# File: namesplice/features/voice/data/elevenlabs_adapter.py
import json
import logging
from typing import Any, Dict, List, Optional

import httpx
from elevenlabs import VoiceSettings
from elevenlabs.client import ElevenLabs
from elevenlabs.core.api_error import ApiError

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.errors import (
    NamespliceError,
    NonRetryableReferenceError,
    TransientUpstreamError,
    ValidationError,
)
from namesplice.core.shared_types import Recording
from ..domain.interfaces import IVoiceProvider
from ..domain.models import StyleParams, VoiceProfile

logger = logging.getLogger(__name__)

PROVIDER = "elevenlabs"

DEFAULT_CLONE_LABELS = {
    "accent": "american",
    "age": "adult",
    "gender": "neutral",
    "use_case": "personalized_video",
}


class ElevenLabsVoiceAdapter(IVoiceProvider):
    """
    ElevenLabs text-to-speech and instant voice cloning.
    The SDK client is constructed lazily on first use.
    """

    def __init__(self, config: Settings = default_settings, client: Optional[ElevenLabs] = None):
        self.config = config
        self._client = client

    @property
    def client(self) -> ElevenLabs:
        if self._client is None:
            if not self.config.ELEVENLABS_API_KEY:
                raise NamespliceError("ELEVENLABS_API_KEY is not configured.")
            self._client = ElevenLabs(
                api_key=self.config.ELEVENLABS_API_KEY,
                timeout=self.config.ELEVENLABS_TIMEOUT_SECONDS,
            )
        return self._client

    def synthesize(self, text: str, voice_id: str, style: StyleParams) -> bytes:
        logger.info(f"Generating speech for {text!r} with voice {voice_id}")
        try:
            chunks = self.client.text_to_speech.convert(
                voice_id=voice_id,
                text=text,
                model_id=self.config.ELEVENLABS_MODEL_ID,
                output_format=self.config.ELEVENLABS_OUTPUT_FORMAT,
                voice_settings=VoiceSettings(
                    stability=style.stability,
                    similarity_boost=style.similarity_boost,
                    style=style.style,
                    use_speaker_boost=style.use_speaker_boost,
                ),
            )
            # The SDK streams the body; draining it is where transport errors surface
            audio = b"".join(chunks)
        except ApiError as e:
            raise classify_api_error(e, voice_id=voice_id, action="Speech generation") from e
        except httpx.TransportError as e:
            logger.error(f"ElevenLabs unreachable during synthesis: {e}")
            raise TransientUpstreamError("Voice synthesis service is unavailable.", provider=PROVIDER) from e

        if not audio:
            raise TransientUpstreamError("Voice synthesis returned empty audio.", provider=PROVIDER)

        logger.info(f"Speech generated: {len(audio)} bytes")
        return audio

    def clone_voice(self,
                    sample: Recording,
                    name: str,
                    description: Optional[str] = None,
                    labels: Optional[Dict[str, str]] = None) -> VoiceProfile:
        merged_labels = {**DEFAULT_CLONE_LABELS, **(labels or {})}
        logger.info(f"Cloning voice '{name}' from {sample.path}")

        kwargs: Dict[str, Any] = {
            "name": name,
            "labels": json.dumps(merged_labels),
        }
        if description:
            kwargs["description"] = description

        try:
            with open(sample.path, "rb") as f:
                response = self.client.voices.ivc.create(
                    files=[(sample.path.name, f, sample.media_type)],
                    **kwargs,
                )
        except ApiError as e:
            raise classify_api_error(e, voice_id=None, action="Voice cloning") from e
        except httpx.TransportError as e:
            raise TransientUpstreamError("Voice cloning service is unavailable.", provider=PROVIDER) from e

        logger.info(f"Voice cloned successfully: {response.voice_id}")
        return VoiceProfile(
            voice_id=response.voice_id,
            name=name,
            preview_url=getattr(response, "preview_url", None),
            labels=merged_labels,
        )

    def get_voice(self, voice_id: str) -> VoiceProfile:
        try:
            voice = self.client.voices.get(voice_id)
        except ApiError as e:
            raise classify_api_error(e, voice_id=voice_id, action="Fetching voice details") from e
        except httpx.TransportError as e:
            raise TransientUpstreamError("Voice service is unavailable.", provider=PROVIDER) from e
        return _to_profile(voice)

    def list_voices(self) -> List[VoiceProfile]:
        try:
            response = self.client.voices.get_all()
        except ApiError as e:
            raise classify_api_error(e, voice_id=None, action="Fetching voices") from e
        except httpx.TransportError as e:
            raise TransientUpstreamError("Voice service is unavailable.", provider=PROVIDER) from e
        return [_to_profile(v) for v in (response.voices or [])]

    def delete_voice(self, voice_id: str) -> None:
        try:
            self.client.voices.delete(voice_id)
        except ApiError as e:
            raise classify_api_error(e, voice_id=voice_id, action="Deleting voice") from e
        except httpx.TransportError as e:
            raise TransientUpstreamError("Voice service is unavailable.", provider=PROVIDER) from e
        logger.info(f"Voice deleted: {voice_id}")


def _to_profile(voice: Any) -> VoiceProfile:
    return VoiceProfile(
        voice_id=voice.voice_id,
        name=getattr(voice, "name", None) or "",
        preview_url=getattr(voice, "preview_url", None),
        labels=dict(getattr(voice, "labels", None) or {}),
    )


def _body_text(body: Any) -> str:
    if body is None:
        return ""
    if isinstance(body, (dict, list)):
        return json.dumps(body)
    return str(body)


def classify_api_error(error: ApiError, voice_id: Optional[str], action: str) -> NamespliceError:
    """
    Maps an ElevenLabs HTTP error onto the shared taxonomy.

    404, or a 400 whose body names a missing voice, means the reference is bad
    and retrying cannot help. Throttling and server errors are transient.
    """
    status = error.status_code
    body = _body_text(error.body)
    details = {"provider": PROVIDER, "status_code": status, "upstream_body": body[:500]}
    logger.error(f"ElevenLabs {action.lower()} error ({status}): {body[:200]}")

    voice_missing = status == 404 or (status == 400 and "voice_not_found" in body)
    if voice_missing:
        return NonRetryableReferenceError(f"Unknown voice profile: {voice_id}", {**details, "voice_id": voice_id})

    if status is None or status == 429 or status >= 500:
        return TransientUpstreamError(f"{action} failed: {status}", provider=PROVIDER, status_code=status,
                                      details={"upstream_body": body[:500]})

    if status in (401, 403):
        return NamespliceError(f"{action} was not authorized by the provider.", details)

    return ValidationError(f"{action} failed: {status} {body[:200]}", details)
