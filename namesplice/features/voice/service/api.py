import logging
from typing import Dict, List, Optional

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.shared_types import Recording
from namesplice.features.detection.domain.validation import validate_recording
from namesplice.features.storage.domain.interfaces import IBlobStore
from ..data.repository import SqlVoiceRepository
from ..domain.interfaces import IVoiceProvider, IVoiceRepository
from ..domain.models import StyleParams, SynthesizedClip, VoiceProfile
from .synthesizer import VoiceSynthesisEngine

logger = logging.getLogger(__name__)


def get_voice_provider(config: Settings = default_settings) -> IVoiceProvider:
    # Lazy import keeps the SDK off the import path of callers that only plan or deliver
    from ..data.elevenlabs_adapter import ElevenLabsVoiceAdapter
    return ElevenLabsVoiceAdapter(config)


def synthesize(text: str,
               voice: VoiceProfile,
               style: Optional[StyleParams] = None,
               provider: Optional[IVoiceProvider] = None,
               blob_store: Optional[IBlobStore] = None,
               storage_key: Optional[str] = None,
               config: Settings = default_settings) -> SynthesizedClip:
    engine = VoiceSynthesisEngine(
        provider or get_voice_provider(config),
        blob_store=blob_store,
        config=config,
    )
    return engine.synthesize(text, voice, style=style, storage_key=storage_key)


def clone_voice(sample: Recording,
                name: str,
                description: Optional[str] = None,
                labels: Optional[Dict[str, str]] = None,
                provider: Optional[IVoiceProvider] = None,
                config: Settings = default_settings) -> VoiceProfile:
    """
    Creates an instant voice clone from a speech sample.
    The sample passes the same pre-flight checks as a detection upload.
    """
    validate_recording(sample, config.MAX_UPLOAD_BYTES, config.ALLOWED_MEDIA_TYPES)
    provider = provider or get_voice_provider(config)
    return provider.clone_voice(sample, name, description=description, labels=labels)


def register_project_voice(project_id: str,
                           profile: VoiceProfile,
                           repository: Optional[IVoiceRepository] = None) -> None:
    (repository or SqlVoiceRepository()).save_profile(project_id, profile)
    logger.info(f"Project {project_id} now uses voice {profile.voice_id}")


def get_project_voice(project_id: str, repository: Optional[IVoiceRepository] = None) -> Optional[VoiceProfile]:
    return (repository or SqlVoiceRepository()).get_profile(project_id)


def get_voice(voice_id: str, provider: Optional[IVoiceProvider] = None,
              config: Settings = default_settings) -> VoiceProfile:
    return (provider or get_voice_provider(config)).get_voice(voice_id)


def list_voices(provider: Optional[IVoiceProvider] = None, config: Settings = default_settings) -> List[VoiceProfile]:
    return (provider or get_voice_provider(config)).list_voices()


def delete_voice(voice_id: str, provider: Optional[IVoiceProvider] = None,
                 config: Settings = default_settings) -> None:
    (provider or get_voice_provider(config)).delete_voice(voice_id)
