from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.shared_types import Recording
from ..domain.interfaces import ITranscriber
from ..domain.models import TranscriptionResult


def get_transcriber(config: Settings = default_settings) -> ITranscriber:
    """
    Picks the ASR backend named by TRANSCRIBER_BACKEND.
    Adapters are imported lazily so the hosted backend never pulls in torch.
    """
    backend = config.TRANSCRIBER_BACKEND.lower()
    if backend == "openai":
        from ..data.openai_adapter import OpenAIWhisperAdapter
        return OpenAIWhisperAdapter(config)
    if backend == "local":
        from ..data.whisper_adapter import LocalWhisperAdapter
        return LocalWhisperAdapter(config)
    raise ValueError(f"Unknown transcriber backend: '{config.TRANSCRIBER_BACKEND}'. Available: ['openai', 'local']")


def run_transcription(recording: Recording, config: Settings = default_settings) -> TranscriptionResult:
    """
    Standalone API for running transcription directly.
    Useful for testing or CLI tools without the detection pipeline.
    """
    return get_transcriber(config).transcribe(recording)
