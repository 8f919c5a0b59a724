# File: namesplice/features/transcription/data/whisper_adapter.py
import whisper
import logging
from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.errors import TransientUpstreamError
from namesplice.core.model_lifecycle.orchestrator import ModelOrchestrator
from namesplice.core.model_lifecycle.types import ModelType
from namesplice.core.shared_types import Recording
from ..domain.interfaces import ITranscriber
from ..domain.models import TranscriptionResult, TranscriptionSegment, WordTiming

logger = logging.getLogger(__name__)


class LocalWhisperAdapter(ITranscriber):
    """
    Runs Whisper on this machine. No upload limit applies, but the pre-flight
    checks still run so both backends accept exactly the same recordings.
    """

    def __init__(self, config: Settings = default_settings, orchestrator: ModelOrchestrator = None):
        self.config = config
        self.orchestrator = orchestrator or ModelOrchestrator()
        self.device = config.WHISPER_DEVICE

    @property
    def name(self) -> str:
        return f"local-whisper-{self.config.WHISPER_MODEL_NAME}"

    def transcribe(self, recording: Recording) -> TranscriptionResult:
        model_size = self.config.WHISPER_MODEL_NAME
        logger.info(f"Requesting Whisper ({model_size}) for {recording.path}...")

        def loader():
            logger.debug(f"Loading Whisper {model_size} on {self.device}...")
            return whisper.load_model(model_size, device=self.device)

        try:
            model = self.orchestrator.request_model(ModelType.WHISPER, loader, variant=model_size)
            result_raw = model.transcribe(
                str(recording.path),
                fp16=(self.device == "cuda"),
                language=self.config.WHISPER_LANGUAGE,
                word_timestamps=True
            )
        except RuntimeError as e:
            # CUDA OOM and ffmpeg decode failures surface as RuntimeError
            logger.exception(f"Local Whisper failed on {recording.path}")
            raise TransientUpstreamError("Local speech recognition failed.", provider=self.name) from e

        segments = []
        for seg in result_raw.get('segments', []):
            words_list = []
            for w in seg.get('words', []):
                words_list.append(WordTiming(
                    word=w['word'].strip(),
                    start=float(w['start']) if w.get('start') is not None else None,
                    end=float(w['end']) if w.get('end') is not None else None,
                    confidence=float(w['probability']) if w.get('probability') is not None else None
                ))

            segments.append(TranscriptionSegment(
                start=float(seg['start']),
                end=float(seg['end']),
                text=seg['text'].strip(),
                confidence=float(seg.get('avg_logprob', 0.0)),  # Approximation using logprob
                words=words_list,
                metadata={
                    "compression_ratio": seg.get('compression_ratio'),
                    "no_speech_prob": seg.get('no_speech_prob')
                }
            ))

        return TranscriptionResult(
            source_file=str(recording.path),
            language=result_raw.get('language', 'unknown'),
            model_used=model_size,
            full_text=result_raw.get('text', '').strip(),
            segments=segments,
            processing_meta={"device": self.device, "provider": "local-whisper"}
        )
