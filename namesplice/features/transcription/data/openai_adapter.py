# File: namesplice/features/transcription/data/openai_adapter.py
import logging
from typing import Any, Dict, List, Optional

import openai
from openai import OpenAI

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.errors import NamespliceError, TransientUpstreamError, ValidationError
from namesplice.core.shared_types import Recording
from ..domain.interfaces import ITranscriber
from ..domain.models import TranscriptionResult, WordTiming

logger = logging.getLogger(__name__)

PROVIDER = "openai-whisper"


class OpenAIWhisperAdapter(ITranscriber):
    """
    Hosted Whisper transcription with word-level timestamps.
    The client is built lazily so constructing the adapter never touches the network.
    """

    def __init__(self, config: Settings = default_settings, client: Optional[OpenAI] = None):
        self.config = config
        self._client = client

    @property
    def name(self) -> str:
        return PROVIDER

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.config.OPENAI_API_KEY:
                raise NamespliceError("OPENAI_API_KEY is not configured.")
            self._client = OpenAI(api_key=self.config.OPENAI_API_KEY)
        return self._client

    def transcribe(self, recording: Recording) -> TranscriptionResult:
        logger.info(f"Requesting {self.config.WHISPER_API_MODEL} transcript for {recording.path}...")

        try:
            with open(recording.path, "rb") as f:
                response = self.client.audio.transcriptions.create(
                    model=self.config.WHISPER_API_MODEL,
                    file=(recording.path.name, f, recording.media_type),
                    response_format="verbose_json",
                    timestamp_granularities=["word"],
                    language=self.config.WHISPER_LANGUAGE,
                )
        except (openai.APIConnectionError, openai.APITimeoutError) as e:
            logger.error(f"Whisper API unreachable: {e}")
            raise TransientUpstreamError("Speech recognition service is unavailable.", provider=PROVIDER) from e
        except openai.APIStatusError as e:
            raise _classify_status_error(e) from e

        payload = response.model_dump() if hasattr(response, "model_dump") else dict(response)
        result = parse_verbose_json(payload, source_file=str(recording.path), model=self.config.WHISPER_API_MODEL)
        logger.info(f"Transcription completed: {len(result.words)} words, text={result.full_text[:80]!r}")
        return result


def _classify_status_error(error: "openai.APIStatusError") -> NamespliceError:
    status = error.status_code
    body = {"upstream_message": str(error)}
    if status == 429 or status == 408 or status >= 500:
        logger.error(f"Whisper API failed with retryable status {status}: {error}")
        return TransientUpstreamError(
            "Speech recognition service is temporarily failing.", provider=PROVIDER, status_code=status, details=body
        )
    if status in (400, 413, 415):
        return ValidationError("The recording was rejected by the speech recognition service.",
                               {"status_code": status, **body})

    logger.error(f"Whisper API rejected the request with status {status}: {error}")
    return NamespliceError("Speech recognition request was refused.", {"status_code": status, **body})


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_verbose_json(payload: Dict[str, Any], source_file: str, model: str) -> TranscriptionResult:
    """
    Converts a `verbose_json` transcription payload into the domain model.
    Missing or malformed fields degrade to empty values rather than raising.
    """
    words: List[WordTiming] = []
    for raw in payload.get("words") or []:
        if not isinstance(raw, dict):
            continue
        text = str(raw.get("word") or "").strip()
        if not text:
            continue
        words.append(WordTiming(
            word=text,
            start=_optional_float(raw.get("start")),
            end=_optional_float(raw.get("end")),
        ))

    return TranscriptionResult(
        source_file=source_file,
        language=payload.get("language") or "unknown",
        model_used=model,
        full_text=payload.get("text") or "",
        words=words,
        duration_seconds=_optional_float(payload.get("duration")),
        processing_meta={"provider": PROVIDER},
    )
