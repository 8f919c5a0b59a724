from unittest.mock import MagicMock

import pytest

from namesplice.core.config.settings import Settings
from namesplice.core.errors import TransientUpstreamError
from namesplice.core.model_lifecycle.types import ModelType
from namesplice.core.shared_types import Recording
from namesplice.features.detection.domain.matcher import find_placeholder
from namesplice.features.transcription.data.whisper_adapter import LocalWhisperAdapter

RAW_RESULT = {
    "text": " Hi prospect, quick idea for you.",
    "language": "en",
    "segments": [
        {
            "start": 0.0, "end": 2.4, "text": " Hi prospect, quick idea for you.",
            "avg_logprob": -0.2, "compression_ratio": 1.1, "no_speech_prob": 0.01,
            "words": [
                {"word": " Hi", "start": 0.0, "end": 0.3, "probability": 0.98},
                {"word": " prospect,", "start": 0.35, "end": 0.9, "probability": 0.91},
                {"word": " quick", "start": 1.0, "end": 1.3, "probability": 0.97},
            ],
        }
    ],
}


def _adapter(model=None, error=None):
    orchestrator = MagicMock()
    if error:
        orchestrator.request_model.side_effect = error
    else:
        orchestrator.request_model.return_value = model
    config = Settings()
    config.WHISPER_MODEL_NAME = "base"
    return LocalWhisperAdapter(config, orchestrator=orchestrator), orchestrator


def test_words_come_from_segments(audio_file):
    model = MagicMock()
    model.transcribe.return_value = RAW_RESULT
    adapter, orchestrator = _adapter(model)

    result = adapter.transcribe(Recording.from_path(audio_file))

    assert orchestrator.request_model.call_args.args[0] == ModelType.WHISPER
    assert orchestrator.request_model.call_args.kwargs["variant"] == "base"
    assert model.transcribe.call_args.kwargs["word_timestamps"] is True
    assert result.full_text == "Hi prospect, quick idea for you."
    assert [w.word for w in result.all_words] == ["Hi", "prospect,", "quick"]

    span = find_placeholder(result, "prospect").span
    assert (span.start, span.end) == (0.35, 0.9)


def test_runtime_failures_are_transient(audio_file):
    adapter, _ = _adapter(error=RuntimeError("CUDA out of memory"))
    with pytest.raises(TransientUpstreamError):
        adapter.transcribe(Recording.from_path(audio_file))
