from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from elevenlabs.core.api_error import ApiError

from namesplice.core.config.settings import Settings
from namesplice.core.errors import NonRetryableReferenceError, TransientUpstreamError
from namesplice.core.shared_types import Recording
from namesplice.features.voice.data.elevenlabs_adapter import ElevenLabsVoiceAdapter
from namesplice.features.voice.domain.models import StyleParams


def _adapter():
    client = MagicMock()
    config = Settings()
    config.ELEVENLABS_MODEL_ID = "eleven_monolingual_v1"
    return ElevenLabsVoiceAdapter(config, client=client), client


def test_synthesize_joins_streamed_chunks():
    adapter, client = _adapter()
    client.text_to_speech.convert.return_value = iter([b"ab", b"cd"])

    audio = adapter.synthesize("Sarah", "voice-1", StyleParams.for_names())

    assert audio == b"abcd"
    kwargs = client.text_to_speech.convert.call_args.kwargs
    assert kwargs["voice_id"] == "voice-1"
    assert kwargs["model_id"] == "eleven_monolingual_v1"
    assert kwargs["voice_settings"].stability == 0.6
    assert kwargs["voice_settings"].similarity_boost == 0.9


def test_empty_audio_is_transient():
    adapter, client = _adapter()
    client.text_to_speech.convert.return_value = iter([])
    with pytest.raises(TransientUpstreamError):
        adapter.synthesize("Sarah", "voice-1", StyleParams())


def test_unknown_voice_maps_to_reference_error():
    adapter, client = _adapter()
    client.text_to_speech.convert.side_effect = ApiError(status_code=404, body={"detail": "voice not found"})
    with pytest.raises(NonRetryableReferenceError):
        adapter.synthesize("Sarah", "ghost", StyleParams())


def test_network_errors_are_transient():
    adapter, client = _adapter()
    client.text_to_speech.convert.side_effect = httpx.ConnectError("refused")
    with pytest.raises(TransientUpstreamError):
        adapter.synthesize("Sarah", "voice-1", StyleParams())


def test_clone_voice_sends_default_labels(audio_file):
    adapter, client = _adapter()
    client.voices.ivc.create.return_value = SimpleNamespace(voice_id="new-voice", preview_url=None)

    profile = adapter.clone_voice(Recording.from_path(audio_file), "Alex", description="Founder pitch")

    assert profile.voice_id == "new-voice"
    assert profile.labels["use_case"] == "personalized_video"
    kwargs = client.voices.ivc.create.call_args.kwargs
    assert kwargs["name"] == "Alex"
    assert '"use_case": "personalized_video"' in kwargs["labels"]
    assert kwargs["files"][0][0] == "pitch.mp3"


def test_real_client_exposes_the_calls_the_adapter_makes():
    config = Settings()
    config.ELEVENLABS_API_KEY = "test-key"
    client = ElevenLabsVoiceAdapter(config).client

    assert callable(client.voices.ivc.create)
    assert callable(client.voices.get)
    assert callable(client.voices.get_all)
    assert callable(client.voices.delete)
    assert callable(client.text_to_speech.convert)

def test_list_voices():
    adapter, client = _adapter()
    client.voices.get_all.return_value = SimpleNamespace(
        voices=[SimpleNamespace(voice_id="v1", name="Alex", preview_url="https://x/p.mp3", labels={"accent": "us"})]
    )

    voices = adapter.list_voices()

    assert [v.voice_id for v in voices] == ["v1"]
    assert voices[0].labels == {"accent": "us"}
