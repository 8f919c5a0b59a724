import pytest
from elevenlabs.core.api_error import ApiError

from namesplice.core.errors import (
    NamespliceError,
    NonRetryableReferenceError,
    TransientUpstreamError,
    ValidationError,
)
from namesplice.features.voice.data.elevenlabs_adapter import classify_api_error
from namesplice.features.voice.domain.models import StyleParams, VoiceProfile


def test_style_defaults():
    general = StyleParams.general()
    names = StyleParams.for_names()

    assert (general.stability, general.similarity_boost, general.style, general.use_speaker_boost) == (0.5, 0.8, 0.5, True)
    assert (names.stability, names.similarity_boost, names.style, names.use_speaker_boost) == (0.6, 0.9, 0.3, True)


def test_style_validation_lists_every_bad_dial():
    style = StyleParams(stability=1.5, similarity_boost=-0.1, style=0.5)

    with pytest.raises(ValidationError) as exc_info:
        style.validate()

    assert len(exc_info.value.details["errors"]) == 2


@pytest.mark.parametrize("value", [0.0, 1.0])
def test_style_bounds_are_inclusive(value):
    StyleParams(stability=value, similarity_boost=value, style=value).validate()


def test_style_payload_uses_camel_case():
    assert StyleParams.for_names().to_payload() == {
        "stability": 0.6,
        "similarityBoost": 0.9,
        "style": 0.3,
        "useSpeakerBoost": True,
    }


def test_voice_profile_requires_id():
    with pytest.raises(ValidationError):
        VoiceProfile(voice_id="  ")


@pytest.mark.parametrize("status, body, expected", [
    (404, {"detail": "not found"}, NonRetryableReferenceError),
    (400, {"detail": {"status": "voice_not_found"}}, NonRetryableReferenceError),
    (429, "rate limited", TransientUpstreamError),
    (500, None, TransientUpstreamError),
    (503, None, TransientUpstreamError),
    (401, "bad key", NamespliceError),
    (422, {"detail": "text too long"}, ValidationError),
])
def test_classify_api_error(status, body, expected):
    error = classify_api_error(ApiError(status_code=status, body=body), voice_id="v-1", action="Speech generation")

    assert type(error) is expected
    assert error.details["status_code"] == status


def test_unknown_voice_is_not_retryable():
    error = classify_api_error(ApiError(status_code=404, body=None), voice_id="v-missing", action="Speech generation")
    assert not error.retryable
    assert "v-missing" in error.reason
