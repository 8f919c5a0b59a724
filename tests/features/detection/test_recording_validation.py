import pytest

from namesplice.core.config.settings import settings
from namesplice.core.errors import ValidationError
from namesplice.core.shared_types import Recording
from namesplice.features.detection.domain.validation import normalize_media_type, validate_recording

LIMIT = 25 * 1024 * 1024


def _validate(recording):
    validate_recording(recording, LIMIT, settings.ALLOWED_MEDIA_TYPES)


def test_accepts_allowed_audio(audio_file):
    _validate(Recording.from_path(audio_file))


@pytest.mark.parametrize("media_type", ["audio/x-wav", "audio/mp3", "video/quicktime", "audio/webm;codecs=opus"])
def test_accepts_aliases_and_parameters(audio_file, media_type):
    _validate(Recording(path=audio_file, media_type=media_type, size_bytes=100))


def test_rejects_oversized_file_before_upload(audio_file):
    recording = Recording(path=audio_file, media_type="audio/mpeg", size_bytes=LIMIT + 1)

    with pytest.raises(ValidationError) as exc_info:
        _validate(recording)
    assert exc_info.value.reason == "File size must be less than 25MB"


def test_exact_limit_is_allowed(audio_file):
    _validate(Recording(path=audio_file, media_type="audio/mpeg", size_bytes=LIMIT))


def test_rejects_unsupported_type(audio_file):
    with pytest.raises(ValidationError):
        _validate(Recording(path=audio_file, media_type="image/png", size_bytes=10))


def test_rejects_missing_and_empty_files(tmp_path):
    with pytest.raises(ValidationError):
        _validate(Recording(path=tmp_path / "nope.mp3", media_type="audio/mpeg", size_bytes=10))

    empty = tmp_path / "empty.mp3"
    empty.touch()
    with pytest.raises(ValidationError):
        _validate(Recording.from_path(empty))


def test_normalize_media_type():
    assert normalize_media_type("Audio/MP3") == "audio/mpeg"
    assert normalize_media_type("video/mp4; codecs=avc1") == "video/mp4"
    assert normalize_media_type(None) == ""
