# File: namesplice/features/detection/service/detector.py
import logging

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.shared_types import Recording
from namesplice.features.transcription.domain.interfaces import ITranscriber
from ..domain.matcher import find_placeholder
from ..domain.models import DetectionResult
from ..domain.validation import validate_recording

logger = logging.getLogger(__name__)


class PlaceholderDetector:
    """
    Locates the placeholder word in a recording.
    No side effects beyond the outbound transcription request.
    """

    def __init__(self, transcriber: ITranscriber, config: Settings = default_settings):
        self.transcriber = transcriber
        self.config = config

    def detect(self, recording: Recording) -> DetectionResult:
        # 1. Fail fast before any network call
        validate_recording(recording, self.config.MAX_UPLOAD_BYTES, self.config.ALLOWED_MEDIA_TYPES)

        # 2. Transcribe with word timing (TransientUpstreamError propagates)
        logger.info(f"Detecting '{self.config.PLACEHOLDER_TOKEN}' in {recording.path} via {self.transcriber.name}")
        transcript = self.transcriber.transcribe(recording)

        # 3. First-match scan
        result = find_placeholder(
            transcript,
            self.config.PLACEHOLDER_TOKEN,
            duration_seconds=recording.duration_seconds,
        )

        if result.detected:
            if result.occurrences > 1:
                logger.warning(
                    f"Placeholder spoken {result.occurrences} times in {recording.path}; using the first occurrence."
                )
            logger.info(f"Found placeholder at {result.span.start:.2f}-{result.span.end:.2f}s")
        else:
            logger.info(f"Placeholder not found. Transcript: {result.transcript[:120]!r}")

        return result
