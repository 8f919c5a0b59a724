import logging
from typing import Optional

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.shared_types import Recording
from namesplice.features.transcription.domain.interfaces import ITranscriber
from namesplice.features.transcription.service.api import get_transcriber
from ..data.repository import SqlSpanRepository
from ..domain.interfaces import ISpanRepository
from ..domain.models import DetectionResult, StoredSpan
from .detector import PlaceholderDetector

logger = logging.getLogger(__name__)


def detect_placeholder(recording: Recording,
                       transcriber: Optional[ITranscriber] = None,
                       config: Settings = default_settings) -> DetectionResult:
    """
    Standalone API: finds the placeholder span without persisting anything.
    """
    detector = PlaceholderDetector(transcriber or get_transcriber(config), config)
    return detector.detect(recording)


def detect_and_persist(project_id: str,
                       recording: Recording,
                       repository: Optional[ISpanRepository] = None,
                       transcriber: Optional[ITranscriber] = None,
                       expected_version: Optional[int] = None,
                       config: Settings = default_settings) -> DetectionResult:
    """
    Runs detection and, on a match, overwrites the project's retained span.
    Nothing is written when the placeholder is absent or detection fails.
    """
    result = detect_placeholder(recording, transcriber=transcriber, config=config)

    if result.detected:
        repo = repository or SqlSpanRepository()
        stored = repo.save(project_id, result.span, transcript=result.transcript, expected_version=expected_version)
        logger.info(f"Project {project_id} span persisted at version {stored.version}")

    return result


def get_project_span(project_id: str, repository: Optional[ISpanRepository] = None) -> Optional[StoredSpan]:
    return (repository or SqlSpanRepository()).get(project_id)
