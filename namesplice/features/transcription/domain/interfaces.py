from abc import ABC, abstractmethod
from namesplice.core.shared_types import Recording
from .models import TranscriptionResult


class ITranscriber(ABC):
    """
    Contract for any ASR (Automatic Speech Recognition) engine that can
    return word-level timestamps.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier of the backend, used in logs and error payloads."""
        pass

    @abstractmethod
    def transcribe(self, recording: Recording) -> TranscriptionResult:
        """
        Transcribes the recording with word-level timing.

        Args:
            recording: A validated recording on local disk.

        Returns:
            Structured TranscriptionResult.

        Raises:
            TransientUpstreamError: The engine was unreachable or failed.
        """
        pass
