from abc import ABC, abstractmethod
from typing import Optional

from .models import PlaceholderSpan, StoredSpan


class ISpanRepository(ABC):
    """
    Contract for PlaceholderSpan persistence.
    Exactly one span per project: saving overwrites, never appends.
    """

    @abstractmethod
    def get(self, project_id: str) -> Optional[StoredSpan]:
        """Returns the retained span for the project, if any."""
        pass

    @abstractmethod
    def save(self,
             project_id: str,
             span: PlaceholderSpan,
             transcript: Optional[str] = None,
             expected_version: Optional[int] = None) -> StoredSpan:
        """
        Overwrites the project's span.

        Args:
            expected_version: When given, the write only succeeds if the stored
                version still equals it (0 means "no span stored yet").
                When None, the last write wins.

        Raises:
            ConcurrentUpdateError: The version check failed.
        """
        pass
