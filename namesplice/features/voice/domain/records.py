from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ProspectClipRecord:
    """
    What is persisted about a prospect's clip. The audio itself lives in the
    blob store; only its key and URL are kept here.
    """
    prospect_id: str
    project_id: str
    text: str
    voice_id: str
    duration_seconds: float
    audio_url: Optional[str] = None
    storage_key: Optional[str] = None
