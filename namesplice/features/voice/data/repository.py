from typing import Optional

from namesplice.core.database.connection import SessionLocal
from .sql_models import ProspectClipModel, VoiceProfileModel
from ..domain.interfaces import IVoiceRepository
from ..domain.models import VoiceProfile
from ..domain.records import ProspectClipRecord


class SqlVoiceRepository(IVoiceRepository):

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def save_profile(self, project_id: str, profile: VoiceProfile) -> None:
        with self.session_factory() as db:
            row = db.get(VoiceProfileModel, project_id)
            if row is None:
                row = VoiceProfileModel(project_id=project_id)
                db.add(row)
            row.voice_id = profile.voice_id
            row.name = profile.name
            row.preview_url = profile.preview_url
            row.labels = dict(profile.labels)
            db.commit()

    def get_profile(self, project_id: str) -> Optional[VoiceProfile]:
        with self.session_factory() as db:
            row = db.get(VoiceProfileModel, project_id)
            if row is None:
                return None
            return VoiceProfile(
                voice_id=row.voice_id,
                name=row.name or "",
                preview_url=row.preview_url,
                labels=dict(row.labels or {}),
            )

    def save_clip(self, record: ProspectClipRecord) -> None:
        with self.session_factory() as db:
            # merge() gives upsert-by-primary-key semantics
            db.merge(ProspectClipModel(
                prospect_id=record.prospect_id,
                project_id=record.project_id,
                text=record.text,
                voice_id=record.voice_id,
                storage_key=record.storage_key,
                audio_url=record.audio_url,
                duration_seconds=record.duration_seconds,
            ))
            db.commit()

    def get_clip(self, prospect_id: str) -> Optional[ProspectClipRecord]:
        with self.session_factory() as db:
            row = db.get(ProspectClipModel, prospect_id)
            if row is None:
                return None
            return ProspectClipRecord(
                prospect_id=row.prospect_id,
                project_id=row.project_id,
                text=row.text,
                voice_id=row.voice_id,
                duration_seconds=row.duration_seconds,
                audio_url=row.audio_url,
                storage_key=row.storage_key,
            )
