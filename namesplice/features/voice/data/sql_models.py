from sqlalchemy import Column, String, Text, Float, DateTime, JSON
from namesplice.core.database.base import Base, utc_now


class VoiceProfileModel(Base):
    """
    The cloned voice used by a project. Referenced, not owned:
    the voice itself lives with the synthesis provider.
    """
    __tablename__ = "voice_profiles"

    project_id = Column(String(64), primary_key=True)
    voice_id = Column(String(128), nullable=False, index=True)
    name = Column(String, nullable=False, default="")
    preview_url = Column(Text, nullable=True)
    labels = Column(JSON, default=dict)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)


class ProspectClipModel(Base):
    """
    One synthesized name clip per prospect. Regeneration overwrites the row.
    """
    __tablename__ = "prospect_clips"

    prospect_id = Column(String(64), primary_key=True)
    project_id = Column(String(64), nullable=False, index=True)

    text = Column(Text, nullable=False)
    voice_id = Column(String(128), nullable=False)

    # Blob store pointers
    storage_key = Column(String, nullable=True)
    audio_url = Column(Text, nullable=True)

    # Measured from the audio, used by the compositor to pick a fit policy
    duration_seconds = Column(Float, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
