from sqlalchemy import Column, String, Text, Float, Integer, DateTime
from namesplice.core.database.base import Base, utc_now


class ProjectSpanModel(Base):
    """
    The one retained placeholder span per project.
    project_id is owned by the external project store, so it is an opaque string.
    """
    __tablename__ = "project_spans"

    project_id = Column(String(64), primary_key=True)

    start_time = Column(Float, nullable=False)
    end_time = Column(Float, nullable=False)
    confidence = Column(Float, nullable=False, default=1.0)

    # Kept for diagnosis when a later re-record behaves differently
    transcript = Column(Text, nullable=True)

    # Optimistic lock: incremented on every overwrite
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
