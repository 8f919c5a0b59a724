import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from namesplice.core.database.base import utc_now
from namesplice.core.database.connection import SessionLocal
from namesplice.core.errors import ConcurrentUpdateError
from .sql_models import ProjectSpanModel
from ..domain.interfaces import ISpanRepository
from ..domain.models import PlaceholderSpan, StoredSpan

logger = logging.getLogger(__name__)


def _to_domain(row: ProjectSpanModel) -> StoredSpan:
    return StoredSpan(
        project_id=row.project_id,
        span=PlaceholderSpan(start=row.start_time, end=row.end_time, confidence=row.confidence),
        version=row.version,
        transcript=row.transcript,
    )


class SqlSpanRepository(ISpanRepository):

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def get(self, project_id: str) -> Optional[StoredSpan]:
        with self.session_factory() as db:
            row = db.get(ProjectSpanModel, project_id)
            return _to_domain(row) if row else None

    def save(self,
             project_id: str,
             span: PlaceholderSpan,
             transcript: Optional[str] = None,
             expected_version: Optional[int] = None) -> StoredSpan:
        """
        Overwrite semantics.
        With expected_version the UPDATE is conditional on the stored version,
        so two racing writers cannot both succeed.
        """
        values = {
            "start_time": span.start,
            "end_time": span.end,
            "confidence": span.confidence,
            "transcript": transcript,
            "updated_at": utc_now(),
        }

        with self.session_factory() as db:
            try:
                existing = db.get(ProjectSpanModel, project_id)

                if existing is None:
                    if expected_version not in (None, 0):
                        raise ConcurrentUpdateError(
                            "Project span was removed or never stored.",
                            {"project_id": project_id, "expected_version": expected_version, "actual_version": 0},
                        )
                    row = ProjectSpanModel(project_id=project_id, version=1, **values)
                    db.add(row)
                    db.commit()
                    db.refresh(row)
                    logger.info(f"Stored first span for project {project_id}: {span.start:.2f}-{span.end:.2f}s")
                    return _to_domain(row)

                query = db.query(ProjectSpanModel).filter(ProjectSpanModel.project_id == project_id)
                if expected_version is not None:
                    query = query.filter(ProjectSpanModel.version == expected_version)

                updated = query.update(
                    {**values, "version": ProjectSpanModel.version + 1},
                    synchronize_session=False,
                )
                if updated == 0:
                    db.rollback()
                    raise ConcurrentUpdateError(
                        "Project span was changed by another detection run.",
                        {"project_id": project_id, "expected_version": expected_version,
                         "actual_version": existing.version},
                    )
                db.commit()
            except IntegrityError as e:
                # Another writer inserted the first span between our read and insert
                db.rollback()
                raise ConcurrentUpdateError(
                    "Project span was created concurrently.", {"project_id": project_id}
                ) from e

            db.expire_all()
            row = db.get(ProjectSpanModel, project_id)
            logger.info(f"Overwrote span for project {project_id} (v{row.version}): {span.start:.2f}-{span.end:.2f}s")
            return _to_domain(row)
