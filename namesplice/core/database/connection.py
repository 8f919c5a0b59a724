# File: namesplice/core/database/connection.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from namesplice.core.config.settings import settings
from .base import Base


def build_engine(url: str):
    # check_same_thread=False is needed only for SQLite
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None):
    """
    Creates all tables registered on the shared Base.
    Feature models are imported here so they register before create_all.
    """
    import namesplice.features.detection.data.sql_models  # noqa: F401
    import namesplice.features.voice.data.sql_models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def get_db():
    """Dependency for obtaining a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
