# File: tests/conftest.py

import os
import logging
import tempfile
from pathlib import Path

import pytest
import sqlalchemy
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker
from sqlalchemy_utils import database_exists, create_database

# 1. Point the app at a throwaway SQLite file unless a database was chosen explicitly.
#    Must happen before anything imports namesplice.core.database.connection.
_TMP_DB_DIR = Path(tempfile.mkdtemp(prefix="namesplice-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP_DB_DIR / 'test_namesplice.db'}")

# 2. Import Settings
from namesplice.core.config.settings import settings
from namesplice.core.database.connection import build_engine, init_db

# 3. Create Test Engine
TEST_ENGINE = build_engine(settings.DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=TEST_ENGINE)


@pytest.fixture(scope="session", autouse=True)
def global_setup():
    """
    Runs once per test session.
    Ensures DB exists and quiets chatty client libraries.
    """
    for name in ("httpx", "openai", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)

    if not database_exists(TEST_ENGINE.url):
        create_database(TEST_ENGINE.url)

    init_db(bind=TEST_ENGINE)

    yield


@pytest.fixture(scope="function", autouse=True)
def clean_db(global_setup):
    """
    Runs before EVERY test.
    Detects DB type and cleans tables appropriately.
    """
    with TEST_ENGINE.connect() as conn:
        trans = conn.begin()

        is_sqlite = "sqlite" in str(TEST_ENGINE.url)
        table_names = sqlalchemy.inspect(TEST_ENGINE).get_table_names()

        for table in table_names:
            if is_sqlite:
                conn.execute(text(f'DELETE FROM "{table}";'))
            else:
                conn.execute(text(f'TRUNCATE TABLE "{table}" CASCADE;'))

        trans.commit()

    yield


@pytest.fixture
def session_factory():
    """Session factory bound to the test database, for injecting into repositories."""
    return TestingSessionLocal


@pytest.fixture
def audio_file(tmp_path) -> Path:
    """A small non-empty file standing in for an uploaded recording."""
    path = tmp_path / "pitch.mp3"
    path.write_bytes(b"ID3" + b"\x00" * 2048)
    return path


@pytest.fixture
def test_engine():
    return TEST_ENGINE
