# File: namesplice/core/database/base.py

from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base

# The shared registry. All feature models (spans, voices, clips) inherit from this.
Base = declarative_base()


def utc_now():
    return datetime.now(timezone.utc)
