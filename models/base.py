from datetime import datetime, timezone

from sqlalchemy import JSON, String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# PostgreSQL text[]; SQLite (used by the test suite) has no arrays so store JSON
StringArray = ARRAY(String).with_variant(JSON(), "sqlite")


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the ``DateTime`` columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
