import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from models import Base


@pytest.fixture
def session_maker():
    """Session factory on a fresh in-memory SQLite database holding every table."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


class FakeHistory:
    """Stands in for ``record_upload`` and keeps every call."""

    def __init__(self):
        self.calls = []

    def __call__(self, **entry):
        self.calls.append(entry)
        return entry


@pytest.fixture
def history():
    return FakeHistory()
