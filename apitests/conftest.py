"""API tests run the lambda handler against a throwaway SQLite database."""

import os
import tempfile

# Must be set before anything opens a connection
_db_dir = tempfile.mkdtemp(prefix="etsyviz-apitests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'apitests.db')}"

import pytest
from sqlalchemy import create_engine

from models import Base


@pytest.fixture(scope="session", autouse=True)
def database():
    engine = create_engine(os.environ["DATABASE_URL"])
    Base.metadata.create_all(engine)
    engine.dispose()
    yield os.environ["DATABASE_URL"]
