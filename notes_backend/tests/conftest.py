import os

# Keep the module-level engine off PostgreSQL while the app is imported.
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from src.api.main import app
from src.db import Base, create_session_factory, get_db
from src.repository import NoteRepository


@pytest.fixture
def session_factory(tmp_path):
    """A fresh SQLite database with the notes table created."""
    engine, factory = create_session_factory(f"sqlite:///{tmp_path / 'notes.db'}")
    Base.metadata.create_all(bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def repo(session) -> NoteRepository:
    return NoteRepository(session)


@pytest.fixture
def client(session_factory):
    """Test client whose requests use the per-test database."""

    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    yield TestClient(app)
    app.dependency_overrides.clear()
