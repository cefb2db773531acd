"""Shared fixtures: an in-memory database and an API client bound to it."""

import os

# Must be set before config.py is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import get_db, init_db
from app.storage import FarmStore


@pytest.fixture
def db():
    """A fresh in-memory SQLite session with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def store(db):
    return FarmStore(db)


@pytest.fixture
def client(db):
    """TestClient whose requests all use the ``db`` fixture's session."""
    from app.main import app

    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
