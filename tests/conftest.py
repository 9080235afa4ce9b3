"""Shared test fixtures for the dashboard tests."""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from db.database import create_db_engine
from db.model import Base
from db.seed import seed_database
from main import create_app


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'dashboard.db'}",
        SEED_MAX_WORKERS=4,
        BCRYPT_ROUNDS=4,
    )


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings.DATABASE_URL)
    yield engine
    engine.dispose()


@pytest.fixture
def empty_engine(engine):
    """Engine whose tables exist but hold no rows."""
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def seeded_engine(engine, settings):
    seed_database(engine, max_workers=settings.SEED_MAX_WORKERS, bcrypt_rounds=settings.BCRYPT_ROUNDS)
    return engine


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def broken_settings(tmp_path):
    """Settings whose database file can never be opened."""
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'missing' / 'dashboard.db'}",
        BCRYPT_ROUNDS=4,
    )
