import os
from unittest.mock import patch

# Keep the module-level engine away from a real database file
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import seed_defaults
from database.models import Base
from tests.helpers import FakeApi


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seeded_session(session):
    seed_defaults(session)
    return session


@pytest.fixture(autouse=True)
def no_tokens(monkeypatch):
    monkeypatch.delenv("APIFY_TOKEN", raising=False)
    monkeypatch.delenv("BROWSEAI_API_KEY", raising=False)


@pytest.fixture
def fake_api():
    api = FakeApi()
    with patch("scrapers.http.requests.request", side_effect=api) as mocked:
        api.mock = mocked
        yield api
