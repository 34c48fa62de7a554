# tests/conftest.py
"""
Pytest configuration.

Every test gets a fresh in-memory SQLite database. The search repositories
take their portable path on SQLite (bounding box + haversine), which returns
the same results as the PostGIS path.
"""

import os

# Set test configuration BEFORE any tutorsearch imports
os.environ["CI"] = "1"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tutorsearch.api.dependencies.database import get_db
from tutorsearch.database import Base
from tutorsearch.main import fastapi_app as app  # Use FastAPI instance for tests
import tutorsearch.models  # noqa: F401


@pytest.fixture
def test_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(test_engine) -> Session:
    session = sessionmaker(bind=test_engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
