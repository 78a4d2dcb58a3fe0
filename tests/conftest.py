"""Pytest configuration and fixtures for the template CRUD API tests."""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.database import create_database_connection, init_db
from app.services.template_service import TemplateService
from main import create_app


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}", LOG_LEVEL="DEBUG")


@pytest.fixture
def app(test_settings: Settings):
    return create_app(settings=test_settings)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Test client; entering the context runs the lifespan (table creation)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session_factory(test_settings: Settings):
    engine, SessionLocal = create_database_connection(test_settings.DATABASE_URL)
    init_db(engine)
    yield SessionLocal
    engine.dispose()


@pytest.fixture
def service(session_factory) -> TemplateService:
    return TemplateService(session_factory)


@pytest.fixture
def valid_template() -> dict:
    """A create payload that passes every field rule."""
    return {
        "name": "Test Template",
        "email": "test@example.com",
        "birthDate": "1990-01-01",
    }
