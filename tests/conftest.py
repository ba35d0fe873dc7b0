import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from app.main import create_app
from app.core.config import Settings
from app.models.appointment import Appointment


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'data' / 'appointments.db'}"


@pytest.fixture
def test_settings(database_url):
    # Both URLs point at the per-test file, whatever TESTING resolves to
    return Settings(DATABASE_URL=database_url, TEST_DATABASE_URL=database_url)


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client


@pytest.fixture
def database(app, client):
    """The started application's database (tables created, patients seeded)."""
    return app.state.database


@pytest.fixture
def count_appointments(database):
    def _count():
        with database.session() as db:
            return db.scalar(select(func.count()).select_from(Appointment))
    return _count
