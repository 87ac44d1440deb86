import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from taskmaster.config import Settings
from taskmaster.database import get_database
from taskmaster.main import create_app


class BrokenDatabase:
    async def current_time(self):
        raise SQLAlchemyError("connection refused")


def test_startup_aborts_when_schema_cannot_be_created(tmp_path):
    # The parent directory does not exist, so SQLite cannot open the file
    settings = Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'test.db'}",
        SECRET_KEY="test-secret-key",
    )
    with pytest.raises(SQLAlchemyError):
        with TestClient(create_app(settings)):
            pass


def test_health_reports_store_failure(client):
    client.app.dependency_overrides[get_database] = lambda: BrokenDatabase()
    try:
        resp = client.get("/health")
    finally:
        client.app.dependency_overrides.clear()

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Database connection failed"
