import pytest
from fastapi.testclient import TestClient

from taskmaster.config import Settings
from taskmaster.database import Database
from taskmaster.main import create_app

TEST_SECRET = "test-secret-key"


# Separate SQLite file per test
@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        SECRET_KEY=TEST_SECRET,
        BCRYPT_ROUNDS=4,
    )


# Session bound to a freshly created schema, for service-level tests
@pytest.fixture
async def db(settings):
    database = Database(settings.database_url)
    await database.create_schema()
    async with database.session_factory() as session:
        yield session
    await database.dispose()


# Entering the client runs the lifespan, so the tables exist before any request
@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    def _auth_headers(username="alice", email="a@x.com", password="pw123456"):
        client.post("/register", json={"username": username, "email": email, "password": password})
        resp = client.post("/login", json={"emailOrUsername": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _auth_headers
