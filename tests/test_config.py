import pydantic
import pytest

from taskmaster.config import Settings
from taskmaster.database import async_url


def test_secret_key_is_mandatory(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(pydantic.ValidationError):
        Settings(_env_file=None, database_url="sqlite+aiosqlite:///x.db")


def test_empty_secret_key_is_rejected():
    with pytest.raises(pydantic.ValidationError):
        Settings(_env_file=None, database_url="sqlite+aiosqlite:///x.db", SECRET_KEY="")


def test_defaults():
    settings = Settings(_env_file=None, database_url="sqlite+aiosqlite:///x.db", SECRET_KEY="s")
    assert settings.ALGORITHM == "HS256"
    assert settings.ACCESS_TOKEN_EXPIRE_MINUTES == 60
    assert settings.BCRYPT_ROUNDS == 10


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgresql://u:p@h:5432/db", "postgresql+asyncpg://u:p@h:5432/db"),
        ("postgres://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("postgresql+asyncpg://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("sqlite+aiosqlite:///x.db", "sqlite+aiosqlite:///x.db"),
    ],
)
def test_async_url(url, expected):
    assert async_url(url) == expected
