"""
Test settings resolution
"""

import pytest
from sqlalchemy.engine import make_url

from app.core.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("DATABASE_URL", "DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME",
                "JWT_SECRET", "GOOGLE_API_KEY"):
        monkeypatch.delenv(key, raising=False)


def make_settings(**values):
    return Settings(_env_file=None, **values)


def test_database_url_escapes_password():
    s = make_settings(DB_HOST="db.example.com", DB_USER="app", DB_PASSWORD="p@ss/word", DB_NAME="resumes")

    url = make_url(s.database_url)

    assert url.host == "db.example.com"
    assert url.password == "p@ss/word"
    assert url.username == "app"
    assert url.database == "resumes"
    assert url.port == 3306
    assert url.drivername == "mysql+pymysql"


def test_database_url_without_password():
    url = make_url(make_settings(DB_HOST="localhost", DB_NAME="resumes").database_url)

    assert url.password is None
    assert url.username == "root"


def test_explicit_database_url_wins():
    s = make_settings(DATABASE_URL="sqlite:///local.db", DB_HOST="ignored")

    assert s.database_url == "sqlite:///local.db"


def test_missing_required():
    s = make_settings(DATABASE_URL="sqlite:///local.db", JWT_SECRET="x", GOOGLE_API_KEY="y")

    assert s.missing_required() == []
    assert make_settings(DATABASE_URL="sqlite:///local.db").missing_required() == ["JWT_SECRET", "GOOGLE_API_KEY"]
