"""
Shared fixtures: SQLite databases with the current schema and with the
schema of a deployment that never ran the migrations.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

import app.models  # noqa: F401  registers tables on Base.metadata
from app.core.config import settings
from app.core.rate_limit import LoginAttemptStore
from app.crud import crud_account
from app.db.database import Base, get_db
from app.db.schema_probe import SchemaProbe

LEGACY_DDL = (
    """
    CREATE TABLE accounts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name VARCHAR(100),
        email VARCHAR(255) NOT NULL UNIQUE,
        password_hash VARCHAR(255) NOT NULL,
        created_at DATETIME
    )
    """,
    """
    CREATE TABLE resumes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        summary TEXT,
        skills TEXT,
        education TEXT,
        experience TEXT
    )
    """,
)


def _sqlite_engine(path):
    return create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )


@pytest.fixture
def engine(tmp_path):
    engine = _sqlite_engine(tmp_path / "app.db")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def legacy_engine(tmp_path):
    engine = _sqlite_engine(tmp_path / "legacy.db")
    with engine.begin() as conn:
        for ddl in LEGACY_DDL:
            conn.execute(text(ddl))
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def probe(engine):
    return SchemaProbe(engine)


@pytest.fixture
def legacy_db(legacy_engine):
    session = sessionmaker(bind=legacy_engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def legacy_probe(legacy_engine):
    return SchemaProbe(legacy_engine)


@pytest.fixture
def account_id(db):
    return crud_account.create_account(db, "Ada Lovelace", "ada@example.com", "not-a-real-hash")


@pytest.fixture
def other_account_id(db):
    return crud_account.create_account(db, "Grace Hopper", "grace@example.com", "not-a-real-hash")


@pytest.fixture
def legacy_account_id(legacy_db):
    return crud_account.create_account(legacy_db, "Alan Turing", "alan@example.com", "not-a-real-hash")


@pytest.fixture
def jwt_secret(monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET", "test-secret")
    return "test-secret"


@pytest.fixture
def client(engine, session_factory, jwt_secret):
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.schema_probe = SchemaProbe(engine)
    app.state.login_attempts = LoginAttemptStore()
    yield TestClient(app)
    app.dependency_overrides.clear()
