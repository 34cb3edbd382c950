import logging
from typing import Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class DBState:
    engine: Optional[Engine] = None
    SessionLocal: Optional[sessionmaker] = None


db = DBState()


def build_engine(url: Optional[str] = None) -> Engine:
    url = url or settings.database_url
    connect_args = {}
    if url.startswith("mysql") and (settings.DB_SSL or settings.is_production):
        # Managed MySQL providers require TLS
        connect_args["ssl"] = {"check_hostname": True}
    return create_engine(
        url,
        pool_size=10,
        pool_pre_ping=True,
        pool_recycle=3600,
        connect_args=connect_args,
    )


def get_engine() -> Engine:
    if db.engine is None:
        db.engine = build_engine()
        db.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db.engine)
    return db.engine


def connect_to_database() -> bool:
    """Create the engine and verify connectivity.

    A failed check is logged, not raised, so the API can still start and
    report errors per request.
    """
    engine = get_engine()
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(
            "Database connection failed: %s (url=%s)",
            e,
            engine.url.render_as_string(hide_password=True),
        )
        return False

    logger.info("Successfully connected to the database")
    return True


def close_database_connection() -> None:
    if db.engine is not None:
        db.engine.dispose()
        db.engine = None
        db.SessionLocal = None


def get_db() -> Iterator[Session]:
    get_engine()
    session = db.SessionLocal()
    try:
        yield session
    finally:
        session.close()
