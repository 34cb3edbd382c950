"""
Idempotent schema upgrades for deployments created before the optional
columns existed.

Run from the project root:

    python -m app.db.migrations
"""

import logging
import sys
from typing import List, Optional

from sqlalchemy import Table, text
from sqlalchemy.engine import Engine

from app.db.database import Base, close_database_connection, get_engine
from app.db.schema_probe import SchemaProbe
from app.models import Account, PortfolioView, Resume

logger = logging.getLogger(__name__)

RESUME_LIST_COLUMNS = ("internship", "job_experience", "projects")
RESUME_NEW_COLUMNS = RESUME_LIST_COLUMNS + ("title", "created_at", "updated_at")
PROFILE_PICTURE_COLUMNS = ("profile_picture", "profile_picture_public_id")


def _add_missing_columns(engine: Engine, table: Table, names) -> List[str]:
    """ALTER TABLE ... ADD COLUMN for each of ``names`` the table lacks."""
    present = SchemaProbe(engine).existing(table.name, names)
    added = []
    with engine.begin() as conn:
        for name in names:
            if name in present:
                logger.info(f"{table.name}.{name} already exists")
                continue
            column_type = table.c[name].type.compile(dialect=engine.dialect)
            conn.execute(text(f"ALTER TABLE {table.name} ADD COLUMN {name} {column_type}"))
            logger.info(f"Added {table.name}.{name}")
            added.append(name)
    return added


def create_missing_tables(engine: Engine) -> None:
    Base.metadata.create_all(
        bind=engine,
        tables=[Account.__table__, Resume.__table__, PortfolioView.__table__],
        checkfirst=True,
    )


def add_profile_picture_columns(engine: Engine) -> List[str]:
    return _add_missing_columns(engine, Account.__table__, PROFILE_PICTURE_COLUMNS)


def update_resumes_table(engine: Engine) -> List[str]:
    """Add the split experience, projects, title and timestamp columns.

    List columns left NULL by older rows are backfilled with ``[]``.
    """
    added = _add_missing_columns(engine, Resume.__table__, RESUME_NEW_COLUMNS)
    assignments = ", ".join(f"{c} = COALESCE({c}, '[]')" for c in RESUME_LIST_COLUMNS)
    with engine.begin() as conn:
        conn.execute(text(f"UPDATE resumes SET {assignments}"))
    logger.info("Updated existing records")
    return added


def run_all(engine: Optional[Engine] = None) -> None:
    engine = engine or get_engine()
    create_missing_tables(engine)
    add_profile_picture_columns(engine)
    update_resumes_table(engine)


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    try:
        run_all()
    except Exception as e:
        logger.error(f"Migration failed: {e}")
        return 1
    finally:
        close_database_connection()
    logger.info("Database migration completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
