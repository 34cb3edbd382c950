import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import and_, case, select
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.clock import iso_week_bounds, utcnow
from app.models.portfolio_view import PortfolioView
from app.schemas.ResumeSchemas import ViewStats

logger = logging.getLogger(__name__)

portfolio_views = PortfolioView.__table__


def build_record_view_statement(dialect_name: str, account_id: int, now: datetime):
    """Single-statement upsert that counts one view.

    The weekly counter keeps growing while ``last_view_date`` is inside the
    ISO week of ``now`` and restarts at 1 otherwise. ``views_this_week`` is
    assigned before ``last_view_date`` because MySQL evaluates ON DUPLICATE
    KEY assignments left to right.
    """
    week_start, next_week = iso_week_bounds(now)
    same_week = and_(
        portfolio_views.c.last_view_date >= week_start,
        portfolio_views.c.last_view_date < next_week,
    )
    weekly = case((same_week, portfolio_views.c.views_this_week + 1), else_=1)
    row = {"user_id": account_id, "views": 1, "views_this_week": 1, "last_view_date": now}

    if dialect_name in ("mysql", "mariadb"):
        stmt = mysql.insert(portfolio_views).values(**row)
        return stmt.on_duplicate_key_update(
            [
                ("views", portfolio_views.c.views + 1),
                ("views_this_week", weekly),
                ("last_view_date", now),
            ]
        )
    if dialect_name in ("sqlite", "postgresql"):
        dialect_insert = sqlite.insert if dialect_name == "sqlite" else postgresql.insert
        stmt = dialect_insert(portfolio_views).values(**row)
        return stmt.on_conflict_do_update(
            index_elements=[portfolio_views.c.user_id],
            set_={
                "views": portfolio_views.c.views + 1,
                "views_this_week": weekly,
                "last_view_date": now,
            },
        )
    raise NotImplementedError(f"No atomic upsert for dialect {dialect_name}")


def record_view(db: Session, account_id: int, now: Optional[datetime] = None) -> bool:
    """Count one public view of ``account_id``'s portfolio.

    Best effort: when the counter table is missing or the write fails the
    view is dropped and False is returned.
    """
    now = now or utcnow()
    try:
        stmt = build_record_view_statement(db.get_bind().dialect.name, account_id, now)
        db.execute(stmt)
        db.commit()
    except (SQLAlchemyError, NotImplementedError) as e:
        db.rollback()
        logger.warning("Skipping view tracking for account %s: %s", account_id, e)
        return False
    return True


def get_view_stats(db: Session, account_id: int, now: Optional[datetime] = None) -> ViewStats:
    """Total and this-week views; zeros when nothing has been recorded."""
    now = now or utcnow()
    try:
        row = db.execute(
            select(
                portfolio_views.c.views,
                portfolio_views.c.views_this_week,
                portfolio_views.c.last_view_date,
            ).where(portfolio_views.c.user_id == account_id)
        ).first()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("portfolio_views not available, returning default values: %s", e)
        return ViewStats()

    if row is None:
        return ViewStats()

    week_start, next_week = iso_week_bounds(now)
    this_week = row.views_this_week or 0
    # The stored weekly count is stale once its week has passed
    if row.last_view_date is None or not (week_start <= row.last_view_date < next_week):
        this_week = 0
    return ViewStats(views=row.views or 0, viewsThisWeek=this_week)
