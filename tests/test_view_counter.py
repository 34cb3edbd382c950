"""
Test the weekly-resetting portfolio view counter
"""

import threading
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.dialects import mysql

from app.core.clock import iso_week_bounds
from app.crud.crud_portfolio_views import (
    build_record_view_statement,
    get_view_stats,
    portfolio_views,
    record_view,
)

# 2026-03-02 is a Monday
MONDAY = datetime(2026, 3, 2, 9, 30)
WEDNESDAY = datetime(2026, 3, 4, 18, 0)
SUNDAY_NIGHT = datetime(2026, 3, 8, 23, 59, 59)
NEXT_MONDAY = datetime(2026, 3, 9, 0, 0)


def counter_row(db, account_id):
    return db.execute(
        select(portfolio_views.c.views, portfolio_views.c.views_this_week, portfolio_views.c.last_view_date)
        .where(portfolio_views.c.user_id == account_id)
    ).first()


def test_iso_week_bounds():
    assert iso_week_bounds(WEDNESDAY) == (datetime(2026, 3, 2), datetime(2026, 3, 9))
    assert iso_week_bounds(SUNDAY_NIGHT) == (datetime(2026, 3, 2), datetime(2026, 3, 9))
    assert iso_week_bounds(NEXT_MONDAY)[0] == NEXT_MONDAY
    # ISO week 1 of 2027 starts on Monday 2026-12-28
    assert iso_week_bounds(datetime(2027, 1, 1))[0] == datetime(2026, 12, 28)


def test_first_view_creates_row(db, account_id):
    assert record_view(db, account_id, now=MONDAY) is True

    row = counter_row(db, account_id)
    assert (row.views, row.views_this_week, row.last_view_date) == (1, 1, MONDAY)


def test_same_week_increments_both(db, account_id):
    for now in (MONDAY, WEDNESDAY, SUNDAY_NIGHT):
        record_view(db, account_id, now=now)

    row = counter_row(db, account_id)
    assert (row.views, row.views_this_week) == (3, 3)
    assert row.last_view_date == SUNDAY_NIGHT


def test_new_week_resets_weekly_count(db, account_id):
    record_view(db, account_id, now=MONDAY)
    record_view(db, account_id, now=SUNDAY_NIGHT)
    record_view(db, account_id, now=NEXT_MONDAY)

    row = counter_row(db, account_id)
    assert (row.views, row.views_this_week) == (3, 1)


def test_counters_are_per_account(db, account_id, other_account_id):
    record_view(db, account_id, now=MONDAY)
    record_view(db, account_id, now=MONDAY)
    record_view(db, other_account_id, now=MONDAY)

    assert counter_row(db, account_id).views == 2
    assert counter_row(db, other_account_id).views == 1


def test_concurrent_views_are_not_lost(session_factory, account_id):
    threads_count, views_each = 8, 5
    results = []

    def worker():
        session = session_factory()
        try:
            for _ in range(views_each):
                results.append(record_view(session, account_id, now=WEDNESDAY))
        finally:
            session.close()

    threads = [threading.Thread(target=worker) for _ in range(threads_count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    session = session_factory()
    try:
        row = counter_row(session, account_id)
    finally:
        session.close()
    assert all(results)
    assert row.views == threads_count * views_each
    assert row.views_this_week == threads_count * views_each


def test_get_view_stats(db, account_id):
    assert get_view_stats(db, account_id, now=MONDAY).model_dump() == {"views": 0, "viewsThisWeek": 0}

    record_view(db, account_id, now=MONDAY)
    record_view(db, account_id, now=WEDNESDAY)

    assert get_view_stats(db, account_id, now=WEDNESDAY).model_dump() == {"views": 2, "viewsThisWeek": 2}
    # Stored weekly count belongs to a past week
    assert get_view_stats(db, account_id, now=NEXT_MONDAY).model_dump() == {"views": 2, "viewsThisWeek": 0}


def test_missing_table_is_a_noop(legacy_db, legacy_account_id):
    assert record_view(legacy_db, legacy_account_id, now=MONDAY) is False
    assert get_view_stats(legacy_db, legacy_account_id, now=MONDAY).views == 0
    # Session stays usable after the failed write
    assert legacy_db.execute(select(1)).scalar() == 1


def test_mysql_statement_is_single_upsert():
    stmt = build_record_view_statement("mysql", 7, WEDNESDAY)
    sql = str(stmt.compile(dialect=mysql.dialect()))

    assert sql.startswith("INSERT INTO portfolio_views")
    assert "ON DUPLICATE KEY UPDATE" in sql
    # Weekly counter must be assigned before last_view_date is overwritten
    assert sql.index("views_this_week = CASE") < sql.index("last_view_date = ")
