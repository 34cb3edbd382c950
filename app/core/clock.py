from datetime import datetime, timedelta, timezone
from typing import Tuple


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DATETIME columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso_week_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """[Monday 00:00, next Monday 00:00) of the ISO week containing ``now``.

    Two timestamps share an ISO (year, week) exactly when both fall inside
    the same bounds.
    """
    monday = (now - timedelta(days=now.isoweekday() - 1)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    return monday, monday + timedelta(days=7)
