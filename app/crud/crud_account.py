import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.errors import ValidationError
from app.db.schema_probe import SchemaProbe
from app.models.account import Account

logger = logging.getLogger(__name__)

TABLE = "accounts"
accounts = Account.__table__

PICTURE_COLUMNS = ("profile_picture", "profile_picture_public_id")


def create_account(db: Session, name: str, email: str, password_hash: str) -> int:
    if get_account_by_email(db, email) is not None:
        raise ValidationError("Email already registered")
    try:
        result = db.execute(
            insert(accounts).values(
                name=name, email=email, password_hash=password_hash, created_at=utcnow()
            )
        )
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration
        db.rollback()
        raise ValidationError("Email already registered")
    account_id = result.inserted_primary_key[0]
    logger.info("New user registered: %s", email)
    return account_id


def get_account_by_email(db: Session, email: str) -> Optional[Dict[str, Any]]:
    row = db.execute(
        select(accounts.c.id, accounts.c.name, accounts.c.email, accounts.c.password_hash)
        .where(accounts.c.email == email)
        .limit(1)
    ).mappings().first()
    return dict(row) if row is not None else None


def touch_last_login(db: Session, probe: SchemaProbe, account_id: int, now: Optional[datetime] = None) -> None:
    """Record the login time when the deployment tracks it."""
    if not probe.has(TABLE, "last_login"):
        logger.info("Note: last_login column not found in accounts table")
        return
    try:
        db.execute(
            update(accounts).where(accounts.c.id == account_id).values(last_login=now or utcnow())
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Could not update last_login for %s: %s", account_id, e)


def _profile_columns(probe: SchemaProbe):
    present = probe.existing(TABLE, PICTURE_COLUMNS)
    names = ["id", "name", "email"] + [c for c in PICTURE_COLUMNS if c in present]
    return [accounts.c[name] for name in names]


def get_profile(db: Session, probe: SchemaProbe, account_id: int) -> Optional[Dict[str, Any]]:
    """Own profile; picture fields are None when the columns do not exist."""
    row = db.execute(
        select(*_profile_columns(probe)).where(accounts.c.id == account_id)
    ).mappings().first()
    if row is None:
        return None
    profile = {c: None for c in PICTURE_COLUMNS}
    profile.update(row)
    return profile


def get_public_profile(db: Session, probe: SchemaProbe, account_id: int) -> Optional[Dict[str, Any]]:
    """Name and avatar shown on the public portfolio.

    Falls back to name only when the picture columns are missing and to None
    when the lookup itself fails.
    """
    present = probe.existing(TABLE, PICTURE_COLUMNS)
    columns = [accounts.c.name] + [accounts.c[c] for c in PICTURE_COLUMNS if c in present]
    try:
        row = db.execute(select(*columns).where(accounts.c.id == account_id)).mappings().first()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Falling back to name-only profile for %s: %s", account_id, e)
        try:
            row = db.execute(
                select(accounts.c.name).where(accounts.c.id == account_id)
            ).mappings().first()
        except SQLAlchemyError as e2:
            db.rollback()
            logger.error("Error fetching user %s: %s", account_id, e2)
            return None
    if row is None:
        return None
    return {
        "name": row.get("name"),
        "profile_picture": row.get("profile_picture"),
        "profile_picture_public_id": row.get("profile_picture_public_id"),
    }


def update_profile_picture(
    db: Session,
    probe: SchemaProbe,
    account_id: int,
    url: Optional[str],
    public_id: Optional[str],
) -> Optional[Dict[str, Any]]:
    """Set or clear (both None) the avatar, returning the refreshed profile."""
    if len(probe.existing(TABLE, PICTURE_COLUMNS)) < len(PICTURE_COLUMNS):
        raise ValidationError(
            "Profile pictures are not enabled",
            detail="accounts table is missing profile_picture columns; run migrations",
        )
    db.execute(
        update(accounts)
        .where(accounts.c.id == account_id)
        .values(profile_picture=url or None, profile_picture_public_id=public_id or None)
    )
    db.commit()
    return get_profile(db, probe, account_id)
