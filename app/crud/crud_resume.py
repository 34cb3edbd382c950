"""
Resume persistence that tolerates a partially migrated ``resumes`` table.

Every statement is built from the columns the schema probe reports, so an
older deployment missing optional columns keeps working with reduced data.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.errors import NotFoundError, SchemaInvalidError
from app.db.schema_probe import SchemaProbe
from app.models.resume import Resume
from app.schemas.ResumeSchemas import ResumeDraft, ResumeRecord
from app.services.resume_normalization import dump_object, dump_section

logger = logging.getLogger(__name__)

TABLE = "resumes"
resumes = Resume.__table__

CONTENT_COLUMNS = (
    "title",
    "summary",
    "skills",
    "education",
    "experience",
    "internship",
    "job_experience",
    "projects",
)
READ_COLUMNS = ("id", "user_id") + CONTENT_COLUMNS + ("created_at", "updated_at")

# Widest first; each tier is tried only if the previous one cannot be written
UPDATE_LADDER: Tuple[Tuple[str, ...], ...] = (
    ("title", "summary", "experience", "education", "skills",
     "internship", "job_experience", "projects", "updated_at"),
    ("title", "summary", "experience", "education", "skills", "updated_at"),
    ("title", "summary", "experience", "education", "skills"),
    ("summary", "experience", "education", "skills"),
)
MINIMAL_COLUMNS = UPDATE_LADDER[-1]
STAMP_COLUMN = "updated_at"


def usable_update_tiers(available: Iterable[str]) -> List[Tuple[str, ...]]:
    """Ladder tiers whose content columns all exist, widest first.

    ``updated_at`` is stamped onto every tier when the table has it and is
    never what narrows the content written. The unstamped variants follow
    so a stale snapshot can still fall back to the bare minimum.
    """
    available = {c.lower() for c in available}
    contents = [tuple(c for c in tier if c != STAMP_COLUMN) for tier in UPDATE_LADDER]
    contents = [content for content in contents if set(content) <= available]
    stamps = [(STAMP_COLUMN,), ()] if STAMP_COLUMN in available else [()]

    tiers: List[Tuple[str, ...]] = []
    for stamp in stamps:
        for content in contents:
            if content + stamp not in tiers:
                tiers.append(content + stamp)
    return tiers


def is_missing_column_error(exc: BaseException) -> bool:
    """True when the database rejected a statement over an unknown column."""
    orig = getattr(exc, "orig", exc)
    args = getattr(orig, "args", ())
    if args and args[0] == 1054:  # MySQL ER_BAD_FIELD_ERROR
        return True
    message = str(orig).lower()
    return (
        "unknown column" in message
        or "no such column" in message
        or "has no column named" in message
        or ("column" in message and "does not exist" in message)
    )


def serialize_draft(draft: ResumeDraft, columns: Iterable[str], now: datetime) -> Dict[str, object]:
    """Column values for ``columns``; list sections always serialize to JSON arrays."""
    builders: Dict[str, Callable[[], object]] = {
        "title": lambda: draft.title or None,
        "summary": lambda: dump_object(draft.contact_summary()),
        "skills": lambda: dump_section(draft.skills),
        "education": lambda: dump_section(draft.education),
        "experience": lambda: dump_section(draft.experience),
        "internship": lambda: dump_section(draft.internship),
        "job_experience": lambda: dump_section(draft.jobExperience),
        "projects": lambda: dump_section(draft.projects),
        "created_at": lambda: now,
        "updated_at": lambda: now,
    }
    return {column: builders[column]() for column in columns}


def _read_columns(probe: SchemaProbe) -> List[str]:
    available = probe.columns(TABLE)
    if "id" not in available or "user_id" not in available:
        raise SchemaInvalidError(detail="resumes table is missing id/user_id")
    return [c for c in READ_COLUMNS if c in available]


def _select(probe: SchemaProbe):
    return select(*[resumes.c[name] for name in _read_columns(probe)])


def _ensure_owned(db: Session, resume_id: int, account_id: int) -> None:
    found = db.execute(
        select(resumes.c.id).where(resumes.c.id == resume_id, resumes.c.user_id == account_id)
    ).first()
    if found is None:
        raise NotFoundError("Resume not found or unauthorized")


def create_resume(
    db: Session,
    probe: SchemaProbe,
    account_id: int,
    draft: ResumeDraft,
    now: Optional[datetime] = None,
) -> int:
    """Insert a resume using whichever optional columns exist. Returns its id."""
    now = now or utcnow()
    available = probe.columns(TABLE)
    content = [c for c in CONTENT_COLUMNS if c in available]
    if "user_id" not in available or not content:
        raise SchemaInvalidError(detail="resumes table structure is invalid. Missing required columns.")

    stamps = [c for c in ("created_at", "updated_at") if c in available]
    attempts = [content + stamps]
    minimal = [c for c in MINIMAL_COLUMNS if c in available]
    if minimal and minimal != attempts[0]:
        attempts.append(minimal)

    last_error: Optional[SQLAlchemyError] = None
    for columns in attempts:
        values = {"user_id": account_id, **serialize_draft(draft, columns, now)}
        logger.info("Executing INSERT with columns: %s", ["user_id", *columns])
        try:
            result = db.execute(insert(resumes).values(values))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            if not is_missing_column_error(e):
                raise
            logger.warning("INSERT rejected a column, narrowing: %s", e)
            last_error = e
            continue
        return result.inserted_primary_key[0]

    raise SchemaInvalidError(detail=str(last_error))


def list_resumes(db: Session, probe: SchemaProbe, account_id: int) -> List[ResumeRecord]:
    stmt = _select(probe).where(resumes.c.user_id == account_id).order_by(resumes.c.id)
    return [ResumeRecord.from_row(row) for row in db.execute(stmt).mappings()]


def get_resume(db: Session, probe: SchemaProbe, resume_id: int, account_id: int) -> ResumeRecord:
    """Fetch one resume owned by ``account_id``; NotFound doubles as the ownership check."""
    stmt = _select(probe).where(resumes.c.id == resume_id, resumes.c.user_id == account_id)
    row = db.execute(stmt).mappings().first()
    if row is None:
        raise NotFoundError("Resume not found")
    return ResumeRecord.from_row(row)


def update_resume(
    db: Session,
    probe: SchemaProbe,
    resume_id: int,
    account_id: int,
    draft: ResumeDraft,
    now: Optional[datetime] = None,
) -> Sequence[str]:
    """Update an owned resume with the widest column set the table supports.

    Returns the columns written. A tier the database still rejects (stale
    schema snapshot) falls through to the next one as a fresh statement.
    """
    _ensure_owned(db, resume_id, account_id)
    now = now or utcnow()

    tiers = usable_update_tiers(probe.columns(TABLE))
    if not tiers:
        raise SchemaInvalidError(detail="resumes table lacks summary/experience/education/skills")

    last_error: Optional[SQLAlchemyError] = None
    for columns in tiers:
        stmt = (
            update(resumes)
            .where(resumes.c.id == resume_id, resumes.c.user_id == account_id)
            .values(serialize_draft(draft, columns, now))
        )
        try:
            db.execute(stmt)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            if not is_missing_column_error(e):
                raise
            logger.warning("Some columns missing, trying narrower UPDATE: %s", e)
            last_error = e
            continue
        logger.info("Updated resume %s with columns %s", resume_id, list(columns))
        return columns

    raise SchemaInvalidError(detail=str(last_error))


def delete_resume(db: Session, probe: SchemaProbe, resume_id: int, account_id: int) -> None:
    _ensure_owned(db, resume_id, account_id)
    db.execute(delete(resumes).where(resumes.c.id == resume_id, resumes.c.user_id == account_id))
    db.commit()
    logger.info("Deleted resume %s for account %s", resume_id, account_id)


def get_latest_resume(db: Session, probe: SchemaProbe, account_id: int) -> Optional[ResumeRecord]:
    """Most recent resume: updated_at, else created_at, else highest id."""
    available = probe.columns(TABLE)
    ordering = [resumes.c[c].desc() for c in ("updated_at", "created_at") if c in available][:1]
    ordering.append(resumes.c.id.desc())
    stmt = _select(probe).where(resumes.c.user_id == account_id).order_by(*ordering).limit(1)
    row = db.execute(stmt).mappings().first()
    return ResumeRecord.from_row(row) if row is not None else None


def count_resumes(db: Session, account_id: int) -> int:
    stmt = select(func.count()).select_from(resumes).where(resumes.c.user_id == account_id)
    return db.execute(stmt).scalar_one()


def count_resumes_since(db: Session, probe: SchemaProbe, account_id: int, since: datetime) -> int:
    """Resumes created at or after ``since``; 0 when created_at is not tracked."""
    if not probe.has(TABLE, "created_at"):
        return 0
    stmt = (
        select(func.count())
        .select_from(resumes)
        .where(resumes.c.user_id == account_id, resumes.c.created_at >= since)
    )
    return db.execute(stmt).scalar_one()
