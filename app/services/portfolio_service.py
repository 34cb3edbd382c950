"""
Portfolio Service

Assembles the public portfolio page and the owner's dashboard numbers from
the resume, account and view-counter stores.
"""

from datetime import datetime, timedelta
from typing import Optional
import logging

from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.errors import NotFoundError
from app.crud import crud_account, crud_portfolio_views, crud_resume
from app.db.schema_probe import SchemaProbe
from app.schemas.ResumeSchemas import DashboardStats, PublicPortfolio, ResumeRecord

logger = logging.getLogger(__name__)

NEW_RESUME_WINDOW = timedelta(days=30)


def get_public_portfolio(
    db: Session,
    probe: SchemaProbe,
    account_id: int,
    now: Optional[datetime] = None,
) -> PublicPortfolio:
    """
    Latest resume of ``account_id`` merged with its owner's public profile.

    Each successful call counts as one view. Profile and counter failures
    degrade the payload instead of failing the request.

    Raises:
        NotFoundError: the account has no resume
    """
    now = now or utcnow()
    latest = crud_resume.get_latest_resume(db, probe, account_id)
    if latest is None:
        raise NotFoundError("No portfolio found")

    profile = crud_account.get_public_profile(db, probe, account_id) or {}
    crud_portfolio_views.record_view(db, account_id, now=now)
    stats = crud_portfolio_views.get_view_stats(db, account_id, now=now)

    return PublicPortfolio(
        **latest.model_dump(),
        accountName=profile.get("name"),
        profilePicture=profile.get("profile_picture"),
        profilePicturePublicId=profile.get("profile_picture_public_id"),
        views=stats.views,
        viewsThisWeek=stats.viewsThisWeek,
    )


def resume_display_title(resume: ResumeRecord) -> str:
    """Stored title, else "<role> Resume" from the first experience entry, else "Resume <id>"."""
    if resume.title:
        return resume.title
    experience = resume.effective_experience()
    if experience and experience[0].role:
        return f"{experience[0].role} Resume"
    return f"Resume {resume.id}"


def get_dashboard_stats(
    db: Session,
    probe: SchemaProbe,
    account_id: int,
    now: Optional[datetime] = None,
) -> DashboardStats:
    now = now or utcnow()
    latest = crud_resume.get_latest_resume(db, probe, account_id)
    views = crud_portfolio_views.get_view_stats(db, account_id, now=now)

    stats = DashboardStats(
        totalResumes=crud_resume.count_resumes(db, account_id),
        newThisMonth=crud_resume.count_resumes_since(db, probe, account_id, now - NEW_RESUME_WINDOW),
        portfolioViews=views.views,
        viewsThisWeek=views.viewsThisWeek,
    )
    if latest is not None:
        stats.lastUpdated = latest.updatedAt or latest.createdAt
        stats.lastResumeTitle = resume_display_title(latest)
    logger.info(f"Dashboard stats for account {account_id}: {stats.totalResumes} resumes")
    return stats
