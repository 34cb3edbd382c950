from typing import List
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_schema_probe
from app.core.security import get_current_account_id
from app.crud import crud_resume
from app.db.database import get_db
from app.db.schema_probe import SchemaProbe
from app.schemas.ResumeSchemas import (
    DashboardStats,
    MessageResponse,
    PublicPortfolio,
    ResumeRecord,
    SaveResumeRequest,
    SaveResumeResponse,
)
from app.services import portfolio_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/save", response_model=SaveResumeResponse)
def save_resume(
    payload: SaveResumeRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
):
    resume_id = crud_resume.create_resume(db, probe, account_id, payload.resumeData)
    logger.info(f"Resume {resume_id} saved for account {account_id}")
    return {"message": "Resume saved successfully!", "id": resume_id}


@router.get("/user", response_model=List[ResumeRecord])
def list_own_resumes(
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
):
    return crud_resume.list_resumes(db, probe, account_id)


@router.get("/resume/{resume_id}", response_model=ResumeRecord)
def read_resume(
    resume_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
):
    return crud_resume.get_resume(db, probe, resume_id, account_id)


@router.put("/update/{resume_id}", response_model=MessageResponse)
def update_resume(
    resume_id: int,
    payload: SaveResumeRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
):
    crud_resume.update_resume(db, probe, resume_id, account_id, payload.resumeData)
    return {"message": "Resume updated successfully"}


@router.delete("/delete/{resume_id}", response_model=MessageResponse)
def delete_resume(
    resume_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
):
    crud_resume.delete_resume(db, probe, resume_id, account_id)
    return {"message": "Resume deleted successfully"}


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
):
    return portfolio_service.get_dashboard_stats(db, probe, account_id)


# Must stay last: the path parameter would shadow the routes above
@router.get("/{user_id}", response_model=PublicPortfolio)
def public_portfolio(
    user_id: int,
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
):
    """Public page for ``user_id``; every call counts as a view."""
    return portfolio_service.get_public_portfolio(db, probe, user_id)
