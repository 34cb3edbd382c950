"""
Test the schema upgrades on a pre-migration database
"""

from sqlalchemy import insert, select

from app.crud import crud_resume
from app.crud.crud_resume import resumes
from app.db.migrations import (
    add_profile_picture_columns,
    run_all,
    update_resumes_table,
)
from app.db.schema_probe import SchemaProbe
from app.schemas.ResumeSchemas import ResumeDraft


def test_run_all_brings_legacy_schema_up_to_date(legacy_engine, legacy_db, legacy_account_id):
    legacy_db.execute(insert(resumes).values(user_id=legacy_account_id, summary="{}", skills='["Go"]'))
    legacy_db.commit()

    run_all(legacy_engine)

    probe = SchemaProbe(legacy_engine)
    assert set(crud_resume.READ_COLUMNS) <= probe.columns("resumes")
    assert {"profile_picture", "profile_picture_public_id"} <= probe.columns("accounts")
    assert probe.has("portfolio_views", "views_this_week")

    row = legacy_db.execute(
        select(resumes.c.internship, resumes.c.job_experience, resumes.c.projects)
    ).one()
    assert tuple(row) == ("[]", "[]", "[]")


def test_migrations_are_idempotent(legacy_engine):
    run_all(legacy_engine)

    assert add_profile_picture_columns(legacy_engine) == []
    assert update_resumes_table(legacy_engine) == []
    run_all(legacy_engine)


def test_migrated_table_uses_widest_tier(legacy_engine, legacy_db, legacy_account_id):
    run_all(legacy_engine)
    probe = SchemaProbe(legacy_engine)

    resume_id = crud_resume.create_resume(legacy_db, probe, legacy_account_id, ResumeDraft(title="After"))
    written = crud_resume.update_resume(legacy_db, probe, resume_id, legacy_account_id, ResumeDraft(title="Again"))

    assert written == crud_resume.UPDATE_LADDER[0]
    assert crud_resume.get_resume(legacy_db, probe, resume_id, legacy_account_id).title == "Again"
