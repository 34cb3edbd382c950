import json
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

import pydantic
from pydantic import BaseModel, Field

from app.services.resume_normalization import (
    coerce_entry_list,
    coerce_skill_list,
    coerce_summary,
)


class SectionEntry(BaseModel):
    """Base for resume section items. Unknown keys are kept as-is."""

    model_config = pydantic.ConfigDict(extra="allow")

    @pydantic.field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any):
        # Front-ends send years and durations as numbers or null; generated
        # descriptions sometimes arrive as a list of bullets
        if v is None:
            return ""
        if isinstance(v, list):
            return "\n".join(_as_text(item) for item in v if item is not None)
        if isinstance(v, (int, float, dict)):
            return _as_text(v)
        return v


def _as_text(v: Any) -> str:
    if isinstance(v, str):
        return v
    if isinstance(v, (dict, list, bool)):
        return json.dumps(v, ensure_ascii=False)
    return str(v)


class EducationEntry(SectionEntry):
    degree: str = ""
    institution: str = ""
    year: str = ""


class ExperienceEntry(SectionEntry):
    role: str = ""
    company: str = ""
    duration: str = ""
    # Bullet text: "• first\n• second\n• third"
    description: str = ""


class InternshipEntry(ExperienceEntry):
    pass


class JobEntry(ExperienceEntry):
    pass


class ProjectEntry(SectionEntry):
    title: str = ""
    techStack: str = ""
    description: str = ""


class ContactSummary(SectionEntry):
    """Contact block plus the AI-written narrative, stored as one JSON object."""

    name: str = ""
    email: str = ""
    mobile: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""
    summary: str = ""


def _none_to_list(v: Any):
    return [] if v is None else v


class ResumeDraft(BaseModel):
    """Resume content as submitted by the builder form (``resumeData``)."""

    title: Optional[str] = None
    name: str = ""
    email: str = ""
    mobile: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""
    summary: str = ""
    skills: List[str] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    internship: List[InternshipEntry] = Field(default_factory=list)
    jobExperience: List[JobEntry] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)
    model_config = pydantic.ConfigDict(extra="ignore")

    @pydantic.field_validator(
        "education", "experience", "internship", "jobExperience", "projects", mode="before"
    )
    @classmethod
    def _lists_default_empty(cls, v: Any):
        return _none_to_list(v)

    @pydantic.field_validator("skills", mode="before")
    @classmethod
    def _split_skills(cls, v: Any):
        if v is None:
            return []
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return coerce_skill_list(v)

    @pydantic.field_validator(
        "name", "email", "mobile", "linkedin", "github", "portfolio", "summary", mode="before"
    )
    @classmethod
    def _none_to_blank(cls, v: Any):
        return "" if v is None else v

    def contact_summary(self) -> ContactSummary:
        return ContactSummary(
            name=self.name,
            email=self.email,
            mobile=self.mobile,
            linkedin=self.linkedin,
            github=self.github,
            portfolio=self.portfolio,
            summary=self.summary,
        )


class SaveResumeRequest(BaseModel):
    resumeData: ResumeDraft


class ResumeRecord(BaseModel):
    """A stored resume with its JSON sections decoded.

    A section whose stored text is not valid JSON, or decodes to a shape the
    typed entries cannot hold, is returned as that raw string rather than
    failing the read.
    """

    id: int
    userId: Optional[int] = None
    title: Optional[str] = None
    summary: Optional[Union[ContactSummary, str]] = None
    skills: Union[List[str], str] = Field(default_factory=list)
    education: Union[List[EducationEntry], str] = Field(default_factory=list)
    experience: Union[List[ExperienceEntry], str] = Field(default_factory=list)
    internship: Union[List[InternshipEntry], str] = Field(default_factory=list)
    jobExperience: Union[List[JobEntry], str] = Field(default_factory=list)
    projects: Union[List[ProjectEntry], str] = Field(default_factory=list)
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @pydantic.field_validator("summary", mode="before")
    @classmethod
    def _decode_summary(cls, v: Any):
        return coerce_summary(v)

    @pydantic.field_validator("skills", mode="before")
    @classmethod
    def _decode_skills(cls, v: Any):
        return coerce_skill_list(v)

    @pydantic.field_validator("education", mode="before")
    @classmethod
    def _decode_education(cls, v: Any):
        return coerce_entry_list(v, "degree")

    @pydantic.field_validator("experience", "internship", "jobExperience", mode="before")
    @classmethod
    def _decode_experience(cls, v: Any):
        return coerce_entry_list(v, "role")

    @pydantic.field_validator("projects", mode="before")
    @classmethod
    def _decode_projects(cls, v: Any):
        return coerce_entry_list(v, "title")

    # Declared after the decoders so it wraps them and sees the stored value
    @pydantic.field_validator(
        "summary", "skills", "education", "experience", "internship", "jobExperience", "projects",
        mode="wrap",
    )
    @classmethod
    def _stored_text_on_mismatch(cls, v: Any, handler):
        try:
            return handler(v)
        except pydantic.ValidationError:
            if isinstance(v, bytes):
                v = v.decode("utf-8", "replace")
            return v if isinstance(v, str) else _as_text(v)

    @classmethod
    def from_row(cls, row: Mapping[str, Any], **extra: Any) -> "ResumeRecord":
        """Build from a ``resumes`` row mapping; absent columns read as empty."""
        return cls(
            id=row["id"],
            userId=row.get("user_id"),
            title=row.get("title"),
            summary=row.get("summary"),
            skills=row.get("skills"),
            education=row.get("education"),
            experience=row.get("experience"),
            internship=row.get("internship"),
            jobExperience=row.get("job_experience"),
            projects=row.get("projects"),
            createdAt=row.get("created_at"),
            updatedAt=row.get("updated_at"),
            **extra,
        )

    def effective_experience(self) -> List[ExperienceEntry]:
        """Internship + job entries when either exists, else the legacy list."""
        split = [
            entry
            for section in (self.internship, self.jobExperience)
            if isinstance(section, list)
            for entry in section
        ]
        if split:
            return split
        return self.experience if isinstance(self.experience, list) else []


class ViewStats(BaseModel):
    views: int = 0
    viewsThisWeek: int = 0


class PublicPortfolio(ResumeRecord):
    """Public portfolio payload: latest resume + owner's profile + view stats."""

    accountName: Optional[str] = None
    profilePicture: Optional[str] = None
    profilePicturePublicId: Optional[str] = None
    views: int = 0
    viewsThisWeek: int = 0


class DashboardStats(BaseModel):
    totalResumes: int = 0
    lastUpdated: Optional[datetime] = None
    lastResumeTitle: Optional[str] = None
    newThisMonth: int = 0
    portfolioViews: int = 0
    viewsThisWeek: int = 0


class MessageResponse(BaseModel):
    message: str


class SaveResumeResponse(BaseModel):
    message: str
    id: int


class GenerateResumeRequest(BaseModel):
    """Raw builder input sent to the text-generation service."""

    name: str = ""
    skills: List[str] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    internship: List[InternshipEntry] = Field(default_factory=list)
    jobExperience: List[JobEntry] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)

    @pydantic.field_validator(
        "skills", "education", "internship", "jobExperience", "experience", "projects",
        mode="before",
    )
    @classmethod
    def _lists_default_empty(cls, v: Any):
        return _none_to_list(v)


class GeneratedResume(BaseModel):
    """JSON object returned by the text-generation service."""

    summary: str = ""
    skills: List[str] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    internship: List[InternshipEntry] = Field(default_factory=list)
    jobExperience: List[JobEntry] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)
    model_config = pydantic.ConfigDict(extra="allow")

    @pydantic.field_validator("skills", mode="before")
    @classmethod
    def _flatten_skills(cls, v: Any):
        coerced = coerce_skill_list(v)
        return [s.strip() for s in coerced.split(",") if s.strip()] if isinstance(coerced, str) else coerced

    @pydantic.field_validator("education", mode="before")
    @classmethod
    def _wrap_education(cls, v: Any):
        return _entries_or_empty(v, "degree")

    @pydantic.field_validator("internship", "jobExperience", "experience", mode="before")
    @classmethod
    def _wrap_experience(cls, v: Any):
        return _entries_or_empty(v, "role")

    @pydantic.field_validator("projects", mode="before")
    @classmethod
    def _wrap_projects(cls, v: Any):
        return _entries_or_empty(v, "title")


def _entries_or_empty(v: Any, primary_key: str) -> List[Dict[str, Any]]:
    coerced = coerce_entry_list(v, primary_key)
    return [{primary_key: coerced}] if isinstance(coerced, str) else coerced
