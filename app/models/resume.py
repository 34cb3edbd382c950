from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from app.db.database import Base


class Resume(Base):
    __tablename__ = "resumes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("accounts.id"), index=True, nullable=False)
    title = Column(String(255), nullable=True)
    # JSON-encoded sections; MySQL drivers hand JSON columns back as text anyway
    summary = Column(Text)
    skills = Column(Text)
    education = Column(Text)
    experience = Column(Text)
    internship = Column(Text, nullable=True)
    job_experience = Column(Text, nullable=True)
    projects = Column(Text, nullable=True)
    # No client-side defaults: Core INSERTs must only touch probed columns
    created_at = Column(DateTime, server_default=func.now(), nullable=True)
    updated_at = Column(DateTime, server_default=func.now(), nullable=True)
