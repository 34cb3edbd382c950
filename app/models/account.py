from sqlalchemy import Column, DateTime, Integer, String, func

from app.db.database import Base


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    # Optional columns: older deployments may not have them
    last_login = Column(DateTime, nullable=True)
    profile_picture = Column(String(500), nullable=True)
    profile_picture_public_id = Column(String(255), nullable=True)
