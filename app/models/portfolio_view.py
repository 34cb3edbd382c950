from sqlalchemy import Column, DateTime, ForeignKey, Integer

from app.db.database import Base


class PortfolioView(Base):
    __tablename__ = "portfolio_views"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("accounts.id"), unique=True, nullable=False)
    views = Column(Integer, nullable=False, default=0, server_default="0")
    views_this_week = Column(Integer, nullable=False, default=0, server_default="0")
    last_view_date = Column(DateTime, nullable=True)
