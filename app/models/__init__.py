from .account import Account
from .resume import Resume
from .portfolio_view import PortfolioView

__all__ = ["Account", "Resume", "PortfolioView"]
