"""Portfolio domain package."""

from portfolio_partner.portfolio.models import Asset, MacroViews, Portfolio
from portfolio_partner.portfolio.storage import PortfolioStore

__all__ = ["Asset", "MacroViews", "Portfolio", "PortfolioStore"]
