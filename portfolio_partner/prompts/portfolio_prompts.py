"""Portfolio prompt definitions."""

from __future__ import annotations

import json

from mcp.server.fastmcp import FastMCP

from portfolio_partner.portfolio.analytics import calculate_portfolio_summary
from portfolio_partner.portfolio.models import MacroViews, Portfolio
from portfolio_partner.prompts.analysis_prompts import build_initial_analysis_prompt


def _build_portfolio_analysis_prompt(portfolio: str, macro_views: str) -> str:
    try:
        portfolio_doc = json.loads(portfolio)
        macro_doc = json.loads(macro_views)
    except json.JSONDecodeError as error:
        raise ValueError("portfolio and macro_views must be JSON documents.") from error
    if not isinstance(portfolio_doc, dict) or not isinstance(macro_doc, dict):
        raise ValueError("portfolio and macro_views must be JSON objects.")
    parsed = Portfolio.from_dict(portfolio_doc)
    if not parsed.assets:
        raise ValueError("Portfolio assets are required.")
    return build_initial_analysis_prompt(parsed, calculate_portfolio_summary(parsed), MacroViews.from_dict(macro_doc))


def register_portfolio_prompts(mcp: FastMCP) -> None:
    @mcp.prompt(
        name="portfolio_analysis",
        title="Portfolio Analysis Prompt",
        description="Render the initial analysis prompt for a portfolio and macro views (JSON documents).",
    )
    def portfolio_analysis(portfolio: str, macro_views: str) -> str:
        return _build_portfolio_analysis_prompt(portfolio, macro_views)
