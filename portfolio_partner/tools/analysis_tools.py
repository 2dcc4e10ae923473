"""AI analysis MCP tools."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from portfolio_partner.runtime.response import DISCLAIMER
from portfolio_partner.services.errors import AdmissionDenied, AnalysisError
from portfolio_partner.services.formatter import format_for_display

if TYPE_CHECKING:
    from portfolio_partner.tools.registry import ToolServices

MCP_SCOPE = "mcp"
MCP_CLIENT_KEY = "local"


def _error_json(error: AnalysisError) -> str:
    payload: dict[str, Any] = {"error": error.message, "code": error.code}
    if isinstance(error, AdmissionDenied):
        payload["retry_after_seconds"] = error.retry_after_seconds
    return json.dumps(payload, ensure_ascii=True)


def _request_body(
    services: "ToolServices",
    portfolio: dict[str, Any] | None,
    macro_views: dict[str, Any] | None,
) -> dict[str, Any]:
    if portfolio is None:
        stored = services.store.load_portfolio()
        portfolio = stored.to_dict() if stored else None
    if macro_views is None:
        stored_views = services.store.load_macro_views()
        macro_views = stored_views.to_dict() if stored_views else None
    return {"portfolio": portfolio, "macroViews": macro_views}


def register_analysis_tools(mcp: FastMCP, services: "ToolServices") -> None:
    @mcp.tool(description="Analyze a portfolio against macro views. Uses the saved documents when omitted.")
    def analyze_portfolio(
        question: str | None = None,
        portfolio: dict[str, Any] | None = None,
        macro_views: dict[str, Any] | None = None,
    ) -> str:
        body = _request_body(services, portfolio, macro_views)
        if question:
            body["specificQuestions"] = [question]
        try:
            analysis = services.analysis.analyze(body, MCP_CLIENT_KEY, scope=MCP_SCOPE)
        except AnalysisError as error:
            return _error_json(error)
        payload = analysis.to_dict()
        payload["displayText"] = format_for_display(analysis)
        payload["disclaimer"] = DISCLAIMER
        return json.dumps(payload, ensure_ascii=True)

    @mcp.tool(description="Suggest follow-up questions that probe the investment thesis.")
    def generate_follow_up_questions(
        previous_analysis: dict[str, Any] | None = None,
        portfolio: dict[str, Any] | None = None,
        macro_views: dict[str, Any] | None = None,
    ) -> str:
        body = _request_body(services, portfolio, macro_views)
        body["previousAnalysis"] = previous_analysis or {}
        try:
            questions = services.analysis.follow_up_questions(body, MCP_CLIENT_KEY, scope=MCP_SCOPE)
        except AnalysisError as error:
            return _error_json(error)
        return json.dumps({"questions": questions}, ensure_ascii=True)
