"""Service wiring shared by the HTTP routes and MCP tools."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from mcp.server.fastmcp import FastMCP

from portfolio_partner.config.settings import Settings
from portfolio_partner.portfolio.storage import PortfolioStore
from portfolio_partner.portfolio.validation import RequestLimits
from portfolio_partner.providers.anthropic_client import AnthropicClient
from portfolio_partner.runtime.limits import FixedWindowRateLimiter, RateLimitStore
from portfolio_partner.runtime.monitoring import ServerMetrics
from portfolio_partner.services.analysis_service import AnalysisService
from portfolio_partner.services.gateway import CompletionClient, ModelGateway
from portfolio_partner.tools.analysis_tools import register_analysis_tools
from portfolio_partner.tools.portfolio_tools import register_portfolio_tools


@dataclass
class ToolServices:
    settings: Settings
    analysis: AnalysisService
    store: PortfolioStore
    metrics: ServerMetrics


def build_gateway(settings: Settings, client: CompletionClient | None = None) -> ModelGateway | None:
    if client is None:
        if not settings.claude_api_key:
            return None
        client = AnthropicClient(settings.claude_api_key, settings.claude_model, settings.request_timeout_seconds)
    return ModelGateway(
        client,
        max_tokens_initial=settings.max_tokens_initial,
        max_tokens_followup=settings.max_tokens_followup,
        max_tokens_questions=settings.max_tokens_questions,
    )


def build_tool_services(
    settings: Settings,
    client: CompletionClient | None = None,
    rate_limit_store: RateLimitStore | None = None,
    metrics: ServerMetrics | None = None,
    clock: Callable[[], float] = time.time,
) -> ToolServices:
    limiter = FixedWindowRateLimiter(
        per_minute=settings.rate_limit_per_minute,
        per_day=settings.rate_limit_per_day,
        store=rate_limit_store,
        clock=clock,
    )
    analysis = AnalysisService(
        limiter=limiter,
        limits=RequestLimits.from_settings(settings),
        gateway=build_gateway(settings, client),
    )
    return ToolServices(
        settings=settings,
        analysis=analysis,
        store=PortfolioStore(settings.data_dir),
        metrics=metrics or ServerMetrics(),
    )


def register_all_tools(mcp: FastMCP, services: ToolServices) -> None:
    register_analysis_tools(mcp, services)
    register_portfolio_tools(mcp, services)
