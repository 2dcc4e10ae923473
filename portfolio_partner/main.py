"""Application entrypoint for the portfolio thinking-partner server."""

from __future__ import annotations

import asyncio
import logging
import os

from mcp.server.fastmcp import FastMCP

from portfolio_partner.api.routes import analyze_handler, follow_up_questions_handler, health_handler
from portfolio_partner.config.settings import get_settings
from portfolio_partner.prompts.portfolio_prompts import register_portfolio_prompts
from portfolio_partner.tools.registry import ToolServices, build_tool_services, register_all_tools

LOGGER = logging.getLogger(__name__)


def resolve_transport_mode(configured_mode: str) -> str:
    if configured_mode in {"stdio", "http"}:
        return configured_mode
    if os.getenv("PORT"):
        return "http"
    return "stdio"


def resolve_http_transport(configured_transport: str) -> str:
    if configured_transport in {"sse", "streamable"}:
        return configured_transport
    return "sse"


def build_server(services: ToolServices) -> FastMCP:
    settings = services.settings
    mcp = FastMCP(
        name=settings.app_name,
        host=settings.host,
        port=settings.port,
        streamable_http_path=settings.mcp_path,
    )
    register_all_tools(mcp, services)
    register_portfolio_prompts(mcp)
    mcp.custom_route("/analyze", methods=["POST"])(analyze_handler(services))
    mcp.custom_route("/follow-up-questions", methods=["POST"])(follow_up_questions_handler(services))
    mcp.custom_route(settings.health_path, methods=["GET"])(health_handler(services))
    return mcp


async def run() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    services = build_tool_services(settings)
    mcp = build_server(services)
    resolved_mode = resolve_transport_mode(settings.transport_mode)
    resolved_http_transport = resolve_http_transport(settings.http_transport)

    if services.analysis.gateway is None:
        LOGGER.warning("ANTHROPIC_API_KEY is not set; analysis endpoints will respond with 500.")
    if settings.trust_forwarded_headers:
        LOGGER.info("Client keys are taken from X-Forwarded-For / X-Real-IP; disable TRUST_FORWARDED_HEADERS when exposed directly.")

    if resolved_mode == "stdio":
        await mcp.run_stdio_async()
    elif resolved_http_transport == "streamable":
        await mcp.run_streamable_http_async()
    else:
        await mcp.run_sse_async()


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
