"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the analysis API and the MCP surface."""

    app_name: str = "portfolio-thinking-partner"
    app_version: str = "1.0.0"
    transport_mode: str = "auto"
    http_transport: str = "sse"
    host: str = "0.0.0.0"
    port: int = 8000
    mcp_path: str = "/mcp"
    health_path: str = "/health"
    log_level: str = "INFO"
    claude_api_key: str | None = None
    claude_model: str = DEFAULT_MODEL
    request_timeout_seconds: float = 30.0
    max_tokens_initial: int = 2000
    max_tokens_followup: int = 1500
    max_tokens_questions: int = 500
    rate_limit_per_minute: int = 10
    rate_limit_per_day: int = 200
    max_assets: int = 200
    max_body_chars: int = 20000
    max_macro_chars: int = 5000
    max_question_chars: int = 500
    trust_forwarded_headers: bool = True
    data_dir: str = os.path.join("~", ".portfolio_partner")


def _as_int(value: str | None, default: int) -> int:
    """Parse a positive integer; anything else yields the default."""
    if value is None or value == "":
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _as_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def get_settings() -> Settings:
    """Load runtime settings from environment variables."""
    load_dotenv()

    return Settings(
        transport_mode=os.getenv("TRANSPORT_MODE", "auto").strip().lower(),
        http_transport=os.getenv("HTTP_TRANSPORT", "sse").strip().lower(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_as_int(os.getenv("PORT"), 8000),
        mcp_path=os.getenv("MCP_PATH", "/mcp"),
        health_path=os.getenv("HEALTH_PATH", "/health"),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        claude_api_key=os.getenv("ANTHROPIC_API_KEY") or os.getenv("CLAUDE_API_KEY"),
        claude_model=os.getenv("AI_MODEL") or os.getenv("CLAUDE_MODEL") or DEFAULT_MODEL,
        request_timeout_seconds=_as_float(os.getenv("REQUEST_TIMEOUT_SECONDS"), 30.0),
        max_tokens_initial=_as_int(os.getenv("AI_MAX_TOKENS_INITIAL"), 2000),
        max_tokens_followup=_as_int(os.getenv("AI_MAX_TOKENS_FOLLOWUP"), 1500),
        max_tokens_questions=_as_int(os.getenv("AI_MAX_TOKENS_QUESTIONS"), 500),
        rate_limit_per_minute=_as_int(os.getenv("AI_RATE_LIMIT_PER_MINUTE"), 10),
        rate_limit_per_day=_as_int(os.getenv("AI_RATE_LIMIT_PER_DAY"), 200),
        max_assets=_as_int(os.getenv("AI_MAX_ASSETS"), 200),
        max_body_chars=_as_int(os.getenv("AI_MAX_BODY_CHARS"), 20000),
        max_macro_chars=_as_int(os.getenv("AI_MAX_MACRO_CHARS"), 5000),
        max_question_chars=_as_int(os.getenv("AI_MAX_QUESTION_CHARS"), 500),
        trust_forwarded_headers=_as_bool(os.getenv("TRUST_FORWARDED_HEADERS"), True),
        data_dir=os.getenv("PORTFOLIO_DATA_DIR", os.path.join("~", ".portfolio_partner")),
    )
