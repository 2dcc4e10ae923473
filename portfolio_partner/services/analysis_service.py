"""Analysis workflow: validate, admit, prompt, complete, format."""

from __future__ import annotations

import logging
from typing import Any

from portfolio_partner.portfolio.analytics import calculate_portfolio_summary
from portfolio_partner.portfolio.models import AnalysisResponse, MacroViews, Portfolio
from portfolio_partner.portfolio.validation import (
    RequestLimits,
    is_body_too_large,
    validate_asset_entries,
    validate_portfolio_inputs,
    validate_specific_questions,
)
from portfolio_partner.prompts.analysis_prompts import (
    build_follow_up_prompt,
    build_initial_analysis_prompt,
    build_question_generation_prompt,
)
from portfolio_partner.runtime.limits import FixedWindowRateLimiter, RateLimitExceeded
from portfolio_partner.services.errors import (
    AdmissionDenied,
    ConfigurationMissing,
    InputValidationError,
    PayloadTooLargeError,
)
from portfolio_partner.services.formatter import build_analysis_response, parse_follow_up_questions
from portfolio_partner.services.gateway import ModelGateway

LOGGER = logging.getLogger(__name__)

AI_SCOPE = "ai"
MISSING_CREDENTIALS_MESSAGE = "AI service is not configured. Set ANTHROPIC_API_KEY on the server."


def _parse_documents(body: Any) -> tuple[Portfolio | None, MacroViews | None]:
    if not isinstance(body, dict):
        raise InputValidationError("Request body must be a JSON object.")
    raw_portfolio = body.get("portfolio")
    raw_macro = body.get("macroViews")
    portfolio = Portfolio.from_dict(raw_portfolio) if isinstance(raw_portfolio, dict) else None
    macro_views = MacroViews.from_dict(raw_macro) if isinstance(raw_macro, dict) else None
    return portfolio, macro_views


def _asset_entries(body: dict[str, Any]) -> list[Any]:
    raw_portfolio = body.get("portfolio")
    if not isinstance(raw_portfolio, dict):
        return []
    entries = raw_portfolio.get("assets")
    return entries if isinstance(entries, list) else []


class AnalysisService:
    def __init__(
        self,
        limiter: FixedWindowRateLimiter,
        limits: RequestLimits,
        gateway: ModelGateway | None = None,
        scope: str = AI_SCOPE,
    ) -> None:
        self.limiter = limiter
        self.limits = limits
        self.gateway = gateway
        self.scope = scope

    def _validated(self, body: Any) -> tuple[Portfolio, MacroViews]:
        portfolio, macro_views = _parse_documents(body)
        entries = _asset_entries(body)
        reason = validate_portfolio_inputs(portfolio, macro_views, self.limits, asset_count=len(entries))
        if reason:
            raise InputValidationError(reason)
        reason = validate_asset_entries(entries)
        if reason:
            raise InputValidationError(reason)
        if is_body_too_large(body, self.limits):
            raise PayloadTooLargeError(f"Request body exceeds {self.limits.max_body_chars} characters.")
        return portfolio, macro_views  # type: ignore[return-value]

    def _admit(self, client_key: str, scope: str | None) -> None:
        try:
            self.limiter.enforce(client_key, scope or self.scope)
        except RateLimitExceeded as error:
            raise AdmissionDenied(error.message, error.retry_after_seconds) from error

    def _gateway(self) -> ModelGateway:
        if self.gateway is None:
            raise ConfigurationMissing(MISSING_CREDENTIALS_MESSAGE)
        return self.gateway

    def analyze(self, body: Any, client_key: str, scope: str | None = None) -> AnalysisResponse:
        portfolio, macro_views = self._validated(body)
        questions = body.get("specificQuestions")
        reason = validate_specific_questions(questions, self.limits)
        if reason:
            raise InputValidationError(reason)
        self._admit(client_key, scope)
        gateway = self._gateway()

        summary = calculate_portfolio_summary(portfolio)
        if questions:
            LOGGER.info("Follow-up question for portfolio with %d assets", len(portfolio.assets))
            prompt = build_follow_up_prompt(portfolio, summary, macro_views, questions[0])
            raw = gateway.analyze(prompt, follow_up=True)
        else:
            LOGGER.info("Initial analysis for portfolio with %d assets", len(portfolio.assets))
            prompt = build_initial_analysis_prompt(portfolio, summary, macro_views)
            raw = gateway.analyze(prompt, follow_up=False)
        return build_analysis_response(raw)

    def follow_up_questions(self, body: Any, client_key: str, scope: str | None = None) -> list[str]:
        portfolio, macro_views = self._validated(body)
        raw_previous = body.get("previousAnalysis")
        previous = AnalysisResponse.from_dict(raw_previous) if isinstance(raw_previous, dict) else AnalysisResponse()
        self._admit(client_key, scope)
        gateway = self._gateway()

        summary = calculate_portfolio_summary(portfolio)
        prompt = build_question_generation_prompt(portfolio, summary, macro_views, previous)
        return parse_follow_up_questions(gateway.generate_questions(prompt))
