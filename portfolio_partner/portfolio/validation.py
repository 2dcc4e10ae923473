"""Analysis request and asset validation."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

from portfolio_partner.portfolio.models import ASSET_TYPES, Asset, MacroViews, Portfolio, ValidationIssue


@dataclass(frozen=True)
class RequestLimits:
    max_assets: int = 200
    max_body_chars: int = 20000
    max_macro_chars: int = 5000
    max_question_chars: int = 500

    @classmethod
    def from_settings(cls, settings: Any) -> "RequestLimits":
        return cls(
            max_assets=settings.max_assets,
            max_body_chars=settings.max_body_chars,
            max_macro_chars=settings.max_macro_chars,
            max_question_chars=settings.max_question_chars,
        )


def is_body_too_large(body: Any, limits: RequestLimits) -> bool:
    """Compare the compact JSON form of a body against the character budget."""
    try:
        serialized = json.dumps(body, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError):
        return True
    return len(serialized) > limits.max_body_chars


def validate_portfolio_inputs(
    portfolio: Portfolio | None,
    macro_views: MacroViews | None,
    limits: RequestLimits,
    asset_count: int | None = None,
) -> str | None:
    """Check the documents of an analysis request.

    ``asset_count`` is the number of submitted asset entries when it differs
    from the parsed list, so malformed entries still count toward the ceiling.
    """
    if portfolio is None or macro_views is None:
        return "Portfolio and macro views are required."

    count = len(portfolio.assets) if asset_count is None else asset_count
    if count == 0:
        return "Portfolio assets are required."

    if count > limits.max_assets:
        return f"Portfolio exceeds the maximum of {limits.max_assets} assets."

    macro_text = "".join(macro_views.values())
    if len(macro_text) > limits.max_macro_chars:
        return f"Macro views exceed {limits.max_macro_chars} characters."

    return None


def validate_asset_entries(entries: list[Any]) -> str | None:
    if any(not isinstance(entry, dict) for entry in entries):
        return "Each portfolio asset must be a JSON object."
    return None


def validate_specific_questions(questions: Any, limits: RequestLimits) -> str | None:
    if questions is None:
        return None
    if not isinstance(questions, list):
        return "specificQuestions must be a list of strings."
    if len(questions) > 1:
        return "Only one follow-up question can be submitted at a time."
    if not questions:
        return None
    question = questions[0]
    if not isinstance(question, str):
        return "Follow-up question must be a string."
    if len(question) > limits.max_question_chars:
        return f"Follow-up question exceeds {limits.max_question_chars} characters."
    return None


def _positive(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def validate_asset(asset: Asset) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if not asset.ticker.strip():
        issues.append(ValidationIssue(field="ticker", code="missing_ticker", message="Ticker is required"))
    if not asset.name.strip():
        issues.append(ValidationIssue(field="name", code="missing_name", message="Asset name is required"))
    if not asset.type:
        issues.append(ValidationIssue(field="type", code="missing_type", message="Asset type is required"))
    elif asset.type not in ASSET_TYPES:
        issues.append(
            ValidationIssue(
                field="type",
                code="invalid_type",
                message=f"Asset type must be one of {list(ASSET_TYPES)}.",
            )
        )
    if not _positive(asset.quantity):
        issues.append(
            ValidationIssue(field="quantity", code="invalid_quantity", message="Quantity must be greater than 0")
        )
    if not _positive(asset.purchase_price):
        issues.append(
            ValidationIssue(
                field="purchasePrice",
                code="invalid_purchase_price",
                message="Purchase price must be greater than 0",
            )
        )
    return issues
