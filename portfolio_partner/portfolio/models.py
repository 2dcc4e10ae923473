"""Typed portfolio models and their camelCase JSON form."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Literal

AssetType = Literal["stock", "etf", "bond", "crypto", "other"]
ASSET_TYPES = ("stock", "etf", "bond", "crypto", "other")


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass
class Asset:
    id: str
    ticker: str
    name: str
    type: AssetType
    quantity: float
    purchase_price: float
    current_price: float | None = None
    purchase_date: str | None = None
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Asset":
        return cls(
            id=str(data.get("id") or ""),
            ticker=str(data.get("ticker") or ""),
            name=str(data.get("name") or ""),
            type=str(data.get("type") or ""),  # type: ignore[arg-type]
            quantity=_as_float(data.get("quantity")),
            purchase_price=_as_float(data.get("purchasePrice")),
            current_price=_optional_float(data.get("currentPrice")),
            purchase_date=_optional_str(data.get("purchaseDate")),
            notes=_optional_str(data.get("notes")),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "ticker": self.ticker,
            "name": self.name,
            "type": self.type,
            "quantity": self.quantity,
            "purchasePrice": self.purchase_price,
        }
        if self.current_price is not None:
            payload["currentPrice"] = self.current_price
        if self.purchase_date is not None:
            payload["purchaseDate"] = self.purchase_date
        if self.notes is not None:
            payload["notes"] = self.notes
        return payload


@dataclass
class Portfolio:
    id: str
    name: str
    assets: list[Asset] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Portfolio":
        raw_assets = data.get("assets")
        assets = [Asset.from_dict(item) for item in raw_assets if isinstance(item, dict)] if isinstance(raw_assets, list) else []
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            assets=assets,
            created_at=str(data.get("createdAt") or ""),
            updated_at=str(data.get("updatedAt") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "assets": [asset.to_dict() for asset in self.assets],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


_MACRO_WIRE_NAMES = {
    "economic_growth": "economicGrowth",
    "interest_rates": "interestRates",
    "government_policy": "governmentPolicy",
    "geopolitics": "geopolitics",
    "industry_specific": "industrySpecific",
}


@dataclass
class MacroViews:
    economic_growth: str = ""
    interest_rates: str = ""
    government_policy: str = ""
    geopolitics: str = ""
    industry_specific: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MacroViews":
        values = {}
        for attr, wire in _MACRO_WIRE_NAMES.items():
            value = data.get(wire)
            values[attr] = value if isinstance(value, str) else ""
        return cls(**values)

    def to_dict(self) -> dict[str, str]:
        return {wire: getattr(self, attr) for attr, wire in _MACRO_WIRE_NAMES.items()}

    def values(self) -> list[str]:
        return [getattr(self, item.name) for item in fields(self)]


@dataclass
class PortfolioSummary:
    total_value: float
    total_cost: float
    total_gain_loss: float
    total_gain_loss_percent: float
    allocation_by_type: dict[str, float]
    allocation_by_type_percent: dict[str, float]


@dataclass
class AnalysisResponse:
    insights: list[str] = field(default_factory=list)
    contradictions: list[str] = field(default_factory=list)
    follow_up_questions: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    risk_assessment: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisResponse":
        def _strings(key: str) -> list[str]:
            value = data.get(key)
            return [str(item) for item in value] if isinstance(value, list) else []

        risk = data.get("riskAssessment")
        return cls(
            insights=_strings("insights"),
            contradictions=_strings("contradictions"),
            follow_up_questions=_strings("followUpQuestions"),
            recommendations=_strings("recommendations"),
            risk_assessment=risk if isinstance(risk, str) else "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "insights": list(self.insights),
            "contradictions": list(self.contradictions),
            "followUpQuestions": list(self.follow_up_questions),
            "recommendations": list(self.recommendations),
            "riskAssessment": self.risk_assessment,
        }


@dataclass
class ValidationIssue:
    field: str
    message: str
    code: str = "invalid_value"
