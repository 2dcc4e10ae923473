"""Portfolio document MCP tools."""

from __future__ import annotations

import json
from dataclasses import asdict, replace
from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from portfolio_partner.portfolio.analytics import calculate_portfolio_summary
from portfolio_partner.portfolio.demo import load_demo_data
from portfolio_partner.portfolio.models import Asset, MacroViews, Portfolio
from portfolio_partner.portfolio.storage import (
    PortfolioImportError,
    export_portfolio,
    generate_asset_id,
    import_portfolio,
    utc_now_iso,
)
from portfolio_partner.portfolio.validation import validate_asset

if TYPE_CHECKING:
    from portfolio_partner.tools.registry import ToolServices


def _dumps(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=True)


def register_portfolio_tools(mcp: FastMCP, services: "ToolServices") -> None:
    store = services.store

    @mcp.tool(description="Return the saved portfolio, creating an empty one on first use.")
    def get_portfolio() -> str:
        return _dumps(store.get_or_create_portfolio().to_dict())

    @mcp.tool(description="Add an asset to the saved portfolio.")
    def add_asset(
        ticker: str,
        name: str,
        asset_type: str,
        quantity: float,
        purchase_price: float,
        current_price: float | None = None,
        purchase_date: str | None = None,
        notes: str | None = None,
    ) -> str:
        asset = Asset(
            id=generate_asset_id(),
            ticker=ticker.strip().upper(),
            name=name.strip(),
            type=asset_type.strip().lower(),  # type: ignore[arg-type]
            quantity=quantity,
            purchase_price=purchase_price,
            current_price=current_price,
            purchase_date=purchase_date,
            notes=notes,
        )
        issues = validate_asset(asset)
        if issues:
            return _dumps({"ok": False, "errors": [asdict(issue) for issue in issues]})
        portfolio = store.get_or_create_portfolio()
        portfolio.assets.append(asset)
        portfolio.updated_at = utc_now_iso()
        store.save_portfolio(portfolio)
        return _dumps({"ok": True, "asset": asset.to_dict()})

    @mcp.tool(description="Edit an asset in the saved portfolio by id. Omitted fields keep their values.")
    def update_asset(
        asset_id: str,
        ticker: str | None = None,
        name: str | None = None,
        asset_type: str | None = None,
        quantity: float | None = None,
        purchase_price: float | None = None,
        current_price: float | None = None,
        purchase_date: str | None = None,
        notes: str | None = None,
    ) -> str:
        portfolio = store.get_or_create_portfolio()
        index = next((i for i, asset in enumerate(portfolio.assets) if asset.id == asset_id), None)
        if index is None:
            return _dumps({"ok": False, "error": f"Asset not found: {asset_id}"})

        current = portfolio.assets[index]
        changes: dict[str, Any] = {
            "ticker": ticker.strip().upper() if ticker is not None else None,
            "name": name.strip() if name is not None else None,
            "type": asset_type.strip().lower() if asset_type is not None else None,
            "quantity": quantity,
            "purchase_price": purchase_price,
            "current_price": current_price,
            "purchase_date": purchase_date,
            "notes": notes,
        }
        asset = replace(current, **{key: value for key, value in changes.items() if value is not None})
        issues = validate_asset(asset)
        if issues:
            return _dumps({"ok": False, "errors": [asdict(issue) for issue in issues]})
        portfolio.assets[index] = asset
        portfolio.updated_at = utc_now_iso()
        store.save_portfolio(portfolio)
        return _dumps({"ok": True, "asset": asset.to_dict()})

    @mcp.tool(description="Remove an asset from the saved portfolio by id.")
    def remove_asset(asset_id: str) -> str:
        portfolio = store.get_or_create_portfolio()
        remaining = [asset for asset in portfolio.assets if asset.id != asset_id]
        if len(remaining) == len(portfolio.assets):
            return _dumps({"ok": False, "error": f"Asset not found: {asset_id}"})
        portfolio.assets = remaining
        portfolio.updated_at = utc_now_iso()
        store.save_portfolio(portfolio)
        return _dumps({"ok": True, "asset_count": len(remaining)})

    @mcp.tool(description="Return the saved macro views.")
    def get_macro_views() -> str:
        return _dumps(store.get_or_create_macro_views().to_dict())

    @mcp.tool(description="Replace the saved macro views.")
    def save_macro_views(macro_views: dict[str, Any]) -> str:
        views = MacroViews.from_dict(macro_views)
        store.save_macro_views(views)
        return _dumps({"ok": True, "macroViews": views.to_dict()})

    @mcp.tool(description="Summarize total value, cost, gain/loss and allocation of the saved portfolio.")
    def portfolio_summary() -> str:
        summary = calculate_portfolio_summary(store.get_or_create_portfolio())
        return _dumps(asdict(summary))

    @mcp.tool(description="Export the saved portfolio as a JSON document.")
    def export_portfolio_json() -> str:
        return export_portfolio(store.get_or_create_portfolio())

    @mcp.tool(description="Import a portfolio JSON document, replacing the saved portfolio.")
    def import_portfolio_json(document: str) -> str:
        try:
            portfolio: Portfolio = import_portfolio(document)
        except PortfolioImportError as error:
            return _dumps({"ok": False, "error": str(error)})
        store.save_portfolio(portfolio)
        return _dumps({"ok": True, "asset_count": len(portfolio.assets)})

    @mcp.tool(description="Load the demo portfolio and macro views into the store.")
    def load_demo_portfolio() -> str:
        portfolio, macro_views = load_demo_data(store)
        return _dumps({"portfolio": portfolio.to_dict(), "macroViews": macro_views.to_dict()})

    @mcp.tool(description="Delete the saved portfolio and macro views.")
    def clear_portfolio_data() -> str:
        store.clear_portfolio()
        store.clear_macro_views()
        return _dumps({"ok": True})
