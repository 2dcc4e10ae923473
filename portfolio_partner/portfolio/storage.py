"""JSON document store for the user's portfolio and macro views."""

from __future__ import annotations

import json
import logging
import os
import secrets
import time
from datetime import datetime, timezone
from typing import Any

from portfolio_partner.portfolio.models import MacroViews, Portfolio
from portfolio_partner.portfolio.validation import validate_asset

LOGGER = logging.getLogger(__name__)

PORTFOLIO_STORAGE_KEY = "portfolio"
MACRO_VIEWS_STORAGE_KEY = "macro_views"


class PortfolioImportError(ValueError):
    pass


def _id_suffix() -> str:
    alphabet = "abcdefghijklmnopqrstuvwxyz0123456789"
    return "".join(secrets.choice(alphabet) for _ in range(9))


def generate_portfolio_id() -> str:
    return f"portfolio_{int(time.time() * 1000)}_{_id_suffix()}"


def generate_asset_id() -> str:
    return f"asset_{int(time.time() * 1000)}_{_id_suffix()}"


def utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat().replace("+00:00", "Z")


def create_default_portfolio() -> Portfolio:
    now = utc_now_iso()
    return Portfolio(id=generate_portfolio_id(), name="My Portfolio", assets=[], created_at=now, updated_at=now)


def export_portfolio(portfolio: Portfolio) -> str:
    return json.dumps(portfolio.to_dict(), indent=2, ensure_ascii=False)


def import_portfolio(text: str) -> Portfolio:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as error:
        raise PortfolioImportError("Portfolio file is not valid JSON.") from error
    if not isinstance(data, dict) or not isinstance(data.get("assets"), list):
        raise PortfolioImportError("Portfolio file must be an object with an assets list.")
    portfolio = Portfolio.from_dict(data)
    for index, asset in enumerate(portfolio.assets):
        issues = validate_asset(asset)
        if issues:
            details = "; ".join(issue.message for issue in issues)
            raise PortfolioImportError(f"Asset {index + 1} is invalid: {details}")
    return portfolio


class PortfolioStore:
    """Stores each document wholesale under a fixed key, one JSON file per key."""

    def __init__(self, directory: str) -> None:
        self.directory = os.path.abspath(os.path.expanduser(directory))

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def _write(self, key: str, payload: dict[str, Any]) -> None:
        os.makedirs(self.directory, exist_ok=True)
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False)
        os.replace(tmp_path, path)

    def _read(self, key: str) -> dict[str, Any] | None:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as error:
            LOGGER.error("Failed to load %s from %s: %s", key, path, error)
            return None
        return data if isinstance(data, dict) else None

    def _remove(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass

    def save_portfolio(self, portfolio: Portfolio) -> None:
        for index, asset in enumerate(portfolio.assets):
            issues = validate_asset(asset)
            if issues:
                details = "; ".join(issue.message for issue in issues)
                raise ValueError(f"Asset {index + 1} is invalid: {details}")
        self._write(PORTFOLIO_STORAGE_KEY, portfolio.to_dict())

    def load_portfolio(self) -> Portfolio | None:
        data = self._read(PORTFOLIO_STORAGE_KEY)
        return Portfolio.from_dict(data) if data is not None else None

    def get_or_create_portfolio(self) -> Portfolio:
        saved = self.load_portfolio()
        if saved is not None:
            return saved
        portfolio = create_default_portfolio()
        self.save_portfolio(portfolio)
        return portfolio

    def clear_portfolio(self) -> None:
        self._remove(PORTFOLIO_STORAGE_KEY)

    def save_macro_views(self, macro_views: MacroViews) -> None:
        self._write(MACRO_VIEWS_STORAGE_KEY, macro_views.to_dict())

    def load_macro_views(self) -> MacroViews | None:
        data = self._read(MACRO_VIEWS_STORAGE_KEY)
        return MacroViews.from_dict(data) if data is not None else None

    def get_or_create_macro_views(self) -> MacroViews:
        saved = self.load_macro_views()
        if saved is not None:
            return saved
        macro_views = MacroViews()
        self.save_macro_views(macro_views)
        return macro_views

    def clear_macro_views(self) -> None:
        self._remove(MACRO_VIEWS_STORAGE_KEY)
