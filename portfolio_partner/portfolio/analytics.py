"""Portfolio valuation summary."""

from __future__ import annotations

import pandas as pd

from portfolio_partner.portfolio.models import Portfolio, PortfolioSummary


def portfolio_frame(portfolio: Portfolio) -> pd.DataFrame:
    rows = [
        {
            "Ticker": asset.ticker,
            "Type": asset.type,
            "Quantity": asset.quantity,
            "Purchase_Price": asset.purchase_price,
            "Current_Price": asset.current_price if asset.current_price else asset.purchase_price,
        }
        for asset in portfolio.assets
    ]
    frame = pd.DataFrame(rows, columns=["Ticker", "Type", "Quantity", "Purchase_Price", "Current_Price"])
    frame["Market_Value"] = frame["Quantity"].astype(float) * frame["Current_Price"].astype(float)
    frame["Cost_Basis"] = frame["Quantity"].astype(float) * frame["Purchase_Price"].astype(float)
    return frame


def calculate_portfolio_summary(portfolio: Portfolio) -> PortfolioSummary:
    frame = portfolio_frame(portfolio)
    total_value = float(frame["Market_Value"].sum())
    total_cost = float(frame["Cost_Basis"].sum())
    total_gain_loss = total_value - total_cost
    total_gain_loss_percent = (total_gain_loss / total_cost) * 100.0 if total_cost > 0 else 0.0

    allocation = {str(key): float(value) for key, value in frame.groupby("Type", sort=False)["Market_Value"].sum().items()}
    allocation_percent = {
        key: (value / total_value) * 100.0 if total_value > 0 else 0.0 for key, value in allocation.items()
    }
    return PortfolioSummary(
        total_value=total_value,
        total_cost=total_cost,
        total_gain_loss=total_gain_loss,
        total_gain_loss_percent=total_gain_loss_percent,
        allocation_by_type=allocation,
        allocation_by_type_percent=allocation_percent,
    )
