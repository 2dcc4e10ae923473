import math

from portfolio_partner.portfolio.analytics import calculate_portfolio_summary
from portfolio_partner.portfolio.models import Asset, Portfolio


def test_portfolio_summary_totals_and_allocation() -> None:
    portfolio = Portfolio(
        id="p1",
        name="Test",
        assets=[
            Asset("1", "AAPL", "Apple", "stock", 10, 100.0, 120.0),
            Asset("2", "BND", "Bond ETF", "bond", 5, 200.0, 180.0),
            Asset("3", "MSFT", "Microsoft", "stock", 2, 50.0),
        ],
    )
    summary = calculate_portfolio_summary(portfolio)
    assert summary.total_value == 2200.0
    assert summary.total_cost == 2100.0
    assert summary.total_gain_loss == 100.0
    assert math.isclose(summary.total_gain_loss_percent, 100.0 / 2100.0 * 100.0)
    assert summary.allocation_by_type == {"stock": 1300.0, "bond": 900.0}
    assert round(sum(summary.allocation_by_type_percent.values()), 6) == 100.0


def test_empty_portfolio_summary_is_zero() -> None:
    summary = calculate_portfolio_summary(Portfolio(id="p", name="Empty"))
    assert summary.total_value == 0.0
    assert summary.total_gain_loss_percent == 0.0
    assert summary.allocation_by_type == {}
