"""Demo portfolio and macro views for first-run exploration."""

from __future__ import annotations

from portfolio_partner.portfolio.models import Asset, MacroViews, Portfolio
from portfolio_partner.portfolio.storage import PortfolioStore, generate_portfolio_id, utc_now_iso


def demo_portfolio() -> Portfolio:
    now = utc_now_iso()
    return Portfolio(
        id=generate_portfolio_id(),
        name="Demo Portfolio",
        assets=[
            Asset("1", "AAPL", "Apple Inc.", "stock", 50, 150.0, 175.0, "2023-01-15", "Technology leader with strong ecosystem"),
            Asset("2", "MSFT", "Microsoft Corporation", "stock", 30, 280.0, 320.0, "2023-02-20", "Cloud computing and productivity software"),
            Asset("3", "VTI", "Vanguard Total Stock Market ETF", "etf", 100, 220.0, 240.0, "2023-03-10", "Broad market exposure for diversification"),
            Asset("4", "BND", "Vanguard Total Bond Market ETF", "bond", 200, 80.0, 78.0, "2023-04-05", "Fixed income allocation for stability"),
            Asset("5", "BTC-USD", "Bitcoin", "crypto", 0.5, 45000.0, 52000.0, "2023-05-12", "Digital asset allocation"),
        ],
        created_at=now,
        updated_at=now,
    )


def demo_macro_views() -> MacroViews:
    return MacroViews(
        economic_growth=(
            "I expect moderate economic growth with potential for a soft landing. Inflation is cooling "
            "but remains above target, and the labor market remains strong."
        ),
        interest_rates=(
            "I believe the Fed will keep rates higher for longer, with potential for 1-2 more hikes "
            "before pausing. Rate cuts may not come until late 2024 or early 2025."
        ),
        government_policy=(
            "Fiscal policy remains expansionary with infrastructure spending, but there's uncertainty "
            "around debt ceiling negotiations and potential government shutdowns."
        ),
        geopolitics=(
            "Ongoing tensions between US and China, Russia-Ukraine conflict, and Middle East instability "
            "create geopolitical risks that could impact energy prices and supply chains."
        ),
        industry_specific=(
            "I'm bullish on technology (AI/cloud computing), healthcare (aging population), and defensive "
            "sectors. Cautious on consumer discretionary and real estate due to high rates."
        ),
    )


def load_demo_data(store: PortfolioStore) -> tuple[Portfolio, MacroViews]:
    portfolio = demo_portfolio()
    macro_views = demo_macro_views()
    store.save_portfolio(portfolio)
    store.save_macro_views(macro_views)
    return portfolio, macro_views
