from portfolio_partner.portfolio.analytics import calculate_portfolio_summary
from portfolio_partner.portfolio.demo import demo_macro_views, demo_portfolio
from portfolio_partner.portfolio.models import AnalysisResponse, Asset, MacroViews, Portfolio
from portfolio_partner.prompts.analysis_prompts import (
    build_follow_up_prompt,
    build_initial_analysis_prompt,
    build_question_generation_prompt,
)


def test_initial_prompt_lists_summary_assets_and_views() -> None:
    portfolio = demo_portfolio()
    views = demo_macro_views()
    prompt = build_initial_analysis_prompt(portfolio, calculate_portfolio_summary(portfolio), views)
    assert prompt.startswith("Please analyze this investment portfolio")
    assert "- Total Value: $83,950.00" in prompt
    assert "- AAPL (Apple Inc.): 50 shares @ $150 = $8,750.00 (+1,250.00, 16.7%)" in prompt
    assert "- bond: $15,600.00" in prompt
    assert f"- Industry/Sector Views: {views.industry_specific}" in prompt


def test_follow_up_prompt_quotes_question() -> None:
    portfolio = demo_portfolio()
    prompt = build_follow_up_prompt(
        portfolio, calculate_portfolio_summary(portfolio), demo_macro_views(), "Should I trim crypto?"
    )
    assert 'answer this specific question: "Should I trim crypto?"' in prompt
    assert "- Holdings: 5 assets" in prompt
    assert "Industry/Sector Views" not in prompt


def test_malformed_numbers_render_without_error() -> None:
    portfolio = Portfolio(id="p", name="Odd", assets=[Asset("1", "X", "X Corp", "stock", float("nan"), 10.0)])
    prompt = build_initial_analysis_prompt(portfolio, calculate_portfolio_summary(portfolio), MacroViews())
    assert "nan" in prompt


def test_question_generation_prompt_falls_back_to_risk_assessment() -> None:
    portfolio = demo_portfolio()
    summary = calculate_portfolio_summary(portfolio)
    views = MacroViews(economic_growth="slowing", geopolitics="  ")
    prompt = build_question_generation_prompt(portfolio, summary, views, AnalysisResponse(risk_assessment="Rates risk."))
    assert "MACRO VIEWS: slowing\n" in prompt
    assert "PREVIOUS ANALYSIS: Rates risk." in prompt

    with_insights = build_question_generation_prompt(
        portfolio, summary, views, AnalysisResponse(insights=["a", "b"], risk_assessment="ignored")
    )
    assert "PREVIOUS ANALYSIS: a; b" in with_insights
