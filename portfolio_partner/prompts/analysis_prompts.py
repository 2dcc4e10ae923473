"""Prompt templates for portfolio analysis conversations."""

from __future__ import annotations

from portfolio_partner.portfolio.models import AnalysisResponse, MacroViews, Portfolio, PortfolioSummary

INITIAL_ANALYSIS_SYSTEM_PROMPT = """You are an experienced investment committee member at a sophisticated hedge fund. Your role is to evaluate investment decisions with rigor and skepticism.

For the INITIAL analysis, provide a comprehensive overview that includes:

1. INSIGHTS: How well does this portfolio align with the stated macro views? What are the key strengths and strategic positioning?

2. CONTRADICTIONS: What contradictions exist between the macro views and portfolio positioning? What potential misalignments should be addressed?

3. RECOMMENDATIONS: What specific actions would you recommend to optimize the portfolio given the macro environment?

4. RISK ASSESSMENT: What are the key risks given the macro environment described? Include both portfolio-specific and macro risks.

5. FOLLOW-UP QUESTIONS: What critical questions would you ask to deepen the investment thesis and identify potential blind spots?

Format your response with clear section headers using **bold** text. Be direct, analytical, and provide actionable insights. Focus on the big picture alignment between macro views and portfolio positioning."""

FOLLOW_UP_SYSTEM_PROMPT = """You are an experienced investment committee member having a conversation with an investor.
For follow-up questions, respond conversationally and naturally. Don't repeat the structured format. Instead:
- Answer the specific question asked
- Provide actionable insights
- Ask clarifying questions if needed
- Reference the portfolio context when relevant
- Be conversational but professional
Keep your response focused and direct. Don't regurgitate the initial analysis structure."""

QUESTION_GENERATION_SYSTEM_PROMPT = (
    "You are an investment committee member. Generate 3-5 follow-up questions based on the portfolio "
    "analysis and macro views. Questions should be specific, actionable, and help deepen the investment thesis."
)

PREVIOUS_ANALYSIS_EXCERPT_CHARS = 1500


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _signed(value: float) -> str:
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:,.2f}"


def _asset_line(asset) -> str:
    price = asset.current_price or asset.purchase_price
    value = asset.quantity * price
    cost = asset.quantity * asset.purchase_price
    gain_loss = value - cost
    gain_loss_percent = (gain_loss / cost) * 100 if cost else float("nan")
    return (
        f"- {asset.ticker} ({asset.name}): {asset.quantity:g} shares @ ${asset.purchase_price:g} = "
        f"{_money(value)} ({_signed(gain_loss)}, {gain_loss_percent:.1f}%)"
    )


def build_initial_analysis_prompt(portfolio: Portfolio, summary: PortfolioSummary, macro_views: MacroViews) -> str:
    allocation = "\n".join(
        f"- {asset_type}: {_money(amount)} ({summary.allocation_by_type_percent.get(asset_type, 0.0):.1f}%)"
        for asset_type, amount in summary.allocation_by_type.items()
    )
    assets = "\n".join(_asset_line(asset) for asset in portfolio.assets)
    return (
        "Please analyze this investment portfolio in the context of the stated macro views:\n\n"
        "PORTFOLIO SUMMARY:\n"
        f"- Total Value: {_money(summary.total_value)}\n"
        f"- Total Cost: {_money(summary.total_cost)}\n"
        f"- Total Gain/Loss: {_money(summary.total_gain_loss)} ({summary.total_gain_loss_percent:.2f}%)\n\n"
        "ASSET ALLOCATION:\n"
        f"{allocation}\n\n"
        "ASSETS:\n"
        f"{assets}\n\n"
        "MACRO VIEWS:\n"
        f"- Economic Growth: {macro_views.economic_growth}\n"
        f"- Interest Rates: {macro_views.interest_rates}\n"
        f"- Government Policy: {macro_views.government_policy}\n"
        f"- Geopolitics: {macro_views.geopolitics}\n"
        f"- Industry/Sector Views: {macro_views.industry_specific}\n\n"
        "Please provide a comprehensive analysis following the structured format requested."
    )


def build_follow_up_prompt(
    portfolio: Portfolio,
    summary: PortfolioSummary,
    macro_views: MacroViews,
    question: str,
) -> str:
    allocation = ", ".join(
        f"{asset_type}: {percent:.1f}%" for asset_type, percent in summary.allocation_by_type_percent.items()
    )
    return (
        f'Based on this portfolio and macro context, please answer this specific question: "{question}"\n\n'
        "PORTFOLIO CONTEXT:\n"
        f"- Holdings: {len(portfolio.assets)} assets\n"
        f"- Total Value: {_money(summary.total_value)}\n"
        f"- Asset Allocation: {allocation}\n\n"
        "MACRO CONTEXT:\n"
        f"- Economic Growth: {macro_views.economic_growth}\n"
        f"- Interest Rates: {macro_views.interest_rates}\n"
        f"- Government Policy: {macro_views.government_policy}\n"
        f"- Geopolitics: {macro_views.geopolitics}\n\n"
        "Please provide a conversational, direct answer to the question while referencing the portfolio "
        "and macro context when relevant."
    )


def build_question_generation_prompt(
    portfolio: Portfolio,
    summary: PortfolioSummary,
    macro_views: MacroViews,
    previous_analysis: AnalysisResponse,
) -> str:
    views = "; ".join(value for value in macro_views.values() if value.strip())
    if previous_analysis.insights:
        previous = "; ".join(previous_analysis.insights)
    else:
        previous = previous_analysis.risk_assessment[:PREVIOUS_ANALYSIS_EXCERPT_CHARS]
    return (
        "Based on this portfolio analysis and macro views, generate follow-up questions:\n\n"
        f"PORTFOLIO: {len(portfolio.assets)} assets, total value {_money(summary.total_value)}\n"
        f"MACRO VIEWS: {views}\n"
        f"PREVIOUS ANALYSIS: {previous}\n\n"
        "Generate 3-5 specific follow-up questions."
    )
