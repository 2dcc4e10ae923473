"""Display shaping for model output."""

from __future__ import annotations

import re

from portfolio_partner.portfolio.models import AnalysisResponse

EXPLORE_FURTHER_PROMPT = "**What would you like to explore further about your portfolio or investment strategy?**"
DEFAULT_FOLLOW_UP_QUESTIONS = [
    "What specific data supports your view on economic growth?",
    "How would your portfolio perform in a different interest rate environment?",
    "What evidence contradicts your investment thesis?",
]

_LIST_MARKER = re.compile(r"^(?:[-•]|\*(?!\*)|\d+\.)\s*")


def build_analysis_response(raw_text: str) -> AnalysisResponse:
    return AnalysisResponse(risk_assessment=raw_text)


def format_for_display(analysis: AnalysisResponse) -> str:
    return f"{analysis.risk_assessment}\n\n{EXPLORE_FURTHER_PROMPT}"


def parse_follow_up_questions(raw_text: str) -> list[str]:
    """Pick list-style lines out of the reply, or fall back to stock questions."""
    questions: list[str] = []
    for line in raw_text.splitlines():
        stripped = line.strip()
        if not _LIST_MARKER.match(stripped):
            continue
        question = _LIST_MARKER.sub("", stripped, count=1).strip()
        if question:
            questions.append(question)
    return questions or list(DEFAULT_FOLLOW_UP_QUESTIONS)
