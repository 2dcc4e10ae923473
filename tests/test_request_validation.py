from portfolio_partner.portfolio.models import Asset, MacroViews, Portfolio
from portfolio_partner.portfolio.validation import (
    RequestLimits,
    is_body_too_large,
    validate_asset,
    validate_asset_entries,
    validate_portfolio_inputs,
    validate_specific_questions,
)


def _asset(index: int = 1) -> Asset:
    return Asset(id=str(index), ticker=f"T{index}", name=f"Asset {index}", type="stock", quantity=1, purchase_price=10.0)


def _portfolio(count: int) -> Portfolio:
    return Portfolio(id="p1", name="Test", assets=[_asset(i) for i in range(count)])


def test_missing_documents_are_rejected_first() -> None:
    limits = RequestLimits()
    assert validate_portfolio_inputs(None, MacroViews(), limits) == "Portfolio and macro views are required."
    assert validate_portfolio_inputs(_portfolio(1), None, limits) == "Portfolio and macro views are required."


def test_empty_portfolio_is_rejected() -> None:
    reason = validate_portfolio_inputs(_portfolio(0), MacroViews(), RequestLimits())
    assert reason == "Portfolio assets are required."


def test_asset_ceiling_reason_wins_regardless_of_macro_text() -> None:
    limits = RequestLimits(max_assets=3, max_macro_chars=5)
    views = MacroViews(economic_growth="x" * 100)
    reason = validate_portfolio_inputs(_portfolio(4), views, limits)
    assert reason == "Portfolio exceeds the maximum of 3 assets."


def test_macro_text_is_measured_across_all_fields() -> None:
    limits = RequestLimits(max_macro_chars=10)
    within = MacroViews(economic_growth="abcde", geopolitics="fghij")
    over = MacroViews(economic_growth="abcde", geopolitics="fghij", industry_specific="k")
    assert validate_portfolio_inputs(_portfolio(1), within, limits) is None
    assert validate_portfolio_inputs(_portfolio(1), over, limits) == "Macro views exceed 10 characters."


def test_body_size_uses_compact_json_length() -> None:
    limits = RequestLimits(max_body_chars=20)
    assert not is_body_too_large({"a": "x" * 10}, limits)
    assert is_body_too_large({"a": "x" * 20}, limits)
    assert is_body_too_large({"a": object()}, limits)


def test_question_length_boundary() -> None:
    limits = RequestLimits(max_question_chars=500)
    assert validate_specific_questions(["q" * 500], limits) is None
    assert validate_specific_questions(["q" * 501], limits) == "Follow-up question exceeds 500 characters."


def test_only_one_question_is_accepted() -> None:
    limits = RequestLimits()
    assert validate_specific_questions(None, limits) is None
    assert validate_specific_questions([], limits) is None
    assert validate_specific_questions(["a", "b"], limits) == "Only one follow-up question can be submitted at a time."
    assert validate_specific_questions("a", limits) == "specificQuestions must be a list of strings."
    assert validate_specific_questions([3], limits) == "Follow-up question must be a string."


def test_validate_asset_flags_non_positive_values_and_unknown_type() -> None:
    asset = Asset(id="1", ticker="", name="X", type="option", quantity=0, purchase_price=-1.0)  # type: ignore[arg-type]
    codes = {issue.code for issue in validate_asset(asset)}
    assert codes == {"missing_ticker", "invalid_type", "invalid_quantity", "invalid_purchase_price"}
    assert validate_asset(_asset()) == []


def test_submitted_entry_count_drives_the_ceiling() -> None:
    limits = RequestLimits(max_assets=3)
    reason = validate_portfolio_inputs(_portfolio(1), MacroViews(), limits, asset_count=11)
    assert reason == "Portfolio exceeds the maximum of 3 assets."


def test_asset_entries_must_be_objects() -> None:
    assert validate_asset_entries([{"ticker": "A"}]) is None
    assert validate_asset_entries([{"ticker": "A"}, None]) == "Each portfolio asset must be a JSON object."
