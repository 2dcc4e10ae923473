from starlette.testclient import TestClient

from portfolio_partner.api.routes import build_http_app
from portfolio_partner.config.settings import Settings
from portfolio_partner.providers.http import ProviderError
from portfolio_partner.tools.registry import build_tool_services


class _Clock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class _StubClient:
    def __init__(self, reply: str = "**RISK ASSESSMENT**\nRates may stay high.", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls = 0

    def complete(self, system: str, prompt: str, max_tokens: int, temperature: float) -> str:
        self.calls += 1
        if self.error:
            raise self.error
        return self.reply


def _body(asset_count: int = 2, **extra: object) -> dict[str, object]:
    assets = [
        {"id": str(i), "ticker": f"T{i}", "name": f"Asset {i}", "type": "stock", "quantity": 10, "purchasePrice": 100.0}
        for i in range(asset_count)
    ]
    body: dict[str, object] = {
        "portfolio": {"id": "p1", "name": "Test", "assets": assets, "createdAt": "", "updatedAt": ""},
        "macroViews": {
            "economicGrowth": "Slowing growth",
            "interestRates": "Higher for longer",
            "governmentPolicy": "",
            "geopolitics": "",
            "industrySpecific": "",
        },
    }
    body.update(extra)
    return body


def _client(tmp_path, stub: _StubClient | None = None, **overrides: object) -> TestClient:
    settings = Settings(data_dir=str(tmp_path), **overrides)
    services = build_tool_services(settings, client=stub, clock=_Clock())
    return TestClient(build_http_app(services))


def test_analyze_returns_raw_text_in_risk_assessment(tmp_path) -> None:
    stub = _StubClient()
    client = _client(tmp_path, stub)
    response = client.post("/analyze", json=_body())
    assert response.status_code == 200
    assert response.json() == {
        "insights": [],
        "contradictions": [],
        "followUpQuestions": [],
        "recommendations": [],
        "riskAssessment": "**RISK ASSESSMENT**\nRates may stay high.",
    }
    assert stub.calls == 1


def test_zero_assets_is_rejected_without_model_call(tmp_path) -> None:
    stub = _StubClient()
    client = _client(tmp_path, stub)
    response = client.post("/analyze", json=_body(asset_count=0))
    assert response.status_code == 400
    assert response.json()["error"] == "Portfolio assets are required."
    assert stub.calls == 0


def test_eleventh_request_in_a_minute_is_throttled(tmp_path) -> None:
    client = _client(tmp_path, _StubClient())
    headers = {"X-Forwarded-For": "1.2.3.4"}
    for _ in range(10):
        assert client.post("/analyze", json=_body(), headers=headers).status_code == 200

    response = client.post("/analyze", json=_body(), headers=headers)
    assert response.status_code == 429
    retry_after = response.headers["Retry-After"]
    assert retry_after.isdigit() and 0 < int(retry_after) <= 60
    assert response.json()["code"] == "RATE_LIMITED"

    other = client.post("/analyze", json=_body(), headers={"X-Forwarded-For": "5.6.7.8"})
    assert other.status_code == 200


def test_question_length_boundary(tmp_path) -> None:
    client = _client(tmp_path, _StubClient())
    accepted = client.post("/analyze", json=_body(specificQuestions=["q" * 500]))
    assert accepted.status_code == 200

    rejected = client.post("/analyze", json=_body(specificQuestions=["q" * 501]))
    assert rejected.status_code == 400
    assert rejected.json()["error"] == "Follow-up question exceeds 500 characters."


def test_more_than_one_question_is_rejected(tmp_path) -> None:
    client = _client(tmp_path, _StubClient())
    response = client.post("/analyze", json=_body(specificQuestions=["a", "b"]))
    assert response.status_code == 400


def test_too_many_assets_is_rejected(tmp_path) -> None:
    client = _client(tmp_path, _StubClient(), max_assets=3)
    response = client.post("/analyze", json=_body(asset_count=4))
    assert response.status_code == 400
    assert response.json()["error"] == "Portfolio exceeds the maximum of 3 assets."


def test_oversized_body_is_413(tmp_path) -> None:
    client = _client(tmp_path, _StubClient(), max_body_chars=200)
    response = client.post("/analyze", json=_body(asset_count=5))
    assert response.status_code == 413


def test_invalid_json_is_400(tmp_path) -> None:
    client = _client(tmp_path, _StubClient())
    response = client.post("/analyze", content=b"{not json", headers={"content-type": "application/json"})
    assert response.status_code == 400
    assert response.json()["error"] == "Request body must be valid JSON."


def test_missing_credentials_is_500(tmp_path) -> None:
    client = _client(tmp_path, None, claude_api_key=None)
    response = client.post("/analyze", json=_body())
    assert response.status_code == 500
    assert "not configured" in response.json()["error"]


def test_upstream_failure_is_500_with_detail(tmp_path) -> None:
    stub = _StubClient(error=ProviderError("anthropic", "UPSTREAM", "Anthropic request failed with status 503.", 503))
    client = _client(tmp_path, stub)
    response = client.post("/analyze", json=_body())
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to analyze portfolio: Anthropic request failed with status 503."


def test_client_supplied_api_key_is_ignored(tmp_path) -> None:
    client = _client(tmp_path, None, claude_api_key=None)
    response = client.post("/analyze", json=_body(apiKey="sk-browser"))
    assert response.status_code == 500


def test_follow_up_questions_returns_list(tmp_path) -> None:
    stub = _StubClient(reply="1. What if rates fall?\n2. How liquid is the bond sleeve?")
    client = _client(tmp_path, stub)
    body = _body(previousAnalysis={"insights": [], "riskAssessment": "Rates may stay high."})
    response = client.post("/follow-up-questions", json=body)
    assert response.status_code == 200
    assert response.json() == ["What if rates fall?", "How liquid is the bond sleeve?"]


def test_follow_up_questions_shares_validation(tmp_path) -> None:
    client = _client(tmp_path, _StubClient())
    response = client.post("/follow-up-questions", json={"portfolio": None})
    assert response.status_code == 400
    assert response.json()["error"] == "Portfolio and macro views are required."


def test_health_reports_request_metrics(tmp_path) -> None:
    client = _client(tmp_path, _StubClient())
    client.post("/analyze", json=_body())
    client.post("/analyze", json=_body(asset_count=0))
    payload = client.get("/health").json()
    assert payload["status"] == "ok"
    assert payload["ai_configured"] is True
    assert payload["total_requests"] == 2
    assert payload["error_rate"] == 0.5


def test_asset_ceiling_reason_precedes_body_size(tmp_path) -> None:
    client = _client(tmp_path, _StubClient(), max_assets=3, max_body_chars=200)
    response = client.post("/analyze", json=_body(asset_count=10))
    assert response.status_code == 400
    assert response.json()["error"] == "Portfolio exceeds the maximum of 3 assets."


def test_padded_asset_entries_count_toward_ceiling(tmp_path) -> None:
    stub = _StubClient()
    client = _client(tmp_path, stub, max_assets=3)
    body = _body(asset_count=1)
    body["portfolio"]["assets"] += [None] * 10  # type: ignore[index]
    response = client.post("/analyze", json=body)
    assert response.status_code == 400
    assert response.json()["error"] == "Portfolio exceeds the maximum of 3 assets."
    assert stub.calls == 0


def test_non_object_asset_entry_is_rejected(tmp_path) -> None:
    stub = _StubClient()
    client = _client(tmp_path, stub)
    body = _body(asset_count=1)
    body["portfolio"]["assets"].append("AAPL")  # type: ignore[index]
    response = client.post("/analyze", json=body)
    assert response.status_code == 400
    assert response.json()["error"] == "Each portfolio asset must be a JSON object."
    assert stub.calls == 0


def test_nan_literal_is_invalid_json(tmp_path) -> None:
    stub = _StubClient()
    client = _client(tmp_path, stub)
    raw = (
        '{"portfolio":{"assets":[{"id":"1","ticker":"T","name":"T","type":"stock",'
        '"quantity":NaN,"purchasePrice":100}]},"macroViews":{}}'
    )
    response = client.post("/analyze", content=raw, headers={"content-type": "application/json"})
    assert response.status_code == 400
    assert response.json()["error"] == "Request body must be valid JSON."
    assert stub.calls == 0


def test_unexpected_error_is_500_and_counted(tmp_path) -> None:
    client = _client(tmp_path, _StubClient(error=RuntimeError("boom")))
    response = client.post("/analyze", json=_body())
    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL"
    assert response.json()["error"] == "Internal server error."
    payload = client.get("/health").json()
    assert payload["total_requests"] == 1
    assert payload["error_rate"] == 1.0
