"""HTTP routes fronting the analysis workflow."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from portfolio_partner.runtime.limits import resolve_client_key
from portfolio_partner.runtime.monitoring import log_request_event
from portfolio_partner.runtime.response import error_response
from portfolio_partner.services.errors import AdmissionDenied, AnalysisError

if TYPE_CHECKING:
    from portfolio_partner.tools.registry import ToolServices

LOGGER = logging.getLogger(__name__)

Handler = Callable[[Request], Awaitable[Response]]


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {token}")


def _parse_json(raw: bytes) -> Any:
    return json.loads(raw, parse_constant=_reject_constant)


def _client_id(request: Request, trust_forwarded_headers: bool) -> str:
    peer = request.client.host if request.client else None
    return resolve_client_key(request.headers, trust_forwarded_headers, peer_host=peer)


def _asset_count(body: Any) -> int | None:
    if not isinstance(body, dict) or not isinstance(body.get("portfolio"), dict):
        return None
    assets = body["portfolio"].get("assets")
    return len(assets) if isinstance(assets, list) else None


def _guarded(route: str, services: "ToolServices", call: Callable[[Any, str], Any]) -> Handler:
    async def handler(request: Request) -> Response:
        started = time.perf_counter()
        client_id = _client_id(request, services.settings.trust_forwarded_headers)
        body: Any = None

        def _finish(response: Response, error: str | None = None) -> Response:
            latency_ms = (time.perf_counter() - started) * 1000.0
            services.metrics.record(latency_ms=latency_ms, success=response.status_code < 400)
            log_request_event(
                route=route,
                client_id=client_id,
                status=response.status_code,
                latency_ms=latency_ms,
                asset_count=_asset_count(body),
                error=error,
            )
            return response

        try:
            body = _parse_json(await request.body())
        except ValueError:
            return _finish(error_response("INVALID_REQUEST", "Request body must be valid JSON.", 400), "invalid_json")

        try:
            result = await asyncio.to_thread(call, body, client_id)
        except AdmissionDenied as error:
            services.metrics.record_rate_limit_hit(client_id)
            return _finish(
                error_response(error.code, error.message, error.status_code, retry_after=error.retry_after_seconds),
                error.code,
            )
        except AnalysisError as error:
            return _finish(error_response(error.code, error.message, error.status_code), error.code)
        except Exception:
            LOGGER.exception("Unhandled error on %s", route)
            return _finish(error_response("INTERNAL", "Internal server error.", 500), "INTERNAL")
        return _finish(JSONResponse(result))

    return handler


def analyze_handler(services: "ToolServices") -> Handler:
    return _guarded("/analyze", services, lambda body, client_id: services.analysis.analyze(body, client_id).to_dict())


def follow_up_questions_handler(services: "ToolServices") -> Handler:
    return _guarded(
        "/follow-up-questions",
        services,
        lambda body, client_id: services.analysis.follow_up_questions(body, client_id),
    )


def health_handler(services: "ToolServices") -> Handler:
    async def handler(_: Request) -> Response:
        snapshot = services.metrics.snapshot()
        return JSONResponse(
            {
                "status": "ok",
                "service": services.settings.app_name,
                "ai_configured": services.analysis.gateway is not None,
                "uptime_seconds": round(snapshot.uptime_seconds, 3),
                "total_requests": snapshot.total_requests,
                "error_rate": snapshot.error_rate,
                "avg_latency_ms": round(snapshot.avg_latency_ms, 3),
                "rate_limit_hits": snapshot.rate_limit_hits,
            }
        )

    return handler


def build_routes(services: "ToolServices") -> list[Route]:
    return [
        Route("/analyze", analyze_handler(services), methods=["POST"]),
        Route("/follow-up-questions", follow_up_questions_handler(services), methods=["POST"]),
        Route(services.settings.health_path, health_handler(services), methods=["GET"]),
    ]


def build_http_app(services: "ToolServices") -> Starlette:
    return Starlette(routes=build_routes(services))
