"""Response shaping helpers for the HTTP routes."""

from __future__ import annotations

import time
from typing import Any

from starlette.responses import JSONResponse

DISCLAIMER = "AI output is for informational purposes only and does not constitute financial advice."


def error_payload(code: str, message: str) -> dict[str, Any]:
    return {
        "error": message,
        "code": code,
        "timestamp": int(time.time()),
    }


def error_response(code: str, message: str, status_code: int, retry_after: int | None = None) -> JSONResponse:
    headers = {"Retry-After": str(retry_after)} if retry_after is not None else None
    return JSONResponse(error_payload(code, message), status_code=status_code, headers=headers)
