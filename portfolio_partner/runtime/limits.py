"""Per-client fixed-window admission control for the AI endpoints."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Mapping, Protocol

MINUTE_WINDOW_SECONDS = 60.0
DAY_WINDOW_SECONDS = 86_400.0
UNKNOWN_CLIENT = "unknown"


@dataclass
class RateLimitState:
    count: int
    reset_at: float


@dataclass(frozen=True)
class WindowCheck:
    allowed: bool
    count: int
    reset_at: float


class RateLimitExceeded(Exception):
    def __init__(self, message: str, retry_after_seconds: int) -> None:
        self.retry_after_seconds = max(1, retry_after_seconds)
        self.message = message
        super().__init__(message)


class RateLimitStore(Protocol):
    def hit(self, key: str, max_requests: int, window_seconds: float, now: float) -> WindowCheck:
        """Count one request against ``key`` unless its window is full."""
        ...

    def get(self, key: str) -> RateLimitState | None:
        ...


class InMemoryRateLimitStore:
    """Process-local state; entries are never evicted."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, RateLimitState] = {}

    def hit(self, key: str, max_requests: int, window_seconds: float, now: float) -> WindowCheck:
        with self._lock:
            existing = self._data.get(key)
            if existing is None or existing.reset_at <= now:
                state = RateLimitState(count=1, reset_at=now + window_seconds)
                self._data[key] = state
                return WindowCheck(allowed=True, count=state.count, reset_at=state.reset_at)
            if existing.count >= max_requests:
                return WindowCheck(allowed=False, count=existing.count, reset_at=existing.reset_at)
            existing.count += 1
            return WindowCheck(allowed=True, count=existing.count, reset_at=existing.reset_at)

    def get(self, key: str) -> RateLimitState | None:
        with self._lock:
            state = self._data.get(key)
            return RateLimitState(count=state.count, reset_at=state.reset_at) if state else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class FixedWindowRateLimiter:
    """Two-tier limiter: a one-minute burst window, then a one-day window."""

    def __init__(
        self,
        per_minute: int = 10,
        per_day: int = 200,
        store: RateLimitStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.per_minute = max(1, per_minute)
        self.per_day = max(1, per_day)
        self.store: RateLimitStore = store if store is not None else InMemoryRateLimitStore()
        self._clock = clock

    @staticmethod
    def key(scope: str, window: str, client_key: str) -> str:
        return f"{scope}:{window}:{client_key}"

    def _retry_after(self, reset_at: float) -> int:
        return max(1, math.ceil(reset_at - self._clock()))

    def enforce(self, client_key: str, scope: str) -> None:
        """Admit one request or raise ``RateLimitExceeded``."""
        minute = self.store.hit(
            self.key(scope, "minute", client_key), self.per_minute, MINUTE_WINDOW_SECONDS, self._clock()
        )
        if not minute.allowed:
            retry_after = self._retry_after(minute.reset_at)
            raise RateLimitExceeded(f"Rate limit exceeded. Try again in {retry_after} seconds.", retry_after)

        day = self.store.hit(self.key(scope, "day", client_key), self.per_day, DAY_WINDOW_SECONDS, self._clock())
        if not day.allowed:
            retry_after = self._retry_after(day.reset_at)
            raise RateLimitExceeded(f"Daily usage limit reached. Try again in {retry_after} seconds.", retry_after)


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is None:
        value = headers.get(name.title())
    return value


def resolve_client_key(
    headers: Mapping[str, str],
    trust_forwarded_headers: bool = True,
    peer_host: str | None = None,
) -> str:
    """Derive the rate-limit bucket for a request.

    With forwarded headers trusted (the default, for deployments behind a
    reverse proxy) the first ``X-Forwarded-For`` entry wins, then
    ``X-Real-IP``. Both are client-controlled when the service is exposed
    directly, so such deployments should disable the trust and rely on the
    transport peer address.
    """
    if trust_forwarded_headers:
        forwarded_for = _header(headers, "x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip() or UNKNOWN_CLIENT
        real_ip = _header(headers, "x-real-ip")
        return real_ip or UNKNOWN_CLIENT
    return peer_host or UNKNOWN_CLIENT
