"""Anthropic Messages API client for portfolio analysis completions."""

from __future__ import annotations

import json
from typing import Any

import requests

from portfolio_partner.providers.http import SESSION, ProviderError, map_status_to_code

API_URL = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"


class AnthropicClient:
    def __init__(self, api_key: str, model: str, timeout_seconds: float = 30.0, session: requests.Session | None = None) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.base_url = API_URL
        self._session = session or SESSION

    def complete(self, system: str, prompt: str, max_tokens: int, temperature: float) -> str:
        """Send one system + user exchange and return the concatenated text blocks."""
        payload: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "system": system,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": API_VERSION,
            "content-type": "application/json",
        }
        try:
            response = self._session.post(
                self.base_url,
                timeout=self.timeout_seconds,
                headers=headers,
                data=json.dumps(payload),
            )
        except requests.RequestException as error:
            raise ProviderError("anthropic", "NETWORK", f"Anthropic request failed: {error}") from error
        if response.status_code == 401:
            raise ProviderError("anthropic", "AUTH", "Anthropic authentication failed.", response.status_code)
        if response.status_code == 429:
            raise ProviderError("anthropic", "RATE_LIMIT", "Anthropic rate limit reached.", response.status_code)
        if not response.ok:
            raise ProviderError(
                "anthropic",
                map_status_to_code(response.status_code),
                f"Anthropic request failed with status {response.status_code}.",
                response.status_code,
            )
        try:
            data = response.json()
        except ValueError:
            raise ProviderError("anthropic", "BAD_RESPONSE", "Anthropic returned non-JSON response.", response.status_code)
        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, list):
            return ""
        texts = [item.get("text") for item in content if isinstance(item, dict) and isinstance(item.get("text"), str)]
        return "\n".join(texts).strip()
