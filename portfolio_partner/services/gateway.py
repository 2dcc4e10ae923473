"""Model gateway: one outbound completion call per analysis step."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import requests

from portfolio_partner.prompts.analysis_prompts import (
    FOLLOW_UP_SYSTEM_PROMPT,
    INITIAL_ANALYSIS_SYSTEM_PROMPT,
    QUESTION_GENERATION_SYSTEM_PROMPT,
)
from portfolio_partner.providers.http import ProviderError
from portfolio_partner.services.errors import AnalysisFailed

LOGGER = logging.getLogger(__name__)


class CompletionClient(Protocol):
    def complete(self, system: str, prompt: str, max_tokens: int, temperature: float) -> str:
        ...


@dataclass(frozen=True)
class CompletionProfile:
    system_prompt: str
    temperature: float
    max_tokens: int
    failure_message: str


class ModelGateway:
    def __init__(
        self,
        client: CompletionClient,
        max_tokens_initial: int = 2000,
        max_tokens_followup: int = 1500,
        max_tokens_questions: int = 500,
    ) -> None:
        self.client = client
        self.initial = CompletionProfile(
            INITIAL_ANALYSIS_SYSTEM_PROMPT, 0.7, max_tokens_initial, "Failed to analyze portfolio"
        )
        self.follow_up = CompletionProfile(
            FOLLOW_UP_SYSTEM_PROMPT, 0.8, max_tokens_followup, "Failed to process your question"
        )
        self.questions = CompletionProfile(
            QUESTION_GENERATION_SYSTEM_PROMPT, 0.7, max_tokens_questions, "Failed to generate follow-up questions"
        )

    def _complete(self, profile: CompletionProfile, prompt: str) -> str:
        try:
            return self.client.complete(
                system=profile.system_prompt,
                prompt=prompt,
                max_tokens=profile.max_tokens,
                temperature=profile.temperature,
            )
        except (ProviderError, requests.RequestException) as error:
            LOGGER.warning("%s: %s", profile.failure_message, error)
            raise AnalysisFailed(f"{profile.failure_message}: {error}") from error

    def analyze(self, prompt: str, follow_up: bool = False) -> str:
        profile = self.follow_up if follow_up else self.initial
        response = self._complete(profile, prompt)
        LOGGER.info("Received %s response (%d chars)", "follow-up" if follow_up else "analysis", len(response))
        return response

    def generate_questions(self, prompt: str) -> str:
        return self._complete(self.questions, prompt)
