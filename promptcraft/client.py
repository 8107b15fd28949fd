"""
Prompt Request Client

Turns Builder and Optimizer input into a single generation call against the
configured provider and normalizes the outcome: model text, a fixed fallback
when the model returned nothing, or a GenerationError.
"""

from __future__ import annotations

import logging
from typing import Optional

from promptcraft.errors import GenerationError, GenerationErrorKind
from promptcraft.llm import LLMProvider, ProviderError, get_provider
from promptcraft.models import PromptParts
from promptcraft.prompts import render_optimizer_request, render_super_prompt_request

logger = logging.getLogger("promptcraft.client")

GENERATION_TEMPERATURE = 0.7
NO_RESPONSE_TEXT = "No response generated."


class PromptRequestClient:
    """Issues Builder and Optimizer requests against one provider."""

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        temperature: float = GENERATION_TEMPERATURE,
    ):
        self._provider = provider
        self.temperature = temperature

    @property
    def provider(self) -> LLMProvider:
        # Resolved on first use so that building a client never needs credentials
        if self._provider is None:
            self._provider = get_provider()
        return self._provider

    def build_super_prompt(self, parts: PromptParts) -> str:
        """
        Generate a "Super Prompt" from structured components.

        The caller is expected to have checked that role and task are set.

        Raises:
            GenerationError: If the remote call fails.
        """
        return self._generate(
            render_super_prompt_request(parts),
            action="generating super prompt",
            failure="Failed to generate prompt. Please try again.",
        )

    def optimize_prompt(self, raw_prompt: str) -> str:
        """
        Rewrite a draft prompt, returning the model's [Analysis] and
        [Optimized Prompt] sections verbatim.

        Raises:
            GenerationError: If the remote call fails.
        """
        return self._generate(
            render_optimizer_request(raw_prompt),
            action="optimizing prompt",
            failure="Failed to optimize prompt. Please try again.",
        )

    def _generate(self, request: str, action: str, failure: str) -> str:
        try:
            response = self.provider.generate(request, temperature=self.temperature)
        except Exception as exc:
            kind = exc.kind if isinstance(exc, ProviderError) else GenerationErrorKind.UNKNOWN
            logger.error("Error %s (%s): %s", action, kind.value, exc)
            raise GenerationError(failure, kind) from exc

        logger.debug("Finished %s in %.0f ms (usage=%s)", action, response.latency_ms, response.usage)
        return response.content or NO_RESPONSE_TEXT


_client: Optional[PromptRequestClient] = None


def get_client() -> PromptRequestClient:
    """Get or create the global request client"""
    global _client
    if _client is None:
        _client = PromptRequestClient()
    return _client


def build_super_prompt(parts: PromptParts) -> str:
    return get_client().build_super_prompt(parts)


def optimize_prompt(raw_prompt: str) -> str:
    return get_client().optimize_prompt(raw_prompt)
