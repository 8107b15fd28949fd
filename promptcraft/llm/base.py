from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from promptcraft.errors import GenerationErrorKind


class LLMResponse(BaseModel):
    """Standardized response from any LLM provider."""
    content: Optional[str] = None  # None when the model produced no text
    raw_response: Any = None
    usage: Dict[str, int] = Field(default_factory=dict)
    latency_ms: float = 0.0


class ProviderConfig(BaseModel):
    """Configuration for an LLM provider."""
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: str = "gemini-2.5-flash"
    temperature: float = 0.7
    max_tokens: int = 2048
    timeout: float = 60.0


class ProviderError(Exception):
    """Raised by a provider when the remote call fails."""

    def __init__(self, message: str, kind: GenerationErrorKind = GenerationErrorKind.UNKNOWN):
        super().__init__(message)
        self.kind = kind


def kind_for_status(status_code: Optional[int]) -> GenerationErrorKind:
    """Map an HTTP status code to a failure kind."""
    if status_code in (401, 403):
        return GenerationErrorKind.AUTH
    if status_code == 429:
        return GenerationErrorKind.QUOTA
    return GenerationErrorKind.UNKNOWN


class LLMProvider(ABC):
    """Abstract Base Class for LLM Providers."""

    def __init__(self, config: ProviderConfig):
        self.config = config

    @abstractmethod
    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        """
        Generate a text completion.

        Args:
            prompt: The user prompt.
            system_prompt: Optional system instruction.
            temperature: Per-call sampling override; falls back to the config.

        Returns:
            LLMResponse object containing content and metadata.

        Raises:
            ProviderError: If the remote call fails for any reason.
        """
        pass

    def _temperature(self, temperature: Optional[float]) -> float:
        return self.config.temperature if temperature is None else temperature
