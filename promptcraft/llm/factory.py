"""Factory for instantiating LLM providers based on configuration."""

from __future__ import annotations
from typing import Optional

from promptcraft.config import load_settings
from .base import LLMProvider, ProviderConfig
from .providers import GeminiProvider, MockProvider, OllamaProvider, OpenAIProvider

# Registry of available providers
PROVIDERS = {
    "gemini": GeminiProvider,
    "mock": MockProvider,
    "ollama": OllamaProvider,
    "openai": OpenAIProvider,
}


def get_provider(
    name: Optional[str] = None, config: Optional[ProviderConfig] = None
) -> LLMProvider:
    """
    Factory to instantiate LLM providers based on name and config.

    Args:
        name: Provider name ("gemini", "mock", "ollama", "openai").
              If None, reads PROMPTCRAFT_LLM_PROVIDER, defaults to "gemini".
        config: Optional ProviderConfig. If None, creates from settings.

    Returns:
        Instantiated LLMProvider.

    Raises:
        ValueError: If provider name is not recognized.
    """
    settings = None
    if name is None:
        settings = load_settings()
        name = settings.provider
    name = name.lower()

    if name not in PROVIDERS:
        available = ", ".join(PROVIDERS.keys())
        raise ValueError(f"Unknown provider '{name}'. Available: {available}")

    if config is None:
        settings = settings or load_settings()
        config = ProviderConfig(
            api_key=settings.api_key_for(name),
            base_url=settings.base_url,
            model=settings.model,
            timeout=settings.timeout,
        )

    provider_class = PROVIDERS[name]
    return provider_class(config)


def register_provider(name: str, provider_class: type) -> None:
    """
    Register a custom provider class.

    Args:
        name: Name to register the provider under.
        provider_class: Class that inherits from LLMProvider.
    """
    if not isinstance(provider_class, type) or not issubclass(provider_class, LLMProvider):
        raise TypeError(f"{provider_class} must be a subclass of LLMProvider")
    PROVIDERS[name.lower()] = provider_class
