from .base import LLMProvider, LLMResponse, ProviderConfig, ProviderError
from .factory import PROVIDERS, get_provider, register_provider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "ProviderConfig",
    "ProviderError",
    "PROVIDERS",
    "get_provider",
    "register_provider",
]
