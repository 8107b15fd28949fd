from __future__ import annotations
import os
import time
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from promptcraft.errors import GenerationErrorKind
from .base import LLMProvider, LLMResponse, ProviderError, kind_for_status


def _provider_error(label: str, exc: Exception) -> ProviderError:
    """Classify an httpx failure into a ProviderError."""
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return ProviderError(f"{label} HTTP error ({status})", kind_for_status(status))
    if isinstance(exc, httpx.TransportError):
        return ProviderError(f"{label} request failed: {exc}", GenerationErrorKind.NETWORK)
    return ProviderError(f"{label} returned an unexpected payload: {exc}")


class MockProvider(LLMProvider):
    """
    Deterministic mock provider for offline use and testing.
    Answers optimization requests in the two-section layout.
    """

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        start = time.time()

        content = "MOCKED RESPONSE"
        if "[Optimized Prompt]" in prompt:
            content = "[Analysis]\nMOCKED ANALYSIS\n[Optimized Prompt]\nMOCKED RESPONSE"

        latency = (time.time() - start) * 1000
        return LLMResponse(content=content, latency_ms=latency)


class GeminiProvider(LLMProvider):
    """
    Provider for the Google Gemini API via the google-genai SDK.
    Requires GEMINI_API_KEY env var or config.api_key.
    """

    def __init__(self, config):
        super().__init__(config)
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            api_key = self.config.api_key or os.environ.get("GEMINI_API_KEY")
            if not api_key:
                raise ProviderError("Missing Gemini API key", GenerationErrorKind.AUTH)
            self._client = genai.Client(
                api_key=api_key,
                # HttpOptions timeout is in milliseconds
                http_options=types.HttpOptions(timeout=int(self.config.timeout * 1000)),
            )
        return self._client

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        client = self._get_client()

        kwargs = {"temperature": self._temperature(temperature)}
        if system_prompt:
            kwargs["system_instruction"] = system_prompt

        start = time.time()
        try:
            response = client.models.generate_content(
                model=self.config.model,
                contents=prompt,
                config=types.GenerateContentConfig(**kwargs),
            )
        except genai_errors.APIError as e:
            raise ProviderError(
                f"Gemini API error ({e.code}): {e.message}", kind_for_status(e.code)
            ) from e
        except httpx.HTTPError as e:
            raise _provider_error("Gemini", e) from e

        usage = {}
        meta = getattr(response, "usage_metadata", None)
        if meta is not None:
            usage = {
                "prompt_tokens": meta.prompt_token_count or 0,
                "completion_tokens": meta.candidates_token_count or 0,
            }

        latency = (time.time() - start) * 1000
        return LLMResponse(
            content=response.text, raw_response=response, usage=usage, latency_ms=latency
        )


class OllamaProvider(LLMProvider):
    """
    Provider for local Ollama instance.
    Defaults to http://localhost:11434
    """

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        base_url = self.config.base_url or "http://localhost:11434"
        url = f"{base_url}/api/generate"

        payload = {
            "model": self.config.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self._temperature(temperature),
                "num_predict": self.config.max_tokens,
            },
        }

        if system_prompt:
            payload["system"] = system_prompt

        start = time.time()
        try:
            resp = httpx.post(url, json=payload, timeout=self.config.timeout)
            resp.raise_for_status()
            data = resp.json()
            content = data.get("response")
        except (httpx.HTTPError, ValueError) as e:
            raise _provider_error("Ollama", e) from e

        # Ollama returns stats
        usage = {
            "prompt_tokens": data.get("prompt_eval_count", 0),
            "completion_tokens": data.get("eval_count", 0),
        }

        latency = (time.time() - start) * 1000
        return LLMResponse(content=content, raw_response=data, usage=usage, latency_ms=latency)


class OpenAIProvider(LLMProvider):
    """
    Provider for OpenAI API (or any compatible endpoint via base_url).
    Requires OPENAI_API_KEY env var or config.api_key.
    """

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        api_key = self.config.api_key or os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ProviderError("Missing OpenAI API key", GenerationErrorKind.AUTH)

        base_url = self.config.base_url or "https://api.openai.com/v1"
        url = f"{base_url}/chat/completions"
        headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.config.model,
            "messages": messages,
            "temperature": self._temperature(temperature),
            "max_tokens": self.config.max_tokens,
        }

        start = time.time()
        try:
            resp = httpx.post(url, json=payload, headers=headers, timeout=self.config.timeout)
            resp.raise_for_status()
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
            # keep only the flat counters; newer responses nest token details
            usage = {k: v for k, v in (data.get("usage") or {}).items() if isinstance(v, int)}
        except (httpx.HTTPError, ValueError, KeyError, IndexError) as e:
            raise _provider_error("OpenAI", e) from e

        latency = (time.time() - start) * 1000
        return LLMResponse(content=content, raw_response=data, usage=usage, latency_ms=latency)
