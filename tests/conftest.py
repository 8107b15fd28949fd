"""Shared fixtures: a recording stub provider and in-memory history."""

from __future__ import annotations

from typing import Optional

import pytest

from promptcraft.client import PromptRequestClient
from promptcraft.history import HistoryStore
from promptcraft.llm import LLMProvider, LLMResponse, ProviderConfig
from promptcraft.storage import MemoryStorage


class StubProvider(LLMProvider):
    """Returns canned content (or raises) and records every call."""

    def __init__(self, content: Optional[str] = "SAMPLE_PROMPT", error: Optional[Exception] = None):
        super().__init__(ProviderConfig(model="stub"))
        self.content = content
        self.error = error
        self.calls = []

    def generate(self, prompt, system_prompt=None, temperature=None):
        self.calls.append({"prompt": prompt, "temperature": temperature})
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.content)


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def client(stub_provider):
    return PromptRequestClient(stub_provider)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return HistoryStore(storage)
