"""Runtime settings resolved from the environment (and a local ``.env`` file)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

DEFAULT_PROVIDER = "gemini"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 60.0


def default_storage_path() -> Path:
    return Path.home() / ".promptcraft" / "local_storage.json"


class Settings(BaseModel):
    """Resolved configuration for the provider and local storage."""

    provider: str = DEFAULT_PROVIDER
    model: str = DEFAULT_MODEL
    base_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    storage_path: Path = Field(default_factory=default_storage_path)

    def api_key_for(self, provider: str) -> Optional[str]:
        if provider == "gemini":
            return self.gemini_api_key
        if provider == "openai":
            return self.openai_api_key
        return None


def load_settings() -> Settings:
    """
    Build Settings from environment variables.

    A ``.env`` file in the working directory is loaded first; variables already
    present in the environment take precedence over it.
    """
    load_dotenv(find_dotenv(usecwd=True))

    storage = os.environ.get("PROMPTCRAFT_STORAGE")
    return Settings(
        provider=os.environ.get("PROMPTCRAFT_LLM_PROVIDER", DEFAULT_PROVIDER).lower(),
        model=os.environ.get("PROMPTCRAFT_LLM_MODEL", DEFAULT_MODEL),
        base_url=os.environ.get("PROMPTCRAFT_LLM_BASE_URL"),
        timeout=float(os.environ.get("PROMPTCRAFT_LLM_TIMEOUT", DEFAULT_TIMEOUT)),
        gemini_api_key=(
            os.environ.get("GEMINI_API_KEY")
            or os.environ.get("GOOGLE_API_KEY")
            or os.environ.get("API_KEY")
        ),
        openai_api_key=os.environ.get("OPENAI_API_KEY"),
        storage_path=Path(storage).expanduser() if storage else default_storage_path(),
    )
