"""Error taxonomy.

ValidationError is raised locally before any remote call. GenerationError
collapses every remote failure into one type, keeping the cause as a
``GenerationErrorKind`` for diagnostics. PersistenceError covers local storage
that is unreadable or unwritable and is never shown to the user.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class PromptCraftError(Exception):
    """Base class for all PromptCraft errors."""


class ValidationError(PromptCraftError):
    """A required field is missing or empty."""


class GenerationErrorKind(str, Enum):
    AUTH = "auth"
    NETWORK = "network"
    QUOTA = "quota"
    UNKNOWN = "unknown"


class GenerationError(PromptCraftError):
    """The remote generation call failed."""

    def __init__(self, message: str, kind: GenerationErrorKind = GenerationErrorKind.UNKNOWN):
        super().__init__(message)
        self.kind = kind


class PersistenceError(PromptCraftError):
    """Local storage could not be read or written."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key
