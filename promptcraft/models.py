"""Data model shared by the request client, history store and views."""

from __future__ import annotations

import time
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


Category = Literal["Coding", "Writing", "Analysis", "Education"]


class AppMode(str, Enum):
    BUILDER = "BUILDER"
    OPTIMIZER = "OPTIMIZER"
    LIBRARY = "LIBRARY"


class Feature(str, Enum):
    """Features that own a history list."""

    BUILDER = "builder"
    OPTIMIZER = "optimizer"


class PromptParts(BaseModel):
    """Structured input of the Builder form."""

    role: str = ""
    task: str = ""
    context: str = ""
    format: str = ""


def now_ms() -> int:
    return int(time.time() * 1000)


class BuilderHistoryItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: int = Field(default_factory=now_ms)  # epoch milliseconds
    inputs: PromptParts
    result: str


class OptimizerHistoryItem(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp: int = Field(default_factory=now_ms)
    original_prompt: str = Field(alias="originalPrompt")
    result: str


HistoryItem = Union[BuilderHistoryItem, OptimizerHistoryItem]


class Template(BaseModel):
    """A curated, read-only prompt template."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    category: Category
    description: str
    content: str
