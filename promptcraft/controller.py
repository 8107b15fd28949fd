"""
View controllers for the Builder, Optimizer and Library modes.

Each controller owns its form state plus the loading/error flags and
dispatches to the request client and the history store. A front end renders
``controller.state`` and forwards user actions to the methods here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from promptcraft.client import PromptRequestClient, get_client
from promptcraft.clipboard import copy_to_clipboard
from promptcraft.errors import GenerationError, PersistenceError, ValidationError
from promptcraft.history import (
    HistoryStore,
    get_history_store,
    new_builder_item,
    new_optimizer_item,
    select_item,
)
from promptcraft.models import (
    AppMode,
    BuilderHistoryItem,
    Feature,
    HistoryItem,
    OptimizerHistoryItem,
    PromptParts,
    Template,
)
from promptcraft.template_catalog import ALL_CATEGORIES, CATEGORY_FILTERS, get_template, list_by_category

logger = logging.getLogger("promptcraft.controller")

Confirm = Callable[[str], bool]

BUILDER_REQUIRED_MESSAGE = "Role and Task are required fields."
BUILDER_FAILED_MESSAGE = "Something went wrong with the AI generation. Please check your API key."
OPTIMIZER_REQUIRED_MESSAGE = "Please enter a prompt to optimize."
OPTIMIZER_FAILED_MESSAGE = "Optimization failed. Please check your API connection."


def _decline(message: str) -> bool:
    return False


def validate_prompt_parts(parts: PromptParts) -> None:
    """Raise ValidationError unless role and task are filled in."""
    if not parts.role or not parts.task:
        raise ValidationError(BUILDER_REQUIRED_MESSAGE)


def validate_raw_prompt(raw_prompt: str) -> None:
    """Raise ValidationError if the draft prompt is blank."""
    if not raw_prompt.strip():
        raise ValidationError(OPTIMIZER_REQUIRED_MESSAGE)


@dataclass
class BuilderState:
    inputs: PromptParts = field(default_factory=PromptParts)
    loading: bool = False
    result: str = ""
    error: Optional[str] = None
    history: List[BuilderHistoryItem] = field(default_factory=list)


@dataclass
class OptimizerState:
    input_prompt: str = ""
    loading: bool = False
    result: str = ""
    error: Optional[str] = None
    history: List[OptimizerHistoryItem] = field(default_factory=list)


class _GenerationController(ABC):
    """Shared submit/history flow of the Builder and Optimizer views."""

    feature: Feature
    failure_message: str

    def __init__(
        self,
        client: Optional[PromptRequestClient] = None,
        store: Optional[HistoryStore] = None,
        confirm: Optional[Confirm] = None,
    ):
        self.client = client or get_client()
        self.store = store or get_history_store()
        self.confirm = confirm or _decline
        self.state = self._initial_state()
        self.state.history = self.store.load(self.feature)

    def submit(self) -> bool:
        """
        Validate the form and run one generation.

        Returns:
            True if a result was produced. Calls made while a request is
            already running are ignored and return False.
        """
        state = self.state
        if state.loading:
            logger.debug("Ignoring %s submit while a request is in flight", self.feature.value)
            return False

        try:
            self._validate()
        except ValidationError as exc:
            state.error = str(exc)
            return False

        submitted = self._snapshot()
        state.loading = True
        state.error = None
        state.result = ""
        try:
            result = self._request(submitted)
        except GenerationError:
            state.error = self.failure_message
            return False
        finally:
            state.loading = False

        state.result = result
        self._record(submitted, result)
        return True

    def _record(self, submitted, result: str) -> None:
        item = self._new_item(submitted, result)
        try:
            self.state.history = self.store.append(self.feature, item)
        except PersistenceError as exc:
            # History is best-effort; the result is still shown
            logger.warning("Could not persist %s history: %s", self.feature.value, exc)
            self.state.history = self.store.load(self.feature)

    def clear_history(self, confirm: Optional[Confirm] = None) -> bool:
        try:
            cleared = self.store.clear(self.feature, confirm or self.confirm)
        except PersistenceError as exc:
            logger.warning("Could not clear %s history: %s", self.feature.value, exc)
            cleared = True
        if cleared:
            self.state.history = []
        return cleared

    def select_history_item(self, item: HistoryItem) -> None:
        inputs, result = select_item(item)
        self._restore(inputs)
        self.state.result = result
        self.state.error = None

    @abstractmethod
    def _initial_state(self):
        raise NotImplementedError

    @abstractmethod
    def _validate(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def _snapshot(self):
        raise NotImplementedError

    @abstractmethod
    def _request(self, submitted) -> str:
        raise NotImplementedError

    @abstractmethod
    def _new_item(self, submitted, result: str) -> HistoryItem:
        raise NotImplementedError

    @abstractmethod
    def _restore(self, inputs) -> None:
        raise NotImplementedError


class BuilderController(_GenerationController):
    """Builder view: role/task/context/format in, Super Prompt out."""

    feature = Feature.BUILDER
    failure_message = BUILDER_FAILED_MESSAGE

    def update(self, field_name: str, value: str) -> None:
        if field_name not in PromptParts.model_fields:
            raise ValueError(f"Unknown prompt field: {field_name}")
        setattr(self.state.inputs, field_name, value)

    def _initial_state(self) -> BuilderState:
        return BuilderState()

    def _validate(self) -> None:
        validate_prompt_parts(self.state.inputs)

    def _snapshot(self) -> PromptParts:
        return self.state.inputs.model_copy()

    def _request(self, submitted: PromptParts) -> str:
        return self.client.build_super_prompt(submitted)

    def _new_item(self, submitted: PromptParts, result: str) -> BuilderHistoryItem:
        return new_builder_item(submitted, result, existing=self.state.history)

    def _restore(self, inputs: PromptParts) -> None:
        self.state.inputs = inputs


class OptimizerController(_GenerationController):
    """Optimizer view: a draft prompt in, analysis plus rewrite out."""

    feature = Feature.OPTIMIZER
    failure_message = OPTIMIZER_FAILED_MESSAGE

    def update(self, value: str) -> None:
        self.state.input_prompt = value

    def _initial_state(self) -> OptimizerState:
        return OptimizerState()

    def _validate(self) -> None:
        validate_raw_prompt(self.state.input_prompt)

    def _snapshot(self) -> str:
        return self.state.input_prompt

    def _request(self, submitted: str) -> str:
        return self.client.optimize_prompt(submitted)

    def _new_item(self, submitted: str, result: str) -> OptimizerHistoryItem:
        return new_optimizer_item(submitted, result, existing=self.state.history)

    def _restore(self, inputs: str) -> None:
        self.state.input_prompt = inputs


class LibraryController:
    """Library view: category filter over the template catalog."""

    def __init__(self, copier: Callable[[str], bool] = copy_to_clipboard):
        self.filter = ALL_CATEGORIES
        self.copied_id: Optional[str] = None
        self._copier = copier

    def set_filter(self, category: str) -> None:
        if category not in CATEGORY_FILTERS:
            raise ValueError(f"Unknown category '{category}'. Available: {', '.join(CATEGORY_FILTERS)}")
        self.filter = category

    @property
    def templates(self) -> List[Template]:
        return list_by_category(self.filter)

    def copy(self, template_id: str) -> bool:
        template = get_template(template_id)
        if template is None:
            raise KeyError(template_id)
        copied = self._copier(template.content)
        self.copied_id = template_id if copied else None
        return copied


View = Union[BuilderController, OptimizerController, LibraryController]


class PromptCraftApp:
    """Top-level navigation between the three modes."""

    def __init__(
        self,
        client: Optional[PromptRequestClient] = None,
        store: Optional[HistoryStore] = None,
        confirm: Optional[Confirm] = None,
        copier: Callable[[str], bool] = copy_to_clipboard,
        mode: AppMode = AppMode.BUILDER,
    ):
        self.client = client
        self.store = store
        self.confirm = confirm
        self.copier = copier
        self.mode = AppMode(mode)
        self.view: View = self._mount(self.mode)

    def navigate(self, mode: AppMode) -> View:
        """Switch modes; the new view starts from a fresh form."""
        self.mode = AppMode(mode)
        self.view = self._mount(self.mode)
        return self.view

    def _mount(self, mode: AppMode) -> View:
        if mode is AppMode.BUILDER:
            return BuilderController(self.client, self.store, self.confirm)
        if mode is AppMode.OPTIMIZER:
            return OptimizerController(self.client, self.store, self.confirm)
        return LibraryController(copier=self.copier)
