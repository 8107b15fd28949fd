"""
History Store

Keeps the most recent Builder and Optimizer results, newest first, persisted
as JSON text under one fixed storage key per feature. Each list holds at most
``HISTORY_LIMIT`` entries; older ones fall off the end as new ones arrive.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Type, Union

import pydantic
from pydantic import TypeAdapter

from promptcraft import HISTORY_LIMIT
from promptcraft.config import load_settings
from promptcraft.errors import PersistenceError
from promptcraft.models import (
    BuilderHistoryItem,
    Feature,
    HistoryItem,
    OptimizerHistoryItem,
    PromptParts,
    now_ms,
)
from promptcraft.storage import JsonFileStorage, KeyValueStorage

logger = logging.getLogger("promptcraft.history")

HISTORY_KEYS: Dict[Feature, str] = {
    Feature.BUILDER: "promptCraft_builder_history",
    Feature.OPTIMIZER: "promptCraft_optimizer_history",
}

ITEM_TYPES: Dict[Feature, Type[HistoryItem]] = {
    Feature.BUILDER: BuilderHistoryItem,
    Feature.OPTIMIZER: OptimizerHistoryItem,
}

CLEAR_MESSAGES: Dict[Feature, str] = {
    Feature.BUILDER: "Are you sure you want to clear your generation history?",
    Feature.OPTIMIZER: "Are you sure you want to clear your optimization history?",
}

_ADAPTERS = {feature: TypeAdapter(List[cls]) for feature, cls in ITEM_TYPES.items()}


class HistoryStore:
    """Bounded, newest-first history lists backed by key-value storage."""

    def __init__(self, storage: KeyValueStorage, max_entries: int = HISTORY_LIMIT):
        self.storage = storage
        self.max_entries = max_entries
        # Lazily filled on first load per feature
        self._entries: Dict[Feature, List[HistoryItem]] = {}

    def load(self, feature: Feature) -> List[HistoryItem]:
        """
        Return the feature's history, newest first.

        Missing or malformed persisted data yields an empty list; the problem
        is logged and never raised.
        """
        feature = Feature(feature)
        if feature not in self._entries:
            self._entries[feature] = self._read(feature)
        return list(self._entries[feature])

    def _read(self, feature: Feature) -> List[HistoryItem]:
        key = HISTORY_KEYS[feature]
        try:
            raw = self.storage.get(key)
        except PersistenceError as exc:
            logger.warning("History storage unavailable for %s: %s", key, exc)
            return []

        if not raw:
            return []

        try:
            items = _ADAPTERS[feature].validate_json(raw)
        except pydantic.ValidationError as exc:
            logger.error("Failed to parse history under %s: %s", key, exc)
            return []
        return items[: self.max_entries]

    def append(self, feature: Feature, item: HistoryItem) -> List[HistoryItem]:
        """
        Prepend ``item``, drop entries past the cap, persist and return the list.

        Raises:
            TypeError: If the item does not belong to the feature.
            PersistenceError: If the list could not be written. The in-memory
                list is already updated at that point.
        """
        feature = Feature(feature)
        expected = ITEM_TYPES[feature]
        if not isinstance(item, expected):
            raise TypeError(f"{feature.value} history expects {expected.__name__}")

        entries = [item] + self.load(feature)
        entries = entries[: self.max_entries]
        self._entries[feature] = entries

        payload = _ADAPTERS[feature].dump_json(entries, by_alias=True).decode("utf-8")
        self.storage.set(HISTORY_KEYS[feature], payload)
        return list(entries)

    def clear(self, feature: Feature, confirm: Callable[[str], bool]) -> bool:
        """
        Erase the feature's history after the user confirms.

        Returns:
            True if the history was cleared, False if confirmation was declined.
        """
        feature = Feature(feature)
        if not confirm(CLEAR_MESSAGES[feature]):
            return False

        self._entries[feature] = []
        self.storage.remove(HISTORY_KEYS[feature])
        return True

    def find(self, feature: Feature, item_id: str) -> Optional[HistoryItem]:
        """Get entry by ID"""
        for entry in self.load(feature):
            if entry.id == item_id:
                return entry
        return None


def select_item(item: HistoryItem) -> Tuple[Union[PromptParts, str], str]:
    """Project a history entry to the (inputs, result) pair that restores a form."""
    if isinstance(item, BuilderHistoryItem):
        return item.inputs.model_copy(), item.result
    return item.original_prompt, item.result


def make_history_id(timestamp: int, existing: Iterable[HistoryItem] = ()) -> str:
    """Time-derived id, suffixed when the same millisecond is already taken."""
    taken = {entry.id for entry in existing}
    candidate = str(timestamp)
    suffix = 1
    while candidate in taken:
        candidate = f"{timestamp}-{suffix}"
        suffix += 1
    return candidate


def new_builder_item(
    inputs: PromptParts, result: str, existing: Iterable[HistoryItem] = ()
) -> BuilderHistoryItem:
    timestamp = now_ms()
    return BuilderHistoryItem(
        id=make_history_id(timestamp, existing),
        timestamp=timestamp,
        inputs=inputs.model_copy(),
        result=result,
    )


def new_optimizer_item(
    original_prompt: str, result: str, existing: Iterable[HistoryItem] = ()
) -> OptimizerHistoryItem:
    timestamp = now_ms()
    return OptimizerHistoryItem(
        id=make_history_id(timestamp, existing),
        timestamp=timestamp,
        original_prompt=original_prompt,
        result=result,
    )


# Global instance for convenience
_history_store: Optional[HistoryStore] = None


def get_history_store() -> HistoryStore:
    """Get or create the global history store, backed by the configured file."""
    global _history_store
    if _history_store is None:
        settings = load_settings()
        _history_store = HistoryStore(JsonFileStorage(settings.storage_path))
    return _history_store
