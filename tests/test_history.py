"""
Tests for the history store
"""

import json

import pytest

from promptcraft.errors import PersistenceError
from promptcraft.history import (
    CLEAR_MESSAGES,
    HISTORY_KEYS,
    HistoryStore,
    make_history_id,
    new_builder_item,
    new_optimizer_item,
    select_item,
)
from promptcraft.models import BuilderHistoryItem, Feature, OptimizerHistoryItem, PromptParts
from promptcraft.storage import JsonFileStorage, MemoryStorage


def _builder_item(i):
    return BuilderHistoryItem(
        id=str(1000 + i),
        timestamp=1000 + i,
        inputs=PromptParts(role=f"Role {i}", task=f"Task {i}"),
        result=f"Result {i}",
    )


def _optimizer_item(i):
    return OptimizerHistoryItem(
        id=str(2000 + i), timestamp=2000 + i, original_prompt=f"Draft {i}", result=f"Better {i}"
    )


class FailingStorage(MemoryStorage):
    def set(self, key, value):
        raise PersistenceError("disk full", key=key)


class UnreadableStorage(MemoryStorage):
    def get(self, key):
        raise PersistenceError("permission denied", key=key)


def test_load_empty(store):
    assert store.load(Feature.BUILDER) == []
    assert store.load(Feature.OPTIMIZER) == []


def test_append_prepends(store):
    store.append(Feature.BUILDER, _builder_item(1))
    history = store.append(Feature.BUILDER, _builder_item(2))

    assert [e.id for e in history] == ["1002", "1001"]


def test_append_persists_json(store, storage):
    store.append(Feature.OPTIMIZER, _optimizer_item(1))

    data = json.loads(storage.get("promptCraft_optimizer_history"))
    assert data == [
        {"id": "2001", "timestamp": 2001, "originalPrompt": "Draft 1", "result": "Better 1"}
    ]


def test_cap_keeps_ten_most_recent(store):
    for i in range(15):
        store.append(Feature.BUILDER, _builder_item(i))

    history = store.load(Feature.BUILDER)
    assert len(history) == 10
    assert [e.result for e in history] == [f"Result {i}" for i in range(14, 4, -1)]
    timestamps = [e.timestamp for e in history]
    assert timestamps == sorted(timestamps, reverse=True)


def test_round_trip_after_reload(storage):
    first = HistoryStore(storage)
    for i in range(3):
        first.append(Feature.BUILDER, _builder_item(i))
    before = first.load(Feature.BUILDER)

    reloaded = HistoryStore(storage).load(Feature.BUILDER)

    assert reloaded == before
    assert [(e.id, e.inputs, e.result) for e in reloaded] == [
        (e.id, e.inputs, e.result) for e in before
    ]


def test_round_trip_through_file(tmp_path):
    path = tmp_path / "local_storage.json"
    HistoryStore(JsonFileStorage(path)).append(Feature.OPTIMIZER, _optimizer_item(7))

    reloaded = HistoryStore(JsonFileStorage(path)).load(Feature.OPTIMIZER)
    assert reloaded == [_optimizer_item(7)]


def test_features_are_independent(store):
    store.append(Feature.BUILDER, _builder_item(1))
    store.append(Feature.OPTIMIZER, _optimizer_item(1))

    store.clear(Feature.BUILDER, lambda message: True)

    assert store.load(Feature.BUILDER) == []
    assert store.load(Feature.OPTIMIZER) == [_optimizer_item(1)]


def test_append_rejects_wrong_item_type(store):
    with pytest.raises(TypeError):
        store.append(Feature.BUILDER, _optimizer_item(1))


@pytest.mark.parametrize("raw", ["{not json", '{"id": "1"}', '[{"id": "1"}]', "null"])
def test_malformed_data_loads_empty(raw, caplog):
    storage = MemoryStorage({HISTORY_KEYS[Feature.BUILDER]: raw})

    assert HistoryStore(storage).load(Feature.BUILDER) == []
    assert "Failed to parse history" in caplog.text


def test_unreadable_storage_loads_empty():
    assert HistoryStore(UnreadableStorage()).load(Feature.OPTIMIZER) == []


def test_undecodable_storage_file_loads_empty(tmp_path):
    path = tmp_path / "local_storage.json"
    path.write_bytes(b'{"promptCraft_builder_history": "\xff\xfe"}')
    store = HistoryStore(JsonFileStorage(path))

    assert store.load(Feature.BUILDER) == []

    store.append(Feature.BUILDER, _builder_item(1))
    assert HistoryStore(JsonFileStorage(path)).load(Feature.BUILDER) == [_builder_item(1)]


def test_write_failure_propagates_but_updates_memory():
    store = HistoryStore(FailingStorage())

    with pytest.raises(PersistenceError):
        store.append(Feature.BUILDER, _builder_item(1))

    assert store.load(Feature.BUILDER) == [_builder_item(1)]


def test_clear_requires_confirmation(store, storage):
    store.append(Feature.BUILDER, _builder_item(1))
    prompts = []

    def decline(message):
        prompts.append(message)
        return False

    assert store.clear(Feature.BUILDER, decline) is False
    assert prompts == [CLEAR_MESSAGES[Feature.BUILDER]]
    assert store.load(Feature.BUILDER) == [_builder_item(1)]
    assert storage.get(HISTORY_KEYS[Feature.BUILDER]) is not None


def test_clear_confirmed(store, storage):
    store.append(Feature.OPTIMIZER, _optimizer_item(1))

    assert store.clear(Feature.OPTIMIZER, lambda message: True) is True
    assert store.load(Feature.OPTIMIZER) == []
    assert storage.get(HISTORY_KEYS[Feature.OPTIMIZER]) is None
    assert HistoryStore(storage).load(Feature.OPTIMIZER) == []


def test_find(store):
    store.append(Feature.BUILDER, _builder_item(1))

    assert store.find(Feature.BUILDER, "1001") == _builder_item(1)
    assert store.find(Feature.BUILDER, "missing") is None


def test_select_item_projects_inputs_and_result(store):
    item = _builder_item(3)
    history = store.append(Feature.BUILDER, item)

    inputs, result = select_item(item)
    inputs.role = "edited"

    assert result == "Result 3"
    assert item.inputs.role == "Role 3"
    assert store.load(Feature.BUILDER) == history
    assert select_item(_optimizer_item(2)) == ("Draft 2", "Better 2")


def test_history_items_are_frozen():
    item = _optimizer_item(1)
    with pytest.raises(Exception):
        item.result = "changed"


def test_make_history_id_is_unique():
    existing = [_builder_item(0)]  # id "1000"

    assert make_history_id(999, existing) == "999"
    assert make_history_id(1000, existing) == "1000-1"


def test_new_items_snapshot_inputs():
    parts = PromptParts(role="Teacher", task="Explain fractions")
    item = new_builder_item(parts, "prompt")
    parts.task = "changed"

    assert item.inputs.task == "Explain fractions"
    assert item.id == str(item.timestamp)

    opt = new_optimizer_item("draft", "better")
    assert opt.original_prompt == "draft"
