import configparser
import json

import pytest

from workstat.budget import BudgetExceededError, TodoValidationError
from workstat.models import AVAILABLE_COLORS
from workstat.store import TODOS_KEY, TodoStore


def test_load_without_saved_state_seeds_sample_data(prefs):
    store = TodoStore(prefs)
    store.load()
    assert [i.title for i in store.items] == ["Learn PyQt", "Finish project docs", "Code review"]
    assert store.used_percentage == pytest.approx(75.0)
    # the seed is written back immediately
    assert json.loads(prefs.get(TODOS_KEY))[0]["title"] == "Learn PyQt"


def test_load_with_corrupt_state_seeds_sample_data(prefs):
    prefs.set(TODOS_KEY, "{not json")
    store = TodoStore(prefs)
    store.load()
    assert len(store.items) == 3


def test_load_with_malformed_item_seeds_sample_data(prefs):
    prefs.set(TODOS_KEY, json.dumps([{"title": "missing fields"}]))
    store = TodoStore(prefs)
    store.load()
    assert store.remaining_percentage == pytest.approx(25.0)


def test_load_restores_saved_items(prefs):
    prefs.set(TODOS_KEY, json.dumps([
        {"id": "k", "title": "Only", "percentage": 60, "completed": False, "color": "#FF3B30"},
    ]))
    store = TodoStore(prefs)
    store.load()
    assert len(store.items) == 1
    assert store.get("k").percentage == 60.0


def test_load_empty_list_is_not_replaced(prefs):
    prefs.set(TODOS_KEY, "[]")
    store = TodoStore(prefs)
    store.load()
    assert store.items == []
    assert store.chart_data() == []


def test_add_assigns_next_color_and_persists(store, prefs):
    item = store.add("  New task ", "25")
    assert item.title == "New task"
    assert item.color == AVAILABLE_COLORS[3]
    reloaded = TodoStore(prefs)
    reloaded.load()
    assert [i.id for i in reloaded.items] == [i.id for i in store.items]
    assert reloaded.used_percentage == pytest.approx(100.0)


def test_add_over_budget_is_rejected(store):
    with pytest.raises(BudgetExceededError):
        store.add("Too much", 25.1)
    assert len(store.items) == 3


def test_add_invalid_entry_is_rejected(store):
    with pytest.raises(TodoValidationError):
        store.add("", 5)
    with pytest.raises(TodoValidationError):
        store.add("Task", 0)


def test_update_excludes_own_weight(store):
    first = store.items[0]
    updated = store.update(first.id, "Learn Qt well", 55)
    assert updated.percentage == 55.0
    assert store.used_percentage == pytest.approx(100.0)
    with pytest.raises(BudgetExceededError):
        store.update(first.id, "Learn Qt well", 56)
    assert store.get(first.id).percentage == 55.0


def test_update_unknown_id_raises(store):
    with pytest.raises(KeyError):
        store.update("nope", "x", 1)


def test_delete_removes_item(store, prefs):
    target = store.items[1]
    store.delete(target.id)
    assert store.get(target.id) is None
    assert target.id not in prefs.get(TODOS_KEY)
    store.delete("nope")
    assert len(store.items) == 2


def test_toggle_completion_frees_budget(store):
    first = store.items[0]
    store.toggle_completion(first.id)
    assert store.get(first.id).completed
    assert store.remaining_percentage == pytest.approx(55.0)
    assert [d.title for d in store.chart_data()] == ["Finish project docs", "Code review"]


def test_reopen_over_budget_is_rejected(store):
    first = store.items[0]
    store.toggle_completion(first.id)
    store.add("Filler", 55)
    with pytest.raises(BudgetExceededError):
        store.toggle_completion(first.id)
    assert store.get(first.id).completed


def test_listeners_are_notified_on_mutation(store):
    calls = []
    store.subscribe(lambda: calls.append("changed"))
    item = store.add("Task", 5)
    store.update(item.id, "Task 2", 6)
    store.toggle_completion(item.id)
    store.delete(item.id)
    assert calls == ["changed"] * 4


def test_unsubscribed_listener_is_not_called(store):
    calls = []

    def listener():
        calls.append(1)

    store.subscribe(listener)
    store.unsubscribe(listener)
    store.add("Task", 5)
    assert calls == []


def test_failed_save_keeps_memory_state(store, monkeypatch, caplog):
    def broken_set(key, value):
        raise OSError("disk full")

    monkeypatch.setattr(store.prefs, "set", broken_set)
    item = store.add("Task", 5)
    assert store.get(item.id) is item
    assert "Failed to save" in caplog.text


def test_failed_save_with_parser_error_keeps_memory_state(store, monkeypatch, caplog):
    def broken_set(key, value):
        raise configparser.DuplicateSectionError("preferences")

    monkeypatch.setattr(store.prefs, "set", broken_set)
    item = store.add("Task", 5)
    assert store.get(item.id) is item
    assert "Failed to save" in caplog.text


def test_load_with_unparseable_file_seeds_sample_data(prefs):
    prefs.path.write_text("saved_todos = []\n", encoding="utf-8")
    store = TodoStore(prefs)
    store.load()
    assert len(store.items) == 3
    # the damaged file is rewritten with the seed
    assert len(json.loads(prefs.get(TODOS_KEY))) == 3


def test_load_with_undecodable_file_seeds_sample_data(prefs):
    prefs.path.write_bytes(b"[preferences]\nsaved_todos = [\xff\xfe]\n")
    store = TodoStore(prefs)
    store.load()
    assert [i.title for i in store.items] == ["Learn PyQt", "Finish project docs", "Code review"]


def test_load_with_parser_error_from_prefs_seeds_sample_data(prefs, monkeypatch):
    def broken_get(key):
        raise configparser.ParsingError("preferences.ini")

    monkeypatch.setattr(prefs, "get", broken_get)
    store = TodoStore(prefs)
    store.load()
    assert len(store.items) == 3


@pytest.mark.parametrize("percentage", ["NaN", "Infinity", "0", "-20"])
def test_load_with_out_of_range_weight_seeds_sample_data(prefs, percentage):
    prefs.set(
        TODOS_KEY,
        '[{"id": "x", "title": "Bad", "percentage": %s, "completed": false, "color": "#007AFF"}]' % percentage,
    )
    store = TodoStore(prefs)
    store.load()
    assert store.get("x") is None
    assert store.used_percentage == pytest.approx(75.0)
