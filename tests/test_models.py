import pytest

from workstat.models import (
    AVAILABLE_COLORS,
    TodoItem,
    items_from_list,
    items_to_list,
    next_available_color,
    sample_items,
)


def test_new_items_get_unique_ids():
    a = TodoItem(title="a", percentage=1.0)
    b = TodoItem(title="b", percentage=1.0)
    assert a.id != b.id
    assert a.completed is False


def test_next_available_color_skips_used():
    assert next_available_color([]) == AVAILABLE_COLORS[0]
    used = [AVAILABLE_COLORS[0], AVAILABLE_COLORS[1].lower()]
    assert next_available_color(used) == AVAILABLE_COLORS[2]


def test_next_available_color_when_palette_exhausted():
    assert next_available_color(AVAILABLE_COLORS) in AVAILABLE_COLORS


def test_from_dict_restores_fields():
    data = {"id": "x1", "title": "Docs", "percentage": 25, "completed": True, "color": "#34c759"}
    item = TodoItem.from_dict(data)
    assert item == TodoItem(title="Docs", percentage=25.0, color="#34C759", completed=True, id="x1")
    assert isinstance(item.percentage, float)


def test_from_dict_assigns_missing_id():
    item = TodoItem.from_dict({"title": "Docs", "percentage": 5.0, "completed": False, "color": "#007AFF"})
    assert item.id


@pytest.mark.parametrize(
    "data",
    [
        {"percentage": 5.0, "completed": False, "color": "#007AFF"},
        {"title": "t", "percentage": "5", "completed": False, "color": "#007AFF"},
        {"title": "t", "percentage": True, "completed": False, "color": "#007AFF"},
        {"title": "t", "percentage": 5.0, "completed": "no", "color": "#007AFF"},
        {"title": "t", "percentage": 5.0, "completed": False, "color": "blue"},
        ["not", "a", "dict"],
        {"title": "", "percentage": 5.0, "completed": False, "color": "#007AFF"},
        {"title": "   ", "percentage": 5.0, "completed": False, "color": "#007AFF"},
        {"title": "t", "percentage": float("nan"), "completed": False, "color": "#007AFF"},
        {"title": "t", "percentage": float("inf"), "completed": False, "color": "#007AFF"},
        {"title": "t", "percentage": 0, "completed": False, "color": "#007AFF"},
        {"title": "t", "percentage": -20.0, "completed": False, "color": "#007AFF"},
    ],
)
def test_from_dict_rejects_malformed(data):
    with pytest.raises((KeyError, TypeError, ValueError)):
        TodoItem.from_dict(data)


def test_items_from_list_requires_list():
    with pytest.raises(TypeError):
        items_from_list({"title": "x"})


def test_list_serialization_keeps_order():
    items = sample_items()
    restored = items_from_list(items_to_list(items))
    assert [i.title for i in restored] == [i.title for i in items]
    assert [i.id for i in restored] == [i.id for i in items]


def test_sample_items_fit_budget():
    items = sample_items()
    assert [i.percentage for i in items] == [30.0, 25.0, 20.0]
    assert [i.color for i in items] == AVAILABLE_COLORS[:3]
