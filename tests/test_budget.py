import pytest

from workstat import budget
from workstat.budget import BudgetExceededError, TodoValidationError
from workstat.models import TodoItem


def test_used_percentage_ignores_completed(items):
    assert budget.used_percentage(items) == pytest.approx(70.0)
    assert budget.remaining_percentage(items) == pytest.approx(30.0)


def test_remaining_percentage_never_negative():
    over = [TodoItem(title="x", percentage=80.0), TodoItem(title="y", percentage=40.0)]
    assert budget.remaining_percentage(over) == 0.0


def test_is_valid_percentage_accepts_exact_fill(items):
    assert budget.is_valid_percentage(items, 30.0)
    assert not budget.is_valid_percentage(items, 30.5)


def test_is_valid_percentage_excludes_edited_item(items):
    editing = items[0]
    assert budget.is_valid_percentage(items, 70.0, excluding=editing)
    assert budget.is_valid_percentage(items, 70.0, excluding="a")
    assert not budget.is_valid_percentage(items, 70.1, excluding=editing)


def test_float_noise_is_tolerated():
    parts = [TodoItem(title="a", percentage=33.3), TodoItem(title="b", percentage=33.3)]
    assert budget.is_valid_percentage(parts, 33.4)


def test_available_percentage_for_new_and_edited(items):
    assert budget.available_percentage(items) == pytest.approx(30.0)
    assert budget.available_percentage(items, items[1]) == pytest.approx(60.0)
    # completed items are not part of the budget
    assert budget.available_percentage(items, items[2]) == pytest.approx(30.0)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("25", 25.0),
        (" 12.5 ", 12.5),
        ("12,5", 12.5),
        ("40%", 40.0),
        ("", None),
        ("abc", None),
        ("nan", None),
        (None, None),
        (7, 7.0),
    ],
)
def test_parse_percentage(text, expected):
    assert budget.parse_percentage(text) == expected


def test_validate_entry_returns_cleaned_values(items):
    assert budget.validate_entry("  Plan sprint ", "20", items) == ("Plan sprint", 20.0)


def test_validate_entry_requires_title(items):
    with pytest.raises(TodoValidationError, match="title"):
        budget.validate_entry("   ", "10", items)


@pytest.mark.parametrize("text", ["", "0", "-5", "ten"])
def test_validate_entry_requires_positive_percentage(items, text):
    with pytest.raises(TodoValidationError, match="valid percentage"):
        budget.validate_entry("Task", text, items)


def test_validate_entry_rejects_over_budget(items):
    with pytest.raises(BudgetExceededError) as excinfo:
        budget.validate_entry("Task", "31", items)
    assert excinfo.value.available == pytest.approx(30.0)
    assert "100%" in str(excinfo.value)


def test_budget_error_is_validation_error():
    assert issubclass(BudgetExceededError, TodoValidationError)
    assert issubclass(TodoValidationError, ValueError)
