from __future__ import annotations

import math

from .models import TodoItem

TOTAL_BUDGET = 100.0
# Float summation noise, e.g. 33.3 + 33.3 + 33.4
TOLERANCE = 1e-6


class TodoValidationError(ValueError):
    """Raised when a to-do entry cannot be accepted."""


class BudgetExceededError(TodoValidationError):
    def __init__(self, requested: float, available: float):
        self.requested = requested
        self.available = available
        super().__init__("The total percentage cannot exceed 100%")


def _item_id(item: TodoItem | str | None) -> str | None:
    if item is None:
        return None
    if isinstance(item, TodoItem):
        return item.id
    return str(item)


def incomplete(items: list[TodoItem]) -> list[TodoItem]:
    return [item for item in items if not item.completed]


def used_percentage(items: list[TodoItem]) -> float:
    return sum(item.percentage for item in incomplete(items))


def remaining_percentage(items: list[TodoItem]) -> float:
    return max(0.0, TOTAL_BUDGET - used_percentage(items))


def is_valid_percentage(items: list[TodoItem], percentage: float, excluding: TodoItem | str | None = None) -> bool:
    skip_id = _item_id(excluding)
    current_used = sum(item.percentage for item in incomplete(items) if item.id != skip_id)
    return current_used + percentage <= TOTAL_BUDGET + TOLERANCE


def available_percentage(items: list[TodoItem], editing: TodoItem | None = None) -> float:
    """Budget left for a new entry, or for ``editing`` if given."""
    available = remaining_percentage(items)
    if editing is not None and not editing.completed:
        available += editing.percentage
    return min(available, TOTAL_BUDGET)


def parse_percentage(text) -> float | None:
    if text is None:
        return None
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return float(text) if math.isfinite(text) else None
    cleaned = (
        str(text)
        .strip()
        .rstrip("%")
        .replace("\u00a0", "")
        .replace("\u202f", "")
        .replace(" ", "")
    )
    if not cleaned:
        return None
    cleaned = cleaned.replace(",", ".")
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def check_title(title) -> str:
    trimmed = (title or "").strip()
    if not trimmed:
        raise TodoValidationError("Please enter a title")
    return trimmed


def check_percentage(percentage) -> float:
    value = parse_percentage(percentage)
    if value is None or value <= 0:
        raise TodoValidationError("Please enter a valid percentage")
    return value


def check_budget(items: list[TodoItem], percentage: float, excluding: TodoItem | str | None = None) -> None:
    if not is_valid_percentage(items, percentage, excluding=excluding):
        skip_id = _item_id(excluding)
        editing = next((item for item in items if item.id == skip_id), None)
        raise BudgetExceededError(percentage, available_percentage(items, editing))


def validate_entry(title, percentage_text, items: list[TodoItem], editing: TodoItem | None = None) -> tuple[str, float]:
    """Check a form submission and return the cleaned ``(title, percentage)``.

    Editing an item excludes its own current weight from the budget.
    """
    clean_title = check_title(title)
    value = check_percentage(percentage_text)
    check_budget(items, value, excluding=editing)
    return clean_title, value
