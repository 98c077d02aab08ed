from __future__ import annotations

import configparser
import json
import logging
from typing import Callable

from . import budget
from .models import (
    ChartDataItem,
    TodoItem,
    items_from_list,
    items_to_list,
    next_available_color,
    sample_items,
)
from .prefs import PreferenceStore

logger = logging.getLogger(__name__)

TODOS_KEY = "saved_todos"


class TodoStore:
    """In-memory to-do list persisted to a preference blob on every change.

    Listeners registered with :meth:`subscribe` are called with no arguments
    after each mutation.
    """

    def __init__(self, prefs: PreferenceStore, key: str = TODOS_KEY):
        self.prefs = prefs
        self.key = key
        self._items: list[TodoItem] = []
        self._listeners: list[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        try:
            raw = self.prefs.get(self.key)
        except (OSError, ValueError, configparser.Error):
            logger.exception("Failed to read saved to-do items")
            raw = None
        if raw is None:
            logger.info("No saved to-do items; creating sample data")
            self._create_sample_data()
            return
        try:
            self._items = items_from_list(json.loads(raw))
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Failed to load to-do items (%s); creating sample data", exc)
            self._create_sample_data()
            return
        logger.info("Loaded %d to-do items", len(self._items))

    def save(self) -> None:
        try:
            self.prefs.set(self.key, json.dumps(items_to_list(self._items), ensure_ascii=False))
        except (OSError, TypeError, ValueError, configparser.Error):
            logger.exception("Failed to save to-do items")

    def _create_sample_data(self) -> None:
        self._items = sample_items()
        self.save()

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def unsubscribe(self, callback: Callable[[], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _changed(self) -> None:
        self.save()
        for callback in list(self._listeners):
            callback()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def items(self) -> list[TodoItem]:
        return list(self._items)

    def get(self, item_id: str) -> TodoItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def _require(self, item_id: str) -> TodoItem:
        item = self.get(item_id)
        if item is None:
            raise KeyError(item_id)
        return item

    @property
    def incomplete_items(self) -> list[TodoItem]:
        return budget.incomplete(self._items)

    @property
    def used_percentage(self) -> float:
        return budget.used_percentage(self._items)

    @property
    def remaining_percentage(self) -> float:
        return budget.remaining_percentage(self._items)

    def available_for(self, item: TodoItem | None = None) -> float:
        return budget.available_percentage(self._items, item)

    def chart_data(self) -> list[ChartDataItem]:
        return [
            ChartDataItem(title=item.title, percentage=item.percentage, color=item.color)
            for item in self.incomplete_items
        ]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, title: str, percentage) -> TodoItem:
        clean_title, value = budget.validate_entry(title, percentage, self._items)
        color = next_available_color(item.color for item in self._items)
        item = TodoItem(title=clean_title, percentage=value, color=color)
        self._items.append(item)
        logger.info("Added to-do %s (%.1f%%)", item.id, value)
        self._changed()
        return item

    def update(self, item_id: str, title: str, percentage) -> TodoItem:
        item = self._require(item_id)
        clean_title, value = budget.validate_entry(title, percentage, self._items, editing=item)
        item.title = clean_title
        item.percentage = value
        logger.info("Updated to-do %s (%.1f%%)", item.id, value)
        self._changed()
        return item

    def delete(self, item_id: str) -> None:
        before = len(self._items)
        self._items = [item for item in self._items if item.id != item_id]
        if len(self._items) == before:
            return
        logger.info("Deleted to-do %s", item_id)
        self._changed()

    def toggle_completion(self, item_id: str) -> TodoItem:
        item = self._require(item_id)
        if item.completed:
            # Reopening puts the weight back into the budget
            budget.check_budget(self._items, item.percentage, excluding=item)
        item.completed = not item.completed
        logger.info("To-do %s marked %s", item.id, "completed" if item.completed else "open")
        self._changed()
        return item
