from __future__ import annotations

import math
import random
import re
import uuid
from dataclasses import dataclass, field
from typing import Any

# Palette handed out to new items, in order
AVAILABLE_COLORS = [
    "#007AFF",  # blue
    "#34C759",  # green
    "#FF9500",  # orange
    "#FF3B30",  # red
    "#AF52DE",  # purple
    "#FF2D55",  # pink
    "#FFCC00",  # yellow
    "#32ADE6",  # cyan
    "#00C7BE",  # mint
    "#5856D6",  # indigo
]
DEFAULT_COLOR = AVAILABLE_COLORS[0]

_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def normalize_color(value: Any) -> str:
    if not isinstance(value, str) or not _HEX_COLOR_RE.match(value):
        raise ValueError(f"Invalid color: {value!r}")
    return value.upper()


def next_available_color(used_colors) -> str:
    used = {c.upper() for c in used_colors}
    for color in AVAILABLE_COLORS:
        if color not in used:
            return color
    return random.choice(AVAILABLE_COLORS)


def new_item_id() -> str:
    return uuid.uuid4().hex


@dataclass
class TodoItem:
    title: str
    percentage: float
    color: str = DEFAULT_COLOR
    completed: bool = False
    id: str = field(default_factory=new_item_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "percentage": self.percentage,
            "completed": self.completed,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TodoItem:
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")
        title = data["title"]
        if not isinstance(title, str):
            raise TypeError("title must be a string")
        if not title.strip():
            raise ValueError("title must not be empty")
        percentage = data["percentage"]
        # bool is an int subclass; reject it explicitly
        if isinstance(percentage, bool) or not isinstance(percentage, (int, float)):
            raise TypeError("percentage must be a number")
        if not math.isfinite(percentage) or percentage <= 0:
            raise ValueError(f"percentage must be a positive number, got {percentage!r}")
        completed = data["completed"]
        if not isinstance(completed, bool):
            raise TypeError("completed must be a boolean")
        item_id = data.get("id") or new_item_id()
        return cls(
            title=title,
            percentage=float(percentage),
            color=normalize_color(data["color"]),
            completed=completed,
            id=str(item_id),
        )


@dataclass(frozen=True)
class ChartDataItem:
    title: str
    percentage: float
    color: str


def items_to_list(items: list[TodoItem]) -> list[dict[str, Any]]:
    return [item.to_dict() for item in items]


def items_from_list(data: Any) -> list[TodoItem]:
    if not isinstance(data, list):
        raise TypeError(f"Expected a list of items, got {type(data).__name__}")
    return [TodoItem.from_dict(entry) for entry in data]


def sample_items() -> list[TodoItem]:
    return [
        TodoItem(title="Learn PyQt", percentage=30.0, color=AVAILABLE_COLORS[0]),
        TodoItem(title="Finish project docs", percentage=25.0, color=AVAILABLE_COLORS[1]),
        TodoItem(title="Code review", percentage=20.0, color=AVAILABLE_COLORS[2]),
    ]
