import time
from typing import Callable

from PyQt6.QtWidgets import (
    QAbstractItemView, QApplication, QGridLayout, QHBoxLayout, QLabel, QSizePolicy,
    QStyle, QStyledItemDelegate, QStyleOptionViewItem, QTreeView, QWidget,
)
from PyQt6.QtGui import QStandardItem, QFont, QBrush, QColor, QCursor, QPainter
from PyQt6.QtCore import Qt, QRect, QSize, QEvent, QTimer
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg
from matplotlib.figure import Figure

from .chart import (
    LegendEntry,
    animation_length,
    compute_layout,
    draw_pie_chart,
    format_percentage,
    slice_progress,
)
from .models import ChartDataItem
from .style import (
    UI_FONT_FAMILY,
    UI_BASE_FONT_SIZE,
    COMPLETED_TEXT_COLOR,
    CHART_SIZE,
    LABEL_RADIUS_RATIO,
    INNER_RADIUS_RATIO,
    LABEL_MIN_PERCENTAGE,
    ANIMATION_DURATION,
    REMAINING_COLOR_HEX,
)

ACTION_EDIT = "edit"
ACTION_DELETE = "delete"
ANIMATION_STAGGER = 0.1
ANIMATION_INTERVAL_MS = 16


def make_item(text="", editable=False, meta=None, bold=False, color=None, strike=False):
    item = QStandardItem(str(text))
    item.setEditable(editable)
    font = QFont(UI_FONT_FAMILY, UI_BASE_FONT_SIZE)
    if bold:
        font.setBold(True)
    if strike:
        font.setStrikeOut(True)
    item.setFont(font)
    if color:
        item.setForeground(QBrush(color))
    item.setTextAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter)
    if meta:
        item.setData(meta, Qt.ItemDataRole.UserRole)
    return item


def make_check_item(item_id: str, checked: bool):
    item = QStandardItem()
    item.setEditable(False)
    item.setCheckable(True)
    item.setCheckState(Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked)
    item.setData(("todo", item_id, "completed"), Qt.ItemDataRole.UserRole)
    return item


def make_percentage_item(item_id: str, percentage: float, completed: bool):
    text = format_percentage(percentage)
    if completed:
        text = f"{text}  Done"
    color = COMPLETED_TEXT_COLOR if completed else None
    return make_item(text, meta=("todo", item_id, "percentage"), color=color)


class TodoListView(QTreeView):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setRootIsDecorated(False)
        self.setUniformRowHeights(True)
        self.setAlternatingRowColors(True)
        self.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        self.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.setMouseTracking(True)


class ColorSwatchDelegate(QStyledItemDelegate):
    def __init__(self, parent, swatch_size: QSize = QSize(6, 24)):
        super().__init__(parent)
        self.swatch_size = swatch_size

    def paint(self, painter, option, index):
        color = index.data(Qt.ItemDataRole.DecorationRole)
        if not isinstance(color, QColor):
            super().paint(painter, option, index)
            return
        rect = option.rect
        height = min(self.swatch_size.height(), max(rect.height() - 4, 6))
        x = rect.x() + max((rect.width() - self.swatch_size.width()) // 2, 0)
        y = rect.y() + max((rect.height() - height) // 2, 0)
        painter.save()
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(color))
        painter.drawRoundedRect(QRect(x, y, self.swatch_size.width(), height), 3, 3)
        painter.restore()

    def sizeHint(self, option, index):
        return QSize(self.swatch_size.width() + 8, self.swatch_size.height() + 8)


class ActionButtonDelegate(QStyledItemDelegate):
    """Draws edit and delete buttons in a cell and reports clicks.

    ``callback(index, action)`` receives ``ACTION_EDIT`` or ``ACTION_DELETE``.
    """

    ACTIONS = (
        (ACTION_EDIT, "✎", "#007AFF"),
        (ACTION_DELETE, "✕", "#FF3B30"),
    )

    def __init__(self, parent, callback: Callable):
        super().__init__(parent)
        self.view = parent
        self.view.setMouseTracking(True)
        self.view.viewport().setMouseTracking(True)
        self.callback = callback
        self.button_size = QSize(20, 20)
        self.margin = 4
        self._pressed = None

    def _has_buttons(self, index) -> bool:
        if not index.isValid():
            return False
        meta = index.data(Qt.ItemDataRole.UserRole)
        return bool(meta) and isinstance(meta, tuple) and meta[0] == "todo" and meta[2] == "actions"

    def _button_rects(self, option) -> list[QRect]:
        rect = option.rect
        width = self.button_size.width()
        height = min(self.button_size.height(), max(rect.height() - self.margin * 2, 6))
        y = rect.y() + max((rect.height() - height) // 2, 0)
        rects = []
        x = rect.right() - self.margin - width
        for _ in self.ACTIONS:
            rects.append(QRect(int(max(x, rect.left() + self.margin)), int(y), width, height))
            x -= width + self.margin
        rects.reverse()
        return rects

    def _hit(self, option, pos) -> str | None:
        for (action, _, _), rect in zip(self.ACTIONS, self._button_rects(option)):
            if rect.contains(pos):
                return action
        return None

    def paint(self, painter, option, index):
        if not self._has_buttons(index):
            super().paint(painter, option, index)
            return
        style = self.view.style() if self.view else QApplication.style()
        bg_option = QStyleOptionViewItem(option)
        self.initStyleOption(bg_option, index)
        bg_option.text = ""
        style.drawControl(QStyle.ControlElement.CE_ItemViewItem, bg_option, painter, self.view)

        painter.save()
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        for (action, glyph, color), rect in zip(self.ACTIONS, self._button_rects(option)):
            if self._pressed == (index.row(), action):
                fill_color = QColor("#cbd5f5")
            else:
                fill_color = QColor("#f3f4f6")
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(fill_color))
            painter.drawRoundedRect(rect, 4, 4)
            painter.setPen(QColor(color))
            painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, glyph)
        painter.restore()

    def editorEvent(self, event, model, option, index):
        if not self._has_buttons(index):
            return super().editorEvent(event, model, option, index)

        pos = event.position().toPoint() if hasattr(event, "position") else event.pos()
        action = self._hit(option, pos)

        if event.type() == QEvent.Type.MouseMove:
            if action:
                self.view.viewport().setCursor(QCursor(Qt.CursorShape.PointingHandCursor))
            else:
                self.view.viewport().unsetCursor()
            return False

        if event.type() == QEvent.Type.MouseButtonPress and event.button() == Qt.MouseButton.LeftButton:
            self._pressed = (index.row(), action) if action else None
            return action is not None

        if event.type() == QEvent.Type.MouseButtonRelease and event.button() == Qt.MouseButton.LeftButton:
            pressed = self._pressed
            self._pressed = None
            self.view.viewport().unsetCursor()
            if action and pressed == (index.row(), action):
                self.callback(index, action)
                return True
            return False

        return super().editorEvent(event, model, option, index)

    def sizeHint(self, option, index):
        count = len(self.ACTIONS)
        return QSize(count * self.button_size.width() + (count + 1) * self.margin, self.button_size.height() + 8)


class PieChartCanvas(FigureCanvasQTAgg):
    """Matplotlib donut chart with a staggered grow-in animation."""

    def __init__(self, parent=None, size: int = CHART_SIZE):
        figure = Figure(figsize=(size / 100, size / 100), dpi=100)
        figure.set_facecolor("none")
        super().__init__(figure)
        self.setParent(parent)
        self.chart_size = size
        self.setFixedSize(size, size)
        self.setStyleSheet("background: transparent;")
        self._data: list[ChartDataItem] = []
        self._started = 0.0
        self._timer = QTimer(self)
        self._timer.setInterval(ANIMATION_INTERVAL_MS)
        self._timer.timeout.connect(self._on_tick)

    def set_data(self, data: list[ChartDataItem], animate: bool = True):
        self._data = list(data)
        if animate and self._data and ANIMATION_DURATION > 0:
            self._started = time.monotonic()
            self._render(0.0)
            self._timer.start()
        else:
            self._timer.stop()
            self._render(None)

    def _on_tick(self):
        elapsed = time.monotonic() - self._started
        total = animation_length(len(self._data), ANIMATION_DURATION, ANIMATION_STAGGER)
        if elapsed >= total:
            self._timer.stop()
            self._render(None)
            return
        self._render(elapsed)

    def _render(self, elapsed):
        layout = compute_layout(
            self._data,
            self.chart_size,
            self.chart_size,
            label_radius_ratio=LABEL_RADIUS_RATIO,
            min_label_percentage=LABEL_MIN_PERCENTAGE,
        )
        progress = None
        if elapsed is not None:
            progress = [
                slice_progress(elapsed, idx, ANIMATION_DURATION, ANIMATION_STAGGER)
                for idx in range(len(layout.slices))
            ]
        draw_pie_chart(
            self.figure,
            layout,
            progress=progress,
            inner_radius_ratio=INNER_RADIUS_RATIO,
            remaining_color=REMAINING_COLOR_HEX,
        )
        self.draw_idle()


class LegendWidget(QWidget):
    """Two-column legend: color dot, title and percentage per entry."""

    def __init__(self, parent=None, columns: int = 2):
        super().__init__(parent)
        self.columns = columns
        self.grid = QGridLayout(self)
        self.grid.setContentsMargins(0, 0, 0, 0)
        self.grid.setHorizontalSpacing(12)
        self.grid.setVerticalSpacing(6)

    def _clear(self):
        while self.grid.count():
            child = self.grid.takeAt(0)
            widget = child.widget()
            if widget is not None:
                widget.deleteLater()

    def set_entries(self, entries: list[LegendEntry]):
        self._clear()
        for idx, entry in enumerate(entries):
            cell = QWidget(self)
            cell.setObjectName("legendCell")
            cell.setStyleSheet("#legendCell { background-color: #f7f7f9; border-radius: 6px; }")
            row = QHBoxLayout(cell)
            row.setContentsMargins(8, 4, 8, 4)
            row.setSpacing(6)
            dot = QLabel(cell)
            dot.setFixedSize(8, 8)
            dot.setStyleSheet(f"background-color: {entry.color}; border-radius: 4px;")
            row.addWidget(dot)
            title = QLabel(entry.title, cell)
            title.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
            if entry.is_remaining:
                title.setStyleSheet("color: #6b7280;")
            row.addWidget(title)
            value = QLabel(format_percentage(entry.percentage), cell)
            value.setStyleSheet("color: #6b7280; font-weight: 600;")
            row.addWidget(value)
            self.grid.addWidget(cell, idx // self.columns, idx % self.columns)
