import logging
import sys
import webbrowser
from pathlib import Path
from urllib.parse import quote

from PyQt6.QtWidgets import (
    QApplication, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit,
    QPushButton, QHeaderView, QMessageBox, QFileDialog, QSizePolicy,
    QToolButton, QStyle, QFrame, QDialog, QScrollArea,
)
from PyQt6.QtGui import QStandardItemModel, QColor, QFont
from PyQt6.QtCore import Qt, QTimer, QSize

from . import config
from .budget import TodoValidationError
from .chart import legend_entries, format_percentage
from .export import export_csv
from .models import TodoItem
from .prefs import PreferenceStore
from .store import TodoStore
from .ui import (
    ACTION_DELETE,
    ACTION_EDIT,
    ActionButtonDelegate,
    ColorSwatchDelegate,
    LegendWidget,
    PieChartCanvas,
    TodoListView,
    make_check_item,
    make_item,
    make_percentage_item,
)
from .style import (
    UI_FONT_FAMILY,
    TITLE_FONT_SIZE,
    SECTION_FONT_SIZE,
    WINDOW_WIDTH,
    WINDOW_HEIGHT,
    WINDOW_MIN_WIDTH,
    WINDOW_MIN_HEIGHT,
    ACCENT_COLOR,
    COMPLETED_TEXT_COLOR,
)

logger = logging.getLogger(__name__)

COL_DONE, COL_COLOR, COL_TITLE, COL_PERCENT, COL_ACTIONS = range(5)

ABOUT_DESCRIPTION = (
    "WorkStat is a simple to-do statistics tool that helps you manage your time "
    "and tasks. A pie chart shows at a glance how your effort is split across "
    "the things still left to do."
)
ABOUT_FEATURES = [
    "Pie chart of the weight of each open task",
    "Flexible percentage weights",
    "Smooth chart animation",
    "Clean, simple interface",
    "Data stays on this computer",
]


def feedback_mailto_url(
    email: str = config.FEEDBACK_EMAIL,
    subject: str = "WorkStat feedback",
    body: str = "Please enter your feedback here...",
) -> str:
    return f"mailto:{email}?subject={quote(subject)}&body={quote(body)}"


def section_label(text: str, size: int = SECTION_FONT_SIZE) -> QLabel:
    label = QLabel(text)
    font = QFont(UI_FONT_FAMILY, size)
    font.setBold(True)
    label.setFont(font)
    return label


def panel_frame(name: str) -> QFrame:
    frame = QFrame()
    frame.setObjectName(name)
    frame.setStyleSheet(f"#{name} {{ background-color: #f6f7fb; border-radius: 12px; }}")
    return frame


class TodoFormDialog(QDialog):
    """Add a to-do, or edit ``editing_item`` when given."""

    def __init__(self, parent, store: TodoStore, editing_item: TodoItem | None = None):
        super().__init__(parent)
        self.setModal(True)
        self.store = store
        self.editing_item = editing_item
        self.setWindowTitle("Edit to-do" if self.is_editing else "Add to-do")
        self.setMinimumWidth(420)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(16)
        heading = section_label(self.windowTitle(), 16)
        heading.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        layout.addWidget(heading)

        form = panel_frame("formPanel")
        form_layout = QVBoxLayout(form)
        form_layout.setContentsMargins(14, 14, 14, 14)
        form_layout.setSpacing(8)

        form_layout.addWidget(section_label("Title", 11))
        self.title_input = QLineEdit()
        self.title_input.setPlaceholderText("Enter a title")
        self.title_input.setClearButtonEnabled(True)
        form_layout.addWidget(self.title_input)
        form_layout.addSpacing(8)

        percent_header = QHBoxLayout()
        percent_header.addWidget(section_label("Percentage weight", 11))
        percent_header.addStretch()
        self.available_label = QLabel(f"Available: {format_percentage(self.available_percentage)}")
        self.available_label.setStyleSheet("color: #6b7280;")
        percent_header.addWidget(self.available_label)
        form_layout.addLayout(percent_header)

        percent_row = QHBoxLayout()
        self.percentage_input = QLineEdit()
        self.percentage_input.setPlaceholderText("Enter a percentage")
        self.percentage_input.setAlignment(Qt.AlignmentFlag.AlignRight)
        percent_row.addWidget(self.percentage_input)
        percent_row.addWidget(QLabel("%"))
        form_layout.addLayout(percent_row)

        hint = QLabel("Tip: the percentages of all open to-dos cannot add up to more than 100%")
        hint.setWordWrap(True)
        hint.setStyleSheet("color: #6b7280; font-size: 10px;")
        form_layout.addWidget(hint)
        layout.addWidget(form)
        layout.addStretch()

        buttons = QHBoxLayout()
        buttons.addStretch()
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        buttons.addWidget(cancel_btn)
        self.save_btn = QPushButton("Save" if self.is_editing else "Add")
        self.save_btn.setDefault(True)
        self.save_btn.clicked.connect(self.save)
        buttons.addWidget(self.save_btn)
        buttons.addStretch()
        layout.addLayout(buttons)

        if editing_item is not None:
            self.title_input.setText(editing_item.title)
            self.percentage_input.setText(f"{editing_item.percentage:.1f}")
        self.title_input.textChanged.connect(self._update_save_enabled)
        self.percentage_input.textChanged.connect(self._update_save_enabled)
        self._update_save_enabled()

    @property
    def is_editing(self) -> bool:
        return self.editing_item is not None

    @property
    def available_percentage(self) -> float:
        return self.store.available_for(self.editing_item)

    def _update_save_enabled(self):
        self.save_btn.setEnabled(
            bool(self.title_input.text().strip()) and bool(self.percentage_input.text().strip())
        )

    def save(self):
        title = self.title_input.text()
        percentage = self.percentage_input.text()
        try:
            if self.editing_item is not None:
                self.store.update(self.editing_item.id, title, percentage)
            else:
                self.store.add(title, percentage)
        except TodoValidationError as e:
            QMessageBox.warning(self, "Error", str(e))
            return
        self.accept()


class AboutDialog(QDialog):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle(f"About {config.APP_NAME}")
        self.resize(460, 560)

        outer = QVBoxLayout(self)
        header = QHBoxLayout()
        header.addWidget(section_label(self.windowTitle(), 16))
        header.addStretch()
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.accept)
        header.addWidget(close_btn)
        outer.addLayout(header)

        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        content = QWidget()
        layout = QVBoxLayout(content)
        layout.setSpacing(16)

        name = section_label(config.APP_NAME, TITLE_FONT_SIZE)
        name.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        layout.addWidget(name)
        tagline = QLabel("To-do statistics")
        tagline.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        tagline.setStyleSheet("color: #6b7280;")
        layout.addWidget(tagline)

        intro = panel_frame("aboutIntro")
        intro_layout = QVBoxLayout(intro)
        intro_layout.addWidget(section_label("Overview", 12))
        description = QLabel(ABOUT_DESCRIPTION)
        description.setWordWrap(True)
        description.setStyleSheet("color: #4b5563;")
        intro_layout.addWidget(description)
        layout.addWidget(intro)

        features = panel_frame("aboutFeatures")
        features_layout = QVBoxLayout(features)
        features_layout.addWidget(section_label("Features", 12))
        for text in ABOUT_FEATURES:
            point = QLabel(f"✓  {text}")
            point.setStyleSheet(f"color: {ACCENT_COLOR.name()};")
            features_layout.addWidget(point)
        layout.addWidget(features)

        footer = QLabel(f"© 2025 {config.APP_NAME}\nVersion {config.app_version()}")
        footer.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        footer.setStyleSheet("color: #6b7280; font-size: 10px;")
        layout.addWidget(footer)
        layout.addStretch()

        scroll.setWidget(content)
        outer.addWidget(scroll)


class SettingsDialog(QDialog):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.resize(460, 380)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        header = QHBoxLayout()
        header.addWidget(section_label("Settings", TITLE_FONT_SIZE))
        header.addStretch()
        done_btn = QPushButton("Done")
        done_btn.clicked.connect(self.accept)
        header.addWidget(done_btn)
        layout.addLayout(header)
        layout.addSpacing(12)

        layout.addWidget(section_label("App info", 12))
        layout.addWidget(self._row(f"About {config.APP_NAME}", "Learn more about the app", self.show_about))
        layout.addWidget(self._row("Version", config.app_version(), None))
        layout.addSpacing(8)
        layout.addWidget(section_label("Feedback & support", 12))
        layout.addWidget(self._row("Send feedback", "Tell us what you think", self.open_feedback))
        layout.addStretch()

    def _row(self, title: str, subtitle: str, action) -> QPushButton:
        btn = QPushButton(f"{title}\n{subtitle}")
        btn.setFlat(True)
        btn.setStyleSheet(
            "QPushButton { text-align: left; padding: 8px 12px; border-radius: 8px; } "
            "QPushButton:hover { background-color: #eef0f3; }"
        )
        if action is not None:
            btn.clicked.connect(action)
        else:
            btn.setEnabled(False)
        return btn

    def show_about(self):
        AboutDialog(self).exec()

    def open_feedback(self):
        url = feedback_mailto_url()
        if not webbrowser.open(url):
            logger.warning("No handler available for %s", url)
            QMessageBox.information(self, "Feedback", f"Send your feedback to {config.FEEDBACK_EMAIL}")


class WorkStatApp(QWidget):
    def __init__(self, store: TodoStore):
        super().__init__()
        self.store = store
        self.setWindowTitle(config.APP_NAME)
        self.setMinimumSize(WINDOW_MIN_WIDTH, WINDOW_MIN_HEIGHT)
        width, height = config.load_window_geometry() or (WINDOW_WIDTH, WINDOW_HEIGHT)
        self.resize(max(width, WINDOW_MIN_WIDTH), max(height, WINDOW_MIN_HEIGHT))
        screen = QApplication.primaryScreen()
        if screen is not None:
            self.move(screen.availableGeometry().center() - self.rect().center())
        self._populating = False

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        header = QHBoxLayout()
        header.setContentsMargins(16, 12, 16, 12)
        header.addWidget(section_label("To-do statistics", TITLE_FONT_SIZE))
        header.addStretch()
        self.settings_btn = QToolButton()
        self.settings_btn.setAutoRaise(True)
        self.settings_btn.setToolTip("Settings")
        self.settings_btn.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_FileDialogDetailedView))
        self.settings_btn.setIconSize(QSize(20, 20))
        self.settings_btn.clicked.connect(self.open_settings)
        header.addWidget(self.settings_btn)
        layout.addLayout(header)

        divider = QFrame()
        divider.setFrameShape(QFrame.Shape.HLine)
        divider.setStyleSheet("color: #e5e7eb;")
        layout.addWidget(divider)

        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        content = QWidget()
        body = QVBoxLayout(content)
        body.setContentsMargins(16, 16, 16, 16)
        body.setSpacing(24)

        stats_title = section_label("Statistics")
        stats_title.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        body.addWidget(stats_title)
        self.chart_canvas = PieChartCanvas(content)
        body.addWidget(self.chart_canvas, alignment=Qt.AlignmentFlag.AlignHCenter)
        self.empty_chart_label = QLabel("No data")
        self.empty_chart_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_chart_label.setStyleSheet(
            "color: #6b7280; background-color: #f6f7fb; border-radius: 16px; padding: 40px;"
        )
        body.addWidget(self.empty_chart_label, alignment=Qt.AlignmentFlag.AlignHCenter)
        self.legend = LegendWidget(content)
        body.addWidget(self.legend)

        list_header = QHBoxLayout()
        list_header.addWidget(section_label("To-dos"))
        list_header.addStretch()
        self.export_btn = QPushButton("Export CSV")
        self.export_btn.clicked.connect(self.export_items)
        list_header.addWidget(self.export_btn)
        self.add_btn = QPushButton("+ Add to-do")
        self.add_btn.setStyleSheet(
            f"QPushButton {{ background-color: {ACCENT_COLOR.name()}; color: #fff; border: none; "
            "border-radius: 8px; padding: 6px 12px; } "
            "QPushButton:hover { background-color: #2fb350; }"
        )
        self.add_btn.clicked.connect(self.add_item)
        list_header.addWidget(self.add_btn)
        body.addLayout(list_header)

        self.empty_list_label = QLabel("No to-dos yet")
        self.empty_list_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_list_label.setStyleSheet(
            "color: #6b7280; background-color: #f6f7fb; border-radius: 12px; padding: 40px;"
        )
        body.addWidget(self.empty_list_label)

        self.view = TodoListView()
        self.model = QStandardItemModel(0, 5)
        self.view.setModel(self.model)
        self.view.setHeaderHidden(True)
        self.view.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.view.setMinimumHeight(220)
        self.view.setItemDelegateForColumn(COL_COLOR, ColorSwatchDelegate(self.view))
        self.action_delegate = ActionButtonDelegate(self.view, self._on_action)
        self.view.setItemDelegateForColumn(COL_ACTIONS, self.action_delegate)
        header_view = self.view.header()
        header_view.setStretchLastSection(False)
        header_view.setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)
        header_view.setSectionResizeMode(COL_TITLE, QHeaderView.ResizeMode.Stretch)
        body.addWidget(self.view)
        body.addStretch()

        scroll.setWidget(content)
        layout.addWidget(scroll)

        self.apply_light_theme()
        self.model.itemChanged.connect(self.on_item_changed)
        self.store.subscribe(self.refresh)
        self.refresh()

    def apply_light_theme(self):
        self.setStyleSheet(
            """
            QWidget { background-color: white; color: black; font-size: 12px; }
            QPushButton { background-color: #f3f4f6; border: 1px solid #ccc; border-radius: 5px; padding: 4px 10px; }
            QPushButton:hover { background-color: #e2e6ea; }
            QPushButton:disabled { color: #9ca3af; }
            QTreeView { alternate-background-color: #fafafa; border: 1px solid #eee; border-radius: 8px; }
            QScrollBar:vertical { background: #f4f5f8; width: 12px; margin: 2px 0 2px 0; border-radius: 6px; }
            QScrollBar::handle:vertical { background: #bfc6d4; min-height: 24px; border-radius: 6px; }
            QScrollBar::handle:vertical:hover { background: #a6aec0; }
            QScrollBar::add-line:vertical, QScrollBar::sub-line:vertical { height: 0px; background: none; }
            QScrollBar::add-page:vertical, QScrollBar::sub-page:vertical { background: none; }
            """
        )

    def refresh(self):
        self._populate_list()
        data = self.store.chart_data()
        has_data = bool(data)
        self.chart_canvas.setVisible(has_data)
        self.legend.setVisible(has_data)
        self.empty_chart_label.setVisible(not has_data)
        self.legend.set_entries(legend_entries(data))
        self.chart_canvas.set_data(data, animate=has_data)

    def _populate_list(self):
        self._populating = True
        try:
            self.model.removeRows(0, self.model.rowCount())
            for item in self.store.items:
                color_item = make_item(meta=("todo", item.id, "color"))
                color_item.setData(QColor(item.color), Qt.ItemDataRole.DecorationRole)
                title_item = make_item(
                    item.title,
                    meta=("todo", item.id, "title"),
                    bold=not item.completed,
                    color=COMPLETED_TEXT_COLOR if item.completed else None,
                    strike=item.completed,
                )
                title_item.setToolTip(item.title)
                self.model.appendRow([
                    make_check_item(item.id, item.completed),
                    color_item,
                    title_item,
                    make_percentage_item(item.id, item.percentage, item.completed),
                    make_item(meta=("todo", item.id, "actions")),
                ])
        finally:
            self._populating = False
        has_items = self.model.rowCount() > 0
        self.view.setVisible(has_items)
        self.empty_list_label.setVisible(not has_items)
        self.export_btn.setEnabled(has_items)

    def _item_id_at(self, index) -> str | None:
        meta = index.data(Qt.ItemDataRole.UserRole)
        if isinstance(meta, tuple) and meta and meta[0] == "todo":
            return meta[1]
        return None

    def on_item_changed(self, item):
        if self._populating or item.column() != COL_DONE:
            return
        item_id = self._item_id_at(item.index())
        if item_id is None:
            return
        # Defer: the store rebuilds the model from inside this signal otherwise
        QTimer.singleShot(0, lambda: self._toggle(item_id))

    def _toggle(self, item_id: str):
        try:
            self.store.toggle_completion(item_id)
        except TodoValidationError as e:
            QMessageBox.warning(self, "Error", str(e))
            self.refresh()
        except KeyError:
            logger.warning("Toggle requested for unknown to-do %s", item_id)
            self.refresh()

    def _on_action(self, index, action: str):
        item_id = self._item_id_at(index)
        if item_id is None:
            return
        # Deferred: both actions rebuild the model under the delegate
        if action == ACTION_EDIT:
            item = self.store.get(item_id)
            if item is not None:
                QTimer.singleShot(0, lambda: self.edit_item(item))
        elif action == ACTION_DELETE:
            QTimer.singleShot(0, lambda: self.store.delete(item_id))

    def add_item(self):
        TodoFormDialog(self, self.store).exec()

    def edit_item(self, item: TodoItem):
        TodoFormDialog(self, self.store, editing_item=item).exec()

    def open_settings(self):
        SettingsDialog(self).exec()

    def export_items(self):
        file, _ = QFileDialog.getSaveFileName(
            self, "Export to-dos", str(Path.home() / "workstat.csv"), "CSV (*.csv)"
        )
        if not file:
            return
        try:
            export_csv(self.store.items, file)
        except Exception as e:
            logger.exception("CSV export failed")
            QMessageBox.critical(self, "Error", str(e))
            return
        QMessageBox.information(self, "Exported", f"To-dos exported to {file}")

    def closeEvent(self, event):
        self.store.unsubscribe(self.refresh)
        config.save_window_geometry(self.width(), self.height())
        super().closeEvent(event)


def main():
    config.setup_logging()
    logger.info("Starting %s %s", config.APP_NAME, config.app_version())
    app = QApplication(sys.argv)
    app.setApplicationName(config.APP_NAME)
    store = TodoStore(PreferenceStore(config.preferences_path()))
    store.load()
    w = WorkStatApp(store)
    w.show()
    sys.exit(app.exec())
