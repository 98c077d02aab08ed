from PyQt6.QtGui import QColor

from .config import load_style_settings

_STYLE = load_style_settings()

# Fonts
UI_FONT_FAMILY = _STYLE["ui_font_family"]
UI_BASE_FONT_SIZE = _STYLE["ui_base_font_size"]
TITLE_FONT_SIZE = _STYLE["title_font_size"]
SECTION_FONT_SIZE = _STYLE["section_font_size"]

# Window geometry
WINDOW_WIDTH = _STYLE["window_width"]
WINDOW_HEIGHT = _STYLE["window_height"]
WINDOW_MIN_WIDTH = _STYLE["window_min_width"]
WINDOW_MIN_HEIGHT = _STYLE["window_min_height"]

# Chart settings
CHART_SIZE = _STYLE["chart_size"]
LABEL_RADIUS_RATIO = _STYLE["label_radius_ratio"]
INNER_RADIUS_RATIO = _STYLE["inner_radius_ratio"]
LABEL_MIN_PERCENTAGE = _STYLE["label_min_percentage"]
ANIMATION_DURATION = _STYLE["animation_duration"]

# Colors
ACCENT_COLOR = QColor(_STYLE["accent_color"])
REMAINING_COLOR_HEX = _STYLE["remaining_color"]
COMPLETED_TEXT_COLOR = QColor(_STYLE["completed_text_color"])
PANEL_BG_COLOR = QColor(_STYLE["panel_bg_color"])
