import configparser
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import appdirs

from . import __version__, __build__

APP_NAME = "WorkStat"
FEEDBACK_EMAIL = "feedback@workstat.app"
PREFERENCES_FILENAME = "preferences.ini"
LOG_FILENAME = "workstat.log"


def _resolve_config_file() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent / "workstat.ini"
    module_dir = Path(__file__).resolve().parent
    candidate = module_dir / "workstat.ini"
    if candidate.exists():
        return candidate
    return module_dir.with_name("workstat.ini")


CONFIG_FILE = _resolve_config_file()

STYLE_DEFAULTS: dict[str, Any] = {
    "ui_font_family": "Segoe UI",
    "ui_base_font_size": 10,
    "title_font_size": 20,
    "section_font_size": 14,
    "window_width": 800,
    "window_height": 600,
    "window_min_width": 600,
    "window_min_height": 400,
    "chart_size": 240,
    "label_radius_ratio": 0.8,
    "inner_radius_ratio": 0.6,
    "label_min_percentage": 3.0,
    "animation_duration": 0.8,
    "accent_color": "#34C759",
    "remaining_color": "#E5E5EA",
    "completed_text_color": "#8E8E93",
    "panel_bg_color": "#F2F2F7",
}

_STYLE_INT_KEYS = {
    "ui_base_font_size",
    "title_font_size",
    "section_font_size",
    "window_width",
    "window_height",
    "window_min_width",
    "window_min_height",
    "chart_size",
}
_STYLE_FLOAT_KEYS = {
    "label_radius_ratio",
    "inner_radius_ratio",
    "label_min_percentage",
    "animation_duration",
}


def _load_cfg() -> configparser.ConfigParser:
    cfg = configparser.ConfigParser()
    if CONFIG_FILE.exists():
        cfg.read(CONFIG_FILE, encoding="utf-8")
    return cfg


def _save_cfg(cfg: configparser.ConfigParser) -> None:
    try:
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            cfg.write(f)
    except OSError:
        # Read-only install location; settings stay in memory for this session
        logging.getLogger(__name__).warning("Could not write config file %s", CONFIG_FILE)


def load_style_settings() -> dict[str, Any]:
    cfg = _load_cfg()
    updated = False
    if "style" not in cfg:
        cfg["style"] = {}
        updated = True
    section = cfg["style"]
    settings: dict[str, Any] = {}
    for key, default in STYLE_DEFAULTS.items():
        raw_value = section.get(key)
        if raw_value is None:
            section[key] = str(default)
            raw_value = str(default)
            updated = True
        try:
            if key in _STYLE_INT_KEYS:
                settings[key] = int(float(raw_value))
            elif key in _STYLE_FLOAT_KEYS:
                settings[key] = float(raw_value)
            else:
                settings[key] = raw_value
        except (TypeError, ValueError):
            # Fallback to default on invalid values
            settings[key] = default
            section[key] = str(default)
            updated = True
    if updated:
        _save_cfg(cfg)
    return settings


def load_window_geometry() -> tuple[int, int] | None:
    cfg = _load_cfg()
    try:
        width = cfg.getint("app", "window_width", fallback=None)
        height = cfg.getint("app", "window_height", fallback=None)
    except ValueError:
        return None
    if width and height:
        return width, height
    return None


def save_window_geometry(width: int, height: int) -> None:
    cfg = _load_cfg()
    if "app" not in cfg:
        cfg["app"] = {}
    cfg["app"]["window_width"] = str(int(width))
    cfg["app"]["window_height"] = str(int(height))
    _save_cfg(cfg)


def user_data_dir() -> Path:
    """Directory holding the preferences blob and the log file."""
    override = os.environ.get("WORKSTAT_DATA_DIR")
    if override:
        return Path(override).expanduser()
    return Path(appdirs.user_data_dir(APP_NAME))


def preferences_path() -> Path:
    return user_data_dir() / PREFERENCES_FILENAME


def log_path() -> Path:
    return user_data_dir() / LOG_FILENAME


def app_version() -> str:
    return f"{__version__} ({__build__})"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Attach a rotating file handler to the package logger.

    The log rotates at 2 MB and keeps up to 3 backup files. Calling this
    more than once does not add duplicate handlers.
    """
    logger = logging.getLogger("workstat")
    logger.setLevel(level)
    if not logger.handlers:
        path = log_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            path,
            maxBytes=2_000_000,
            backupCount=3,
            encoding="utf-8",
        )
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)
    return logger
