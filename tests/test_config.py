import logging

import pytest

from workstat import config


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "workstat.ini"
    monkeypatch.setattr(config, "CONFIG_FILE", path)
    return path


def test_style_settings_backfill_defaults(config_file):
    settings = config.load_style_settings()
    assert settings == config.STYLE_DEFAULTS
    assert "[style]" in config_file.read_text(encoding="utf-8")


def test_invalid_style_value_falls_back(config_file):
    config_file.write_text("[style]\nchart_size = huge\nlabel_radius_ratio = 0.7\n", encoding="utf-8")
    settings = config.load_style_settings()
    assert settings["chart_size"] == config.STYLE_DEFAULTS["chart_size"]
    assert settings["label_radius_ratio"] == 0.7
    assert "chart_size = 240" in config_file.read_text(encoding="utf-8")


def test_window_geometry_round_trip(config_file):
    assert config.load_window_geometry() is None
    config.save_window_geometry(1024, 700)
    assert config.load_window_geometry() == (1024, 700)


def test_data_dir_override(tmp_path, monkeypatch):
    monkeypatch.setenv("WORKSTAT_DATA_DIR", str(tmp_path))
    assert config.preferences_path() == tmp_path / config.PREFERENCES_FILENAME
    assert config.log_path() == tmp_path / config.LOG_FILENAME


def test_app_version():
    assert config.app_version() == "1.0 (1)"


def test_setup_logging_adds_single_handler(tmp_path, monkeypatch):
    monkeypatch.setenv("WORKSTAT_DATA_DIR", str(tmp_path))
    logger = logging.getLogger("workstat")
    saved = list(logger.handlers)
    logger.handlers.clear()
    try:
        config.setup_logging()
        config.setup_logging()
        assert len(logger.handlers) == 1
        logger.info("hello")
        logger.handlers[0].flush()
        assert "hello" in (tmp_path / config.LOG_FILENAME).read_text(encoding="utf-8")
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers[:] = saved
