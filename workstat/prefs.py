import configparser
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SECTION = "preferences"


class PreferenceStore:
    """Flat key-value store kept in a single INI file.

    Values are plain strings. Every write rewrites the whole file.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load_cfg(self) -> configparser.ConfigParser:
        # Raw values: stored blobs may contain '%'
        cfg = configparser.ConfigParser(interpolation=None)
        if not self.path.exists():
            return cfg
        try:
            cfg.read(self.path, encoding="utf-8")
        except (configparser.Error, UnicodeDecodeError) as exc:
            # Damaged file reads as empty; the next write replaces it
            logger.warning("Ignoring unreadable preference file %s (%s)", self.path, exc)
            return configparser.ConfigParser(interpolation=None)
        return cfg

    def _save_cfg(self, cfg: configparser.ConfigParser) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            cfg.write(f)
        tmp_path.replace(self.path)

    def get(self, key: str) -> str | None:
        cfg = self._load_cfg()
        return cfg.get(SECTION, key, fallback=None)

    def set(self, key: str, value: str) -> None:
        cfg = self._load_cfg()
        if SECTION not in cfg:
            cfg[SECTION] = {}
        cfg[SECTION][key] = str(value)
        self._save_cfg(cfg)
        logger.debug("Stored preference %s (%d chars)", key, len(str(value)))

