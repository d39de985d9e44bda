"""JSON-backed user settings."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from dirsize.core.engine import PROGRESS_INTERVAL
from dirsize.utils import xdg_config_home

log = logging.getLogger(__name__)

_SETTINGS_DIR = "dirsize"
_SETTINGS_FILE = "settings.json"


class Settings:
    """User defaults read from a JSON file.

    Uses dot-notation keys for nested access:
        settings.get("scan.max_workers")  # reads data["scan"]["max_workers"]

    Example file::

        {"scan": {"include_hidden": false, "max_workers": 4, "progress_interval": 0.25}}
    """

    _instance: Settings | None = None

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or (xdg_config_home() / _SETTINGS_DIR / _SETTINGS_FILE)
        self._data: dict[str, Any] = {}
        self._load()

    @classmethod
    def instance(cls) -> Settings:
        """Return the singleton settings instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    @property
    def include_hidden(self) -> bool:
        value = self.get("scan.include_hidden", False)
        if not isinstance(value, bool):
            log.warning("Ignoring scan.include_hidden=%r in %s: expected true or false", value, self._path)
            return False
        return value

    @property
    def max_workers(self) -> int | None:
        """Configured worker pool size, or None to use the engine default."""
        value = self.get("scan.max_workers")
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            log.warning("Ignoring scan.max_workers=%r in %s: expected a positive integer", value, self._path)
            return None
        return value

    @property
    def progress_interval(self) -> float:
        value = self.get("scan.progress_interval", PROGRESS_INTERVAL)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            log.warning("Ignoring scan.progress_interval=%r in %s: expected seconds >= 0", value, self._path)
            return PROGRESS_INTERVAL
        return float(value)

    def _load(self) -> None:
        """Load settings from disk, gracefully handling errors."""
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            return
        if not isinstance(data, dict):
            log.warning("Could not load settings from %s: top level is not an object", self._path)
            return
        self._data = data
