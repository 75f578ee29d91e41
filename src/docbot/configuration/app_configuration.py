from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict
import yaml

from docbot.configuration.chat_settings import ChatSettings
from docbot.configuration.schedule_settings import ScheduleSettings
from docbot.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()


class AppConfig:
    """File-lock based accessor around the YAML-based application configuration.

    The class caches contents of ``./config/app_config.yml``, exposes dictionary-like
    access helpers, and resolves section-specific settings through
    :class:`ChatSettings` and :class:`ScheduleSettings`.
    Uses fcntl file locks for safe concurrent access across processes.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = yaml.safe_load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
                return data if isinstance(data, dict) else {}
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
        return {}

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns the raw mapping that was loaded (an empty dict on error).
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the current cached configuration mapping (do not mutate)."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def chat_settings(self) -> ChatSettings:
        """Return the ``chat`` section wrapped in a ChatSettings helper."""
        settings = self._data.get("chat", {})
        if not isinstance(settings, dict):
            settings = {}
        return ChatSettings(settings)

    @property
    def schedule_settings(self) -> ScheduleSettings:
        """Return the ``schedule`` section wrapped in a ScheduleSettings helper."""
        settings = self._data.get("schedule", {})
        if not isinstance(settings, dict):
            settings = {}
        return ScheduleSettings(settings)

    @property
    def database_path(self) -> Path:
        """Return the SQLite database path (default ``./data/app.db``)."""
        database = self._data.get("database", {})
        value = database.get("path") if isinstance(database, dict) else None
        return Path(value or "./data/app.db").resolve()


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
