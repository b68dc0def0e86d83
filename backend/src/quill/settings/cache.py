"""
In-memory settings cache.

The cache is the only read path for settings. The store is consulted only to
(re)populate it, either at startup or after an out-of-band write.
"""

import json
import time
from collections.abc import Mapping
from typing import Any

from ..core.exceptions import CacheRefreshError
from ..core.logging import get_logger
from ..schemas.setting import Setting
from .store import SettingsStore
from .visibility import read_settings_result

logger = get_logger(__name__)


class SettingsCache:
    """Process-wide mirror of the settings store, keyed by setting key."""

    def __init__(self, store: SettingsStore | None = None):
        self._store = store
        self._settings: dict[str, Setting] = {}
        self._last_refresh: float | None = None

    def init(self, store: SettingsStore) -> None:
        """Attach the store used by ``refresh``."""
        self._store = store

    def get(self, key: str, resolve: bool = False) -> Setting | Any | None:
        """Return the cached setting for ``key``.

        With ``resolve=True`` the JSON-decoded value is returned instead of the
        record; values that are not JSON come back as the raw string.
        """
        setting = self._settings.get(key)
        if setting is None:
            logger.debug(f"Settings cache miss: {key}")
            return None
        if not resolve:
            return setting.model_copy(deep=True)
        if setting.value is None:
            return None
        try:
            return json.loads(setting.value)
        except ValueError:
            return setting.value

    def set(self, key: str, setting: Setting) -> None:
        """Replace the entry for ``key`` wholesale."""
        self._settings[key] = setting.model_copy(deep=True)

    def get_all(self) -> dict[str, Setting]:
        """Snapshot of every cached setting; entries are copies, not live cache objects."""
        return {key: setting.model_copy(deep=True) for key, setting in self._settings.items()}

    async def refresh(self, options: dict[str, Any] | None = None) -> dict[str, Setting]:
        """Repopulate every key from the store and return the snapshot."""
        if self._store is None:
            raise CacheRefreshError("settings cache has no store; call init(store) first")

        records = await self._store.find_all(options or {})
        self.populate(read_settings_result(records))
        self._last_refresh = time.time()
        logger.debug("Settings cache refreshed", extra={"settings_count": len(self._settings)})
        return self.get_all()

    def populate(self, settings: Mapping[str, Setting]) -> None:
        for key, setting in settings.items():
            self.set(key, setting)

    def clear(self) -> None:
        self._settings.clear()
        self._last_refresh = None
        logger.info("Settings cache cleared")

    def get_stats(self) -> dict[str, Any]:
        return {
            "settings": len(self._settings),
            "last_refresh": self._last_refresh,
        }


# Default instance for application wiring; services receive their cache explicitly
settings_cache = SettingsCache()


def get_settings_cache() -> SettingsCache:
    """Get the process-wide settings cache instance."""
    return settings_cache
