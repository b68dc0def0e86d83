"""
Settings core: cache, visibility shaping, access control and persistence.
"""

from .access import AccessControl, PermissionChecker
from .cache import SettingsCache, get_settings_cache
from .store import SettingsStore, SqlAlchemySettingsStore
from .visibility import read_settings_result, settings_filter, settings_result

__all__ = [
    "AccessControl",
    "PermissionChecker",
    "SettingsCache",
    "SettingsStore",
    "SqlAlchemySettingsStore",
    "get_settings_cache",
    "read_settings_result",
    "settings_filter",
    "settings_result",
]
