"""
Shaping of settings collections for responses.

Filters settings by their ``type`` tag, builds the canonical key -> setting map
from store records and adds the derived ``availableThemes`` entry.
"""

import json
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ..schemas.setting import (
    ACTIVE_THEME_KEY,
    AVAILABLE_THEMES_KEY,
    THEME,
    ResultFilters,
    ResultMeta,
    Setting,
    SettingsResult,
)
from .themes import filter_packages

ThemeEnumerator = Callable[[Mapping[str, Any], Any], list[dict[str, Any]]]


def settings_filter(settings: Mapping[str, Setting], type_filter: str | None = None) -> dict[str, Setting]:
    """Keep settings whose type is one of the comma-separated ``type_filter`` values."""
    if not type_filter:
        return dict(settings)
    allowed = type_filter.split(",")
    return {key: setting for key, setting in settings.items() if setting.type in allowed}


def _to_setting(record: Any) -> Setting:
    if isinstance(record, Setting):
        return record
    return Setting.model_validate(record)


def with_derived_entries(
    settings: Mapping[str, Setting],
    available_themes: Mapping[str, Any] | None,
    theme_enumerator: ThemeEnumerator = filter_packages,
) -> dict[str, Setting]:
    """Return ``settings`` plus a freshly computed ``availableThemes`` entry when applicable."""
    result = dict(settings)
    active_theme = result.get(ACTIVE_THEME_KEY)
    if active_theme is not None and available_themes is not None:
        packages = theme_enumerator(available_themes, active_theme.value)
        result[AVAILABLE_THEMES_KEY] = Setting(
            key=AVAILABLE_THEMES_KEY,
            value=json.dumps(packages),
            type=THEME,
        )
    return result


def read_settings_result(
    records: Iterable[Any],
    available_themes: Mapping[str, Any] | None = None,
    theme_enumerator: ThemeEnumerator = filter_packages,
) -> dict[str, Setting]:
    """Build the canonical settings map from store records.

    The first record seen for a key wins. The derived ``availableThemes``
    entry is added only when ``available_themes`` is given.
    """
    settings: dict[str, Setting] = {}
    for record in records:
        setting = _to_setting(record)
        if setting.key not in settings:
            settings[setting.key] = setting
    return with_derived_entries(settings, available_themes, theme_enumerator)


def settings_result(settings: Mapping[str, Setting], type_filter: str | None = None) -> SettingsResult:
    """Shape ``settings`` into ``{settings: [...], meta: {filters?: {type}}}``."""
    filtered = list(settings_filter(settings, type_filter).values())
    meta = ResultMeta(filters=ResultFilters(type=type_filter) if type_filter else None)
    return SettingsResult(settings=filtered, meta=meta)
