"""Startup wiring for the settings cache."""

from ..core.config import Settings, get_settings_instance
from ..core.logging import get_logger, setup_logging
from .cache import SettingsCache, get_settings_cache
from .store import SettingsStore
from .themes import discover_themes

logger = get_logger(__name__)


async def bootstrap_settings(
    store: SettingsStore,
    cache: SettingsCache | None = None,
    settings: Settings | None = None,
) -> SettingsCache:
    """Attach ``store`` to the cache and, unless disabled, populate it eagerly."""
    setup_logging()
    settings = settings or get_settings_instance()
    cache = cache or get_settings_cache()
    cache.init(store)

    if settings.settings_preload:
        snapshot = await cache.refresh()
        logger.info(f"Settings cache populated with {len(snapshot)} settings")
    else:
        logger.info("Settings preload disabled; cache will be populated on first refresh")
    return cache


def load_available_themes(settings: Settings | None = None) -> dict:
    """Discover installed themes from the configured themes directory."""
    settings = settings or get_settings_instance()
    return discover_themes(settings.themes_dir)
