"""
Settings service: Browse, Read and Edit over the cached settings resource.

Edit requests flow access control -> schema check -> store -> cache -> shaping.
Reads never touch the store; they are served from the settings cache.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from ..schemas.setting import (
    AVAILABLE_THEMES_KEY,
    BLOG,
    CORE,
    TYPE_PSEUDO_KEY,
    BrowseRequest,
    EditRequest,
    ReadRequest,
    Setting,
    SettingEdit,
    SettingsResult,
)
from ..settings.access import AccessControl, PermissionChecker, is_internal
from ..settings.cache import SettingsCache
from ..settings.store import SettingsStore
from ..settings.themes import filter_packages
from ..settings.validation import PydanticSchemaChecker, SchemaChecker
from ..settings.visibility import (
    ThemeEnumerator,
    read_settings_result,
    settings_result,
    with_derived_entries,
)

logger = get_logger(__name__)

RESOURCE_NAME = "settings"


class SettingsService:
    """Orchestrates access to settings for internal and external callers."""

    def __init__(
        self,
        store: SettingsStore,
        cache: SettingsCache,
        permissions: PermissionChecker,
        *,
        schema_checker: SchemaChecker | None = None,
        available_themes: Mapping[str, Any] | None = None,
        theme_enumerator: ThemeEnumerator = filter_packages,
    ) -> None:
        self.store = store
        self.cache = cache
        self.access = AccessControl(cache, permissions)
        self.schema_checker = schema_checker or PydanticSchemaChecker()
        self.available_themes: Mapping[str, Any] = available_themes if available_themes is not None else {}
        self.theme_enumerator = theme_enumerator

    def set_available_themes(self, themes: Mapping[str, Any]) -> None:
        """Replace the installed-theme list used for ``availableThemes``."""
        self.available_themes = themes

    def _snapshot(self) -> dict[str, Setting]:
        return with_derived_entries(self.cache.get_all(), self.available_themes, self.theme_enumerator)

    async def refresh_cache(
        self,
        settings: Mapping[str, Setting] | None = None,
        options: dict[str, Any] | None = None,
    ) -> dict[str, Setting]:
        """Write ``settings`` into the cache, or repopulate it from the store when none are given."""
        if settings:
            self.cache.populate(settings)
            return self.cache.get_all()
        return await self.cache.refresh(options)

    async def browse(self, options: BrowseRequest | dict[str, Any] | None = None) -> SettingsResult | list[Setting]:
        """List settings visible to the caller.

        Without a context only ``blog`` settings are returned, as a plain list.
        """
        request = options if isinstance(options, BrowseRequest) else BrowseRequest.model_validate(options or {})
        result = settings_result(self._snapshot(), request.type)

        if request.context is None:
            return [setting for setting in result.settings if setting.type == BLOG]

        await self.access.authorize_browse(request.context)

        if not is_internal(request.context):
            result.settings = [setting for setting in result.settings if setting.type != CORE]
        return result

    async def read(
        self, options: ReadRequest | str | dict[str, Any], extra: dict[str, Any] | None = None
    ) -> SettingsResult:
        """Read one setting by key. Raises ``NotFoundError`` or ``NoPermissionError``."""
        request = ReadRequest.from_input(options, extra)

        setting = await self.access.authorize_read(request.context, request.key, self._snapshot())
        return settings_result(
            with_derived_entries({request.key: setting}, self.available_themes, self.theme_enumerator)
        )

    def _normalize_edit(self, obj: str | dict[str, Any], options: Any) -> EditRequest:
        try:
            return EditRequest.from_input(obj, options).serialized()
        except PydanticValidationError as e:
            raise ValidationError(RESOURCE_NAME, str(e)) from e

    async def edit(self, obj: str | dict[str, Any], options: Any = None) -> SettingsResult:
        """Overwrite the values of existing settings.

        Accepts ``{"settings": [{"key", "value"}, ...]}`` with options, or the
        ``(key, value)`` shorthand. ``type`` entries select the response filter
        and ``availableThemes`` entries are dropped; neither is persisted.
        """
        request = self._normalize_edit(obj, options)
        context = request.options.context

        type_filter = next((item.value for item in request.settings if item.key == TYPE_PSEUDO_KEY), None)
        edits = [item for item in request.settings if item.key not in (TYPE_PSEUDO_KEY, AVAILABLE_THEMES_KEY)]

        await self.access.authorize_edit_batch(context, [item.key for item in edits])

        checked = await self.schema_checker.check_object(
            {"settings": [item.model_dump() for item in edits]}, RESOURCE_NAME
        )
        user = request.options.acting_user
        records = await self.store.edit([SettingEdit(**item) for item in checked["settings"]], user=user)

        edited = read_settings_result(records)
        self.cache.populate(edited)
        logger.info(
            "Settings edited",
            extra={"keys": ",".join(edited), "user": str(user) if user is not None else None},
        )

        return settings_result(
            with_derived_entries(edited, self.available_themes, self.theme_enumerator),
            type_filter,
        )
