"""
Per-key access control for settings.

Policy for every key, in order:

1. a key missing from the cache is a ``NotFoundError``;
2. ``core`` settings are refused to any caller that is not internal;
3. ``blog`` settings are readable without a key-level check;
4. everything else is decided by the injected ``PermissionChecker``. A denial
   or an exception from the checker becomes ``NoPermissionError``.
"""

from collections.abc import Iterable, Mapping
from typing import Protocol

from ..core.exceptions import NoPermissionError, NotFoundError
from ..core.logging import get_logger
from ..schemas.setting import BLOG, CORE, Context, Setting
from .cache import SettingsCache

logger = get_logger(__name__)

CORE_FROM_EXTERNAL = "errors.api.settings.accessCoreSettingFromExtReq"
NO_PERMISSION_TO_BROWSE = "errors.api.settings.noPermissionToBrowseSettings"
NO_PERMISSION_TO_READ = "errors.api.settings.noPermissionToReadSettings"
NO_PERMISSION_TO_EDIT = "errors.api.settings.noPermissionToEditSettings"


class PermissionChecker(Protocol):
    """Decides whether an actor may perform an action on the settings resource."""

    async def can_browse(self, actor: Context | None) -> bool: ...

    async def can_read(self, actor: Context | None, key: str) -> bool: ...

    async def can_edit(self, actor: Context | None, key: str) -> bool: ...


def is_internal(context: Context | None) -> bool:
    return bool(context and context.internal)


class AccessControl:
    """Gate for browse, read and edit requests against cached settings."""

    def __init__(self, cache: SettingsCache, permissions: PermissionChecker):
        self.cache = cache
        self.permissions = permissions

    def _lookup(self, key: str, snapshot: Mapping[str, Setting] | None = None) -> Setting:
        setting = self.cache.get(key) if snapshot is None else snapshot.get(key)
        if setting is None:
            raise NotFoundError(key)
        return setting

    async def _ask(self, action: str, message_key: str, context: Context | None, *args: str) -> None:
        check = getattr(self.permissions, f"can_{action}")
        try:
            allowed = await check(context, *args)
        except Exception as e:
            logger.warning(
                f"Permission check '{action}' failed for settings {list(args)}: {e}",
                extra={"action": action},
            )
            raise NoPermissionError(message_key) from None
        if not allowed:
            logger.warning(f"Permission '{action}' denied for settings {list(args)}", extra={"action": action})
            raise NoPermissionError(message_key)

    def check_core(self, context: Context | None, setting: Setting) -> None:
        if setting.type == CORE and not is_internal(context):
            raise NoPermissionError(CORE_FROM_EXTERNAL, details={"key": setting.key})

    async def authorize_browse(self, context: Context | None) -> None:
        await self._ask("browse", NO_PERMISSION_TO_BROWSE, context)

    async def check_read(self, context: Context | None, setting: Setting) -> None:
        """Apply the read policy to an already resolved setting."""
        self.check_core(context, setting)
        if setting.type == BLOG:
            return
        await self._ask("read", NO_PERMISSION_TO_READ, context, setting.key)

    async def authorize_read(
        self, context: Context | None, key: str, snapshot: Mapping[str, Setting] | None = None
    ) -> Setting:
        """Resolve ``key`` in ``snapshot`` (the cache when omitted) and apply the read policy."""
        setting = self._lookup(key, snapshot)
        await self.check_read(context, setting)
        return setting

    async def authorize_edit_batch(self, context: Context | None, keys: Iterable[str]) -> list[Setting]:
        """Check every key; any failure aborts the whole batch before a write happens."""
        keys = list(keys)
        settings = [self._lookup(key) for key in keys]
        for setting in settings:
            self.check_core(context, setting)
        for setting in settings:
            await self._ask("edit", NO_PERMISSION_TO_EDIT, context, setting.key)
        return settings
