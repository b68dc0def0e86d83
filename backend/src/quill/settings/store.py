"""
Persistence for settings.

``SettingsStore`` is the interface the settings core consumes: a bulk fetch and
a bulk value update. ``SqlAlchemySettingsStore`` implements it on the
``settings`` table.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, SettingsStoreError
from ..core.logging import get_logger
from ..models.setting import Setting as SettingRecord
from ..schemas.setting import SettingEdit

logger = get_logger(__name__)


@runtime_checkable
class SettingsStore(Protocol):
    """Durable key/value records with a ``type`` tag.

    Records returned by either method expose ``key``, ``value`` and ``type``
    as attributes or mapping items.
    """

    async def find_all(self, options: dict[str, Any] | None = None) -> Sequence[Any]:
        """Return every stored setting record."""
        ...

    async def edit(self, settings: Iterable[SettingEdit], *, user: Any = None) -> Sequence[Any]:
        """Overwrite the values of existing keys and return the written records."""
        ...


class SqlAlchemySettingsStore:
    """Settings store backed by the ``settings`` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_all(self, options: dict[str, Any] | None = None) -> list[SettingRecord]:
        options = options or {}
        stmt = select(SettingRecord).order_by(SettingRecord.key)
        if options.get("type"):
            stmt = stmt.where(SettingRecord.type.in_(options["type"].split(",")))
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load settings: {e}")
            raise SettingsStoreError(f"load: {e}") from e
        return list(result.scalars().all())

    async def edit(self, settings: Iterable[SettingEdit], *, user: Any = None) -> list[SettingRecord]:
        """Update values of existing rows in one transaction.

        Unknown keys raise ``NotFoundError``; this store never creates keys.
        """
        items = list(settings)
        keys = [item.key for item in items]
        try:
            result = await self.db.execute(select(SettingRecord).where(SettingRecord.key.in_(keys)))
            rows = {row.key: row for row in result.scalars().all()}

            missing = [key for key in keys if key not in rows]
            if missing:
                raise NotFoundError(missing[0])

            now = datetime.now(timezone.utc)
            edited = []
            for item in items:
                row = rows[item.key]
                row.value = item.value
                row.updated_at = now
                if user is not None:
                    row.updated_by = str(user)
                edited.append(row)

            await self.db.commit()
        except NotFoundError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to save settings {keys}: {e}")
            raise SettingsStoreError(f"save: {e}") from e

        for row in edited:
            await self.db.refresh(row)
        return edited
