"""Pydantic schemas for settings records, request shapes and results."""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CORE = "core"
BLOG = "blog"
THEME = "theme"

# Pseudo-settings that may appear in edit payloads but are never persisted
TYPE_PSEUDO_KEY = "type"
AVAILABLE_THEMES_KEY = "availableThemes"
ACTIVE_THEME_KEY = "activeTheme"


class Setting(BaseModel):
    """A named, typed, string-valued configuration record."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    value: str | None = None
    type: str
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None


class Context(BaseModel):
    """Who is calling. ``internal`` marks trusted in-process callers."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    internal: bool = False
    identity: Any = None


class SettingEdit(BaseModel):
    key: str
    value: Any = None


class BrowseRequest(BaseModel):
    context: Context | None = None
    type: str | None = None


class ReadRequest(BaseModel):
    key: str
    context: Context | None = None

    @classmethod
    def from_input(
        cls, options: "str | dict[str, Any] | ReadRequest", extra: dict[str, Any] | None = None
    ) -> "ReadRequest":
        """Resolve the ``read("key")``, ``read("key", {context})`` and ``read({key, context})`` forms."""
        if isinstance(options, cls):
            return options
        if isinstance(options, str):
            return cls.model_validate({**(extra or {}), "key": options})
        return cls.model_validate(options)


class EditOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    context: Context | None = None
    user: Any = None

    @property
    def acting_user(self) -> Any:
        if self.user is not None:
            return self.user
        return self.context.identity if self.context else None


class EditRequest(BaseModel):
    """Canonical edit request: a list of key/value pairs plus caller options."""

    settings: list[SettingEdit] = Field(default_factory=list)
    options: EditOptions = Field(default_factory=EditOptions)

    @classmethod
    def from_input(cls, obj: "str | dict[str, Any]", options: Any = None) -> "EditRequest":
        """Resolve ``edit({settings: [...]}, options)`` and ``edit(key, value)`` forms."""
        if isinstance(obj, str):
            return cls(settings=[SettingEdit(key=obj, value=options)])
        if isinstance(options, EditOptions):
            edit_options = options
        else:
            edit_options = EditOptions.model_validate(options or {})
        return cls(settings=obj.get("settings") or [], options=edit_options)

    def serialized(self) -> "EditRequest":
        """Copy with every non-string value JSON-serialized."""
        return self.model_copy(
            update={
                "settings": [
                    item if isinstance(item.value, str) else SettingEdit(key=item.key, value=json.dumps(item.value))
                    for item in self.settings
                ]
            }
        )


class ResultFilters(BaseModel):
    type: str


class ResultMeta(BaseModel):
    filters: ResultFilters | None = None


class SettingsResult(BaseModel):
    """Shaped response for browse/read/edit. ``meta.filters`` is set iff a type filter was requested."""

    settings: list[Setting] = Field(default_factory=list)
    meta: ResultMeta = Field(default_factory=ResultMeta)

    def keys(self) -> list[str]:
        return [setting.key for setting in self.settings]
