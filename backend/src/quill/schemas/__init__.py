"""Pydantic schemas for the Quill backend."""

from .setting import (
    BrowseRequest,
    Context,
    EditOptions,
    EditRequest,
    ReadRequest,
    ResultFilters,
    ResultMeta,
    Setting,
    SettingEdit,
    SettingsResult,
)

__all__ = [
    "BrowseRequest",
    "Context",
    "EditOptions",
    "EditRequest",
    "ReadRequest",
    "ResultFilters",
    "ResultMeta",
    "Setting",
    "SettingEdit",
    "SettingsResult",
]
