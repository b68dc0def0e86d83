"""Custom exceptions for the Quill settings backend.

Every error carries the catalog key of its message in ``details["message_key"]``
so callers can re-render it in another locale.
"""

from typing import Any

from .i18n import t


class QuillException(Exception):
    """Base exception class for the Quill backend."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    @property
    def message_key(self) -> str | None:
        return self.details.get("message_key")


class NotFoundError(QuillException):
    """Raised when a requested setting is not present."""

    def __init__(self, key: str, details: dict[str, Any] | None = None):
        message_key = "errors.api.settings.problemFindingSetting"
        super().__init__(
            message=t(message_key, key=key),
            error_code="NOT_FOUND",
            status_code=404,
            details={"message_key": message_key, "key": key, **(details or {})},
        )


class NoPermissionError(QuillException):
    """Raised when a caller is not allowed to access a setting."""

    def __init__(self, message_key: str, details: dict[str, Any] | None = None, **params: Any):
        super().__init__(
            message=t(message_key, **params),
            error_code="NO_PERMISSION",
            status_code=403,
            details={"message_key": message_key, **(details or {})},
        )


class ValidationError(QuillException):
    """Raised when a payload fails schema validation."""

    def __init__(self, resource: str, reason: str, details: dict[str, Any] | None = None):
        message_key = "errors.api.settings.invalidSettingsPayload"
        super().__init__(
            message=t(message_key, resource=resource, reason=reason),
            error_code="VALIDATION_ERROR",
            status_code=400,
            details={"message_key": message_key, "resource": resource, "reason": reason, **(details or {})},
        )


class SettingsStoreError(QuillException):
    """Raised when the persistence layer fails to load or save settings."""

    def __init__(self, reason: str, details: dict[str, Any] | None = None):
        message_key = "errors.api.settings.problemSavingSettings"
        super().__init__(
            message=t(message_key, reason=reason),
            error_code="SETTINGS_STORE_ERROR",
            status_code=500,
            details={"message_key": message_key, "reason": reason, **(details or {})},
        )


class CacheRefreshError(QuillException):
    """Raised when the settings cache cannot be populated."""

    def __init__(self, reason: str, details: dict[str, Any] | None = None):
        message_key = "errors.api.settings.problemLoadingSettings"
        super().__init__(
            message=t(message_key, reason=reason),
            error_code="SETTINGS_CACHE_ERROR",
            status_code=500,
            details={"message_key": message_key, "reason": reason, **(details or {})},
        )
