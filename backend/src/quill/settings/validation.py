"""Schema checking of edit payloads before they reach the store."""

from typing import Any, Protocol

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError


class SchemaChecker(Protocol):
    async def check_object(self, payload: dict[str, Any], resource_name: str) -> dict[str, Any]:
        """Return the validated payload or raise ``ValidationError``."""
        ...


class SettingUpdate(BaseModel):
    key: str = Field(min_length=1, max_length=150)
    value: str | None = None

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        if v != v.strip():
            raise ValueError("Setting key must not have leading or trailing whitespace")
        return v


class SettingsUpdatePayload(BaseModel):
    settings: list[SettingUpdate]


class PydanticSchemaChecker:
    """Validates payloads against the pydantic model registered for a resource."""

    schemas: dict[str, type[BaseModel]] = {"settings": SettingsUpdatePayload}

    async def check_object(self, payload: dict[str, Any], resource_name: str) -> dict[str, Any]:
        schema = self.schemas.get(resource_name)
        if schema is None:
            raise ValidationError(resource_name, f"no schema registered for '{resource_name}'")
        try:
            return schema.model_validate(payload).model_dump()
        except PydanticValidationError as e:
            raise ValidationError(resource_name, str(e)) from e
