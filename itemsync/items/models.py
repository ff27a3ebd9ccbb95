"""Item domain models.

Items themselves are plain mappings of field name to value (a row as the
list returns it); these models describe the schema, the per-item status and
the values the engine passes around.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from itemsync.items.enums import FieldType

Item = dict[str, Any]
FieldErrors = dict[str, str]


class FieldDescriptor(BaseModel):
    """Static schema entry for one field."""

    model_config = ConfigDict(frozen=True)

    real_field_name: str = Field(..., description="Internal field name")
    type: FieldType = Field(default=FieldType.OTHER, description="Schema type")

    @property
    def raw_slot(self) -> str:
        """Key of the companion raw-value slot.

        Boolean raw values live under `name.value`, every other type under
        `name.`.
        """
        if self.type == FieldType.BOOLEAN:
            return f"{self.real_field_name}.value"
        return f"{self.real_field_name}."


class FieldValue(BaseModel):
    """A display value with an optional machine (raw) form."""

    model_config = ConfigDict(frozen=True)

    value: Any = None
    raw_value: Any = None

    @property
    def effective_raw(self) -> Any:
        """The raw form when present, otherwise the display value."""
        return self.raw_value if self.raw_value is not None else self.value

    @classmethod
    def coerce(cls, value: Any) -> "FieldValue":
        """Build a FieldValue from an editor value.

        Accepts a FieldValue, a mapping with `value`/`rawValue` (or
        `raw_value`) keys, or a bare value.
        """
        if isinstance(value, FieldValue):
            return value
        if isinstance(value, Mapping) and ("value" in value or "rawValue" in value):
            raw = value.get("rawValue", value.get("raw_value"))
            return cls(value=value.get("value"), raw_value=raw)
        return cls(value=value)


class ItemStatus(BaseModel):
    """Transient per-item status.

    `has_error` is derived from `fields_with_errors`. `request_error` marks a
    failed remote call (not a validation outcome) and is recoverable: the
    next successful round-trip clears the whole entry.
    """

    is_updating: bool = False
    fields_with_errors: FieldErrors = Field(default_factory=dict)
    request_error: str | None = None

    @property
    def has_error(self) -> bool:
        return bool(self.fields_with_errors)


class ItemStatusUpdate(BaseModel):
    """A status write for one item.

    Only the fields explicitly set on `status` are merged into the stored
    entry unless the store is asked to replace it.
    """

    item_key: str
    status: ItemStatus
