"""Enums for the item domain."""

from enum import Enum


class FieldType(str, Enum):
    """Field schema type; decides how a value is encoded for validation."""

    USER = "user"
    THUMBNAIL = "thumbnail"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    OTHER = "other"


class DeletionType(str, Enum):
    """How deleted items are disposed of."""

    RECYCLE = "recycle"
    PERMANENT = "permanent"
