"""List items: schema descriptors, status model and stores."""

from itemsync.items.enums import DeletionType, FieldType
from itemsync.items.models import (
    FieldDescriptor,
    FieldErrors,
    FieldValue,
    Item,
    ItemStatus,
    ItemStatusUpdate,
)

__all__ = [
    # Enums
    "DeletionType",
    "FieldType",
    # Models
    "FieldDescriptor",
    "FieldErrors",
    "FieldValue",
    "Item",
    "ItemStatus",
    "ItemStatusUpdate",
]
