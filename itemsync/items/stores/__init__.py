"""Stores for items, item status and selection."""

from itemsync.items.store import ItemStatusStore, ItemStore, SelectionStore
from itemsync.items.stores.inmemory import (
    InMemoryItemStatusStore,
    InMemoryItemStore,
    InMemorySelectionStore,
    key_by_field,
)

__all__ = [
    "ItemStatusStore",
    "ItemStore",
    "SelectionStore",
    "InMemoryItemStatusStore",
    "InMemoryItemStore",
    "InMemorySelectionStore",
    "key_by_field",
]
