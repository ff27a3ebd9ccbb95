"""In-memory implementations of the item, status and selection stores."""

import copy
from collections.abc import Callable, Sequence

from itemsync.items.models import Item, ItemStatus, ItemStatusUpdate
from itemsync.items.store import ItemStatusStore, ItemStore, SelectionStore

STATUS_DELETE_SOURCE = "ItemStatusStore.delete"


def key_by_field(identity_field: str = "ID") -> Callable[[Item], str]:
    """Build an item-key function reading the identity field as a string."""

    def get_key(item: Item) -> str:
        return str(item[identity_field])

    return get_key


class InMemoryItemStatusStore(ItemStatusStore):
    """In-memory status store for testing and development."""

    def __init__(self) -> None:
        super().__init__()
        self._statuses: dict[str, ItemStatus] = {}

    def get_item_status(self, item_key: str) -> ItemStatus | None:
        status = self._statuses.get(item_key)
        return status.model_copy(deep=True) if status else None

    def update_items_status(
        self,
        source: str,
        updates: Sequence[ItemStatusUpdate],
        replace: bool = False,
    ) -> None:
        for update in updates:
            existing = self._statuses.get(update.item_key)
            if replace or existing is None:
                self._statuses[update.item_key] = update.status.model_copy(deep=True)
            else:
                changes = copy.deepcopy(update.status.model_dump(exclude_unset=True))
                self._statuses[update.item_key] = existing.model_copy(update=changes)
        self._notify(source, (update.item_key for update in updates))

    def delete_items_status(self, item_keys: Sequence[str]) -> None:
        removed = [key for key in item_keys if self._statuses.pop(key, None) is not None]
        self._notify(STATUS_DELETE_SOURCE, removed)

    def __len__(self) -> int:
        return len(self._statuses)


class InMemoryItemStore(ItemStore):
    """In-memory item collection keeping rows in insertion order."""

    def __init__(
        self,
        items: Sequence[Item] | None = None,
        get_key: Callable[[Item], str] | None = None,
    ) -> None:
        super().__init__()
        self._get_key = get_key or key_by_field()
        self._items: dict[str, Item] = {}
        self._publishers: list[str] = []
        for item in items or []:
            self._items[self._get_key(item)] = copy.deepcopy(item)

    @property
    def publishers(self) -> list[str]:
        """Publisher tags that added new rows, in call order."""
        return list(self._publishers)

    def get_item(self, item_key: str) -> Item | None:
        item = self._items.get(item_key)
        return copy.deepcopy(item) if item is not None else None

    def get_item_key(self, item: Item) -> str:
        return self._get_key(item)

    def all_items(self) -> list[Item]:
        return [copy.deepcopy(item) for item in self._items.values()]

    def update_items(self, source: str, items: Sequence[Item]) -> None:
        keys = []
        for item in items:
            key = self._get_key(item)
            self._items[key] = copy.deepcopy(item)
            keys.append(key)
        self._notify(source, keys)

    def add_new_items(self, publisher: str, rows: Sequence[Item]) -> None:
        self._publishers.append(publisher)
        self.update_items(publisher, rows)

    def delete_items(self, source: str, item_keys: Sequence[str]) -> None:
        removed = [key for key in item_keys if self._items.pop(key, None) is not None]
        self._notify(source, removed)

    def __contains__(self, item_key: object) -> bool:
        return item_key in self._items

    def __len__(self) -> int:
        return len(self._items)


class InMemorySelectionStore(SelectionStore):
    """In-memory selection of item keys."""

    def __init__(self, selected: Sequence[str] | None = None) -> None:
        super().__init__()
        self._selected: set[str] = set(selected or [])

    def get_selected(self) -> set[str]:
        return set(self._selected)

    def add(self, source: str, item_keys: Sequence[str]) -> None:
        added = [key for key in item_keys if key not in self._selected]
        self._selected.update(added)
        self._notify(source, added)

    def remove(self, source: str, item_keys: Sequence[str]) -> None:
        removed = [key for key in item_keys if key in self._selected]
        self._selected.difference_update(removed)
        self._notify(source, removed)
