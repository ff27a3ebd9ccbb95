"""Store interfaces for items, item status and selection.

Store calls are synchronous: they run to completion between the engine's
suspension points. Every mutating call carries a `source` tag and notifies
subscribers once per call, however many keys it touches.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence

from itemsync.items.models import Item, ItemStatus, ItemStatusUpdate

ChangeListener = Callable[[str, list[str]], None]


class ObservableStore:
    """Change-notification contract shared by the stores.

    Listeners receive the source tag and the keys affected by one call.
    """

    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, source: str, keys: Iterable[str]) -> None:
        keys = list(keys)
        if not keys:
            return
        for listener in list(self._listeners):
            listener(source, keys)


class ItemStatusStore(ObservableStore, ABC):
    """Per-item transient status (updating flag and field errors)."""

    @abstractmethod
    def get_item_status(self, item_key: str) -> ItemStatus | None:
        """Get a copy of an item's status, or None when absent."""
        pass

    @abstractmethod
    def update_items_status(
        self,
        source: str,
        updates: Sequence[ItemStatusUpdate],
        replace: bool = False,
    ) -> None:
        """Merge (or with `replace`, overwrite) status entries."""
        pass

    @abstractmethod
    def delete_items_status(self, item_keys: Sequence[str]) -> None:
        """Remove status entries."""
        pass


class ItemStore(ObservableStore, ABC):
    """Authoritative last-known-good item values keyed by item key."""

    @abstractmethod
    def get_item(self, item_key: str) -> Item | None:
        """Get a copy of an item, or None when absent."""
        pass

    @abstractmethod
    def get_item_key(self, item: Item) -> str:
        """Derive the stable key of an item."""
        pass

    @abstractmethod
    def update_items(self, source: str, items: Sequence[Item]) -> None:
        """Write items back, keyed by their item key."""
        pass

    @abstractmethod
    def add_new_items(self, publisher: str, rows: Sequence[Item]) -> None:
        """Append newly created rows."""
        pass

    @abstractmethod
    def delete_items(self, source: str, item_keys: Sequence[str]) -> None:
        """Remove items."""
        pass


class SelectionStore(ObservableStore, ABC):
    """The set of currently selected item keys."""

    @abstractmethod
    def get_selected(self) -> set[str]:
        """Get a copy of the selected keys."""
        pass

    @abstractmethod
    def add(self, source: str, item_keys: Sequence[str]) -> None:
        """Select items."""
        pass

    @abstractmethod
    def remove(self, source: str, item_keys: Sequence[str]) -> None:
        """Deselect items."""
        pass
