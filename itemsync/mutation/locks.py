"""Per-item-key request serialization."""

import asyncio
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager


class KeyedLocks:
    """Serializes work per item key.

    A request holding an item's key runs its decision, remote call and
    reconciliation before the next request on that key starts, so a stale
    response cannot overwrite a newer edit. Multi-key holders acquire keys
    in sorted order. With `enabled=False` nothing is serialized and
    responses reconcile in arrival order (last write wins).
    """

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = enabled
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    def is_held(self, item_key: str) -> bool:
        lock = self._locks.get(item_key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, item_keys: Iterable[str]) -> AsyncIterator[None]:
        if not self._enabled:
            yield
            return

        keys = sorted(set(item_keys))
        for key in keys:
            self._holders[key] = self._holders.get(key, 0) + 1
            self._locks.setdefault(key, asyncio.Lock())

        acquired: list[str] = []
        try:
            for key in keys:
                await self._locks[key].acquire()
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._locks[key].release()
            for key in keys:
                self._holders[key] -= 1
                if self._holders[key] == 0:
                    del self._holders[key]
                    del self._locks[key]
