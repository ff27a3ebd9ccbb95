"""Mock deletion client for testing."""

from typing import Any

from itemsync.providers.deletion.base import (
    DeleteContext,
    DeleteFailureData,
    DeleteItemReport,
    DeletionClient,
    DeletionRequestError,
)


class MockDeletionClient(DeletionClient):
    """Deletion client that fails for configured keys.

    Keys in `failing_keys` are reported with their error message; when any
    key fails the call raises a DeletionRequestError carrying the per-item
    report, like the recycle bin service does.
    """

    def __init__(self, failing_keys: dict[str, str] | None = None) -> None:
        self._failing_keys = dict(failing_keys or {})
        self._error: Exception | None = None
        self._call_history: list[dict[str, Any]] = []

    @property
    def call_history(self) -> list[dict[str, Any]]:
        return self._call_history

    def fail_key(self, key: str, message: str = "Item could not be deleted") -> None:
        self._failing_keys[key] = message

    def fail_with(self, error: Exception) -> None:
        """Raise `error` from the next call instead of a per-item report."""
        self._error = error

    async def delete_items(self, context: DeleteContext) -> list[str]:
        self._call_history.append({"operation": "delete_items", "context": context})

        if self._error is not None:
            error, self._error = self._error, None
            raise error

        reports = [
            DeleteItemReport(key=item.key, error=self._failing_keys.get(item.key))
            for item in context.items
        ]
        if any(report.error for report in reports):
            raise DeletionRequestError(
                "Some items could not be deleted",
                data=DeleteFailureData(items=reports),
            )
        return [report.key for report in reports]
