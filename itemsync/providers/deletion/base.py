"""Deletion client interface and wire models."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from itemsync.exceptions import ItemSyncError
from itemsync.items.enums import DeletionType


class DeleteItem(BaseModel):
    """An item to delete: its key plus the row it was read from."""

    key: str
    properties: dict[str, Any] = Field(default_factory=dict)


class DeleteContext(BaseModel):
    """A delete request for a set of items."""

    items: list[DeleteItem] = Field(default_factory=list)
    deletion_type: DeletionType = DeletionType.RECYCLE
    list_id: str = ""
    parent_key: str = ""


class DeleteItemReport(BaseModel):
    """Per-item outcome in a failed delete response."""

    key: str
    error: str | None = None


class DeleteFailureData(BaseModel):
    """Structured body of a failed delete."""

    items: list[DeleteItemReport] = Field(default_factory=list)


class DeletionRequestError(ItemSyncError):
    """Raised when a delete call fails.

    `data` enumerates per-item results when the service reported them; items
    without an error were deleted despite the overall failure.
    """

    def __init__(self, message: str, data: DeleteFailureData | None = None) -> None:
        super().__init__(message)
        self.data = data

    @property
    def deleted_keys(self) -> list[str]:
        if self.data is None:
            return []
        return [report.key for report in self.data.items if not report.error]


class DeletionClient(ABC):
    """Remote deletion of list items."""

    @abstractmethod
    async def delete_items(self, context: DeleteContext) -> list[str]:
        """Delete the items in `context`; returns the deleted keys.

        Raises:
            DeletionRequestError: If any item could not be deleted
        """
        pass
