"""Remote deletion client."""

from itemsync.providers.deletion.base import (
    DeleteContext,
    DeleteFailureData,
    DeleteItem,
    DeleteItemReport,
    DeletionClient,
    DeletionRequestError,
)
from itemsync.providers.deletion.mock import MockDeletionClient

__all__ = [
    "DeleteContext",
    "DeleteFailureData",
    "DeleteItem",
    "DeleteItemReport",
    "DeletionClient",
    "DeletionRequestError",
    "MockDeletionClient",
]
