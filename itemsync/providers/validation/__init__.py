"""Remote validation client."""

from itemsync.providers.validation.base import (
    FieldOutcome,
    FieldUpdate,
    ItemUpdateRequest,
    MutationResult,
    ValidationClient,
    ValidationRequestError,
)
from itemsync.providers.validation.mock import MockValidationClient

__all__ = [
    "FieldOutcome",
    "FieldUpdate",
    "ItemUpdateRequest",
    "MutationResult",
    "ValidationClient",
    "ValidationRequestError",
    "MockValidationClient",
]
