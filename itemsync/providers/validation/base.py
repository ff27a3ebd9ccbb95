"""Validation client interface and wire models.

The remote validator accepts field updates for one item or a batch of items
and answers, per item, with the resulting row and a per-field outcome.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from itemsync.exceptions import ItemSyncError


class FieldUpdate(BaseModel):
    """One entry of an outbound validation payload."""

    model_config = ConfigDict(populate_by_name=True)

    field_name: str = Field(..., alias="FieldName")
    field_value: Any = Field(default=None, alias="FieldValue")
    has_exception: bool = Field(default=False, alias="HasException")
    error_message: str = Field(default="", alias="ErrorMessage")


class FieldOutcome(BaseModel):
    """Per-field verdict returned by the validator."""

    model_config = ConfigDict(populate_by_name=True)

    field_name: str = Field(..., alias="FieldName")
    field_value: Any = Field(default=None, alias="FieldValue")
    has_exception: bool = Field(default=False, alias="HasException")
    error_message: str = Field(default="", alias="ErrorMessage")


class MutationResult(BaseModel):
    """Validator response for one item."""

    model_config = ConfigDict(populate_by_name=True)

    list_row: dict[str, Any] = Field(default_factory=dict, alias="listRow")
    list_form_values: list[FieldOutcome] = Field(
        default_factory=list, alias="listFormValues"
    )

    @property
    def has_exception(self) -> bool:
        return any(outcome.has_exception for outcome in self.list_form_values)


class ItemUpdateRequest(BaseModel):
    """One item's entry in a batch validation call."""

    item_id: Any = Field(..., description="Identity of the item")
    form_values: list[FieldUpdate] = Field(default_factory=list)
    is_new_document: bool = False
    check_in_comment: str | None = None


class ValidationRequestError(ItemSyncError):
    """Raised when a validation call itself fails (network or server error)."""

    def __init__(self, message: str, item_keys: Sequence[str] | None = None) -> None:
        super().__init__(message)
        self.item_keys = list(item_keys or [])


class ValidationClient(ABC):
    """Remote validation of item updates and creates."""

    @abstractmethod
    async def validate_update(
        self,
        container_url: str,
        item_id: Any,
        field_updates: Sequence[FieldUpdate],
        is_new_document: bool = False,
        check_in_comment: str | None = None,
    ) -> MutationResult:
        """Validate and apply field updates to an existing item."""
        pass

    @abstractmethod
    async def validate_create(
        self,
        container_url: str,
        item_id: Any,
        field_updates: Sequence[FieldUpdate],
        is_new_document: bool = False,
        check_in_comment: str | None = None,
    ) -> MutationResult:
        """Validate field values and create a new item."""
        pass

    @abstractmethod
    async def validate_update_batch(
        self,
        container_url: str,
        items: Sequence[ItemUpdateRequest],
    ) -> list[MutationResult]:
        """Validate updates for several items in one call."""
        pass
