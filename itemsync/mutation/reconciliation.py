"""Folding validation outcomes back into the item and status stores."""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, Field

from itemsync.items.models import (
    FieldDescriptor,
    FieldErrors,
    FieldValue,
    Item,
    ItemStatus,
    ItemStatusUpdate,
)
from itemsync.items.store import ItemStatusStore, ItemStore
from itemsync.mutation.publishers import LOCAL_UPDATE_SOURCE, RECONCILE_SOURCE
from itemsync.observability.logging import get_logger
from itemsync.observability.metrics import LOCAL_UPDATES, RECONCILED_ITEMS
from itemsync.providers.validation.base import FieldOutcome

logger = get_logger(__name__)


class ReconcileEntry(BaseModel):
    """One item's validation outcome to fold into the stores.

    `value_before_save` and `field` are set when a single targeted field was
    edited: that field's value comes from what the user committed, not from
    the echoed row. `edited_values` holds item slots a batch edit submitted;
    they are kept when the item still has errors.
    """

    item_key: str
    updated_fields: list[FieldOutcome] = Field(default_factory=list)
    list_row: dict[str, Any] = Field(default_factory=dict)
    value_before_save: FieldValue | None = None
    field: FieldDescriptor | None = None
    edited_values: dict[str, Any] = Field(default_factory=dict)


class ReconcileSummary(BaseModel):
    """Item keys by reconciliation outcome."""

    clean_keys: list[str] = Field(default_factory=list)
    error_keys: list[str] = Field(default_factory=list)
    missing_keys: list[str] = Field(default_factory=list)


class FieldEdit(BaseModel):
    """A new value for one field."""

    field: FieldDescriptor
    value: FieldValue


class LocalEdit(BaseModel):
    """Edits to one item applied without a remote round-trip."""

    item: dict[str, Any]
    edits: list[FieldEdit] = Field(default_factory=list)


class Reconciler:
    """Applies validation results and local-only edits to the stores.

    Store state is read when a result is applied, not when its request was
    sent, and each pass ends with one status update, one status delete and
    one item update.
    """

    def __init__(
        self,
        item_store: ItemStore,
        status_store: ItemStatusStore,
        metrics_enabled: bool = True,
    ) -> None:
        self._item_store = item_store
        self._status_store = status_store
        self._metrics_enabled = metrics_enabled

    def reconcile(
        self,
        entries: Sequence[ReconcileEntry],
        source: str = RECONCILE_SOURCE,
    ) -> ReconcileSummary:
        """Fold validation outcomes into the stores.

        An entry whose item is no longer in the item store is skipped and its
        status entry dropped; the remaining entries are still applied.
        """
        summary = ReconcileSummary()
        items: list[Item] = []
        status_updates: list[ItemStatusUpdate] = []

        for entry in entries:
            item = self._item_store.get_item(entry.item_key)
            if item is None:
                logger.warning("reconcile_item_missing", item_key=entry.item_key)
                summary.missing_keys.append(entry.item_key)
                self._count("missing")
                continue

            status = self._status_store.get_item_status(entry.item_key)
            fields_with_errors: FieldErrors = dict(status.fields_with_errors) if status else {}

            for outcome in entry.updated_fields:
                self._apply_outcome(item, outcome, fields_with_errors, entry)

            if fields_with_errors:
                # The echoed row holds the rejected state; keep the user's values
                item.update(entry.edited_values)
                status_updates.append(
                    ItemStatusUpdate(
                        item_key=entry.item_key,
                        status=ItemStatus(
                            is_updating=False,
                            fields_with_errors=fields_with_errors,
                            request_error=None,
                        ),
                    )
                )
                summary.error_keys.append(entry.item_key)
                self._count("error")
            else:
                item.update(entry.list_row)
                summary.clean_keys.append(entry.item_key)
                self._count("clean")

            items.append(item)

        self._status_store.update_items_status(source, status_updates)
        self._status_store.delete_items_status(summary.clean_keys + summary.missing_keys)
        self._item_store.update_items(source, items)

        logger.debug(
            "reconcile_completed",
            clean=len(summary.clean_keys),
            errors=len(summary.error_keys),
            missing=len(summary.missing_keys),
        )
        return summary

    def _apply_outcome(
        self,
        item: Item,
        outcome: FieldOutcome,
        fields_with_errors: FieldErrors,
        entry: ReconcileEntry,
    ) -> None:
        field = entry.field
        value_before_save = entry.value_before_save
        if (
            value_before_save is not None
            and field is not None
            and field.real_field_name == outcome.field_name
        ):
            # The echoed value may not be in display shape; the committed one is
            item[field.real_field_name] = value_before_save.value
            if value_before_save.raw_value is not None:
                item[field.raw_slot] = value_before_save.raw_value

        if outcome.has_exception:
            fields_with_errors[outcome.field_name] = outcome.error_message
        else:
            fields_with_errors.pop(outcome.field_name, None)

    def apply_local_update(
        self,
        item: Item,
        field: FieldDescriptor,
        value: FieldValue,
        source: str = LOCAL_UPDATE_SOURCE,
    ) -> None:
        """Apply an edit made while other fields of the item still have errors."""
        self.apply_local_updates(
            [LocalEdit(item=item, edits=[FieldEdit(field=field, value=value)])],
            source=source,
        )

    def apply_local_updates(
        self,
        local_edits: Sequence[LocalEdit],
        extra_status: Sequence[ItemStatusUpdate] = (),
        source: str = LOCAL_UPDATE_SOURCE,
    ) -> None:
        """Apply local-only edits in one status write and one item write.

        Editing a field clears its own error whether or not the new value is
        valid; validity is confirmed once the last error is edited and the
        item goes back to the validator. `extra_status` rides along in the
        same status write.
        """
        items: list[Item] = []
        status_updates = list(extra_status)

        for local_edit in local_edits:
            item_key = self._item_store.get_item_key(local_edit.item)
            status = self._status_store.get_item_status(item_key)
            fields_with_errors: FieldErrors = dict(status.fields_with_errors) if status else {}

            item = dict(local_edit.item)
            for edit in local_edit.edits:
                fields_with_errors.pop(edit.field.real_field_name, None)
                item[edit.field.real_field_name] = edit.value.value
                item[edit.field.raw_slot] = edit.value.effective_raw

            status_updates.append(
                ItemStatusUpdate(
                    item_key=item_key,
                    status=ItemStatus(fields_with_errors=fields_with_errors),
                )
            )
            items.append(item)

            logger.debug(
                "local_update_applied",
                item_key=item_key,
                fields=[edit.field.real_field_name for edit in local_edit.edits],
                remaining_errors=len(fields_with_errors),
            )
            if self._metrics_enabled:
                LOCAL_UPDATES.inc()

        self._status_store.update_items_status(source, status_updates)
        self._item_store.update_items(source, items)

    def _count(self, outcome: str) -> None:
        if self._metrics_enabled:
            RECONCILED_ITEMS.labels(outcome=outcome).inc()
