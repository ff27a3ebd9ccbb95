"""Validation payload construction.

Decides whether an edit needs a remote round-trip and builds the outbound
field updates. Encoding reads from the item and never writes to it.
"""

import json
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

from itemsync.items.enums import FieldType
from itemsync.items.models import FieldDescriptor, FieldValue, Item, ItemStatus
from itemsync.providers.validation.base import FieldUpdate


class RequestPlan(str, Enum):
    """What an edit sends to the validator."""

    LOCAL_ONLY = "local_only"
    EDITED_FIELDS = "edited_fields"
    ALL_FIELDS = "all_fields"


def decide_request(status: ItemStatus | None, edited_field_names: Iterable[str]) -> RequestPlan:
    """Decide how an edit on one item is submitted.

    A clean item sends only the edited fields. An item with errors stays
    local until the edit covers every remaining erroring field; that edit
    re-validates the whole item so cross-field rules run again.
    """
    if status is None or not status.has_error:
        return RequestPlan.EDITED_FIELDS

    errors = status.fields_with_errors
    edited_errors = sum(1 for name in set(edited_field_names) if name in errors)
    if edited_errors == len(errors):
        return RequestPlan.ALL_FIELDS
    return RequestPlan.LOCAL_ONLY


class FieldValueResolver(ABC):
    """Resolves the canonical value pair of a field on an item."""

    @abstractmethod
    def resolve(self, field: FieldDescriptor, item: Item) -> FieldValue:
        pass


class DefaultFieldValueResolver(FieldValueResolver):
    """Reads the display value and the companion raw slot from the item."""

    def resolve(self, field: FieldDescriptor, item: Item) -> FieldValue:
        return FieldValue(
            value=item.get(field.real_field_name),
            raw_value=item.get(field.raw_slot),
        )


def pack(value: Any) -> str:
    """Encode a structured value as the packed string the validator expects."""
    return json.dumps(value, default=str)


def with_user_keys(users: Sequence[Any]) -> list[Any]:
    """Copy user entries with `Key` set to the entry's email.

    The validator resolves people by `Key`.
    """
    keyed = []
    for user in users:
        if isinstance(user, dict):
            keyed.append({**user, "Key": user.get("email")})
        else:
            keyed.append(user)
    return keyed


def encode_field_value(field: FieldDescriptor, item: Item, resolver: FieldValueResolver) -> Any:
    """Encode a field that is resubmitted unchanged in an all-fields payload."""
    value = item.get(field.real_field_name)
    if not value:
        return value

    if field.type == FieldType.USER and isinstance(value, list):
        return pack(with_user_keys(value))
    if field.type == FieldType.THUMBNAIL and not isinstance(value, str):
        return pack(value)
    if field.type == FieldType.DATETIME:
        return value
    return resolver.resolve(field, item).effective_raw


def _entry(field_name: str, value: Any) -> FieldUpdate:
    return FieldUpdate(field_name=field_name, field_value=value)


def build_single_field_payload(field: FieldDescriptor, raw_value: Any) -> list[FieldUpdate]:
    return [_entry(field.real_field_name, raw_value)]


def build_all_fields_payload(
    item: Item,
    target_field: FieldDescriptor,
    target_raw: Any,
    all_fields: Sequence[FieldDescriptor],
    resolver: FieldValueResolver,
) -> list[FieldUpdate]:
    """Build a payload carrying every field of the item.

    The edited field carries its new raw value; the rest are re-encoded from
    the item's current values.
    """
    payload = []
    for field in all_fields:
        if field.real_field_name == target_field.real_field_name:
            value = target_raw
        else:
            value = encode_field_value(field, item, resolver)
        payload.append(_entry(field.real_field_name, value))
    return payload


def build_batch_payload(
    item: Item,
    fields: Sequence[FieldDescriptor],
    all_fields: Sequence[FieldDescriptor],
    use_all_fields: bool,
    resolver: FieldValueResolver,
) -> list[FieldUpdate]:
    """Build one item's payload for a batch call.

    Batch items already carry the edited values, so edited entries are read
    from the item itself. With `use_all_fields` every other field of the item
    is re-encoded the way a single-field all-fields payload encodes it.
    """
    edited_names = {field.real_field_name for field in fields}
    payload = []
    for field in all_fields if use_all_fields else fields:
        if field.real_field_name not in edited_names:
            payload.append(_entry(field.real_field_name, encode_field_value(field, item, resolver)))
            continue

        value = item.get(field.real_field_name)
        if value:
            if field.type == FieldType.USER:
                if use_all_fields and isinstance(value, list):
                    value = with_user_keys(value)
                if not isinstance(value, str):
                    value = pack(value)
            elif field.type == FieldType.THUMBNAIL and not isinstance(value, str):
                value = pack(value)
        payload.append(_entry(field.real_field_name, value))
    return payload


def build_create_payload(item: Item, identity_field: str) -> list[FieldUpdate]:
    """Build a create payload from every field except the identity."""
    return [
        _entry(field_name, value)
        for field_name, value in item.items()
        if field_name != identity_field
    ]
