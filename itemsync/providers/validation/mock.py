"""Mock validation client for testing."""

from collections.abc import Callable, Sequence
from typing import Any

from itemsync.providers.validation.base import (
    FieldOutcome,
    FieldUpdate,
    ItemUpdateRequest,
    MutationResult,
    ValidationClient,
    ValidationRequestError,
)

FieldRule = Callable[[Any], str | None]


class MockValidationClient(ValidationClient):
    """Validation client backed by an in-memory row table.

    Applies submitted values to the stored row and echoes it back. Field
    rules return an error message for an invalid value; a failing field
    leaves the stored row untouched. Queued responses and failures take
    precedence, which lets tests script exact server behavior.
    """

    def __init__(
        self,
        rows: dict[str, dict[str, Any]] | None = None,
        rules: dict[str, FieldRule] | None = None,
        identity_field: str = "ID",
        new_identity_field: str = "Id",
    ) -> None:
        self._rows: dict[str, dict[str, Any]] = {
            key: dict(row) for key, row in (rows or {}).items()
        }
        self._rules = rules or {}
        self._identity_field = identity_field
        self._new_identity_field = new_identity_field
        self._next_id = 1000
        self._queued: list[MutationResult | list[MutationResult] | Exception] = []
        self._call_history: list[dict[str, Any]] = []

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """History of calls for test assertions."""
        return self._call_history

    def clear_history(self) -> None:
        self._call_history.clear()

    def queue_response(
        self, response: MutationResult | list[MutationResult] | Exception
    ) -> None:
        """Return (or raise) `response` from the next call.

        Batch calls expect a list of results.
        """
        self._queued.append(response)

    def set_rule(self, field_name: str, rule: FieldRule) -> None:
        self._rules[field_name] = rule

    def row(self, item_id: Any) -> dict[str, Any] | None:
        row = self._rows.get(str(item_id))
        return dict(row) if row is not None else None

    def _next_queued(self) -> Any:
        if not self._queued:
            return None
        response = self._queued.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def _apply(self, item_id: Any, field_updates: Sequence[FieldUpdate]) -> MutationResult:
        row = self._rows.setdefault(str(item_id), {self._identity_field: str(item_id)})
        outcomes = []
        accepted = {}
        for update in field_updates:
            rule = self._rules.get(update.field_name)
            message = rule(update.field_value) if rule else None
            outcomes.append(
                FieldOutcome(
                    field_name=update.field_name,
                    field_value=update.field_value,
                    has_exception=message is not None,
                    error_message=message or "",
                )
            )
            if message is None:
                accepted[update.field_name] = update.field_value

        if all(not outcome.has_exception for outcome in outcomes):
            row.update(accepted)
        return MutationResult(list_row=dict(row), list_form_values=outcomes)

    async def validate_update(
        self,
        container_url: str,
        item_id: Any,
        field_updates: Sequence[FieldUpdate],
        is_new_document: bool = False,
        check_in_comment: str | None = None,
    ) -> MutationResult:
        self._call_history.append({
            "operation": "validate_update",
            "container_url": container_url,
            "item_id": item_id,
            "field_updates": list(field_updates),
        })
        queued = self._next_queued()
        if queued is not None:
            return queued
        if str(item_id) not in self._rows:
            raise ValidationRequestError(f"Item {item_id} does not exist", [str(item_id)])
        return self._apply(item_id, field_updates)

    async def validate_create(
        self,
        container_url: str,
        item_id: Any,
        field_updates: Sequence[FieldUpdate],
        is_new_document: bool = False,
        check_in_comment: str | None = None,
    ) -> MutationResult:
        self._call_history.append({
            "operation": "validate_create",
            "container_url": container_url,
            "item_id": item_id,
            "field_updates": list(field_updates),
        })
        queued = self._next_queued()
        if queued is not None:
            return queued

        new_id = str(self._next_id)
        self._next_id += 1
        result = self._apply(new_id, field_updates)
        if result.has_exception:
            del self._rows[new_id]
            return result
        result.list_form_values.append(
            FieldOutcome(field_name=self._new_identity_field, field_value=new_id)
        )
        return result

    async def validate_update_batch(
        self,
        container_url: str,
        items: Sequence[ItemUpdateRequest],
    ) -> list[MutationResult]:
        self._call_history.append({
            "operation": "validate_update_batch",
            "container_url": container_url,
            "items": list(items),
        })
        queued = self._next_queued()
        if queued is not None:
            return queued if isinstance(queued, list) else [queued]
        return [self._apply(request.item_id, request.form_values) for request in items]
