"""Mutation engine: update, create and delete list items.

Decides per edit whether the validator has to be called, submits the
payload and reconciles the outcome into the item, status and selection
stores. Store writes happen synchronously on either side of each remote
call; the remote calls are the only suspension points.
"""

import inspect
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from itemsync.config.models.engine import EngineConfig
from itemsync.items.enums import DeletionType
from itemsync.items.models import (
    FieldDescriptor,
    FieldValue,
    Item,
    ItemStatus,
    ItemStatusUpdate,
)
from itemsync.items.store import ItemStatusStore, ItemStore, SelectionStore
from itemsync.mutation.locks import KeyedLocks
from itemsync.mutation.payload import (
    DefaultFieldValueResolver,
    FieldValueResolver,
    RequestPlan,
    build_all_fields_payload,
    build_batch_payload,
    build_create_payload,
    build_single_field_payload,
    decide_request,
)
from itemsync.mutation.publishers import (
    CREATE_SOURCE,
    DELETE_SOURCE,
    NEW_LIST_ITEM_PUBLISHER,
    NEW_ROW_PUBLISHER,
    UPDATE_BATCH_SOURCE,
    UPDATE_FIELD_SOURCE,
)
from itemsync.mutation.reconciliation import (
    FieldEdit,
    LocalEdit,
    ReconcileEntry,
    Reconciler,
)
from itemsync.observability.logging import get_logger
from itemsync.observability.metrics import DELETED_ITEMS, track_remote_call
from itemsync.providers.deletion.base import (
    DeleteContext,
    DeleteItem,
    DeletionClient,
    DeletionRequestError,
)
from itemsync.providers.validation.base import (
    ItemUpdateRequest,
    MutationResult,
    ValidationClient,
    ValidationRequestError,
)

logger = get_logger(__name__)

DeleteCallback = Callable[[Exception | None], Awaitable[None] | None]


class MutationEngine:
    """Orchestrates item mutations against the remote validator.

    Edits on a clean item send only the edited fields. Edits on an item with
    validation errors stay local until the last erroring field is edited,
    at which point the whole item is re-validated. Requests are serialized
    per item key unless `config.serialize_per_item` is off.
    """

    def __init__(
        self,
        item_store: ItemStore,
        status_store: ItemStatusStore,
        selection_store: SelectionStore,
        validation_client: ValidationClient,
        deletion_client: DeletionClient,
        config: EngineConfig | None = None,
        resolver: FieldValueResolver | None = None,
        metrics_enabled: bool = True,
    ) -> None:
        """Initialize the engine.

        Args:
            item_store: Authoritative item values
            status_store: Per-item updating flag and field errors
            selection_store: Selected item keys, pruned on delete
            validation_client: Remote validator for updates and creates
            deletion_client: Remote delete service
            config: List and request policy settings
            resolver: Canonical value lookup for all-fields payloads
            metrics_enabled: Whether to record Prometheus metrics
        """
        self._item_store = item_store
        self._status_store = status_store
        self._selection_store = selection_store
        self._validation_client = validation_client
        self._deletion_client = deletion_client
        self._config = config or EngineConfig()
        self._resolver = resolver or DefaultFieldValueResolver()
        self._metrics_enabled = metrics_enabled
        self._locks = KeyedLocks(enabled=self._config.serialize_per_item)
        self._reconciler = Reconciler(item_store, status_store, metrics_enabled)

    @property
    def reconciler(self) -> Reconciler:
        return self._reconciler

    @property
    def locks(self) -> KeyedLocks:
        return self._locks

    async def update_field(
        self,
        item: Item,
        target_field: FieldDescriptor,
        new_value: Any,
        all_fields: Sequence[FieldDescriptor],
    ) -> MutationResult | None:
        """Update one field of one item.

        Args:
            item: The item as the caller last saw it
            target_field: Field being edited
            new_value: Editor value; a FieldValue, a value/rawValue mapping or
                a bare value
            all_fields: Every field of the item, submitted when this edit
                resolves the item's last error

        Returns:
            The validator's result, or None when the edit was applied locally

        Raises:
            ValidationRequestError: If the validation call fails
        """
        value = FieldValue.coerce(new_value)
        item_key = self._item_store.get_item_key(item)

        async with self._locks.hold([item_key]):
            current = self._item_store.get_item(item_key) or dict(item)
            status = self._status_store.get_item_status(item_key)
            plan = decide_request(status, [target_field.real_field_name])

            if plan is RequestPlan.LOCAL_ONLY:
                self._reconciler.apply_local_update(
                    current, target_field, value, source=UPDATE_FIELD_SOURCE
                )
                return None

            if plan is RequestPlan.ALL_FIELDS:
                form_values = build_all_fields_payload(
                    current, target_field, value.effective_raw, all_fields, self._resolver
                )
            else:
                form_values = build_single_field_payload(target_field, value.effective_raw)

            self._mark_updating(UPDATE_FIELD_SOURCE, [item_key])
            logger.info(
                "field_update_dispatched",
                item_key=item_key,
                field=target_field.real_field_name,
                plan=plan.value,
                payload_size=len(form_values),
            )

            try:
                with track_remote_call("validate_update", self._metrics_enabled):
                    result = await self._validation_client.validate_update(
                        self._config.container_url,
                        self._item_id(current, item_key),
                        form_values,
                        False,
                        None,
                    )
            except ValidationRequestError as exc:
                self._request_failed(UPDATE_FIELD_SOURCE, [item_key], exc)
                raise
            except Exception as exc:
                raise self._request_failed(UPDATE_FIELD_SOURCE, [item_key], exc) from exc

            self._reconciler.reconcile([
                ReconcileEntry(
                    item_key=item_key,
                    updated_fields=result.list_form_values,
                    list_row=result.list_row,
                    value_before_save=value,
                    field=target_field,
                )
            ])
            return result

    async def update_batch(
        self,
        items: Sequence[Item],
        fields: Sequence[FieldDescriptor],
        all_fields: Sequence[FieldDescriptor],
    ) -> list[MutationResult]:
        """Update the same fields on several items.

        Items already carry their edited values. Each item is planned on its
        own: items with unresolved errors elsewhere are updated locally, the
        rest go to the validator in one batch call. Local updates and the
        updating flags share one status write.

        Returns:
            Validator results for the items sent remotely (empty when none were)

        Raises:
            ValidationRequestError: If the batch validation call fails
        """
        keyed = [(self._item_store.get_item_key(item), item) for item in items]
        field_names = [field.real_field_name for field in fields]

        async with self._locks.hold(key for key, _ in keyed):
            local_edits: list[LocalEdit] = []
            requests: list[ItemUpdateRequest] = []
            remote_keys: list[str] = []
            edited_values: dict[str, dict[str, Any]] = {}

            for item_key, item in keyed:
                plan = decide_request(self._status_store.get_item_status(item_key), field_names)

                if plan is RequestPlan.LOCAL_ONLY:
                    local_edits.append(
                        LocalEdit(
                            item=item,
                            edits=[
                                FieldEdit(
                                    field=field,
                                    value=FieldValue(
                                        value=item.get(field.real_field_name),
                                        raw_value=item.get(field.raw_slot),
                                    ),
                                )
                                for field in fields
                            ],
                        )
                    )
                    continue

                use_all_fields = plan is RequestPlan.ALL_FIELDS
                requests.append(
                    ItemUpdateRequest(
                        item_id=self._item_id(item, item_key),
                        form_values=build_batch_payload(
                            item, fields, all_fields, use_all_fields, self._resolver
                        ),
                    )
                )
                remote_keys.append(item_key)
                edited_values[item_key] = {
                    slot: item[slot]
                    for field in fields
                    for slot in (field.real_field_name, field.raw_slot)
                    if slot in item
                }

            self._reconciler.apply_local_updates(
                local_edits,
                extra_status=[
                    ItemStatusUpdate(item_key=key, status=ItemStatus(is_updating=True))
                    for key in remote_keys
                ],
                source=UPDATE_BATCH_SOURCE,
            )

            if not requests:
                return []

            logger.info(
                "batch_update_dispatched",
                remote_items=len(requests),
                local_items=len(local_edits),
            )

            try:
                with track_remote_call("validate_update_batch", self._metrics_enabled):
                    results = await self._validation_client.validate_update_batch(
                        self._config.container_url, requests
                    )
            except ValidationRequestError as exc:
                self._request_failed(UPDATE_BATCH_SOURCE, remote_keys, exc)
                raise
            except Exception as exc:
                raise self._request_failed(UPDATE_BATCH_SOURCE, remote_keys, exc) from exc

            entries = []
            for position, result in enumerate(results):
                item_key = self._result_key(result, remote_keys, position)
                if item_key is None:
                    logger.warning("batch_result_unmatched", position=position)
                    continue
                entries.append(
                    ReconcileEntry(
                        item_key=item_key,
                        updated_fields=result.list_form_values,
                        list_row=result.list_row,
                        edited_values=edited_values.get(item_key, {}),
                    )
                )
            self._reconciler.reconcile(entries)

            answered = {entry.item_key for entry in entries}
            unanswered = [key for key in remote_keys if key not in answered]
            if unanswered:
                logger.warning("batch_items_without_result", item_keys=unanswered)
                self._status_store.update_items_status(
                    UPDATE_BATCH_SOURCE,
                    [
                        ItemStatusUpdate(item_key=key, status=ItemStatus(is_updating=False))
                        for key in unanswered
                    ],
                )
            return results

    async def create_item(self, item: Item) -> None:
        """Create an item from a temporary row.

        The creation response isn't shaped for display, so once the new
        identity is known the item is fetched again with an empty update and
        that row is published to the item store.

        Raises:
            ValidationRequestError: If either remote call fails
        """
        temp_key = self._item_store.get_item_key(item)
        form_values = build_create_payload(item, self._config.identity_field)

        self._status_store.update_items_status(
            CREATE_SOURCE,
            [ItemStatusUpdate(item_key=temp_key, status=ItemStatus(is_updating=True))],
            replace=True,
        )

        try:
            with track_remote_call("validate_create", self._metrics_enabled):
                created = await self._validation_client.validate_create(
                    self._config.container_url,
                    self._item_id(item, temp_key),
                    form_values,
                    False,
                    None,
                )
        except ValidationRequestError as exc:
            self._request_failed(CREATE_SOURCE, [temp_key], exc)
            raise
        except Exception as exc:
            raise self._request_failed(CREATE_SOURCE, [temp_key], exc) from exc

        errors = {
            outcome.field_name: outcome.error_message
            for outcome in created.list_form_values
            if outcome.has_exception
        }
        if errors:
            self._status_store.update_items_status(
                CREATE_SOURCE,
                [ItemStatusUpdate(item_key=temp_key, status=ItemStatus(fields_with_errors=errors))],
                replace=True,
            )
            logger.info("create_rejected", item_key=temp_key, fields=sorted(errors))
            return

        new_id = next(
            (
                outcome.field_value
                for outcome in created.list_form_values
                if outcome.field_name == self._config.new_identity_field
            ),
            None,
        )
        if new_id is None:
            logger.warning("create_response_missing_identity", item_key=temp_key)
            self._status_store.delete_items_status([temp_key])
            return

        try:
            with track_remote_call("validate_update", self._metrics_enabled):
                fetched = await self._validation_client.validate_update(
                    self._config.container_url, new_id, [], False, None
                )
        except ValidationRequestError as exc:
            self._request_failed(CREATE_SOURCE, [temp_key], exc)
            raise
        except Exception as exc:
            raise self._request_failed(CREATE_SOURCE, [temp_key], exc) from exc

        publisher = (
            NEW_ROW_PUBLISHER
            if temp_key.startswith(self._config.new_row_key_prefix)
            else NEW_LIST_ITEM_PUBLISHER
        )
        self._item_store.add_new_items(publisher, [fetched.list_row])
        self._status_store.delete_items_status([temp_key])
        logger.info("item_created", item_key=temp_key, new_id=str(new_id), publisher=publisher)

    async def delete_items(self, items: Sequence[Item], result_callback: DeleteCallback) -> None:
        """Delete items and report the outcome through `result_callback`.

        On success the callback receives None. On failure it receives the
        raised error; items the failure report lists without an error were
        deleted anyway and are removed from the stores first.
        """
        item_keys = [self._item_store.get_item_key(item) for item in items]
        context = DeleteContext(
            items=[
                DeleteItem(key=key, properties=dict(item))
                for key, item in zip(item_keys, items)
            ],
            deletion_type=DeletionType.RECYCLE,
            list_id=self._config.list_id,
            parent_key="",
        )

        try:
            with track_remote_call("delete_items", self._metrics_enabled):
                await self._deletion_client.delete_items(context)
        except DeletionRequestError as error:
            deleted = error.deleted_keys
            if deleted:
                self._process_deleted_items(deleted)
            logger.warning(
                "delete_partial_failure",
                requested=len(item_keys),
                deleted=len(deleted),
                error=error.message,
            )
            self._count_deleted("failed", len(item_keys) - len(deleted))
            await self._invoke(result_callback, error)
            return
        except Exception as error:
            logger.error("delete_request_failed", requested=len(item_keys), error=str(error))
            self._count_deleted("failed", len(item_keys))
            await self._invoke(result_callback, error)
            return

        self._process_deleted_items(item_keys)
        await self._invoke(result_callback, None)

    def _process_deleted_items(self, item_keys: list[str]) -> None:
        self._item_store.delete_items(DELETE_SOURCE, item_keys)
        self._selection_store.remove(DELETE_SOURCE, item_keys)
        self._count_deleted("deleted", len(item_keys))
        logger.info("items_deleted", count=len(item_keys))

    def _mark_updating(self, source: str, item_keys: Sequence[str]) -> None:
        self._status_store.update_items_status(
            source,
            [ItemStatusUpdate(item_key=key, status=ItemStatus(is_updating=True)) for key in item_keys],
        )

    def _request_failed(
        self, source: str, item_keys: Sequence[str], exc: Exception
    ) -> ValidationRequestError:
        """Clear the updating flag, record the failure and build the error to raise."""
        message = exc.message if isinstance(exc, ValidationRequestError) else str(exc)
        self._status_store.update_items_status(
            source,
            [
                ItemStatusUpdate(
                    item_key=key,
                    status=ItemStatus(is_updating=False, request_error=message or type(exc).__name__),
                )
                for key in item_keys
            ],
        )
        logger.error(
            "validation_request_failed",
            source=source,
            item_keys=list(item_keys),
            error=message,
        )
        if isinstance(exc, ValidationRequestError):
            return exc
        return ValidationRequestError(message or type(exc).__name__, item_keys)

    def _item_id(self, item: Item, item_key: str) -> Any:
        return item.get(self._config.identity_field, item_key)

    def _result_key(
        self, result: MutationResult, remote_keys: list[str], position: int
    ) -> str | None:
        if self._config.identity_field in result.list_row:
            return self._item_store.get_item_key(result.list_row)
        if position < len(remote_keys):
            return remote_keys[position]
        return None

    def _count_deleted(self, outcome: str, count: int) -> None:
        if self._metrics_enabled and count > 0:
            DELETED_ITEMS.labels(outcome=outcome).inc(count)

    @staticmethod
    async def _invoke(callback: DeleteCallback, error: Exception | None) -> None:
        outcome = callback(error)
        if inspect.isawaitable(outcome):
            await outcome
