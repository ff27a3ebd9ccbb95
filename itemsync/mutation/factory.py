"""Engine construction from settings.

Wires stores and clients into a MutationEngine. Stores that aren't passed
in are created in memory.
"""

from itemsync.config import get_settings
from itemsync.config.settings import Settings
from itemsync.items.store import ItemStatusStore, ItemStore, SelectionStore
from itemsync.items.stores.inmemory import (
    InMemoryItemStatusStore,
    InMemoryItemStore,
    InMemorySelectionStore,
    key_by_field,
)
from itemsync.mutation.engine import MutationEngine
from itemsync.mutation.payload import FieldValueResolver
from itemsync.observability.logging import get_logger, setup_logging
from itemsync.providers.deletion.base import DeletionClient
from itemsync.providers.validation.base import ValidationClient

logger = get_logger(__name__)


def create_mutation_engine(
    validation_client: ValidationClient,
    deletion_client: DeletionClient,
    item_store: ItemStore | None = None,
    status_store: ItemStatusStore | None = None,
    selection_store: SelectionStore | None = None,
    resolver: FieldValueResolver | None = None,
    settings: Settings | None = None,
    configure_logging: bool = False,
) -> MutationEngine:
    """Create a MutationEngine configured from settings.

    Args:
        validation_client: Remote validator
        deletion_client: Remote delete service
        item_store: Item collection (in-memory when omitted)
        status_store: Item status store (in-memory when omitted)
        selection_store: Selection store (in-memory when omitted)
        resolver: Field value resolver (default resolver when omitted)
        settings: Settings to use instead of `get_settings()`
        configure_logging: Also configure structlog from the settings

    Returns:
        Configured MutationEngine
    """
    settings = settings or get_settings()
    observability = settings.observability

    if configure_logging:
        setup_logging(
            level=observability.log_level,
            format=observability.log_format,
            redact_pii=observability.redact_pii,
        )

    engine = MutationEngine(
        item_store=item_store
        or InMemoryItemStore(get_key=key_by_field(settings.engine.identity_field)),
        status_store=status_store or InMemoryItemStatusStore(),
        selection_store=selection_store or InMemorySelectionStore(),
        validation_client=validation_client,
        deletion_client=deletion_client,
        config=settings.engine,
        resolver=resolver,
        metrics_enabled=observability.metrics_enabled,
    )
    logger.info(
        "mutation_engine_created",
        container_url=settings.engine.container_url,
        serialize_per_item=settings.engine.serialize_per_item,
    )
    return engine
