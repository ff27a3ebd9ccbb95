"""Fixtures for mutation engine tests."""

import pytest

from itemsync.config.models.engine import EngineConfig
from itemsync.items.stores import (
    InMemoryItemStatusStore,
    InMemoryItemStore,
    InMemorySelectionStore,
)
from itemsync.mutation import MutationEngine
from itemsync.providers import MockDeletionClient, MockValidationClient
from tests.factories.items import make_item


@pytest.fixture
def item_store() -> InMemoryItemStore:
    return InMemoryItemStore([make_item("5"), make_item("6"), make_item("7")])


@pytest.fixture
def status_store() -> InMemoryItemStatusStore:
    return InMemoryItemStatusStore()


@pytest.fixture
def selection_store() -> InMemorySelectionStore:
    return InMemorySelectionStore(["5", "6", "7"])


@pytest.fixture
def validation_client(item_store: InMemoryItemStore) -> MockValidationClient:
    return MockValidationClient(
        rows={item["ID"]: item for item in item_store.all_items()},
        rules={"Title": lambda value: None if value else "required"},
    )


@pytest.fixture
def deletion_client() -> MockDeletionClient:
    return MockDeletionClient()


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig(container_url="/sites/ops/lists/tasks", list_id="tasks")


@pytest.fixture
def engine(
    item_store,
    status_store,
    selection_store,
    validation_client,
    deletion_client,
    engine_config,
) -> MutationEngine:
    return MutationEngine(
        item_store=item_store,
        status_store=status_store,
        selection_store=selection_store,
        validation_client=validation_client,
        deletion_client=deletion_client,
        config=engine_config,
    )
