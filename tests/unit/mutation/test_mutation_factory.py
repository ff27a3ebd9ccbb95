"""Tests for create_mutation_engine."""

from itemsync.config.models.engine import EngineConfig
from itemsync.config.settings import Settings
from itemsync.items.stores import InMemoryItemStore
from itemsync.mutation import MutationEngine, create_mutation_engine
from itemsync.providers import MockDeletionClient, MockValidationClient


class TestCreateMutationEngine:
    """Engine wiring from settings."""

    def test_defaults_to_in_memory_stores(self) -> None:
        engine = create_mutation_engine(
            MockValidationClient(), MockDeletionClient(), settings=Settings()
        )

        assert isinstance(engine, MutationEngine)
        assert engine.locks.enabled is True

    def test_engine_settings_applied(self) -> None:
        settings = Settings(engine=EngineConfig(serialize_per_item=False))

        engine = create_mutation_engine(
            MockValidationClient(), MockDeletionClient(), settings=settings
        )

        assert engine.locks.enabled is False

    def test_passed_store_is_used(self) -> None:
        store = InMemoryItemStore([{"ID": "5", "Title": "x"}])

        engine = create_mutation_engine(
            MockValidationClient(), MockDeletionClient(), item_store=store, settings=Settings()
        )

        assert engine.reconciler is not None
        assert engine._item_store is store

    def test_reads_settings_from_environment(self, env_override) -> None:
        with env_override({"ITEMSYNC_ENGINE__SERIALIZE_PER_ITEM": "false"}):
            engine = create_mutation_engine(MockValidationClient(), MockDeletionClient())

        assert engine.locks.enabled is False
