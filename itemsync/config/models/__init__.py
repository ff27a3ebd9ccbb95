"""Configuration section models."""

from itemsync.config.models.engine import EngineConfig
from itemsync.config.models.observability import ObservabilityConfig

__all__ = ["EngineConfig", "ObservabilityConfig"]
