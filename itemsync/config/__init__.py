"""Configuration loading for itemsync.

Usage:
    from itemsync.config import get_settings

    settings = get_settings()
    url = settings.engine.container_url
"""

from functools import lru_cache

from itemsync.config.loader import load_config
from itemsync.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings instance.

    Call `get_settings.cache_clear()` to reload configuration.
    """
    set_toml_config(load_config())
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
