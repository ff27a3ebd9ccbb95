"""Unit tests for Settings loading."""

from pathlib import Path

from itemsync.config import get_settings, reload_settings
from itemsync.config.settings import Settings


class TestSettingsDefaults:
    """Tests for model defaults."""

    def test_engine_defaults(self) -> None:
        settings = Settings()
        assert settings.engine.identity_field == "ID"
        assert settings.engine.new_identity_field == "Id"
        assert settings.engine.serialize_per_item is True

    def test_observability_defaults(self) -> None:
        settings = Settings()
        assert settings.observability.log_format == "json"
        assert settings.observability.redact_pii is True


class TestGetSettings:
    """Tests for TOML and environment layering."""

    def test_loads_toml(self, env_override, mock_toml_files, test_config_dir: Path) -> None:
        mock_toml_files({
            "default.toml": '[engine]\ncontainer_url = "/sites/ops/lists/tasks"\n',
        })
        with env_override({"ITEMSYNC_CONFIG_DIR": str(test_config_dir)}):
            settings = get_settings()

        assert settings.engine.container_url == "/sites/ops/lists/tasks"

    def test_env_overrides_toml(self, env_override, mock_toml_files, test_config_dir: Path) -> None:
        mock_toml_files({"default.toml": "[engine]\nserialize_per_item = true\n"})
        with env_override({
            "ITEMSYNC_CONFIG_DIR": str(test_config_dir),
            "ITEMSYNC_ENGINE__SERIALIZE_PER_ITEM": "false",
        }):
            settings = get_settings()

        assert settings.engine.serialize_per_item is False

    def test_settings_cached(self, env_override, test_config_dir: Path) -> None:
        with env_override({"ITEMSYNC_CONFIG_DIR": str(test_config_dir)}):
            assert get_settings() is get_settings()
            first = get_settings()
            assert reload_settings() is not first
