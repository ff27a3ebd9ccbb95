"""Unit tests for the TOML configuration loader."""

import tomllib
from pathlib import Path

import pytest

from itemsync.config.loader import (
    deep_merge,
    get_config_dir,
    get_environment,
    load_config,
    load_toml,
)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_flat_dicts(self) -> None:
        """Flat dictionaries are merged correctly."""
        result = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
        assert result == {"a": 1, "b": 3, "c": 4}

    def test_merge_nested_dicts(self) -> None:
        """Nested tables are merged recursively."""
        base = {"engine": {"list_id": "a", "identity_field": "ID"}}
        override = {"engine": {"list_id": "b"}}
        result = deep_merge(base, override)
        assert result == {"engine": {"list_id": "b", "identity_field": "ID"}}

    def test_base_unmodified(self) -> None:
        """Original base dictionary is not modified."""
        base = {"a": 1}
        deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadToml:
    """Tests for load_toml function."""

    def test_load_valid_file(self, test_config_dir: Path) -> None:
        path = test_config_dir / "default.toml"
        path.write_text('[engine]\nlist_id = "tasks"\n')
        assert load_toml(path) == {"engine": {"list_id": "tasks"}}

    def test_missing_file_raises(self, test_config_dir: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_toml(test_config_dir / "missing.toml")

    def test_invalid_syntax_raises(self, test_config_dir: Path) -> None:
        path = test_config_dir / "broken.toml"
        path.write_text("engine = [")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_toml(path)


class TestEnvironment:
    """Tests for config dir and environment resolution."""

    def test_default_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ITEMSYNC_ENV", raising=False)
        assert get_environment() == "development"

    def test_environment_from_env(self, env_override) -> None:
        with env_override({"ITEMSYNC_ENV": "production"}):
            assert get_environment() == "production"

    def test_config_dir_from_env(self, env_override, test_config_dir: Path) -> None:
        with env_override({"ITEMSYNC_CONFIG_DIR": str(test_config_dir)}):
            assert get_config_dir() == test_config_dir

    def test_config_dir_missing_raises(self, env_override, tmp_path: Path) -> None:
        with env_override({"ITEMSYNC_CONFIG_DIR": str(tmp_path / "nope")}):
            with pytest.raises(FileNotFoundError):
                get_config_dir()


class TestLoadConfig:
    """Tests for load_config function."""

    def test_environment_file_overrides_default(
        self, env_override, mock_toml_files, test_config_dir: Path
    ) -> None:
        mock_toml_files({
            "default.toml": '[engine]\nlist_id = "base"\ncontainer_url = "/lists/a"\n',
            "test.toml": '[engine]\nlist_id = "override"\n',
        })
        with env_override({"ITEMSYNC_CONFIG_DIR": str(test_config_dir), "ITEMSYNC_ENV": "test"}):
            config = load_config()

        assert config["engine"] == {"list_id": "override", "container_url": "/lists/a"}

    def test_no_files_gives_empty_config(self, env_override, test_config_dir: Path) -> None:
        with env_override({"ITEMSYNC_CONFIG_DIR": str(test_config_dir)}):
            assert load_config() == {}
