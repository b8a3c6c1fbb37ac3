"""
Unit tests for config file loading.

Tests reading `.hotrebuild.toml` into a RawConfig layer, including type
checking of every known key and the handling of unknown keys.
"""

import logging

import pytest

from hotrebuild.config import find_default_config, load_config_file, parse_raw_config
from hotrebuild.validation import ConfigError


@pytest.mark.unit
class TestLoadConfigFile:
    """Test cases for loading config files from disk."""

    def test_load_full_config(self, write_config, sample_config_data):
        """Every documented key is read into the layer."""
        config = load_config_file(write_config(sample_config_data))

        assert config.watch == ["src", "Cargo.toml"]
        assert config.ignore == ["**/target/**", "**/*.tmp"]
        assert config.debounce_ms == 100
        assert config.clear is False
        assert config.release is True
        assert config.features == ["a", "b"]
        assert config.pre_build == [["cargo", "fmt"]]
        assert config.post_build == []
        assert config.on_build_fail == [["echo", "build failed"]]

    def test_load_minimal_config(self, write_config):
        """Keys absent from the file stay unset."""
        config = load_config_file(write_config({"bin": "demo"}))

        assert config.bin == "demo"
        assert config.set_fields() == ["bin"]

    def test_load_empty_file(self, temp_dir):
        path = temp_dir / "empty.toml"
        path.write_text("")

        assert load_config_file(path).set_fields() == []

    def test_nonexistent_file(self, temp_dir):
        with pytest.raises(ConfigError) as exc_info:
            load_config_file(temp_dir / "missing.toml")
        assert "not found" in str(exc_info.value)

    def test_invalid_toml(self, temp_dir):
        path = temp_dir / "broken.toml"
        path.write_text("watch = [\"src\"\nbuild = ")

        with pytest.raises(ConfigError) as exc_info:
            load_config_file(path)
        assert "cannot parse" in str(exc_info.value)

    def test_invalid_toml_is_not_logged_here(self, temp_dir, caplog):
        """The caller reports the error, so loading must not log it too."""
        path = temp_dir / "broken.toml"
        path.write_text("debounce_ms = ")

        with caplog.at_level(logging.DEBUG):
            with pytest.raises(ConfigError):
                load_config_file(path)

        assert not any(record.levelno >= logging.WARNING for record in caplog.records)

    def test_wrong_type_is_rejected(self, write_config):
        path = write_config({"debounce_ms": "fast"})

        with pytest.raises(ConfigError) as exc_info:
            load_config_file(path)
        assert exc_info.value.field_name == "debounce_ms"

    def test_unknown_key_is_warned_and_ignored(self, write_config, caplog):
        path = write_config({"bin": "demo", "colour": "blue"})

        with caplog.at_level(logging.WARNING):
            config = load_config_file(path)

        assert config.bin == "demo"
        assert "Unknown key 'colour'" in caplog.text


@pytest.mark.unit
class TestParseRawConfig:
    """Test cases for per-key validation of parsed data."""

    @pytest.mark.parametrize("data", [
        {"watch": "src"},
        {"watch": ["src", 3]},
        {"clear": "yes"},
        {"debounce_ms": True},
        {"debounce_ms": -1},
        {"debounce_ms": 0.9},
        {"debounce_ms": 250.7},
        {"debounce_ms": "250"},
        {"build": []},
        {"run": "cargo run"},
        {"bin": ""},
        {"pre_build": ["cargo fmt"]},
        {"post_run": [["ok"], [1]]},
    ])
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            parse_raw_config(data)

    def test_hook_list_may_contain_empty_argv(self):
        """Empty hook commands are only rejected when the stage runs."""
        config = parse_raw_config({"pre_run": [["echo", "hi"], []]})
        assert config.pre_run == [["echo", "hi"], []]

    def test_zero_debounce_is_valid(self):
        assert parse_raw_config({"debounce_ms": 0}).debounce_ms == 0


@pytest.mark.unit
class TestFindDefaultConfig:
    """Test cases for default config file discovery."""

    def test_found(self, write_config, temp_dir):
        path = write_config({"bin": "demo"})
        assert find_default_config(temp_dir) == path

    def test_missing(self, temp_dir):
        assert find_default_config(temp_dir) is None

    def test_directory_with_config_name_is_not_a_config(self, temp_dir):
        (temp_dir / ".hotrebuild.toml").mkdir()
        assert find_default_config(temp_dir) is None
