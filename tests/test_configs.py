"""Tests for config loading and schema validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from gcode_layers.configs import ConfigError, ViewerConfigV1, load_config


@pytest.fixture()
def write_yaml(tmp_path: Path):
    def _write(text: str) -> Path:
        path = tmp_path / "viewer.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


class TestDefaultConfig:
    def test_packaged_default_loads(self) -> None:
        cfg = load_config()
        assert isinstance(cfg, ViewerConfigV1)
        assert cfg.schema_version == "gcode_layers.v1"

    def test_default_values(self) -> None:
        cfg = load_config()
        assert cfg.loader.base_path == ""
        assert cfg.loader.request_headers == {}
        assert cfg.loader.with_credentials is False
        assert cfg.loader.timeout_s > 0
        assert cfg.parser.instrument is False
        assert cfg.logging.level == "INFO"


class TestCustomConfig:
    def test_empty_file_uses_defaults(self, write_yaml) -> None:
        cfg = load_config(write_yaml(""))
        assert cfg == ViewerConfigV1()

    def test_overrides(self, write_yaml) -> None:
        path = write_yaml(
            "schema: gcode_layers.v1\n"
            "loader:\n"
            "  base_path: http://printer.local/files/\n"
            "  request_headers: {X-Api-Key: abc}\n"
            "  with_credentials: true\n"
            "parser:\n"
            "  instrument: true\n"
            "logging:\n"
            "  level: debug\n"
        )
        cfg = load_config(path)
        assert cfg.loader.base_path == "http://printer.local/files/"
        assert cfg.loader.request_headers == {"X-Api-Key": "abc"}
        assert cfg.loader.with_credentials is True
        assert cfg.parser.instrument is True
        assert cfg.logging.level == "DEBUG"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")


class TestValidation:
    @pytest.mark.parametrize(
        "text, match",
        [
            ("schema: other.v2\n", "schema"),
            ("loader:\n  timeout_s: 0\n", "timeout_s"),
            ("loader:\n  encoding: not-a-codec\n", "encoding"),
            ("logging:\n  level: LOUD\n", "level"),
        ],
    )
    def test_invalid_values(self, write_yaml, text: str, match: str) -> None:
        with pytest.raises(ConfigError, match=match):
            load_config(write_yaml(text))

    def test_non_mapping_rejected(self, write_yaml) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            load_config(write_yaml("- a\n- b\n"))

    def test_error_names_file(self, write_yaml) -> None:
        path = write_yaml("loader:\n  timeout_s: -1\n")
        with pytest.raises(ConfigError, match="viewer.yaml"):
            load_config(path)

    def test_config_error_is_value_error(self) -> None:
        assert issubclass(ConfigError, ValueError)

    def test_malformed_yaml_is_config_error(self, write_yaml) -> None:
        with pytest.raises(ConfigError, match="not valid YAML"):
            load_config(write_yaml("loader: [unclosed\n"))


class TestLoggingSection:
    def test_json_key(self, write_yaml) -> None:
        cfg = load_config(write_yaml("logging:\n  json: true\n"))
        assert cfg.logging.json_lines is True

    def test_field_name_accepted(self) -> None:
        cfg = ViewerConfigV1(logging={"json_lines": True})
        assert cfg.logging.json_lines is True
