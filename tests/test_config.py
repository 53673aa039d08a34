"""Tests for engine configuration."""

import json

import pytest

from ocr_narrator.config import (
    DICTIONARY_ENV_VAR,
    EngineConfig,
    default_dictionary_path,
    load_engine_config,
    save_engine_config,
)
from ocr_narrator.errors import ConfigurationError


class TestEngineConfig:
    """Tests for EngineConfig defaults and validation."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.short_word_max_length == 3
        assert config.correction_threshold == 80
        assert config.max_fragment_words == 50
        assert config.duplicate_threshold == 85
        assert config.cooldown_ms == 2000
        assert config.thread_safe is False

    @pytest.mark.parametrize(
        "field, value",
        [
            ("correction_threshold", 101),
            ("duplicate_threshold", -1),
            ("max_fragment_words", 0),
            ("cooldown_ms", -10),
        ],
    )
    def test_rejects_out_of_range(self, field, value):
        with pytest.raises(ValueError):
            EngineConfig(**{field: value})


class TestLoadEngineConfig:
    """Tests for loading and saving config files."""

    def test_round_trip(self, tmp_path):
        config = EngineConfig(cooldown_ms=500, duplicate_threshold=90)

        path = save_engine_config(config, tmp_path / "nested" / "engine.json")

        assert load_engine_config(path) == config

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text(json.dumps({"cooldown_ms": 3000}), encoding="utf-8")

        config = load_engine_config(path)

        assert config.cooldown_ms == 3000
        assert config.correction_threshold == 80

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_engine_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text("{cooldown_ms: 3000", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_engine_config(path)

    def test_invalid_value_names_field(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text(json.dumps({"correction_threshold": 150}), encoding="utf-8")

        with pytest.raises(ConfigurationError, match="correction_threshold"):
            load_engine_config(path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text(json.dumps({"cooldown": 3000}), encoding="utf-8")

        with pytest.raises(ConfigurationError, match="cooldown"):
            load_engine_config(path)

    def test_directory_path(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Could not read") as exc_info:
            load_engine_config(tmp_path)

        assert exc_info.value.context == {"path": str(tmp_path)}

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_bytes(b"\xff\xfe{}")

        with pytest.raises(ConfigurationError, match="Could not read"):
            load_engine_config(path)

    def test_save_replaces_existing_file(self, tmp_path):
        path = tmp_path / "engine.json"
        save_engine_config(EngineConfig(cooldown_ms=500), path)

        save_engine_config(EngineConfig(cooldown_ms=750), path)

        assert load_engine_config(path).cooldown_ms == 750
        assert [p.name for p in tmp_path.iterdir()] == ["engine.json"]


class TestDefaultDictionaryPath:
    """Tests for default_dictionary_path."""

    def test_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv(DICTIONARY_ENV_VAR, str(tmp_path / "kata_baku.txt"))

        assert default_dictionary_path() == tmp_path / "kata_baku.txt"

    def test_unset(self, monkeypatch):
        monkeypatch.delenv(DICTIONARY_ENV_VAR, raising=False)

        assert default_dictionary_path() is None
