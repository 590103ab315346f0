"""
Tests for YAML settings.
"""

import pytest

from notesindex.config import ConfigError, Settings, load_settings, settings_from_dict


class TestSettingsFromDict:
    """Validation of configuration values."""

    def test_defaults(self):
        settings = settings_from_dict(None)
        assert settings == Settings(corpus_dir=".", pattern="*.md", on_error="raise")

    def test_values(self):
        settings = settings_from_dict({"corpus_dir": "notes", "on_error": "skip"})
        assert settings.corpus_dir == "notes"
        assert settings.pattern == "*.md"
        assert settings.on_error == "skip"

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="Unknown"):
            settings_from_dict({"corpus": "notes"})

    def test_bad_policy(self):
        with pytest.raises(ConfigError, match="on_error"):
            settings_from_dict({"on_error": "ignore"})

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError):
            settings_from_dict(["notes"])

    def test_non_string_value(self):
        with pytest.raises(ConfigError):
            settings_from_dict({"pattern": 5})


class TestOverride:

    def test_none_values_keep_file_settings(self):
        settings = Settings(corpus_dir="notes").override(corpus_dir=None, pattern="*.txt")
        assert settings.corpus_dir == "notes"
        assert settings.pattern == "*.txt"


class TestLoadSettings:
    """Reading settings files."""

    def test_load(self, tmp_path):
        path = tmp_path / "notesindex.yaml"
        path.write_text("corpus_dir: meetings\npattern: '*.md'\non_error: skip\n")
        assert load_settings(path) == Settings(corpus_dir="meetings", pattern="*.md", on_error="skip")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path) == Settings()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("corpus_dir: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.yaml")
