"""
Configuration for the notesindex command.

Settings come from an optional YAML file:

    corpus_dir: meetings/2020
    pattern: "*.md"
    on_error: skip

Command-line flags override file values.
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from notesindex.parser import ON_ERROR_POLICIES


class ConfigError(Exception):
    """Raised when a configuration file is invalid."""
    pass


@dataclass(frozen=True)
class Settings:
    """
    Resolved settings for loading a corpus.

    Properties:
        corpus_dir: Directory of note files
        pattern: Glob pattern selecting note files
        on_error: "raise" or "skip" for malformed documents
    """

    corpus_dir: str = "."
    pattern: str = "*.md"
    on_error: str = "raise"

    def override(self, **values: Any) -> "Settings":
        """Return a copy with every non-None value applied."""
        return replace(self, **{k: v for k, v in values.items() if v is not None})


def settings_from_dict(d: Optional[Dict[str, Any]]) -> Settings:
    if d is None:
        return Settings()
    if not isinstance(d, dict):
        raise ConfigError(f"Configuration must be a mapping, got {type(d).__name__}")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {unknown}")

    for key, value in d.items():
        if not isinstance(value, str):
            raise ConfigError(f"'{key}' must be a string, got {value!r}")

    settings = Settings(**d)
    if settings.on_error not in ON_ERROR_POLICIES:
        raise ConfigError(f"'on_error' must be one of {ON_ERROR_POLICIES}, got '{settings.on_error}'")
    return settings


def load_settings(path: Union[str, Path]) -> Settings:
    """
    Read settings from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the YAML is invalid or has bad keys/values
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    return settings_from_dict(data)
