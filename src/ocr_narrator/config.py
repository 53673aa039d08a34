"""Engine configuration for ocr-narrator.

Thresholds and limits for word correction and the narration gate, loadable
from a JSON file. Defaults reproduce the behaviour of the camera reader app
this engine was built for.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ocr_narrator.errors import ConfigurationError

# Environment variable naming a default dictionary file for the CLI
DICTIONARY_ENV_VAR = "OCR_NARRATOR_DICTIONARY"


class EngineConfig(BaseModel):
    """Tunable settings for one narration session."""

    model_config = ConfigDict(extra="forbid")

    # Words this long or shorter are never corrected
    short_word_max_length: int = Field(default=3, ge=0)
    # A dictionary match must score strictly above this to replace a word
    correction_threshold: int = Field(default=80, ge=0, le=100)
    # Tokens beyond this count are dropped from each fragment
    max_fragment_words: int = Field(default=50, ge=1)
    # Candidates scoring at or above this against the last narration are dropped
    duplicate_threshold: int = Field(default=85, ge=0, le=100)
    # Minimum gap between two emissions, in milliseconds
    cooldown_ms: int = Field(default=2000, ge=0)
    # Serialize frame processing for hosts that analyse frames concurrently
    thread_safe: bool = False


def load_engine_config(path: Path | str) -> EngineConfig:
    """Load engine configuration from a JSON file.

    Args:
        path: Path to the config file

    Returns:
        EngineConfig with the file's settings applied over the defaults

    Raises:
        ConfigurationError: If the file is missing, not JSON, or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Config file is not valid JSON: {e.msg}",
            context={"path": str(path), "line": e.lineno},
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Could not read config file: {e}",
            context={"path": str(path)},
        ) from e

    try:
        return EngineConfig.model_validate(data)
    except PydanticValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ConfigurationError(
            f"Invalid engine config: {fields}",
            context={"path": str(path)},
        ) from e


def save_engine_config(config: EngineConfig, path: Path | str) -> Path:
    """Save engine configuration to a JSON file.

    Args:
        config: Configuration to save
        path: Destination path

    Returns:
        Path to the saved config file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(path.name + ".tmp")

    # Atomic write: write to temp file, then rename
    with open(temp_path, "w", encoding="utf-8") as f:
        json.dump(config.model_dump(), f, indent=2)

    temp_path.replace(path)
    return path


def default_dictionary_path() -> Path | None:
    """Dictionary path from the environment, if one is set."""
    value = os.environ.get(DICTIONARY_ENV_VAR)
    return Path(value) if value else None
