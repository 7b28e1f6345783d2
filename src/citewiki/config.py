"""Settings loading, validation and saving for citewiki."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from citewiki.core.errors import ConfigError
from citewiki.core.models import FinalLinkFormat

CONFIG_DIRNAME = ".citewiki"
CONFIG_FILENAME = "config.yaml"

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


class CitewikiConfig(BaseModel):
    """User settings for a vault."""

    final_link_format: FinalLinkFormat = Field(
        default=FinalLinkFormat.NOT_CHANGE,
        description="Path shape applied to resolved targets when converting",
    )
    keep_mtime: bool = Field(
        default=False,
        description="Preserve a document's modification time when rewriting it",
    )
    active_document: str | None = Field(
        default=None,
        description="Vault-relative path used by convert-active (default: newest file)",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("keep_mtime", mode="before")
    @classmethod
    def parse_bool_string(cls, v: Any) -> Any:
        """Accept 'yes'/'no' style strings (environment overrides)."""
        if isinstance(v, str):
            lowered = v.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
            raise ValueError(f"Invalid boolean: {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the level is one the logging module knows."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log level: {v!r}")
        return level


def default_config_path(vault: str | Path) -> Path:
    """Settings file location inside a vault."""
    return Path(vault).expanduser() / CONFIG_DIRNAME / CONFIG_FILENAME


def load_config(path: str | Path) -> CitewikiConfig:
    """Load settings from a YAML file, merged over the defaults.

    A missing file yields the defaults.

    Environment variable overrides:
        CITEWIKI_FINAL_LINK_FORMAT: overrides final_link_format
        CITEWIKI_KEEP_MTIME: overrides keep_mtime

    Args:
        path: Path to the settings file.

    Returns:
        Validated CitewikiConfig.

    Raises:
        ConfigError: If the file is unreadable or its contents are invalid.
    """
    config_path = Path(path).expanduser()
    data: dict[str, Any] = {}

    if config_path.exists():
        try:
            raw = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}") from e

        try:
            loaded = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}") from e

        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ConfigError("Config file must contain a YAML mapping")
            data.update(loaded)

    # Apply environment variable overrides
    env_format = os.environ.get("CITEWIKI_FINAL_LINK_FORMAT")
    if env_format:
        data["final_link_format"] = env_format

    env_mtime = os.environ.get("CITEWIKI_KEEP_MTIME")
    if env_mtime:
        data["keep_mtime"] = env_mtime

    try:
        return CitewikiConfig(**data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def save_config(config: CitewikiConfig, path: str | Path) -> None:
    """Write settings to a YAML file, creating its folder if needed.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = Path(path).expanduser()
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(
            yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False),
            encoding="utf-8",
        )
    except OSError as e:
        raise ConfigError(f"Cannot write config file: {e}") from e
