"""YAML-file settings store."""

from __future__ import annotations

import logging
from pathlib import Path

from citewiki.config import CitewikiConfig, load_config, save_config
from citewiki.core.interfaces import SettingsStorePort

logger = logging.getLogger(__name__)


class YamlSettingsStore(SettingsStorePort):
    """Keeps a vault's settings in a YAML file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> CitewikiConfig:
        """Load settings; missing keys (or a missing file) take their defaults."""
        return load_config(self.path)

    def save(self, config: CitewikiConfig) -> None:
        """Write the full settings to the YAML file."""
        save_config(config, self.path)
        logger.info("Saved settings to %s", self.path)
