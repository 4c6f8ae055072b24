# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Configuration loading and validation for pbxgraph."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".pbxgraph.yml"


class Config:
    """Configuration for reading and writing project files.

    Loads configuration from .pbxgraph.yml with validation and defaults.
    """

    DEFAULTS = {
        "overwrite": False,
        "check_integrity_on_write": True,
        "section_comments": True,
        "reference_comments": True,
        "scrub_references_on_remove": True,
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_path: Path to configuration file. If None, uses default location.
        """
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILE_NAME

        self.config_path = config_path
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load and validate configuration from file."""
        if not self.config_path.exists():
            logger.info(f"Configuration file not found at {self.config_path}, using defaults")
            self._config = self.DEFAULTS.copy()
            return

        try:
            with open(self.config_path, encoding="utf-8") as f:
                loaded_config = yaml.safe_load(f)

            if loaded_config is None:
                logger.warning("Configuration file is empty, using defaults")
                self._config = self.DEFAULTS.copy()
                return

            if not isinstance(loaded_config, dict):
                logger.warning(
                    f"Configuration file must contain a YAML dictionary, "
                    f"got {type(loaded_config)}, using defaults"
                )
                self._config = self.DEFAULTS.copy()
                return

            self._config = self.DEFAULTS.copy()
            self._validate_and_merge(loaded_config)

        except yaml.YAMLError as e:
            logger.warning(
                f"Error parsing configuration file {self.config_path}: {e}, using defaults"
            )
            self._config = self.DEFAULTS.copy()
        except OSError as e:
            logger.warning(
                f"Could not read configuration file {self.config_path}: {e}, using defaults"
            )
            self._config = self.DEFAULTS.copy()

    def _validate_and_merge(self, loaded_config: Dict[str, Any]) -> None:
        """Validate loaded configuration and merge with defaults.

        Invalid parameters are logged as warnings and defaults are used.
        """
        for key, value in loaded_config.items():
            if key not in self.DEFAULTS:
                logger.warning(f"Unknown configuration parameter '{key}', ignoring")
                continue

            if not isinstance(value, type(self.DEFAULTS[key])):
                logger.warning(
                    f"Invalid value for '{key}': {value}, using default {self.DEFAULTS[key]}"
                )
                continue

            self._config[key] = value

    def _get_bool(self, key: str) -> bool:
        value = self._config[key]
        assert isinstance(value, bool)
        return value

    @property
    def overwrite(self) -> bool:
        """Whether writes replace an existing project file by default."""
        return self._get_bool("overwrite")

    @property
    def check_integrity_on_write(self) -> bool:
        """Whether to refuse writing a graph with dangling references."""
        return self._get_bool("check_integrity_on_write")

    @property
    def section_comments(self) -> bool:
        """Whether to write "Begin/End <isa> section" markers."""
        return self._get_bool("section_comments")

    @property
    def reference_comments(self) -> bool:
        """Whether to write display-name comments after identifiers."""
        return self._get_bool("reference_comments")

    @property
    def scrub_references_on_remove(self) -> bool:
        """Whether removing an object also drops it from ordered member lists."""
        return self._get_bool("scrub_references_on_remove")

    def to_dict(self) -> Dict[str, Any]:
        """Return the effective configuration."""
        return dict(self._config)
