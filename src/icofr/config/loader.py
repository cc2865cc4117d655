"""Configuration loader for the ICOFR rules service and CLI.

Provides centralized access to ambient settings (logging, form defaults,
service role). Regulatory tables are fixed in code and are not read from
here; the calculators never consult this module.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml

logger = structlog.get_logger(__name__)

CONFIG_FILE = Path(__file__).parent / "rules_config.yaml"
CONFIG_ENV_VAR = "ICOFR_RULES_CONFIG"


class ConfigLoader:
    """Loads and provides access to rules configuration."""

    _instance: Optional[ConfigLoader] = None
    _config: Optional[dict[str, Any]] = None

    def __new__(cls) -> ConfigLoader:
        """Singleton pattern - ensure only one config instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize config loader (only runs once due to singleton)."""
        if self._config is None:
            self._load_config()

    @staticmethod
    def config_path() -> Path:
        """Config file path; ICOFR_RULES_CONFIG overrides the packaged file."""
        override = os.getenv(CONFIG_ENV_VAR)
        return Path(override) if override else CONFIG_FILE

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        path = self.config_path()
        if path.exists():
            with open(path, encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug("config_loaded", path=str(path))
        else:
            logger.warning("config_file_not_found", path=str(path))
            self._config = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-notation key.

        Examples:
            config.get("logging.level")
            config.get("materiality.defaults.haircut")
            config.get("nonexistent.key", default=100)
        """
        if not self._config:
            return default

        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def get_section(self, section: str) -> dict[str, Any]:
        """Get entire configuration section."""
        return self.get(section, default={})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._config = None
        self._load_config()


def get_config() -> ConfigLoader:
    """Get the global config instance."""
    return ConfigLoader()


def get_log_level() -> str:
    """Log level, ICOFR_LOG_LEVEL first, then the config file."""
    return os.getenv("ICOFR_LOG_LEVEL") or get_config().get("logging.level", "INFO")


def get_default_role() -> str:
    """Role used by the service when none is given explicitly."""
    return os.getenv("ICOFR_ROLE") or get_config().get("service.default_role", "Line 1")


def get_materiality_defaults() -> dict[str, Any]:
    """Default values for the materiality form."""
    defaults = {
        "benchmark": "Pre-Tax Income",
        "percentage": 5.0,
        "haircut": 25.0,
        "location_count": 1,
    }
    defaults.update(get_config().get("materiality.defaults", default={}))
    return defaults
