"""
Configuration management for the Astronomy Picture panel.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

_LOG = logging.getLogger(__name__)

DEMO_API_KEY = "DEMO_KEY"
APOD_START_DATE = "2010-02-01"

DEFAULT_CONFIG = {
    "api_key": "",
    "panel_id": "apod-jupyterlab",
    "panel_title": "Astronomy Picture"
}


def default_config_path() -> str:
    """Config file location, overridable with APOD_PANEL_CONFIG."""
    env_path = os.getenv("APOD_PANEL_CONFIG")
    if env_path:
        return env_path
    base = os.getenv("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, "apod_panel", "config.json")


class Config:
    """Configuration management for the APOD panel."""

    def __init__(self, config_file_path: Optional[str] = None):
        """Initialize configuration."""
        self._config_file_path = config_file_path or default_config_path()
        self._config: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load configuration from file."""
        try:
            if os.path.exists(self._config_file_path):
                with open(self._config_file_path, "r", encoding="utf-8") as file:
                    self._config = {**DEFAULT_CONFIG, **json.load(file)}
                    _LOG.info("Configuration loaded from %s", self._config_file_path)
            else:
                _LOG.info("Configuration file not found, using defaults")
                self._config = DEFAULT_CONFIG.copy()
        except (OSError, ValueError) as ex:
            _LOG.error("Failed to load configuration: %s", ex)
            self._config = DEFAULT_CONFIG.copy()

    def save(self) -> None:
        """Save configuration to file."""
        try:
            directory = os.path.dirname(self._config_file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self._config_file_path, "w", encoding="utf-8") as file:
                json.dump(self._config, file, indent=2)
                _LOG.info("Configuration saved to %s", self._config_file_path)
        except OSError as ex:
            _LOG.error("Failed to save configuration: %s", ex)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value."""
        self._config[key] = value

    def update(self, data: Dict[str, Any]) -> None:
        """Update configuration with new data."""
        self._config.update(data)
        self.save()

    @property
    def api_key(self) -> str:
        """Get NASA API key, falling back to NASA_API_KEY and then DEMO_KEY."""
        return self._config.get("api_key") or os.getenv("NASA_API_KEY") or DEMO_API_KEY

    @property
    def panel_id(self) -> str:
        return self._config.get("panel_id", "apod-jupyterlab")

    @property
    def panel_title(self) -> str:
        return self._config.get("panel_title", "Astronomy Picture")
