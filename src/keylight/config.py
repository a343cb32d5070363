"""
Controller configuration for the Key Light library
Reads optional setting overrides from a JSON file using XDG standards
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from keylight.core.settings_schema import (
    SETTING_KEYS,
    ControllerSettings,
    defaults_dict,
    from_dict,
)

_LOGGER = logging.getLogger(__name__)


class ControllerConfig:
    """Loads controller settings following the XDG Base Directory standard"""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self._get_config_path()
        self._defaults = defaults_dict()
        self.config_data = self._load_config()

    def _get_config_path(self) -> Path:
        """Get configuration file path following XDG standards"""
        # Use XDG_CONFIG_HOME if set, otherwise default to ~/.config
        config_home = os.environ.get('XDG_CONFIG_HOME')
        if config_home:
            config_dir = Path(config_home) / 'keylight-control'
        else:
            config_dir = Path.home() / '.config' / 'keylight-control'
        return config_dir / 'settings.json'

    def _load_config(self) -> Dict[str, Any]:
        """Load overrides from file, return an empty mapping if there are none"""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            _LOGGER.warning("Error loading config from %s: %s", self.config_path, e)
            return {}

        # Validate config structure
        settings = config.get('settings') if isinstance(config, dict) else None
        if not isinstance(settings, dict):
            _LOGGER.warning("Invalid config structure in %s, using defaults", self.config_path)
            return {}

        for key in settings:
            if key not in SETTING_KEYS:
                _LOGGER.warning("Ignoring unknown setting %r in %s", key, self.config_path)
        return {k: v for k, v in settings.items() if k in SETTING_KEYS}

    def get(self, key: str, default: Any = None) -> Any:
        if key in self.config_data:
            return self.config_data[key]
        return self._defaults.get(key, default)

    def settings(self) -> ControllerSettings:
        """Build controller settings, falling back to defaults on bad values"""
        try:
            return from_dict({key: self.get(key) for key in SETTING_KEYS})
        except (TypeError, ValueError) as e:
            _LOGGER.warning("Invalid setting value in %s: %s, using defaults", self.config_path, e)
            return ControllerSettings()


def load_settings(config_path: Optional[Path] = None) -> ControllerSettings:
    return ControllerConfig(config_path).settings()
