"""Configuration management with file persistence and change callbacks."""

import json
import os
from dataclasses import asdict, fields
from typing import Optional, Dict, Any, Callable, List

from .models.config import SecurityConfig
from .config.defaults import DEFAULT_CONFIG, DEFAULT_PATHS, SYSTEM_CONSTANTS, VALID_LOG_LEVELS
from .logging_config import get_logger
from .utils import write_json_atomic

logger = get_logger("config_manager")

_TUPLE_FIELDS = ("min_detection_size", "max_detection_size")


class ConfigManager:
    """Manages security configuration stored as a JSON file."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or DEFAULT_PATHS["config_file"]
        self._config: Optional[SecurityConfig] = None
        self._config_change_callbacks: List[Callable[[SecurityConfig], None]] = []

        self.load_config()

    def load_config(self) -> SecurityConfig:
        """Load configuration from file or create default."""
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r') as f:
                    config_dict = json.load(f)
                if not isinstance(config_dict, dict):
                    raise ValueError(f"expected a JSON object, got {type(config_dict).__name__}")
                self._config = self._from_dict(config_dict)
            except (json.JSONDecodeError, TypeError, ValueError) as e:
                logger.warning(f"Error loading config: {e}. Using defaults.")
                self._config = SecurityConfig()
        else:
            self._config = SecurityConfig()
            self.save_config()

        return self._config

    def save_config(self) -> None:
        """Save current configuration to file."""
        if self._config is None:
            return

        config_dict = asdict(self._config)
        for key in _TUPLE_FIELDS:
            config_dict[key] = list(config_dict[key])

        write_json_atomic(self.config_path, config_dict)

    def get_config(self) -> SecurityConfig:
        """Get current configuration."""
        if self._config is None:
            return self.load_config()
        return self._config

    def update_config(self, **kwargs) -> None:
        """Update configuration with new values. Unknown keys are ignored."""
        if self._config is None:
            self.load_config()

        for key, value in kwargs.items():
            if hasattr(self._config, key):
                if key in _TUPLE_FIELDS:
                    value = tuple(value)
                setattr(self._config, key, value)
            else:
                logger.debug(f"Ignoring unknown config key: {key}")

        self.save_config()

        for callback in self._config_change_callbacks:
            try:
                callback(self._config)
            except Exception as e:
                logger.error(f"Error in config change callback: {e}")

    def validate_config(self) -> bool:
        """Validate current configuration."""
        if self._config is None:
            return False

        threshold = self._config.image_confidence_threshold
        if not (SYSTEM_CONSTANTS["MIN_CONFIDENCE_THRESHOLD"] <= threshold
                <= SYSTEM_CONSTANTS["MAX_CONFIDENCE_THRESHOLD"]):
            return False

        if self._config.scale_factor <= 1.0 or self._config.min_neighbors < 0:
            return False

        min_w, min_h = self._config.min_detection_size
        max_w, max_h = self._config.max_detection_size
        if min_w <= 0 or min_h <= 0 or max_w < min_w or max_h < min_h:
            return False

        if self._config.log_level.upper() not in VALID_LOG_LEVELS:
            return False

        return True

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""
        self._config = self._from_dict(DEFAULT_CONFIG)
        self.save_config()

    def add_config_change_callback(self, callback: Callable[[SecurityConfig], None]) -> None:
        """Register a callback invoked after every update."""
        self._config_change_callbacks.append(callback)

    def _from_dict(self, config_dict: Dict[str, Any]) -> SecurityConfig:
        known = {f.name for f in fields(SecurityConfig)}
        values = {key: value for key, value in config_dict.items() if key in known}
        for key in _TUPLE_FIELDS:
            if key in values:
                values[key] = tuple(values[key])
        return SecurityConfig(**values)
