"""
Centralized configuration manager.
Loads a YAML config over built-in defaults and provides typed access.

    - Schema validation for critical config fields
    - Dot-path access with defaults
    - Reset support for testing
"""

import os
import copy
import yaml
import logging

logger = logging.getLogger(__name__)

_BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
_CONFIG_DIR = os.path.join(_BASE_DIR, "config")

_DEFAULTS = {
    "model": {
        "model_path": "assets/model.tflite",
        "labels_path": "assets/labels.txt",
        "num_threads": 1,
    },
    "smoothing": {
        "factor": 0.4,
        "stages": 3,
    },
    "recognition": {
        "top_k": 3,
        "report_order": "before_update",
    },
    "mediapipe": {
        "model_path": "",
        "max_num_hands": 2,
        "min_detection_confidence": 0.5,
        "min_presence_confidence": 0.5,
        "min_tracking_confidence": 0.5,
        "download": True,
    },
    "logging": {
        "level": "INFO",
        "file": None,
        "max_size_mb": 10,
        "backup_count": 3,
    },
}

# Schema: required sections and their expected types
_CONFIG_SCHEMA = {
    "model": {
        "model_path": str,
        "labels_path": str,
        "num_threads": int,
    },
    "smoothing": {
        "factor": float,
        "stages": int,
    },
    "recognition": {
        "top_k": int,
        "report_order": str,
    },
    "mediapipe": {
        "max_num_hands": int,
        "min_detection_confidence": float,
        "min_tracking_confidence": float,
    },
    "logging": {
        "level": str,
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base dict."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Singleton configuration manager."""

    _instance = None
    _data = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._data = copy.deepcopy(_DEFAULTS)
        return cls._instance

    def load(self, config_path=None):
        """Load configuration from a YAML file over the defaults."""
        config_path = config_path or os.path.join(_CONFIG_DIR, "config.yaml")

        try:
            with open(config_path, "r") as f:
                loaded = yaml.safe_load(f) or {}
            logger.info("Loaded config from %s", config_path)
        except FileNotFoundError:
            logger.warning("Config file not found: %s, using defaults", config_path)
            loaded = {}

        self._data = _deep_merge(copy.deepcopy(_DEFAULTS), loaded)

        # Validate schema
        self._validate()

        return self

    def _validate(self):
        """Validate critical config fields against schema."""
        warnings = []
        for section_name, fields in _CONFIG_SCHEMA.items():
            section = self._data.get(section_name)
            if not isinstance(section, dict):
                warnings.append(f"Section '{section_name}' should be a dict, got {type(section).__name__}")
                continue
            for field_name, expected_type in fields.items():
                if field_name in section:
                    value = section[field_name]
                    # Allow int where float is expected
                    if expected_type is float and isinstance(value, (int, float)) \
                            and not isinstance(value, bool):
                        continue
                    if not isinstance(value, expected_type):
                        warnings.append(
                            f"{section_name}.{field_name}: expected {expected_type.__name__}, "
                            f"got {type(value).__name__} ({value!r})"
                        )

        if warnings:
            for w in warnings:
                logger.warning("Config validation: %s", w)
        else:
            logger.debug("Config validation passed")
        return warnings

    def get(self, key_path: str, default=None):
        """Get nested config value using dot notation: 'model.num_threads'."""
        keys = key_path.split(".")
        value = self._data
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def get_section(self, section: str) -> dict:
        """Get an entire config section."""
        return self._data.get(section, {})

    def resolve_path(self, key_path: str):
        """Get a path setting, made absolute relative to the project root."""
        value = self.get(key_path)
        if not value:
            return value
        if os.path.isabs(value):
            return value
        return os.path.join(_BASE_DIR, value)

    @property
    def model(self) -> dict:
        return self._data.get("model", {})

    @property
    def smoothing(self) -> dict:
        return self._data.get("smoothing", {})

    @property
    def recognition(self) -> dict:
        return self._data.get("recognition", {})

    @property
    def mediapipe(self) -> dict:
        return self._data.get("mediapipe", {})

    @property
    def logging_settings(self) -> dict:
        return self._data.get("logging", {})

    @property
    def base_dir(self) -> str:
        return _BASE_DIR

    @classmethod
    def reset(cls):
        """Reset singleton instance (for testing)."""
        cls._instance = None
        cls._data = {}
