"""Configuration management for the face recognition processor."""
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class AppConfig:
    """Application configuration loaded from YAML."""

    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        self._config: Dict[str, Any] = data or {}

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "AppConfig":
        """Load configuration from YAML file."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f)
            instance = cls(data)
            logger.info(f"Loaded config from {config_path}")
            return instance
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML config: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated key."""
        keys = key.split(".")
        value = self._config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value by dot-separated key, creating sections."""
        keys = key.split(".")
        section = self._config
        for k in keys[:-1]:
            if not isinstance(section.get(k), dict):
                section[k] = {}
            section = section[k]
        section[keys[-1]] = value

    def get_processor_properties(self) -> Dict[str, Any]:
        """Get the raw processor property map (``processor`` section)."""
        return dict(self.get("processor", {}))

    def get_model_config(self, model_name: str) -> Dict[str, Any]:
        """Get configuration for a specific model."""
        models_config = self.get("recognition.models", {})
        return dict(models_config.get(model_name) or {})

    def get_model_param(self, model_name: str, param: str, default: Any = None) -> Any:
        """Get a specific parameter for a model.

        Args:
            model_name: Name of the model (algorithm name).
            param: Parameter name.
            default: Default value if parameter not found.

        Returns:
            Parameter value or default.
        """
        model_config = self.get_model_config(model_name)
        return model_config.get(param, default)

    def to_dict(self) -> Dict[str, Any]:
        """Get the entire configuration as a dictionary."""
        return dict(self._config)
