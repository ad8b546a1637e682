"""
Configuration Loader for true-iso

Loads configuration from YAML file.
Provides singleton access to configuration.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
import os

from .models import CorrectionConfig, create_correction_config_from_dict


DEFAULT_CONFIG_PATH = Path(__file__).parent / "correction_config.yaml"
ENV_PREFIX = "TRUEISO_"


class ConfigLoader:
    """Singleton configuration loader."""

    _instance: Optional['ConfigLoader'] = None
    _config: Optional[Dict[str, Any]] = None
    _config_path: Path = DEFAULT_CONFIG_PATH

    def __new__(cls, config_path: Optional[Union[str, Path]] = None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        if config_path is not None and Path(config_path) != self._config_path:
            self._config_path = Path(config_path)
            self._config = None
        if self._config is None:
            self._load_config()

    @property
    def config_path(self) -> Path:
        return self._config_path

    def _load_config(self):
        """Load configuration from YAML file."""
        config_path = self._config_path

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            self._config = yaml.safe_load(f) or {}

        self._apply_env_overrides()

    def _apply_env_overrides(self):
        """Apply environment variable overrides to config."""
        # Example: TRUEISO_CORRECTION_VOTE_THRESHOLD=30
        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                config_key = key[len(ENV_PREFIX):].lower()

                parts = self._parse_config_path(config_key)

                if parts:
                    self._set_nested_value(self._config, parts, value)

    def _parse_config_path(self, env_key: str) -> list:
        """
        Parse environment variable key into config path parts.

        Handles underscores in key names by matching against actual YAML structure.

        Args:
            env_key: Environment variable key without prefix (e.g., "correction_vote_threshold")

        Returns:
            List of path parts (e.g., ["correction", "vote_threshold"])
        """
        all_parts = env_key.split('_')

        # Match the longest key at each level
        current = self._config
        result = []
        i = 0

        while i < len(all_parts):
            matched = False
            for length in range(len(all_parts) - i, 0, -1):
                candidate_key = '_'.join(all_parts[i:i+length])

                if isinstance(current, dict) and candidate_key in current:
                    result.append(candidate_key)
                    current = current[candidate_key]
                    i += length
                    matched = True
                    break

            if not matched:
                return []

        return result

    def _set_nested_value(self, config: Dict, parts: list, value: str):
        """Set nested configuration value."""
        current = config
        for part in parts[:-1]:
            if part in current and isinstance(current[part], dict):
                current = current[part]
            else:
                return

        key = parts[-1]
        if key in current:
            # Keep the YAML type
            original_type = type(current[key])
            try:
                if original_type == bool:
                    current[key] = value.lower() in ('true', '1', 'yes')
                elif original_type == int:
                    current[key] = int(value)
                elif original_type == float:
                    current[key] = float(value)
                elif original_type == list:
                    current[key] = [float(v) for v in value.split(',')]
                else:
                    current[key] = value
            except ValueError:
                current[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., "correction.vote_threshold")
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config = ConfigLoader()
            >>> config.get("correction.vote_threshold")
            40
        """
        parts = key.split('.')
        current = self._config

        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get entire configuration section.

        Args:
            section: Section name (e.g., "correction", "logging")

        Returns:
            Configuration section as dictionary
        """
        return self.get(section, {})

    def reload(self):
        """Reload configuration from file."""
        self._config = None
        self._load_config()


# Singleton instance
_loader: Optional[ConfigLoader] = None


def get_config(config_path: Optional[Union[str, Path]] = None) -> ConfigLoader:
    """
    Get singleton configuration loader instance.

    Args:
        config_path: Optional YAML file replacing the packaged defaults

    Returns:
        ConfigLoader instance

    Example:
        >>> from true_iso.config import get_config
        >>> config = get_config()
        >>> threshold = config.get("correction.alpha_threshold")
    """
    global _loader
    if _loader is None or config_path is not None:
        _loader = ConfigLoader(config_path)
    return _loader


def reload_config():
    """
    Reload configuration from file.

    Use this after modifying the YAML file or the environment.
    """
    global _loader
    if _loader is not None:
        _loader.reload()
    else:
        _loader = ConfigLoader()


def get_correction_config(config_path: Optional[Union[str, Path]] = None) -> CorrectionConfig:
    """
    Build a validated CorrectionConfig from the 'correction' section.

    Args:
        config_path: Optional YAML file replacing the packaged defaults

    Returns:
        CorrectionConfig instance
    """
    return create_correction_config_from_dict(get_config(config_path).get_section('correction'))
