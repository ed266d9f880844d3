"""
load the config from config.yaml and .env
"""

import os
import yaml
from dotenv import find_dotenv, load_dotenv
from pathlib import Path
from typing import Dict, Any

from .auth import AuthCredentials


class Config:
    """Configuration loader that reads from config.yaml and environment variables."""

    # Values that must stay strings even when they look numeric
    STRING_KEYS = {('marvel', 'public_key'), ('marvel', 'private_key'), ('marvel', 'base_url'),
                   ('fetcher', 'user_agent')}

    def __init__(self, config_path: str = None, env_file: str = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to config.yaml file. If None, looks for config.yaml
                        in the same directory as this module.
            env_file: Optional .env file to load before applying overrides.
                        If None, the nearest .env found walking up from the
                        working directory is loaded.
        """
        if config_path is None:
            config_path = Path(__file__).parent / "config.yaml"

        self.config_path = Path(config_path)
        self.env_file = env_file
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file and override with environment variables."""
        try:
            with open(self.config_path, 'r') as f:
                config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        # Existing environment variables win over the .env file
        load_dotenv(self.env_file or find_dotenv(usecwd=True))

        return self._apply_env_overrides(config)

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        env_mappings = {
            'MARVEL_BASE_URL': ('marvel', 'base_url'),
            'MARVEL_PUBLIC_KEY': ('marvel', 'public_key'),
            'MARVEL_PRIVATE_KEY': ('marvel', 'private_key'),
            'FETCHER_USER_AGENT': ('fetcher', 'user_agent'),
            'FETCHER_TIMEOUT': ('fetcher', 'timeout'),
            'LOG_LEVEL': ('logging', 'level'),
            'LOG_JSON': ('logging', 'json'),
        }

        for env_var, config_path in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                current = config
                for key in config_path[:-1]:
                    if not isinstance(current.get(key), dict):
                        current[key] = {}
                    current = current[key]

                final_key = config_path[-1]
                if config_path in self.STRING_KEYS:
                    current[final_key] = env_value
                else:
                    current[final_key] = self._convert_env_value(env_value)

        return config

    def _convert_env_value(self, value: str):
        """Convert environment variable string to appropriate Python type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get(self, *keys, default=None):
        """Get configuration value using dot notation.

        Args:
            *keys: Configuration keys (e.g., 'marvel', 'public_key')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        current = self._config
        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    @property
    def marvel(self) -> Dict[str, Any]:
        """Get Marvel API configuration."""
        return self.get('marvel', default={})

    @property
    def fetcher(self) -> Dict[str, Any]:
        """Get HTTP fetcher configuration."""
        return self.get('fetcher', default={})

    @property
    def logging(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return self.get('logging', default={})

    @property
    def credentials(self) -> AuthCredentials:
        """Public and private API keys; both are required."""
        public_key = self.marvel.get('public_key')
        private_key = self.marvel.get('private_key')
        if not public_key or not private_key:
            raise ValueError("Missing marvel.public_key or marvel.private_key (set MARVEL_PUBLIC_KEY / MARVEL_PRIVATE_KEY)")
        return AuthCredentials(public_key=str(public_key), private_key=str(private_key))


_config = None


def get_config() -> Config:
    """Global configuration instance, loaded on first use."""
    global _config
    if _config is None:
        _config = Config()
    return _config
