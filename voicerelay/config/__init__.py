"""Simple YAML configuration loader for VoiceRelay."""

import os
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "voicerelay.yaml"

DEFAULTS: Dict[str, Any] = {
    "server": {
        "host": "0.0.0.0",
        "port": 3000,
    },
    "relay": {
        "max_upload_bytes": 25 * 1024 * 1024,
    },
    "provider": {
        "endpoint": "https://api.groq.com/openai/v1/audio/transcriptions",
        "model": "whisper-large-v3",
        "response_format": "json",
        "language": "en",
        "prompt": "coding",
        "api_key_env": "GROQ_API_KEY",
    },
    "logging": {
        "level": "INFO",
        "file_path": "data/logs/voicerelay.log",
        "console_output": True,
        "console_level": "INFO",
    },
    "client": {
        "relay_url": "http://localhost:3000",
        "sample_rate": 16000,
        "channels": 1,
        "chunk_size": 1024,
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base, descending into nested dicts."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class VoiceRelayConfig:
    """VoiceRelay configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, uses voicerelay.yaml
                        from the current directory when present, built-in defaults otherwise.
        """
        if config_path is not None:
            self.config_file: Optional[Path] = Path(config_path)
            if not self.config_file.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_file}")
        elif Path(DEFAULT_CONFIG_FILE).exists():
            self.config_file = Path(DEFAULT_CONFIG_FILE)
        else:
            self.config_file = None

        if self.config_file is None:
            logger.info("No configuration file found, using defaults")
            self.config = copy.deepcopy(DEFAULTS)
        else:
            logger.info(f"Loading configuration from: {self.config_file}")
            self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)

            if not config:
                raise ValueError("Configuration file is empty")
            if not isinstance(config, dict):
                raise ValueError("Configuration file must contain a mapping")

            config = _deep_merge(DEFAULTS, config)
            self._resolve_paths(config)

            logger.info("Configuration loaded successfully")
            return config

        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")
        except ValueError:
            raise
        except Exception as e:
            raise ValueError(f"Failed to load configuration: {e}")

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        if 'logging' in config and 'file_path' in config['logging']:
            log_path = config['logging']['file_path']
            if not os.path.isabs(log_path):
                config['logging']['file_path'] = str(config_dir / log_path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'provider.model').

        Args:
            key_path: Dot-separated key path (e.g., 'server.port')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'server.port')
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_api_key(self) -> str:
        """Get the provider API key from the environment - CRASHES if not set."""
        env_name = self.get('provider.api_key_env', 'GROQ_API_KEY')
        api_key = os.environ.get(env_name)
        if not api_key:
            raise ValueError(f"{env_name} environment variable is required")
        return api_key

    def get_max_upload_bytes(self) -> int:
        """Get the upload size ceiling in bytes."""
        return int(self.get('relay.max_upload_bytes', DEFAULTS['relay']['max_upload_bytes']))
