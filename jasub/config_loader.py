"""Handles loading configuration from YAML files."""

import yaml
import os
import logging
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'model_path': './models/kotoba-whisper.pt',
    'language': 'ja',
    'device': 'cpu',
    'whisper_fp16': True,
    'whisper_verbose': True,
    'ffmpeg_path': None,
    'decode_timeout_seconds': None,
    'read_chunk_size': 4096,
    'temp_dir': '.',
    'log_dir': 'logs',
    'log_file': 'jasub.log',
}

# Accepted types per key; None is allowed only where listed.
_CONFIG_TYPES = {
    'model_path': (str,),
    'language': (str,),
    'device': (str,),
    'whisper_fp16': (bool,),
    'whisper_verbose': (bool, type(None)),
    'ffmpeg_path': (str, type(None)),
    'decode_timeout_seconds': (int, float, type(None)),
    'read_chunk_size': (int,),
    'temp_dir': (str,),
    'log_dir': (str,),
    'log_file': (str,),
}

class ConfigLoader:
    """Loads configuration settings from a YAML file."""

    def load_config(self, config_path: str) -> dict:
        """
        Loads configuration from the specified YAML file path.

        Values from the file override DEFAULT_CONFIG. A missing file is not an
        error: the defaults are returned and a warning is logged.

        Args:
            config_path: The path to the YAML configuration file.

        Returns:
            A dictionary containing the loaded configuration settings.

        Raises:
            ConfigurationError: If the file cannot be parsed as YAML, is not a
                              mapping, or holds unknown keys or values of the
                              wrong type.
        """
        config = dict(DEFAULT_CONFIG)
        logger.info(f"Attempting to load configuration from: {config_path}")
        if not os.path.exists(config_path):
            logger.warning(f"Configuration file not found at {config_path}, using defaults.")
            return config
        if not os.path.isfile(config_path):
             logger.error(f"Configuration path is not a file: {config_path}")
             raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except IOError as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if loaded is None:
            logger.warning(f"Configuration file {config_path} is empty, using defaults.")
            return config
        if not isinstance(loaded, dict):
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")

        config.update(loaded)
        self.validate(config)
        logger.info(f"Configuration loaded successfully from {config_path}")
        return config

    @staticmethod
    def validate(config: dict) -> None:
        """Checks keys and value types. Raises ConfigurationError on the first problem."""
        unknown = sorted(set(config) - set(_CONFIG_TYPES))
        if unknown:
            raise ConfigurationError(f"Unknown configuration key(s): {', '.join(unknown)}")
        for key, allowed in _CONFIG_TYPES.items():
            value = config.get(key)
            # bool is an int subclass; only accept it where bool is listed
            if isinstance(value, bool) and bool not in allowed:
                raise ConfigurationError(f"Configuration key '{key}' has invalid value {value!r}")
            if not isinstance(value, allowed):
                raise ConfigurationError(f"Configuration key '{key}' has invalid value {value!r}")
        if config['device'] not in ('cuda', 'cpu'):
            raise ConfigurationError(f"Configuration key 'device' must be 'cuda' or 'cpu', got {config['device']!r}")
        if config['read_chunk_size'] <= 0:
            raise ConfigurationError("Configuration key 'read_chunk_size' must be positive")
        timeout = config['decode_timeout_seconds']
        if timeout is not None and timeout <= 0:
            raise ConfigurationError("Configuration key 'decode_timeout_seconds' must be positive or null")
