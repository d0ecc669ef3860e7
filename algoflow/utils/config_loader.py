# algoflow/utils/config_loader.py
"""
Configuration loading utilities with environment variable support.
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..models.config import AppConfig


DEFAULT_CONFIG_PATH = "configs/config.yaml"
CONFIG_PATH_ENV = "ALGOFLOW_CONFIG"


def substitute_env_vars(config_str: str) -> str:
    """
    Substitute environment variables in config string.

    Args:
        config_str: Configuration string with ${VAR_NAME} or
            ${VAR_NAME:default} placeholders

    Returns:
        Configuration string with environment variables substituted
    """
    pattern = r'\$\{([^}]+)\}'

    def replacer(match):
        var_name = match.group(1)
        if ':' in var_name:
            var_name, default_value = var_name.split(':', 1)
            return os.getenv(var_name, default_value)
        return os.getenv(var_name, match.group(0))  # Keep original if not found

    return re.sub(pattern, replacer, config_str)


def _read_yaml_mapping(config_path: str) -> Dict[str, Any]:
    """Read YAML file into a mapping with environment substitution."""
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_file, 'r', encoding='utf-8') as f:
        config_content = f.read()

    config_data = yaml.safe_load(substitute_env_vars(config_content))

    if config_data is None:
        return {}
    if not isinstance(config_data, dict):
        raise ValueError("Configuration file must contain a YAML mapping")

    return config_data


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries where override wins."""
    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_path: Optional[str] = None,
    base_config_path: Optional[str] = None,
) -> AppConfig:
    """
    Load configuration from YAML with environment variable substitution.

    Resolution order for the file: explicit ``config_path``, then
    ``$ALGOFLOW_CONFIG``, then ``configs/config.yaml``. When
    ``base_config_path`` exists it is loaded first and the file's
    values override it.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the config file is invalid YAML
        ValueError: If the configuration is invalid
    """
    path = config_path or os.getenv(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH

    try:
        config_data = _read_yaml_mapping(path)

        if base_config_path and Path(base_config_path).exists():
            config_data = _merge_dicts(_read_yaml_mapping(base_config_path), config_data)

        return AppConfig(**config_data)

    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Invalid YAML in configuration file: {e}")
    except FileNotFoundError:
        raise
    except Exception as e:
        raise ValueError(f"Error loading configuration: {e}") from e


def save_config(config: AppConfig, config_path: str = DEFAULT_CONFIG_PATH) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration object to save
        config_path: Destination path
    """
    path_obj = Path(config_path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)

    with open(path_obj, 'w', encoding='utf-8') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2)


def get_default_config() -> AppConfig:
    """
    Get default configuration for development/testing.

    Returns:
        Default configuration object
    """
    default_config = {
        "broker": {
            "default_broker": "dhan",
            "timeout_ms": 30000,
            "dry_run": True,
        },
        "backtest": {
            "initial_capital": 100000.0,
            "interval": "1d",
            "default_lookback": 50,
            "show_progress": False,
            "results_dir": "results",
        },
        "ui": {
            "host": "0.0.0.0",
            "port": 8000,
            "title": "algoflow",
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "file": None,
        },
    }

    return AppConfig(**default_config)
