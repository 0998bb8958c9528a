"""Two-tier configuration manager (user + project override)."""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from .paths import get_user_config_path, get_project_config_path
from ..utils.errors import ConfigError
from ..utils.logging import get_logger

logger = get_logger("config.manager")


def load_config() -> Dict[str, Any]:
    """
    Load full config tree with project override.

    Returns:
        Configuration dictionary (project config overrides user config)
    """
    user_config_path = get_user_config_path()
    project_config_path = get_project_config_path()

    config: Dict[str, Any] = {}
    if user_config_path.exists():
        try:
            config = read_yaml(user_config_path)
        except ConfigError as e:
            logger.warning(f"Could not load user config from {user_config_path}: {e}")

    if project_config_path:
        try:
            deep_merge(config, read_yaml(project_config_path))
            logger.info(f"Loaded project config from {project_config_path}")
        except ConfigError as e:
            logger.warning(f"Could not load project config from {project_config_path}: {e}")

    return config


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> None:
    """
    Save config to specified path (defaults to user config).

    Args:
        config: Configuration dictionary to save
        path: Optional path to save to (defaults to user config)
    """
    if path is None:
        path = get_user_config_path()

    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        logger.info(f"Saved config to {path}")
    except OSError as e:
        raise ConfigError(f"Failed to save config to {path}: {e}")


def read_yaml(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping; an empty file is an empty mapping."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Error reading config file {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a dictionary")
    return data


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Deep merge override into base (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
