"""Config path resolution for the two-tier config system."""

from pathlib import Path
from typing import Optional

APP_DIR_NAME = ".ledgeradvisor"


def get_user_dir() -> Path:
    """Get the per-user directory: ~/.ledgeradvisor"""
    return Path.home() / APP_DIR_NAME


def get_user_config_path() -> Path:
    """Get user config path: ~/.ledgeradvisor/config.yaml"""
    return get_user_dir() / "config.yaml"


def get_project_config_path() -> Optional[Path]:
    """Get project config path: .ledgeradvisor/config.yaml (from current working directory)"""
    project_config = Path.cwd() / APP_DIR_NAME / "config.yaml"
    if project_config.exists():
        return project_config
    return None


def get_default_state_path() -> Path:
    """Get the default advisor state file: ~/.ledgeradvisor/state.json"""
    return get_user_dir() / "state.json"


def get_defaults_path() -> Path:
    """Bundled defaults shipped with the package."""
    return Path(__file__).parent / "defaults.yaml"
