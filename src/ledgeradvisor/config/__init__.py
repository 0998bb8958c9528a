"""Configuration module: load and validate advisor settings."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field, ValidationError
from ..utils.errors import ConfigError
from ..utils.logging import get_logger
from .manager import load_config, save_config, read_yaml, deep_merge
from .paths import get_user_config_path, get_project_config_path, get_default_state_path, get_defaults_path

logger = get_logger("config")


class ChatSettings(BaseModel):
    """Chat responder and session tuning."""
    history_limit: int = Field(default=80, ge=0)
    prefix_probability: float = Field(default=0.4, ge=0, le=1)
    prefix_min_length: int = Field(default=30, ge=0)
    recent_records_limit: int = Field(default=10, ge=1)
    amount_tolerance: float = Field(default=1.0, ge=0)
    trend_months: int = Field(default=6, ge=2)
    thinking_base_ms: int = Field(default=300, ge=0)
    thinking_step_ms: int = Field(default=200, ge=0)


class NudgeSettings(BaseModel):
    """Thresholds used by the proactive nudge checks."""
    no_entry_cutoff_hour: int = Field(default=21, ge=0, le=24)
    entry_large_multiplier: float = Field(default=2.0, gt=0)
    entry_small_multiplier: float = Field(default=0.5, gt=0)
    budget_warning_percent: float = Field(default=80, gt=0, le=100)
    overspend_large_multiplier: float = Field(default=3.0, gt=0)
    overspend_large_min_count: int = Field(default=2, ge=1)
    streak_milestones: List[int] = Field(default_factory=lambda: [3, 7, 14, 30])
    monthly_summary_delay_ms: int = Field(default=2000, ge=0)


class StateSettings(BaseModel):
    path: Optional[str] = None

    def resolve_path(self) -> Path:
        if self.path:
            return Path(self.path).expanduser()
        return get_default_state_path()


class DialogSettings(BaseModel):
    path: Optional[str] = None


class AISettings(BaseModel):
    """Advisor provider selection and Ollama connection details."""
    provider: str = Field(default="rules")
    model: str = Field(default="llama3.2")
    base_url: str = Field(default="http://localhost:11434")
    timeout: float = Field(default=60, gt=0)


class AdvisorConfig(BaseModel):
    """Validated configuration tree."""
    chat: ChatSettings = Field(default_factory=ChatSettings)
    nudges: NudgeSettings = Field(default_factory=NudgeSettings)
    state: StateSettings = Field(default_factory=StateSettings)
    dialogs: DialogSettings = Field(default_factory=DialogSettings)
    ai: AISettings = Field(default_factory=AISettings)


def load_advisor_config(config_path: Optional[Union[str, Path]] = None) -> AdvisorConfig:
    """
    Load configuration: bundled defaults, then user/project files, then ``config_path``.

    Args:
        config_path: Optional explicit YAML file applied last

    Returns:
        Validated AdvisorConfig

    Raises:
        ConfigError: If a file is unreadable or the merged tree is invalid
    """
    tree: Dict[str, Any] = read_yaml(get_defaults_path())
    deep_merge(tree, load_config())

    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        deep_merge(tree, read_yaml(path))
        logger.info(f"Loaded configuration from {config_path}")

    try:
        return AdvisorConfig(**tree)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}")


__all__ = [
    "AdvisorConfig",
    "ChatSettings",
    "NudgeSettings",
    "StateSettings",
    "DialogSettings",
    "AISettings",
    "load_advisor_config",
    "load_config",
    "save_config",
    "get_user_config_path",
    "get_project_config_path",
]
