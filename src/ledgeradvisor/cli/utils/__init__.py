"""CLI utilities package."""

import datetime as dt
import random
from pathlib import Path
from typing import Optional, Tuple
import click
from ...config import AdvisorConfig, load_advisor_config
from ...contracts.records import Ledger
from ...dialogs.catalog import load_dialog_catalog
from ...ingest.ledger_loader import load_ledger
from ...nudges.engine import NudgeEngine
from ...state.store import StateStore
from ...utils.logging import get_logger
from .file_resolver import resolve_file_path

logger = get_logger("cli.utils")

DATE_FORMATS = ["%Y-%m-%d"]
DATETIME_FORMATS = ["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%d"]


def format_error(message: str, suggestion: Optional[str] = None) -> str:
    """
    Format error message with optional suggestion.

    Args:
        message: Error message
        suggestion: Optional suggestion or help text

    Returns:
        Formatted error string
    """
    error = f"❌ Error: {message}"
    if suggestion:
        error += f"\n💡 Tip: {suggestion}"
    return error


def get_config(ctx: click.Context) -> AdvisorConfig:
    """Load (once per invocation) the configuration selected by the global options."""
    obj = ctx.find_root().ensure_object(dict)
    if obj.get("config") is None:
        obj["config"] = load_advisor_config(obj.get("config_path"))
    return obj["config"]


def get_store(ctx: click.Context, config: AdvisorConfig) -> StateStore:
    """State store at ``--state``, or the configured/default location."""
    obj = ctx.find_root().ensure_object(dict)
    state_path = obj.get("state_path")
    path = Path(state_path).expanduser() if state_path else config.state.resolve_path()
    logger.debug(f"Using advisor state at {path}")
    return StateStore(path, history_limit=config.chat.history_limit)


def build_engine(config: AdvisorConfig, store: StateStore, rng: Optional[random.Random] = None) -> NudgeEngine:
    catalog = load_dialog_catalog(config.dialogs.path)
    return NudgeEngine(catalog, store, config.nudges, rng)


def load_ledger_arg(ledger_path: str) -> Tuple[Path, Ledger]:
    """Resolve and load a ledger given on the command line."""
    path = resolve_file_path(ledger_path)
    return path, load_ledger(path)


def as_date(value: Optional[dt.datetime]) -> dt.date:
    """Date from a click.DateTime option, defaulting to today."""
    return value.date() if value else dt.date.today()


def as_datetime(value: Optional[dt.datetime]) -> dt.datetime:
    return value or dt.datetime.now()


__all__ = [
    "format_error",
    "resolve_file_path",
    "get_config",
    "get_store",
    "build_engine",
    "load_ledger_arg",
    "as_date",
    "as_datetime",
    "DATE_FORMATS",
    "DATETIME_FORMATS",
]
