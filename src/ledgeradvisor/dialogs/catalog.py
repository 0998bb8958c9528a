"""Dialog catalog: the advisor persona and its canned nudge messages."""

import random
from pathlib import Path
from typing import Dict, List, Optional, Union
import yaml
from pydantic import BaseModel, Field, ValidationError
from ..contracts.chat import AdvisorProfile
from ..utils.errors import DialogCatalogError
from ..utils.logging import get_logger

logger = get_logger("dialogs.catalog")

BUNDLED_CATALOG_PATH = Path(__file__).parent / "dialogs.yaml"


class DialogCatalog(BaseModel):
    """Persona profile plus dialog key -> candidate messages."""
    advisor_profile: AdvisorProfile = Field(default_factory=AdvisorProfile)
    dialogs: Dict[str, List[str]] = Field(default_factory=dict)

    def has(self, dialog_key: str) -> bool:
        return bool(self.dialogs.get(dialog_key))

    def pick(self, dialog_key: str, rng: Optional[random.Random] = None) -> Optional[str]:
        """Random message for ``dialog_key``, or None when there is none."""
        messages = self.dialogs.get(dialog_key)
        if not messages:
            return None
        return (rng or random).choice(messages)


def default_catalog() -> DialogCatalog:
    """Minimal catalog used when the configured one cannot be loaded."""
    return DialogCatalog(
        advisor_profile=AdvisorProfile(
            id="mori",
            name="小森",
            tone="calm_warm",
            principles=["no_judgement", "fact_based", "user_respect"],
        ),
        dialogs={
            "daily_open_normal": ["今天的花費還不多，狀況穩定。"],
            "entry_small": ["已記錄。"],
            "entry_medium": ["這筆金額我已標記。"],
            "entry_large": ["這是本月目前最大的一筆支出。"],
            "budget_80": ["這個分類本月剩餘不多。"],
            "budget_over": ["已超過原先設定的預算。"],
            "income_normal": ["收入已記錄。"],
            "income_dividend": ["股息已入帳。"],
            "monthly_good": ["這個月整體控制得不錯。"],
            "monthly_high": ["本月支出比上月高。"],
            "no_entry_today": ["今天還沒有記帳紀錄。"],
        },
    )


def read_dialog_catalog(path: Union[str, Path]) -> DialogCatalog:
    """
    Read and validate a catalog file.

    Raises:
        DialogCatalogError: If the file is missing or malformed
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DialogCatalogError(f"Invalid YAML in dialog catalog {path}: {e}")
    except OSError as e:
        raise DialogCatalogError(f"Error reading dialog catalog {path}: {e}")

    if not isinstance(data, dict):
        raise DialogCatalogError(f"Dialog catalog {path} must contain a dictionary")

    try:
        return DialogCatalog(**data)
    except ValidationError as e:
        raise DialogCatalogError(f"Invalid dialog catalog {path}: {e}")


def load_dialog_catalog(path: Optional[Union[str, Path]] = None) -> DialogCatalog:
    """
    Load the dialog catalog, falling back to the built-in defaults on failure.

    Args:
        path: Catalog YAML file (defaults to the bundled dialogs.yaml)
    """
    path = Path(path) if path else BUNDLED_CATALOG_PATH
    try:
        catalog = read_dialog_catalog(path)
    except DialogCatalogError as e:
        logger.error(f"Failed to load dialog catalog, using defaults: {e}")
        return default_catalog()

    logger.debug(f"Loaded {len(catalog.dialogs)} dialog keys from {path}")
    return catalog
