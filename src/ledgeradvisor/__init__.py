"""ledger-advisor - 小森 (Mori), a read-only advisor for bookkeeping records."""

import datetime as dt
from pathlib import Path
from typing import Optional, Union
from .advisor import get_advisor
from .config import load_advisor_config
from .ingest.ledger_loader import load_ledger
from .utils.errors import AdvisorError, LedgerAdvisorError
from .utils.logging import get_logger

__version__ = "0.1.0"

__all__ = ["ask"]

logger = get_logger("ledgeradvisor")


def ask(
    ledger_path: Union[str, Path],
    question: str,
    provider: Optional[str] = None,
    config_path: Optional[str] = None,
    today: Optional[dt.date] = None,
) -> str:
    """Answer one question about a ledger file."""
    try:
        config = load_advisor_config(config_path)
        ledger = load_ledger(ledger_path)
        advisor = get_advisor(provider, config)
        if advisor is None:
            raise AdvisorError("Advisor is disabled (provider 'none')")
        return advisor.ask(ledger, question, today)
    except LedgerAdvisorError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error while answering: {e}", exc_info=True)
        raise LedgerAdvisorError(f"Advisor failed: {e}") from e
