"""Advisor entry points: the rule-based advisor and provider selection."""

import datetime as dt
import random
from typing import Optional
from .ai.base import Advisor
from .config import AdvisorConfig
from .chat.responder import AdvisorResponder
from .contracts.records import Ledger
from .utils.errors import AdvisorNotImplementedError
from .utils.logging import get_logger

logger = get_logger("advisor")

PROVIDERS = ("rules", "ollama", "none")


class RuleAdvisor(Advisor):
    """Deterministic keyword-routed advisor that runs entirely offline."""

    def __init__(self, config: Optional[AdvisorConfig] = None, rng: Optional[random.Random] = None):
        config = config or AdvisorConfig()
        self.responder = AdvisorResponder(config.chat, rng)

    def ask(self, ledger: Ledger, question: str, today: Optional[dt.date] = None) -> str:
        return self.responder.respond(question, ledger, today or dt.date.today())

    def is_available(self) -> bool:
        return True


def get_advisor(provider: Optional[str] = None, config: Optional[AdvisorConfig] = None) -> Optional[Advisor]:
    """
    Create the advisor for a provider name.

    Args:
        provider: "rules", "ollama" or "none" (defaults to the configured provider)
        config: Loaded configuration (defaults are used when omitted)

    Returns:
        Advisor instance, or None for the "none" provider

    Raises:
        AdvisorNotImplementedError: For provider names with no implementation
        AdvisorError: If the Ollama server cannot be reached
    """
    config = config or AdvisorConfig()
    name = (provider or config.ai.provider).strip().lower()
    logger.debug(f"Selecting advisor provider: {name}")

    if name == "none":
        return None
    if name == "rules":
        return RuleAdvisor(config)
    if name == "ollama":
        from .ai.ollama import OllamaAdvisor
        return OllamaAdvisor(
            model=config.ai.model,
            base_url=config.ai.base_url,
            timeout=config.ai.timeout,
        )

    raise AdvisorNotImplementedError(
        f"Advisor provider '{provider}' is not implemented. Available providers: {', '.join(PROVIDERS)}"
    )
