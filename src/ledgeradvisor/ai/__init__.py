"""Read-only advisors over a ledger snapshot.

The Ollama adapter lives in ``ai.ollama`` and is imported on demand so that
``requests`` is only loaded when that provider is chosen.
"""

from .base import Advisor
from .prompt import PromptContract, build_contract, build_prompt

__all__ = ["Advisor", "PromptContract", "build_contract", "build_prompt"]
