"""Abstract base class for advisors."""

import datetime as dt
from abc import ABC, abstractmethod
from typing import Optional
from ..contracts.records import Ledger


class Advisor(ABC):
    """
    Abstract interface for advisors.

    Advisors are read-only and advisory only. They cannot:
    - Add, edit or delete records
    - Change budgets or accounts

    They can only:
    - Read the ledger
    - Answer questions about it in human-readable text
    """

    @abstractmethod
    def ask(
        self,
        ledger: Ledger,
        question: str,
        today: Optional[dt.date] = None,
    ) -> str:
        """
        Ask a question about the ledger.

        Args:
            ledger: Records, budgets and accounts to reason about
            question: User's question
            today: Date the question is asked on (defaults to the local date)

        Returns:
            Human-readable advisory response
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if this advisor can answer right now.

        Returns:
            True if the provider is configured and reachable
        """
        pass
