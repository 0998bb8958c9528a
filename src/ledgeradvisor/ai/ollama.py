"""Ollama adapter for the advisor (optional)."""

import datetime as dt
import os
from typing import Optional
import requests
from ..contracts.records import Ledger
from ..utils.errors import AdvisorError
from ..utils.logging import get_logger
from .base import Advisor
from .prompt import build_prompt

logger = get_logger("ai.ollama")


class OllamaAdvisor(Advisor):
    """
    Ollama-based advisor (local LLM).

    Requires Ollama to be installed and running locally.
    """

    def __init__(
        self,
        model: str = "llama3.2",
        base_url: Optional[str] = None,
        timeout: float = 60,
        max_tokens: Optional[int] = None,
    ):
        """
        Initialize Ollama advisor.

        Args:
            model: Ollama model name (default: llama3.2)
            base_url: Ollama API base URL (default: http://localhost:11434)
            timeout: Seconds to wait for a generation
            max_tokens: Optional cap on generated tokens (Ollama num_predict)
        """
        self.model = model
        self.base_url = base_url or os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
        self.timeout = timeout
        self.max_tokens = max_tokens
        self._check_ollama_available()

    def _check_ollama_available(self) -> None:
        try:
            response = requests.get(f"{self.base_url}/api/tags", timeout=2)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise AdvisorError(
                f"Ollama not available at {self.base_url}. "
                f"Make sure Ollama is installed and running. Error: {e}"
            )

    def ask(self, ledger: Ledger, question: str, today: Optional[dt.date] = None) -> str:
        """Ask Ollama about the ledger."""
        prompt = build_prompt(ledger, question, today or dt.date.today())

        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
        }
        if self.max_tokens:
            payload["options"] = {"num_predict": self.max_tokens}

        try:
            response = requests.post(
                f"{self.base_url}/api/generate",
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            result = response.json()
            return result.get("response", "").strip()
        except requests.exceptions.RequestException as e:
            logger.error(f"Ollama API error: {e}")
            raise AdvisorError(f"Failed to get response from Ollama: {e}")

    def is_available(self) -> bool:
        try:
            self._check_ollama_available()
            return True
        except AdvisorError:
            return False
