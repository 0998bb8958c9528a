"""Tests for advisors and provider selection (Ollama mocked)."""

import datetime as dt
import json
from pathlib import Path
from unittest.mock import MagicMock, patch
import pytest
import requests
from ledgeradvisor.advisor import RuleAdvisor, get_advisor
from ledgeradvisor.ai.base import Advisor
from ledgeradvisor.config import AdvisorConfig
from ledgeradvisor.contracts.records import Ledger
from ledgeradvisor.utils.errors import AdvisorError, AdvisorNotImplementedError, LedgerAdvisorError

FIXTURE_PATH = Path(__file__).parent.parent / "fixtures" / "ledger.sample.json"
TODAY = dt.date(2024, 12, 10)


@pytest.fixture
def sample_ledger():
    with open(FIXTURE_PATH, 'r', encoding='utf-8') as f:
        return Ledger(**json.load(f))


class TestAdvisorInterface:
    """Test the advisor contract."""

    def test_custom_advisor(self, sample_ledger):
        class MockAdvisor(Advisor):
            def ask(self, ledger, question, today=None):
                return "Mock advisory response"

            def is_available(self):
                return True

        advisor = MockAdvisor()
        assert advisor.is_available()
        assert advisor.ask(sample_ledger, "Test question") == "Mock advisory response"

    def test_rule_advisor(self, sample_ledger):
        config = AdvisorConfig(chat={"prefix_probability": 0})
        advisor = RuleAdvisor(config)

        assert advisor.is_available()
        assert advisor.ask(sample_ledger, "最多", TODAY) == "本月支出最多的分類是「購物」，累計 NT$ 1,500。"

    def test_rule_advisor_is_read_only(self, sample_ledger):
        before = sample_ledger.model_dump()
        RuleAdvisor().ask(sample_ledger, "本月支出分析", TODAY)
        assert sample_ledger.model_dump() == before


class TestGetAdvisor:
    """Test provider selection."""

    def test_rules(self):
        assert isinstance(get_advisor("rules"), RuleAdvisor)

    def test_default_provider_from_config(self):
        assert isinstance(get_advisor(None, AdvisorConfig()), RuleAdvisor)

    def test_none(self):
        assert get_advisor("none") is None

    def test_unknown_provider_is_not_implemented(self):
        """Unknown providers fail with a not-implemented error."""
        with pytest.raises(AdvisorNotImplementedError, match="not implemented"):
            get_advisor("openai")

    def test_not_implemented_error_hierarchy(self):
        with pytest.raises(NotImplementedError):
            get_advisor("gpt")
        with pytest.raises(LedgerAdvisorError):
            get_advisor("gpt")

    def test_ollama_uses_config(self):
        from ledgeradvisor.ai.ollama import OllamaAdvisor

        config = AdvisorConfig(ai={"provider": "ollama", "model": "qwen2", "base_url": "http://ollama:11434"})
        with patch.object(OllamaAdvisor, '_check_ollama_available'):
            advisor = get_advisor(None, config)

        assert isinstance(advisor, OllamaAdvisor)
        assert advisor.model == "qwen2"
        assert advisor.base_url == "http://ollama:11434"


class TestOllamaAdvisor:
    """Test the Ollama adapter without a running server."""

    def test_ask(self, sample_ledger):
        from ledgeradvisor.ai.ollama import OllamaAdvisor

        with patch.object(OllamaAdvisor, '_check_ollama_available'), \
             patch('requests.post') as mock_post:
            mock_response = MagicMock()
            mock_response.json.return_value = {"response": "  建議減少購物支出。 "}
            mock_post.return_value = mock_response

            advisor = OllamaAdvisor(model="llama3.2", base_url="http://localhost:11434", max_tokens=128)
            response = advisor.ask(sample_ledger, "怎麼省錢？", TODAY)

        assert response == "建議減少購物支出。"
        payload = mock_post.call_args.kwargs["json"]
        assert payload["model"] == "llama3.2"
        assert payload["stream"] is False
        assert payload["options"] == {"num_predict": 128}
        assert "怎麼省錢？" in payload["prompt"]
        assert mock_post.call_args.args[0] == "http://localhost:11434/api/generate"

    def test_ask_api_error(self, sample_ledger):
        from ledgeradvisor.ai.ollama import OllamaAdvisor

        with patch.object(OllamaAdvisor, '_check_ollama_available'), \
             patch('requests.post', side_effect=requests.exceptions.ConnectionError("refused")):
            advisor = OllamaAdvisor()
            with pytest.raises(AdvisorError, match="Failed to get response from Ollama"):
                advisor.ask(sample_ledger, "Test question", TODAY)

    def test_unavailable_server(self):
        from ledgeradvisor.ai.ollama import OllamaAdvisor

        with patch('requests.get', side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(AdvisorError, match="Ollama not available"):
                OllamaAdvisor(base_url="http://localhost:1")

    def test_is_available(self):
        from ledgeradvisor.ai.ollama import OllamaAdvisor

        with patch('requests.get') as mock_get:
            advisor = OllamaAdvisor()
            assert advisor.is_available()
            mock_get.side_effect = requests.exceptions.Timeout("slow")
            assert not advisor.is_available()
