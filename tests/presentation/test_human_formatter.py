"""Tests for human-friendly formatting."""

import pytest
from ledgeradvisor.contracts.chat import ChatMessage, MessageType
from ledgeradvisor.nudges.engine import Nudge
from ledgeradvisor.presentation.human_formatter import (
    format_answer,
    format_chat_message,
    format_history,
    format_nudges,
)
from ledgeradvisor.presentation.money import format_amount, format_full_date, format_month_day, format_percent


class TestMoney:

    @pytest.mark.parametrize("value,expected", [
        (1500, "1,500"),
        (50000.0, "50,000"),
        (12.5, "12.5"),
        (0.1 + 0.2, "0.3"),
        (-8960, "-8,960"),
    ])
    def test_format_amount(self, value, expected):
        assert format_amount(value) == expected

    def test_format_percent(self):
        assert format_percent(47.021) == "47.0"

    def test_dates(self):
        import datetime as dt
        assert format_month_day(dt.date(2024, 12, 7)) == "12月7號"
        assert format_full_date(dt.date(2024, 12, 7)) == "2024年12月7號"


class TestFormatter:

    def test_answer_unicode_box(self):
        text = format_answer("預算狀況", "📋 預算執行情況：", "rules", ascii_mode=False)
        assert text.startswith("┌")
        assert "Question: 預算狀況" in text
        assert "read-only" in text

    def test_answer_ascii_env(self, monkeypatch):
        monkeypatch.setenv("LEDGERADVISOR_ASCII", "1")
        assert format_answer("q", "a").startswith("+")

    def test_nudges(self):
        text = format_nudges([Nudge(key="entry_small", message="已記錄。")], ascii_mode=True)
        assert "[entry_small]" in text
        assert "已記錄。" in text

    def test_no_nudges(self):
        assert "nothing to say" in format_nudges([])

    def test_chat_message(self):
        assert format_chat_message(ChatMessage(type=MessageType.USER, message="平均")) == "你> 平均"
        assert format_chat_message(ChatMessage(type=MessageType.ADVISOR, message="好")) == "小森> 好"

    def test_history(self):
        assert format_history([]) == "No chat history."
        text = format_history([ChatMessage(type=MessageType.USER, message="平均")], ascii_mode=True)
        assert "Chat history (1 messages)" in text
