"""Tests for the rule-based chat responder."""

import datetime as dt
import json
import random
from pathlib import Path
from unittest.mock import patch
import pytest
from ledgeradvisor.chat.responder import (
    CONVERSATIONAL_PREFIXES,
    FAILURE_REPLY,
    AdvisorResponder,
    generate_welcome_message,
)
from ledgeradvisor.config import ChatSettings
from ledgeradvisor.contracts.records import Ledger

FIXTURE_PATH = Path(__file__).parent.parent / "fixtures" / "ledger.sample.json"
TODAY = dt.date(2024, 12, 10)


@pytest.fixture
def sample_ledger():
    with open(FIXTURE_PATH, 'r', encoding='utf-8') as f:
        return Ledger(**json.load(f))


@pytest.fixture
def responder():
    """Responder that never adds a conversational prefix."""
    return AdvisorResponder(ChatSettings(prefix_probability=0), random.Random(0))


class TestLookups:
    """Concrete lookups by date, amount and category."""

    def test_records_on_date(self, responder, sample_ledger):
        reply = responder.respond("12/7買了什麼", sample_ledger, TODAY)

        assert reply.startswith("📅 12月7號 的記錄：")
        assert "📤 支出 (1 筆，共 NT$ 1,500)：" in reply
        assert "1. 購物：NT$ 1,500 [現金] (外套)" in reply
        assert "1. 薪水：NT$ 50,000 [銀行]" in reply

    def test_records_yesterday(self, responder, sample_ledger):
        reply = responder.respond("昨天花了什麼", sample_ledger, TODAY)
        assert reply.startswith("📅 12月9號 的記錄：")
        assert "晚餐：NT$ 320" in reply

    def test_transfers_on_date(self, responder, sample_ledger):
        reply = responder.respond("12月8號的交易", sample_ledger, TODAY)
        assert "🔄 轉帳 (1 筆)：" in reply
        assert "1. NT$ 5,000 [現金]" in reply

    def test_empty_date(self, responder, sample_ledger):
        reply = responder.respond("12/1買了什麼", sample_ledger, TODAY)
        assert reply.startswith("📅 12月1號 沒有找到任何記錄。")

    def test_recent_without_date(self, responder, sample_ledger):
        reply = responder.respond("最近買了什麼", sample_ledger, TODAY)
        assert reply.startswith("📋 您最近的支出記錄：")
        assert "1. 12月9號 - 晚餐：NT$ 320" in reply

    def test_member_and_note(self, responder, sample_ledger):
        reply = responder.respond("12/2買了什麼", sample_ledger, TODAY)
        assert "1. 午餐：NT$ 170 [現金] [小明] (排骨飯)" in reply

    def test_date_and_amount(self, responder, sample_ledger):
        reply = responder.respond("12/7花了1500", sample_ledger, TODAY)
        assert reply.startswith("📅 12月7號 金額 NT$ 1,500 的記錄：")
        assert reply.endswith("✅ 答案是：購物")

    def test_date_and_amount_not_found(self, responder, sample_ledger):
        reply = responder.respond("12/8花了1500", sample_ledger, TODAY)
        assert reply.startswith("🔍 12月8號 沒有找到金額為 NT$ 1,500 的支出記錄。")

    def test_amount_only(self, responder, sample_ledger):
        reply = responder.respond("1500是買了什麼", sample_ledger, TODAY)
        assert "1. 2024年12月7號 - 購物：NT$ 1,500 [現金] (外套)" in reply
        assert reply.endswith("✅ 答案是：12月7號 買了 購物")

    def test_amount_tolerance(self, responder, sample_ledger):
        reply = responder.respond("1501是買了什麼", sample_ledger, TODAY)
        assert "✅ 答案是：12月7號 買了 購物" in reply

    def test_time_question(self, responder, sample_ledger):
        reply = responder.respond("我什麼時候買午餐花了170", sample_ledger, TODAY)
        assert reply.startswith("🔍 找到 1 筆符合條件的記錄：")
        assert reply.endswith("✅ 答案是：12月2號")

    def test_time_question_falls_back_to_amount(self, responder, sample_ledger):
        """A category that matches nothing does not hide an amount match."""
        reply = responder.respond("哪天看電影花了320", sample_ledger, TODAY)
        assert reply.endswith("✅ 答案是：12月9號")

    def test_time_question_not_found(self, responder, sample_ledger):
        reply = responder.respond("什麼時候買午餐花了999", sample_ledger, TODAY)
        assert reply.startswith("🔍 沒有找到符合條件的記錄。")
        assert "• 分類：午餐" in reply

    def test_category_spending(self, responder, sample_ledger):
        reply = responder.respond("午餐花了多少", sample_ledger, TODAY)
        assert reply == "本月「午餐」相關支出：NT$ 170（1 筆）"


class TestStatistics:
    """Month statistics and comparisons."""

    def test_top_spending(self, responder, sample_ledger):
        reply = responder.respond("最大支出分類是什麼", sample_ledger, TODAY)
        assert reply == "本月支出最多的分類是「購物」，累計 NT$ 1,500。"

    def test_lowest_spending(self, responder, sample_ledger):
        reply = responder.respond("最小的一筆是哪個", sample_ledger, TODAY)
        assert reply == "本月最小的一筆支出是「午餐」NT$ 170。"

    def test_compare_months(self, responder, sample_ledger):
        reply = responder.respond("這個月和上個月比較", sample_ledger, TODAY)
        assert reply == "本月支出 NT$ 3,190，上月 NT$ 12,150，本月較上月減少 NT$ 8,960。"

    def test_total_summary(self, responder, sample_ledger):
        reply = responder.respond("總計", sample_ledger, TODAY)
        assert "• 結餘：NT$ 46,810" in reply

    def test_average(self, responder, sample_ledger):
        reply = responder.respond("平均", sample_ledger, TODAY)
        assert reply == "本月支出平均每筆約 NT$ 798（共 4 筆）。"

    def test_no_records(self, responder):
        reply = responder.respond("最多", Ledger(), TODAY)
        assert reply == "目前沒有足夠的記錄可以分析最大支出。"


class TestAnalyses:
    """Keyword-triggered analyses."""

    def test_expense_analysis(self, responder, sample_ledger):
        reply = responder.respond("本月支出分析", sample_ledger, TODAY)
        assert reply.startswith("📊 本月支出分析：")
        assert "• 總支出：NT$ 3,190" in reply
        assert "• 交易筆數：4 筆" in reply
        assert "• 平均每筆：NT$ 798" in reply
        assert "1. 購物：NT$ 1,500 (47.0%)" in reply

    def test_income_analysis(self, responder, sample_ledger):
        reply = responder.respond("這個月收入", sample_ledger, TODAY)
        assert "• 總收入：NT$ 50,000" in reply
        assert "• 平均每筆：NT$ 50,000" in reply

    def test_advice(self, responder, sample_ledger):
        reply = responder.respond("給我一些理財建議", sample_ledger, TODAY)
        assert "✅ 您的儲蓄率為 93.6%，表現優秀！" in reply
        assert "📌 注意：「購物」佔總支出 47.0%" in reply
        assert "💪 理財小貼士：" in reply

    def test_categories(self, responder, sample_ledger):
        reply = responder.respond("分類", sample_ledger, TODAY)
        assert reply.startswith("📂 支出分類分析：")
        assert "4. 午餐：NT$ 170 (5.3%)" in reply

    def test_trends(self, responder, sample_ledger):
        reply = responder.respond("支出趨勢", sample_ledger, TODAY)
        assert reply.startswith("📊 本月支出分析")

    def test_trend_analysis(self, responder, sample_ledger):
        reply = responder.respond("最近的趨勢", sample_ledger, TODAY)
        assert "• 平均月支出：NT$ 2,557" in reply
        assert "• 最新趨勢：下降" in reply

    def test_flat_trend(self, responder):
        assert "• 最新趨勢：持平" in responder.respond("趨勢", Ledger(), TODAY)

    def test_budget(self, responder, sample_ledger):
        reply = responder.respond("預算狀況", sample_ledger, TODAY)
        assert "• 已用：NT$ 170 (5.7%)\n• 狀態：✅ 正常" in reply
        assert "• 已用：NT$ 1,500 (150.0%)\n• 狀態：❌ 超支" in reply

    def test_no_budget(self, responder):
        assert responder.respond("預算", Ledger(), TODAY).startswith("📋 您還沒有設定預算。")


class TestFallbacks:
    """Unrecognised questions and failures."""

    def test_short_message_suggests_category(self, responder, sample_ledger):
        reply = responder.respond("咖啡", sample_ledger, TODAY)
        assert reply.startswith("你是想問「咖啡」這個分類的花費嗎？")

    def test_help_request(self, responder, sample_ledger):
        reply = responder.respond("請幫我看看", sample_ledger, TODAY)
        assert reply.startswith("我可以幫你分析記帳資料。")

    def test_unknown_long_message(self, responder, sample_ledger):
        reply = responder.respond("今年的天氣好像特別冷呢你覺得呢", sample_ledger, TODAY)
        assert reply.startswith("我還不太確定你的問題想查哪一種統計。")

    def test_failure_is_apologised(self, responder, sample_ledger):
        with patch("ledgeradvisor.chat.responder.queries.query_top_spending", side_effect=RuntimeError("boom")):
            assert responder.respond("最多", sample_ledger, TODAY) == FAILURE_REPLY

    def test_prefix(self, sample_ledger):
        responder = AdvisorResponder(ChatSettings(prefix_probability=1), random.Random(0))
        reply = responder.respond("本月支出分析", sample_ledger, TODAY)
        prefix, _, body = reply.partition("\n\n")
        assert prefix in CONVERSATIONAL_PREFIXES
        assert body.startswith("📊 本月支出分析：")

    def test_short_replies_have_no_prefix(self, sample_ledger):
        responder = AdvisorResponder(ChatSettings(prefix_probability=1), random.Random(0))
        assert responder.respond("平均", Ledger(), TODAY) == "目前沒有足夠的記錄可以做平均分析。"


class TestWelcome:

    def test_empty_ledger(self):
        assert "看起來您還沒有任何記錄" in generate_welcome_message(Ledger(), TODAY)

    def test_month_summary(self, sample_ledger):
        message = generate_welcome_message(sample_ledger, TODAY)
        assert "總支出：NT$ 3,190" in message
        assert "本月結餘：NT$ 46,810" in message
        assert "最大支出分類：購物 (NT$ 1,500)" in message
