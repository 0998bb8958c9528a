"""Rule-based chat responder for Mori (小森)."""

import datetime as dt
import random
from typing import Optional
from ..analysis.ledger_stats import summarize_month
from ..config import ChatSettings
from ..contracts.records import Ledger
from ..presentation.money import format_amount
from ..utils.logging import get_logger
from . import insights, queries
from .parsing import extract_amounts, mentions_date, resolve_target_date

logger = get_logger("chat.responder")

CONVERSATIONAL_PREFIXES = (
    "讓我幫您查一下...",
    "好的，我來看看...",
    "嗯...讓我分析一下...",
    "我來幫您找找...",
    "讓我整理一下...",
    "好的，我馬上幫您查...",
    "讓我看看您的記錄...",
    "稍等一下，我來整理...",
    "我來幫您分析...",
)

FAILURE_REPLY = "我剛剛整理資料時遇到一點問題，請你再問一次，或試試看「本月支出分析 / 最大支出分類 / 預算狀況」。"

TIME_QUESTION_WORDS = ("什麼時候", "哪天", "幾號", "何時", "何日")
SPEND_VERBS = ("花了", "買了", "用了", "付了")
AMOUNT_KEYWORDS = ("是買了", "買了什麼", "是花了", "花了什麼", "買了", "花了", "用了", "付了", "花了多少", "買了多少")
DATE_KEYWORDS = ("買了什麼", "花了什麼", "買了", "花了", "記錄", "交易", "做了什麼")
CATEGORY_KEYWORDS = (
    "午餐", "早餐", "晚餐", "宵夜", "食物", "餐", "飯", "交通", "車", "購物",
    "娛樂", "醫療", "房租", "水電", "電費", "網路", "電話", "手機",
)
CATEGORY_QUESTION_WORDS = ("多少", "花了", "支出")
MOST_WORDS = ("最多", "最大", "最高")
LEAST_WORDS = ("最少", "最小", "最低")
COMPARE_WORDS = ("比", "比較", "對比")

EXPENSE_WORDS = ("支出", "花費", "花錢", "開銷", "消費", "花掉")
INCOME_WORDS = ("收入", "賺", "薪水", "工資", "薪資", "進帳")
ADVICE_WORDS = ("建議", "理財", "省錢", "如何", "怎麼", "應該")
CATEGORY_WORDS = ("分類", "類別", "項目")
TREND_WORDS = ("趨勢", "變化", "走勢", "成長", "下降")
BUDGET_WORDS = ("預算", "上限", "限制")
TOTAL_WORDS = ("總計", "總和", "加總")
AVERAGE_WORDS = ("平均", "均值")


def _has_any(message: str, words) -> bool:
    return any(word in message for word in words)


def generate_welcome_message(ledger: Ledger, today: dt.date) -> str:
    """Greeting with a short summary of the current month."""
    if not ledger.records:
        return "您好，我是小森。\n\n看起來您還沒有任何記錄。開始記帳是理財的第一步，加油！"

    summary = summarize_month(ledger.records, today.year, today.month)
    message = "您好，我是小森。\n\n"

    if summary.record_count > 0:
        message += "本月統計：\n"
        message += f"總支出：NT$ {format_amount(summary.expense_total)}\n"
        if summary.income_total > 0:
            message += f"總收入：NT$ {format_amount(summary.income_total)}\n"
            if summary.balance > 0:
                message += f"本月結餘：NT$ {format_amount(summary.balance)}\n"
            else:
                message += f"本月超支：NT$ {format_amount(abs(summary.balance))}\n"
        if summary.top_category:
            category, amount = summary.top_category
            message += f"最大支出分類：{category} (NT$ {format_amount(amount)})\n"

    message += "\n我可以幫您分析支出趨勢、回答記帳相關問題。有什麼想問的嗎？"
    return message


def smart_fallback(user_message: str) -> str:
    """Reply for questions no rule recognised."""
    message = (user_message or "").strip()
    if not message:
        return "可以跟我說你想查「支出 / 收入 / 預算 / 分類 / 趨勢」其中一項，我會幫你整理。"

    if _has_any(message.lower(), ("幫我", "請", "怎麼")):
        return "我可以幫你分析記帳資料。\n\n你可以試著問：\n• 本月支出分析\n• 最大支出分類\n• 預算狀況\n• 這個月和上個月比較"

    if len("".join(message.split())) <= 6:
        return f"你是想問「{message}」這個分類的花費嗎？\n\n你可以這樣問我：\n• {message} 花了多少\n• 本月 {message} 花了多少"

    return "我還不太確定你的問題想查哪一種統計。\n\n你可以換個問法，例如：\n• 本月支出分析\n• 午餐花了多少\n• 12/7 買了什麼\n• 預算狀況"


class AdvisorResponder:
    """
    Answer free-text bookkeeping questions from the ledger.

    Questions are routed by keyword in a fixed priority order; concrete
    lookups (dates, amounts, categories) win over broad analyses.
    """

    def __init__(self, settings: Optional[ChatSettings] = None, rng: Optional[random.Random] = None):
        self.settings = settings or ChatSettings()
        self.rng = rng or random.Random()

    def respond(self, user_message: str, ledger: Ledger, today: dt.date) -> str:
        try:
            return self.add_conversational_prefix(self._route(user_message, ledger, today))
        except Exception as e:
            logger.error(f"Failed to answer {user_message!r}: {e}", exc_info=True)
            return FAILURE_REPLY

    def add_conversational_prefix(self, response: str) -> str:
        """Sometimes open with a spoken-style lead-in."""
        if self.rng.random() < self.settings.prefix_probability and len(response) > self.settings.prefix_min_length:
            return f"{self.rng.choice(CONVERSATIONAL_PREFIXES)}\n\n{response}"
        return response

    def _route(self, user_message: str, ledger: Ledger, today: dt.date) -> str:
        message = user_message.lower()
        records = ledger.records
        tolerance = self.settings.amount_tolerance
        amounts = extract_amounts(message)
        has_date = mentions_date(message)

        if has_date and amounts:
            target_date = resolve_target_date(message, today)
            if target_date is not None:
                logger.debug(f"Date and amount lookup: {target_date} / {amounts[0]}")
                return queries.query_date_and_amount(ledger, target_date, amounts[0], tolerance)

        if amounts and _has_any(message, TIME_QUESTION_WORDS) and _has_any(message, SPEND_VERBS):
            return queries.query_amount_and_category(user_message, ledger, tolerance)

        if amounts and _has_any(message, AMOUNT_KEYWORDS):
            return queries.query_amount_only(ledger, amounts[0], tolerance)

        if (has_date and _has_any(message, DATE_KEYWORDS)) or _has_any(message, queries.RECENT_KEYWORDS):
            return queries.query_date_records(user_message, ledger, today, self.settings.recent_records_limit)

        category = next((c for c in CATEGORY_KEYWORDS if c in user_message), None)
        if category and _has_any(message, CATEGORY_QUESTION_WORDS):
            return queries.query_category_spending(records, category, today)

        if _has_any(message, MOST_WORDS):
            return queries.query_top_spending(records, today)
        if _has_any(message, LEAST_WORDS):
            return queries.query_lowest_spending(records, today)
        if _has_any(message, COMPARE_WORDS):
            return queries.compare_months(records, today)

        if _has_any(message, EXPENSE_WORDS):
            return insights.analyze_expenses(records, today)
        if _has_any(message, INCOME_WORDS):
            return insights.analyze_income(records, today)
        if _has_any(message, ADVICE_WORDS):
            return insights.provide_financial_advice(records, today)
        if _has_any(message, CATEGORY_WORDS):
            return insights.analyze_categories(records, today)
        if _has_any(message, TREND_WORDS):
            return insights.analyze_trends(records, today, self.settings.trend_months)
        if _has_any(message, BUDGET_WORDS):
            return insights.analyze_budget(ledger, today)
        if _has_any(message, TOTAL_WORDS):
            return queries.total_summary(records, today)
        if _has_any(message, AVERAGE_WORDS):
            return queries.average_analysis(records, today)

        return smart_fallback(user_message)
