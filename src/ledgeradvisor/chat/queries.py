"""Targeted lookups answering concrete questions about the ledger."""

import datetime as dt
from typing import Iterable, List, Optional
from ..analysis.ledger_stats import (
    month_expenses,
    month_records,
    previous_month,
    ranked_categories,
    round_half_up,
    total_amount,
)
from ..contracts.records import Ledger, Record, UNCATEGORIZED
from ..presentation.money import format_amount, format_full_date, format_month_day
from .parsing import last_number, resolve_target_date

SEARCH_CATEGORY_KEYWORDS = (
    "午餐", "早餐", "晚餐", "宵夜", "食物", "餐", "飯",
    "交通", "車", "公車", "捷運", "計程車", "油錢",
    "購物", "買", "衣服", "鞋子", "用品",
    "娛樂", "電影", "遊戲", "唱歌",
    "醫療", "看病", "藥",
    "房租", "水電", "電費", "水費", "網路",
    "其他",
)

RECENT_KEYWORDS = ("買了什麼", "花了什麼")


def _matches_amount(record: Record, target: float, tolerance: float) -> bool:
    return abs(record.amount - target) <= tolerance


def _newest_first(records: Iterable[Record]) -> List[Record]:
    return sorted(records, key=lambda r: r.date, reverse=True)


def _detail_line(index: int, label: str, record: Record, ledger: Ledger) -> str:
    line = f"{index}. {label}：NT$ {format_amount(record.amount)}"
    account = ledger.account_name(record.account)
    if account:
        line += f" [{account}]"
    if record.member:
        line += f" [{record.member}]"
    if record.note:
        line += f" ({record.note})"
    return line


def query_category_spending(records: List[Record], category_keyword: str, today: dt.date) -> str:
    """This month's spending in categories containing ``category_keyword``."""
    if not category_keyword:
        return "我需要一些記帳資料才能幫你查分類支出。"
    expenses = month_expenses(records, today.year, today.month)
    matched = [r for r in expenses if category_keyword in (r.category or "")]
    total = total_amount(matched)
    return f"本月「{category_keyword}」相關支出：NT$ {format_amount(total)}（{len(matched)} 筆）"


def query_top_spending(records: List[Record], today: dt.date) -> str:
    if not records:
        return "目前沒有足夠的記錄可以分析最大支出。"
    expenses = month_expenses(records, today.year, today.month)
    if not expenses:
        return "本月目前沒有支出記錄。"
    category, amount = ranked_categories(expenses)[0]
    return f"本月支出最多的分類是「{category}」，累計 NT$ {format_amount(round_half_up(amount))}。"


def query_lowest_spending(records: List[Record], today: dt.date) -> str:
    if not records:
        return "目前沒有足夠的記錄可以分析最低支出。"
    expenses = month_expenses(records, today.year, today.month)
    if not expenses:
        return "本月目前沒有支出記錄。"
    smallest = sorted(expenses, key=lambda r: r.amount)[0]
    return f"本月最小的一筆支出是「{smallest.category_name}」NT$ {format_amount(smallest.amount)}。"


def compare_months(records: List[Record], today: dt.date) -> str:
    if not records:
        return "目前沒有足夠的記錄可以做月份比較。"
    last_year, last_month = previous_month(today.year, today.month)
    current = total_amount(month_expenses(records, today.year, today.month))
    last = total_amount(month_expenses(records, last_year, last_month))
    diff = current - last
    direction = "增加" if diff >= 0 else "減少"
    return (
        f"本月支出 NT$ {format_amount(round_half_up(current))}，"
        f"上月 NT$ {format_amount(round_half_up(last))}，"
        f"本月較上月{direction} NT$ {format_amount(abs(round_half_up(diff)))}。"
    )


def total_summary(records: List[Record], today: dt.date) -> str:
    if not records:
        return "目前沒有足夠的記錄可以做總計。"
    scoped = month_records(records, today.year, today.month)
    expense = total_amount(r for r in scoped if r.is_expense)
    income = total_amount(r for r in scoped if r.is_income)
    balance = income - expense
    return (
        "本月總計：\n"
        f"• 總支出：NT$ {format_amount(round_half_up(expense))}\n"
        f"• 總收入：NT$ {format_amount(round_half_up(income))}\n"
        f"• 結餘：NT$ {format_amount(round_half_up(balance))}"
    )


def average_analysis(records: List[Record], today: dt.date) -> str:
    if not records:
        return "目前沒有足夠的記錄可以做平均分析。"
    expenses = month_expenses(records, today.year, today.month)
    if not expenses:
        return "本月目前沒有支出記錄，無法計算平均。"
    average = total_amount(expenses) / len(expenses)
    return f"本月支出平均每筆約 NT$ {format_amount(round_half_up(average))}（共 {len(expenses)} 筆）。"


def recent_expenses(records: List[Record], limit: int = 10) -> str:
    """The most recent expenses, newest first."""
    recent = _newest_first(r for r in records if r.is_expense)[:limit]
    if not recent:
        return "📋 您最近沒有支出記錄。"

    response = "📋 您最近的支出記錄：\n\n"
    for index, record in enumerate(recent, 1):
        response += f"{index}. {format_month_day(record.date)} - {record.category_name}：NT$ {format_amount(record.amount)}\n"
    return response


def query_date_records(user_message: str, ledger: Ledger, today: dt.date, recent_limit: int = 10) -> str:
    """Everything recorded on the date a question mentions."""
    target = resolve_target_date(user_message, today)

    if target is None:
        if any(k in user_message for k in RECENT_KEYWORDS):
            return recent_expenses(ledger.records, recent_limit)
        return (
            "📅 我沒有在您的問題中找到具體日期。\n\n"
            "您可以這樣問我：\n"
            "• \"12月5號買了什麼\"\n"
            "• \"昨天花了什麼\"\n"
            "• \"查一下今天買了什麼\"\n"
            "• \"幾月幾號買了什麼東西\""
        )

    on_date = [r for r in ledger.records if r.date == target]
    date_label = format_month_day(target)
    if not on_date:
        return f"📅 {date_label} 沒有找到任何記錄。\n\n您可以查看其他日期的記錄，或者告訴我您想查詢的具體日期。"

    expenses = [r for r in on_date if r.is_expense]
    incomes = [r for r in on_date if r.is_income]
    transfers = [r for r in on_date if r.is_transfer]

    response = f"📅 {date_label} 的記錄：\n\n"

    if expenses:
        response += f"📤 支出 ({len(expenses)} 筆，共 NT$ {format_amount(total_amount(expenses))})：\n"
        for index, record in enumerate(expenses, 1):
            response += _detail_line(index, record.category_name, record, ledger) + "\n"
        response += "\n"

    if incomes:
        response += f"💰 收入 ({len(incomes)} 筆，共 NT$ {format_amount(total_amount(incomes))})：\n"
        for index, record in enumerate(incomes, 1):
            line = f"{index}. {record.category_name}：NT$ {format_amount(record.amount)}"
            account = ledger.account_name(record.account)
            if account:
                line += f" [{account}]"
            response += line + "\n"
        response += "\n"

    if transfers:
        response += f"🔄 轉帳 ({len(transfers)} 筆)：\n"
        for index, record in enumerate(transfers, 1):
            line = f"{index}. NT$ {format_amount(record.amount)}"
            account = ledger.account_name(record.account)
            if account:
                line += f" [{account}]"
            response += line + "\n"

    return response


def _find_category(user_message: str, records: List[Record]) -> Optional[str]:
    for keyword in SEARCH_CATEGORY_KEYWORDS:
        if keyword in user_message:
            return keyword

    seen = []
    for record in records:
        if record.category and record.category not in seen:
            seen.append(record.category)
    for category in seen:
        if category in user_message:
            return category
    return None


def query_amount_and_category(user_message: str, ledger: Ledger, tolerance: float = 1.0) -> str:
    """When was something of a given amount (and optionally category) bought."""
    target = last_number(user_message)
    if target is None:
        return (
            "💰 我沒有在您的問題中找到金額。\n\n"
            "您可以這樣問我：\n"
            "• \"我什麼時候買午餐花了170\"\n"
            "• \"哪天買了東西花了500\""
        )
    if target <= 0:
        return "💰 我無法識別您提到的金額。\n\n請告訴我具體的金額，例如：\"我什麼時候買午餐花了170\""

    records = ledger.records
    category = _find_category(user_message, records)

    def category_matches(record: Record) -> bool:
        if not category:
            return True
        name = record.category_name
        return category in name or name in category

    amount_matches = [r for r in records if r.is_expense and _matches_amount(r, target, tolerance)]
    matched = [r for r in amount_matches if category_matches(r)]
    if not matched and category:
        matched = amount_matches

    if not matched:
        response = "🔍 沒有找到符合條件的記錄。\n\n"
        if category:
            response += f"搜尋條件：\n• 分類：{category}\n• 金額：NT$ {format_amount(target)}\n\n"
        else:
            response += f"搜尋條件：\n• 金額：NT$ {format_amount(target)}\n\n"
        response += "💡 提示：\n• 確認金額是否正確\n• 確認分類名稱是否匹配\n• 可以只問金額，例如：\"什麼時候花了170\""
        return response

    matched = _newest_first(matched)
    response = f"🔍 找到 {len(matched)} 筆符合條件的記錄：\n\n"
    for index, record in enumerate(matched, 1):
        response += _detail_line(index, f"{format_full_date(record.date)} - {record.category_name}", record, ledger) + "\n"

    if len(matched) == 1:
        response += f"\n✅ 答案是：{format_month_day(matched[0].date)}"
    else:
        response += "\n💡 找到多筆記錄，請查看上面的詳細列表。"
    return response


def query_amount_only(ledger: Ledger, target: float, tolerance: float = 1.0) -> str:
    """What was bought for a given amount."""
    matched = [r for r in ledger.records if r.is_expense and _matches_amount(r, target, tolerance)]
    if not matched:
        return (
            f"🔍 沒有找到金額為 NT$ {format_amount(target)} 的支出記錄。\n\n"
            "💡 提示：\n• 確認金額是否正確\n• 可能該金額的記錄還沒有記錄"
        )

    matched = _newest_first(matched)
    response = f"💰 金額 NT$ {format_amount(target)} 的支出記錄：\n\n"
    for index, record in enumerate(matched, 1):
        response += _detail_line(index, f"{format_full_date(record.date)} - {record.category_name}", record, ledger) + "\n"

    if len(matched) == 1:
        record = matched[0]
        response += f"\n✅ 答案是：{format_month_day(record.date)} 買了 {record.category_name}"
    return response


def query_date_and_amount(ledger: Ledger, target_date: dt.date, target: float, tolerance: float = 1.0) -> str:
    """Expenses of a given amount on a given date."""
    matched = [
        r for r in ledger.records
        if r.is_expense and r.date == target_date and _matches_amount(r, target, tolerance)
    ]
    date_label = format_month_day(target_date)

    if not matched:
        return (
            f"🔍 {date_label} 沒有找到金額為 NT$ {format_amount(target)} 的支出記錄。\n\n"
            "💡 提示：\n• 確認日期是否正確\n• 確認金額是否正確"
        )

    response = f"📅 {date_label} 金額 NT$ {format_amount(target)} 的記錄：\n\n"
    for index, record in enumerate(matched, 1):
        response += _detail_line(index, record.category_name, record, ledger) + "\n"

    if len(matched) == 1:
        response += f"\n✅ 答案是：{matched[0].category_name}"
    return response
