"""Narrative analyses of the current month used by the chat responder."""

import datetime as dt
from typing import List
from ..analysis.ledger_stats import (
    month_expenses,
    month_incomes,
    monthly_expense_series,
    percent_of,
    ranked_categories,
    round_half_up,
    summarize_month,
    total_amount,
)
from ..contracts.records import Ledger, Record
from ..presentation.money import format_amount, format_percent

FINANCIAL_TIPS = (
    "記帳是理財的第一步，持續記錄很重要",
    "建議設定預算，控制各分類支出",
    "定期檢視支出趨勢，找出不必要的開銷",
    "建立緊急預備金，至少 3-6 個月的生活費",
)


def analyze_expenses(records: List[Record], today: dt.date) -> str:
    expenses = month_expenses(records, today.year, today.month)
    total = total_amount(expenses)
    average = total / len(expenses) if expenses else 0

    response = "📊 本月支出分析：\n\n"
    response += f"• 總支出：NT$ {format_amount(total)}\n"
    response += f"• 交易筆數：{len(expenses)} 筆\n"
    response += f"• 平均每筆：NT$ {format_amount(round_half_up(average))}\n\n"

    ranking = ranked_categories(expenses)
    if ranking:
        response += "💰 支出分類排行：\n"
        for index, (category, amount) in enumerate(ranking[:5], 1):
            share = format_percent(percent_of(amount, total))
            response += f"{index}. {category}：NT$ {format_amount(amount)} ({share}%)\n"
    return response


def analyze_income(records: List[Record], today: dt.date) -> str:
    incomes = month_incomes(records, today.year, today.month)
    total = total_amount(incomes)

    response = "💰 本月收入分析：\n\n"
    response += f"• 總收入：NT$ {format_amount(total)}\n"
    response += f"• 收入筆數：{len(incomes)} 筆\n"
    if total > 0:
        response += f"• 平均每筆：NT$ {format_amount(round_half_up(total / len(incomes)))}\n"
    return response


def provide_financial_advice(records: List[Record], today: dt.date) -> str:
    """Savings-rate verdict, the dominant category and general tips."""
    summary = summarize_month(records, today.year, today.month)
    response = "💡 理財建議：\n\n"

    if summary.income_total > 0:
        rate = round(summary.savings_rate, 1)
        if rate > 20:
            response += f"✅ 您的儲蓄率為 {format_percent(rate)}%，表現優秀！\n"
        elif rate > 0:
            response += f"⚠️ 您的儲蓄率為 {format_percent(rate)}%，建議提高到 20% 以上。\n"
        else:
            response += "❌ 本月出現超支，建議檢視支出項目，找出可以節省的地方。\n"

    top = summary.top_category
    if top and top[1] > summary.expense_total * 0.3:
        share = format_percent(percent_of(top[1], summary.expense_total))
        response += f"\n📌 注意：「{top[0]}」佔總支出 {share}%，建議檢視是否有優化空間。\n"

    response += "\n💪 理財小貼士：\n"
    for tip in FINANCIAL_TIPS:
        response += f"• {tip}\n"
    return response


def analyze_categories(records: List[Record], today: dt.date) -> str:
    expenses = month_expenses(records, today.year, today.month)
    total = total_amount(expenses)

    response = "📂 支出分類分析：\n\n"
    for index, (category, amount) in enumerate(ranked_categories(expenses), 1):
        share = format_percent(percent_of(amount, total))
        response += f"{index}. {category}：NT$ {format_amount(amount)} ({share}%)\n"
    return response


def analyze_trends(records: List[Record], today: dt.date, months: int = 6) -> str:
    """Average monthly spend over the last ``months`` months and the latest direction."""
    values = [total for _, total in monthly_expense_series(records, today.year, today.month, months)]
    average = sum(values) / len(values)
    if values[-1] > values[-2]:
        trend = "上升"
    elif values[-1] < values[-2]:
        trend = "下降"
    else:
        trend = "持平"

    response = f"📈 支出趨勢分析（最近 {months} 個月）：\n\n"
    response += f"• 平均月支出：NT$ {format_amount(round_half_up(average))}\n"
    response += f"• 最新趨勢：{trend}\n"
    return response


def budget_status(percentage: float) -> str:
    if percentage > 100:
        return "❌ 超支"
    if percentage > 80:
        return "⚠️ 接近"
    return "✅ 正常"


def analyze_budget(ledger: Ledger, today: dt.date) -> str:
    if not ledger.budgets:
        return (
            "📋 您還沒有設定預算。\n\n"
            "建議為主要支出分類設定預算，這樣可以更好地控制支出。\n\n"
            "可以在「設置」中設定預算。"
        )

    expenses = month_expenses(ledger.records, today.year, today.month)
    response = "📋 預算執行情況：\n\n"
    for budget in ledger.budgets:
        spent = total_amount(r for r in expenses if r.category_name == budget.category)
        percentage = round(percent_of(spent, budget.amount), 1)
        response += f"{budget.category}：\n"
        response += f"• 預算：NT$ {format_amount(budget.amount)}\n"
        response += f"• 已用：NT$ {format_amount(spent)} ({format_percent(percentage)}%)\n"
        response += f"• 狀態：{budget_status(percentage)}\n\n"
    return response
