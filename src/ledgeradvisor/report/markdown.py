"""Markdown report generation for a bookkeeping month."""

import datetime as dt
from pathlib import Path
from ..analysis.ledger_stats import (
    month_expenses,
    monthly_expense_series,
    percent_of,
    ranked_categories,
    summarize_month,
    total_amount,
)
from ..chat.insights import budget_status
from ..contracts.records import Ledger
from ..presentation.money import format_amount, format_percent
from ..utils.errors import LedgerAdvisorError
from ..utils.logging import get_logger

logger = get_logger("report.markdown")


def render_markdown(ledger: Ledger, today: dt.date, trend_months: int = 6) -> str:
    """Render the monthly report for the month containing ``today``."""
    summary = summarize_month(ledger.records, today.year, today.month)
    expenses = month_expenses(ledger.records, today.year, today.month)

    sections = []

    sections.append(f"# 小森月報 {today.year}-{today.month:02d}")
    sections.append("")

    # Summary
    sections.append("## Summary")
    sections.append("")
    sections.append(f"- **總支出:** NT$ {format_amount(summary.expense_total)} ({summary.expense_count} 筆)")
    sections.append(f"- **總收入:** NT$ {format_amount(summary.income_total)} ({summary.income_count} 筆)")
    sections.append(f"- **結餘:** NT$ {format_amount(summary.balance)}")
    if summary.income_total > 0:
        sections.append(f"- **儲蓄率:** {format_percent(summary.savings_rate)}%")
    sections.append("")

    # Categories
    sections.append("## Categories")
    sections.append("")
    ranking = ranked_categories(expenses)
    if ranking:
        sections.append("| # | 分類 | 金額 | 佔比 |")
        sections.append("|---|------|------|------|")
        for index, (category, amount) in enumerate(ranking, 1):
            share = format_percent(percent_of(amount, summary.expense_total))
            sections.append(f"| {index} | {category} | NT$ {format_amount(amount)} | {share}% |")
    else:
        sections.append("No expenses recorded.")
    sections.append("")

    # Budgets
    sections.append("## Budgets")
    sections.append("")
    if ledger.budgets:
        for budget in ledger.budgets:
            spent = total_amount(r for r in expenses if r.category_name == budget.category)
            percentage = round(percent_of(spent, budget.amount), 1)
            sections.append(
                f"- **{budget.category}:** NT$ {format_amount(spent)} / NT$ {format_amount(budget.amount)} "
                f"({format_percent(percentage)}%) {budget_status(percentage)}"
            )
    else:
        sections.append("No budgets configured.")
    sections.append("")

    # Trend
    sections.append(f"## Trend (last {trend_months} months)")
    sections.append("")
    for label, total in monthly_expense_series(ledger.records, today.year, today.month, trend_months):
        sections.append(f"- `{label}`: NT$ {format_amount(total)}")
    sections.append("")

    return "\n".join(sections)


def generate_markdown(ledger: Ledger, today: dt.date, output_path: Path, trend_months: int = 6) -> None:
    """
    Generate the markdown report and write it to ``output_path``.

    Raises:
        LedgerAdvisorError: If file write fails
    """
    content = render_markdown(ledger, today, trend_months)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(content)
        logger.info(f"Generated markdown report: {output_path}")
    except OSError as e:
        raise LedgerAdvisorError(f"Failed to write markdown report: {e}")
