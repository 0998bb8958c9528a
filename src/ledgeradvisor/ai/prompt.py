"""Deterministic prompt construction for LLM-backed advisors."""

import datetime as dt
from dataclasses import dataclass
from typing import List, Tuple
from ..analysis.ledger_stats import (
    monthly_expense_series,
    month_expenses,
    percent_of,
    ranked_categories,
    summarize_month,
    total_amount,
)
from ..contracts.records import Ledger
from ..presentation.money import format_amount, format_percent


@dataclass
class PromptContract:
    """
    What an LLM advisor is allowed to see.

    Only aggregated figures for the current month are included, so the
    same ledger, date and question always produce the same prompt.
    """
    month_label: str
    expense_total: float
    income_total: float
    expense_count: int
    top_categories: List[Tuple[str, float, float]]
    budget_lines: List[str]
    trend: List[Tuple[str, float]]

    def to_prompt_text(self, question: str) -> str:
        categories_text = "\n".join(
            f"- {name}: NT$ {format_amount(amount)} ({format_percent(share)}%)"
            for name, amount, share in self.top_categories
        ) or "None"
        budgets_text = "\n".join(f"- {line}" for line in self.budget_lines) or "None"
        trend_text = "\n".join(f"- {label}: NT$ {format_amount(total)}" for label, total in self.trend)

        prompt = f"""You are 小森 (Mori), a calm and warm personal-finance advisor inside a bookkeeping app.

CRITICAL CONSTRAINTS (NON-NEGOTIABLE):
- You are providing ADVISORY information only.
- You cannot add, edit or delete records, budgets or accounts.
- All figures come from the bookkeeping summary below; do not invent numbers.
- Answer in Traditional Chinese (zh-TW).

BOOKKEEPING SUMMARY ({self.month_label}):
- Total expense: NT$ {format_amount(self.expense_total)} ({self.expense_count} records)
- Total income: NT$ {format_amount(self.income_total)}

Top categories:
{categories_text}

Budgets:
{budgets_text}

Monthly expense trend:
{trend_text}

USER QUESTION:
{question}

Please answer based on the summary above. If you need more information, state that clearly.
"""
        return prompt


def build_contract(ledger: Ledger, today: dt.date, trend_months: int = 6) -> PromptContract:
    """Aggregate the ledger into a PromptContract (deterministic)."""
    summary = summarize_month(ledger.records, today.year, today.month)
    expenses = month_expenses(ledger.records, today.year, today.month)
    ranking = ranked_categories(expenses)

    budget_lines = []
    for budget in ledger.budgets:
        spent = total_amount(r for r in expenses if r.category_name == budget.category)
        budget_lines.append(
            f"{budget.category}: NT$ {format_amount(spent)} / NT$ {format_amount(budget.amount)} "
            f"({format_percent(percent_of(spent, budget.amount))}%)"
        )

    return PromptContract(
        month_label=f"{today.year}-{today.month:02d}",
        expense_total=summary.expense_total,
        income_total=summary.income_total,
        expense_count=summary.expense_count,
        top_categories=[(name, amount, percent_of(amount, summary.expense_total)) for name, amount in ranking[:5]],
        budget_lines=budget_lines,
        trend=monthly_expense_series(ledger.records, today.year, today.month, trend_months),
    )


def build_prompt(ledger: Ledger, question: str, today: dt.date) -> str:
    """
    Build the prompt for a question about the ledger.

    Args:
        ledger: Ledger to summarise
        question: User's question
        today: Date that defines the current month

    Returns:
        Prompt text for the LLM
    """
    return build_contract(ledger, today).to_prompt_text(question)
