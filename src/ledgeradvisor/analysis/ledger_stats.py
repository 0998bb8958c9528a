"""Month-scoped aggregations over bookkeeping records."""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
from ..contracts.records import Budget, Record


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """Move (year, month) by ``offset`` months; January - 1 is December of the previous year."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def previous_month(year: int, month: int) -> Tuple[int, int]:
    return shift_month(year, month, -1)


def in_month(record: Record, year: int, month: int) -> bool:
    return record.date.year == year and record.date.month == month


def month_records(records: Iterable[Record], year: int, month: int) -> List[Record]:
    return [r for r in records if in_month(r, year, month)]


def month_expenses(records: Iterable[Record], year: int, month: int) -> List[Record]:
    return [r for r in records if r.is_expense and in_month(r, year, month)]


def month_incomes(records: Iterable[Record], year: int, month: int) -> List[Record]:
    return [r for r in records if r.is_income and in_month(r, year, month)]


def total_amount(records: Iterable[Record]) -> float:
    return sum(r.amount for r in records)


def category_totals(records: Iterable[Record]) -> Dict[str, float]:
    """Sum amounts per category, keeping first-seen order."""
    totals: Dict[str, float] = {}
    for record in records:
        category = record.category_name
        totals[category] = totals.get(category, 0.0) + record.amount
    return totals


def ranked_categories(records: Iterable[Record]) -> List[Tuple[str, float]]:
    """Categories sorted by total descending; ties keep first-seen order."""
    return sorted(category_totals(records).items(), key=lambda item: item[1], reverse=True)


def total_budget(budgets: Iterable[Budget]) -> float:
    return sum(b.amount for b in budgets)


def percent_of(part: float, whole: float) -> float:
    """Share of ``part`` in ``whole`` as a percentage (0 when whole is empty)."""
    if whole <= 0:
        return 0.0
    return part / whole * 100


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


@dataclass
class MonthSummary:
    """Totals for one calendar month."""
    year: int
    month: int
    expense_total: float
    income_total: float
    expense_count: int
    income_count: int
    record_count: int
    top_category: Optional[Tuple[str, float]]

    @property
    def balance(self) -> float:
        return self.income_total - self.expense_total

    @property
    def savings_rate(self) -> float:
        """Share of income left after expenses, in percent (0 without income)."""
        if self.income_total <= 0:
            return 0.0
        return (self.income_total - self.expense_total) / self.income_total * 100


def summarize_month(records: Iterable[Record], year: int, month: int) -> MonthSummary:
    """Build the MonthSummary for a calendar month."""
    scoped = month_records(records, year, month)
    expenses = [r for r in scoped if r.is_expense]
    incomes = [r for r in scoped if r.is_income]
    ranking = ranked_categories(expenses)
    return MonthSummary(
        year=year,
        month=month,
        expense_total=total_amount(expenses),
        income_total=total_amount(incomes),
        expense_count=len(expenses),
        income_count=len(incomes),
        record_count=len(scoped),
        top_category=ranking[0] if ranking else None,
    )


def monthly_expense_series(records: Iterable[Record], year: int, month: int, months: int) -> List[Tuple[str, float]]:
    """
    Expense totals for the ``months`` months ending at (year, month).

    Returns:
        List of ("YYYY-MM", total) pairs, oldest first
    """
    series: Dict[str, float] = {}
    for offset in range(months - 1, -1, -1):
        y, m = shift_month(year, month, -offset)
        series[f"{y}-{m:02d}"] = 0.0

    for record in records:
        if not record.is_expense:
            continue
        key = f"{record.date.year}-{record.date.month:02d}"
        if key in series:
            series[key] += record.amount

    return list(series.items())
