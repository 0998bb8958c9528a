"""Proactive advisor nudges triggered by bookkeeping events."""

import datetime as dt
import random
from dataclasses import asdict, dataclass
from typing import Callable, List, Optional
from ..analysis.ledger_stats import (
    month_expenses,
    month_incomes,
    previous_month,
    round_half_up,
    total_amount,
    total_budget,
    category_totals,
)
from ..analysis.streak import update_accounting_streak, days_since_last_record
from ..config import NudgeSettings
from ..contracts.records import Ledger, Record
from ..dialogs.catalog import DialogCatalog
from ..presentation.money import format_amount
from ..state.store import StateStore
from ..utils.logging import get_logger

logger = get_logger("nudges.engine")

DIVIDEND_KEYWORDS = ("股息", "股利", "配息")

MONTHLY_SUMMARY_KEYS = (
    "monthly_summary_excellent",
    "monthly_summary_good",
    "monthly_summary_warning",
    "monthly_summary_over",
)

OVERSPEND_KEYS = ("overspend_reason_category", "overspend_reason_large")


@dataclass
class Nudge:
    """A short proactive message from the advisor."""
    key: str
    message: str
    delay_ms: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class NudgeEngine:
    """
    Decides which nudge, if any, to show for a bookkeeping event.

    Each dialog key is shown at most once per day. When the catalog has no
    message for a candidate key, the check moves on to its next candidate.
    """

    def __init__(
        self,
        catalog: DialogCatalog,
        store: StateStore,
        settings: Optional[NudgeSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.catalog = catalog
        self.store = store
        self.settings = settings or NudgeSettings()
        self.rng = rng or random.Random()

    def _emit(
        self,
        dialog_key: str,
        day: dt.date,
        mark_key: Optional[str] = None,
        decorate: Optional[Callable[[str], str]] = None,
        delay_ms: int = 0,
    ) -> Optional[Nudge]:
        message = self.catalog.pick(dialog_key, self.rng)
        if not message:
            return None
        if decorate is not None:
            message = decorate(message)
        self.store.mark_dialog_key_used(mark_key or dialog_key, day)
        logger.debug(f"Nudge {dialog_key} shown on {day.isoformat()}")
        return Nudge(key=dialog_key, message=message, delay_ms=delay_ms)

    def _first(self, day: dt.date, used: List[str], candidates: List[str]) -> Optional[Nudge]:
        for key in candidates:
            if key in used:
                continue
            nudge = self._emit(key, day)
            if nudge:
                return nudge
        return None

    # Record-level checks

    def check_record_saved(self, record: Record, ledger: Ledger, today: dt.date) -> Optional[Nudge]:
        """React to a freshly saved record (``ledger`` already contains it)."""
        used = self.store.used_dialog_keys(today)
        expenses = month_expenses(ledger.records, today.year, today.month)
        expense_total = total_amount(expenses)
        average = expense_total / len(expenses) if expenses else 0.0

        if record.is_income:
            category = record.category or ""
            if any(k in category for k in DIVIDEND_KEYWORDS):
                return self._first(today, used, ["income_dividend"])
            return self._first(today, used, ["income_normal"])

        if not record.is_expense:
            return None

        budget = ledger.budget_for(record.category)
        if budget is not None:
            spent = total_amount(e for e in expenses if e.category_name == record.category)
            percentage = spent / budget.amount * 100
            if percentage >= 100:
                nudge = self._first(today, used, ["budget_over"])
                if nudge:
                    return nudge
            elif percentage >= self.settings.budget_warning_percent:
                nudge = self._first(today, used, ["budget_80"])
                if nudge:
                    return nudge

        if average <= 0:
            return self._first(today, used, ["entry_small"])

        amount = record.amount
        if amount >= average * self.settings.entry_large_multiplier:
            tier = "entry_large"
        elif amount >= average * self.settings.entry_small_multiplier:
            tier = "entry_medium"
        else:
            tier = "entry_small"
        return self._first(today, used, [tier])

    def check_streak_encouragement(self, today: dt.date) -> Optional[Nudge]:
        """Advance the streak and celebrate milestones or a fresh start."""
        used = self.store.used_dialog_keys(today)
        streak = update_accounting_streak(self.store, today)

        streak_key = f"streak_{streak}"
        if streak_key in used:
            return None

        dialog_key = None
        if streak in self.settings.streak_milestones:
            dialog_key = streak_key
        elif streak == 1 and self.store.get_last_streak() > 1:
            dialog_key = "streak_break"

        if dialog_key is None:
            return None

        nudge = self._emit(dialog_key, today, mark_key=streak_key)
        if nudge:
            self.store.set_last_streak(streak)
        return nudge

    # App-open checks

    def check_daily_open(self, ledger: Ledger, today: dt.date) -> Optional[Nudge]:
        """Greet the first app open of a day with nothing spent yet."""
        used = self.store.used_dialog_keys(today)
        if "daily_open_normal" in used:
            return None

        spent_today = total_amount(r for r in ledger.records if r.is_expense and r.date == today)
        if spent_today == 0:
            return self._emit("daily_open_normal", today)
        return None

    def check_no_entry_today(self, ledger: Ledger, now: dt.datetime) -> Optional[Nudge]:
        """Remind before the cutoff hour when nothing was recorded today."""
        today = now.date()
        used = self.store.used_dialog_keys(today)
        if "no_entry_today" in used:
            return None

        if now.hour >= self.settings.no_entry_cutoff_hour:
            return None

        if any(r.date == today for r in ledger.records):
            return None
        return self._emit("no_entry_today", today)

    def check_monthly(self, ledger: Ledger, today: dt.date) -> Optional[Nudge]:
        """Compare this month's spending with last month and the budget."""
        used = self.store.used_dialog_keys(today)
        month_total = total_amount(month_expenses(ledger.records, today.year, today.month))
        last_year, last_month = previous_month(today.year, today.month)
        last_total = total_amount(month_expenses(ledger.records, last_year, last_month))
        budget = total_budget(ledger.budgets)

        if budget > 0 and month_total <= budget and month_total <= last_total and "monthly_good" not in used:
            nudge = self._emit("monthly_good", today)
            if nudge:
                return nudge

        over_budget = budget > 0 and month_total > budget
        if (month_total > last_total or over_budget) and "monthly_high" not in used:
            return self._emit("monthly_high", today)
        return None

    def check_monthly_summary(self, ledger: Ledger, today: dt.date) -> Optional[Nudge]:
        """Grade last month on the first day of a new month."""
        if today.day != 1:
            return None

        used = self.store.used_dialog_keys(today)
        if any(key in used for key in MONTHLY_SUMMARY_KEYS):
            return None

        last_year, last_month = previous_month(today.year, today.month)
        before_year, before_month = previous_month(last_year, last_month)

        last_total = total_amount(month_expenses(ledger.records, last_year, last_month))
        before_total = total_amount(month_expenses(ledger.records, before_year, before_month))
        last_income = total_amount(month_incomes(ledger.records, last_year, last_month))
        budget = total_budget(ledger.budgets)

        savings_rate = (last_income - last_total) / last_income * 100 if last_income > 0 else 0.0
        dialog_key = grade_month(last_total, before_total, budget, savings_rate)

        return self._emit(dialog_key, today, delay_ms=self.settings.monthly_summary_delay_ms)

    def check_overspend_reason(self, ledger: Ledger, today: dt.date) -> Optional[Nudge]:
        """Explain why the month is over the total budget."""
        used = self.store.used_dialog_keys(today)
        expenses = month_expenses(ledger.records, today.year, today.month)
        month_total = total_amount(expenses)
        budget = total_budget(ledger.budgets)

        if budget == 0 or month_total <= budget:
            return None

        if any(key in used for key in OVERSPEND_KEYS):
            return None

        spent_by_category = category_totals(expenses)
        worst_category = None
        worst_overspend = 0.0
        for item in ledger.budgets:
            spent = spent_by_category.get(item.category, 0.0)
            if spent > item.amount and spent - item.amount > worst_overspend:
                worst_overspend = spent - item.amount
                worst_category = item.category

        average = month_total / len(expenses) if expenses else 0.0
        large = [r for r in expenses if r.amount >= average * self.settings.overspend_large_multiplier]

        if worst_category:
            suffix = f"「{worst_category}」本月已超支 NT${format_amount(round_half_up(worst_overspend))}。"
            nudge = self._emit("overspend_reason_category", today, decorate=lambda m: m + suffix)
            if nudge:
                return nudge

        if len(large) >= self.settings.overspend_large_min_count:
            large_total = total_amount(large)
            suffix = f"本月有 {len(large)} 筆大額支出，共計 NT${format_amount(round_half_up(large_total))}。"
            return self._emit("overspend_reason_large", today, decorate=lambda m: m + suffix)
        return None

    def check_streak_break_reminder(self, today: dt.date) -> Optional[Nudge]:
        """Nudge a user whose bookkeeping streak lapsed."""
        used = self.store.used_dialog_keys(today)
        if "streak_break" in used:
            return None

        days = days_since_last_record(self.store, today)
        if days is None:
            return None

        if days > 1 and self.store.get_last_streak() > 0:
            return self._emit("streak_break", today)
        return None

    # Entry points

    def on_record_saved(self, record: Record, ledger: Ledger, today: dt.date) -> List[Nudge]:
        """Checks to run right after a record is saved."""
        nudges = [
            self.check_record_saved(record, ledger, today),
            self.check_streak_encouragement(today),
        ]
        return [n for n in nudges if n is not None]

    def on_app_open(self, ledger: Ledger, now: dt.datetime) -> List[Nudge]:
        """Checks to run when the app is opened."""
        today = now.date()
        nudges = [
            self.check_daily_open(ledger, today),
            self.check_no_entry_today(ledger, now),
            self.check_monthly_summary(ledger, today),
            self.check_monthly(ledger, today),
            self.check_overspend_reason(ledger, today),
            self.check_streak_break_reminder(today),
        ]
        return [n for n in nudges if n is not None]


def grade_month(last_total: float, before_total: float, budget: float, savings_rate: float) -> str:
    """Pick the monthly summary dialog key for last month's results."""
    if budget > 0:
        budget_ratio = last_total / budget * 100
        if budget_ratio <= 80 and savings_rate >= 20:
            return "monthly_summary_excellent"
        if budget_ratio <= 100 and savings_rate >= 10:
            return "monthly_summary_good"
        if budget_ratio <= 120:
            return "monthly_summary_warning"
        return "monthly_summary_over"

    if last_total <= before_total and savings_rate >= 20:
        return "monthly_summary_excellent"
    if last_total <= before_total * 1.1 and savings_rate >= 10:
        return "monthly_summary_good"
    if last_total <= before_total * 1.2:
        return "monthly_summary_warning"
    return "monthly_summary_over"
