"""Tests for the proactive nudge engine."""

import datetime as dt
import json
import random
from pathlib import Path
import pytest
from ledgeradvisor.config import NudgeSettings
from ledgeradvisor.contracts.records import Ledger, Record
from ledgeradvisor.dialogs.catalog import DialogCatalog
from ledgeradvisor.nudges.engine import NudgeEngine, grade_month
from ledgeradvisor.state.store import StateStore

FIXTURE_PATH = Path(__file__).parent.parent / "fixtures" / "ledger.sample.json"
TODAY = dt.date(2024, 12, 10)

KEYS = [
    "daily_open_normal", "no_entry_today", "entry_small", "entry_medium", "entry_large",
    "budget_80", "budget_over", "income_normal", "income_dividend", "monthly_good", "monthly_high",
    "monthly_summary_excellent", "monthly_summary_good", "monthly_summary_warning", "monthly_summary_over",
    "overspend_reason_category", "overspend_reason_large",
    "streak_3", "streak_7", "streak_14", "streak_30", "streak_break",
]


@pytest.fixture
def sample_ledger():
    with open(FIXTURE_PATH, 'r', encoding='utf-8') as f:
        return Ledger(**json.load(f))


@pytest.fixture
def store(tmp_path):
    return StateStore(tmp_path / "state.json")


@pytest.fixture
def engine(store):
    catalog = DialogCatalog(dialogs={key: [f"<{key}>"] for key in KEYS})
    return NudgeEngine(catalog, store, NudgeSettings(), random.Random(0))


def expense(amount, category="午餐", day=TODAY):
    return Record(type="expense", date=day, amount=amount, category=category)


class TestRecordSaved:
    """Nudges right after a record is saved."""

    def test_dividend_income(self, engine):
        record = Record(type="income", date=TODAY, amount=3000, category="股利")
        nudge = engine.check_record_saved(record, Ledger(records=[record]), TODAY)
        assert nudge.key == "income_dividend"

    def test_normal_income(self, engine):
        record = Record(type="income", date=TODAY, amount=3000, category="薪水")
        assert engine.check_record_saved(record, Ledger(records=[record]), TODAY).key == "income_normal"

    def test_budget_over(self, engine):
        record = expense(1500, "購物")
        ledger = Ledger(records=[record], budgets=[{"category": "購物", "amount": 1000}])
        assert engine.check_record_saved(record, ledger, TODAY).key == "budget_over"

    def test_budget_warning(self, engine):
        record = expense(170, "午餐")
        ledger = Ledger(records=[record], budgets=[{"category": "午餐", "amount": 200}])
        assert engine.check_record_saved(record, ledger, TODAY).key == "budget_80"

    def test_large_entry(self, engine):
        records = [expense(100), expense(100), expense(100), expense(1000)]
        assert engine.check_record_saved(records[-1], Ledger(records=records), TODAY).key == "entry_large"

    def test_small_entry(self, engine):
        records = [expense(1000), expense(1000), expense(100)]
        assert engine.check_record_saved(records[-1], Ledger(records=records), TODAY).key == "entry_small"

    def test_medium_entry(self, engine):
        records = [expense(100), expense(300)]
        assert engine.check_record_saved(records[-1], Ledger(records=records), TODAY).key == "entry_medium"

    def test_no_average_is_small(self, engine):
        record = expense(0)
        assert engine.check_record_saved(record, Ledger(records=[record]), TODAY).key == "entry_small"

    def test_transfer_is_silent(self, engine):
        record = Record(type="transfer", date=TODAY, amount=500)
        assert engine.check_record_saved(record, Ledger(records=[record]), TODAY) is None

    def test_once_per_day(self, engine, store):
        """A dialog key shown today is not shown again the same day."""
        record = expense(0)
        ledger = Ledger(records=[record])

        assert engine.check_record_saved(record, ledger, TODAY) is not None
        assert engine.check_record_saved(record, ledger, TODAY) is None
        assert store.used_dialog_keys(TODAY) == ["entry_small"]
        assert engine.check_record_saved(record, ledger, TODAY + dt.timedelta(days=1)) is not None

    def test_missing_message_is_skipped(self, store):
        """Keys without a message are neither shown nor marked."""
        engine = NudgeEngine(DialogCatalog(dialogs={}), store)
        record = expense(0)
        assert engine.check_record_saved(record, Ledger(records=[record]), TODAY) is None
        assert store.used_dialog_keys(TODAY) == []


class TestStreakNudges:
    """Streak milestones and lapses."""

    def test_milestone(self, engine, store):
        store.set_streak(2, TODAY - dt.timedelta(days=1))

        nudge = engine.check_streak_encouragement(TODAY)

        assert nudge.key == "streak_3"
        assert store.get_last_streak() == 3

    def test_no_milestone(self, engine, store):
        store.set_streak(3, TODAY - dt.timedelta(days=1))
        assert engine.check_streak_encouragement(TODAY) is None

    def test_fresh_start_after_break(self, engine, store):
        store.set_streak(5, TODAY - dt.timedelta(days=4))
        store.set_last_streak(5)

        nudge = engine.check_streak_encouragement(TODAY)

        assert nudge.key == "streak_break"
        assert "streak_1" in store.used_dialog_keys(TODAY)
        assert store.get_last_streak() == 1

    def test_break_reminder(self, engine, store):
        store.set_streak(3, TODAY - dt.timedelta(days=3))
        store.set_last_streak(3)
        assert engine.check_streak_break_reminder(TODAY).key == "streak_break"

    def test_no_reminder_after_yesterday(self, engine, store):
        store.set_streak(3, TODAY - dt.timedelta(days=1))
        store.set_last_streak(3)
        assert engine.check_streak_break_reminder(TODAY) is None


class TestAppOpen:
    """Nudges when the app is opened."""

    def test_daily_open(self, engine, sample_ledger):
        assert engine.check_daily_open(sample_ledger, TODAY).key == "daily_open_normal"
        assert engine.check_daily_open(sample_ledger, TODAY) is None

    def test_daily_open_after_spending(self, engine, sample_ledger):
        assert engine.check_daily_open(sample_ledger, dt.date(2024, 12, 9)) is None

    def test_no_entry_before_cutoff(self, engine, sample_ledger):
        assert engine.check_no_entry_today(sample_ledger, dt.datetime(2024, 12, 10, 10, 0)).key == "no_entry_today"

    def test_no_entry_after_cutoff(self, engine, sample_ledger):
        assert engine.check_no_entry_today(sample_ledger, dt.datetime(2024, 12, 10, 21, 30)) is None

    def test_no_entry_with_records(self, engine, sample_ledger):
        assert engine.check_no_entry_today(sample_ledger, dt.datetime(2024, 12, 9, 10, 0)) is None

    def test_monthly_good(self, engine, sample_ledger):
        """December (3,190) is under budget (4,000) and below November (12,150)."""
        assert engine.check_monthly(sample_ledger, TODAY).key == "monthly_good"

    def test_monthly_high(self, engine):
        ledger = Ledger(records=[expense(500, day=dt.date(2024, 11, 3)), expense(900)])
        assert engine.check_monthly(ledger, TODAY).key == "monthly_high"

    def test_monthly_summary_first_day(self, engine, sample_ledger):
        nudge = engine.check_monthly_summary(sample_ledger, dt.date(2025, 1, 1))
        assert nudge.key == "monthly_summary_excellent"
        assert nudge.delay_ms == 2000

    def test_monthly_summary_other_days(self, engine, sample_ledger):
        assert engine.check_monthly_summary(sample_ledger, TODAY) is None

    def test_overspend_category(self, engine, sample_ledger):
        ledger = Ledger(records=sample_ledger.records, budgets=[{"category": "購物", "amount": 1000}])

        nudge = engine.check_overspend_reason(ledger, TODAY)

        assert nudge.key == "overspend_reason_category"
        assert nudge.message == "<overspend_reason_category>「購物」本月已超支 NT$500。"

    def test_overspend_large_expenses(self, engine):
        records = [expense(100) for _ in range(8)] + [expense(5000, "家電"), expense(5000, "家電")]
        ledger = Ledger(records=records, budgets=[{"category": "其他", "amount": 1000}])

        nudge = engine.check_overspend_reason(ledger, TODAY)

        assert nudge.key == "overspend_reason_large"
        assert nudge.message.endswith("本月有 2 筆大額支出，共計 NT$10,000。")

    def test_overspend_within_budget(self, engine, sample_ledger):
        assert engine.check_overspend_reason(sample_ledger, TODAY) is None

    def test_on_app_open_order(self, engine, sample_ledger):
        nudges = engine.on_app_open(sample_ledger, dt.datetime(2025, 1, 1, 10, 0))
        assert [n.key for n in nudges] == [
            "daily_open_normal",
            "no_entry_today",
            "monthly_summary_excellent",
            "monthly_good",
        ]

    def test_on_record_saved(self, engine):
        record = expense(0)
        nudges = engine.on_record_saved(record, Ledger(records=[record]), TODAY)
        assert [n.to_dict() for n in nudges] == [{"key": "entry_small", "message": "<entry_small>", "delay_ms": 0}]


class TestGradeMonth:
    """Monthly summary grading."""

    @pytest.mark.parametrize("last_total,before_total,budget,savings,expected", [
        (800, 0, 1000, 25, "monthly_summary_excellent"),
        (950, 0, 1000, 15, "monthly_summary_good"),
        (1100, 0, 1000, 50, "monthly_summary_warning"),
        (1300, 0, 1000, 50, "monthly_summary_over"),
        (900, 1000, 0, 20, "monthly_summary_excellent"),
        (1050, 1000, 0, 10, "monthly_summary_good"),
        (1150, 1000, 0, 30, "monthly_summary_warning"),
        (1500, 1000, 0, 30, "monthly_summary_over"),
    ])
    def test_grades(self, last_total, before_total, budget, savings, expected):
        assert grade_month(last_total, before_total, budget, savings) == expected
