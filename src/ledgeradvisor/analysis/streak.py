"""Consecutive-day bookkeeping streak tracking."""

import datetime as dt
from ..state.store import StateStore
from ..utils.logging import get_logger

logger = get_logger("analysis.streak")


def update_accounting_streak(store: StateStore, today: dt.date) -> int:
    """
    Advance the bookkeeping streak for activity on ``today``.

    Yesterday's activity extends the streak, a longer gap restarts it at 1,
    same-day activity leaves it unchanged.

    Returns:
        The streak after the update
    """
    streak = store.get_streak()
    last_date = store.get_last_record_date()

    if last_date is None:
        streak = 1
    else:
        days = (today - last_date).days
        if days == 1:
            streak += 1
        elif days > 1:
            streak = 1

    store.set_streak(streak, today)
    logger.debug(f"Bookkeeping streak is now {streak} day(s)")
    return streak


def days_since_last_record(store: StateStore, today: dt.date):
    """Days between the last recorded activity and ``today`` (None if never)."""
    last_date = store.get_last_record_date()
    if last_date is None:
        return None
    return (today - last_date).days
