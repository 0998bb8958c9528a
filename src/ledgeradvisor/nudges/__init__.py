"""Proactive advisor nudges."""

from .engine import Nudge, NudgeEngine, grade_month

__all__ = ["Nudge", "NudgeEngine", "grade_month"]
