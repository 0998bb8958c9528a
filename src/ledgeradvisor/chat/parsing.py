"""Extract amounts, dates and question complexity from chat messages."""

import datetime as dt
import re
from typing import List, Optional

FULL_DATE_PATTERN = re.compile(r"(\d{4})\s*[年/\-]\s*(\d{1,2})\s*[月/\-]\s*(\d{1,2})\s*[日號]?")
SLASH_DATE_PATTERN = re.compile(r"(?<!\d)(\d{1,2})\s*[/\-]\s*(\d{1,2})")
MONTH_DAY_PATTERN = re.compile(r"(?<!\d)(\d{1,2})\s*月\s*(\d{1,2})\s*[日號]?")
DAYS_AGO_PATTERN = re.compile(r"(\d+)\s*天前")
DAY_ONLY_PATTERN = re.compile(r"(?<!\d)(\d{1,2})\s*號")
TODAY_PATTERN = re.compile(r"今天|今日")
YESTERDAY_PATTERN = re.compile(r"昨天|昨日")
DAY_BEFORE_YESTERDAY_PATTERN = re.compile(r"前天")

# Month/day spans whose digits are not amounts (12/7, 12-7, 12月7號).
MONTH_DAY_MENTION = re.compile(r"(?<!\d)(\d{1,2})\s*[/\-月]\s*(\d{1,2})")

AMOUNT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(元|塊|nt\$|萬|千)?", re.IGNORECASE)

_DATE_SPAN_PATTERNS = (
    FULL_DATE_PATTERN,
    MONTH_DAY_MENTION,
    DAYS_AGO_PATTERN,
    DAY_ONLY_PATTERN,
)

_WORD_DATE_PATTERNS = (TODAY_PATTERN, YESTERDAY_PATTERN, DAY_BEFORE_YESTERDAY_PATTERN)


def strip_date_expressions(message: str) -> str:
    """Blank out numeric date expressions so their digits are not read as amounts."""
    for pattern in _DATE_SPAN_PATTERNS:
        message = pattern.sub(lambda m: " " * len(m.group(0)), message)
    return message


def extract_amounts(message: str) -> List[float]:
    """
    Positive amounts mentioned in a message, in order of appearance.

    Understands 元/塊 suffixes and the 萬 (x10000) / 千 (x1000) multipliers.
    """
    amounts = []
    for match in AMOUNT_PATTERN.finditer(strip_date_expressions(message)):
        value = float(match.group(1))
        unit = match.group(2) or ""
        if unit == "萬":
            value *= 10000
        elif unit == "千":
            value *= 1000
        if value > 0:
            amounts.append(value)
    return amounts


def last_number(message: str) -> Optional[float]:
    """The last integer in a message with date expressions removed."""
    numbers = re.findall(r"\d+", strip_date_expressions(message))
    if not numbers:
        return None
    return float(numbers[-1])


def mentions_date(message: str) -> bool:
    """True when the message contains any date expression we understand."""
    if any(p.search(message) for p in _WORD_DATE_PATTERNS):
        return True
    return any(p.search(message) for p in _DATE_SPAN_PATTERNS)


def _safe_date(year: int, month: int, day: int) -> Optional[dt.date]:
    try:
        return dt.date(year, month, day)
    except ValueError:
        return None


def _month_day_date(year: int, month: int, day: int) -> Optional[dt.date]:
    # 7/12 with a month above 12 reads as day/month.
    if month > 12 and day <= 12:
        month, day = day, month
    return _safe_date(year, month, day)


def resolve_target_date(message: str, today: dt.date) -> Optional[dt.date]:
    """
    Resolve the date a question refers to.

    Supported forms, in priority order: 2024年12月5日, 12/7, 12-7, 12月7號,
    今天, 昨天, 前天, 3天前, 5號. Dates without a year fall in the current
    year; impossible calendar dates resolve to None.
    """
    match = FULL_DATE_PATTERN.search(message)
    if match:
        return _safe_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    for pattern in (SLASH_DATE_PATTERN, MONTH_DAY_PATTERN):
        match = pattern.search(message)
        if match:
            return _month_day_date(today.year, int(match.group(1)), int(match.group(2)))

    if TODAY_PATTERN.search(message):
        return today
    if YESTERDAY_PATTERN.search(message):
        return today - dt.timedelta(days=1)
    if DAY_BEFORE_YESTERDAY_PATTERN.search(message):
        return today - dt.timedelta(days=2)

    match = DAYS_AGO_PATTERN.search(message)
    if match:
        return today - dt.timedelta(days=int(match.group(1)))

    match = DAY_ONLY_PATTERN.search(message)
    if match:
        return _safe_date(today.year, today.month, int(match.group(1)))

    return None


def calculate_question_complexity(user_message: str) -> int:
    """Score how involved a question is, from 0 to 6."""
    message = user_message.lower()
    complexity = 0

    if re.search(r"\d{1,2}[/\-月]\d{1,2}", message):
        complexity += 1
    if re.search(r"\d+", message):
        complexity += 1
    if "分類" in message or "類別" in message:
        complexity += 1
    if "趨勢" in message or "變化" in message:
        complexity += 2
    if "預算" in message:
        complexity += 1
    if "建議" in message or "理財" in message:
        complexity += 2
    if len(re.findall(r"\d+", message)) > 1:
        complexity += 1

    return min(complexity, 6)


def thinking_time_ms(user_message: str, base_ms: int = 300, step_ms: int = 200) -> int:
    """Simulated time to think about a question before answering."""
    return base_ms + calculate_question_complexity(user_message) * step_ms
