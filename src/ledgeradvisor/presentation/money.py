"""Number formatting for NT$ amounts and percentages."""


def format_amount(value: float) -> str:
    """
    Format an amount with thousands separators and at most 3 decimals.

    >>> format_amount(1500)
    '1,500'
    >>> format_amount(12.5)
    '12.5'
    """
    rounded = round(float(value), 3)
    if rounded == int(rounded):
        return f"{int(rounded):,}"
    return f"{rounded:,.3f}".rstrip("0").rstrip(".")


def format_percent(value: float) -> str:
    """One-decimal percentage without the % sign."""
    return f"{value:.1f}"


def format_month_day(value) -> str:
    """12月7號"""
    return f"{value.month}月{value.day}號"


def format_full_date(value) -> str:
    """2024年12月7號"""
    return f"{value.year}年{value.month}月{value.day}號"
