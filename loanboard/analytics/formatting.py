"""
Display formatting for reports.
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal


def format_currency(value: Decimal | int | float | None) -> str:
    """
    Format an amount as US dollars.

    >>> format_currency(Decimal("1234.5"))
    '$1,234.50'
    >>> format_currency(None)
    '$0.00'
    """
    if value is None:
        return "$0.00"
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_date(value: date | datetime | None) -> str:
    """
    Short month-day-year date, e.g. "Mar 4, 2024".

    >>> format_date(datetime(2024, 3, 4))
    'Mar 4, 2024'
    """
    if value is None:
        return "Invalid date"
    return f"{value:%b} {value.day}, {value.year}"
