"""
Portfolio analytics: pure functions over a loan snapshot.
"""

from .charts import generate_amount_chart_data, generate_status_chart_data
from .due_dates import (
    DEFAULT_HORIZONS,
    build_due_date_groups,
    days_remaining,
    days_until_due,
    expired_group,
    group_loans_by_due_date,
    is_active,
    is_expired,
    overflow_group,
    today_in,
)
from .formatting import format_currency, format_date
from .loan_metrics import calculate_loan_metrics
from .loan_status import LoanStatus, classify_loan, is_repaid
from .summary import PortfolioSummary, summarize_portfolio

__all__ = [
    "LoanStatus",
    "classify_loan",
    "is_repaid",
    "DEFAULT_HORIZONS",
    "today_in",
    "days_remaining",
    "days_until_due",
    "is_active",
    "is_expired",
    "group_loans_by_due_date",
    "overflow_group",
    "expired_group",
    "build_due_date_groups",
    "calculate_loan_metrics",
    "generate_status_chart_data",
    "generate_amount_chart_data",
    "format_currency",
    "format_date",
    "PortfolioSummary",
    "summarize_portfolio",
]
