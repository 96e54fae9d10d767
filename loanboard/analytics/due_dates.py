"""
Due-date views over a loan snapshot.

Horizon buckets are cumulative: a loan due in 3 days belongs to every
bucket whose horizon is at least 3. Expired loans form a separate view
and never appear in a horizon bucket.

Day counts are taken between calendar dates in the reference timezone,
so they do not depend on the time of day.
"""

from datetime import date, datetime, timezone, tzinfo
from typing import Iterable, Sequence

from loanboard.core.models import DueDateGroup, LoanRecord

from .loan_status import LoanStatus, classify_loan

DEFAULT_HORIZONS: tuple[int, ...] = (1, 5, 7, 10, 14, 30)


def today_in(tz: tzinfo = timezone.utc) -> date:
    """Current calendar date in the reference timezone."""
    return datetime.now(tz).date()


def days_remaining(due: datetime, today: date, tz: tzinfo = timezone.utc) -> int:
    """
    Whole days from today until due; negative once the date has passed.

    >>> days_remaining(datetime(2024, 3, 4, 18, tzinfo=timezone.utc), date(2024, 3, 1))
    3
    >>> days_remaining(datetime(2024, 2, 29, tzinfo=timezone.utc), date(2024, 3, 1))
    -1
    """
    return (due.astimezone(tz).date() - today).days


def days_until_due(record: LoanRecord, today: date, tz: tzinfo = timezone.utc) -> int:
    return days_remaining(record.due_date, today, tz)


def is_active(record: LoanRecord, today: date, tz: tzinfo = timezone.utc) -> bool:
    """Not defaulted, not repaid, and due today or later."""
    return (
        classify_loan(record) is LoanStatus.IN_PROGRESS
        and days_until_due(record, today, tz) >= 0
    )


def is_expired(record: LoanRecord, today: date, tz: tzinfo = timezone.utc) -> bool:
    """Not defaulted, not repaid, and due strictly before today."""
    return (
        classify_loan(record) is LoanStatus.IN_PROGRESS
        and days_until_due(record, today, tz) < 0
    )


def _by_due_date(loans: Iterable[LoanRecord]) -> list[LoanRecord]:
    return sorted(loans, key=lambda loan: loan.due_date)


def group_loans_by_due_date(
    loans: Sequence[LoanRecord],
    today: date,
    horizons: Sequence[int] = DEFAULT_HORIZONS,
    tz: tzinfo = timezone.utc,
) -> list[DueDateGroup]:
    """
    Bucket active loans into cumulative day horizons.

    Args:
        loans: Loan snapshot (not modified)
        today: Reference date
        horizons: Day thresholds; output follows ascending order
        tz: Reference timezone for day counts

    Returns:
        One group per horizon, members sorted by ascending due date
    """
    active = [
        (loan, days_until_due(loan, today, tz))
        for loan in loans
        if is_active(loan, today, tz)
    ]

    groups = []
    for horizon in sorted(horizons):
        members = [loan for loan, days in active if days <= horizon]
        groups.append(DueDateGroup(
            label=f"Due in {horizon} day{'s' if horizon != 1 else ''}",
            kind="horizon",
            horizon_days=horizon,
            loans=_by_due_date(members),
        ))
    return groups


def overflow_group(
    loans: Sequence[LoanRecord],
    today: date,
    horizons: Sequence[int] = DEFAULT_HORIZONS,
    tz: tzinfo = timezone.utc,
) -> DueDateGroup:
    """Active loans due after the largest horizon."""
    limit = max(horizons)
    members = [
        loan for loan in loans
        if is_active(loan, today, tz) and days_until_due(loan, today, tz) > limit
    ]
    return DueDateGroup(
        label=f"Due after {limit} days",
        kind="overflow",
        loans=_by_due_date(members),
    )


def expired_group(
    loans: Sequence[LoanRecord],
    today: date,
    tz: tzinfo = timezone.utc,
) -> DueDateGroup:
    """Past-due loans that are neither defaulted nor repaid."""
    members = [loan for loan in loans if is_expired(loan, today, tz)]
    return DueDateGroup(label="Expired", kind="expired", loans=_by_due_date(members))


def build_due_date_groups(
    loans: Sequence[LoanRecord],
    today: date,
    horizons: Sequence[int] = DEFAULT_HORIZONS,
    tz: tzinfo = timezone.utc,
) -> list[DueDateGroup]:
    """Horizon buckets followed by the overflow and expired views."""
    groups = group_loans_by_due_date(loans, today, horizons, tz)
    groups.append(overflow_group(loans, today, horizons, tz))
    groups.append(expired_group(loans, today, tz))
    return groups
