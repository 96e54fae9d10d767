"""
Unit tests for due-date calculations and grouping.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from loanboard.analytics import (
    DEFAULT_HORIZONS,
    build_due_date_groups,
    days_remaining,
    expired_group,
    group_loans_by_due_date,
    is_active,
    is_expired,
    overflow_group,
)
from loanboard.core.models import DUE_DATE_SENTINEL, LoanRecord

TODAY = date(2025, 3, 10)


def loan(wallet, due_offset, amount="1", repaid=None, **kwargs):
    due = datetime.combine(TODAY + timedelta(days=due_offset), datetime.min.time(), timezone.utc)
    return LoanRecord(
        wallet_id=wallet,
        principal_amount=Decimal(amount),
        repaid_amount=Decimal(repaid) if repaid is not None else None,
        due_date=due + timedelta(hours=15),
        **kwargs,
    )


def by_label(groups):
    return {g.label: g for g in groups}


class TestDaysRemaining:
    """Tests for day counting"""

    @pytest.mark.parametrize("due,expected", [
        (datetime(2025, 3, 10, 0, 0, tzinfo=timezone.utc), 0),
        (datetime(2025, 3, 10, 23, 59, tzinfo=timezone.utc), 0),
        (datetime(2025, 3, 11, 0, 1, tzinfo=timezone.utc), 1),
        (datetime(2025, 3, 13, 12, 0, tzinfo=timezone.utc), 3),
        (datetime(2025, 3, 9, 23, 59, tzinfo=timezone.utc), -1),
    ])
    def test_independent_of_time_of_day(self, due, expected):
        assert days_remaining(due, TODAY) == expected

    def test_reference_timezone(self):
        due = datetime(2025, 3, 11, 2, 0, tzinfo=timezone.utc)
        # 2025-03-10 22:00 in New York
        assert days_remaining(due, TODAY, ZoneInfo("America/New_York")) == 0
        assert days_remaining(due, TODAY) == 1


class TestActiveAndExpired:
    """Tests for is_active / is_expired"""

    def test_due_today_is_active(self):
        record = loan("0xA", 0)
        assert is_active(record, TODAY)
        assert not is_expired(record, TODAY)

    def test_due_yesterday_is_expired(self):
        record = loan("0xA", -1)
        assert is_expired(record, TODAY)
        assert not is_active(record, TODAY)

    def test_defaulted_is_neither(self):
        record = loan("0xA", -1, is_defaulted=True)
        assert not is_active(record, TODAY)
        assert not is_expired(record, TODAY)

    def test_repaid_is_neither(self):
        record = loan("0xA", 3, repaid="1.03")
        assert not is_active(record, TODAY)
        assert not is_expired(loan("0xB", -3, repaid="1.03"), TODAY)

    def test_sentinel_due_date_is_active_but_beyond_horizons(self):
        record = LoanRecord(wallet_id="0xA", principal_amount=Decimal("1"), due_date=DUE_DATE_SENTINEL)

        assert is_active(record, TODAY)
        groups = group_loans_by_due_date([record], TODAY)
        assert all(g.count == 0 for g in groups)
        assert overflow_group([record], TODAY).wallet_ids == ["0xA"]


class TestGroupLoansByDueDate:
    """Tests for cumulative horizon buckets"""

    def test_default_horizons(self):
        groups = group_loans_by_due_date([], TODAY)

        assert [g.horizon_days for g in groups] == list(DEFAULT_HORIZONS)
        assert [g.label for g in groups] == [
            "Due in 1 day", "Due in 5 days", "Due in 7 days",
            "Due in 10 days", "Due in 14 days", "Due in 30 days",
        ]

    def test_membership_is_cumulative(self):
        groups = group_loans_by_due_date([loan("0xA", 3)], TODAY)
        members = {g.horizon_days: g.wallet_ids for g in groups}

        assert members[1] == []
        for horizon in (5, 7, 10, 14, 30):
            assert members[horizon] == ["0xA"]

    def test_hypothetical_two_day_bucket_excludes_three_day_loan(self):
        groups = group_loans_by_due_date([loan("0xA", 3)], TODAY, horizons=(2, 3))
        assert [g.count for g in groups] == [0, 1]

    def test_due_today_in_every_bucket(self):
        groups = group_loans_by_due_date([loan("0xA", 0)], TODAY)
        assert all(g.wallet_ids == ["0xA"] for g in groups)

    def test_expired_not_in_horizon_buckets(self):
        groups = group_loans_by_due_date([loan("0xA", -1)], TODAY)
        assert all(g.count == 0 for g in groups)

    def test_sorted_by_due_date(self):
        loans = [loan("0xC", 9), loan("0xA", 1), loan("0xB", 5)]
        groups = by_label(group_loans_by_due_date(loans, TODAY))

        assert groups["Due in 30 days"].wallet_ids == ["0xA", "0xB", "0xC"]
        assert groups["Due in 5 days"].wallet_ids == ["0xA", "0xB"]

    def test_unsorted_horizons(self):
        groups = group_loans_by_due_date([loan("0xA", 3)], TODAY, horizons=(30, 1, 7))
        assert [g.horizon_days for g in groups] == [1, 7, 30]

    def test_input_not_mutated(self):
        loans = [loan("0xC", 9), loan("0xA", 1)]
        group_loans_by_due_date(loans, TODAY)

        assert [l.wallet_id for l in loans] == ["0xC", "0xA"]


class TestDerivedGroups:
    """Tests for overflow and expired groups"""

    def test_expired_group(self):
        loans = [loan("0xB", -1), loan("0xA", -10), loan("0xC", 2), loan("0xD", -2, is_defaulted=True)]
        group = expired_group(loans, TODAY)

        assert group.kind == "expired"
        assert group.label == "Expired"
        assert group.wallet_ids == ["0xA", "0xB"]

    def test_overflow_group(self):
        loans = [loan("0xA", 31), loan("0xB", 30), loan("0xC", 45)]
        group = overflow_group(loans, TODAY)

        assert group.kind == "overflow"
        assert group.wallet_ids == ["0xA", "0xC"]

    def test_build_due_date_groups(self):
        loans = [loan("0xA", 3), loan("0xB", -1), loan("0xC", 60)]
        groups = build_due_date_groups(loans, TODAY)

        assert [g.kind for g in groups] == ["horizon"] * 6 + ["overflow", "expired"]
        named = by_label(groups)
        assert named["Due in 5 days"].wallet_ids == ["0xA"]
        assert named["Due after 30 days"].wallet_ids == ["0xC"]
        assert named["Expired"].wallet_ids == ["0xB"]
