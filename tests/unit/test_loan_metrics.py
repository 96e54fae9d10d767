"""
Unit tests for loan classification and aggregate metrics.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from loanboard.analytics import LoanStatus, calculate_loan_metrics, classify_loan, is_repaid
from loanboard.core.models import LoanRecord
from loanboard.core.tiers import ONE_DOLLAR_TIER, TEN_DOLLAR_TIER, repayment_threshold, tier_for


def loan(wallet="0xA", amount="1", repaid=None, **kwargs):
    return LoanRecord(
        wallet_id=wallet,
        principal_amount=Decimal(amount),
        repaid_amount=Decimal(repaid) if repaid is not None else None,
        **kwargs,
    )


class TestTiers:
    """Tests for denomination tiers"""

    def test_thresholds_exceed_face_value(self):
        for tier in (ONE_DOLLAR_TIER, TEN_DOLLAR_TIER):
            assert tier.repayment_threshold > tier.face_value

    @pytest.mark.parametrize("amount,tier", [
        ("1", ONE_DOLLAR_TIER),
        ("1.00", ONE_DOLLAR_TIER),
        ("10", TEN_DOLLAR_TIER),
        ("5", None),
        ("1.5", None),
    ])
    def test_tier_for(self, amount, tier):
        assert tier_for(Decimal(amount)) == tier

    def test_untiered_threshold_is_principal(self):
        assert repayment_threshold(Decimal("5")) == Decimal("5")


class TestClassifyLoan:
    """Tests for classify_loan"""

    @pytest.mark.parametrize("amount,repaid,expected", [
        ("1", "1.00", LoanStatus.IN_PROGRESS),
        ("1", "1.02", LoanStatus.IN_PROGRESS),
        ("1", "1.025", LoanStatus.REPAID),
        ("1", "1.03", LoanStatus.REPAID),
        ("10", "10", LoanStatus.IN_PROGRESS),
        ("10", "10.14", LoanStatus.IN_PROGRESS),
        ("10", "10.15", LoanStatus.REPAID),
        ("10", "10.25", LoanStatus.REPAID),
        ("10", "5", LoanStatus.IN_PROGRESS),
        ("5", "5", LoanStatus.REPAID),
    ])
    def test_threshold_not_face_value_decides_repaid(self, amount, repaid, expected):
        assert classify_loan(loan(amount=amount, repaid=repaid)) is expected

    def test_unknown_repayment_is_in_progress(self):
        assert classify_loan(loan(repaid=None)) is LoanStatus.IN_PROGRESS
        assert not is_repaid(loan(repaid=None))

    def test_default_flag_wins(self):
        assert classify_loan(loan(repaid="2", is_defaulted=True)) is LoanStatus.DEFAULTED

    def test_default_date_wins(self):
        record = loan(repaid="2", default_date=datetime(2025, 1, 1, tzinfo=timezone.utc))
        assert classify_loan(record) is LoanStatus.DEFAULTED


class TestCalculateLoanMetrics:
    """Tests for calculate_loan_metrics"""

    def test_empty(self):
        metrics = calculate_loan_metrics([])

        assert metrics.total_loans == 0
        assert metrics.one_dollar_loans.total == 0

    def test_scenario(self):
        now = datetime.now(timezone.utc)
        loans = [
            loan("0xA", "1", None, due_date=now + timedelta(days=3)),
            loan("0xB", "10", "5", due_date=now - timedelta(days=1)),
        ]

        metrics = calculate_loan_metrics(loans)

        assert metrics.total_loans == 2
        assert metrics.total_in_progress == 2
        assert metrics.total_repaid == 0
        assert metrics.total_defaulted == 0
        assert metrics.one_dollar_loans.total == 1
        assert metrics.one_dollar_loans.in_progress == 1
        assert metrics.ten_dollar_loans.total == 1
        assert metrics.ten_dollar_loans.in_progress == 1

    def test_mixed_portfolio(self):
        loans = [
            loan("0x1", "1", "1.03"),
            loan("0x2", "1", "1.00"),
            loan("0x3", "1", None, is_defaulted=True),
            loan("0x4", "10", "10.25"),
            loan("0x5", "10", "0", default_date=datetime(2025, 1, 1, tzinfo=timezone.utc)),
            loan("0x6", "5", "5"),
        ]

        metrics = calculate_loan_metrics(loans)

        assert metrics.total_loans == 6
        assert metrics.total_repaid == 3
        assert metrics.total_in_progress == 1
        assert metrics.total_defaulted == 2
        assert metrics.one_dollar_loans.model_dump() == {
            "defaulted": 1, "repaid": 1, "in_progress": 1, "total": 3,
        }
        assert metrics.ten_dollar_loans.model_dump() == {
            "defaulted": 1, "repaid": 1, "in_progress": 0, "total": 2,
        }

    def test_totals_partition_the_portfolio(self):
        loans = [loan(f"0x{i}", "1" if i % 2 else "10", str(i)) for i in range(12)]
        metrics = calculate_loan_metrics(loans)

        assert (
            metrics.total_defaulted + metrics.total_repaid + metrics.total_in_progress
            == metrics.total_loans
        )

    def test_input_not_mutated(self):
        loans = [loan("0xA", "1", "1.03")]
        before = [l.model_dump() for l in loans]

        calculate_loan_metrics(loans)
        calculate_loan_metrics(loans)

        assert [l.model_dump() for l in loans] == before
