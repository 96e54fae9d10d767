"""
Aggregate portfolio metrics.
"""

from typing import Sequence

from loanboard.core.models import LoanMetrics, LoanRecord, TierMetrics
from loanboard.core.tiers import ONE_DOLLAR_TIER, TEN_DOLLAR_TIER, tier_for

from .loan_status import LoanStatus, classify_loan


def _count(tier: TierMetrics, status: LoanStatus) -> None:
    tier.total += 1
    if status is LoanStatus.DEFAULTED:
        tier.defaulted += 1
    elif status is LoanStatus.REPAID:
        tier.repaid += 1
    else:
        tier.in_progress += 1


def calculate_loan_metrics(loans: Sequence[LoanRecord]) -> LoanMetrics:
    """
    Compute portfolio KPIs.

    Loans whose principal matches neither tier count toward the totals
    only.
    """
    metrics = LoanMetrics(total_loans=len(loans))
    tier_buckets = {
        ONE_DOLLAR_TIER: metrics.one_dollar_loans,
        TEN_DOLLAR_TIER: metrics.ten_dollar_loans,
    }

    for loan in loans:
        status = classify_loan(loan)
        if status is LoanStatus.DEFAULTED:
            metrics.total_defaulted += 1
        elif status is LoanStatus.REPAID:
            metrics.total_repaid += 1
        else:
            metrics.total_in_progress += 1

        tier = tier_for(loan.principal_amount)
        if tier is not None:
            _count(tier_buckets[tier], status)

    return metrics
