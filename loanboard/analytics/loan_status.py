"""
Loan status classification.

Precedence: defaulted > repaid > in progress. Repayment is judged
against the tier's repayment threshold, not face value.
"""

from enum import Enum

from loanboard.core.models import LoanRecord
from loanboard.core.tiers import repayment_threshold


class LoanStatus(str, Enum):
    DEFAULTED = "defaulted"
    REPAID = "repaid"
    IN_PROGRESS = "in_progress"


def is_repaid(record: LoanRecord) -> bool:
    """True when the repaid amount reaches the loan's repayment threshold."""
    if record.repaid_amount is None:
        return False
    return record.repaid_amount >= repayment_threshold(record.principal_amount)


def classify_loan(record: LoanRecord) -> LoanStatus:
    """
    Classify a loan into exactly one status.

    >>> from decimal import Decimal
    >>> classify_loan(LoanRecord(wallet_id="0xA", principal_amount=Decimal("1"),
    ...                          repaid_amount=Decimal("1.00"))).value
    'in_progress'
    >>> classify_loan(LoanRecord(wallet_id="0xA", principal_amount=Decimal("1"),
    ...                          repaid_amount=Decimal("1.03"))).value
    'repaid'
    """
    if record.has_default_signal:
        return LoanStatus.DEFAULTED
    if is_repaid(record):
        return LoanStatus.REPAID
    return LoanStatus.IN_PROGRESS
