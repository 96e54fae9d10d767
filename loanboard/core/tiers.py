"""
Denomination tiers.

The portfolio recognizes exactly two fixed face values. Each tier has a
repayment threshold above face value to account for interest; a loan is
repaid only when the repaid amount reaches that threshold.
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class DenominationTier:
    """A recognized loan face value and its repayment threshold."""

    name: str
    face_value: Decimal
    repayment_threshold: Decimal


ONE_DOLLAR_TIER = DenominationTier(
    name="one_dollar",
    face_value=Decimal("1"),
    repayment_threshold=Decimal("1.025"),
)

TEN_DOLLAR_TIER = DenominationTier(
    name="ten_dollar",
    face_value=Decimal("10"),
    repayment_threshold=Decimal("10.15"),
)

TIERS: tuple[DenominationTier, ...] = (ONE_DOLLAR_TIER, TEN_DOLLAR_TIER)


def tier_for(amount: Decimal) -> DenominationTier | None:
    """Return the tier whose face value equals amount exactly, if any."""
    for tier in TIERS:
        if amount == tier.face_value:
            return tier
    return None


def repayment_threshold(amount: Decimal) -> Decimal:
    """
    Repayment threshold for a principal amount.

    Loans outside the recognized tiers are repaid once the full
    principal has come back.
    """
    tier = tier_for(amount)
    if tier is None:
        return amount
    return tier.repayment_threshold
