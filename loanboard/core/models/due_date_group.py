"""
DueDateGroup model, a derived view of loans bucketed by due date.
"""

from typing import Literal

from pydantic import BaseModel, Field

from .loan_record import LoanRecord


class DueDateGroup(BaseModel):
    """
    Loans grouped by due-date horizon (recomputed on every metrics pass).

    Attributes:
        label: Display label ("Due in 5 days", "Expired", ...)
        kind: "horizon" for the cumulative day buckets, "overflow" for
            active loans beyond the largest horizon, "expired" for past-due loans
        horizon_days: Bucket threshold in days (horizon buckets only)
        loans: Members ordered by ascending due date
    """

    label: str
    kind: Literal["horizon", "overflow", "expired"] = "horizon"
    horizon_days: int | None = Field(None, ge=0)
    loans: list[LoanRecord] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.loans)

    @property
    def wallet_ids(self) -> list[str]:
        return [loan.wallet_id for loan in self.loans]
