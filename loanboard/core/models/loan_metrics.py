"""
Aggregate portfolio metrics and chart series models.
"""

from pydantic import BaseModel, Field


class TierMetrics(BaseModel):
    """Status counters for one denomination tier."""

    defaulted: int = 0
    repaid: int = 0
    in_progress: int = 0
    total: int = 0


class LoanMetrics(BaseModel):
    """
    Portfolio KPIs (recomputed on demand, not persisted).

    Attributes:
        total_loans: All records
        total_defaulted: Records with a default flag or default date
        total_repaid: Non-defaulted records at or above their repayment threshold
        total_in_progress: Everything else
        one_dollar_loans: Breakdown for the 1-unit tier
        ten_dollar_loans: Breakdown for the 10-unit tier
    """

    total_loans: int = 0
    total_defaulted: int = 0
    total_repaid: int = 0
    total_in_progress: int = 0
    one_dollar_loans: TierMetrics = Field(default_factory=TierMetrics)
    ten_dollar_loans: TierMetrics = Field(default_factory=TierMetrics)


class ChartPoint(BaseModel):
    """One slice of a status chart."""

    name: str
    value: int = Field(..., ge=0)
    color: str


class AmountChartData(BaseModel):
    """Status series computed separately per denomination tier."""

    one_dollar: list[ChartPoint]
    ten_dollar: list[ChartPoint]
