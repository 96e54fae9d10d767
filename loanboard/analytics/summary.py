"""
Portfolio summary bundling every dashboard view.
"""

from datetime import date, timezone, tzinfo
from decimal import Decimal
from typing import Sequence

from pydantic import BaseModel, Field

from loanboard.core.models import AmountChartData, ChartPoint, DueDateGroup, LoanMetrics, LoanRecord
from loanboard.observability.logger import get_logger

from .charts import generate_amount_chart_data, generate_status_chart_data
from .due_dates import DEFAULT_HORIZONS, build_due_date_groups, today_in
from .loan_metrics import calculate_loan_metrics

logger = get_logger(__name__)


class PortfolioSummary(BaseModel):
    """
    Metrics, due-date groups and chart series for one snapshot.

    Attributes:
        as_of: Reference date the day counts were computed against
        metrics: Aggregate KPIs
        due_date_groups: Horizon buckets, then overflow, then expired
        status_chart: Portfolio-wide status series
        amount_chart: Per-tier status series
        total_principal: Sum of principal over all loans
    """

    as_of: date
    metrics: LoanMetrics
    due_date_groups: list[DueDateGroup] = Field(default_factory=list)
    status_chart: list[ChartPoint] = Field(default_factory=list)
    amount_chart: AmountChartData
    total_principal: Decimal = Decimal("0")

    @property
    def default_rate(self) -> float:
        """Share of defaulted loans, as a percentage."""
        if self.metrics.total_loans == 0:
            return 0.0
        return self.metrics.total_defaulted / self.metrics.total_loans * 100

    def group(self, label: str) -> DueDateGroup | None:
        for group in self.due_date_groups:
            if group.label == label:
                return group
        return None


def summarize_portfolio(
    loans: Sequence[LoanRecord],
    today: date | None = None,
    horizons: Sequence[int] = DEFAULT_HORIZONS,
    tz: tzinfo = timezone.utc,
) -> PortfolioSummary:
    """
    Compute every dashboard view over a loan snapshot.

    Args:
        loans: Loan snapshot (not modified)
        today: Reference date (defaults to today in tz)
        horizons: Day thresholds for the horizon buckets
        tz: Reference timezone for day counts

    Returns:
        PortfolioSummary
    """
    as_of = today or today_in(tz)
    metrics = calculate_loan_metrics(loans)

    summary = PortfolioSummary(
        as_of=as_of,
        metrics=metrics,
        due_date_groups=build_due_date_groups(loans, as_of, horizons, tz),
        status_chart=generate_status_chart_data(metrics),
        amount_chart=generate_amount_chart_data(metrics),
        total_principal=sum((loan.principal_amount for loan in loans), Decimal("0")),
    )

    logger.debug(
        "Portfolio summarized",
        extra={"as_of": as_of.isoformat(), "total_loans": metrics.total_loans}
    )
    return summary
