"""
Chart series derived from LoanMetrics.
"""

from loanboard.core.models import AmountChartData, ChartPoint, LoanMetrics, TierMetrics

REPAID_COLOR = "#22C55E"
IN_PROGRESS_COLOR = "#3B82F6"
DEFAULTED_COLOR = "#EF4444"


def _series(repaid: int, in_progress: int, defaulted: int) -> list[ChartPoint]:
    return [
        ChartPoint(name="Repaid", value=repaid, color=REPAID_COLOR),
        ChartPoint(name="In Progress", value=in_progress, color=IN_PROGRESS_COLOR),
        ChartPoint(name="Defaulted", value=defaulted, color=DEFAULTED_COLOR),
    ]


def _tier_series(tier: TierMetrics) -> list[ChartPoint]:
    return _series(tier.repaid, tier.in_progress, tier.defaulted)


def generate_status_chart_data(metrics: LoanMetrics) -> list[ChartPoint]:
    """Portfolio-wide status breakdown."""
    return _series(metrics.total_repaid, metrics.total_in_progress, metrics.total_defaulted)


def generate_amount_chart_data(metrics: LoanMetrics) -> AmountChartData:
    """Status breakdown computed separately for each denomination tier."""
    return AmountChartData(
        one_dollar=_tier_series(metrics.one_dollar_loans),
        ten_dollar=_tier_series(metrics.ten_dollar_loans),
    )
