"""
Core data models for loan ingestion and reporting.

All models use Pydantic for runtime validation and type safety.
"""

from .ingestion_result import IngestionResult, NormalizedRow
from .loan_metrics import AmountChartData, ChartPoint, LoanMetrics, TierMetrics
from .loan_record import DUE_DATE_SENTINEL, LoanRecord
from .due_date_group import DueDateGroup
from .upload_batch import UploadBatch

__all__ = [
    "LoanRecord",
    "DUE_DATE_SENTINEL",
    "UploadBatch",
    "NormalizedRow",
    "IngestionResult",
    "DueDateGroup",
    "LoanMetrics",
    "TierMetrics",
    "ChartPoint",
    "AmountChartData",
]
