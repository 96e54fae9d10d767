"""
Ephemeral models describing row normalization and ingestion outcomes.
"""

from pydantic import BaseModel, Field

from .loan_record import LoanRecord
from .upload_batch import UploadBatch


class NormalizedRow(BaseModel):
    """
    Outcome of normalizing one CSV data row (not persisted).

    Attributes:
        row_number: 1-based line number in the file (header is line 1)
        record: The typed loan record, None when the row was rejected
        errors: Rejection reasons
    """

    row_number: int = Field(..., ge=1)
    record: LoanRecord | None = None
    errors: list[str] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.record is not None


class IngestionResult(BaseModel):
    """
    Successful ingestion outcome.

    Attributes:
        records: Stored loan records, each tagged with the batch id
        batch: Upload batch metadata, None for a parse-only run
        rejected_rows: Line numbers of rows rejected during validation
        warnings: Non-fatal issues (missing optional columns, rejected rows)
        missing_required_fields: Required canonical fields absent from the header
    """

    records: list[LoanRecord] = Field(default_factory=list)
    batch: UploadBatch | None = None
    rejected_rows: list[int] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    missing_required_fields: list[str] = Field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected_rows)
