"""
UploadBatch model representing metadata about one ingestion event.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class UploadBatch(BaseModel):
    """
    Metadata about one successful file ingestion.

    Created once per ingestion and never modified; every LoanRecord
    produced by the ingestion references it via upload_batch_id.

    Attributes:
        batch_id: Identifier assigned by the store
        source_file_name: Name of the uploaded file
        upload_timestamp: When the batch was recorded
        record_count: Number of valid records in the upload
    """

    batch_id: str = Field(..., min_length=1)
    source_file_name: str
    upload_timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    record_count: int = Field(..., ge=0)

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "batch_id": "5b0d7d0e-0d35-4d4f-9a0e-7d3c1f3d2a11",
                "source_file_name": "loans_march.csv",
                "upload_timestamp": "2025-03-16T09:12:44Z",
                "record_count": 1250
            }
        },
    )
