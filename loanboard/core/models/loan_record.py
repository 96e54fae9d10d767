"""
LoanRecord model representing one normalized micro-loan.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Due date used when the file has none, far enough out that the loan is
# never treated as urgent or expired.
DUE_DATE_SENTINEL = datetime(2099, 12, 31, tzinfo=timezone.utc)


class LoanRecord(BaseModel):
    """
    One loan instance, produced by the row normalizer.

    Records are immutable; a changed loan arrives as a new upsert keyed
    by (wallet_id, principal_amount, due_date).

    Attributes:
        wallet_id: Borrower wallet identifier (required, non-empty)
        principal_amount: Loan face value
        repaid_amount: Amount repaid so far; None means not yet known
        term: Loan term in days
        start_time: When the loan started
        end_time: When the loan ended
        due_date: When the loan is due (UTC)
        default_date: When the loan defaulted
        is_defaulted: Explicit default flag
        version: Free-form contract version
        upload_batch_id: Upload batch that produced this record
    """

    wallet_id: str = Field(..., min_length=1)
    principal_amount: Decimal = Field(Decimal("0"), ge=0)
    repaid_amount: Decimal | None = Field(None, ge=0)
    term: int = Field(0, ge=0)
    start_time: datetime | None = None
    end_time: datetime | None = None
    due_date: datetime = DUE_DATE_SENTINEL
    default_date: datetime | None = None
    is_defaulted: bool = False
    version: str = ""
    upload_batch_id: str | None = None

    @field_validator("start_time", "end_time", "due_date", "default_date")
    @classmethod
    def normalize_to_utc(cls, v):
        """Store every timestamp as an aware UTC datetime."""
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        try:
            return v.astimezone(timezone.utc)
        except OverflowError as e:
            raise ValueError(f"timestamp {v.isoformat()} is outside the UTC range") from e

    @property
    def natural_key(self) -> tuple[str, Decimal, datetime]:
        """Upsert key: (wallet_id, principal_amount, due_date)."""
        return (self.wallet_id, self.principal_amount, self.due_date)

    @property
    def has_default_signal(self) -> bool:
        """Either the default flag or a default date marks the loan defaulted."""
        return self.is_defaulted or self.default_date is not None

    def with_batch(self, batch_id: str) -> "LoanRecord":
        """Copy of this record tagged with an upload batch id."""
        return self.model_copy(update={"upload_batch_id": batch_id})

    def to_row(self) -> dict[str, Any]:
        """Column mapping used by the warehouse ``loans`` table."""
        return {
            "user_wallet": self.wallet_id,
            "loan_amount": self.principal_amount,
            "loan_repaid_amount": self.repaid_amount,
            "loan_term": self.term,
            "time_loan_started": self.start_time,
            "time_loan_ended": self.end_time,
            "loan_due_date": self.due_date,
            "default_loan_date": self.default_date,
            "is_defaulted": self.is_defaulted,
            "version": self.version,
            "file_upload_id": self.upload_batch_id,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "LoanRecord":
        """Build a record from a ``loans`` table row."""
        batch_id = row.get("file_upload_id")
        return cls(
            wallet_id=row["user_wallet"],
            principal_amount=row["loan_amount"],
            repaid_amount=row.get("loan_repaid_amount"),
            term=row.get("loan_term") or 0,
            start_time=row.get("time_loan_started"),
            end_time=row.get("time_loan_ended"),
            due_date=row.get("loan_due_date") or DUE_DATE_SENTINEL,
            default_date=row.get("default_loan_date"),
            is_defaulted=bool(row.get("is_defaulted")),
            version=row.get("version") or "",
            upload_batch_id=str(batch_id) if batch_id is not None else None,
        )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "wallet_id": "0x9f2c4e1b7a3d",
                "principal_amount": "10",
                "repaid_amount": "10.15",
                "term": 14,
                "start_time": "2025-03-01T00:00:00Z",
                "end_time": "2025-03-12T08:30:00Z",
                "due_date": "2025-03-15T00:00:00Z",
                "default_date": None,
                "is_defaulted": False,
                "version": "v2",
                "upload_batch_id": "5b0d7d0e-0d35-4d4f-9a0e-7d3c1f3d2a11"
            }
        },
    )
