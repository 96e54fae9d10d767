"""
In-process loan store.

Keeps loans in a dictionary keyed by the natural key, giving the same
upsert semantics as the warehouse without a database.
"""

import asyncio
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Sequence

from loanboard.config import DEFAULT_UPSERT_BATCH_SIZE
from loanboard.core.models import LoanRecord, UploadBatch

from .store import LoanStore


class InMemoryLoanStore(LoanStore):
    """
    Loan store backed by process memory.

    Attributes:
        chunk_sizes: Size of every chunk received, in dispatch order
    """

    def __init__(self, batch_size: int = DEFAULT_UPSERT_BATCH_SIZE):
        super().__init__(batch_size)
        self._loans: dict[tuple[str, Decimal, datetime], LoanRecord] = {}
        self._batches: list[UploadBatch] = []
        self.chunk_sizes: list[int] = []

    async def create_upload_batch(self, file_name: str, record_count: int) -> UploadBatch:
        batch = UploadBatch(
            batch_id=str(uuid.uuid4()),
            source_file_name=file_name,
            record_count=record_count,
        )
        self._batches.append(batch)
        return batch

    async def _upsert_chunk(self, records: Sequence[LoanRecord]) -> None:
        # Yield like a network round-trip would
        await asyncio.sleep(0)
        self.chunk_sizes.append(len(records))
        for record in records:
            self._loans[record.natural_key] = record

    async def fetch_all_loans(self) -> list[LoanRecord]:
        return sorted(self._loans.values(), key=lambda loan: loan.due_date)

    async def fetch_latest_batch(self) -> UploadBatch | None:
        if not self._batches:
            return None
        return self._batches[-1]

    def __len__(self) -> int:
        return len(self._loans)
