"""
Persistence boundary for loan records and upload batches.

Upserts are chunked, dispatched strictly one after another, and stop at
the first failed chunk. Chunks already written stay written; re-running
the same upload is safe because rows are keyed by
(wallet, amount, due date).
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Callable, Sequence

from loanboard.config import DEFAULT_UPSERT_BATCH_SIZE
from loanboard.core.models import LoanRecord, UploadBatch
from loanboard.exceptions import StorageError
from loanboard.observability.logger import get_logger
from loanboard.observability.metrics import record_error, record_upsert_batch

logger = get_logger(__name__)

# Called after each chunk with (records_written_so_far, total_records)
BatchProgressCallback = Callable[[int, int], None]


class LoanStore(ABC):
    """
    Abstract store for loans and upload batches.

    Subclasses implement the individual round-trips; chunking, ordering,
    progress and failure handling live here.
    """

    def __init__(self, batch_size: int = DEFAULT_UPSERT_BATCH_SIZE):
        """
        Initialize the store.

        Args:
            batch_size: Records per upsert round-trip
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.batch_size = batch_size

    @abstractmethod
    async def create_upload_batch(self, file_name: str, record_count: int) -> UploadBatch:
        """
        Record a new upload batch.

        Raises:
            StorageError: If the write fails
        """

    @abstractmethod
    async def _upsert_chunk(self, records: Sequence[LoanRecord]) -> None:
        """
        Upsert one chunk of batch-tagged records on the natural key.

        Raises:
            StorageError: If the backend rejects the chunk
        """

    @abstractmethod
    async def fetch_all_loans(self) -> list[LoanRecord]:
        """All loans ordered by ascending due date."""

    @abstractmethod
    async def fetch_latest_batch(self) -> UploadBatch | None:
        """The most recent upload batch, or None if nothing was uploaded."""

    async def upsert_loans(
        self,
        records: Sequence[LoanRecord],
        batch_id: str,
        on_progress: BatchProgressCallback | None = None,
    ) -> int:
        """
        Upsert records tagged with batch_id, one chunk at a time.

        A chunk that has been sent runs to completion even if the caller
        is cancelled meanwhile, and the cancellation is only re-raised
        once it has settled; no further chunk is started afterwards.

        Args:
            records: Normalized loan records
            batch_id: Upload batch the records belong to
            on_progress: Optional per-chunk progress callback

        Returns:
            Number of records upserted

        Raises:
            StorageError: On the first chunk the backend rejects
        """
        tagged = [record.with_batch(batch_id) for record in records]
        total = len(tagged)
        processed = 0

        for start in range(0, total, self.batch_size):
            chunk = tagged[start:start + self.batch_size]
            in_flight = asyncio.ensure_future(self._upsert_chunk(chunk))
            try:
                await asyncio.shield(in_flight)
            except asyncio.CancelledError:
                await asyncio.wait({in_flight})
                self._settle_cancelled_chunk(in_flight, batch_id, len(chunk))
                raise
            except StorageError:
                record_upsert_batch(len(chunk), success=False)
                record_error("StorageError", "store")
                logger.error(
                    "Upsert chunk failed; remaining chunks skipped",
                    extra={"batch_id": batch_id, "chunk_start": start, "processed": processed}
                )
                raise

            record_upsert_batch(len(chunk))
            processed += len(chunk)
            logger.debug(
                f"Upserted {processed}/{total} loans",
                extra={"batch_id": batch_id}
            )
            if on_progress is not None:
                on_progress(processed, total)

        return processed

    def _settle_cancelled_chunk(self, chunk_task: asyncio.Future, batch_id: str, size: int) -> None:
        # Outcome of the chunk that was running when the caller gave up
        if chunk_task.cancelled():
            return
        error = chunk_task.exception()
        if error is None:
            record_upsert_batch(size)
            logger.warning(
                "Upsert cancelled; chunk in flight was written",
                extra={"batch_id": batch_id, "records": size}
            )
        else:
            record_upsert_batch(size, success=False)
            record_error(type(error).__name__, "store")
            logger.error(
                f"Upsert cancelled; chunk in flight failed: {error}",
                extra={"batch_id": batch_id, "records": size}
            )
