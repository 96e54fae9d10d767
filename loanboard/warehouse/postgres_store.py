"""
PostgreSQL loan store.

Implements the idempotent loan upsert with
INSERT ... ON CONFLICT (user_wallet, loan_amount, loan_due_date) DO UPDATE.
"""

from typing import Sequence

import psycopg

from loanboard.config import DEFAULT_UPSERT_BATCH_SIZE
from loanboard.core.models import LoanRecord, UploadBatch
from loanboard.exceptions import StorageError

from .connection import WarehousePool
from .store import LoanStore

UPSERT_LOAN_SQL = """
    INSERT INTO loans (
        user_wallet, loan_amount, loan_repaid_amount, loan_term,
        time_loan_started, time_loan_ended, loan_due_date, default_loan_date,
        is_defaulted, version, file_upload_id
    )
    VALUES (
        %(user_wallet)s, %(loan_amount)s, %(loan_repaid_amount)s, %(loan_term)s,
        %(time_loan_started)s, %(time_loan_ended)s, %(loan_due_date)s, %(default_loan_date)s,
        %(is_defaulted)s, %(version)s, %(file_upload_id)s
    )
    ON CONFLICT (user_wallet, loan_amount, loan_due_date) DO UPDATE SET
        loan_repaid_amount = EXCLUDED.loan_repaid_amount,
        loan_term = EXCLUDED.loan_term,
        time_loan_started = EXCLUDED.time_loan_started,
        time_loan_ended = EXCLUDED.time_loan_ended,
        default_loan_date = EXCLUDED.default_loan_date,
        is_defaulted = EXCLUDED.is_defaulted,
        version = EXCLUDED.version,
        file_upload_id = EXCLUDED.file_upload_id,
        updated_at = now()
"""


class PostgresLoanStore(LoanStore):
    """
    Loan store backed by the ``loans`` and ``file_uploads`` tables.

    Every backend failure is raised as StorageError carrying the
    driver's message.
    """

    def __init__(
        self,
        pool: WarehousePool,
        batch_size: int = DEFAULT_UPSERT_BATCH_SIZE,
    ):
        """
        Initialize the store.

        Args:
            pool: Open async connection pool
            batch_size: Records per upsert round-trip
        """
        super().__init__(batch_size)
        self.pool = pool

    async def create_upload_batch(self, file_name: str, record_count: int) -> UploadBatch:
        query = """
            INSERT INTO file_uploads (file_name, record_count)
            VALUES (%s, %s)
            RETURNING id, file_name, upload_date, record_count
        """
        try:
            rows = await self.pool.fetch_all(query, (file_name, record_count))
        except psycopg.Error as e:
            raise StorageError(f"Error storing file upload information: {e}") from e

        return self._batch_from_row(rows[0])

    async def _upsert_chunk(self, records: Sequence[LoanRecord]) -> None:
        try:
            await self.pool.execute_many(UPSERT_LOAN_SQL, [r.to_row() for r in records])
        except psycopg.Error as e:
            raise StorageError(f"Error storing loans in database: {e}") from e

    async def fetch_all_loans(self) -> list[LoanRecord]:
        query = """
            SELECT user_wallet, loan_amount, loan_repaid_amount, loan_term,
                   time_loan_started, time_loan_ended, loan_due_date, default_loan_date,
                   is_defaulted, version, file_upload_id
            FROM loans
            ORDER BY loan_due_date ASC
        """
        try:
            rows = await self.pool.fetch_all(query)
        except psycopg.Error as e:
            raise StorageError(f"Error fetching loans from database: {e}") from e

        return [LoanRecord.from_row(row) for row in rows]

    async def fetch_latest_batch(self) -> UploadBatch | None:
        query = """
            SELECT id, file_name, upload_date, record_count
            FROM file_uploads
            ORDER BY upload_date DESC
            LIMIT 1
        """
        try:
            rows = await self.pool.fetch_all(query)
        except psycopg.Error as e:
            raise StorageError(f"Error fetching latest file upload: {e}") from e

        return self._batch_from_row(rows[0]) if rows else None

    @staticmethod
    def _batch_from_row(row: dict) -> UploadBatch:
        return UploadBatch(
            batch_id=str(row["id"]),
            source_file_name=row["file_name"],
            upload_timestamp=row["upload_date"],
            record_count=row["record_count"],
        )
