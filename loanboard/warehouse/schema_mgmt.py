"""
Warehouse schema management.

Creates the ``file_uploads`` and ``loans`` tables. All statements are
idempotent.
"""

from .connection import WarehousePool

DDL_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS file_uploads (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        file_name TEXT NOT NULL,
        upload_date TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp(),
        record_count INTEGER NOT NULL CHECK (record_count >= 0)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS loans (
        id BIGSERIAL PRIMARY KEY,
        user_wallet TEXT NOT NULL CHECK (user_wallet <> ''),
        loan_amount NUMERIC(18, 6) NOT NULL CHECK (loan_amount >= 0),
        loan_repaid_amount NUMERIC(18, 6) CHECK (loan_repaid_amount >= 0),
        loan_term INTEGER NOT NULL DEFAULT 0,
        time_loan_started TIMESTAMPTZ,
        time_loan_ended TIMESTAMPTZ,
        loan_due_date TIMESTAMPTZ NOT NULL,
        default_loan_date TIMESTAMPTZ,
        is_defaulted BOOLEAN NOT NULL DEFAULT FALSE,
        version TEXT NOT NULL DEFAULT '',
        file_upload_id UUID REFERENCES file_uploads (id),
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        CONSTRAINT loans_natural_key UNIQUE (user_wallet, loan_amount, loan_due_date)
    )
    """,
    "CREATE INDEX IF NOT EXISTS loans_due_date_idx ON loans (loan_due_date)",
)


class SchemaManager:
    """
    Manages the warehouse DDL.
    """

    def __init__(self, pool: WarehousePool):
        self.pool = pool

    async def create_tables(self) -> None:
        """Create tables and indexes if they do not exist."""
        for statement in DDL_STATEMENTS:
            await self.pool.execute(statement)

    async def truncate_tables(self) -> None:
        """Remove all loans and upload batches."""
        await self.pool.execute("TRUNCATE TABLE loans, file_uploads")
