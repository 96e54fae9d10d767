"""
Integration tests for the PostgreSQL loan store.

Requires Docker; tests are skipped when it is not available.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from loanboard.core.models import LoanRecord
from loanboard.exceptions import StorageError
from loanboard.warehouse import PostgresLoanStore, SchemaManager

DUE = datetime(2025, 3, 15, tzinfo=timezone.utc)


def record(wallet, amount="1", due=DUE, repaid=None):
    return LoanRecord(
        wallet_id=wallet,
        principal_amount=Decimal(amount),
        repaid_amount=Decimal(repaid) if repaid is not None else None,
        term=14,
        due_date=due,
    )


@pytest.mark.integration
def test_connection_pool_opens(clean_db):
    async def run():
        async with clean_db() as pool:
            rows = await pool.fetch_all("SELECT 1 AS one")
            return rows

    assert asyncio.run(run()) == [{"one": 1}]


@pytest.mark.integration
def test_create_and_fetch_latest_batch(clean_db):
    async def run():
        async with clean_db() as pool:
            store = PostgresLoanStore(pool)
            assert await store.fetch_latest_batch() is None
            first = await store.create_upload_batch("first.csv", 2)
            second = await store.create_upload_batch("second.csv", 5)
            latest = await store.fetch_latest_batch()
            return first, second, latest

    first, second, latest = asyncio.run(run())

    assert first.batch_id != second.batch_id
    assert latest.batch_id == second.batch_id
    assert latest.source_file_name == "second.csv"
    assert latest.record_count == 5


@pytest.mark.integration
def test_upsert_is_idempotent(clean_db):
    records = [record("0xA"), record("0xB", "10"), record("0xA", "10")]

    async def run():
        async with clean_db() as pool:
            store = PostgresLoanStore(pool)
            batch = await store.create_upload_batch("loans.csv", len(records))
            await store.upsert_loans(records, batch.batch_id)
            await store.upsert_loans(records, batch.batch_id)
            return await store.fetch_all_loans(), batch

    loans, batch = asyncio.run(run())

    assert len(loans) == 3
    assert all(l.upload_batch_id == batch.batch_id for l in loans)


@pytest.mark.integration
def test_upsert_updates_mutable_fields(clean_db):
    async def run():
        async with clean_db() as pool:
            store = PostgresLoanStore(pool)
            first = await store.create_upload_batch("a.csv", 1)
            await store.upsert_loans([record("0xA", repaid="0.50")], first.batch_id)
            second = await store.create_upload_batch("b.csv", 1)
            await store.upsert_loans([record("0xA", repaid="1.03")], second.batch_id)
            return await store.fetch_all_loans(), second

    loans, second = asyncio.run(run())

    assert len(loans) == 1
    assert loans[0].repaid_amount == Decimal("1.03")
    assert loans[0].upload_batch_id == second.batch_id


@pytest.mark.integration
def test_fetch_all_ordered_by_due_date(clean_db):
    records = [
        record("0xC", due=DUE + timedelta(days=9)),
        record("0xA", due=DUE - timedelta(days=2)),
        record("0xB", due=DUE + timedelta(days=1)),
    ]

    async def run():
        async with clean_db() as pool:
            store = PostgresLoanStore(pool, batch_size=2)
            batch = await store.create_upload_batch("loans.csv", 3)
            written = await store.upsert_loans(records, batch.batch_id)
            return written, await store.fetch_all_loans()

    written, loans = asyncio.run(run())

    assert written == 3
    assert [l.wallet_id for l in loans] == ["0xA", "0xB", "0xC"]
    assert loans[0].due_date == DUE - timedelta(days=2)
    assert loans[0].term == 14


@pytest.mark.integration
def test_backend_error_raised_as_storage_error(clean_db):
    async def run():
        async with clean_db() as pool:
            store = PostgresLoanStore(pool)
            # Batch id that does not exist violates the foreign key
            await store.upsert_loans(
                [record("0xA")], "00000000-0000-0000-0000-000000000000"
            )

    with pytest.raises(StorageError, match="Error storing loans in database"):
        asyncio.run(run())


@pytest.mark.integration
def test_create_tables_is_idempotent(clean_db):
    async def run():
        async with clean_db() as pool:
            schema = SchemaManager(pool)
            await schema.create_tables()
            await schema.create_tables()
            rows = await pool.fetch_all(
                "SELECT count(*) AS n FROM information_schema.tables "
                "WHERE table_name IN ('loans', 'file_uploads')"
            )
            return rows[0]["n"]

    assert asyncio.run(run()) == 2
