"""
Pytest configuration and fixtures for loanboard tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import asyncio
import os
from datetime import date, timedelta, timezone
from typing import Generator

import pytest
from testcontainers.postgres import PostgresContainer

from loanboard.analytics import today_in
from loanboard.config import DatabaseSettings
from loanboard.warehouse import SchemaManager, WarehousePool


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require Docker containers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that test the full pipeline"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

POSTGRES_USER = "test_loanboard"
POSTGRES_PASSWORD = "test_password"
POSTGRES_DB = "test_loanboard"


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """
    Start PostgreSQL container for integration tests

    Skips the requesting tests when Docker is not available.

    Yields:
        PostgresContainer instance
    """
    container = PostgresContainer(
        image="postgres:16.2-alpine",
        username=POSTGRES_USER,
        password=POSTGRES_PASSWORD,
        dbname=POSTGRES_DB,
    )
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"Docker is not available: {e}")

    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="function")
def pool_factory(postgres_container):
    """
    Build connection pools pointing at the test container

    Pools are created unopened; tests open them inside their own event loop.
    """
    def factory() -> WarehousePool:
        return WarehousePool(DatabaseSettings(
            host=postgres_container.get_container_host_ip(),
            port=int(postgres_container.get_exposed_port(5432)),
            database=POSTGRES_DB,
            user=POSTGRES_USER,
            password=POSTGRES_PASSWORD,
        ))

    return factory


@pytest.fixture(scope="function")
def clean_db(pool_factory):
    """
    Provide a database with fresh, empty tables

    Returns:
        Pool factory for the prepared database
    """
    async def prepare():
        async with pool_factory() as pool:
            schema = SchemaManager(pool)
            await schema.create_tables()
            await schema.truncate_tables()

    asyncio.run(prepare())
    return pool_factory


# =======================
# DATA FIXTURES
# =======================

@pytest.fixture(scope="function")
def today() -> date:
    """Reference date for due-date calculations (UTC)."""
    return today_in(timezone.utc)


@pytest.fixture(scope="function")
def loan_csv(today):
    """
    Build CSV text from rows whose due dates are day offsets from today

    Usage:
        loan_csv([("0xA", "1", "14", 3, "")])

    Each row is (wallet, amount, term, due_offset_days, repaid). A
    due offset of None leaves the cell empty.
    """
    def build(rows, header="user_wallet,loan_amount,loan_term,loan_due_date,loan_repaid_amount"):
        lines = [header]
        for wallet, amount, term, due_offset, repaid in rows:
            due = "" if due_offset is None else (today + timedelta(days=due_offset)).isoformat()
            lines.append(f"{wallet},{amount},{term},{due},{repaid}")
        return "\n".join(lines) + "\n"

    return build


@pytest.fixture(scope="session")
def test_data_dir() -> str:
    """
    Get path to test data fixtures directory

    Returns:
        Path to tests/fixtures directory
    """
    return os.path.join(os.path.dirname(__file__), "fixtures")
