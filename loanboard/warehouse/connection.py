"""
Async PostgreSQL pool for the loan warehouse (psycopg3 + psycopg_pool).

Rows come back as dictionaries. Each helper borrows one connection and
runs in its own transaction, committed when the helper returns.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

from psycopg import AsyncConnection, OperationalError
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from loanboard.config import DatabaseSettings
from loanboard.observability.logger import get_logger

logger = get_logger(__name__)

Params = Sequence | dict | None


class WarehousePool:
    """
    Lazily opened connection pool for the loans database.

    Usage:
        async with WarehousePool(DatabaseSettings.from_env()) as pool:
            rows = await pool.fetch_all("SELECT count(*) AS n FROM loans")
    """

    def __init__(self, settings: DatabaseSettings):
        self.settings = settings
        self._pool: AsyncConnectionPool | None = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def _build_pool(self) -> AsyncConnectionPool:
        return AsyncConnectionPool(
            conninfo=self.settings.conninfo(),
            min_size=self.settings.min_size,
            max_size=self.settings.max_size,
            timeout=self.settings.connect_timeout,
            kwargs={"row_factory": dict_row},
            open=False,
        )

    async def open(self, attempts: int = 3, backoff: float = 1.0) -> None:
        """
        Open the pool, waiting until min_size connections are ready.

        Failed attempts are retried with exponential backoff
        (backoff, 2 * backoff, ...).

        Raises:
            OperationalError: If the database is unreachable on the last attempt
        """
        if self.is_open:
            return

        delay = backoff
        for attempt in range(1, attempts + 1):
            pool = self._build_pool()
            try:
                await pool.open(wait=True, timeout=self.settings.connect_timeout)
            except OperationalError as e:
                await pool.close()
                if attempt == attempts:
                    raise OperationalError(
                        f"Could not reach {self.settings.host}:{self.settings.port}/"
                        f"{self.settings.database} after {attempts} attempts: {e}"
                    ) from e
                logger.warning(
                    "Database not reachable, retrying",
                    extra={"attempt": attempt, "retry_in_seconds": delay},
                )
                await asyncio.sleep(delay)
                delay *= 2
            else:
                self._pool = pool
                logger.debug("Connection pool open", extra={"host": self.settings.host})
                return

    async def close(self) -> None:
        pool, self._pool = self._pool, None
        if pool is not None:
            await pool.close()

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        """Borrow a connection; the transaction commits on clean exit."""
        if self._pool is None:
            raise RuntimeError("WarehousePool is closed; call open() first")
        async with self._pool.connection() as conn:
            yield conn

    async def fetch_all(self, query: str, params: Params = None) -> list[dict]:
        async with self.connection() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchall()

    async def execute(self, statement: str, params: Params = None) -> int:
        """Run a statement and return the affected row count."""
        async with self.connection() as conn:
            cursor = await conn.execute(statement, params)
            return cursor.rowcount

    async def execute_many(self, statement: str, param_sets: Sequence[Params]) -> None:
        """Run a statement once per parameter set inside one transaction."""
        async with self.connection() as conn:
            async with conn.cursor() as cur:
                await cur.executemany(statement, param_sets)

    async def __aenter__(self) -> "WarehousePool":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
