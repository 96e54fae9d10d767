"""
Loan persistence: the store boundary and its implementations.
"""

from .connection import WarehousePool
from .memory_store import InMemoryLoanStore
from .postgres_store import PostgresLoanStore
from .schema_mgmt import SchemaManager
from .store import BatchProgressCallback, LoanStore

__all__ = [
    "BatchProgressCallback",
    "InMemoryLoanStore",
    "LoanStore",
    "PostgresLoanStore",
    "SchemaManager",
    "WarehousePool",
]
