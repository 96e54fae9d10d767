"""
Loan portfolio ingestion and analytics.

CSV uploads of micro-loan records are normalized, upserted into a
PostgreSQL warehouse and summarized into KPIs, chart series and
due-date groupings.
"""

__version__ = "0.1.0"
