"""
Prometheus metrics collection for loanboard

Instruments ingestion runs, row validation outcomes and warehouse
writes.
"""
import os

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()


# =======================
# INGESTION METRICS
# =======================

ingestions_total = Counter(
    name="loanboard_ingestions_total",
    documentation="Total number of CSV ingestion runs",
    labelnames=["status"],  # status: success, failure, timeout
    registry=REGISTRY,
)

rows_processed_total = Counter(
    name="loanboard_rows_processed_total",
    documentation="Total number of data rows processed",
    labelnames=["status"],  # status: valid, rejected
    registry=REGISTRY,
)

ingestion_duration_seconds = Histogram(
    name="loanboard_ingestion_duration_seconds",
    documentation="Time spent on a complete ingestion run in seconds",
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
    registry=REGISTRY,
)

# =======================
# WAREHOUSE METRICS
# =======================

upsert_batches_total = Counter(
    name="loanboard_upsert_batches_total",
    documentation="Total number of loan upsert round-trips",
    labelnames=["status"],  # status: success, failure
    registry=REGISTRY,
)

records_upserted_total = Counter(
    name="loanboard_records_upserted_total",
    documentation="Total number of loan records sent to the warehouse",
    registry=REGISTRY,
)

# =======================
# ERROR METRICS
# =======================

errors_total = Counter(
    name="loanboard_errors_total",
    documentation="Total number of errors",
    labelnames=["error_type", "component"],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    """Content type for the Prometheus text format"""
    return CONTENT_TYPE_LATEST


def start_metrics_server(port: int | None = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Imported here so that importing this module never binds a port
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


def record_ingestion(
    status: str,
    valid_rows: int = 0,
    rejected_rows: int = 0,
    duration_seconds: float = 0.0,
) -> None:
    """
    Record the outcome of an ingestion run.

    Args:
        status: success, failure or timeout
        valid_rows: Rows that produced a loan record
        rejected_rows: Rows rejected during validation
        duration_seconds: Wall-clock duration of the run
    """
    ingestions_total.labels(status=status).inc()
    if valid_rows:
        rows_processed_total.labels(status="valid").inc(valid_rows)
    if rejected_rows:
        rows_processed_total.labels(status="rejected").inc(rejected_rows)
    if duration_seconds > 0:
        ingestion_duration_seconds.observe(duration_seconds)


def record_upsert_batch(record_count: int, success: bool = True) -> None:
    """
    Record one upsert round-trip.

    Args:
        record_count: Records in the chunk
        success: Whether the backend accepted the chunk
    """
    status = "success" if success else "failure"
    upsert_batches_total.labels(status=status).inc()
    if success and record_count > 0:
        records_upserted_total.inc(record_count)


def record_error(error_type: str, component: str) -> None:
    """Count an error raised by a component."""
    errors_total.labels(error_type=error_type, component=component).inc()
