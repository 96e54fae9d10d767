"""
Structured logging for loanboard

All loggers live under the ``loanboard`` namespace and share one stdout
handler installed on the package logger. JSON output (python-json-logger)
is the default; ``LOG_FORMAT=text`` switches to a readable line format.
"""
import logging
import os
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, TextIO

from pythonjsonlogger import jsonlogger

PACKAGE_LOGGER = "loanboard"

JSON_FIELDS = "%(timestamp)s %(level)s %(logger)s %(message)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class LoanboardJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter emitting one object per line with an ISO-8601 UTC
    timestamp, the level, the logger name, the emitting component
    (logger name below the package) and the source location.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_record["timestamp"] = created.isoformat(timespec="milliseconds")
        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        prefix = PACKAGE_LOGGER + "."
        if record.name.startswith(prefix):
            log_record["component"] = record.name[len(prefix):]
        log_record["source"] = f"{record.module}:{record.funcName}:{record.lineno}"


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: str | None = None,
    format_type: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Install a single stdout handler on a logger.

    Args:
        name: Logger name
        level: Level name, defaults to env var LOG_LEVEL (INFO)
        format_type: "json" or "text", defaults to env var LOG_FORMAT (json)
        stream: Output stream (defaults to sys.stdout)

    Returns:
        The configured logger
    """
    log_level = _resolve_level(level)
    format_type = (format_type or os.getenv("LOG_FORMAT", "json")).lower()

    if format_type == "json":
        formatter: logging.Formatter = LoanboardJsonFormatter(JSON_FIELDS)
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(log_level)
    logger.propagate = False
    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Logger for a loanboard module.

    The package logger is configured from the environment on first use;
    module loggers propagate to it.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        setup_logger(PACKAGE_LOGGER)
    return logging.getLogger(name)


@contextmanager
def log_operation(
    operation_name: str,
    logger: logging.Logger | None = None,
    **extra_fields,
) -> Iterator[dict]:
    """
    Log the start, outcome and duration of an operation.

    Yields a dict; fields added to it inside the block are included in
    the completion record.

    Usage:
        with log_operation("Ingesting loans", logger=logger, file_name="loans.csv") as op:
            ...
            op["valid_rows"] = 120
    """
    logger = logger or get_logger()
    fields = {"operation": operation_name, **extra_fields}
    outcome: dict = {}

    logger.info(f"Starting: {operation_name}", extra=fields)
    start = time.monotonic()
    try:
        yield outcome
    except BaseException as e:
        logger.error(
            f"Failed: {operation_name}",
            extra={
                **fields,
                **outcome,
                "status": "error",
                "error_type": type(e).__name__,
                "error_message": str(e),
                "duration_seconds": round(time.monotonic() - start, 3),
            },
            exc_info=not isinstance(e, (KeyboardInterrupt, SystemExit)),
        )
        raise

    logger.info(
        f"Completed: {operation_name}",
        extra={
            **fields,
            **outcome,
            "status": "success",
            "duration_seconds": round(time.monotonic() - start, 3),
        },
    )
