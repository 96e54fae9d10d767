"""
Command-line interface for loan ingestion and reporting.

Usage:
    loanboard ingest --input <file_path> [options]
    loanboard report [--json]
    loanboard latest-batch
    loanboard init-db
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from psycopg import OperationalError

from loanboard.analytics import (
    PortfolioSummary,
    format_currency,
    format_date,
    summarize_portfolio,
    today_in,
)
from loanboard.batch import IngestionPipeline
from loanboard.config import DatabaseSettings, IngestionSettings
from loanboard.exceptions import LoanboardError
from loanboard.observability.logger import get_logger
from loanboard.observability.metrics import start_metrics_server
from loanboard.warehouse import (
    InMemoryLoanStore,
    PostgresLoanStore,
    SchemaManager,
    WarehousePool,
)

logger = get_logger(__name__)


def create_pool(args) -> WarehousePool:
    return WarehousePool(
        DatabaseSettings.from_env(
            host=args.db_host,
            port=args.db_port,
            database=args.db_name,
            user=args.db_user,
            password=args.db_password,
        )
    )


def load_settings(args) -> IngestionSettings:
    return IngestionSettings.from_env(
        timeout_seconds=getattr(args, "timeout", None),
        upsert_batch_size=getattr(args, "batch_size", None),
        synonyms_path=getattr(args, "synonyms", None),
        reference_timezone=args.timezone,
    )


def print_progress(percent: int, message: str) -> None:
    print(f"[{percent:>3}%] {message}")


def print_summary(summary: PortfolioSummary) -> None:
    """Print the dashboard views as plain text."""
    metrics = summary.metrics

    print(f"\n{'=' * 60}")
    print(f"LOAN PORTFOLIO (as of {format_date(summary.as_of)})")
    print(f"{'=' * 60}\n")

    print(f"  Total loans:       {metrics.total_loans:>8}  ({format_currency(summary.total_principal)})")
    print(f"  Defaulted:         {metrics.total_defaulted:>8}  ({summary.default_rate:.1f}% default rate)")
    print(f"  Repaid:            {metrics.total_repaid:>8}")
    print(f"  In progress:       {metrics.total_in_progress:>8}\n")

    print("By Amount:")
    for label, tier in (("$1", metrics.one_dollar_loans), ("$10", metrics.ten_dollar_loans)):
        print(
            f"  {label:<5} total={tier.total:<6} repaid={tier.repaid:<6} "
            f"in_progress={tier.in_progress:<6} defaulted={tier.defaulted}"
        )

    print("\nUpcoming Due Dates:")
    for group in summary.due_date_groups:
        print(f"  {group.label:<25} {group.count:>8}")

    expired = summary.group("Expired")
    if expired and expired.loans:
        print("\nExpired Loans:")
        for loan in expired.loans[:10]:
            print(
                f"  {loan.wallet_id:<44} {format_currency(loan.principal_amount):>10} "
                f"due {format_date(loan.due_date)}"
            )

    print(f"\n{'=' * 60}\n")


async def ingest_command(args) -> None:
    """
    Ingest a CSV file.

    Args:
        args: Command-line arguments
    """
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        sys.exit(1)

    settings = load_settings(args)
    raw = input_path.read_bytes()
    progress = None if args.quiet else print_progress

    if args.dry_run:
        logger.info("DRY RUN MODE: No data will be written")
        pipeline = IngestionPipeline(InMemoryLoanStore(settings.upsert_batch_size), settings)
        parsed = pipeline.parse(raw, progress)
        print(f"Valid loans: {len(parsed.records)}")
        print(f"Rejected rows: {len(parsed.rejected_rows)}")
        for warning in parsed.warnings:
            print(f"Warning: {warning}")
        return

    if args.in_memory:
        store = InMemoryLoanStore(settings.upsert_batch_size)
        result = await IngestionPipeline(store, settings).ingest(raw, input_path.name, progress)
    else:
        async with create_pool(args) as pool:
            store = PostgresLoanStore(pool, settings.upsert_batch_size)
            result = await IngestionPipeline(store, settings).ingest(raw, input_path.name, progress)

    print(f"Successfully processed {len(result.records)} loans (batch {result.batch.batch_id})")
    for warning in result.warnings:
        print(f"Warning: {warning}")

    if args.in_memory:
        tz = settings.tzinfo()
        print_summary(summarize_portfolio(result.records, today_in(tz), tz=tz))


async def report_command(args) -> None:
    """
    Print metrics and due-date groups for every stored loan.

    Args:
        args: Command-line arguments
    """
    tz = load_settings(args).tzinfo()

    async with create_pool(args) as pool:
        loans = await PostgresLoanStore(pool).fetch_all_loans()

    summary = summarize_portfolio(loans, today_in(tz), tz=tz)
    if args.json:
        print(summary.model_dump_json(indent=2))
    else:
        print_summary(summary)


async def latest_batch_command(args) -> None:
    async with create_pool(args) as pool:
        batch = await PostgresLoanStore(pool).fetch_latest_batch()

    if batch is None:
        print("No uploads yet")
        return

    print(json.dumps(batch.model_dump(mode="json"), indent=2))


async def init_db_command(args) -> None:
    async with create_pool(args) as pool:
        await SchemaManager(pool).create_tables()
    print("Database schema ready")


COMMANDS = {
    "ingest": ingest_command,
    "report": report_command,
    "latest-batch": latest_batch_command,
    "init-db": init_db_command,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loanboard",
        description="Micro-loan CSV ingestion and portfolio reporting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create the warehouse tables
  loanboard init-db

  # Ingest a CSV file
  loanboard ingest --input data/loans.csv

  # Validate a file without writing anything
  loanboard ingest --input data/loans.csv --dry-run

  # Ingest and report without a database
  loanboard ingest --input data/loans.csv --in-memory

  # Portfolio report as JSON
  loanboard report --json
        """
    )

    # Global options
    parser.add_argument("--db-host", default=None, help="Database host (default: $DB_HOST or localhost)")
    parser.add_argument("--db-port", type=int, default=None, help="Database port (default: $DB_PORT or 5432)")
    parser.add_argument("--db-name", default=None, help="Database name (default: $DB_NAME or loanboard)")
    parser.add_argument("--db-user", default=None, help="Database user (default: $DB_USER or loanboard)")
    parser.add_argument("--db-password", default=None, help="Database password (default: $DB_PASSWORD)")
    parser.add_argument(
        "--timezone",
        default=None,
        help="Reference timezone for due-date day counts (default: UTC)"
    )
    parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Expose Prometheus metrics on this port while the command runs"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ingest command
    ingest_parser = subparsers.add_parser("ingest", help="Ingest a loan CSV file")
    ingest_parser.add_argument(
        "--input",
        required=True,
        help="Path to input CSV file"
    )
    ingest_parser.add_argument(
        "--in-memory",
        action="store_true",
        help="Use an in-process store and print a report afterwards"
    )
    ingest_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and validate without writing"
    )
    ingest_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Processing timeout in seconds (default: 30)"
    )
    ingest_parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Records per upsert round-trip (default: 100)"
    )
    ingest_parser.add_argument(
        "--synonyms",
        default=None,
        help="Path to header synonyms YAML file"
    )
    ingest_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print progress"
    )

    report_parser = subparsers.add_parser("report", help="Print portfolio metrics")
    report_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the full summary as JSON"
    )

    subparsers.add_parser("latest-batch", help="Show the most recent upload batch")
    subparsers.add_parser("init-db", help="Create warehouse tables")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.metrics_port:
        start_metrics_server(args.metrics_port)

    try:
        asyncio.run(COMMANDS[args.command](args))
    except (LoanboardError, FileNotFoundError, OperationalError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"\nError: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
