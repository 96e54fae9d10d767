"""
Ingestion pipeline orchestration.

Coordinates the flow: read → resolve headers → normalize rows → record
upload batch → upsert loans, reporting progress along the way.
"""

import asyncio
import time

from pydantic import BaseModel, Field

from loanboard.config import IngestionSettings
from loanboard.core.models import IngestionResult, LoanRecord
from loanboard.core.normalization import RowNormalizer
from loanboard.core.rules import SynonymConfigLoader
from loanboard.core.schema import HeaderResolution, HeaderResolver
from loanboard.exceptions import IngestionTimeoutError, LoanboardError, NoValidRowsError
from loanboard.observability.logger import get_logger, log_operation
from loanboard.observability.metrics import record_error, record_ingestion
from loanboard.warehouse.store import LoanStore

from .progress import ProgressReporter, ProgressSink
from .readers import CSVReader

logger = get_logger(__name__)

# Rejected row numbers listed in a warning before it is truncated
MAX_LISTED_REJECTIONS = 10


class ParsedUpload(BaseModel):
    """
    Output of the parse stage (no storage involved).

    Attributes:
        records: Valid records in file order
        rejected_rows: Line numbers of rejected rows
        warnings: Non-fatal issues found while parsing
        resolution: Header resolution used for the file
    """

    records: list[LoanRecord] = Field(default_factory=list)
    rejected_rows: list[int] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    resolution: HeaderResolution


class IngestionPipeline:
    """
    Orchestrates CSV ingestion.

    Flow:
    1. Split the payload into header and data rows
    2. Resolve headers against the synonym table
    3. Normalize rows, collecting rejections
    4. Record an upload batch
    5. Upsert loans in sequential chunks

    Each call is independent; the pipeline holds no per-upload state, so
    it can be reused after a failure.
    """

    def __init__(
        self,
        store: LoanStore,
        settings: IngestionSettings | None = None,
        resolver: HeaderResolver | None = None,
        reader: CSVReader | None = None,
    ):
        """
        Initialize the ingestion pipeline.

        Args:
            store: Persistence backend
            settings: Ingestion settings (defaults to IngestionSettings())
            resolver: Header resolver; built from settings.synonyms_path
                or the default synonym table when omitted
            reader: CSV reader (defaults to comma-delimited UTF-8)
        """
        self.store = store
        self.settings = settings or IngestionSettings()
        self.reader = reader or CSVReader()

        if resolver is None:
            synonyms = None
            if self.settings.synonyms_path is not None:
                synonyms = SynonymConfigLoader(self.settings.synonyms_path).load_synonyms()
            resolver = HeaderResolver(synonyms)
        self.resolver = resolver

    def parse(
        self,
        raw: str | bytes,
        progress: ProgressReporter | ProgressSink | None = None,
    ) -> ParsedUpload:
        """
        Parse and validate a payload without touching the store.

        Args:
            raw: CSV text or bytes
            progress: Progress reporter or sink

        Returns:
            ParsedUpload with at least one record

        Raises:
            EmptyFileError: If the payload has no data lines
            HeaderMismatchError: If no required column can be matched
            NoValidRowsError: If no row produced a valid record
        """
        reporter = _as_reporter(progress)
        reporter.report(10, "Parsing CSV file...")

        csv_rows = self.reader.read(raw)
        resolution = self.resolver.resolve(csv_rows.header)
        normalizer = RowNormalizer(resolution)

        warnings = []
        if resolution.missing_required:
            missing = ", ".join(f.value for f in resolution.missing_required)
            warnings.append(f"Missing required columns: {missing}. Default values were used.")
        if resolution.duplicate_columns:
            duplicates = ", ".join(resolution.duplicate_columns)
            warnings.append(f"Duplicate columns ignored: {duplicates}")

        reporter.report(20, "Validating loan data...")

        records: list[LoanRecord] = []
        rejected_rows: list[int] = []
        total = len(csv_rows.rows)
        step = max(1, total // 20)

        for processed, (row_number, cells) in enumerate(csv_rows.rows, start=1):
            row = normalizer.normalize(cells, row_number)
            if row.passed:
                records.append(row.record)
            else:
                rejected_rows.append(row_number)
                logger.warning(
                    f"Row {row_number} rejected",
                    extra={"row_number": row_number, "errors": row.errors}
                )

            if processed % step == 0 or processed == total:
                percent = 20 + (processed * 30) // total
                reporter.report(percent, f"Processed {processed}/{total} loans...")

        if not records:
            raise NoValidRowsError(len(rejected_rows))

        if rejected_rows:
            listed = ", ".join(str(n) for n in rejected_rows[:MAX_LISTED_REJECTIONS])
            if len(rejected_rows) > MAX_LISTED_REJECTIONS:
                listed += ", ..."
            warnings.append(
                f"{len(rejected_rows)} rows skipped due to missing wallet id (rows {listed})"
            )

        logger.info(
            f"Parsed {len(records)} loans",
            extra={"valid_rows": len(records), "rejected_rows": len(rejected_rows)}
        )

        return ParsedUpload(
            records=records,
            rejected_rows=rejected_rows,
            warnings=warnings,
            resolution=resolution,
        )

    async def ingest(
        self,
        raw: str | bytes,
        file_name: str = "upload.csv",
        progress: ProgressReporter | ProgressSink | None = None,
    ) -> IngestionResult:
        """
        Parse a payload and persist its loans under the configured timeout.

        Args:
            raw: CSV text or bytes
            file_name: Name recorded on the upload batch
            progress: Progress reporter or sink receiving (percent, message)

        Returns:
            IngestionResult with batch-tagged records and warnings

        Raises:
            IngestionError: For file-level failures (including timeout)
            StorageError: If the store rejects a write
        """
        reporter = _as_reporter(progress)
        timeout = self.settings.timeout_seconds
        start = time.monotonic()

        try:
            with log_operation("Ingesting loans", logger=logger, file_name=file_name) as op:
                result = await asyncio.wait_for(
                    self._run(raw, file_name, reporter), timeout=timeout
                )
                op["batch_id"] = result.batch.batch_id
                op["valid_rows"] = len(result.records)
                op["rejected_rows"] = result.rejected_count
        except asyncio.TimeoutError as e:
            record_ingestion("timeout", duration_seconds=time.monotonic() - start)
            record_error("IngestionTimeoutError", "pipeline")
            raise IngestionTimeoutError(timeout) from e
        except LoanboardError as e:
            record_ingestion("failure", duration_seconds=time.monotonic() - start)
            record_error(type(e).__name__, "pipeline")
            raise

        record_ingestion(
            "success",
            valid_rows=len(result.records),
            rejected_rows=result.rejected_count,
            duration_seconds=time.monotonic() - start,
        )
        return result

    async def _run(
        self,
        raw: str | bytes,
        file_name: str,
        reporter: ProgressReporter,
    ) -> IngestionResult:
        reporter.report(5, "Preparing file...")
        parsed = self.parse(raw, reporter)

        reporter.report(50, "Storing file information...")
        batch = await self.store.create_upload_batch(file_name, len(parsed.records))
        logger.info("Created upload batch", extra={"batch_id": batch.batch_id})

        reporter.report(60, "Uploading loans to database...")

        def on_batch(processed: int, total: int) -> None:
            reporter.report(
                60 + (processed * 30) // total,
                f"Storing loans in database ({processed}/{total})...",
            )

        await self.store.upsert_loans(parsed.records, batch.batch_id, on_progress=on_batch)

        reporter.report(95, "Finalizing upload...")
        records = [record.with_batch(batch.batch_id) for record in parsed.records]
        reporter.report(100, "Upload complete")

        return IngestionResult(
            records=records,
            batch=batch,
            rejected_rows=parsed.rejected_rows,
            warnings=parsed.warnings,
            missing_required_fields=[f.value for f in parsed.resolution.missing_required],
        )


def _as_reporter(progress: ProgressReporter | ProgressSink | None) -> ProgressReporter:
    if isinstance(progress, ProgressReporter):
        return progress
    return ProgressReporter(progress)
