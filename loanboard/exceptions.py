"""Exception hierarchy for loanboard."""


class LoanboardError(Exception):
    """Base exception for all loanboard errors."""


class ConfigurationError(LoanboardError):
    """Raised when configuration is invalid or missing."""


class SynonymConflictError(ConfigurationError):
    """Raised when one header spelling is claimed by two canonical fields."""

    def __init__(self, spelling: str, first_field: str, second_field: str):
        self.spelling = spelling
        self.first_field = first_field
        self.second_field = second_field
        super().__init__(
            f"Header spelling '{spelling}' is listed for both "
            f"'{first_field}' and '{second_field}'"
        )


class IngestionError(LoanboardError):
    """Raised when an uploaded file cannot be ingested."""


class EmptyFileError(IngestionError):
    """Raised when the file has no data rows below the header."""


class HeaderMismatchError(IngestionError):
    """Raised when none of the required columns could be matched."""

    def __init__(self, found: list[str], required: list[str]):
        self.found = found
        self.required = required
        found_text = ", ".join(found) if found else "none"
        super().__init__(
            "CSV headers do not match the expected loan format. "
            f"Found fields: {found_text}. "
            f"Required fields: {', '.join(required)}"
        )


class NoValidRowsError(IngestionError):
    """Raised when validation leaves no loan records to store."""

    def __init__(self, rejected_count: int):
        self.rejected_count = rejected_count
        if rejected_count:
            message = (
                f"No valid loan data found: {rejected_count} rows failed validation "
                "(missing wallet id)"
            )
        else:
            message = "No valid loan data found: the file contains no data rows"
        super().__init__(message)


class IngestionTimeoutError(IngestionError):
    """Raised when ingestion does not finish within the configured timeout."""

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Processing timed out after {timeout_seconds:g} seconds")


class StorageError(LoanboardError):
    """Raised when the persistence backend rejects a read or write."""
