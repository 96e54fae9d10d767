"""
Header Resolver.

Maps the raw header row of an upload onto canonical loan fields.
"""

from typing import Iterable, Mapping, Sequence

from pydantic import BaseModel, Field

from loanboard.exceptions import HeaderMismatchError
from loanboard.observability.logger import get_logger

from .synonyms import (
    DEFAULT_SYNONYMS,
    REQUIRED_FIELDS,
    CanonicalField,
    build_synonym_index,
    normalize_header,
)

logger = get_logger(__name__)


class HeaderResolution(BaseModel):
    """
    Result of resolving a header row.

    Attributes:
        column_map: Column position → canonical field
        missing_required: Required fields with no matching column
        ignored_columns: Raw names of columns that matched nothing
        duplicate_columns: Raw names of columns shadowed by an earlier
            column for the same canonical field
    """

    column_map: dict[int, CanonicalField] = Field(default_factory=dict)
    missing_required: list[CanonicalField] = Field(default_factory=list)
    ignored_columns: list[str] = Field(default_factory=list)
    duplicate_columns: list[str] = Field(default_factory=list)

    @property
    def matched_fields(self) -> list[CanonicalField]:
        return [self.column_map[pos] for pos in sorted(self.column_map)]

    @property
    def is_degraded(self) -> bool:
        """Some, but not all, required fields are missing."""
        return 0 < len(self.missing_required) < len(REQUIRED_FIELDS)

    def position_of(self, field: CanonicalField) -> int | None:
        for position, canonical in self.column_map.items():
            if canonical is field:
                return position
        return None


class HeaderResolver:
    """
    Resolves header rows against a synonym table.

    The synonym table is checked for overlapping spellings when the
    resolver is built, so ambiguous configuration fails immediately.
    """

    def __init__(self, synonyms: Mapping[CanonicalField, Iterable[str]] | None = None):
        """
        Initialize the resolver.

        Args:
            synonyms: Canonical field → accepted spellings (defaults to
                DEFAULT_SYNONYMS)

        Raises:
            SynonymConflictError: If the table maps one spelling to two fields
        """
        self.synonyms = dict(synonyms if synonyms is not None else DEFAULT_SYNONYMS)
        self._index = build_synonym_index(self.synonyms)

    def match(self, header: str) -> CanonicalField | None:
        """Canonical field for a single header, or None."""
        return self._index.get(normalize_header(header))

    def resolve(self, headers: Sequence[str]) -> HeaderResolution:
        """
        Resolve a header row.

        Args:
            headers: Raw header cells in column order

        Returns:
            HeaderResolution

        Raises:
            HeaderMismatchError: If none of the required fields were found
        """
        resolution = HeaderResolution()
        seen: set[CanonicalField] = set()

        for position, header in enumerate(headers):
            canonical = self.match(header)
            if canonical is None:
                resolution.ignored_columns.append(header)
                continue
            if canonical in seen:
                resolution.duplicate_columns.append(header)
                logger.warning(
                    f"Column '{header}' duplicates an earlier {canonical.value} column and is ignored"
                )
                continue
            seen.add(canonical)
            resolution.column_map[position] = canonical

        resolution.missing_required = [f for f in REQUIRED_FIELDS if f not in seen]

        if len(resolution.missing_required) == len(REQUIRED_FIELDS):
            raise HeaderMismatchError(
                found=[f.value for f in resolution.matched_fields],
                required=[f.value for f in REQUIRED_FIELDS],
            )

        if resolution.missing_required:
            logger.warning(
                "Header row is missing required fields; defaults will be used",
                extra={"missing_fields": [f.value for f in resolution.missing_required]}
            )

        logger.info(
            "Resolved header row",
            extra={
                "matched_fields": [f.value for f in resolution.matched_fields],
                "ignored_columns": resolution.ignored_columns,
            }
        )
        return resolution
