"""
Minimal CSV reader for loan uploads.

Fields are split on the delimiter without quote handling, so cells may
not contain literal commas.
"""

import re
from typing import NamedTuple

from loanboard.exceptions import EmptyFileError

_LINE_BREAK = re.compile(r"\r\n|\n")


class CSVRows(NamedTuple):
    """Header cells plus numbered, non-blank data rows."""

    header: list[str]
    rows: list[tuple[int, list[str]]]


class CSVReader:
    """
    Splits an in-memory CSV payload into header and data rows.
    """

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8-sig"):
        """
        Initialize CSV reader.

        Args:
            delimiter: Field delimiter
            encoding: Encoding used when the payload is bytes
        """
        self.delimiter = delimiter
        self.encoding = encoding

    def decode(self, raw: str | bytes) -> str:
        """Decode a payload to text, dropping a leading byte-order mark."""
        if isinstance(raw, bytes):
            return raw.decode(self.encoding, errors="replace")
        return raw.lstrip("\ufeff")

    def split(self, line: str) -> list[str]:
        return [cell.strip() for cell in line.split(self.delimiter)]

    def read(self, raw: str | bytes) -> CSVRows:
        """
        Read a payload into header and data rows.

        Args:
            raw: CSV text or bytes

        Returns:
            CSVRows; row numbers are 1-based file line numbers

        Raises:
            EmptyFileError: If the payload has fewer than two lines
        """
        lines = _LINE_BREAK.split(self.decode(raw))
        if len(lines) < 2:
            raise EmptyFileError("CSV file is empty or contains only a header row")

        header = self.split(lines[0])
        rows = [
            (line_number, self.split(line))
            for line_number, line in enumerate(lines[1:], start=2)
            if line.strip()
        ]
        return CSVRows(header=header, rows=rows)
