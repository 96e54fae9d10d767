"""
Row Normalizer.

Turns one raw CSV row into a typed LoanRecord or a row-level rejection.
"""

from typing import Sequence

from loanboard.core.models import DUE_DATE_SENTINEL, LoanRecord, NormalizedRow
from loanboard.core.schema import CanonicalField, HeaderResolution
from loanboard.core.validators import BaseValidator, RequiredFieldValidator, ValidationError

from .coercion import (
    parse_amount,
    parse_flag,
    parse_optional_amount,
    parse_term,
    parse_timestamp,
)


class RowNormalizer:
    """
    Normalizes data rows against a resolved header.

    Field coercion is lenient and never rejects a row. The only
    rejection rule is a missing or blank wallet id.
    """

    def __init__(
        self,
        resolution: HeaderResolution,
        validators: Sequence[BaseValidator] | None = None,
    ):
        """
        Initialize the normalizer.

        Args:
            resolution: Header resolution for the file being processed
            validators: Row rejection rules (defaults to requiring the wallet id)
        """
        self.resolution = resolution
        self.validators = list(validators) if validators is not None else [
            RequiredFieldValidator(CanonicalField.USER_WALLET.value)
        ]

    def map_cells(self, cells: Sequence[str]) -> dict[str, str]:
        """
        Map the cells of a row onto canonical field names.

        Short rows yield empty strings for the missing cells; columns that
        matched no canonical field are dropped.
        """
        mapped = {}
        for position, canonical in self.resolution.column_map.items():
            cell = cells[position] if position < len(cells) else ""
            mapped[canonical.value] = cell.strip()
        return mapped

    def normalize(self, cells: Sequence[str], row_number: int) -> NormalizedRow:
        """
        Normalize one data row.

        Args:
            cells: Raw cells in column order
            row_number: 1-based line number of the row in the file

        Returns:
            NormalizedRow with either a record or rejection errors
        """
        mapped = self.map_cells(cells)

        errors = []
        for validator in self.validators:
            try:
                validator.validate(mapped.get(validator.field_name), mapped)
            except ValidationError as e:
                errors.append(str(e))

        if errors:
            return NormalizedRow(row_number=row_number, errors=errors)

        return NormalizedRow(row_number=row_number, record=self._build_record(mapped))

    def _build_record(self, mapped: dict[str, str]) -> LoanRecord:
        def cell(field: CanonicalField) -> str:
            return mapped.get(field.value, "")

        due_date = parse_timestamp(cell(CanonicalField.LOAN_DUE_DATE))

        return LoanRecord(
            wallet_id=cell(CanonicalField.USER_WALLET),
            principal_amount=parse_amount(cell(CanonicalField.LOAN_AMOUNT)),
            repaid_amount=parse_optional_amount(cell(CanonicalField.LOAN_REPAID_AMOUNT)),
            term=parse_term(cell(CanonicalField.LOAN_TERM)),
            start_time=parse_timestamp(cell(CanonicalField.TIME_LOAN_STARTED)),
            end_time=parse_timestamp(cell(CanonicalField.TIME_LOAN_ENDED)),
            due_date=due_date or DUE_DATE_SENTINEL,
            default_date=parse_timestamp(cell(CanonicalField.DEFAULT_LOAN_DATE)),
            is_defaulted=parse_flag(cell(CanonicalField.IS_DEFAULTED)),
            version=cell(CanonicalField.VERSION),
        )
