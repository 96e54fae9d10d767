"""
Canonical loan columns and the spellings accepted for each.
"""

import re
from enum import Enum
from typing import Iterable, Mapping

from loanboard.exceptions import SynonymConflictError


class CanonicalField(str, Enum):
    """Column names of the canonical loan schema."""

    USER_WALLET = "user_wallet"
    LOAN_AMOUNT = "loan_amount"
    LOAN_TERM = "loan_term"
    LOAN_DUE_DATE = "loan_due_date"
    LOAN_REPAID_AMOUNT = "loan_repaid_amount"
    TIME_LOAN_STARTED = "time_loan_started"
    TIME_LOAN_ENDED = "time_loan_ended"
    DEFAULT_LOAN_DATE = "default_loan_date"
    IS_DEFAULTED = "is_defaulted"
    VERSION = "version"


REQUIRED_FIELDS: tuple[CanonicalField, ...] = (
    CanonicalField.USER_WALLET,
    CanonicalField.LOAN_AMOUNT,
    CanonicalField.LOAN_TERM,
    CanonicalField.LOAN_DUE_DATE,
)

# Each canonical name is implicitly accepted as its own synonym.
DEFAULT_SYNONYMS: dict[CanonicalField, tuple[str, ...]] = {
    CanonicalField.USER_WALLET: (
        "wallet", "address", "wallet_address", "user_address", "wallet_id", "user",
    ),
    CanonicalField.LOAN_AMOUNT: (
        "amount", "principal", "principal_amount", "value", "loan_value",
    ),
    CanonicalField.LOAN_TERM: (
        "term", "duration", "days", "term_days", "loan_duration",
    ),
    CanonicalField.LOAN_DUE_DATE: (
        "due_date", "due", "maturity_date", "maturity", "expiry_date", "expiration_date",
    ),
    CanonicalField.LOAN_REPAID_AMOUNT: (
        "repaid_amount", "repaid", "amount_repaid", "repayment", "repayment_amount",
    ),
    CanonicalField.TIME_LOAN_STARTED: (
        "start_time", "started_at", "loan_start", "start_date", "date_loan_started",
    ),
    CanonicalField.TIME_LOAN_ENDED: (
        "end_time", "ended_at", "loan_end", "end_date", "date_loan_repaid",
    ),
    CanonicalField.DEFAULT_LOAN_DATE: (
        "default_date", "defaulted_at", "date_loan_defaulted",
    ),
    CanonicalField.IS_DEFAULTED: (
        "defaulted", "default", "is_default",
    ),
    CanonicalField.VERSION: (
        "loan_version", "contract_version",
    ),
}

_SEPARATORS = re.compile(r"[\s\-_]+")
_NON_WORD = re.compile(r"[^\w]")


def normalize_header(name: str) -> str:
    """
    Normalize a header or synonym spelling for comparison.

    Lowercases and trims, collapses runs of whitespace, hyphens and
    underscores into one underscore, then strips remaining non-word
    characters.

    Examples:
        >>> normalize_header("  Wallet-Address ")
        'wallet_address'
        >>> normalize_header("Due Date (UTC)")
        'due_date_utc'
    """
    text = name.strip().lower()
    text = _SEPARATORS.sub("_", text)
    text = _NON_WORD.sub("", text)
    return text.strip("_")


def build_synonym_index(
    synonyms: Mapping[CanonicalField, Iterable[str]]
) -> dict[str, CanonicalField]:
    """
    Build a normalized-spelling → canonical field lookup.

    Args:
        synonyms: Canonical field → accepted spellings

    Returns:
        Dictionary keyed by normalized spelling

    Raises:
        SynonymConflictError: If two fields share a normalized spelling
    """
    index: dict[str, CanonicalField] = {}

    for canonical, spellings in synonyms.items():
        canonical = CanonicalField(canonical)
        for spelling in (canonical.value, *spellings):
            key = normalize_header(spelling)
            if not key:
                continue
            owner = index.get(key)
            if owner is not None and owner is not canonical:
                raise SynonymConflictError(key, owner.value, canonical.value)
            index[key] = canonical

    return index
