"""
Lenient coercion of raw CSV cells.

Coercion never raises: values that cannot be interpreted fall back to a
documented default (0 for amounts and terms, None for optional values,
False for flags).
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from dateutil import parser as date_parser

ZERO = Decimal("0")

# loans.loan_amount is NUMERIC(18, 6): at most 12 integer digits, 6 decimals
_MAX_ADJUSTED_EXPONENT = 11
_AMOUNT_QUANTUM = Decimal("0.000001")
# loans.loan_term is a 32-bit INTEGER
_MAX_TERM = 2**31 - 1

# Digit-only cells of at least this length are read as Unix epochs
_EPOCH_MIN_DIGITS = 9
_EPOCH_MILLIS_DIGITS = 12

# Years 1 and 9999 cannot be shifted into every timezone
_MIN_YEAR = 2
_MAX_YEAR = 9998


def _to_decimal(text: str) -> Decimal | None:
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0 or value.adjusted() > _MAX_ADJUSTED_EXPONENT:
        return None
    if value.as_tuple().exponent < -6:
        # Round the way the NUMERIC column would, so both stores share keys
        value = value.quantize(_AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)
        if value.adjusted() > _MAX_ADJUSTED_EXPONENT:
            return None
    return value


def parse_amount(value: str | None) -> Decimal:
    """
    Parse a required amount; unparseable or negative input becomes 0.

    Examples:
        >>> parse_amount("10.50")
        Decimal('10.50')
        >>> parse_amount("ten")
        Decimal('0')
    """
    text = (value or "").strip()
    if not text:
        return ZERO
    parsed = _to_decimal(text)
    return ZERO if parsed is None else parsed


def parse_optional_amount(value: str | None) -> Decimal | None:
    """
    Parse an amount that may be unknown.

    An empty cell means "not known yet" and yields None, which keeps it
    distinct from an explicit zero.
    """
    text = (value or "").strip()
    if not text:
        return None
    return _to_decimal(text)


def parse_term(value: str | None) -> int:
    """Parse a term in days, truncating fractional days; invalid input becomes 0."""
    term = int(parse_amount(value))
    return term if term <= _MAX_TERM else 0


def parse_flag(value: str | None) -> bool:
    """True only for a case-insensitive "true"."""
    return (value or "").strip().lower() == "true"


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse a date or timestamp cell into an aware UTC datetime.

    Accepts ISO-8601 and the common free-form formats understood by
    dateutil, plus Unix epochs in seconds or milliseconds. Naive values
    are taken as UTC. Empty or unparseable cells yield None.

    Examples:
        >>> parse_timestamp("2025-03-15")
        datetime.datetime(2025, 3, 15, 0, 0, tzinfo=datetime.timezone.utc)
        >>> parse_timestamp("not a date") is None
        True
    """
    text = (value or "").strip()
    if not text:
        return None

    if text.isdigit() and len(text) >= _EPOCH_MIN_DIGITS:
        try:
            seconds = int(text)
            if len(text) >= _EPOCH_MILLIS_DIGITS:
                seconds = seconds / 1000
            parsed = datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        try:
            parsed = date_parser.parse(text)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            else:
                parsed = parsed.astimezone(timezone.utc)
        except (ValueError, OverflowError):
            return None

    if not _MIN_YEAR <= parsed.year <= _MAX_YEAR:
        return None
    return parsed
