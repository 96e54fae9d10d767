"""
Row normalization: lenient field coercion and typed record assembly.
"""

from .coercion import (
    parse_amount,
    parse_flag,
    parse_optional_amount,
    parse_term,
    parse_timestamp,
)
from .row_normalizer import RowNormalizer

__all__ = [
    "parse_amount",
    "parse_flag",
    "parse_optional_amount",
    "parse_term",
    "parse_timestamp",
    "RowNormalizer",
]
