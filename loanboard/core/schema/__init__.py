"""
Header resolution: maps user-supplied column names onto the canonical
loan schema.
"""

from .header_resolver import HeaderResolution, HeaderResolver
from .synonyms import (
    DEFAULT_SYNONYMS,
    REQUIRED_FIELDS,
    CanonicalField,
    build_synonym_index,
    normalize_header,
)

__all__ = [
    "CanonicalField",
    "DEFAULT_SYNONYMS",
    "REQUIRED_FIELDS",
    "build_synonym_index",
    "normalize_header",
    "HeaderResolver",
    "HeaderResolution",
]
