"""
Header synonym configuration.
"""

from .synonym_config import SynonymConfigLoader

__all__ = [
    "SynonymConfigLoader",
]
