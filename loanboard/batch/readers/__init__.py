"""
Upload readers.
"""

from .csv_reader import CSVReader, CSVRows

__all__ = [
    "CSVReader",
    "CSVRows",
]
