"""
CSV ingestion pipeline.
"""

from .pipeline import IngestionPipeline, ParsedUpload
from .progress import ProgressEvent, ProgressReporter, ProgressSink, QueueProgressSink
from .readers import CSVReader

__all__ = [
    "IngestionPipeline",
    "ParsedUpload",
    "ProgressEvent",
    "ProgressReporter",
    "ProgressSink",
    "QueueProgressSink",
    "CSVReader",
]
