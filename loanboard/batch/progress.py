"""
Progress reporting for long-running ingestion.

The pipeline pushes (percent, message) events into a sink supplied by the
caller. Any callable with that signature is a sink.
"""

import asyncio
from typing import Protocol

from pydantic import BaseModel, Field

from loanboard.observability.logger import get_logger

logger = get_logger(__name__)


class ProgressSink(Protocol):
    def __call__(self, percent: int, message: str) -> None: ...


class ProgressEvent(BaseModel):
    """One progress update."""

    percent: int = Field(..., ge=0, le=100)
    message: str


class ProgressReporter:
    """
    Forwards progress to a sink, keeping percentages within [0, 100]
    and never lower than a value already reported.
    """

    def __init__(self, sink: ProgressSink | None = None):
        self.sink = sink
        self.percent = 0
        self.events: list[ProgressEvent] = []

    def report(self, percent: float, message: str) -> None:
        percent = max(self.percent, min(100, max(0, int(percent))))
        self.percent = percent
        event = ProgressEvent(percent=percent, message=message)
        self.events.append(event)
        logger.debug(message, extra={"progress_percent": percent})
        if self.sink is not None:
            self.sink(percent, message)


class QueueProgressSink:
    """
    Sink that publishes ProgressEvents onto an asyncio.Queue so a
    consumer task can follow an ingestion without sharing state.
    """

    def __init__(self, queue: asyncio.Queue | None = None):
        self.queue: asyncio.Queue = queue if queue is not None else asyncio.Queue()

    def __call__(self, percent: int, message: str) -> None:
        self.queue.put_nowait(ProgressEvent(percent=percent, message=message))

    def drain(self) -> list[ProgressEvent]:
        """Remove and return every queued event."""
        events = []
        while not self.queue.empty():
            events.append(self.queue.get_nowait())
        return events
