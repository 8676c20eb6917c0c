from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional

from .config_constants import YOUTUBE_WATCH_URL


@dataclass(frozen=True)
class WorkItem:
    """One video to process.

    Attributes:
        item_id: YouTube video ID, unique within a run.
        title: Display label (the video title).

    Example:
        >>> item = WorkItem(item_id="dQw4w9WgXcQ", title="Some video")
        >>> item.url
        'https://www.youtube.com/watch?v=dQw4w9WgXcQ'
    """

    item_id: str
    title: str

    @property
    def url(self) -> str:
        return YOUTUBE_WATCH_URL + self.item_id


class FetchStatus(str, Enum):
    """Classification of one subtitle fetch attempt."""

    SUCCESS = "success"
    TRANSIENT = "transient"
    DEFINITIVELY_ABSENT = "definitively_absent"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one external subtitle fetch.

    Attributes:
        status: Classified outcome; the only field the acquirer branches on.
        output_log: Combined stdout/stderr of the fetch, kept for diagnostics.
        returncode: Process exit code, None when the process never ran to completion.
        error: Short description of a transient failure.
    """

    status: FetchStatus
    output_log: str = ""
    returncode: Optional[int] = None
    error: Optional[str] = None


class OutcomeKind(str, Enum):
    TEXT = "text"
    ABSENT = "absent"
    FAILURE = "failure"


@dataclass(frozen=True)
class TranscriptOutcome:
    """Result of acquiring one transcript: text, absent, or failure."""

    kind: OutcomeKind
    content: Optional[str] = None
    cause: Optional[BaseException] = None

    @classmethod
    def text(cls, content: str) -> "TranscriptOutcome":
        if not content:
            raise ValueError("transcript text must be non-empty")
        return cls(kind=OutcomeKind.TEXT, content=content)

    @classmethod
    def absent(cls) -> "TranscriptOutcome":
        return cls(kind=OutcomeKind.ABSENT)

    @classmethod
    def failure(cls, cause: BaseException) -> "TranscriptOutcome":
        return cls(kind=OutcomeKind.FAILURE, cause=cause)


@dataclass(frozen=True)
class SummaryOutcome:
    """Result of one summarization call: text or failure."""

    kind: OutcomeKind
    content: Optional[str] = None
    cause: Optional[BaseException] = None

    @classmethod
    def text(cls, content: str) -> "SummaryOutcome":
        return cls(kind=OutcomeKind.TEXT, content=content)

    @classmethod
    def failure(cls, cause: BaseException) -> "SummaryOutcome":
        return cls(kind=OutcomeKind.FAILURE, cause=cause)


class ResultStatus(str, Enum):
    SUMMARIZED = "summarized"
    NO_TRANSCRIPT = "no_transcript"
    SKIPPED = "skipped"
    FAILED = "failed"
    MISSING = "missing"


@dataclass(frozen=True)
class ProcessingResult:
    """Final outcome for one video.

    Exactly one of ``summary`` and ``error`` is set.

    Attributes:
        item: The processed video.
        status: Outcome category.
        summary: Summary text when status is SUMMARIZED.
        error: Human-readable reason for every other status.
    """

    item: WorkItem
    status: ResultStatus
    summary: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.status == ResultStatus.SUMMARIZED:
            if not self.summary or self.error is not None:
                raise ValueError("summarized result needs a summary and no error")
        elif self.summary is not None or not self.error:
            raise ValueError(f"{self.status.value} result needs an error and no summary")

    @property
    def succeeded(self) -> bool:
        return self.status == ResultStatus.SUMMARIZED

    @classmethod
    def summarized(cls, item: WorkItem, summary: str) -> "ProcessingResult":
        return cls(item=item, status=ResultStatus.SUMMARIZED, summary=summary)

    @classmethod
    def failed(
        cls, item: WorkItem, error: str, status: ResultStatus = ResultStatus.FAILED
    ) -> "ProcessingResult":
        return cls(item=item, status=status, error=error)


class Batch:
    """Thread-safe collection of results keyed by video ID.

    Each worker records exactly once; the batch never holds more results than
    the number of dispatched items.
    """

    def __init__(self, expected: int) -> None:
        self.expected = expected
        self._results: Dict[str, ProcessingResult] = {}
        self._lock = threading.Lock()

    def record(self, result: ProcessingResult) -> None:
        item_id = result.item.item_id
        with self._lock:
            if item_id in self._results:
                raise ValueError(f"result for {item_id} already recorded")
            if len(self._results) >= self.expected:
                raise ValueError(f"batch already holds {self.expected} results")
            self._results[item_id] = result

    def get(self, item_id: str) -> Optional[ProcessingResult]:
        with self._lock:
            return self._results.get(item_id)

    @property
    def complete(self) -> bool:
        with self._lock:
            return len(self._results) == self.expected

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def __contains__(self, item_id: object) -> bool:
        with self._lock:
            return item_id in self._results

    def __iter__(self) -> Iterator[ProcessingResult]:
        with self._lock:
            return iter(list(self._results.values()))


@dataclass(frozen=True)
class ReportEntry:
    item: WorkItem
    status: ResultStatus
    summary: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class Report:
    """Ordered per-video report plus aggregate counts."""

    entries: List[ReportEntry]
    summarized: int
    failed: int

    @property
    def total(self) -> int:
        return len(self.entries)
