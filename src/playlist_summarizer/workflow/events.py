"""Structured progress events and the observers that consume them.

Pipeline components never log progress directly to a particular sink; they
emit `PipelineEvent` objects to an injected `PipelineObserver`. Observers
decide what to do with them: write log lines, append JSONL records, or tick a
progress bar.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, IO, Iterable, List, Optional, Protocol

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    RUN_STARTED = "run_started"
    ITEM_STARTED = "item_started"
    FETCH_ATTEMPT = "fetch_attempt"
    FETCH_RETRY_SCHEDULED = "fetch_retry_scheduled"
    TRANSCRIPT_ACQUIRED = "transcript_acquired"
    TRANSCRIPT_ABSENT = "transcript_absent"
    TRANSCRIPT_FAILED = "transcript_failed"
    SUMMARY_STARTED = "summary_started"
    SUMMARY_SUCCEEDED = "summary_succeeded"
    SUMMARY_FAILED = "summary_failed"
    SUMMARY_SKIPPED = "summary_skipped"
    ITEM_FINISHED = "item_finished"
    RUN_FINISHED = "run_finished"


@dataclass(frozen=True)
class PipelineEvent:
    """One progress notification.

    Attributes:
        kind: What happened.
        item_id: Video the event refers to (None for run-level events).
        title: Video title, for human-readable sinks.
        detail: Free-form detail (error text, summary, counts).
        attempt: Fetch attempt number for fetch events.
        data: Extra structured fields (e.g. totals on run events).
        timestamp: UTC time the event was created.
    """

    kind: EventKind
    item_id: Optional[str] = None
    title: Optional[str] = None
    detail: Optional[str] = None
    attempt: Optional[int] = None
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        record = asdict(self)
        record["kind"] = self.kind.value
        record["timestamp"] = self.timestamp.isoformat()
        return {key: value for key, value in record.items() if value not in (None, {})}


class PipelineObserver(Protocol):
    """Receives pipeline events. Must tolerate calls from several threads."""

    def notify(self, event: PipelineEvent) -> None: ...


class NullObserver:
    def notify(self, event: PipelineEvent) -> None:
        return None


class LoggingObserver:
    """Write every event to a logger, one line per event.

    Lines go out at ``level`` (DEBUG by default), next to the components'
    own log messages.
    """

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.DEBUG) -> None:
        self.log = log or logger
        self.level = level

    def notify(self, event: PipelineEvent) -> None:
        level = self.level
        if event.item_id is None:
            self.log.log(level, "%s %s", event.kind.value, event.detail or "")
            return
        prefix = f"Video {event.item_id}"
        if event.title:
            prefix = f"{prefix} ({event.title})"
        attempt = f" attempt={event.attempt}" if event.attempt is not None else ""
        detail = f": {event.detail}" if event.detail else ""
        self.log.log(level, "%s: %s%s%s", prefix, event.kind.value, attempt, detail)


class JSONLEventObserver:
    """Append each event as one JSON line to a file.

    Use as a context manager; events received while closed are dropped with a
    debug message.
    """

    def __init__(self, jsonl_path: str) -> None:
        self.jsonl_path = Path(jsonl_path)
        self._file_handle: Optional[IO[str]] = None
        self._lock = threading.Lock()

    def __enter__(self) -> "JSONLEventObserver":
        self.jsonl_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_handle = open(self.jsonl_path, "a", encoding="utf-8")
        return self

    def __exit__(self, _exc_type, _exc_val, _exc_tb) -> None:
        with self._lock:
            if self._file_handle:
                self._file_handle.close()
                self._file_handle = None

    def notify(self, event: PipelineEvent) -> None:
        line = json.dumps(event.to_dict(), ensure_ascii=False)
        with self._lock:
            if not self._file_handle:
                logger.debug("JSONL observer closed, dropping %s event", event.kind.value)
                return
            self._file_handle.write(line + "\n")
            self._file_handle.flush()


class ProgressReporter(Protocol):
    """Minimal progress bar interface (tqdm satisfies it)."""

    def update(self, n: int = 1) -> Any: ...

    def close(self) -> None: ...


ProgressFactory = Callable[[int, str], ProgressReporter]


class ProgressObserver:
    """Drive a progress bar from run and item events.

    The bar is created on ``run_started`` (its total comes from the event's
    ``total`` field), advanced on every ``item_finished`` and closed on
    ``run_finished``.
    """

    def __init__(self, factory: ProgressFactory, description: str = "Videos") -> None:
        self.factory = factory
        self.description = description
        self._bar: Optional[ProgressReporter] = None
        self._lock = threading.Lock()

    def notify(self, event: PipelineEvent) -> None:
        with self._lock:
            if event.kind == EventKind.RUN_STARTED:
                self._bar = self.factory(int(event.data.get("total", 0)), self.description)
            elif event.kind == EventKind.ITEM_FINISHED and self._bar is not None:
                self._bar.update(1)
            elif event.kind == EventKind.RUN_FINISHED and self._bar is not None:
                self._bar.close()
                self._bar = None


class CompositeObserver:
    """Fan one event out to several observers.

    A failing observer is logged and skipped; it never breaks the pipeline or
    starves the other observers.
    """

    def __init__(self, observers: Iterable[PipelineObserver]) -> None:
        self.observers: List[PipelineObserver] = list(observers)

    def notify(self, event: PipelineEvent) -> None:
        for observer in self.observers:
            try:
                observer.notify(event)
            except Exception as exc:
                logger.warning(
                    "Observer %s failed on %s event: %s",
                    type(observer).__name__,
                    event.kind.value,
                    exc,
                )


def safe_notify(observer: PipelineObserver, event: PipelineEvent) -> None:
    """Deliver one event, logging instead of raising if the observer fails."""
    try:
        observer.notify(event)
    except Exception as exc:
        logger.warning(
            "Observer %s failed on %s event: %s", type(observer).__name__, event.kind.value, exc
        )
