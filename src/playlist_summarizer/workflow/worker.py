"""Per-video processing: acquire a transcript, then summarize it."""

from __future__ import annotations

import logging
from typing import Optional

from ..models import OutcomeKind, ProcessingResult, ResultStatus, WorkItem
from ..summarization.summarizer import Summarizer
from ..transcripts.acquirer import TranscriptAcquirer
from .events import EventKind, NullObserver, PipelineEvent, PipelineObserver, safe_notify

logger = logging.getLogger(__name__)

NO_TRANSCRIPT_MESSAGE = "no transcript available"
SUMMARIZER_UNAVAILABLE_MESSAGE = "summarization skipped (summarizer not available)"


def _describe(exc: Optional[BaseException]) -> str:
    if exc is None:
        return "unknown error"
    return str(exc) or type(exc).__name__


class ItemWorker:
    """Run the two-stage pipeline for one video.

    ``process`` never raises: every outcome, including unexpected errors
    from collaborators, becomes a `ProcessingResult`.
    """

    def __init__(
        self,
        acquirer: TranscriptAcquirer,
        summarizer: Optional[Summarizer] = None,
        observer: Optional[PipelineObserver] = None,
    ):
        self.acquirer = acquirer
        self.summarizer = summarizer
        self.observer = observer or NullObserver()

    def process(self, item: WorkItem) -> ProcessingResult:
        logger.info("Processing video: %s (%s)", item.title, item.item_id)
        self._emit(EventKind.ITEM_STARTED, item)
        try:
            return self._process(item)
        except Exception as exc:
            logger.exception("Video %s: unexpected error during processing", item.item_id)
            return ProcessingResult.failed(item, f"unexpected error: {_describe(exc)}")

    def _process(self, item: WorkItem) -> ProcessingResult:
        transcript = self.acquirer.acquire(item.item_id)

        if transcript.kind == OutcomeKind.FAILURE:
            error = _describe(transcript.cause)
            logger.warning("Video %s: error getting transcript: %s", item.item_id, error)
            self._emit(EventKind.TRANSCRIPT_FAILED, item, error)
            return ProcessingResult.failed(item, error)

        if transcript.kind == OutcomeKind.ABSENT or not transcript.content:
            logger.info("Video %s: No transcript available.", item.item_id)
            self._emit(EventKind.TRANSCRIPT_ABSENT, item)
            return ProcessingResult.failed(
                item, NO_TRANSCRIPT_MESSAGE, status=ResultStatus.NO_TRANSCRIPT
            )

        self._emit(EventKind.TRANSCRIPT_ACQUIRED, item, f"{len(transcript.content)} characters")

        if self.summarizer is None:
            logger.warning("Video %s: Summarizer not available, skipping summary.", item.item_id)
            self._emit(EventKind.SUMMARY_SKIPPED, item)
            return ProcessingResult.failed(
                item, SUMMARIZER_UNAVAILABLE_MESSAGE, status=ResultStatus.SKIPPED
            )

        self._emit(EventKind.SUMMARY_STARTED, item)
        summary = self.summarizer.summarize(transcript.content)
        if summary.kind == OutcomeKind.FAILURE or not summary.content:
            error = _describe(summary.cause)
            logger.warning("Video %s: error summarizing: %s", item.item_id, error)
            self._emit(EventKind.SUMMARY_FAILED, item, error)
            return ProcessingResult.failed(item, error)

        logger.info("Video %s: Summarized successfully.", item.item_id)
        self._emit(EventKind.SUMMARY_SUCCEEDED, item, summary.content)
        return ProcessingResult.summarized(item, summary.content)

    def _emit(self, kind: EventKind, item: WorkItem, detail: Optional[str] = None) -> None:
        safe_notify(
            self.observer,
            PipelineEvent(kind=kind, item_id=item.item_id, title=item.title, detail=detail),
        )
