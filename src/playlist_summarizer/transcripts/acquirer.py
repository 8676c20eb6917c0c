"""Transcript acquisition: fetch subtitles with retry, then parse them."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional, Union

from ..config_constants import (
    DEFAULT_MAX_TRANSCRIPT_RETRIES,
    DEFAULT_TRANSCRIPT_RETRY_DELAY_SECONDS,
    TRANSCRIPT_SNIPPET_CHARS,
)
from ..exceptions import TranscriptFetchError, TranscriptParseError
from ..models import FetchResult, FetchStatus, TranscriptOutcome
from ..workflow.events import EventKind, NullObserver, PipelineEvent, PipelineObserver, safe_notify
from .fetcher import find_subtitle_files, SubtitleFetcher
from .vtt import parse_vtt_file, VTTParseError

logger = logging.getLogger(__name__)


class TranscriptAcquirer:
    """Turn a video ID into transcript text, "absent", or a failure.

    Fetching is retried up to ``max_retries`` times with a fixed
    ``retry_delay`` between attempts. A definitive "no subtitles" answer stops
    retrying at once. Subtitle files are written to ``work_dir`` and deleted
    once an attempt is done with them: after parsing (successful or not) and
    after absent or failed attempts.

    The acquirer never raises for per-video problems; they come back as
    ``TranscriptOutcome.failure``.
    """

    def __init__(
        self,
        fetcher: SubtitleFetcher,
        work_dir: Union[str, Path],
        max_retries: int = DEFAULT_MAX_TRANSCRIPT_RETRIES,
        retry_delay: float = DEFAULT_TRANSCRIPT_RETRY_DELAY_SECONDS,
        observer: Optional[PipelineObserver] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.fetcher = fetcher
        self.work_dir = Path(work_dir)
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.observer = observer or NullObserver()
        self._sleep = sleep

    def acquire(self, item_id: str) -> TranscriptOutcome:
        last_error: Optional[str] = None
        last_output = ""
        for attempt in range(1, self.max_retries + 1):
            logger.info(
                "Video %s: Transcript fetch attempt %d/%d.", item_id, attempt, self.max_retries
            )
            self._emit(EventKind.FETCH_ATTEMPT, item_id, attempt=attempt)
            result = self._fetch_once(item_id)

            if result.status == FetchStatus.DEFINITIVELY_ABSENT:
                logger.info("Video %s: No subtitles available. Will not retry.", item_id)
                self._discard_artifacts(item_id)
                return TranscriptOutcome.absent()
            if result.status == FetchStatus.SUCCESS:
                logger.info("Video %s: yt-dlp succeeded on attempt %d.", item_id, attempt)
                return self._parse_artifact(item_id, result)

            logger.warning(
                "Video %s: yt-dlp attempt %d failed: %s\nOutput: %s",
                item_id,
                attempt,
                result.error,
                result.output_log,
            )
            self._discard_artifacts(item_id)
            last_error, last_output = result.error, result.output_log
            if attempt < self.max_retries:
                logger.info(
                    "Video %s: Waiting %.1fs before next transcript fetch attempt.",
                    item_id,
                    self.retry_delay,
                )
                self._emit(
                    EventKind.FETCH_RETRY_SCHEDULED,
                    item_id,
                    attempt=attempt,
                    detail=result.error,
                )
                self._sleep(self.retry_delay)

        return TranscriptOutcome.failure(
            TranscriptFetchError(
                item_id=item_id,
                attempts=self.max_retries,
                output_log=last_output,
                cause=last_error,
            )
        )

    def _fetch_once(self, item_id: str) -> FetchResult:
        try:
            return self.fetcher.fetch(item_id, self.work_dir)
        except Exception as exc:
            # A fetcher that raises is treated like any other transient failure
            logger.debug("Video %s: fetcher raised", item_id, exc_info=True)
            return FetchResult(status=FetchStatus.TRANSIENT, error=str(exc) or type(exc).__name__)

    def _discard_artifacts(self, item_id: str) -> None:
        """Remove every subtitle file an attempt left behind for this video."""
        leftovers = [*find_subtitle_files(self.work_dir, item_id), self.work_dir / f"{item_id}.vtt"]
        for path in leftovers:
            path.unlink(missing_ok=True)

    def _parse_artifact(self, item_id: str, result: FetchResult) -> TranscriptOutcome:
        files = find_subtitle_files(self.work_dir, item_id)
        if not files:
            logger.info(
                "Video %s: No VTT file found after yt-dlp run (output: %s).",
                item_id,
                result.output_log,
            )
            return TranscriptOutcome.absent()

        vtt_path = files[0]
        try:
            text = parse_vtt_file(vtt_path)
        except (OSError, VTTParseError) as exc:
            return TranscriptOutcome.failure(
                TranscriptParseError(
                    message=f"failed to open/parse VTT file {vtt_path.name}: {exc}",
                    item_id=item_id,
                )
            )
        finally:
            self._discard_artifacts(item_id)

        if not text:
            logger.info("Video %s: Parsed transcript from %s is empty.", item_id, vtt_path.name)
            return TranscriptOutcome.absent()

        logger.debug(
            "Video %s: Transcript snippet: %s...", item_id, text[:TRANSCRIPT_SNIPPET_CHARS]
        )
        return TranscriptOutcome.text(text)

    def _emit(
        self,
        kind: EventKind,
        item_id: str,
        attempt: Optional[int] = None,
        detail: Optional[str] = None,
    ) -> None:
        safe_notify(
            self.observer,
            PipelineEvent(kind=kind, item_id=item_id, attempt=attempt, detail=detail),
        )
