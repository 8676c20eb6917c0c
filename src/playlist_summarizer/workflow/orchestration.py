"""Run orchestration for the playlist summarization pipeline.

`run_pipeline` wires the source, transcript acquisition, summarization,
worker, coordinator and report assembler together for one run.
"""

from __future__ import annotations

import contextlib
import logging
import os
import time
from pathlib import Path
from typing import List, Optional, Protocol

from .. import config
from ..exceptions import ProviderConfigError
from ..models import Report, WorkItem
from ..sources.youtube import YouTubePlaylistSource
from ..summarization.base import SummarizationProvider
from ..summarization.factory import create_summarization_provider
from ..summarization.summarizer import Summarizer
from ..transcripts.acquirer import TranscriptAcquirer
from ..transcripts.fetcher import SubtitleFetcher, YtDlpFetcher
from ..utils.filesystem import scoped_work_dir
from .coordinator import PipelineCoordinator
from .events import (
    CompositeObserver,
    EventKind,
    JSONLEventObserver,
    LoggingObserver,
    PipelineEvent,
    PipelineObserver,
    safe_notify,
)
from .report import assemble
from .worker import ItemWorker

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class WorkItemSource(Protocol):
    def list_items(self) -> List[WorkItem]: ...


def apply_log_level(level: str, log_file: Optional[str] = None) -> None:
    """Apply logging level to root logger and configure handlers.

    Args:
        level: Log level string (e.g., 'DEBUG', 'INFO', 'WARNING')
        log_file: Optional path to log file. If provided, logs will be written to both
                  console and file.

    Raises:
        ValueError: If log level is invalid
        OSError: If log file cannot be created or written to
    """
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    root_logger = logging.getLogger()
    formatter = logging.Formatter(LOG_FORMAT)

    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)
    else:
        for handler in root_logger.handlers:
            handler.setLevel(numeric_level)
            handler.setFormatter(formatter)
    root_logger.setLevel(numeric_level)

    if log_file:
        file_handler_exists = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_file)
            for h in root_logger.handlers
        )
        if not file_handler_exists:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            logger.info("Logging to file: %s", log_file)

    # The Google client libraries log every HTTP request at DEBUG
    for noisy in ("googleapiclient.discovery", "googleapiclient.discovery_cache"):
        logging.getLogger(noisy).setLevel(max(numeric_level, logging.WARNING))


def _log_configuration(cfg: config.Config) -> None:
    logger.info("--- Application Configuration ---")
    logger.info("Playlist ID: %s", cfg.playlist_id)
    logger.info("Gemini Model: %s", cfg.gemini_model)
    logger.info("Summary Word Count: %d", cfg.summary_word_count)
    logger.info("Concurrency Limit: %d", cfg.workers)
    logger.info("YouTube API Key: [%s]", "LOADED" if cfg.youtube_api_key else "NOT LOADED")
    logger.info(
        "Gemini API Key: [%s]",
        "LOADED" if cfg.gemini_api_key else "NOT LOADED - Summarization will be skipped",
    )
    logger.info("-------------------------------")


def run_pipeline(
    cfg: config.Config,
    source: Optional[WorkItemSource] = None,
    fetcher: Optional[SubtitleFetcher] = None,
    provider: Optional[SummarizationProvider] = None,
    observer: Optional[PipelineObserver] = None,
) -> Report:
    """Summarize every video of the configured playlist.

    The run has these stages:

    1. Check the mandatory YouTube credential
    2. List the playlist
    3. Create the summarization provider (optional; missing means "skipped")
    4. Process all videos concurrently in a scratch directory that is removed
       afterwards
    5. Assemble the report in playlist order

    Args:
        cfg: Configuration object. See `Config` for available options.
        source: Work item source; a `YouTubePlaylistSource` is built when omitted
        fetcher: Subtitle fetcher; a `YtDlpFetcher` is built when omitted
        provider: Summarization provider; created from ``cfg`` when omitted
        observer: Extra progress observer (e.g. a progress bar)

    Returns:
        Report with one entry per playlist video, in playlist order

    Raises:
        ProviderConfigError: If the YouTube API key is missing
        SourceError: If the playlist cannot be listed
        OSError: If the scratch directory cannot be created

    Example:
        >>> from playlist_summarizer import Config, run_pipeline
        >>>
        >>> cfg = Config(youtube_api_key="...", gemini_api_key="...")
        >>> report = run_pipeline(cfg)
        >>> print(f"{report.summarized}/{report.total} videos summarized")
    """
    run_start = time.monotonic()
    _log_configuration(cfg)

    if not cfg.youtube_api_key:
        raise ProviderConfigError(
            message="YouTube API key not provided",
            provider="YouTube",
            config_key="youtube_api_key",
            suggestion="Set YOUTUBE_API_KEY environment variable or youtube_api_key in config",
        )

    if source is None:
        source = YouTubePlaylistSource(cfg.youtube_api_key, cfg.playlist_id)
    items = source.list_items()
    if not items:
        logger.info("No videos found in playlist %s. Exiting.", cfg.playlist_id)
        return Report(entries=[], summarized=0, failed=0)

    if provider is None:
        provider = create_summarization_provider(cfg)
    summarizer: Optional[Summarizer] = None
    if provider is not None:
        summarizer = Summarizer(
            provider,
            word_count=cfg.summary_word_count,
            prompt_template=cfg.summary_prompt,
            timeout=cfg.summary_timeout,
        )
        logger.info("Summarization enabled with model %s.", cfg.gemini_model)

    if fetcher is None:
        fetcher = YtDlpFetcher(
            executable=cfg.yt_dlp_path,
            languages=cfg.subtitle_languages,
            timeout=cfg.fetch_timeout,
        )

    with contextlib.ExitStack() as stack:
        observers: List[PipelineObserver] = [LoggingObserver()]
        if cfg.events_file:
            observers.append(stack.enter_context(JSONLEventObserver(cfg.events_file)))
        if observer is not None:
            observers.append(observer)
        run_observer = CompositeObserver(observers)

        work_dir = stack.enter_context(scoped_work_dir(cfg.temp_dir))
        acquirer = TranscriptAcquirer(
            fetcher,
            work_dir,
            max_retries=cfg.max_transcript_retries,
            retry_delay=cfg.transcript_retry_delay,
            observer=run_observer,
        )
        worker = ItemWorker(acquirer, summarizer, observer=run_observer)
        coordinator = PipelineCoordinator(worker, observer=run_observer)

        logger.info(
            "--- Processing %d Videos Concurrently (Limit: %d) ---", len(items), cfg.workers
        )
        safe_notify(
            run_observer,
            PipelineEvent(
                kind=EventKind.RUN_STARTED,
                detail=f"{len(items)} videos",
                data={"total": len(items)},
            ),
        )
        try:
            batch = coordinator.run(items, cfg.workers)
        finally:
            safe_notify(
                run_observer,
                PipelineEvent(kind=EventKind.RUN_FINISHED, data={"total": len(items)}),
            )

    report = assemble(items, batch)
    logger.info(
        "Processing complete. Successful summaries: %d, Videos with errors/no summary: %d, "
        "Total videos: %d",
        report.summarized,
        report.failed,
        report.total,
    )
    logger.info("Application finished in %.2fs.", time.monotonic() - run_start)
    return report
