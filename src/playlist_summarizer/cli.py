"""Command-line interface for playlist_summarizer."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Callable, cast, Dict, List, Optional, Sequence

from pydantic import ValidationError

from . import __version__, config
from .exceptions import ProviderError
from .models import Report
from .workflow import events

_LOGGER = logging.getLogger(__name__)

# Progress bar constants
TQDM_NCOLS = 80
TQDM_MIN_INTERVAL = 0.5

# CLI option -> Config field
_CONFIG_FIELDS = (
    "playlist_id",
    "gemini_model",
    "temp_dir",
    "max_transcript_retries",
    "transcript_retry_delay",
    "fetch_timeout",
    "summary_timeout",
    "workers",
    "summary_word_count",
    "subtitle_languages",
    "yt_dlp_path",
    "events_file",
    "log_level",
    "log_file",
)


def _tqdm_progress(total: int, description: str) -> events.ProgressReporter:
    """Create a tqdm bar for the progress observer."""
    from tqdm import tqdm

    return cast(
        events.ProgressReporter,
        tqdm(
            total=total,
            desc=description,
            unit="video",
            leave=True,
            ncols=TQDM_NCOLS,
            mininterval=TQDM_MIN_INTERVAL,
            file=sys.stderr,
        ),
    )


def validate_args(args: argparse.Namespace) -> None:
    """Validate parsed CLI arguments and raise ValueError when invalid."""
    errors: List[str] = []

    if args.workers is not None and args.workers < 1:
        errors.append("--workers must be at least 1")
    if args.max_transcript_retries is not None and args.max_transcript_retries < 1:
        errors.append(f"--retries must be at least 1, got: {args.max_transcript_retries}")
    if args.transcript_retry_delay is not None and args.transcript_retry_delay < 0:
        errors.append(f"--retry-delay must be non-negative, got: {args.transcript_retry_delay}")
    if args.summary_timeout is not None and args.summary_timeout <= 0:
        errors.append(f"--summary-timeout must be positive, got: {args.summary_timeout}")
    if args.summary_word_count is not None and args.summary_word_count <= 0:
        errors.append(f"--word-count must be positive, got: {args.summary_word_count}")
    if args.playlist_id is not None and not args.playlist_id.strip():
        errors.append("--playlist-id cannot be empty")

    if errors:
        raise ValueError("Invalid input parameters:\n  " + "\n  ".join(errors))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="playlist-summarizer",
        description=(
            "Fetch subtitles for every video of a YouTube playlist and summarize "
            "each transcript with Gemini. API keys are read from YOUTUBE_API_KEY "
            "and GEMINI_API_KEY (or a config file)."
        ),
    )
    parser.add_argument("--version", action="store_true", help="Show program version and exit")
    parser.add_argument("--config", default=None, help="Path to a JSON or YAML config file")
    parser.add_argument("--playlist-id", dest="playlist_id", default=None, help="Playlist ID")
    parser.add_argument(
        "--gemini-model", dest="gemini_model", default=None, help="Gemini model for summaries"
    )
    parser.add_argument(
        "--temp-dir", dest="temp_dir", default=None, help="Scratch directory for subtitle files"
    )
    parser.add_argument(
        "--retries",
        dest="max_transcript_retries",
        type=int,
        default=None,
        help="Subtitle fetch attempts per video",
    )
    parser.add_argument(
        "--retry-delay",
        dest="transcript_retry_delay",
        type=float,
        default=None,
        help="Seconds between subtitle fetch attempts",
    )
    parser.add_argument(
        "--fetch-timeout",
        dest="fetch_timeout",
        type=int,
        default=None,
        help="Timeout in seconds for one yt-dlp run (0 disables)",
    )
    parser.add_argument(
        "--summary-timeout",
        dest="summary_timeout",
        type=int,
        default=None,
        help="Deadline in seconds for one summarization call",
    )
    parser.add_argument(
        "--workers", type=int, default=None, help="Number of videos processed concurrently"
    )
    parser.add_argument(
        "--word-count",
        dest="summary_word_count",
        type=int,
        default=None,
        help="Target summary length in words",
    )
    parser.add_argument(
        "--sub-langs",
        dest="subtitle_languages",
        default=None,
        help="Subtitle languages passed to yt-dlp --sub-langs",
    )
    parser.add_argument(
        "--yt-dlp", dest="yt_dlp_path", default=None, help="Path to the yt-dlp executable"
    )
    parser.add_argument(
        "--events-file",
        dest="events_file",
        default=None,
        help="Append pipeline progress events to this JSONL file",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    parser.add_argument("--log-file", dest="log_file", default=None, help="Also log to this file")
    parser.add_argument(
        "--no-progress", action="store_true", help="Disable the progress bar"
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse and validate CLI arguments."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"playlist_summarizer {__version__}")
        raise SystemExit(0)

    validate_args(args)
    return args


def _build_config(args: argparse.Namespace) -> config.Config:
    """Materialize a Config from the config file (if any) and CLI overrides.

    CLI values win over the file; unset values fall through to the
    environment and then to the defaults.

    Raises:
        ValueError: If the config file cannot be loaded
        ValidationError: If the merged values are invalid
    """
    payload: Dict[str, Any] = {}
    if args.config:
        payload.update(config.load_config_file(args.config))
    for field_name in _CONFIG_FIELDS:
        value = getattr(args, field_name)
        if value is not None:
            payload[field_name] = value
    if "workers" in payload:
        payload.pop("concurrency_limit", None)
    return cast(config.Config, config.Config.model_validate(payload))


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    apply_log_level_fn: Optional[Callable[[str, Optional[str]], None]] = None,
    run_pipeline_fn: Optional[Callable[..., Report]] = None,
    write: Callable[[str], None] = print,
    logger: Optional[logging.Logger] = None,
) -> int:
    """Entry point for the CLI; returns an exit status code."""
    from .workflow import orchestration
    from .workflow.report import render_report

    log = logger or _LOGGER
    if apply_log_level_fn is None:
        apply_log_level_fn = orchestration.apply_log_level
    if run_pipeline_fn is None:
        run_pipeline_fn = orchestration.run_pipeline

    try:
        args = parse_args(argv)
    except ValueError as exc:
        log.error(f"Error: {exc}")
        return 1

    try:
        cfg = _build_config(args)
    except (ValidationError, ValueError) as exc:
        log.error(f"Invalid configuration: {exc}")
        return 1

    apply_log_level_fn(cfg.log_level, cfg.log_file)
    log.info("Application starting...")

    observer: Optional[events.PipelineObserver] = None
    if not args.no_progress:
        observer = events.ProgressObserver(_tqdm_progress)

    try:
        report = run_pipeline_fn(cfg, observer=observer)
    except ProviderError as exc:
        log.critical(f"Failed to start: {exc}")
        return 1
    except Exception as exc:
        log.error(f"Unexpected failure: {exc}")
        return 1

    if report.total:
        render_report(report, cfg.summary_word_count, write)
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry
    raise SystemExit(main())
