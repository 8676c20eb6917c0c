"""Service API for non-interactive use of playlist_summarizer.

Runs are driven by a configuration file only and report a structured result,
which suits cron jobs and process managers (supervisor, systemd).

Example:
    >>> from playlist_summarizer import service
    >>> result = service.run_from_config_file("config.yaml")
    >>> if result.success:
    ...     print(f"Summarized {result.videos_summarized}/{result.videos_total} videos")

For scheduled usage:
    # crontab
    0 6 * * * python -m playlist_summarizer.service --config /path/to/config.yaml
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from . import __version__, config
from .models import Report

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """Result of a service run.

    Attributes:
        videos_total: Number of playlist videos processed
        videos_summarized: Number of videos with a summary
        report: Full ordered report (None when the run failed to start)
        word_count: Target summary length the run used
        success: Whether the run completed
        error: Error message if success is False, None otherwise
    """

    videos_total: int
    videos_summarized: int
    report: Optional[Report] = None
    word_count: int = config.DEFAULT_SUMMARY_WORD_COUNT
    success: bool = True
    error: Optional[str] = None

    @property
    def summary(self) -> str:
        if not self.success:
            return ""
        return (
            f"Summarized {self.videos_summarized} of {self.videos_total} videos "
            f"({self.videos_total - self.videos_summarized} without summary)"
        )


def run(cfg: config.Config) -> ServiceResult:
    """Run the pipeline with the given configuration.

    Per-video failures are part of a successful result; only startup
    failures (missing API key, playlist listing errors) make it unsuccessful.

    Args:
        cfg: Configuration object

    Returns:
        ServiceResult with processing results
    """
    from .workflow import orchestration

    try:
        orchestration.apply_log_level(level=cfg.log_level, log_file=cfg.log_file)
        report = orchestration.run_pipeline(cfg)
    except Exception as e:
        error_msg = str(e)
        logger.error(f"Pipeline execution failed: {error_msg}", exc_info=True)
        return ServiceResult(videos_total=0, videos_summarized=0, success=False, error=error_msg)

    return ServiceResult(
        videos_total=report.total,
        videos_summarized=report.summarized,
        report=report,
        word_count=cfg.summary_word_count,
    )


def run_from_config_file(config_path: str | Path) -> ServiceResult:
    """Load a configuration file and run the pipeline.

    Args:
        config_path: Path to configuration file (JSON or YAML)

    Returns:
        ServiceResult with processing results; a config that cannot be loaded
        gives an unsuccessful result instead of an exception
    """
    try:
        config_dict = config.load_config_file(str(config_path))
        cfg = config.Config(**config_dict)
    except Exception as exc:
        error_msg = f"Failed to load configuration file: {exc}"
        logger.error(error_msg)
        return ServiceResult(videos_total=0, videos_summarized=0, success=False, error=error_msg)

    return run(cfg)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Service entry point: ``python -m playlist_summarizer.service --config config.yaml``.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    import argparse

    from .workflow.report import render_report

    parser = argparse.ArgumentParser(
        description="Playlist Summarizer Service - Run pipeline from configuration file",
    )
    parser.add_argument(
        "--config",
        required=True,
        help="Path to configuration file (JSON or YAML)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"playlist_summarizer {__version__}",
    )
    args = parser.parse_args(argv)

    result = run_from_config_file(args.config)

    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    if result.report is not None and result.report.total:
        render_report(result.report, result.word_count)
    print(result.summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
