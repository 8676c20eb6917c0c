"""yt-dlp subtitle fetcher.

This is the only place that interprets yt-dlp's console output. Everything
downstream branches on `FetchStatus`, never on output text.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

from ..config_constants import (
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_SUBTITLE_LANGUAGES,
    DEFAULT_YT_DLP_PATH,
    NO_SUBTITLES_MARKERS,
    YOUTUBE_WATCH_URL,
)
from ..models import FetchResult, FetchStatus

logger = logging.getLogger(__name__)

OUTPUT_TEMPLATE = "%(id)s.%(ext)s"


class SubtitleFetcher(Protocol):
    """External fetch contract used by the transcript acquirer.

    Implementations write ``<output_dir>/<item_id>[.<lang>].vtt`` on success
    and classify the attempt; they must not raise for ordinary failures.
    """

    def fetch(self, item_id: str, output_dir: Union[str, Path]) -> FetchResult: ...


def classify_output(output_log: str, returncode: Optional[int]) -> FetchStatus:
    """Map a yt-dlp run to a fetch status.

    A "no subtitles" message is definitive whatever the exit code; any other
    non-zero exit is treated as transient.
    """
    lowered = output_log.lower()
    if any(marker in lowered for marker in NO_SUBTITLES_MARKERS):
        return FetchStatus.DEFINITIVELY_ABSENT
    if returncode != 0:
        return FetchStatus.TRANSIENT
    return FetchStatus.SUCCESS


def _check_yt_dlp_available(executable: str) -> bool:
    return shutil.which(executable) is not None


class YtDlpFetcher:
    """Download subtitles for one video by running the yt-dlp executable."""

    def __init__(
        self,
        executable: str = DEFAULT_YT_DLP_PATH,
        languages: str = DEFAULT_SUBTITLE_LANGUAGES,
        timeout: Optional[int] = DEFAULT_FETCH_TIMEOUT_SECONDS,
    ):
        self.executable = executable
        self.languages = languages
        self.timeout = timeout
        if not _check_yt_dlp_available(executable):
            logger.warning(
                "yt-dlp executable %r not found on PATH; subtitle fetches will fail", executable
            )

    def build_command(self, item_id: str, output_dir: Union[str, Path]) -> List[str]:
        return [
            self.executable,
            "--write-auto-sub",
            "--write-sub",
            "--sub-format",
            "vtt",
            "--sub-langs",
            self.languages,
            "--skip-download",
            "-o",
            os.path.join(str(output_dir), OUTPUT_TEMPLATE),
            YOUTUBE_WATCH_URL + item_id,
        ]

    def fetch(self, item_id: str, output_dir: Union[str, Path]) -> FetchResult:
        cmd = self.build_command(item_id, output_dir)
        logger.debug("Video %s: Running command: %s", item_id, " ".join(cmd))
        try:
            completed = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            output = _decode(exc.output)
            return FetchResult(
                status=classify_output(output, None),
                output_log=output,
                error=f"yt-dlp timed out after {self.timeout}s",
            )
        except OSError as exc:
            # Missing executable or permission problem
            return FetchResult(status=FetchStatus.TRANSIENT, error=f"failed to run yt-dlp: {exc}")

        output = completed.stdout or ""
        status = classify_output(output, completed.returncode)
        error = None
        if status == FetchStatus.TRANSIENT:
            error = f"yt-dlp exited with status {completed.returncode}"
        return FetchResult(
            status=status,
            output_log=output,
            returncode=completed.returncode,
            error=error,
        )


def _decode(output: Union[str, bytes, None]) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def find_subtitle_files(output_dir: Union[str, Path], item_id: str) -> Sequence[Path]:
    """Locate subtitle files yt-dlp produced for one video.

    Language-tagged files (``<id>.<lang>.vtt``) are preferred; a bare
    ``<id>.vtt`` is the fallback.
    """
    directory = Path(output_dir)
    matches = sorted(directory.glob(f"{_escape_glob(item_id)}.*.vtt"))
    if matches:
        return matches
    bare = directory / f"{item_id}.vtt"
    return [bare] if bare.exists() else []


def _escape_glob(value: str) -> str:
    # Video IDs are [A-Za-z0-9_-], but keep the pattern literal regardless
    return "".join(f"[{ch}]" if ch in "*?[" else ch for ch in value)
