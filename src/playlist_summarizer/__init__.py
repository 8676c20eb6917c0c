# This project is intended for personal, non-commercial use only.
# Respect YouTube's Terms of Service and the API quota of your key.

"""Playlist Summarizer - Summarize every video of a YouTube playlist.

This package lists a playlist through the YouTube Data API, fetches each
video's subtitles with yt-dlp, and asks Gemini for a short summary of every
transcript. Videos are processed concurrently under a fixed limit; a failure
on one video never affects the others.

Programmatic API Example:
    >>> import playlist_summarizer
    >>>
    >>> cfg = playlist_summarizer.Config(
    ...     youtube_api_key="...",
    ...     gemini_api_key="...",
    ...     playlist_id="PL8GTokWa3GEeH8kUkx0rzRWwrzlvO8JaT",
    ...     workers=5,
    ... )
    >>> report = playlist_summarizer.run_pipeline(cfg)
    >>> print(f"Summarized {report.summarized} of {report.total} videos")

Service API Example:
    >>> from playlist_summarizer import service
    >>> result = service.run_from_config_file("config.yaml")

CLI Usage:
    $ playlist-summarizer --playlist-id PL8GTokWa3GEeH8kUkx0rzRWwrzlvO8JaT
    $ playlist-summarizer --config config.yaml
"""

from __future__ import annotations

__version__ = "1.0.0"

from .config import Config, load_config_file
from .models import Report, WorkItem
from .workflow.orchestration import run_pipeline

__all__ = [
    "Config",
    "Report",
    "WorkItem",
    "load_config_file",
    "run_pipeline",
    "__version__",
]
# Note: 'cli' and 'service' are available via __getattr__ for lazy loading

_import_cache: dict[str, object] = {}


def __getattr__(name: str):
    if name in _import_cache:
        return _import_cache[name]

    if name in ("cli", "service"):
        import importlib

        module = importlib.import_module(f"{__name__}.{name}")
        _import_cache[name] = module
        return module
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
