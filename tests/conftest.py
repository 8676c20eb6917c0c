"""Shared fixtures and test utilities for playlist_summarizer tests.

This module contains:
- Test constants
- Helper functions for creating work items, configs and VTT documents
- Fake collaborators (subtitle fetcher, summarization provider, observer)
- Environment isolation for Config

All test files can import from this module using pytest's conftest.py mechanism.
"""

import os
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

os.environ.setdefault("TESTING", "1")

from playlist_summarizer import config  # noqa: E402
from playlist_summarizer.models import FetchResult, FetchStatus, WorkItem  # noqa: E402

# Test constants
TEST_YOUTUBE_KEY = "test-youtube-key"
TEST_GEMINI_KEY = "test-gemini-key"
TEST_PLAYLIST_ID = "PLtest123"
TEST_VIDEO_ID = "abc123XYZ_-"
TEST_VIDEO_TITLE = "A Test Video"

ENV_VARS = (
    "YOUTUBE_API_KEY",
    "GEMINI_API_KEY",
    "PLAYLIST_ID",
    "GEMINI_MODEL",
    "LOG_LEVEL",
    "LOG_FILE",
    "WORKERS",
)


def build_vtt(*cues: str) -> str:
    """Build a minimal WebVTT document with one cue per argument."""
    lines = ["WEBVTT", "Kind: captions", "Language: en", ""]
    for index, text in enumerate(cues):
        start = f"00:00:{index:02d}.000"
        end = f"00:00:{index + 1:02d}.000"
        lines.extend([f"{start} --> {end}", text, ""])
    return "\n".join(lines)


def create_test_items(count: int, prefix: str = "vid") -> List[WorkItem]:
    return [WorkItem(item_id=f"{prefix}{i}", title=f"Video {i}") for i in range(count)]


def create_test_config(**overrides) -> config.Config:
    """Create a Config with test defaults (no real keys, no delays)."""
    values = {
        "youtube_api_key": TEST_YOUTUBE_KEY,
        "playlist_id": TEST_PLAYLIST_ID,
        "transcript_retry_delay": 0,
        "workers": 2,
    }
    values.update(overrides)
    return config.Config(**values)


class FakeFetcher:
    """Subtitle fetcher returning scripted results and writing VTT files.

    ``script`` maps item IDs to a list of statuses, one per attempt; the last
    entry repeats once the list is exhausted. A SUCCESS attempt writes
    ``<id>.en.vtt`` with the item's cue text from ``cues`` (no file when the
    item has no cues).
    """

    def __init__(
        self,
        script: Optional[Dict[str, Sequence[FetchStatus]]] = None,
        cues: Optional[Dict[str, Sequence[str]]] = None,
        default: FetchStatus = FetchStatus.SUCCESS,
        delay: float = 0.0,
    ):
        self.script = {key: list(value) for key, value in (script or {}).items()}
        self.cues = cues or {}
        self.default = default
        self.delay = delay
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def call_count(self, item_id: str) -> int:
        with self._lock:
            return self.calls.count(item_id)

    def fetch(self, item_id, output_dir):
        with self._lock:
            self.calls.append(item_id)
            attempt = self.calls.count(item_id)
        if self.delay:
            time.sleep(self.delay)
        statuses = self.script.get(item_id)
        if statuses:
            status = statuses[min(attempt, len(statuses)) - 1]
        else:
            status = self.default

        if status == FetchStatus.DEFINITIVELY_ABSENT:
            return FetchResult(status=status, output_log="There are no subtitles for the requested languages")
        if status == FetchStatus.TRANSIENT:
            return FetchResult(status=status, output_log="HTTP Error 429", returncode=1, error="yt-dlp exited with status 1")

        cues = self.cues.get(item_id, [f"transcript of {item_id}"])
        if cues:
            Path(output_dir, f"{item_id}.en.vtt").write_text(build_vtt(*cues), encoding="utf-8")
        return FetchResult(status=status, returncode=0)


class FakeProvider:
    """Summarization provider recording prompts and tracking concurrency."""

    def __init__(self, response: str = "  a short summary  ", delay: float = 0.0, error=None):
        self.response = response
        self.delay = delay
        self.error = error
        self.prompts: List[str] = []
        self.in_flight = 0
        self.peak = 0
        self._lock = threading.Lock()

    def summarize(self, prompt, timeout=None):
        with self._lock:
            self.prompts.append(prompt)
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return self.response
        finally:
            with self._lock:
                self.in_flight -= 1


class RecordingObserver:
    """Observer collecting every event it receives."""

    def __init__(self):
        self.events = []
        self._lock = threading.Lock()

    def notify(self, event):
        with self._lock:
            self.events.append(event)

    def kinds(self, item_id=None):
        with self._lock:
            return [e.kind for e in self.events if item_id is None or e.item_id == item_id]


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Keep real credentials and overrides out of Config during tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
