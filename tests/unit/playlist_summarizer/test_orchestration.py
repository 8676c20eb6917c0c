#!/usr/bin/env python3
"""Tests for run orchestration with injected collaborators."""

import json
import logging
import os
import sys
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

tests_dir = Path(__file__).parent.parent.parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from conftest import (  # noqa: E402
    create_test_config,
    create_test_items,
    FakeFetcher,
    FakeProvider,
    RecordingObserver,
)

from playlist_summarizer.exceptions import ProviderConfigError, SourceError  # noqa: E402
from playlist_summarizer.models import FetchStatus, ResultStatus  # noqa: E402
from playlist_summarizer.workflow import orchestration  # noqa: E402
from playlist_summarizer.workflow.events import EventKind  # noqa: E402

pytestmark = [pytest.mark.unit]


def _source(items):
    source = Mock()
    source.list_items.return_value = items
    return source


def _run(tmp_path, items, provider=None, fetcher=None, observer=None, **overrides):
    cfg = create_test_config(temp_dir=str(tmp_path / "scratch"), **overrides)
    return orchestration.run_pipeline(
        cfg,
        source=_source(items),
        fetcher=fetcher or FakeFetcher(),
        provider=provider,
        observer=observer,
    )


class TestRunPipeline:
    def test_full_run(self, tmp_path):
        items = create_test_items(5)
        provider = FakeProvider(response=" five word summary here ")

        report = _run(tmp_path, items, provider=provider, summary_word_count=4)

        assert report.total == 5
        assert report.summarized == 5
        assert [e.item.item_id for e in report.entries] == [i.item_id for i in items]
        assert all(e.summary == "five word summary here" for e in report.entries)
        assert all("exactly 4 words" in prompt for prompt in provider.prompts)

    def test_missing_youtube_key_is_fatal(self, tmp_path):
        source = _source(create_test_items(1))
        cfg = create_test_config(youtube_api_key=None, temp_dir=str(tmp_path / "scratch"))

        with pytest.raises(ProviderConfigError):
            orchestration.run_pipeline(cfg, source=source, fetcher=FakeFetcher())

        source.list_items.assert_not_called()
        assert not (tmp_path / "scratch").exists()

    def test_source_error_propagates(self, tmp_path):
        source = Mock()
        source.list_items.side_effect = SourceError("playlist not found", provider="YouTube")
        cfg = create_test_config(temp_dir=str(tmp_path / "scratch"))

        with pytest.raises(SourceError):
            orchestration.run_pipeline(cfg, source=source, fetcher=FakeFetcher())

    def test_empty_playlist(self, tmp_path):
        report = _run(tmp_path, [], provider=FakeProvider())
        assert report.total == 0
        assert not (tmp_path / "scratch").exists()

    def test_without_gemini_key_summaries_skipped(self, tmp_path):
        with patch.object(orchestration, "create_summarization_provider", return_value=None):
            report = _run(tmp_path, create_test_items(3))

        assert report.summarized == 0
        assert {e.status for e in report.entries} == {ResultStatus.SKIPPED}

    def test_provider_created_from_config(self, tmp_path):
        provider = FakeProvider(response="made by factory")
        with patch.object(
            orchestration, "create_summarization_provider", return_value=provider
        ) as factory:
            report = _run(tmp_path, create_test_items(1), gemini_api_key="gm-key")

        factory.assert_called_once()
        assert report.entries[0].summary == "made by factory"

    def test_work_dir_removed_after_run(self, tmp_path):
        _run(tmp_path, create_test_items(3), provider=FakeProvider())
        scratch = tmp_path / "scratch"
        assert scratch.is_dir()
        assert list(scratch.iterdir()) == []

    def test_work_dir_removed_on_error(self, tmp_path):
        with patch.object(
            orchestration.PipelineCoordinator, "run", side_effect=RuntimeError("interrupted")
        ):
            with pytest.raises(RuntimeError):
                _run(tmp_path, create_test_items(2), provider=FakeProvider())
        assert list((tmp_path / "scratch").iterdir()) == []

    def test_per_item_failures_do_not_abort(self, tmp_path):
        items = create_test_items(3)
        fetcher = FakeFetcher(script={"vid1": [FetchStatus.TRANSIENT]})

        report = _run(
            tmp_path, items, provider=FakeProvider(), fetcher=fetcher, max_transcript_retries=2
        )

        assert [e.status for e in report.entries] == [
            ResultStatus.SUMMARIZED,
            ResultStatus.FAILED,
            ResultStatus.SUMMARIZED,
        ]
        assert report.failed == 1

    def test_run_events(self, tmp_path):
        observer = RecordingObserver()
        _run(tmp_path, create_test_items(2), provider=FakeProvider(), observer=observer)

        kinds = observer.kinds()
        assert kinds[0] == EventKind.RUN_STARTED
        assert kinds[-1] == EventKind.RUN_FINISHED
        assert observer.events[0].data == {"total": 2}
        assert kinds.count(EventKind.ITEM_FINISHED) == 2

    def test_events_file(self, tmp_path):
        events_file = tmp_path / "events.jsonl"
        _run(
            tmp_path,
            create_test_items(2),
            provider=FakeProvider(),
            events_file=str(events_file),
        )
        kinds = [json.loads(line)["kind"] for line in events_file.read_text().splitlines()]
        assert kinds[0] == "run_started"
        assert kinds[-1] == "run_finished"
        assert kinds.count("summary_succeeded") == 2


class TestApplyLogLevel:
    @pytest.fixture
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers = list(root.handlers)
        levels = [(h, h.level, h.formatter) for h in handlers]
        root_level = root.level
        yield root
        for handler in list(root.handlers):
            if handler not in handlers:
                root.removeHandler(handler)
                handler.close()
        for handler, level, formatter in levels:
            handler.setLevel(level)
            handler.setFormatter(formatter)
        root.setLevel(root_level)

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            orchestration.apply_log_level("CHATTY")

    def test_sets_level_and_file_handler(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "run.log"

        def run_log_handlers():
            return [
                h
                for h in restore_root_logger.handlers
                if isinstance(h, logging.FileHandler)
                and h.baseFilename == os.path.abspath(log_file)
            ]

        orchestration.apply_log_level("DEBUG", str(log_file))

        assert restore_root_logger.level == logging.DEBUG
        assert len(run_log_handlers()) == 1
        assert log_file.exists()

        orchestration.apply_log_level("DEBUG", str(log_file))
        assert len(run_log_handlers()) == 1
