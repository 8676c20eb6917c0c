#!/usr/bin/env python3
"""Tests for the command-line interface."""

import json
import logging
import sys
import unittest
from pathlib import Path
from unittest.mock import Mock

import pytest

tests_dir = Path(__file__).parent.parent.parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from conftest import create_test_items, TEST_PLAYLIST_ID, TEST_YOUTUBE_KEY  # noqa: E402

from playlist_summarizer import cli, config  # noqa: E402
from playlist_summarizer.exceptions import ProviderConfigError  # noqa: E402
from playlist_summarizer.models import Report, ReportEntry, ResultStatus  # noqa: E402
from playlist_summarizer.workflow.events import ProgressObserver  # noqa: E402

pytestmark = [pytest.mark.unit]


def _report():
    items = create_test_items(2)
    return Report(
        entries=[
            ReportEntry(item=items[0], status=ResultStatus.SUMMARIZED, summary="short summary"),
            ReportEntry(
                item=items[1], status=ResultStatus.NO_TRANSCRIPT, error="no transcript available"
            ),
        ],
        summarized=1,
        failed=1,
    )


class TestValidateArgs(unittest.TestCase):
    def _args(self, *argv):
        return cli._build_parser().parse_args(list(argv))

    def test_valid_args(self):
        cli.validate_args(self._args("--workers", "3", "--retries", "2", "--word-count", "20"))

    def test_invalid_values_collected(self):
        args = self._args("--workers", "0", "--retries", "0", "--retry-delay", "-1")
        with self.assertRaises(ValueError) as ctx:
            cli.validate_args(args)
        message = str(ctx.exception)
        self.assertIn("--workers", message)
        self.assertIn("--retries", message)
        self.assertIn("--retry-delay", message)

    def test_blank_playlist_id(self):
        with self.assertRaises(ValueError):
            cli.validate_args(self._args("--playlist-id", "   "))


class TestBuildConfig:
    def test_cli_overrides_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("YOUTUBE_API_KEY", TEST_YOUTUBE_KEY)
        cfg_file = tmp_path / "config.json"
        cfg_file.write_text(
            json.dumps({"playlist_id": "PLfile", "concurrency_limit": 2, "summary_word_count": 30})
        )
        args = cli.parse_args(["--config", str(cfg_file), "--workers", "7"])

        cfg = cli._build_config(args)

        assert cfg.playlist_id == "PLfile"
        assert cfg.workers == 7
        assert cfg.summary_word_count == 30
        assert cfg.youtube_api_key == TEST_YOUTUBE_KEY

    def test_defaults_without_file(self):
        cfg = cli._build_config(cli.parse_args(["--playlist-id", TEST_PLAYLIST_ID]))
        assert cfg.playlist_id == TEST_PLAYLIST_ID
        assert cfg.workers == config.DEFAULT_WORKERS


class TestMain:
    def _main(self, argv, run_pipeline_fn):
        lines = []
        code = cli.main(
            argv,
            apply_log_level_fn=Mock(),
            run_pipeline_fn=run_pipeline_fn,
            write=lines.append,
        )
        return code, lines

    def test_success_renders_report(self):
        run_pipeline_fn = Mock(return_value=_report())

        code, lines = self._main(["--no-progress", "--word-count", "12"], run_pipeline_fn)

        assert code == 0
        cfg = run_pipeline_fn.call_args.args[0]
        assert cfg.summary_word_count == 12
        assert run_pipeline_fn.call_args.kwargs["observer"] is None
        assert "Summary (12 words): short summary" in lines
        assert "Status/Error: no transcript available" in lines
        assert lines[-1] == "--- End of Summaries ---"

    def test_progress_observer_by_default(self):
        run_pipeline_fn = Mock(return_value=_report())
        code, _ = self._main([], run_pipeline_fn)
        assert code == 0
        assert isinstance(run_pipeline_fn.call_args.kwargs["observer"], ProgressObserver)

    def test_empty_report_prints_nothing(self):
        code, lines = self._main(
            ["--no-progress"], Mock(return_value=Report(entries=[], summarized=0, failed=0))
        )
        assert code == 0
        assert lines == []

    def test_provider_error_is_fatal(self, caplog):
        run_pipeline_fn = Mock(
            side_effect=ProviderConfigError("YouTube API key not provided", provider="YouTube")
        )
        with caplog.at_level(logging.CRITICAL):
            code, lines = self._main(["--no-progress"], run_pipeline_fn)
        assert code == 1
        assert lines == []
        assert "YouTube API key not provided" in caplog.text

    def test_unexpected_error(self):
        code, _ = self._main(["--no-progress"], Mock(side_effect=RuntimeError("boom")))
        assert code == 1

    def test_invalid_args(self):
        run_pipeline_fn = Mock()
        code, _ = self._main(["--workers", "0"], run_pipeline_fn)
        assert code == 1
        run_pipeline_fn.assert_not_called()

    def test_missing_config_file(self, tmp_path):
        run_pipeline_fn = Mock()
        code, _ = self._main(["--config", str(tmp_path / "missing.yaml")], run_pipeline_fn)
        assert code == 1
        run_pipeline_fn.assert_not_called()

    def test_applies_log_level(self):
        apply_log_level_fn = Mock()
        cli.main(
            ["--no-progress", "--log-level", "debug"],
            apply_log_level_fn=apply_log_level_fn,
            run_pipeline_fn=Mock(return_value=_report()),
            write=lambda line: None,
        )
        apply_log_level_fn.assert_called_once_with("DEBUG", None)

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "playlist_summarizer" in capsys.readouterr().out
