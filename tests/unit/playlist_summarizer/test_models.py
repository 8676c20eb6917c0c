#!/usr/bin/env python3
"""Tests for data model invariants."""

import threading
import unittest

import pytest

from playlist_summarizer.exceptions import (
    ProviderConfigError,
    ProviderError,
    TranscriptError,
    TranscriptFetchError,
)
from playlist_summarizer.models import (
    Batch,
    OutcomeKind,
    ProcessingResult,
    ResultStatus,
    TranscriptOutcome,
    WorkItem,
)

pytestmark = [pytest.mark.unit]


def _item(item_id="v1"):
    return WorkItem(item_id=item_id, title=f"Title {item_id}")


class TestWorkItem(unittest.TestCase):
    def test_url(self):
        self.assertEqual(_item("dQw4w9WgXcQ").url, "https://www.youtube.com/watch?v=dQw4w9WgXcQ")

    def test_frozen(self):
        item = _item()
        with self.assertRaises(Exception):
            item.title = "changed"  # type: ignore[misc]


class TestOutcomes(unittest.TestCase):
    def test_text_requires_content(self):
        with self.assertRaises(ValueError):
            TranscriptOutcome.text("")

    def test_constructors(self):
        self.assertEqual(TranscriptOutcome.text("hello").kind, OutcomeKind.TEXT)
        self.assertEqual(TranscriptOutcome.absent().kind, OutcomeKind.ABSENT)
        cause = RuntimeError("boom")
        failure = TranscriptOutcome.failure(cause)
        self.assertEqual(failure.kind, OutcomeKind.FAILURE)
        self.assertIs(failure.cause, cause)


class TestProcessingResult(unittest.TestCase):
    def test_summarized(self):
        result = ProcessingResult.summarized(_item(), "short summary")
        self.assertTrue(result.succeeded)
        self.assertIsNone(result.error)

    def test_failed_with_status(self):
        result = ProcessingResult.failed(_item(), "no transcript", status=ResultStatus.NO_TRANSCRIPT)
        self.assertFalse(result.succeeded)
        self.assertEqual(result.status, ResultStatus.NO_TRANSCRIPT)

    def test_summary_and_error_are_exclusive(self):
        with self.assertRaises(ValueError):
            ProcessingResult(_item(), ResultStatus.SUMMARIZED, summary="s", error="e")
        with self.assertRaises(ValueError):
            ProcessingResult(_item(), ResultStatus.FAILED, summary="s", error="e")
        with self.assertRaises(ValueError):
            ProcessingResult(_item(), ResultStatus.FAILED)


class TestBatch(unittest.TestCase):
    def test_record_and_get(self):
        batch = Batch(expected=2)
        result = ProcessingResult.summarized(_item("a"), "sum")
        batch.record(result)
        self.assertIs(batch.get("a"), result)
        self.assertIn("a", batch)
        self.assertEqual(len(batch), 1)
        self.assertFalse(batch.complete)

    def test_duplicate_record_rejected(self):
        batch = Batch(expected=2)
        batch.record(ProcessingResult.summarized(_item("a"), "sum"))
        with self.assertRaises(ValueError):
            batch.record(ProcessingResult.failed(_item("a"), "err"))

    def test_overflow_rejected(self):
        batch = Batch(expected=1)
        batch.record(ProcessingResult.summarized(_item("a"), "sum"))
        self.assertTrue(batch.complete)
        with self.assertRaises(ValueError):
            batch.record(ProcessingResult.summarized(_item("b"), "sum"))

    def test_concurrent_records(self):
        batch = Batch(expected=200)
        items = [_item(f"v{i}") for i in range(200)]

        def record(chunk):
            for item in chunk:
                batch.record(ProcessingResult.summarized(item, "sum"))

        threads = [threading.Thread(target=record, args=(items[i::4],)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(batch), 200)
        self.assertEqual({r.item.item_id for r in batch}, {i.item_id for i in items})


class TestExceptions(unittest.TestCase):
    def test_provider_error_format(self):
        exc = ProviderError("went wrong", provider="Gemini", suggestion="Try again")
        self.assertEqual(str(exc), "[Gemini] went wrong Suggestion: Try again")

    def test_config_error_mentions_key(self):
        exc = ProviderConfigError("missing key", provider="YouTube", config_key="youtube_api_key")
        self.assertIn("youtube_api_key", str(exc))
        self.assertEqual(exc.config_key, "youtube_api_key")

    def test_fetch_error_message(self):
        exc = TranscriptFetchError("vid1", attempts=3, output_log="ERROR: 429\n", cause="exit 1")
        self.assertIsInstance(exc, TranscriptError)
        self.assertIn("failed after 3 attempts: exit 1", str(exc))
        self.assertIn("Last Output: ERROR: 429", str(exc))
        self.assertEqual(exc.item_id, "vid1")
