"""Ordered report assembly and console rendering."""

from __future__ import annotations

import logging
from typing import Callable, List, Sequence

from ..models import Batch, Report, ReportEntry, ResultStatus, WorkItem

logger = logging.getLogger(__name__)

RESULT_MISSING_MESSAGE = "result missing"
REPORT_HEADER = "--- All Video Summaries (Processed Concurrently) ---"
REPORT_FOOTER = "--- End of Summaries ---"
ENTRY_SEPARATOR = "------------------------------------"


def assemble(items: Sequence[WorkItem], batch: Batch) -> Report:
    """Build the report in input order from an unordered batch.

    Every item gets exactly one entry. An item with no recorded result is
    reported as MISSING; the coordinator always records one result per item,
    so this only guards against a broken invariant.
    """
    entries: List[ReportEntry] = []
    summarized = 0
    failed = 0
    for item in items:
        result = batch.get(item.item_id)
        if result is None:
            logger.critical(
                "No processing result found for video ID %s, Title: %s.", item.item_id, item.title
            )
            entries.append(
                ReportEntry(item=item, status=ResultStatus.MISSING, error=RESULT_MISSING_MESSAGE)
            )
            failed += 1
            continue

        entries.append(
            ReportEntry(
                item=item, status=result.status, summary=result.summary, error=result.error
            )
        )
        if result.summary:
            summarized += 1
        else:
            failed += 1

    return Report(entries=entries, summarized=summarized, failed=failed)


def render_report(report: Report, word_count: int, write: Callable[[str], None] = print) -> None:
    """Write the human-readable report, one ``write`` call per line."""
    write("")
    write(REPORT_HEADER)
    for entry in report.entries:
        write("")
        write(f"Video ID: {entry.item.item_id}")
        write(f"Title: {entry.item.title}")
        if entry.summary:
            write(f"Summary ({word_count} words): {entry.summary}")
        if entry.error:
            write(f"Status/Error: {entry.error}")
        write(ENTRY_SEPARATOR)
    write("")
    write(REPORT_FOOTER)
