"""Bounded concurrent dispatch of work items."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import as_completed, Future, ThreadPoolExecutor
from typing import Dict, Optional, Protocol, Sequence

from ..models import Batch, ProcessingResult, WorkItem
from .events import EventKind, NullObserver, PipelineEvent, PipelineObserver, safe_notify

logger = logging.getLogger(__name__)


class ItemProcessor(Protocol):
    def process(self, item: WorkItem) -> ProcessingResult: ...


class PipelineCoordinator:
    """Run one processor per item with at most ``concurrency_limit`` in flight.

    A slot is taken from a bounded semaphore before each submission and given
    back when that item's processing ends, so dispatch blocks while the limit
    is reached. Results are collected in completion order into a `Batch`;
    callers restore input order with the report assembler.
    """

    def __init__(self, worker: ItemProcessor, observer: Optional[PipelineObserver] = None):
        self.worker = worker
        self.observer = observer or NullObserver()

    def run(self, items: Sequence[WorkItem], concurrency_limit: int) -> Batch:
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be at least 1, got {concurrency_limit}")

        batch = Batch(expected=len(items))
        if not items:
            return batch

        slots = threading.BoundedSemaphore(concurrency_limit)

        def run_in_slot(item: WorkItem) -> ProcessingResult:
            try:
                result = self.worker.process(item)
            finally:
                slots.release()
            self._item_finished(item, result)
            return result

        logger.info(
            "Starting processing of %d videos with concurrency limit %d.",
            len(items),
            concurrency_limit,
        )
        with ThreadPoolExecutor(
            max_workers=concurrency_limit, thread_name_prefix="item-worker"
        ) as executor:
            future_map: Dict[Future, WorkItem] = {}
            for item in items:
                slots.acquire()
                try:
                    future_map[executor.submit(run_in_slot, item)] = item
                except BaseException:
                    slots.release()
                    raise

            for future in as_completed(future_map):
                item = future_map[future]
                try:
                    result = future.result()
                except Exception as exc:
                    logger.error(
                        "Video %s: worker raised an unexpected error: %s", item.item_id, exc
                    )
                    result = ProcessingResult.failed(item, f"worker error: {exc}")
                    self._item_finished(item, result)
                try:
                    batch.record(result)
                except ValueError as exc:
                    logger.error("Video %s: result not recorded: %s", item.item_id, exc)

        logger.info("All %d workers finished.", len(batch))
        return batch

    def _item_finished(self, item: WorkItem, result: ProcessingResult) -> None:
        safe_notify(
            self.observer,
            PipelineEvent(
                kind=EventKind.ITEM_FINISHED,
                item_id=item.item_id,
                title=item.title,
                detail=result.status.value,
            ),
        )
