"""Workflow orchestration and pipeline execution.

This package provides:
- Per-video processing (worker.py)
- Bounded concurrent dispatch (coordinator.py)
- Ordered report assembly and rendering (report.py)
- Progress events and observers (events.py)
- Run orchestration (orchestration.py)
"""

from __future__ import annotations

from typing import Any

from .events import (
    CompositeObserver,
    EventKind,
    JSONLEventObserver,
    LoggingObserver,
    NullObserver,
    PipelineEvent,
    PipelineObserver,
    ProgressObserver,
)

__all__ = [
    "CompositeObserver",
    "EventKind",
    "JSONLEventObserver",
    "LoggingObserver",
    "NullObserver",
    "PipelineEvent",
    "PipelineObserver",
    "ProgressObserver",
    "apply_log_level",
    "run_pipeline",
]


def __getattr__(name: str) -> Any:
    # Orchestration imports the transcript and summarization packages, which
    # import events from here; load it on first use to keep imports acyclic.
    if name in ("run_pipeline", "apply_log_level"):
        from . import orchestration

        return getattr(orchestration, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
