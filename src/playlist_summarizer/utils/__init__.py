"""Core utilities for playlist_summarizer.

This module provides:
- Scratch directory management
- Timeout enforcement for blocking calls
"""

from .filesystem import cleanup_work_dir, scoped_work_dir, WORK_DIR_PREFIX
from .timeout import TimeoutError, with_timeout

__all__ = [
    "WORK_DIR_PREFIX",
    "TimeoutError",
    "cleanup_work_dir",
    "scoped_work_dir",
    "with_timeout",
]
