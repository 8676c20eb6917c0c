"""Filesystem helpers for the per-run scratch directory."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

WORK_DIR_PREFIX = "run_"


def cleanup_work_dir(work_dir: Optional[str]) -> bool:
    """Remove a scratch directory and everything in it.

    Args:
        work_dir: Path to the directory (None is a no-op)

    Returns:
        True if the directory is gone afterwards, False if removal failed
    """
    if not work_dir or not os.path.exists(work_dir):
        return True
    try:
        shutil.rmtree(work_dir)
        logger.info(f"Removed temporary transcript directory: {work_dir}")
        return True
    except OSError as exc:
        logger.warning(f"Failed to remove temporary transcript directory {work_dir}: {exc}")
        return False


@contextmanager
def scoped_work_dir(parent_dir: str) -> Iterator[Path]:
    """Create a fresh scratch directory for one run and remove it afterwards.

    The directory is unique per run, so concurrent runs sharing ``parent_dir``
    never see each other's subtitle files. Removal happens on every exit path,
    including exceptions. ``parent_dir`` itself is left in place.

    Args:
        parent_dir: Directory under which the run directory is created

    Yields:
        Path of the run directory

    Raises:
        OSError: If the directory cannot be created
    """
    parent = Path(parent_dir).expanduser()
    parent.mkdir(parents=True, exist_ok=True)
    work_dir = tempfile.mkdtemp(prefix=WORK_DIR_PREFIX, dir=str(parent))
    logger.debug(f"Created temporary transcript directory: {work_dir}")
    try:
        yield Path(work_dir)
    finally:
        cleanup_work_dir(work_dir)
