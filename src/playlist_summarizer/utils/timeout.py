"""Timeout enforcement for blocking external calls.

Summarization calls are bounded so that a hung request fails its own video
instead of stalling a worker slot forever.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TimeoutError(Exception):
    """Raised when an operation exceeds the timeout."""

    def __init__(
        self,
        operation_name: str,
        seconds: float,
        thread: Optional[threading.Thread] = None,
    ) -> None:
        self.operation_name = operation_name
        self.seconds = seconds
        # Still running when the deadline passed; callers may join it
        self.thread = thread
        super().__init__(f"{operation_name} exceeded timeout of {seconds} seconds")


def with_timeout(
    func: Callable[..., T],
    timeout_seconds: Optional[float],
    operation_name: str = "operation",
    *args: Any,
    **kwargs: Any,
) -> T:
    """Execute a function with a timeout.

    The function runs on a daemon thread; if it does not finish in time the
    caller gets `TimeoutError`. The thread keeps running and is
    available as ``TimeoutError.thread``, so a caller that must not overlap
    with the abandoned call can join it.

    Args:
        func: Function to execute
        timeout_seconds: Timeout in seconds (None or <= 0 disables timeout)
        operation_name: Name of operation for logging and the error message
        *args: Positional arguments to pass to function
        **kwargs: Keyword arguments to pass to function

    Returns:
        Function result

    Raises:
        TimeoutError: If operation exceeds timeout
        Exception: Whatever ``func`` raised, re-raised in the caller's thread

    Example:
        >>> text = with_timeout(provider.summarize, 60, "summarization", prompt)
    """
    if timeout_seconds is None or timeout_seconds <= 0:
        return func(*args, **kwargs)

    result: List[T] = []
    errors: List[Exception] = []
    done = threading.Event()

    def target() -> None:
        try:
            result.append(func(*args, **kwargs))
        except Exception as e:  # re-raised in the caller's thread
            errors.append(e)
        finally:
            done.set()

    thread = threading.Thread(target=target, name=f"timeout-{operation_name}", daemon=True)
    thread.start()

    if not done.wait(timeout_seconds):
        logger.warning(f"Timeout occurred for {operation_name} after {timeout_seconds} seconds")
        raise TimeoutError(operation_name, timeout_seconds, thread=thread)

    if errors:
        raise errors[0]
    return result[0]
