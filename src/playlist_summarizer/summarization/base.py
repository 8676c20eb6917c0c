"""Summarization provider protocol.

Providers turn a fully rendered prompt into summary text. Prompt building,
timeouts and failure handling live in `Summarizer`; providers only talk to
the model.
"""

from __future__ import annotations

from typing import Optional, Protocol


class SummarizationProvider(Protocol):
    """Protocol for text generation backends used for summaries.

    Implementations must be safe to call from several worker threads at once.
    """

    def summarize(self, prompt: str, timeout: Optional[float] = None) -> str:
        """Generate a summary for ``prompt``.

        Args:
            prompt: Complete prompt, transcript included
            timeout: Request timeout hint in seconds, if the backend supports one

        Returns:
            Raw model output (may be empty)

        Raises:
            ProviderAuthError: If the backend rejects the credentials
            ProviderRuntimeError: For any other backend failure
        """
        ...
