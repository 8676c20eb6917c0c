"""Single-shot transcript summarization with a hard deadline."""

from __future__ import annotations

import logging
from typing import Optional

from ..config_constants import (
    DEFAULT_SUMMARY_PROMPT,
    DEFAULT_SUMMARY_TIMEOUT_SECONDS,
    DEFAULT_SUMMARY_WORD_COUNT,
)
from ..exceptions import ProviderRuntimeError
from ..models import SummaryOutcome
from ..utils.timeout import TimeoutError as OperationTimeoutError
from ..utils.timeout import with_timeout
from .base import SummarizationProvider

logger = logging.getLogger(__name__)


def build_prompt(template: str, transcript: str, word_count: int) -> str:
    """Fill the prompt template.

    ``str.replace`` is used instead of ``str.format`` so braces inside the
    transcript are left alone.
    """
    return template.replace("{word_count}", str(word_count)).replace("{transcript}", transcript)


class Summarizer:
    """Produce a short summary of one transcript.

    Each call makes exactly one provider request bounded by ``timeout``
    seconds. There is no retry; a timeout, provider error, or empty response
    comes back as ``SummaryOutcome.failure``.

    After a timeout the call waits for the abandoned provider request to end
    (the deadline is also handed to the provider), so a worker slot is never
    freed while its request is still in flight.
    """

    def __init__(
        self,
        provider: SummarizationProvider,
        word_count: int = DEFAULT_SUMMARY_WORD_COUNT,
        prompt_template: str = DEFAULT_SUMMARY_PROMPT,
        timeout: Optional[float] = DEFAULT_SUMMARY_TIMEOUT_SECONDS,
    ):
        self.provider = provider
        self.word_count = word_count
        self.prompt_template = prompt_template
        self.timeout = timeout

    def summarize(self, text: str) -> SummaryOutcome:
        if not text:
            raise ValueError("cannot summarize an empty transcript")

        prompt = build_prompt(self.prompt_template, text, self.word_count)
        try:
            raw = with_timeout(
                self.provider.summarize,
                self.timeout,
                "summarization",
                prompt,
                timeout=self.timeout,
            )
        except OperationTimeoutError as exc:
            if exc.thread is not None:
                exc.thread.join()
            return SummaryOutcome.failure(exc)
        except Exception as exc:
            return SummaryOutcome.failure(exc)

        summary = (raw or "").strip()
        if not summary:
            return SummaryOutcome.failure(
                ProviderRuntimeError(
                    message="model returned an empty summary",
                    provider="Summarization",
                )
            )
        logger.debug("Summary produced (%d characters)", len(summary))
        return SummaryOutcome.text(summary)
