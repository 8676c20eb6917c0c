"""Factory for creating the summarization provider."""

from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from playlist_summarizer import config
    from playlist_summarizer.summarization.base import SummarizationProvider

logger = logging.getLogger(__name__)


def create_summarization_provider(cfg: config.Config) -> Optional[SummarizationProvider]:
    """Create the Gemini provider, or return None when summarization is unavailable.

    A missing API key, a missing SDK, or a client that fails to initialize all
    mean the same thing to the caller: run without summaries.

    Args:
        cfg: Configuration object

    Returns:
        Provider instance, or None
    """
    if not cfg.gemini_api_key:
        logger.warning(
            "GEMINI_API_KEY environment variable not set. Summarization will be skipped."
        )
        return None

    from .gemini_provider import GeminiSummarizationProvider

    try:
        return GeminiSummarizationProvider(cfg)
    except (ImportError, ValueError, RuntimeError) as exc:
        logger.warning(
            "Failed to create Gemini client: %s. Summarization will be skipped.", exc
        )
        return None
