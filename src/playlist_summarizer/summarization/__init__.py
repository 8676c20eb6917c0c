"""Summarization providers and the per-transcript summarizer."""

from .base import SummarizationProvider
from .factory import create_summarization_provider
from .summarizer import build_prompt, Summarizer

__all__ = [
    "SummarizationProvider",
    "Summarizer",
    "build_prompt",
    "create_summarization_provider",
]
