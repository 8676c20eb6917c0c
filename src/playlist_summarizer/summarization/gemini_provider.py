"""Gemini summarization provider.

Wraps the google-generativeai SDK behind the `SummarizationProvider`
protocol. One provider instance is shared by all worker threads.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

try:
    import google.generativeai as genai
except ImportError:
    genai = None  # type: ignore

from .. import config
from ..exceptions import ProviderAuthError, ProviderRuntimeError

logger = logging.getLogger(__name__)

PROVIDER_NAME = "Gemini/Summarization"


class GeminiSummarizationProvider:
    """Summarization provider backed by a Gemini text model."""

    def __init__(self, cfg: config.Config):
        """Initialize the Gemini client.

        Args:
            cfg: Configuration with ``gemini_api_key`` and ``gemini_model``

        Raises:
            ValueError: If Gemini API key is not provided
            ImportError: If google-generativeai package is not installed
            RuntimeError: If the SDK rejects the client configuration
        """
        if genai is None:
            raise ImportError(
                "google-generativeai package required for Gemini provider. "
                "Install with: pip install google-generativeai"
            )

        if not cfg.gemini_api_key:
            raise ValueError(
                "Gemini API key required for Gemini provider. "
                "Set GEMINI_API_KEY environment variable or gemini_api_key in config."
            )

        # Keep SDK transport chatter out of debug runs
        root_logger = logging.getLogger()
        root_level = root_logger.level if root_logger.level else logging.INFO
        if root_level <= logging.DEBUG:
            for logger_name in ("google.generativeai", "google.api_core", "urllib3"):
                logging.getLogger(logger_name).setLevel(logging.WARNING)

        try:
            genai.configure(api_key=cfg.gemini_api_key)
        except Exception as exc:
            raise RuntimeError(f"could not configure Gemini client: {exc}") from exc

        self.model_name = cfg.gemini_model
        logger.debug("Gemini summarization provider ready (model: %s)", self.model_name)

    def summarize(self, prompt: str, timeout: Optional[float] = None) -> str:
        """Send ``prompt`` to Gemini and return the response text.

        Raises:
            ProviderAuthError: If the API key is rejected
            ProviderRuntimeError: For quota, model, transport, or response errors
        """
        request_options: Dict[str, Any] = {}
        if timeout:
            request_options["timeout"] = timeout

        logger.debug("Summarizing text via Gemini API (model: %s)", self.model_name)
        try:
            model = genai.GenerativeModel(model_name=self.model_name)
            response = model.generate_content(prompt, request_options=request_options)
            return _response_text(response)
        except Exception as exc:
            logger.debug("Gemini API error in summarization: %s", exc)
            error_msg = str(exc).lower()
            if "api key" in error_msg or "authentication" in error_msg or "permission" in error_msg:
                raise ProviderAuthError(
                    message=f"Gemini authentication failed: {exc}",
                    provider=PROVIDER_NAME,
                    suggestion="Check your GEMINI_API_KEY environment variable or config setting",
                ) from exc
            elif "quota" in error_msg or "rate limit" in error_msg:
                raise ProviderRuntimeError(
                    message=f"Gemini rate limit exceeded: {exc}",
                    provider=PROVIDER_NAME,
                    suggestion="Wait before retrying or check your API quota",
                ) from exc
            elif "invalid" in error_msg and "model" in error_msg:
                raise ProviderRuntimeError(
                    message=f"Gemini invalid model: {exc}",
                    provider=PROVIDER_NAME,
                    suggestion="Check gemini_model configuration",
                ) from exc
            else:
                raise ProviderRuntimeError(
                    message=f"Gemini summarization failed: {exc}",
                    provider=PROVIDER_NAME,
                ) from exc


def _response_text(response: Any) -> str:
    """Concatenate the text parts of the first candidate.

    ``response.text`` raises when the candidate was blocked or has no parts,
    so the parts are walked directly.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ""
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    return "".join(str(getattr(part, "text", "") or "") for part in parts)
