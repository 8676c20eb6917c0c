"""Custom exceptions for playlist_summarizer.

Exception Hierarchy:
    ProviderError (base)
    ├── ProviderConfigError - Configuration issues (fatal at startup)
    ├── ProviderAuthError - Authentication failures
    └── ProviderRuntimeError - Runtime operation failures
        ├── SourceError - Playlist listing failures (fatal at startup)
        └── TranscriptError - Per-video subtitle failures
            ├── TranscriptFetchError - yt-dlp failed on every attempt
            └── TranscriptParseError - Subtitle file could not be parsed
"""

from typing import Optional


class ProviderError(Exception):
    """Base exception for all provider-related errors.

    Attributes:
        provider: Name of the provider (e.g., "YouTube", "Gemini/Summarization")
        message: Human-readable error message
        suggestion: Optional suggestion for resolving the error
    """

    def __init__(
        self,
        message: str,
        provider: str = "Unknown",
        suggestion: Optional[str] = None,
    ) -> None:
        self.provider = provider
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"[{self.provider}] {self.message}"]
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " ".join(parts)


class ProviderConfigError(ProviderError):
    """Raised when configuration is invalid or a mandatory value is missing.

    Example:
        >>> raise ProviderConfigError(
        ...     message="API key not provided",
        ...     provider="YouTube",
        ...     config_key="youtube_api_key",
        ...     suggestion="Set YOUTUBE_API_KEY environment variable"
        ... )
    """

    def __init__(
        self,
        message: str,
        provider: str = "Unknown",
        config_key: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.config_key = config_key
        if config_key and config_key not in message:
            message = f"{message} (config key: {config_key})"
        super().__init__(message=message, provider=provider, suggestion=suggestion)


class ProviderAuthError(ProviderError):
    """Raised when authentication with an external API fails."""


class ProviderRuntimeError(ProviderError):
    """Raised when an external operation fails at runtime."""


class SourceError(ProviderRuntimeError):
    """Raised when the playlist cannot be listed."""


class TranscriptError(ProviderRuntimeError):
    """Base class for per-video subtitle failures.

    Attributes:
        item_id: Video whose transcript could not be acquired
    """

    def __init__(
        self,
        message: str,
        item_id: str,
        provider: str = "yt-dlp",
        suggestion: Optional[str] = None,
    ) -> None:
        self.item_id = item_id
        super().__init__(message=message, provider=provider, suggestion=suggestion)


class TranscriptFetchError(TranscriptError):
    """Raised (as a failure cause) when every fetch attempt failed transiently.

    Attributes:
        attempts: Number of attempts made
        output_log: Combined output of the last attempt
    """

    def __init__(
        self,
        item_id: str,
        attempts: int,
        output_log: str = "",
        cause: Optional[str] = None,
    ) -> None:
        self.attempts = attempts
        self.output_log = output_log
        message = f"subtitle fetch for video {item_id} failed after {attempts} attempts"
        if cause:
            message = f"{message}: {cause}"
        if output_log.strip():
            message = f"{message}\nLast Output: {output_log.strip()}"
        super().__init__(message=message, item_id=item_id)


class TranscriptParseError(TranscriptError):
    """Raised (as a failure cause) when a subtitle file cannot be read or parsed."""
