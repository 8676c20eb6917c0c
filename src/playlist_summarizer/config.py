from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from . import config_constants


# SKIP .env loading in test environments - tests should use Config objects and
# environment variables directly, never rely on .env files
def _is_test_environment() -> bool:
    """Check if we're running in a test environment."""
    if "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ:
        return True
    if os.environ.get("TESTING", "").lower() in ("1", "true", "yes"):
        return True
    return False


if not _is_test_environment():
    try:
        load_dotenv(override=False)
    except (PermissionError, OSError):
        # If loading fails, continue with the process environment only
        pass

# Re-exported for callers that only import config
DEFAULT_LOG_LEVEL = config_constants.DEFAULT_LOG_LEVEL
VALID_LOG_LEVELS = config_constants.VALID_LOG_LEVELS
DEFAULT_PLAYLIST_ID = config_constants.DEFAULT_PLAYLIST_ID
DEFAULT_GEMINI_MODEL = config_constants.DEFAULT_GEMINI_MODEL
DEFAULT_TEMP_TRANSCRIPT_DIR = config_constants.DEFAULT_TEMP_TRANSCRIPT_DIR
DEFAULT_MAX_TRANSCRIPT_RETRIES = config_constants.DEFAULT_MAX_TRANSCRIPT_RETRIES
DEFAULT_TRANSCRIPT_RETRY_DELAY_SECONDS = config_constants.DEFAULT_TRANSCRIPT_RETRY_DELAY_SECONDS
DEFAULT_FETCH_TIMEOUT_SECONDS = config_constants.DEFAULT_FETCH_TIMEOUT_SECONDS
DEFAULT_SUMMARY_TIMEOUT_SECONDS = config_constants.DEFAULT_SUMMARY_TIMEOUT_SECONDS
DEFAULT_SUMMARY_WORD_COUNT = config_constants.DEFAULT_SUMMARY_WORD_COUNT
DEFAULT_SUMMARY_PROMPT = config_constants.DEFAULT_SUMMARY_PROMPT
DEFAULT_SUBTITLE_LANGUAGES = config_constants.DEFAULT_SUBTITLE_LANGUAGES
DEFAULT_YT_DLP_PATH = config_constants.DEFAULT_YT_DLP_PATH
DEFAULT_WORKERS = config_constants.DEFAULT_WORKERS
MIN_WORKERS = config_constants.MIN_WORKERS


class Config(BaseModel):
    """Configuration model for the playlist summarization pipeline.

    Values can be given programmatically, loaded from JSON/YAML files with
    `load_config_file()`, or picked up from environment variables (and a `.env`
    file outside of tests). Explicit values win over the environment, except
    for ``LOG_LEVEL`` which always overrides.

    The model is immutable (frozen) after creation.

    Attributes:
        youtube_api_key: YouTube Data API key. Mandatory when a run starts.
        gemini_api_key: Gemini API key. Without it summarization is skipped.
        playlist_id: Playlist whose videos are processed.
        gemini_model: Gemini model name used for summaries.
        temp_dir: Parent directory for the per-run scratch directory.
        max_transcript_retries: Subtitle fetch attempts per video (minimum: 1).
        transcript_retry_delay: Fixed delay between fetch attempts, in seconds.
        fetch_timeout: Timeout for one yt-dlp invocation (None disables).
        summary_timeout: Deadline for one summarization call, in seconds.
        workers: Concurrency limit; at most this many videos are in flight.
        summary_word_count: Target summary length in words.
        summary_prompt: Prompt template with ``{word_count}`` and ``{transcript}``.
        subtitle_languages: yt-dlp ``--sub-langs`` selector.
        yt_dlp_path: yt-dlp executable name or path.
        events_file: Optional JSONL file receiving pipeline progress events.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional log file path for file output.

    Example:
        >>> from playlist_summarizer import Config
        >>> cfg = Config(youtube_api_key="key", playlist_id="PL123", workers=3)
    """

    youtube_api_key: Optional[str] = Field(
        default=None,
        description="YouTube Data API key (YOUTUBE_API_KEY).",
    )
    gemini_api_key: Optional[str] = Field(
        default=None,
        description="Gemini API key (GEMINI_API_KEY). Summaries are skipped when unset.",
    )
    playlist_id: str = Field(
        default=DEFAULT_PLAYLIST_ID,
        description="YouTube playlist ID (PLAYLIST_ID).",
    )
    gemini_model: str = Field(
        default=DEFAULT_GEMINI_MODEL,
        description="Gemini model used for summarization (GEMINI_MODEL).",
    )
    temp_dir: str = Field(
        default=DEFAULT_TEMP_TRANSCRIPT_DIR,
        description="Parent directory for the per-run subtitle scratch directory.",
    )
    max_transcript_retries: int = Field(
        default=DEFAULT_MAX_TRANSCRIPT_RETRIES,
        description="Number of subtitle fetch attempts per video.",
    )
    transcript_retry_delay: float = Field(
        default=DEFAULT_TRANSCRIPT_RETRY_DELAY_SECONDS,
        description="Seconds to wait between subtitle fetch attempts.",
    )
    fetch_timeout: Optional[int] = Field(
        default=DEFAULT_FETCH_TIMEOUT_SECONDS,
        description="Timeout in seconds for one yt-dlp run (None disables).",
    )
    summary_timeout: int = Field(
        default=DEFAULT_SUMMARY_TIMEOUT_SECONDS,
        description="Deadline in seconds for one summarization call.",
    )
    workers: int = Field(
        default=DEFAULT_WORKERS,
        alias="concurrency_limit",
        description="Maximum number of videos processed concurrently.",
    )
    summary_word_count: int = Field(
        default=DEFAULT_SUMMARY_WORD_COUNT,
        description="Target number of words per summary.",
    )
    summary_prompt: str = Field(
        default=DEFAULT_SUMMARY_PROMPT,
        description="Prompt template; supports {word_count} and {transcript}.",
    )
    subtitle_languages: str = Field(
        default=DEFAULT_SUBTITLE_LANGUAGES,
        description="Subtitle language selector passed to yt-dlp --sub-langs.",
    )
    yt_dlp_path: str = Field(
        default=DEFAULT_YT_DLP_PATH,
        description="yt-dlp executable.",
    )
    events_file: Optional[str] = Field(
        default=None,
        description="Optional JSONL file that receives pipeline progress events.",
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level.")
    log_file: Optional[str] = Field(default=None, description="Optional log file path.")

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _preprocess_config_data(cls, data: Any) -> Any:
        """Load configuration values from environment variables.

        LOG_LEVEL always wins; every other variable only fills fields the
        caller left unset.
        """
        if not isinstance(data, dict):
            return data

        env_log_level = os.getenv("LOG_LEVEL")
        if env_log_level:
            env_value = str(env_log_level).strip().upper()
            if env_value in VALID_LOG_LEVELS:
                data["log_level"] = env_value

        env_fields = (
            ("youtube_api_key", config_constants.ENV_YOUTUBE_API_KEY),
            ("gemini_api_key", config_constants.ENV_GEMINI_API_KEY),
            ("playlist_id", config_constants.ENV_PLAYLIST_ID),
            ("gemini_model", config_constants.ENV_GEMINI_MODEL),
            ("log_file", "LOG_FILE"),
        )
        for field_name, env_name in env_fields:
            if data.get(field_name) is None:
                env_value = (os.getenv(env_name) or "").strip()
                if env_value:
                    data[field_name] = env_value

        # WORKERS: Only set from env if not in config (either name)
        if data.get("workers") is None and data.get("concurrency_limit") is None:
            env_workers = os.getenv("WORKERS")
            if env_workers:
                try:
                    workers_value = int(env_workers)
                    if workers_value > 0:
                        data["workers"] = workers_value
                except (ValueError, TypeError):
                    pass  # Invalid value, keep default

        return data

    @field_validator("youtube_api_key", "gemini_api_key", "events_file", "log_file", mode="before")
    @classmethod
    def _strip_optional(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("playlist_id", "gemini_model", mode="before")
    @classmethod
    def _strip_required(cls, value: Any) -> str:
        value_str = str(value).strip() if value is not None else ""
        if not value_str:
            raise ValueError("value must not be empty")
        return value_str

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> str:
        if value is None:
            return DEFAULT_LOG_LEVEL
        return str(value).strip().upper() or DEFAULT_LOG_LEVEL

    @field_validator("log_level", mode="after")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        if value not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}, got: {value}")
        return value

    @field_validator("workers", mode="before")
    @classmethod
    def _ensure_workers(cls, value: Any) -> int:
        if value is None or value == "":
            return DEFAULT_WORKERS
        try:
            workers = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("workers must be an integer") from exc
        if workers < MIN_WORKERS:
            raise ValueError(f"workers must be at least {MIN_WORKERS}")
        return workers

    @field_validator("max_transcript_retries", mode="before")
    @classmethod
    def _ensure_retries(cls, value: Any) -> int:
        if value is None or value == "":
            return DEFAULT_MAX_TRANSCRIPT_RETRIES
        try:
            retries = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("max_transcript_retries must be an integer") from exc
        if retries < 1:
            raise ValueError("max_transcript_retries must be at least 1")
        return retries

    @field_validator("transcript_retry_delay", mode="before")
    @classmethod
    def _ensure_retry_delay(cls, value: Any) -> float:
        if value is None or value == "":
            return DEFAULT_TRANSCRIPT_RETRY_DELAY_SECONDS
        try:
            delay = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("transcript_retry_delay must be a number") from exc
        if delay < 0:
            raise ValueError("transcript_retry_delay must be non-negative")
        return delay

    @field_validator("fetch_timeout", mode="before")
    @classmethod
    def _ensure_fetch_timeout(cls, value: Any) -> Optional[int]:
        if value is None or value == "":
            return None
        try:
            timeout = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("fetch_timeout must be an integer") from exc
        return timeout if timeout > 0 else None

    @field_validator("summary_timeout", "summary_word_count", mode="before")
    @classmethod
    def _ensure_positive_int(cls, value: Any, info: Any) -> int:
        try:
            parsed = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{info.field_name} must be an integer") from exc
        if parsed < 1:
            raise ValueError(f"{info.field_name} must be at least 1")
        return parsed

    @field_validator("summary_prompt", mode="after")
    @classmethod
    def _validate_summary_prompt(cls, value: str) -> str:
        if "{transcript}" not in value:
            raise ValueError("summary_prompt must contain a {transcript} placeholder")
        return value


def load_config_file(path: str) -> Dict[str, Any]:
    """Load configuration from a JSON or YAML file.

    The file format is detected from the extension (`.json`, `.yaml` or `.yml`).
    The returned dictionary can be unpacked into `Config`.

    Args:
        path: Path to configuration file. Supports tilde expansion.

    Returns:
        Dictionary of configuration values keyed by `Config` field names or aliases.

    Raises:
        ValueError: If the path is empty, the file is missing or unreadable, the
            format is unsupported, or the content is not a mapping.

    Example:
        >>> cfg = Config(**load_config_file("config.yaml"))
    """
    if not path:
        raise ValueError("Config path cannot be empty")

    cfg_path = Path(path).expanduser()
    try:
        resolved = cfg_path.resolve()
    except (OSError, RuntimeError) as exc:
        raise ValueError(f"Invalid config path: {path} ({exc})") from exc

    if not resolved.exists():
        raise ValueError(f"Config file not found: {resolved}")

    suffix = resolved.suffix.lower()
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Failed to read config file {resolved}: {exc}") from exc

    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON config file {resolved}: {exc}") from exc
    elif suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML config file {resolved}: {exc}") from exc
    else:
        raise ValueError(f"Unsupported config file type: {resolved.suffix}")

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping/object at the top level")

    return data
