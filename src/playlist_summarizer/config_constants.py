"""Configuration constants for playlist_summarizer.

All constants are re-exported from config.py for convenience.
"""

# General defaults
DEFAULT_LOG_LEVEL = "INFO"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Source defaults
DEFAULT_PLAYLIST_ID = "PL8GTokWa3GEeH8kUkx0rzRWwrzlvO8JaT"
PLAYLIST_PAGE_SIZE = 50  # playlistItems.list maximum
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="

# Transcript acquisition defaults
DEFAULT_TEMP_TRANSCRIPT_DIR = "./transcripts_temp"
DEFAULT_MAX_TRANSCRIPT_RETRIES = 3
DEFAULT_TRANSCRIPT_RETRY_DELAY_SECONDS = 5.0
DEFAULT_FETCH_TIMEOUT_SECONDS = 300
DEFAULT_SUBTITLE_LANGUAGES = "en.*,en"
DEFAULT_YT_DLP_PATH = "yt-dlp"
TRANSCRIPT_SNIPPET_CHARS = 100

# yt-dlp output markers that mean "this video has no subtitles at all"
NO_SUBTITLES_MARKERS = ("no subtitles", "no suitable subtitles found")

# Summarization defaults
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash-latest"
DEFAULT_SUMMARY_TIMEOUT_SECONDS = 60
DEFAULT_SUMMARY_WORD_COUNT = 15
DEFAULT_SUMMARY_PROMPT = (
    "Summarize this video transcript in exactly {word_count} words:\n\n"
    'Transcript:\n"{transcript}"'
)

# Processing defaults
DEFAULT_WORKERS = 5
MIN_WORKERS = 1

# Environment variable names
ENV_YOUTUBE_API_KEY = "YOUTUBE_API_KEY"
ENV_GEMINI_API_KEY = "GEMINI_API_KEY"
ENV_PLAYLIST_ID = "PLAYLIST_ID"
ENV_GEMINI_MODEL = "GEMINI_MODEL"
