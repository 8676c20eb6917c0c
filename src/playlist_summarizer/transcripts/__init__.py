"""Subtitle fetching, VTT parsing and transcript acquisition."""

from .acquirer import TranscriptAcquirer
from .fetcher import classify_output, find_subtitle_files, SubtitleFetcher, YtDlpFetcher
from .vtt import parse_vtt_file, parse_vtt_text, VTTParseError

__all__ = [
    "SubtitleFetcher",
    "TranscriptAcquirer",
    "VTTParseError",
    "YtDlpFetcher",
    "classify_output",
    "find_subtitle_files",
    "parse_vtt_file",
    "parse_vtt_text",
]
