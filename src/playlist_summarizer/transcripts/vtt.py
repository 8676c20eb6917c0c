"""Minimal WebVTT reader that extracts spoken text.

Only cue payloads matter here: timings, cue settings, styles, notes and
inline markup are discarded. YouTube auto-generated captions repeat the
previous line at the start of every cue, so consecutive duplicate lines are
collapsed.
"""

from __future__ import annotations

import html
import re
from pathlib import Path
from typing import List, Union

WEBVTT_HEADER = "WEBVTT"
TIMING_SEPARATOR = "-->"

# Inline tags such as <c>, </c>, <v Speaker>, <00:00:01.520>
_INLINE_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
# Blocks that carry no spoken text
_NON_CUE_BLOCK_PREFIXES = ("NOTE", "STYLE", "REGION")


class VTTParseError(ValueError):
    """Raised when content is not a WebVTT document."""


def _clean_line(line: str) -> str:
    line = _INLINE_TAG_RE.sub("", line)
    line = html.unescape(line)
    return _WHITESPACE_RE.sub(" ", line).strip()


def parse_vtt_text(content: str) -> str:
    """Return the cue text of a WebVTT document as one space-joined string.

    Args:
        content: Full WebVTT document

    Returns:
        Normalized transcript text (may be empty if the file has no cues)

    Raises:
        VTTParseError: If the WEBVTT header is missing
    """
    content = content.lstrip("\ufeff")
    lines = content.splitlines()
    if not lines or not lines[0].strip().startswith(WEBVTT_HEADER):
        raise VTTParseError("missing WEBVTT header")

    blocks: List[List[str]] = []
    current: List[str] = []
    for raw in lines[1:]:
        if raw.strip():
            current.append(raw)
        elif current:
            blocks.append(current)
            current = []
    if current:
        blocks.append(current)

    texts: List[str] = []
    for block in blocks:
        if block[0].strip().split(" ", 1)[0] in _NON_CUE_BLOCK_PREFIXES:
            continue
        timing_index = next(
            (i for i, line in enumerate(block) if TIMING_SEPARATOR in line), None
        )
        if timing_index is None:
            # Header metadata (Kind:, Language:) or a stray block
            continue
        for line in block[timing_index + 1 :]:
            cleaned = _clean_line(line)
            if cleaned and (not texts or texts[-1] != cleaned):
                texts.append(cleaned)

    return " ".join(texts).strip()


def parse_vtt_file(path: Union[str, Path]) -> str:
    """Read and parse a WebVTT file.

    Raises:
        OSError: If the file cannot be read
        VTTParseError: If the file is not WebVTT
    """
    return parse_vtt_text(Path(path).read_text(encoding="utf-8", errors="replace"))
