"""Word-timing transcript parser — WebVTT cues with inline ``<timecode>`` markers.

Input shape (one payload line per cue)::

    WEBVTT

    00:00:01.000 --> 00:00:03.000
    Hi <00:00:02.000> there

Every fragment between two boundaries becomes one ``TimedWord``: it starts
at the previous boundary (initially the cue start) and ends at the marker
that follows it, or at the cue end for the trailing fragment.
"""

from __future__ import annotations

import html
import re
from pathlib import Path

from lyricsync.lyrics.models import TimedWord
from lyricsync.lyrics.timestamps import parse_timestamp
from lyricsync.utils.logging import debug

HEADER = "WEBVTT"
BLOCK_TIME_RE = re.compile(r"^\s*([\d:.,]+)\s+-->\s+([\d:.,]+)(?:\s|$)")
INLINE_TIMECODE_RE = re.compile(r"<((?:\d+:)?\d{1,2}:\d{1,2}(?:[.,]\d+)?)>")
TAG_RE = re.compile(r"<[^>]*>")
WS_RE = re.compile(r"\s+")


def _clean_fragment(fragment: str) -> str:
    text = TAG_RE.sub("", fragment)
    text = html.unescape(text)
    return WS_RE.sub(" ", text).strip()


def split_payload(payload: str, block_start: float, block_end: float) -> list[TimedWord]:
    """Split one cue payload on its inline timecodes into timed words."""
    pieces = INLINE_TIMECODE_RE.split(payload)
    # re.split with one group alternates text, timecode, text, ...
    texts = pieces[0::2]
    marks = [parse_timestamp(tc) for tc in pieces[1::2]]

    words: list[TimedWord] = []
    boundary = block_start
    for i, fragment in enumerate(texts):
        end = marks[i] if i < len(marks) else block_end
        text = _clean_fragment(fragment)
        if text:
            words.append(TimedWord(word=text, start=boundary, end=max(end, boundary)))
        boundary = end
    return words


def parse_word_timings(transcript: str) -> list[TimedWord]:
    """Parse a transcript into words in document order. Never raises on bad input."""
    words: list[TimedWord] = []
    block: tuple[float, float] | None = None
    blocks = 0

    for raw_line in transcript.splitlines():
        line = raw_line.strip()
        if not line or line == HEADER or line.startswith(HEADER + " "):
            continue

        m = BLOCK_TIME_RE.match(line)
        if m:
            # a block line without payload is superseded by the next one
            block = (parse_timestamp(m.group(1)), parse_timestamp(m.group(2)))
            blocks += 1
            continue

        if block is None:
            # header, cue identifiers, NOTE/STYLE text
            continue

        words.extend(split_payload(line, *block))
        block = None

    debug(f"Word timings: {len(words)} words from {blocks} cue blocks")
    return words


def read_word_timings(path: Path) -> list[TimedWord]:
    return parse_word_timings(Path(path).read_text(encoding="utf-8-sig"))
