"""Timecode parsing and formatting for WebVTT-style transcripts."""

from __future__ import annotations

import math


def parse_timestamp(text: str | None) -> float:
    """Parse ``HH:MM:SS.mmm`` or ``MM:SS.mmm`` into seconds.

    A bare number is read as seconds. Anything unparseable yields ``0.0``
    so one malformed cue never aborts a whole transcript.
    """
    if not text:
        return 0.0
    parts = text.strip().replace(",", ".").split(":")
    if any(p.strip().startswith("-") for p in parts):
        return 0.0
    try:
        if len(parts) == 3:
            value = int(parts[0]) * 3600 + int(parts[1]) * 60 + float(parts[2])
        elif len(parts) == 2:
            value = int(parts[0]) * 60 + float(parts[1])
        elif len(parts) == 1:
            value = float(parts[0])
        else:
            return 0.0
    except ValueError:
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def format_vtt_time(seconds: float) -> str:
    total_ms = int(round(max(seconds, 0.0) * 1000))
    h, rem = divmod(total_ms, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms = divmod(rem, 1000)
    return f"{h:02d}:{m:02d}:{s:02d}.{ms:03d}"


def format_clock(seconds: float) -> str:
    """``MM:SS`` clock as shown next to the track progress bar."""
    seconds = max(seconds, 0.0)
    return f"{int(seconds // 60):02d}:{int(seconds % 60):02d}"
