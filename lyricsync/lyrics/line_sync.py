"""Line synchronizer — turn ordered line cues into gap-filled line windows."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Sequence

from lyricsync.lyrics.models import INSTRUMENTAL_SYMBOL, LineCue, LineWindow
from lyricsync.utils.logging import warn

DEFAULT_TAIL = 5.0


def is_instrumental_text(text: str) -> bool:
    stripped = (text or "").strip()
    return stripped == "" or stripped == INSTRUMENTAL_SYMBOL


def derive_line_windows(
    cues: Sequence[LineCue],
    default_tail: float = DEFAULT_TAIL,
    total_duration: float | None = None,
    order: str = "sort",
) -> list[LineWindow]:
    """Derive ``(start, end, text, is_instrumental)`` windows from cues.

    Each line ends where the next one starts. The last line ends at
    ``total_duration`` when that lies after its start, otherwise
    ``default_tail`` seconds after it.

    Args:
        cues: Line cues, expected ascending by start
        default_tail: Duration of the last line without a total duration
        total_duration: Optional track length bounding the last line
        order: ``"sort"`` stable-sorts out-of-order cues, ``"reject"`` raises

    Raises:
        ValueError: cues are out of order and ``order == "reject"``
    """
    ordered = list(cues)
    out_of_order = any(b.start < a.start for a, b in zip(ordered, ordered[1:]))
    if out_of_order:
        if order == "reject":
            raise ValueError("Line cues must be ascending by start time")
        warn(f"Line cues out of order, sorting {len(ordered)} cues by start")
        ordered = sorted(ordered, key=lambda c: c.start)

    windows: list[LineWindow] = []
    for i, cue in enumerate(ordered):
        if i + 1 < len(ordered):
            end = ordered[i + 1].start
        elif total_duration is not None and total_duration > cue.start:
            end = total_duration
        else:
            end = cue.start + default_tail
        windows.append(LineWindow(
            start=cue.start,
            end=end,
            text=cue.text,
            is_instrumental=is_instrumental_text(cue.text),
        ))
    return windows


def _cue_from_item(item: Any, index: int) -> LineCue:
    if isinstance(item, LineCue):
        return item
    if isinstance(item, dict):
        start, text = item.get("start"), item.get("text", "")
    elif isinstance(item, (list, tuple)) and len(item) == 2:
        start, text = item
    else:
        raise ValueError(f"Cue {index}: expected {{start, text}}, got {item!r}")
    if isinstance(start, bool) or not isinstance(start, (int, float)):
        raise ValueError(f"Cue {index}: start must be a number, got {start!r}")
    return LineCue(start=float(start), text="" if text is None else str(text))


def parse_line_cues(data: Iterable[Any]) -> list[LineCue]:
    """Validate host-supplied cue data (``[{"start": 0, "text": "..."}, ...]``)."""
    if isinstance(data, (str, bytes)) or not isinstance(data, Iterable):
        raise ValueError("Line cues must be a list")
    return [_cue_from_item(item, i) for i, item in enumerate(data)]


def load_line_cues(path: Path) -> list[LineCue]:
    data = json.loads(Path(path).read_text(encoding="utf-8-sig"))
    return parse_line_cues(data)
