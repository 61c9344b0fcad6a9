"""Word-to-line reconciliation — attach transcript words to line windows.

Greedy single pass over the lines in order. A word joins a line when its
lowercased text is still contained in the line's unclaimed text and its
timing falls inside the line window widened by ``slack`` seconds. Each word
is consumed at most once; words no line claims are dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from lyricsync.lyrics.models import LineWindow, ResolvedLine, TimedWord
from lyricsync.utils.logging import debug

DEFAULT_SLACK = 2.0


@dataclass
class ReconcileResult:
    lines: list[ResolvedLine]
    unmatched: list[TimedWord] = field(default_factory=list)


def _matches(word: TimedWord, remaining: str, window: LineWindow, slack: float) -> str | None:
    needle = word.word.strip().lower()
    if not needle or needle not in remaining:
        return None
    if word.start < window.start - slack or word.end > window.end + slack:
        return None
    return needle


def reconcile(
    words: Sequence[TimedWord],
    windows: Sequence[LineWindow],
    slack: float = DEFAULT_SLACK,
) -> ReconcileResult:
    consumed = [False] * len(words)
    lines: list[ResolvedLine] = []

    for window in windows:
        if window.is_instrumental:
            lines.append(ResolvedLine(
                start=window.start, end=window.end, text=window.text,
                words=[], is_instrumental=True,
            ))
            continue

        remaining = window.text.lower()
        assigned: list[TimedWord] = []
        for idx, word in enumerate(words):
            if consumed[idx]:
                continue
            needle = _matches(word, remaining, window, slack)
            if needle is None:
                continue
            remaining = remaining.replace(needle, "", 1)
            consumed[idx] = True
            assigned.append(word)

        lines.append(ResolvedLine(
            start=window.start, end=window.end, text=window.text,
            words=assigned, is_instrumental=False,
        ))

    unmatched = [w for w, used in zip(words, consumed) if not used]
    if unmatched:
        debug(f"Reconcile: {len(unmatched)}/{len(words)} words matched no line")
    return ReconcileResult(lines=lines, unmatched=unmatched)
