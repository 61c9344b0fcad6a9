"""Playback resolution: what to show at a given timestamp.

``resolve`` is a pure function of ``(timeline, t)``: it keeps no state
between calls, so it can be called every frame and with arbitrary
(seeking, out-of-order) timestamps.
"""

from __future__ import annotations

from typing import Sequence

from lyricsync.lyrics.models import (
    LineCue,
    PlaybackState,
    ResolvedLine,
    Timeline,
    WordState,
)

COUNTDOWN_THRESHOLD = 3.0
COUNTDOWN_STEPS = 3


def _clamp01(x: float) -> float:
    return min(1.0, max(0.0, x))


def find_active_index(lines: Sequence[ResolvedLine], t: float) -> int:
    """Index of the line with ``start <= t < end``; the last line never expires."""
    last = len(lines) - 1
    for i, line in enumerate(lines):
        if line.start <= t and (t < line.end or i == last):
            return i
    return -1


def line_progress(line: ResolvedLine | None, t: float) -> float:
    if line is None or line.duration <= 0:
        return 0.0
    return _clamp01((t - line.start) / line.duration) * 100


def word_states(line: ResolvedLine, t: float) -> list[WordState]:
    states = []
    for w in line.words:
        if t < w.start:
            states.append(WordState.upcoming)
        elif t < w.end:
            states.append(WordState.active)
        else:
            states.append(WordState.spoken)
    return states


def countdown_steps(seconds_remaining: float, steps: int = COUNTDOWN_STEPS) -> list[bool]:
    """Armed flags for the whole-second thresholds ``steps .. 1`` (e.g. 3, 2, 1)."""
    return [seconds_remaining <= k for k in range(steps, 0, -1)]


def resolve_translation(
    translations: Sequence[LineCue] | None,
    t: float,
    is_instrumental: bool = False,
) -> str:
    """Text of the latest translation cue already started; hidden while instrumental."""
    if not translations or is_instrumental:
        return ""
    text = ""
    for cue in translations:
        if t >= cue.start:
            text = cue.text
    return text or ""


def track_progress(t: float, total_duration: float) -> float:
    if total_duration <= 0:
        return 0.0
    return _clamp01(t / total_duration) * 100


def resolve(
    timeline: Timeline | Sequence[ResolvedLine],
    t: float,
    countdown_threshold: float = COUNTDOWN_THRESHOLD,
    steps: int = COUNTDOWN_STEPS,
    translations: Sequence[LineCue] | None = None,
) -> PlaybackState:
    lines = timeline.lines if isinstance(timeline, Timeline) else list(timeline)

    idx = find_active_index(lines, t)
    active = lines[idx] if idx != -1 else None
    previous = lines[idx - 1] if idx >= 1 else None
    if idx != -1:
        nxt = lines[idx + 1] if idx + 1 < len(lines) else None
    else:
        nxt = next((ln for ln in lines if ln.start > t), None)

    is_instrumental = active is None or active.is_instrumental

    states: list[WordState] = []
    active_word: int | None = None
    if active is not None and not active.is_instrumental:
        states = word_states(active, t)
        active_word = next((i for i, s in enumerate(states) if s is WordState.active), None)

    remaining = nxt.start - t if nxt is not None else 0.0
    show = is_instrumental and nxt is not None and 0 < remaining <= countdown_threshold

    return PlaybackState(
        t=t,
        active_line=active,
        active_line_index=idx,
        previous_line=previous,
        next_line=nxt,
        is_instrumental=is_instrumental,
        line_progress=line_progress(active, t),
        word_states=states,
        active_word_index=active_word,
        show_countdown=show,
        countdown_seconds_remaining=remaining,
        countdown_armed=countdown_steps(remaining, steps) if show else [False] * steps,
        translation=resolve_translation(translations, t, is_instrumental),
    )
