"""Lyric timeline data model: words, cues, resolved lines and playback state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

INSTRUMENTAL_SYMBOL = "♫"


@dataclass(frozen=True)
class TimedWord:
    word: str
    start: float
    end: float

    def to_dict(self) -> dict[str, Any]:
        return {"word": self.word, "start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TimedWord:
        return cls(word=d["word"], start=float(d["start"]), end=float(d["end"]))


@dataclass(frozen=True)
class LineCue:
    """One coarse lyric cue; empty text marks an instrumental gap."""
    start: float
    text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "text": self.text}


@dataclass(frozen=True)
class LineWindow:
    start: float
    end: float
    text: str
    is_instrumental: bool


@dataclass
class ResolvedLine:
    start: float
    end: float
    text: str
    words: list[TimedWord] = field(default_factory=list)
    is_instrumental: bool = False

    @property
    def duration(self) -> float:
        return self.end - self.start

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start,
            "end": self.end,
            "text": self.text,
            "is_instrumental": self.is_instrumental,
            "words": [w.to_dict() for w in self.words],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ResolvedLine:
        return cls(
            start=float(d["start"]),
            end=float(d["end"]),
            text=d.get("text", ""),
            is_instrumental=d.get("is_instrumental", False),
            words=[TimedWord.from_dict(w) for w in d.get("words", [])],
        )


@dataclass
class Timeline:
    """Reconciled, gap-filled lines. Read-only once built; safe to share."""
    lines: list[ResolvedLine] = field(default_factory=list)
    unmatched_words: int = 0

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[ResolvedLine]:
        return iter(self.lines)

    def __getitem__(self, index: int) -> ResolvedLine:
        return self.lines[index]

    @property
    def start(self) -> float:
        return self.lines[0].start if self.lines else 0.0

    @property
    def end(self) -> float:
        return self.lines[-1].end if self.lines else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "unmatched_words": self.unmatched_words,
            "lines": [ln.to_dict() for ln in self.lines],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Timeline:
        return cls(
            lines=[ResolvedLine.from_dict(ln) for ln in d.get("lines", [])],
            unmatched_words=d.get("unmatched_words", 0),
        )


class WordState(str, Enum):
    upcoming = "upcoming"
    active = "active"
    spoken = "spoken"


@dataclass
class PlaybackState:
    """Everything a renderer needs for one timestamp. Recomputed per query."""
    t: float
    active_line: ResolvedLine | None = None
    active_line_index: int = -1
    previous_line: ResolvedLine | None = None
    next_line: ResolvedLine | None = None
    is_instrumental: bool = True
    line_progress: float = 0.0
    word_states: list[WordState] = field(default_factory=list)
    active_word_index: int | None = None
    show_countdown: bool = False
    countdown_seconds_remaining: float = 0.0
    countdown_armed: list[bool] = field(default_factory=list)
    translation: str = ""

    @property
    def display_text(self) -> str:
        if self.is_instrumental or self.active_line is None:
            return INSTRUMENTAL_SYMBOL
        return self.active_line.text

    @property
    def previous_text(self) -> str:
        return self.previous_line.text if self.previous_line else ""

    @property
    def next_text(self) -> str:
        return self.next_line.text if self.next_line else ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "t": self.t,
            "active_line_index": self.active_line_index,
            "active_line": self.active_line.to_dict() if self.active_line else None,
            "previous_line": self.previous_line.to_dict() if self.previous_line else None,
            "next_line": self.next_line.to_dict() if self.next_line else None,
            "is_instrumental": self.is_instrumental,
            "line_progress": round(self.line_progress, 3),
            "word_states": [s.value for s in self.word_states],
            "active_word_index": self.active_word_index,
            "show_countdown": self.show_countdown,
            "countdown_seconds_remaining": round(self.countdown_seconds_remaining, 3),
            "countdown_armed": list(self.countdown_armed),
            "display_text": self.display_text,
            "previous_text": self.previous_text,
            "next_text": self.next_text,
            "translation": self.translation,
        }
