"""Timeline assembly: transcript + line cues → reconciled, gap-filled lines.

``build_timeline`` is a pure function of its inputs, so results are
memoized by content hash (``TimelineCache`` in memory, ``utils.cache`` on
disk) and per-frame queries never re-parse the transcript.
"""

from __future__ import annotations

import json
import threading
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from lyricsync.lyrics.line_sync import derive_line_windows, load_line_cues, parse_line_cues
from lyricsync.lyrics.models import LineCue, TimedWord, Timeline
from lyricsync.lyrics.reconcile import reconcile
from lyricsync.lyrics.word_timings import parse_word_timings, read_word_timings
from lyricsync.utils import cache as cache_module
from lyricsync.utils.config import TimelineConfig
from lyricsync.utils.logging import debug, info


def build_timeline(
    transcript: str,
    cues: Iterable[LineCue | dict[str, Any]],
    config: TimelineConfig | None = None,
    total_duration: float | None = None,
) -> Timeline:
    return _assemble(parse_word_timings(transcript or ""), cues, config, total_duration)


def _assemble(
    words: list[TimedWord],
    cues: Iterable[LineCue | dict[str, Any]],
    config: TimelineConfig | None,
    total_duration: float | None,
) -> Timeline:
    cfg = config or TimelineConfig()
    line_cues = parse_line_cues(cues)
    windows = derive_line_windows(
        line_cues,
        default_tail=cfg.default_tail,
        total_duration=total_duration,
        order=cfg.cue_order,
    )
    result = reconcile(words, windows, slack=cfg.slack)
    debug(f"Timeline built: {len(result.lines)} lines, "
          f"{len(words) - len(result.unmatched)}/{len(words)} words placed")
    return Timeline(lines=result.lines, unmatched_words=len(result.unmatched))


def timeline_key(
    transcript: str,
    cues: Iterable[LineCue | dict[str, Any]],
    config: TimelineConfig | None = None,
    total_duration: float | None = None,
) -> str:
    cfg = config or TimelineConfig()
    cue_data = [c.to_dict() for c in parse_line_cues(cues)]
    return cache_module.content_hash(transcript or "", cue_data, cfg.model_dump(), total_duration)


class TimelineCache:
    """Bounded LRU of built timelines keyed by input content. Thread-safe."""

    def __init__(self, max_entries: int = 64):
        self.max_entries = max_entries
        self._entries: OrderedDict[str, Timeline] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_or_build(
        self,
        transcript: str,
        cues: Iterable[LineCue | dict[str, Any]],
        config: TimelineConfig | None = None,
        total_duration: float | None = None,
    ) -> Timeline:
        cues = list(cues)
        key = timeline_key(transcript, cues, config, total_duration)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return cached

        timeline = build_timeline(transcript, cues, config, total_duration)

        with self._lock:
            self.misses += 1
            self._entries[key] = timeline
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        return timeline

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0


def build_timeline_from_files(
    transcript_path: Path,
    cues_path: Path,
    config: TimelineConfig | None = None,
    total_duration: float | None = None,
    use_disk_cache: bool = False,
) -> Timeline:
    """Build from a transcript file and a JSON cue file, optionally via the disk cache."""
    cues = load_line_cues(cues_path)
    if not use_disk_cache:
        return _assemble(read_word_timings(transcript_path), cues, config, total_duration)

    transcript = Path(transcript_path).read_text(encoding="utf-8-sig")
    digest = timeline_key(transcript, cues, config, total_duration)
    cached = cache_module.load_cached(Path(cues_path), "timeline", digest)
    if cached is not None:
        debug(f"Timeline cache hit: {digest}")
        return Timeline.from_dict(cached)

    timeline = build_timeline(transcript, cues, config, total_duration)
    cache_module.save_cache(Path(cues_path), "timeline", digest, timeline.to_dict())
    return timeline


# ── Persistence ──────────────────────────────────────────────────────────────

def save_timeline(timeline: Timeline, path: Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(timeline.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    info(f"Timeline saved: {p}")
    return p


def load_timeline(path: Path) -> Timeline | None:
    """Load a timeline JSON file. Returns None if not found."""
    p = Path(path)
    if not p.exists():
        return None
    return Timeline.from_dict(json.loads(p.read_text(encoding="utf-8")))


# ── Observability ────────────────────────────────────────────────────────────

@dataclass
class TimelineMetrics:
    line_count: int = 0
    instrumental_count: int = 0
    word_count: int = 0
    unmatched_words: int = 0
    empty_lines: int = 0        # sung lines that received no words
    duration: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "line_count": self.line_count,
            "instrumental_count": self.instrumental_count,
            "word_count": self.word_count,
            "unmatched_words": self.unmatched_words,
            "empty_lines": self.empty_lines,
            "duration": round(self.duration, 3),
        }


def compute_metrics(timeline: Timeline) -> TimelineMetrics:
    sung = [ln for ln in timeline if not ln.is_instrumental]
    return TimelineMetrics(
        line_count=len(timeline),
        instrumental_count=len(timeline) - len(sung),
        word_count=sum(len(ln.words) for ln in sung),
        unmatched_words=timeline.unmatched_words,
        empty_lines=sum(1 for ln in sung if not ln.words),
        duration=timeline.end - timeline.start,
    )
