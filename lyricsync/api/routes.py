"""FastAPI routes exposing timeline building and playback resolution."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from lyricsync.api.models import (
    HealthResponse, PlaybackRequest, PlaybackResponse, TimelineRequest, TimelineResponse,
)
from lyricsync.lyrics.models import LineCue, Timeline
from lyricsync.lyrics.playback import resolve, track_progress
from lyricsync.lyrics.timeline import TimelineCache, build_timeline, compute_metrics
from lyricsync.utils.config import AppConfig, load_config
from lyricsync.utils.logging import get_logger

VERSION = "1.0.0"

router = APIRouter(prefix="/api", tags=["api"])
log = get_logger("lyricsync.api")

_config: AppConfig | None = None
_cache: TimelineCache | None = None


def get_config() -> AppConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_cache() -> TimelineCache:
    global _cache
    if _cache is None:
        _cache = TimelineCache(max_entries=get_config().cache.max_entries)
    return _cache


def is_configured() -> bool:
    return _config is not None


def configure(cfg: AppConfig | None) -> None:
    """Install a config (at startup or in tests) and reset the timeline cache."""
    global _config, _cache
    _config = cfg
    _cache = None


def _cues(req: TimelineRequest) -> list[LineCue]:
    return [LineCue(start=c.start, text=c.text) for c in req.cues]


def _timeline(req: TimelineRequest) -> Timeline:
    cfg = get_config()
    try:
        if cfg.cache.enabled:
            return get_cache().get_or_build(req.transcript, _cues(req), cfg.timeline, req.duration)
        return build_timeline(req.transcript, _cues(req), cfg.timeline, req.duration)
    except ValueError as e:
        raise HTTPException(400, str(e))


# ── Health ────────────────────────────────────────────────────────────────────

@router.get("/health", response_model=HealthResponse)
async def health():
    cached = len(_cache) if _cache is not None else 0
    return HealthResponse(status="ok", version=VERSION, cached_timelines=cached)


# ── Timeline ──────────────────────────────────────────────────────────────────

@router.post("/timeline", response_model=TimelineResponse)
async def create_timeline(req: TimelineRequest):
    timeline = _timeline(req)
    log.info(f"Timeline: {len(timeline)} lines, {timeline.unmatched_words} unmatched words")
    data = timeline.to_dict()
    return TimelineResponse(
        lines=data["lines"],
        unmatched_words=timeline.unmatched_words,
        metrics=compute_metrics(timeline).to_dict(),
    )


@router.post("/playback", response_model=PlaybackResponse)
async def playback_state(req: PlaybackRequest):
    cfg = get_config()
    timeline = _timeline(req)
    translations = [LineCue(start=c.start, text=c.text) for c in req.translations]
    st = resolve(timeline, req.t, countdown_threshold=cfg.countdown.threshold,
                 steps=cfg.countdown.steps, translations=translations)
    body = st.to_dict()
    if req.duration:
        body["track_progress"] = round(track_progress(req.t, req.duration), 3)
    return PlaybackResponse(**body)
