"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class CueIn(BaseModel):
    start: float
    text: str = ""


class TimelineRequest(BaseModel):
    transcript: str = ""
    cues: list[CueIn] = Field(default_factory=list)
    duration: Optional[float] = Field(default=None, gt=0)


class PlaybackRequest(TimelineRequest):
    t: float
    translations: list[CueIn] = Field(default_factory=list)


class WordOut(BaseModel):
    word: str
    start: float
    end: float


class LineOut(BaseModel):
    start: float
    end: float
    text: str
    is_instrumental: bool
    words: list[WordOut] = Field(default_factory=list)


class TimelineResponse(BaseModel):
    lines: list[LineOut]
    unmatched_words: int = 0
    metrics: dict[str, Any] = Field(default_factory=dict)


class PlaybackResponse(BaseModel):
    t: float
    active_line_index: int
    active_line: Optional[LineOut] = None
    previous_line: Optional[LineOut] = None
    next_line: Optional[LineOut] = None
    is_instrumental: bool
    line_progress: float
    word_states: list[str] = Field(default_factory=list)
    active_word_index: Optional[int] = None
    show_countdown: bool
    countdown_seconds_remaining: float
    countdown_armed: list[bool] = Field(default_factory=list)
    display_text: str
    previous_text: str = ""
    next_text: str = ""
    translation: str = ""
    track_progress: Optional[float] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    cached_timelines: int = 0
