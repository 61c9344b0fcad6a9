"""Configuration management with YAML support and pydantic models."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field


class TimelineConfig(BaseModel):
    default_tail: float = Field(default=5.0, gt=0)  # seconds the last line lasts without a total duration
    slack: float = Field(default=2.0, ge=0)         # tolerance around a line window when matching words
    cue_order: Literal["sort", "reject"] = "sort"   # policy for cues not ascending by start


class CountdownConfig(BaseModel):
    threshold: float = Field(default=3.0, gt=0)
    steps: int = Field(default=3, ge=1, le=10)


class RenderConfig(BaseModel):
    fps: int = Field(default=30, gt=0)


class CacheConfig(BaseModel):
    enabled: bool = True
    max_entries: int = Field(default=64, ge=1)
    disk: bool = False


class LoggingConfig(BaseModel):
    dir: str = "data/logs"
    file: bool = True


class AppConfig(BaseModel):
    timeline: TimelineConfig = TimelineConfig()
    countdown: CountdownConfig = CountdownConfig()
    render: RenderConfig = RenderConfig()
    cache: CacheConfig = CacheConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(path: str | Path | None = None) -> AppConfig:
    if path is None:
        candidates = [Path("lyricsync.yaml"), Path("config.yaml"), Path("config.yml")]
        for c in candidates:
            if c.exists():
                path = c
                break
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return AppConfig(**data)
    return AppConfig()


def merge_cli_overrides(cfg: AppConfig, overrides: dict[str, Any]) -> AppConfig:
    data = cfg.model_dump()
    for key, val in overrides.items():
        if val is None:
            continue
        parts = key.split(".")
        d = data
        for p in parts[:-1]:
            d = d.setdefault(p, {})
        d[parts[-1]] = val
    return AppConfig(**data)


DEFAULT_CONFIG_YAML = """\
# lyricsync configuration

timeline:
  default_tail: 5.0          # seconds the last line lasts when no total duration is known
  slack: 2.0                 # seconds of tolerance around a line when matching words
  cue_order: sort            # sort | reject  (cues not ascending by start)

countdown:
  threshold: 3.0             # show the countdown this many seconds before the next line
  steps: 3                   # number of countdown dots (armed at 3, 2, 1 s)

render:
  fps: 30                    # frame rate used by `lyricsync frames`

cache:
  enabled: true
  max_entries: 64            # in-memory timelines kept by the API
  disk: false                # also persist built timelines next to the cue file

logging:
  dir: data/logs
  file: true
"""
