"""Shared fixtures: sample transcript, line cues, isolated API client."""

from __future__ import annotations

import json

import pytest


# ── Seed data ────────────────────────────────────────────────────────────────

SAMPLE_TRANSCRIPT = """\
WEBVTT

1
00:00:00.500 --> 00:00:02.000
<c>Hello</c><00:00:01.200><c> world</c>

2
00:00:10.000 --> 00:00:12.000
Sing <00:00:10.800> it <00:00:11.400> again
"""

SAMPLE_CUES = [
    {"start": 0.0, "text": "Hello world"},
    {"start": 5.0, "text": ""},
    {"start": 10.0, "text": "Sing it again"},
]

SAMPLE_TRANSLATIONS = [
    {"start": 0.0, "text": "Hallo Welt"},
    {"start": 10.0, "text": "Sing es nochmal"},
]


@pytest.fixture
def sample_transcript():
    return SAMPLE_TRANSCRIPT


@pytest.fixture
def sample_cues():
    """Return a deep copy of sample cues."""
    return json.loads(json.dumps(SAMPLE_CUES))


@pytest.fixture
def sample_translations():
    return json.loads(json.dumps(SAMPLE_TRANSLATIONS))


@pytest.fixture
def sample_timeline(sample_transcript, sample_cues):
    from lyricsync.lyrics.timeline import build_timeline
    return build_timeline(sample_transcript, sample_cues)


@pytest.fixture
def sample_files(tmp_path, sample_transcript, sample_cues):
    """Transcript, cue and translation files in tmp_path."""
    transcript = tmp_path / "song.vtt"
    transcript.write_text(sample_transcript, encoding="utf-8")
    cues = tmp_path / "cues.json"
    cues.write_text(json.dumps(sample_cues), encoding="utf-8")
    translations = tmp_path / "translations.json"
    translations.write_text(json.dumps(SAMPLE_TRANSLATIONS, ensure_ascii=False), encoding="utf-8")
    return transcript, cues, translations


# ── API client ───────────────────────────────────────────────────────────────

@pytest.fixture
def client(tmp_path, monkeypatch):
    """FastAPI TestClient with a fresh config and no file logging."""
    from fastapi.testclient import TestClient

    from lyricsync.api import routes
    from lyricsync.utils.config import AppConfig

    monkeypatch.chdir(tmp_path)
    cfg = AppConfig()
    cfg.logging.file = False
    routes.configure(cfg)

    from main import app
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c

    routes.configure(None)
