"""API integration tests — FastAPI TestClient against /api/* endpoints."""

from __future__ import annotations

import pytest


@pytest.fixture
def payload(sample_transcript, sample_cues):
    return {"transcript": sample_transcript, "cues": sample_cues}


class TestHealth:
    def test_health_returns_ok(self, client):
        r = client.get("/api/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["version"] == "1.0.0"

    def test_request_id_echoed(self, client):
        r = client.get("/api/health", headers={"x-request-id": "abc123"})
        assert r.headers["x-request-id"] == "abc123"

    def test_request_id_generated(self, client):
        r = client.get("/api/health")
        assert len(r.headers["x-request-id"]) == 12


class TestTimelineEndpoint:
    def test_build(self, client, payload):
        r = client.post("/api/timeline", json=payload)
        assert r.status_code == 200
        body = r.json()
        assert [ln["text"] for ln in body["lines"]] == ["Hello world", "", "Sing it again"]
        assert [ln["end"] for ln in body["lines"]] == [5.0, 10.0, 15.0]
        assert body["metrics"]["word_count"] == 5
        assert body["unmatched_words"] == 0

    def test_duration_extends_last_line(self, client, payload):
        r = client.post("/api/timeline", json={**payload, "duration": 90})
        assert r.json()["lines"][-1]["end"] == 90.0

    def test_empty_cues(self, client):
        r = client.post("/api/timeline", json={"transcript": "", "cues": []})
        assert r.status_code == 200
        assert r.json()["lines"] == []

    def test_malformed_cue_rejected(self, client):
        r = client.post("/api/timeline", json={"cues": [{"text": "no start"}]})
        assert r.status_code == 422

    def test_out_of_order_rejected_when_configured(self, client):
        from lyricsync.api import routes
        routes.get_config().timeline.cue_order = "reject"
        r = client.post("/api/timeline", json={"cues": [
            {"start": 5, "text": "b"}, {"start": 1, "text": "a"},
        ]})
        assert r.status_code == 400


class TestPlaybackEndpoint:
    def test_active_word(self, client, payload):
        r = client.post("/api/playback", json={**payload, "t": 1.0})
        assert r.status_code == 200
        body = r.json()
        assert body["active_line_index"] == 0
        assert body["word_states"] == ["active", "upcoming"]
        assert body["active_word_index"] == 0
        assert body["display_text"] == "Hello world"
        assert body["track_progress"] is None

    def test_countdown(self, client, payload):
        body = client.post("/api/playback", json={**payload, "t": 7.5}).json()
        assert body["is_instrumental"] is True
        assert body["show_countdown"] is True
        assert body["countdown_armed"] == [True, False, False]
        assert body["display_text"] == "♫"

    def test_translation_and_track_progress(self, client, payload, sample_translations):
        body = client.post("/api/playback", json={
            **payload, "t": 11.0, "duration": 44.0, "translations": sample_translations,
        }).json()
        assert body["translation"] == "Sing es nochmal"
        assert body["track_progress"] == 25.0

    def test_timeline_memoized(self, client, payload):
        from lyricsync.api import routes
        for t in (0.5, 1.0, 1.5, 2.0):
            assert client.post("/api/playback", json={**payload, "t": t}).status_code == 200
        cache = routes.get_cache()
        assert cache.misses == 1
        assert cache.hits == 3
        assert client.get("/api/health").json()["cached_timelines"] == 1

    def test_missing_t(self, client, payload):
        assert client.post("/api/playback", json=payload).status_code == 422
