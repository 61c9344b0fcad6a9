"""On-disk cache for built timelines, keyed by a hash of their inputs."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any


CACHE_DIR_NAME = ".lyricsync_cache"


def content_hash(*parts: Any) -> str:
    """Stable SHA-256 over JSON-serializable parts (strings hashed as-is)."""
    h = hashlib.sha256()
    for part in parts:
        if isinstance(part, str):
            data = part
        else:
            data = json.dumps(part, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
        h.update(data.encode("utf-8"))
        h.update(b"\x00")
    return h.hexdigest()[:16]


def get_cache_dir(anchor: Path) -> Path:
    if anchor.is_dir():
        cache_dir = anchor / CACHE_DIR_NAME
    else:
        cache_dir = anchor.parent / CACHE_DIR_NAME
    cache_dir.mkdir(exist_ok=True)
    return cache_dir


def cache_key(anchor: Path, stage: str, digest: str) -> str:
    return f"{anchor.stem}_{digest}_{stage}"


def load_cached(anchor: Path, stage: str, digest: str) -> dict | None:
    cache_dir = get_cache_dir(anchor)
    cache_file = cache_dir / f"{cache_key(anchor, stage, digest)}.json"
    if cache_file.exists():
        with open(cache_file, encoding="utf-8") as f:
            return json.load(f)
    return None


def save_cache(anchor: Path, stage: str, digest: str, data: dict | list) -> Path:
    cache_dir = get_cache_dir(anchor)
    cache_file = cache_dir / f"{cache_key(anchor, stage, digest)}.json"
    with open(cache_file, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return cache_file
