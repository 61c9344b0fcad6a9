"""lyricsync — FastAPI server resolving karaoke lyric timelines.

Start with:
    python main.py
    python main.py --host 0.0.0.0 --port 8000
    python main.py --reload
"""

from __future__ import annotations

import argparse
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

load_dotenv()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Assign a unique request_id to every incoming request for log correlation."""

    async def dispatch(self, request: Request, call_next):
        from lyricsync.utils.logging import set_request_id
        rid = request.headers.get("x-request-id", "")
        rid = set_request_id(rid)
        response = await call_next(request)
        response.headers["x-request-id"] = rid
        return response


@asynccontextmanager
async def lifespan(application: FastAPI):
    from lyricsync.api.routes import configure, get_config, is_configured, VERSION
    from lyricsync.utils.config import load_config
    from lyricsync.utils.logging import setup_logging, Verbosity, info, success

    # a config installed before startup (tests, embedding hosts) wins over the file
    if not is_configured():
        configure(load_config())
    cfg = get_config()

    setup_logging(Verbosity.NORMAL, log_dir=Path(cfg.logging.dir) if cfg.logging.file else None)
    info(f"lyricsync v{VERSION} starting...")
    success(f"Timeline cache: {'on' if cfg.cache.enabled else 'off'}, "
            f"slack {cfg.timeline.slack}s, countdown {cfg.countdown.threshold}s")

    yield


app = FastAPI(
    title="lyricsync",
    description="Karaoke lyric timeline resolution",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)

from lyricsync.api.routes import router as api_router  # noqa: E402
app.include_router(api_router)


# ── CLI Entry Point ───────────────────────────────────────────────────────────

def main():
    parser = argparse.ArgumentParser(description="lyricsync server")
    parser.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes")
    args = parser.parse_args()

    import uvicorn
    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
