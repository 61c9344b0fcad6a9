"""Logging setup with rich console output and optional persistent file logging."""

from __future__ import annotations

import logging
import os
import uuid
from contextvars import ContextVar
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.theme import Theme

custom_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow bold",
        "error": "red bold",
        "success": "green bold",
        "highlight": "magenta bold",
        "dim": "dim white",
    }
)

console = Console(theme=custom_theme)
err_console = Console(stderr=True, theme=custom_theme)

# ── Correlation IDs (ContextVars for thread-safety) ──────────────────────────

_request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def set_request_id(rid: str = "") -> str:
    """Set the current request correlation ID. Returns the ID (generates one if empty)."""
    rid = rid or uuid.uuid4().hex[:12]
    _request_id_var.set(rid)
    return rid


def get_request_id() -> str:
    return _request_id_var.get()


class _ContextFormatter(logging.Formatter):
    """Formatter that prepends the request_id to every message."""

    def format(self, record: logging.LogRecord) -> str:
        rid = _request_id_var.get()
        if rid:
            record.msg = f"[req={rid}] {record.msg}"
        return super().format(record)


# ── File logging configuration ───────────────────────────────────────────────

LOG_DIR = Path("data/logs")
_file_logger: logging.Logger | None = None


def _setup_file_handler(
    logger: logging.Logger,
    filepath: Path,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 3,
    level: int = logging.DEBUG,
) -> None:
    """Add a rotating file handler to a logger."""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filepath, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    fmt = _ContextFormatter("%(asctime)s %(levelname)-8s %(name)-20s %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    handler.setFormatter(fmt)
    logger.addHandler(handler)


class Verbosity(str, Enum):
    SILENT = "silent"
    NORMAL = "normal"
    VERBOSE = "verbose"


_current_verbosity = Verbosity.NORMAL


def setup_logging(verbosity: Verbosity = Verbosity.NORMAL, log_dir: Path | None = LOG_DIR) -> None:
    """Install the rich stderr handler and, when ``log_dir`` is set, the app file log."""
    global _current_verbosity, _file_logger
    _current_verbosity = verbosity

    env_level = os.environ.get("LOG_LEVEL", "").upper()
    level_map = {"DEBUG": logging.DEBUG, "INFO": logging.INFO, "WARNING": logging.WARNING,
                 "ERROR": logging.ERROR, "CRITICAL": logging.CRITICAL}

    if env_level in level_map:
        level = level_map[env_level]
    else:
        level = {
            Verbosity.SILENT: logging.ERROR,
            Verbosity.NORMAL: logging.INFO,
            Verbosity.VERBOSE: logging.DEBUG,
        }[verbosity]

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, markup=True)],
        force=True,
    )

    app_logger = logging.getLogger("lyricsync.app")
    for h in list(app_logger.handlers):
        app_logger.removeHandler(h)
        h.close()

    if log_dir is None:
        _file_logger = None
        return

    _file_logger = app_logger
    _file_logger.setLevel(logging.DEBUG)
    _file_logger.propagate = False
    _setup_file_handler(_file_logger, Path(log_dir) / "app.log")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def info(msg: str, **kwargs: Any) -> None:
    if _current_verbosity != Verbosity.SILENT:
        console.print(f"[info]ℹ {msg}[/info]", **kwargs)
    if _file_logger:
        _file_logger.info(msg)


def success(msg: str, **kwargs: Any) -> None:
    if _current_verbosity != Verbosity.SILENT:
        console.print(f"[success]✓ {msg}[/success]", **kwargs)
    if _file_logger:
        _file_logger.info(msg)


def warn(msg: str, **kwargs: Any) -> None:
    if _current_verbosity != Verbosity.SILENT:
        console.print(f"[warning]⚠ {msg}[/warning]", **kwargs)
    if _file_logger:
        _file_logger.warning(msg)


def error(msg: str, **kwargs: Any) -> None:
    err_console.print(f"[error]✗ {msg}[/error]", **kwargs)
    if _file_logger:
        _file_logger.error(msg)


def debug(msg: str, **kwargs: Any) -> None:
    if _current_verbosity == Verbosity.VERBOSE:
        console.print(f"[dim]  {msg}[/dim]", **kwargs)
    if _file_logger:
        _file_logger.debug(msg)


def make_progress(**kwargs: Any) -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        **kwargs,
    )
