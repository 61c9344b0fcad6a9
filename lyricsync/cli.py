"""Main CLI application with typer subcommands."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from rich.prompt import Confirm
from rich.table import Table

from lyricsync.utils.logging import (
    setup_logging, Verbosity, console, info, success, warn, error, make_progress,
)
from lyricsync.utils.config import AppConfig, load_config, merge_cli_overrides, DEFAULT_CONFIG_YAML

load_dotenv()

app = typer.Typer(
    name="lyricsync",
    help="Resolve karaoke lyric timelines from word-timing transcripts and line cues.",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


class CueOrder(str, Enum):
    sort = "sort"
    reject = "reject"


# ── Helper functions ──────────────────────────────────────────────────────────

def _setup(cfg: AppConfig, silent: bool = False, verbose: bool = False) -> None:
    verbosity = Verbosity.SILENT if silent else (Verbosity.VERBOSE if verbose else Verbosity.NORMAL)
    setup_logging(verbosity, log_dir=Path(cfg.logging.dir) if cfg.logging.file else None)


def _require_file(path: Path, what: str) -> None:
    if not path.is_file():
        error(f"{what} not found: {path}")
        raise typer.Exit(1)


def _load_timeline_or_exit(path: Path):
    from lyricsync.lyrics.timeline import load_timeline
    _require_file(path, "Timeline")
    try:
        return load_timeline(path)
    except (ValueError, KeyError, TypeError) as e:
        error(f"Invalid timeline file {path}: {e}")
        raise typer.Exit(1)


def _load_translations_or_exit(path: Optional[Path]):
    if path is None:
        return None
    from lyricsync.lyrics.line_sync import load_line_cues
    _require_file(path, "Translations")
    try:
        return load_line_cues(path)
    except ValueError as e:
        error(f"Invalid translations file {path}: {e}")
        raise typer.Exit(1)


def _state_table(state) -> Table:
    from lyricsync.lyrics.timestamps import format_vtt_time

    table = Table(title=f"Playback @ {format_vtt_time(state.t)}", show_header=False)
    table.add_column("field", style="dim")
    table.add_column("value")
    table.add_row("line", str(state.active_line_index))
    table.add_row("text", state.display_text)
    table.add_row("previous", state.previous_text)
    table.add_row("next", state.next_text)
    table.add_row("instrumental", str(state.is_instrumental))
    table.add_row("progress", f"{state.line_progress:.1f}%")
    if state.active_line is not None and state.word_states:
        marks = {"upcoming": "dim", "active": "highlight", "spoken": "success"}
        words = " ".join(
            f"[{marks[s.value]}]{w.word}[/{marks[s.value]}]"
            for w, s in zip(state.active_line.words, state.word_states)
        )
        table.add_row("words", words)
    if state.show_countdown:
        dots = " ".join("●" if armed else "○" for armed in state.countdown_armed)
        table.add_row("countdown", f"{dots}  ({state.countdown_seconds_remaining:.2f}s)")
    if state.translation:
        table.add_row("translation", state.translation)
    return table


# ── BUILD ─────────────────────────────────────────────────────────────────────

@app.command()
def build(
    transcript: Annotated[Path, typer.Option("--transcript", "-t", help="Word-timing transcript (.vtt)")],
    cues: Annotated[Path, typer.Option("--cues", "-c", help="Line cues JSON: [{start, text}, ...]")],
    output: Annotated[Path, typer.Option("--output", "-o", help="Timeline JSON output")] = Path("timeline.json"),
    duration: Annotated[Optional[float], typer.Option(help="Total track length in seconds")] = None,
    slack: Annotated[Optional[float], typer.Option(help="Word matching tolerance (s)")] = None,
    tail: Annotated[Optional[float], typer.Option(help="Last line duration (s)")] = None,
    cue_order: Annotated[Optional[CueOrder], typer.Option(help="Out-of-order cue policy")] = None,
    config: Annotated[Optional[Path], typer.Option("--config")] = None,
    silent: Annotated[bool, typer.Option("--silent")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
):
    """Build a timeline from a transcript and line cues."""
    from lyricsync.lyrics.timeline import build_timeline_from_files, compute_metrics, save_timeline

    cfg = merge_cli_overrides(load_config(config), {
        "timeline.slack": slack,
        "timeline.default_tail": tail,
        "timeline.cue_order": cue_order.value if cue_order else None,
    })
    _setup(cfg, silent, verbose)
    _require_file(transcript, "Transcript")
    _require_file(cues, "Cue file")

    try:
        timeline = build_timeline_from_files(
            transcript, cues, cfg.timeline, total_duration=duration,
            use_disk_cache=cfg.cache.disk,
        )
    except ValueError as e:
        error(f"Cannot build timeline: {e}")
        raise typer.Exit(1)

    metrics = compute_metrics(timeline)
    if metrics.unmatched_words:
        warn(f"{metrics.unmatched_words} transcript words matched no line")
    save_timeline(timeline, output)
    success(f"{metrics.line_count} lines ({metrics.instrumental_count} instrumental), "
            f"{metrics.word_count} words → {output}")


# ── STATE ─────────────────────────────────────────────────────────────────────

@app.command()
def state(
    timeline: Annotated[Path, typer.Option("--timeline", "-T", help="Timeline JSON from `build`")],
    at: Annotated[float, typer.Option("--at", help="Playback time in seconds")],
    translations: Annotated[Optional[Path], typer.Option(help="Translation cues JSON")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of a table")] = False,
    config: Annotated[Optional[Path], typer.Option("--config")] = None,
):
    """Resolve the playback state at one timestamp."""
    from lyricsync.lyrics.playback import resolve

    cfg = load_config(config)
    _setup(cfg, silent=as_json)
    tl = _load_timeline_or_exit(timeline)
    tr = _load_translations_or_exit(translations)

    st = resolve(tl, at, countdown_threshold=cfg.countdown.threshold,
                 steps=cfg.countdown.steps, translations=tr)
    if as_json:
        typer.echo(json.dumps(st.to_dict(), ensure_ascii=False))
    else:
        console.print(_state_table(st))


# ── FRAMES ────────────────────────────────────────────────────────────────────

@app.command()
def frames(
    timeline: Annotated[Path, typer.Option("--timeline", "-T", help="Timeline JSON from `build`")],
    duration: Annotated[float, typer.Option(help="Track length in seconds")],
    output: Annotated[Path, typer.Option("--output", "-o", help="JSON lines output")] = Path("frames.jsonl"),
    fps: Annotated[Optional[int], typer.Option(help="Frames per second")] = None,
    translations: Annotated[Optional[Path], typer.Option(help="Translation cues JSON")] = None,
    config: Annotated[Optional[Path], typer.Option("--config")] = None,
    silent: Annotated[bool, typer.Option("--silent")] = False,
):
    """Resolve the state of every frame and write one JSON object per line."""
    from lyricsync.lyrics.playback import resolve, track_progress
    from lyricsync.lyrics.timestamps import format_clock

    cfg = merge_cli_overrides(load_config(config), {"render.fps": fps})
    _setup(cfg, silent=silent)
    if duration <= 0:
        error("Duration must be positive")
        raise typer.Exit(1)
    tl = _load_timeline_or_exit(timeline)
    tr = _load_translations_or_exit(translations)

    rate = cfg.render.fps
    total_frames = int(duration * rate)
    total_clock = format_clock(duration)
    info(f"Resolving {total_frames} frames at {rate} fps")

    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f, make_progress(disable=silent) as progress:
        task = progress.add_task("Frames", total=total_frames)
        for frame in range(total_frames):
            t = frame / rate
            st = resolve(tl, t, countdown_threshold=cfg.countdown.threshold,
                         steps=cfg.countdown.steps, translations=tr)
            row = {
                "frame": frame,
                **st.to_dict(),
                "track_progress": round(track_progress(t, duration), 3),
                "clock": format_clock(t),
                "total_clock": total_clock,
            }
            f.write(json.dumps(row, ensure_ascii=False) + "\n")
            progress.advance(task)

    success(f"{total_frames} frames → {output}")


# ── INIT CONFIG ───────────────────────────────────────────────────────────────

@app.command(name="init-config")
def init_config(
    output: Annotated[Path, typer.Option("--output", "-o")] = Path("lyricsync.yaml"),
    force: Annotated[bool, typer.Option("--force")] = False,
):
    """Generate a default lyricsync.yaml."""
    setup_logging(Verbosity.NORMAL, log_dir=None)
    if output.exists() and not force:
        if not Confirm.ask(f"{output} exists. Overwrite?", default=False):
            raise typer.Exit(0)
    output.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
    success(f"Created {output}")


# ── ENTRY POINT ───────────────────────────────────────────────────────────────

def app_entry():
    app()


if __name__ == "__main__":
    app_entry()
