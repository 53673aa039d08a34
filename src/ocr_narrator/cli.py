"""Command-line interface for ocr-narrator.

Uses Typer for a modern, type-hinted CLI experience. The engine normally
runs inside a camera host; these commands exercise it on typed text and on
recorded frame traces.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ocr_narrator import __version__
from ocr_narrator.config import (
    DICTIONARY_ENV_VAR,
    EngineConfig,
    default_dictionary_path,
    load_engine_config,
)
from ocr_narrator.errors import NarratorError, format_error_for_display
from ocr_narrator.logging import LogLevel, set_verbosity
from ocr_narrator.narration.gate import Emit
from ocr_narrator.replay import load_trace, replay
from ocr_narrator.session import SessionEngine
from ocr_narrator.vocabulary.dictionary import read_dictionary_file

# Load OCR_NARRATOR_DICTIONARY and friends from a local .env
load_dotenv()

app = typer.Typer(
    name="ocr-narrator",
    help="Correct OCR text against a dictionary and decide what to narrate.",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

DictionaryOption = Annotated[
    Optional[Path],
    typer.Option(
        "--dictionary",
        "-d",
        help=f"Word list, one word per line. Defaults to ${DICTIONARY_ENV_VAR}.",
    ),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Engine config JSON file."),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"ocr-narrator version {__version__}")
        raise typer.Exit()


def _build_engine(dictionary: Path | None, config_path: Path | None) -> SessionEngine:
    """Create a session from CLI options, exiting with a message on bad input."""
    dictionary = dictionary or default_dictionary_path()
    if dictionary is None:
        console.print(
            f"[red]Error:[/red] No dictionary given. Use --dictionary or set {DICTIONARY_ENV_VAR}."
        )
        raise typer.Exit(1)

    try:
        config = load_engine_config(config_path) if config_path else EngineConfig()
    except NarratorError as e:
        console.print(f"[red]Error:[/red] {escape(format_error_for_display(e))}")
        raise typer.Exit(1)

    engine = SessionEngine.from_file(dictionary, config)
    if engine.dictionary.is_empty:
        console.print("[yellow]Warning:[/yellow] Dictionary is empty; words will not be corrected.")
    return engine


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase log verbosity (-vv for debug)."),
    ] = 0,
) -> None:
    """OCR Narrator - streaming text stabilization and correction.

    [bold]correct[/bold]: Correct a fragment of text against a dictionary.

    [bold]replay[/bold]: Run a recorded frame trace through the narration gate.
    """
    if verbose:
        set_verbosity(LogLevel(min(LogLevel.NORMAL + verbose, LogLevel.DEBUG)))


@app.command()
def correct(
    text: Annotated[str, typer.Argument(help="Text fragment to correct")],
    dictionary: DictionaryOption = None,
    config: ConfigOption = None,
) -> None:
    """Correct a text fragment word by word."""
    engine = _build_engine(dictionary, config)
    corrections = engine.fragments.correct_tokens(text.strip())

    console.print(escape(" ".join(c.corrected for c in corrections)))

    changed = [c for c in corrections if c.changed]
    if not changed:
        console.print("[dim]No words corrected.[/dim]")
        return

    table = Table(title=f"Corrections ({len(changed)})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Original", style="yellow")
    table.add_column("Corrected", style="green")
    for c in changed:
        table.add_row(str(c.position), escape(c.original), escape(c.corrected))
    console.print(table)


@app.command("replay")
def replay_cmd(
    trace: Annotated[Path, typer.Argument(help="JSON Lines trace of recognized frames")],
    dictionary: DictionaryOption = None,
    config: ConfigOption = None,
    show_suppressed: Annotated[
        bool,
        typer.Option("--show-suppressed", "-s", help="Also list suppressed frames."),
    ] = False,
) -> None:
    """Replay a recorded trace and show which frames would be narrated."""
    engine = _build_engine(dictionary, config)

    try:
        frames = load_trace(trace)
    except NarratorError as e:
        console.print(f"[red]Error:[/red] {escape(format_error_for_display(e))}")
        raise typer.Exit(1)

    summary = replay(engine, frames)

    table = Table(title=f"Replay ({len(frames)} frames)")
    table.add_column("Time (ms)", style="cyan", justify="right")
    table.add_column("Decision", style="white")
    table.add_column("Text", max_width=60)

    for result in summary.results:
        if isinstance(result.decision, Emit):
            table.add_row(str(result.time_ms), "[green]emit[/green]", escape(result.corrected_text))
        elif show_suppressed:
            table.add_row(
                str(result.time_ms),
                f"[dim]{result.decision.reason.value}[/dim]",
                f"[dim]{escape(result.corrected_text)}[/dim]",
            )

    console.print(table)

    counts = ", ".join(f"{k}={v}" for k, v in sorted(summary.counts().items()))
    console.print(f"\n[dim]{counts}[/dim]")
    stats = engine.stats
    console.print(
        f"[dim]cache hits={stats.cache_hits} misses={stats.cache_misses} "
        f"hit rate={stats.cache_hit_rate:.0%}[/dim]"
    )


@app.command()
def check_dictionary(
    path: Annotated[Path, typer.Argument(help="Word list to check")],
) -> None:
    """Check that a dictionary file loads and report on its contents."""
    try:
        dictionary = read_dictionary_file(path)
    except NarratorError as e:
        console.print(f"[red]Error:[/red] {escape(format_error_for_display(e))}")
        raise typer.Exit(1)

    if dictionary.is_empty:
        console.print(f"[yellow]Warning:[/yellow] Dictionary contains no words: {escape(str(path))}")
        raise typer.Exit(1)

    duplicates = dictionary.duplicates()
    lengths = [len(w) for w in dictionary]
    console.print(Panel(
        f"[cyan]Words:[/cyan] {len(dictionary)}\n"
        f"[cyan]Unique:[/cyan] {len(set(dictionary))}\n"
        f"[cyan]Longest:[/cyan] {max(lengths)} characters\n"
        f"[cyan]Duplicates:[/cyan] {', '.join(duplicates[:10]) or 'none'}",
        title=escape(str(path)),
    ))


if __name__ == "__main__":
    app()
