"""Command-line interface for the tonal engine.

Provides commands for:
- analyze: Stream an audio file through the engine (chords, key, diatonic chords)
- capo: Capo advice for a key or for the key of an audio file
- diatonic: List the diatonic chords of a key
"""

import typer
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Tuple, Dict, Any
from rich.console import Console
from rich.table import Table

from .core import KeyLabel, MalformedFrameError, parse_key

app = typer.Typer(
    name="tonal-engine",
    help="Live chord, key and capo analysis from chroma",
    rich_markup_mode="markdown",
)
console = Console()


@dataclass
class StreamSummary:
    """What a pass over an audio file produced."""

    frames: int = 0
    duration: float = 0.0
    # (time, displayed chord symbol) at each chord change
    timeline: List[Tuple[float, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frames": self.frames,
            "duration": self.duration,
            "timeline": [{"time": round(t, 3), "chord": c} for t, c in self.timeline],
        }


def _run_file(input_file: Path, smoothing: float, transpose: int):
    """
    Load a file and feed its chroma frames through a fresh engine.

    Returns:
        Tuple of (engine, StreamSummary)
    """
    from .input import AudioLoader
    from .analysis import ChromaExtractor
    from .engine import TonalEngine, EngineConfig

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    try:
        engine = TonalEngine(EngineConfig(smoothing=smoothing))
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    engine.set_transpose_offset(transpose)

    console.print(f"[blue]Loading audio:[/blue] {input_file}")
    try:
        loader = AudioLoader()
        audio, sr = loader.load(input_file)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Failed to load audio: {e}[/red]")
        raise typer.Exit(1)

    extractor = ChromaExtractor(sr=sr)
    summary = StreamSummary(duration=loader.get_duration(audio, sr))
    console.print(f"  Duration: {summary.duration:.2f}s, window: {extractor.frame_duration * 1000:.0f}ms")

    last_symbol = None
    try:
        for time, frame in extractor.frames(audio):
            engine.on_frame(frame)
            chord = engine.current_chord()
            symbol = chord.symbol if chord else "--"
            if symbol != last_symbol:
                summary.timeline.append((time, symbol))
                last_symbol = symbol
    except MalformedFrameError as e:
        console.print(f"[red]Error: bad chroma frame: {e}[/red]")
        raise typer.Exit(1)

    summary.frames = engine.raw_result().frames
    console.print(f"  Analyzed {summary.frames} frames")
    return engine, summary


def _key_text(key: Optional[KeyLabel]) -> str:
    return key.name if key else "--"


@app.command()
def analyze(
    input_file: Path = typer.Argument(..., help="Input audio file"),
    transpose: int = typer.Option(
        0, "--transpose", "-t", help="Display transposition in semitones"
    ),
    smoothing: float = typer.Option(
        0.98, "--smoothing", "-s", help="Key accumulator smoothing, between 0 and 1"
    ),
    timeline: bool = typer.Option(
        False, "--timeline", help="Show every chord change"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON"
    ),
):
    """Stream an audio file through the engine and report chords and key.

    Examples:
        tonal-engine analyze song.wav
        tonal-engine analyze song.mp3 --transpose -2 --timeline
    """
    from .inference import roman_numerals, transpose as shift_label

    engine, summary = _run_file(input_file, smoothing, transpose)

    key = engine.current_key()
    chord = engine.current_chord()
    chords = engine.diatonic_chords()
    advice = engine.suggest_capo()
    candidates = engine.estimator.candidates(engine.accumulator.read())[:4]

    if json_output:
        result = {
            "input_file": str(input_file),
            "transpose": engine.transpose_offset,
            "key": _key_text(key),
            "relative_key": key.relative.name if key else None,
            "last_chord": chord.symbol if chord else None,
            "diatonic_chords": [c.symbol for c in chords],
            "key_candidates": [
                {"key": shift_label(c.key, transpose).name, "score": round(c.score, 4)}
                for c in candidates
            ],
            "capo": advice.message,
            **summary.to_dict(),
        }
        console.print_json(data=result)
        return

    if timeline:
        _show_timeline_table(summary.timeline)

    console.print(f"\n[bold]Key:[/bold] {_key_text(key)}")
    if key:
        console.print(f"  Relative: {key.relative.name}, parallel: {key.parallel.name}")
    if len(candidates) > 1:
        others = ", ".join(
            f"{shift_label(c.key, transpose).name} ({c.score:.3f})" for c in candidates[1:]
        )
        console.print(f"  [dim]Also likely: {others}[/dim]")
    console.print(f"[bold]Last chord:[/bold] {chord.symbol if chord else '--'}")

    if chords:
        # Numerals are transposition-invariant
        _show_diatonic_table(chords, roman_numerals(engine.raw_result().key))

    console.print(f"\n[green]{advice.message}[/green]")


@app.command()
def capo(
    input_file: Optional[Path] = typer.Argument(None, help="Audio file to estimate the key from"),
    key: Optional[str] = typer.Option(
        None, "--key", "-k", help="Key to advise on instead, e.g. \"Bb major\""
    ),
    transpose: int = typer.Option(
        0, "--transpose", "-t", help="Display transposition in semitones"
    ),
    smoothing: float = typer.Option(
        0.98, "--smoothing", "-s", help="Key accumulator smoothing, between 0 and 1"
    ),
):
    """Suggest a capo position that puts the song on open-chord shapes.

    Examples:
        tonal-engine capo --key "F# minor"
        tonal-engine capo song.wav
    """
    from .inference import CapoAdvisor, CapoSuggestion, transpose as shift_label

    if key is not None:
        try:
            key_label = parse_key(key)
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)
        key_label = shift_label(key_label, transpose)
    elif input_file is not None:
        engine, _ = _run_file(input_file, smoothing, transpose)
        key_label = engine.current_key()
    else:
        console.print("[red]Error: Provide either an input file or --key[/red]")
        raise typer.Exit(1)

    suggestion = CapoAdvisor().suggest(key_label)
    if not isinstance(suggestion, CapoSuggestion):
        console.print(f"[yellow]{suggestion.message}[/yellow]")
        return

    console.print(f"[bold]Key:[/bold] {key_label.name}")
    console.print(f"  Plays as: {suggestion.target_key.name}")
    console.print(f"[green]{suggestion.message}[/green]")


@app.command()
def diatonic(
    key: str = typer.Argument(..., help="Key, e.g. \"G major\" or \"Am\""),
    transpose: int = typer.Option(
        0, "--transpose", "-t", help="Transpose the chords by semitones"
    ),
):
    """List the diatonic chords (I-vi) of a key."""
    from .inference import diatonic_chords, roman_numerals, transpose_all

    try:
        key_label = parse_key(key)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    chords = transpose_all(diatonic_chords(key_label), transpose)
    _show_diatonic_table(chords, roman_numerals(key_label))


def _show_timeline_table(timeline):
    """Display chord changes in a table."""
    table = Table(title="Chord Changes")
    table.add_column("Time (s)", style="yellow")
    table.add_column("Chord", style="cyan")

    for time, symbol in timeline:
        table.add_row(f"{time:.2f}", symbol)

    console.print(table)


def _show_diatonic_table(chords, numerals):
    """Display diatonic chords in a table."""
    table = Table(title="Diatonic Chords")
    table.add_column("Degree", style="green")
    table.add_column("Chord", style="cyan")
    table.add_column("Quality", style="magenta")

    for numeral, chord in zip(numerals, chords):
        table.add_row(numeral, chord.symbol, chord.quality.value)

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
