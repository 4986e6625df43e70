"""Chronoline CLI - AI self-play, scoring and profile listing.

Usage:
    chronoline play --difficulty hard --cards 6 --seed 7
    chronoline play --deck ./events.json --games 3 --memory ./ai_memory.json
    chronoline score --correct --time 4.5 --attempts 2 --difficulty 3
    chronoline profiles
"""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from chronoline_core import AI_DIFFICULTIES, AIMemory, GameConfig
from chronoline_core.utils.logging import get_logger, log_error, setup_logging

from .agents.opponent import AIOpponent
from .event_pool import load_events
from .game import TimelineGame
from .placement import format_time
from .scoring import ScoreCalculator

app = typer.Typer(
    name="chronoline",
    help="Chronoline - timeline card game engine",
    add_completion=False,
)
console = Console()
logger = get_logger("cli")


def _load_config(config_path: Optional[Path]) -> GameConfig:
    try:
        if config_path is not None:
            return GameConfig.load(config_path)
        return GameConfig.from_env()
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)


def _load_memory(path: Optional[Path], limit: Optional[int]) -> AIMemory:
    if path is None or not path.exists():
        return AIMemory(max_entries=limit)
    try:
        return AIMemory.from_dict(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValueError) as e:
        console.print(f"[red]Could not read AI memory {path}:[/red] {e}")
        raise typer.Exit(1)


@app.command("play")
def play(
    deck: Annotated[Optional[Path], typer.Option("--deck", "-d", help="JSON event pool (defaults to the bundled sample)")] = None,
    cards: Annotated[Optional[int], typer.Option("--cards", "-c", min=1, help="Cards dealt to the AI")] = None,
    difficulty: Annotated[Optional[str], typer.Option("--difficulty", "-l", help="AI profile: easy, medium, hard, expert")] = None,
    games: Annotated[int, typer.Option("--games", "-g", min=1, help="Games to play; memory carries over")] = 1,
    seed: Annotated[Optional[int], typer.Option("--seed", "-s", help="Seed for a reproducible run")] = None,
    memory: Annotated[Optional[Path], typer.Option("--memory", "-m", help="Load and save the AI's learned memory here")] = None,
    config: Annotated[Optional[Path], typer.Option("--config", help="JSON config file")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show AI decision logging")] = False,
) -> None:
    """Let the AI opponent play through a deck on its own."""
    cfg = _load_config(config)
    setup_logging(level="DEBUG" if verbose else cfg.log_level, file_output=False)

    try:
        events = load_events(deck)
    except (FileNotFoundError, ValueError) as e:
        log_error(logger, "Loading event pool", e, {"deck": deck or "bundled sample"})
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not events:
        console.print("[red]Error:[/red] The event pool is empty")
        raise typer.Exit(1)

    rng = random.Random(seed)
    card_count = cards or cfg.card_count
    ai = AIOpponent(difficulty or cfg.ai_difficulty, memory=_load_memory(memory, cfg.ai_memory_limit), rng=rng)
    game = TimelineGame(config=cfg, rng=rng)

    console.print(Panel(
        f"[bold]Opponent:[/bold] {ai.name} ({ai.profile.key})\n"
        f"[bold]Deck:[/bold] {deck or 'bundled sample'} ({len(events)} events)\n"
        f"[bold]Cards:[/bold] {card_count}   [bold]Games:[/bold] {games}",
        title="Chronoline Self-Play",
        border_style="cyan",
    ))

    for game_number in range(1, games + 1):
        session = game.start(events, {"cardCount": card_count}, opponent=ai)
        moves = Table(title=f"Game {game_number}", show_lines=False)
        moves.add_column("Turn", justify="right")
        moves.add_column("Card")
        moves.add_column("Year", justify="right")
        moves.add_column("Placed", justify="right")
        moves.add_column("Correct", justify="right")
        moves.add_column("Points", justify="right")

        # every turn either places a card or retries one; cap runaway streaks of mistakes
        max_turns = max(1, len(game.ai_hand)) * 10
        turn = 0
        while turn < max_turns:
            outcome = game.play_ai_turn()
            if outcome is None:
                break
            turn += 1
            ok = "[green]yes[/green]" if outcome.is_correct else "[red]no[/red]"
            moves.add_row(
                str(turn),
                outcome.card.title,
                str(outcome.card.year),
                str(outcome.position),
                f"{ok} ({outcome.result.correct_position})",
                str(outcome.points),
            )
        console.print(moves)

        timeline = "\n".join(f"  {entry.year:>5}  {entry.title}" for entry in session.timeline)
        stats = ai.get_performance_stats()
        console.print(Panel(
            f"{timeline}\n\n"
            f"[bold]AI score:[/bold] {game.ai_score}   "
            f"[bold]Accuracy:[/bold] {stats.accuracy:.0%}   "
            f"[bold]Avg confidence:[/bold] {stats.confidence:.2f}   "
            f"[bold]Memory buckets:[/bold] {stats.memory_size}",
            title=f"Timeline after game {game_number} ({session.status.value})",
            border_style="green" if game.ai_hand == [] else "yellow",
        ))

    if memory is not None:
        memory.parent.mkdir(parents=True, exist_ok=True)
        memory.write_text(json.dumps(ai.memory.to_dict(), indent=2), encoding="utf-8")
        console.print(f"AI memory saved to [bold]{memory}[/bold]")


@app.command("score")
def score(
    correct: Annotated[bool, typer.Option("--correct/--incorrect", help="Whether the placement was correct")] = True,
    time_to_place: Annotated[float, typer.Option("--time", "-t", help="Seconds taken to place the card")] = 0.0,
    attempts: Annotated[int, typer.Option("--attempts", "-a", help="Attempts including this one")] = 1,
    difficulty: Annotated[int, typer.Option("--difficulty", "-l", min=1, max=5, help="Card difficulty")] = 1,
    config: Annotated[Optional[Path], typer.Option("--config", help="JSON config file")] = None,
) -> None:
    """Compute the score for one placement."""
    cfg = _load_config(config)
    points = ScoreCalculator(cfg.scoring).calculate(correct, time_to_place, attempts, difficulty)
    console.print(
        f"Score: [bold]{points}[/bold] "
        f"({'correct' if correct else 'incorrect'}, {format_time(time_to_place)}, "
        f"attempt {attempts}, difficulty {difficulty})"
    )


@app.command("profiles")
def profiles() -> None:
    """List the AI difficulty profiles."""
    table = Table(title="AI Difficulty Profiles")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Accuracy", justify="right")
    table.add_column("Mistakes", justify="right")
    table.add_column("Learning", justify="right")
    table.add_column("Thinking (ms)", justify="right")
    table.add_column("Description")
    for key, profile in AI_DIFFICULTIES.items():
        low, high = profile.thinking_time_ms
        table.add_row(
            key,
            profile.name,
            f"{profile.accuracy:.2f}",
            f"{profile.mistake_chance:.2f}",
            f"{profile.learning_rate:.1f}",
            f"{low}-{high}",
            profile.description,
        )
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
