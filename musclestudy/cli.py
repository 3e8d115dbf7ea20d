"""
muscle-study: Terminal interface for study progress.

A Rich terminal interface over the spaced repetition progress tracker.

Commands:
- muscle-study review     - Self-graded review of due items
- muscle-study record     - Record a single answer
- muscle-study due        - List which items are due
- muscle-study mastery    - Show mastery per item
- muscle-study attention  - Items most in need of attention
- muscle-study stats      - Show learning statistics
- muscle-study reset      - Delete all progress
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from .config import get_settings
from .progress import MasteryLevel, StudyProgressTracker, format_duration

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="muscle-study",
    help="Spaced repetition progress tracker for muscle fact cards",
    no_args_is_help=True,
)
console = Console()


ItemsArgument = typer.Argument(None, help="Item names (muscle names)")
CatalogOption = typer.Option(
    None,
    "--catalog", "-c",
    help="Text file with one item name per line",
    exists=True,
    dir_okay=False,
)


def _get_tracker() -> StudyProgressTracker:
    return StudyProgressTracker.from_settings(get_settings())


def _collect_items(items: Optional[List[str]], catalog: Optional[Path]) -> list[str]:
    """Merge item arguments with a catalog file, dropping blanks and duplicates."""
    collected: list[str] = list(items or [])
    if catalog is not None:
        lines = catalog.read_text(encoding="utf-8").splitlines()
        collected.extend(line.strip() for line in lines)
    return list(dict.fromkeys(name for name in collected if name))


def _require_items(items: list[str]) -> None:
    if not items:
        console.print("[red]No items given.[/red] Pass item names or --catalog FILE.")
        raise typer.Exit(1)


def _styled_level(score: int) -> str:
    level = MasteryLevel.from_score(score)
    return f"[{level.color}]{level.display_name}[/{level.color}]"


# =============================================================================
# Commands
# =============================================================================


@app.command()
def review(
    items: Optional[List[str]] = ItemsArgument,
    catalog: Optional[Path] = CatalogOption,
    all_items: bool = typer.Option(
        False,
        "--all", "-a",
        help="Review every item, not only the due ones",
    ),
) -> None:
    """
    Run a self-graded review session.

    Asks whether you recalled each due item and records the answer. The
    session is added to your history when at least one item was answered.
    """
    names = _collect_items(items, catalog)
    _require_items(names)

    tracker = _get_tracker()
    queue = names if all_items else tracker.get_muscles_due_for_review(names)

    if not queue:
        console.print("\n[green]Nothing due for review![/green]")
        console.print("All caught up. Check back tomorrow.")
        raise typer.Exit(0)

    console.print(f"\n[bold]Session: {len(queue)} item(s)[/bold]\n")
    tracker.start_session()

    try:
        for i, name in enumerate(queue, 1):
            console.print(Panel(name, title=f"Item {i}/{len(queue)}", title_align="left", border_style="cyan"))
            if Confirm.ask("Did you recall it correctly?", default=True):
                tracker.record_correct(name)
                console.print("[green]Correct![/green]")
            else:
                tracker.record_incorrect(name)
                console.print("[red]Incorrect[/red]")
            progress = tracker.progress.muscles[name]
            console.print(f"[dim]Next review: {progress.next_review_date} ({progress.interval}d)[/dim]\n")
    except (KeyboardInterrupt, EOFError):
        console.print("\n\n[yellow]Session interrupted.[/yellow]")

    record = tracker.end_session()
    if record is None:
        console.print("[dim]No answers recorded.[/dim]")
        return

    total = record.correct_count + record.incorrect_count
    accuracy = record.correct_count / total * 100 if total else 0.0
    console.print(Panel(
        f"[bold]Session Complete![/bold]\n\n"
        f"Duration: {format_duration(record.duration)}\n"
        f"Items studied: {record.muscles_studied}\n"
        f"Accuracy: {accuracy:.1f}%\n"
        f"Streak: {tracker.progress.streak_days} day(s)",
        title="Summary",
        border_style="green",
    ))


@app.command()
def record(
    item: str = typer.Argument(..., help="Item name"),
    correct: bool = typer.Option(
        True,
        "--correct/--incorrect",
        help="Whether the answer was correct",
    ),
) -> None:
    """Record a single answer outside a session."""
    tracker = _get_tracker()
    progress = tracker.record_correct(item) if correct else tracker.record_incorrect(item)

    console.print(
        f"{'[green]✓[/green]' if correct else '[red]✗[/red]'} {item}: "
        f"next review {progress.next_review_date} ({progress.interval}d), "
        f"mastery {tracker.get_muscles_mastery(item)}%"
    )


@app.command()
def due(
    items: Optional[List[str]] = ItemsArgument,
    catalog: Optional[Path] = CatalogOption,
) -> None:
    """List which of the given items are due for review."""
    names = _collect_items(items, catalog)
    _require_items(names)

    tracker = _get_tracker()
    due_items = tracker.get_muscles_due_for_review(names)

    if not due_items:
        console.print("[green]Nothing due for review.[/green]")
        return

    table = Table(title=f"Due for review ({len(due_items)}/{len(names)})")
    table.add_column("Item")
    table.add_column("Status")
    table.add_column("Scheduled")

    for name in due_items:
        progress = tracker.progress.muscles.get(name)
        if progress is None or progress.next_review_date is None:
            table.add_row(name, "[green]new[/green]", "-")
        else:
            table.add_row(name, "[yellow]due[/yellow]", str(progress.next_review_date))

    console.print(table)


@app.command()
def mastery(
    items: Optional[List[str]] = ItemsArgument,
    catalog: Optional[Path] = CatalogOption,
) -> None:
    """Show mastery score and level per item."""
    names = _collect_items(items, catalog)
    _require_items(names)

    tracker = _get_tracker()

    table = Table()
    table.add_column("Item")
    table.add_column("Mastery", justify="right")
    table.add_column("Level")
    table.add_column("Correct", justify="right")
    table.add_column("Incorrect", justify="right")

    for name in names:
        score = tracker.get_muscles_mastery(name)
        progress = tracker.progress.muscles.get(name)
        table.add_row(
            name,
            f"{score}%",
            _styled_level(score),
            str(progress.correct_count if progress else 0),
            str(progress.incorrect_count if progress else 0),
        )

    console.print(table)


@app.command()
def attention(
    items: Optional[List[str]] = ItemsArgument,
    catalog: Optional[Path] = CatalogOption,
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, help="Number of items to show"),
) -> None:
    """Show the items most in need of attention (lowest mastery first)."""
    names = _collect_items(items, catalog)
    _require_items(names)

    tracker = _get_tracker()
    ranked = tracker.get_items_needing_attention(names, limit=limit)

    table = Table(title="Needs Attention")
    table.add_column("Item")
    table.add_column("Mastery", justify="right")
    table.add_column("Answers")

    for name, score, progress in ranked:
        answers = (
            f"[green]{progress.correct_count}[/green]/[red]{progress.incorrect_count}[/red]"
            if progress
            else "[dim]not studied[/dim]"
        )
        table.add_row(name, f"{score}%", answers)

    console.print(table)


@app.command()
def stats(
    catalog: Optional[Path] = CatalogOption,
) -> None:
    """Show learning statistics and progress."""
    tracker = _get_tracker()
    summary = tracker.get_statistics()
    names = _collect_items(None, catalog) if catalog is not None else []

    console.print("\n[bold cyan]Learning Statistics[/bold cyan]")
    console.print("=" * 40)

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Streak", f"{summary.streak_days} day(s)")
    table.add_row("Accuracy", f"{summary.accuracy:.1f}%")
    table.add_row("Total answered", str(summary.total_answered))
    table.add_row("Correct / incorrect", f"{summary.total_correct} / {summary.total_incorrect}")
    table.add_row("Items studied", str(summary.muscles_studied))
    table.add_row("Items mastered", str(summary.mastered_count))
    table.add_row("Items due", str(summary.needs_review_count))
    table.add_row("Sessions", str(summary.sessions_count))
    table.add_row("Study time", format_duration(summary.total_study_time))
    table.add_row("Avg session", format_duration(summary.avg_session_duration))
    table.add_row("Studying since", str(tracker.progress.start_date))

    if catalog is not None:
        table.add_row("Catalog coverage", f"{tracker.get_coverage(names):.0f}%")

    console.print(table)

    if names:
        distribution = tracker.get_mastery_distribution(names)
        console.print("\n[bold]Mastery Distribution[/bold]")
        dist_table = Table()
        dist_table.add_column("Level")
        dist_table.add_column("Items", justify="right")
        for level in reversed(list(MasteryLevel)):
            dist_table.add_row(f"[{level.color}]{level.display_name}[/{level.color}]", str(distribution[level]))
        console.print(dist_table)

    sessions = tracker.progress.sessions[-5:]
    if sessions:
        console.print("\n[bold]Recent Sessions[/bold]")
        session_table = Table()
        session_table.add_column("Date")
        session_table.add_column("Items", justify="right")
        session_table.add_column("Correct", justify="right")
        session_table.add_column("Incorrect", justify="right")
        session_table.add_column("Duration", justify="right")

        for s in reversed(sessions):
            session_table.add_row(
                str(s.date),
                str(s.muscles_studied),
                str(s.correct_count),
                str(s.incorrect_count),
                format_duration(s.duration),
            )

        console.print(session_table)


@app.command()
def reset(
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Delete all progress for a fresh start."""
    if not confirm and not Confirm.ask("Reset ALL progress? This cannot be undone!", default=False):
        raise typer.Exit(0)

    tracker = _get_tracker()
    tracker.reset_progress()
    console.print("[green]All progress has been reset.[/green]")


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<level>{message}</level>",
    )


def main() -> None:
    """CLI entry point."""
    configure_logging(get_settings().log_level)
    app()


if __name__ == "__main__":
    main()
