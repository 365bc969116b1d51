"""
Rich rendering helpers for the snapcards CLI.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from rich import box
from rich.color import Color, ColorParseError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from snapcards.collection.selectors import CollectionStats, accuracy
from snapcards.core.models import Card, Folder
from snapcards.study.session import StudySession

SHORT_ID = 8


def short_id(item_id: str) -> str:
    return item_id[:SHORT_ID]


def format_progress_bar(fraction: float, width: int = 20) -> str:
    """Format a progress bar."""
    filled = int(fraction * width)
    empty = width - filled
    return "#" * filled + "-" * empty


def folder_text(folder: Folder) -> Text:
    """Folder name in its accent color; colors rich cannot parse render plain."""
    try:
        Color.parse(folder.color)
    except ColorParseError:
        return Text(folder.name)
    return Text(folder.name, style=folder.color)


def _folder_label(card: Card, folders: dict[str, Folder]) -> Text:
    if card.folder_id is None:
        return Text("-", style="dim")
    folder = folders.get(card.folder_id)
    if folder is None:
        return Text("?", style="dim")
    return folder_text(folder)


def cards_table(cards: Sequence[Card], folders: Sequence[Folder], title: str | None = None) -> Table:
    """Table of cards with accuracy, favorite marker and folder."""
    by_id = {f.id: f for f in folders}
    table = Table(title=title, box=box.SIMPLE_HEAD)
    table.add_column("ID", style="dim")
    table.add_column("*", justify="center")
    table.add_column("Question")
    table.add_column("Answer", style="cyan")
    table.add_column("Acc.", justify="right")
    table.add_column("Folder")

    for card in cards:
        acc = accuracy(card)
        table.add_row(
            short_id(card.id),
            "[yellow]*[/yellow]" if card.is_favorite else "",
            Text(card.front),
            Text(card.back),
            f"{acc}%" if acc is not None else "[dim]-[/dim]",
            _folder_label(card, by_id),
        )
    return table


def date_heading(day: date) -> str:
    today = date.today()
    if day == today:
        return "Today"
    if (today - day).days == 1:
        return "Yesterday"
    return day.strftime("%B %d, %Y")


def folders_table(folders: Sequence[Folder], counts: dict[str, int]) -> Table:
    table = Table(box=box.SIMPLE_HEAD)
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Cards", justify="right")
    for folder in folders:
        table.add_row(
            short_id(folder.id),
            folder_text(folder),
            str(counts.get(folder.id, 0)),
        )
    return table


def stats_panel(stats: CollectionStats, folder_count: int) -> Panel:
    content = Text()
    content.append("Cards: ", style="cyan")
    content.append(f"{stats.total_cards}\n", style="bold")
    content.append("Favorites: ", style="yellow")
    content.append(f"{stats.favorites}\n", style="bold")
    content.append("Folders: ", style="magenta")
    content.append(f"{folder_count} ({stats.unfiled} cards unfiled)\n", style="bold")
    content.append("Answers: ", style="green")
    content.append(f"{stats.correct} knew / {stats.wrong} didn't know\n", style="bold")
    if stats.accuracy is not None:
        content.append(f"Accuracy: {format_progress_bar(stats.accuracy / 100)} {stats.accuracy}%")
    else:
        content.append("Accuracy: no answers yet", style="dim")
    return Panel(content, title="[bold]Collection[/bold]", border_style="blue")


def render_progress(console: Console, session: StudySession) -> None:
    shown = min(session.position + 1, len(session.deck))
    console.print(
        f"[dim]Progress[/dim] {format_progress_bar(session.progress)} {shown} / {len(session.deck)}"
    )


def render_question(console: Console, card: Card) -> None:
    console.print(
        Panel(
            Text(card.front),
            title="[bold cyan]QUESTION[/bold cyan]",
            border_style="cyan",
            box=box.HEAVY,
            padding=(1, 2),
        )
    )


def render_answer(console: Console, card: Card) -> None:
    console.print(
        Panel(
            Text(card.back),
            title="[bold green]ANSWER[/bold green]",
            border_style="green",
            box=box.HEAVY,
            padding=(1, 2),
        )
    )


def render_summary(console: Console, session: StudySession) -> None:
    content = Text()
    content.append("Great job!\n\n", style="bold")
    content.append("You've completed this study session.\n")
    content.append("Knew it: ", style="green")
    content.append(f"{session.known}", style="bold")
    content.append("   Didn't know: ", style="red")
    content.append(f"{session.unknown}", style="bold")
    console.print(Panel(content, title="[bold]Session Complete[/bold]", border_style="green"))
