"""
Snapcards CLI - flashcards from your notes, studied in the terminal.

Usage:
    snapcards add "Question" "Answer"     # Add a card by hand
    snapcards import-image notes.jpg      # Photo -> text -> cards (Gemini)
    snapcards list --by-date              # Browse the collection
    snapcards study                       # Shuffled self-quiz
    snapcards folder create Biology       # Organize cards
    snapcards stats                       # Totals and accuracy

Card and folder arguments accept an id prefix (as shown by ``list``) or,
for folders, the folder name.
"""

from __future__ import annotations

import asyncio
import mimetypes
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console

from snapcards.cli import display as ui
from snapcards.cli.study_commands import run_study
from snapcards.collection.intents import (
    AddFolder,
    DeleteCard,
    DeleteFolder,
    MoveToFolder,
    ToggleFavorite,
    UpdateCard,
    UpdateFolder,
)
from snapcards.collection.reducer import CollectionState
from snapcards.collection.selectors import (
    cards_in_folder,
    collection_stats,
    favorite_cards,
    group_by_date,
    search_cards,
)
from snapcards.collection.store import CardStore, InitResult
from snapcards.config import get_settings
from snapcards.core.errors import GenerationFailed, StorageError
from snapcards.core.models import Card, Folder, new_card, new_folder
from snapcards.generation.gemini_service import GeminiCardGenerator
from snapcards.generation.ingest import IngestResult, create_cards_from_image, create_cards_from_text
from snapcards.storage.kv import create_kv_store
from snapcards.storage.storage_service import StorageService

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="snapcards",
    help="Snapcards - turn your notes into flashcards and quiz yourself",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

folder_app = typer.Typer(
    name="folder",
    help="Create, rename, list and delete folders",
    no_args_is_help=True,
)
app.add_typer(folder_app, name="folder")

console = Console()

UNFILED = "none"
DEFAULT_FOLDER_COLOR = "cyan"


def _warn_storage_error(error: StorageError) -> None:
    console.print(f"[yellow]Warning:[/yellow] {error}")


async def _open_store() -> tuple[CardStore, InitResult]:
    """Build the store from settings and run the initial load."""
    settings = get_settings()
    kv = create_kv_store(settings.storage_backend, settings.data_dir, settings.storage_quota_bytes)
    store = CardStore(StorageService(kv, settings.cards_key, settings.folders_key))
    store.on_storage_error(_warn_storage_error)
    result = await store.init()
    return store, result


def _resolve_card(state: CollectionState, ref: str) -> Card:
    matches = [c for c in state.cards if c.id.startswith(ref)]
    if len(matches) != 1:
        problem = "No card" if not matches else f"{len(matches)} cards"
        console.print(f"[red]Error:[/red] {problem} matching '{ref}'")
        raise typer.Exit(code=1)
    return matches[0]


def _resolve_folder(state: CollectionState, ref: str) -> Folder:
    matches = [f for f in state.folders if f.name.lower() == ref.lower()]
    if not matches:
        matches = [f for f in state.folders if f.id.startswith(ref)]
    if len(matches) != 1:
        problem = "No folder" if not matches else f"{len(matches)} folders"
        console.print(f"[red]Error:[/red] {problem} matching '{ref}'")
        raise typer.Exit(code=1)
    return matches[0]


def _require_ai() -> None:
    if not get_settings().has_ai_configured():
        console.print(
            "[red]Error:[/red] Gemini API key is not configured. "
            "Set SNAPCARDS_GEMINI_API_KEY or GEMINI_API_KEY."
        )
        raise typer.Exit(code=1)


def _print_ingest_result(result: IngestResult) -> None:
    if result.reason == "no_text":
        console.print(
            "[yellow]No text could be found in the image.[/yellow] "
            "Try a clearer image or add cards manually."
        )
    elif result.reason == "no_cards":
        console.print(
            "[yellow]Could not create cards from this content.[/yellow] "
            "Try a different image or add cards manually."
        )
    else:
        plural = "s" if result.created != 1 else ""
        console.print(f"[green]Successfully created {result.created} flashcard{plural}![/green]")


# =============================================================================
# Browsing
# =============================================================================


@app.command("list")
def list_cards(
    search: Annotated[
        str | None, typer.Option("--search", "-s", help="Filter by text on either side")
    ] = None,
    folder: Annotated[
        str | None, typer.Option("--folder", "-f", help=f"Folder name or id ('{UNFILED}' for unfiled)")
    ] = None,
    favorites: Annotated[
        bool, typer.Option("--favorites", help="Only favorite cards")
    ] = False,
    by_date: Annotated[
        bool, typer.Option("--by-date", help="Group cards by creation day")
    ] = False,
) -> None:
    """List cards in the collection."""
    asyncio.run(_list_cards(search, folder, favorites, by_date))


async def _list_cards(search: str | None, folder: str | None, favorites: bool, by_date: bool) -> None:
    store, result = await _open_store()
    state = store.state

    if result.needs_onboarding:
        console.print("[bold]No Flashcards Yet![/bold]")
        console.print(
            "Create your first card with [cyan]snapcards add[/cyan] "
            "or [cyan]snapcards import-image[/cyan]."
        )
        return

    cards: Sequence[Card] = state.cards
    if folder is not None:
        folder_id = None if folder.lower() == UNFILED else _resolve_folder(state, folder).id
        cards = cards_in_folder(cards, folder_id)
    if favorites:
        cards = favorite_cards(cards)
    if search:
        cards = search_cards(cards, search)

    if not cards:
        suffix = f' for "{search}"' if search else ""
        console.print(f"[dim]No cards found{suffix}.[/dim]")
        return

    if by_date:
        for day, day_cards in group_by_date(cards):
            console.print(ui.cards_table(day_cards, state.folders, title=ui.date_heading(day)))
    else:
        console.print(ui.cards_table(cards, state.folders, title=f"All Cards ({len(cards)})"))


@app.command()
def stats() -> None:
    """Show collection totals and overall accuracy."""
    asyncio.run(_stats())


async def _stats() -> None:
    store, _ = await _open_store()
    console.print(ui.stats_panel(collection_stats(store.state.cards), len(store.state.folders)))


# =============================================================================
# Card Commands
# =============================================================================


@app.command()
def add(
    front: Annotated[str, typer.Argument(help="Question or term")],
    back: Annotated[str, typer.Argument(help="Answer or definition")],
    folder: Annotated[
        str | None, typer.Option("--folder", "-f", help="Folder name or id")
    ] = None,
) -> None:
    """Add a card by hand."""
    asyncio.run(_add(front, back, folder))


async def _add(front: str, back: str, folder: str | None) -> None:
    store, _ = await _open_store()
    folder_id = _resolve_folder(store.state, folder).id if folder else None
    try:
        card = new_card(front, back, folder_id=folder_id)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    store.save_card(card)
    await store.flush()
    console.print(f"[green]Added card[/green] {ui.short_id(card.id)}")


@app.command()
def edit(
    card_ref: Annotated[str, typer.Argument(help="Card id or id prefix")],
    front: Annotated[str | None, typer.Option("--front", help="New question")] = None,
    back: Annotated[str | None, typer.Option("--back", help="New answer")] = None,
) -> None:
    """Edit the text of a card."""
    asyncio.run(_edit(card_ref, front, back))


async def _edit(card_ref: str, front: str | None, back: str | None) -> None:
    store, _ = await _open_store()
    card = _resolve_card(store.state, card_ref)
    update = {}
    if front is not None:
        update["front"] = front.strip()
    if back is not None:
        update["back"] = back.strip()
    if not update:
        console.print("[yellow]Nothing to change.[/yellow] Pass --front and/or --back.")
        return
    if not all(update.values()):
        console.print("[red]Error:[/red] Card front and back must not be empty")
        raise typer.Exit(code=1)
    store.dispatch(UpdateCard(card.model_copy(update=update)))
    await store.flush()
    console.print(f"[green]Updated card[/green] {ui.short_id(card.id)}")


@app.command()
def delete(
    card_ref: Annotated[str, typer.Argument(help="Card id or id prefix")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Delete a card."""
    asyncio.run(_delete(card_ref, yes))


async def _delete(card_ref: str, yes: bool) -> None:
    store, _ = await _open_store()
    card = _resolve_card(store.state, card_ref)
    if not yes and not typer.confirm(f"Delete '{card.front}'?"):
        raise typer.Abort()
    store.dispatch(DeleteCard(card.id))
    await store.flush()
    console.print(f"[green]Deleted card[/green] {ui.short_id(card.id)}")


@app.command()
def favorite(
    card_ref: Annotated[str, typer.Argument(help="Card id or id prefix")],
) -> None:
    """Toggle the favorite mark on a card."""
    asyncio.run(_favorite(card_ref))


async def _favorite(card_ref: str) -> None:
    store, _ = await _open_store()
    card = _resolve_card(store.state, card_ref)
    store.dispatch(ToggleFavorite(card.id))
    await store.flush()
    marked = store.state.find_card(card.id).is_favorite
    console.print(f"Card {ui.short_id(card.id)} {'added to' if marked else 'removed from'} favorites")


@app.command()
def move(
    card_ref: Annotated[str, typer.Argument(help="Card id or id prefix")],
    folder: Annotated[
        str | None, typer.Argument(help="Target folder name or id; omit to unfile")
    ] = None,
) -> None:
    """Move a card into a folder, or out of any folder."""
    asyncio.run(_move(card_ref, folder))


async def _move(card_ref: str, folder: str | None) -> None:
    store, _ = await _open_store()
    card = _resolve_card(store.state, card_ref)
    target = _resolve_folder(store.state, folder) if folder else None
    store.dispatch(MoveToFolder(card.id, target.id if target else None))
    await store.flush()
    where = f"into '{target.name}'" if target else "out of its folder"
    console.print(f"Moved card {ui.short_id(card.id)} {where}")


# =============================================================================
# Folder Commands
# =============================================================================


@folder_app.command("list")
def folder_list() -> None:
    """List folders with their card counts."""
    asyncio.run(_folder_list())


async def _folder_list() -> None:
    store, _ = await _open_store()
    state = store.state
    if not state.folders:
        console.print("[dim]No folders yet.[/dim] Create one with [cyan]snapcards folder create[/cyan].")
        return
    counts: dict[str, int] = {}
    for card in state.cards:
        if card.folder_id is not None:
            counts[card.folder_id] = counts.get(card.folder_id, 0) + 1
    console.print(ui.folders_table(state.folders, counts))


@folder_app.command("create")
def folder_create(
    name: Annotated[str, typer.Argument(help="Folder name")],
    color: Annotated[
        str, typer.Option("--color", "-c", help="Accent color (any rich color name or #hex)")
    ] = DEFAULT_FOLDER_COLOR,
) -> None:
    """Create a folder."""
    asyncio.run(_folder_create(name, color))


async def _folder_create(name: str, color: str) -> None:
    store, _ = await _open_store()
    try:
        folder = new_folder(name, color)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    store.dispatch(AddFolder(folder))
    await store.flush()
    console.print(f"[green]Created folder[/green] {folder.name} ({ui.short_id(folder.id)})")


@folder_app.command("rename")
def folder_rename(
    folder_ref: Annotated[str, typer.Argument(help="Folder name or id")],
    new_name: Annotated[str, typer.Argument(help="New folder name")],
) -> None:
    """Rename a folder."""
    asyncio.run(_folder_rename(folder_ref, new_name))


async def _folder_rename(folder_ref: str, new_name: str) -> None:
    store, _ = await _open_store()
    folder = _resolve_folder(store.state, folder_ref)
    if not new_name.strip():
        console.print("[red]Error:[/red] Folder name must not be empty")
        raise typer.Exit(code=1)
    store.dispatch(UpdateFolder(folder.model_copy(update={"name": new_name.strip()})))
    await store.flush()
    console.print(f"Renamed folder '{folder.name}' to '{new_name.strip()}'")


@folder_app.command("delete")
def folder_delete(
    folder_ref: Annotated[str, typer.Argument(help="Folder name or id")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Delete a folder. Its cards are kept and become unfiled."""
    asyncio.run(_folder_delete(folder_ref, yes))


async def _folder_delete(folder_ref: str, yes: bool) -> None:
    store, _ = await _open_store()
    folder = _resolve_folder(store.state, folder_ref)
    members = len(cards_in_folder(store.state.cards, folder.id))
    if not yes and not typer.confirm(f"Delete folder '{folder.name}' ({members} cards will be unfiled)?"):
        raise typer.Abort()
    store.dispatch(DeleteFolder(folder.id))
    await store.flush()
    console.print(f"[green]Deleted folder[/green] {folder.name}; {members} cards unfiled")


# =============================================================================
# Study
# =============================================================================


@app.command()
def study() -> None:
    """
    Start a shuffled study session over every card.

    Press Enter to reveal each answer, then say whether you knew it.
    """
    store, result = asyncio.run(_open_store())
    if result.needs_onboarding:
        console.print("[yellow]Add some cards to start studying![/yellow]")
        return
    run_study(store, console)


# =============================================================================
# Card Generation
# =============================================================================


@app.command("import-image")
def import_image(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Image file")],
    folder: Annotated[
        str | None, typer.Option("--folder", "-f", help="Folder name or id for the new cards")
    ] = None,
) -> None:
    """Extract text from a photo of your notes and turn it into cards."""
    _require_ai()
    asyncio.run(_import_image(path, folder))


async def _import_image(path: Path, folder: str | None) -> None:
    store, _ = await _open_store()
    folder_id = _resolve_folder(store.state, folder).id if folder else None
    mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    generator = GeminiCardGenerator()

    try:
        with console.status("Extracting text and generating flashcards..."):
            result = await create_cards_from_image(
                store, generator, path.read_bytes(), mime_type=mime_type, folder_id=folder_id
            )
    except GenerationFailed as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    await store.flush()
    _print_ingest_result(result)


@app.command("import-text")
def import_text(
    path: Annotated[str, typer.Argument(help="Text file, or '-' for stdin")],
    folder: Annotated[
        str | None, typer.Option("--folder", "-f", help="Folder name or id for the new cards")
    ] = None,
) -> None:
    """Turn a block of text into cards."""
    _require_ai()
    text = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    asyncio.run(_import_text(text, folder))


async def _import_text(text: str, folder: str | None) -> None:
    store, _ = await _open_store()
    folder_id = _resolve_folder(store.state, folder).id if folder else None
    generator = GeminiCardGenerator()

    try:
        with console.status("Generating flashcards..."):
            result = await create_cards_from_text(store, generator, text, folder_id=folder_id)
    except GenerationFailed as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    await store.flush()
    _print_ingest_result(result)


# =============================================================================
# Entry Point
# =============================================================================


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Verbose output")
    ] = False,
) -> None:
    """
    Snapcards - turn your notes into flashcards and quiz yourself.

    \b
    Quick Start:
      snapcards import-image notes.jpg   # Photo -> flashcards
      snapcards add "Q" "A"              # Add a card by hand
      snapcards study                    # Shuffled self-quiz
    """
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB", retention=3)


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
