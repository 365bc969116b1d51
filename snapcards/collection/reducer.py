"""
Collection State Engine: the reducer.

``reduce(state, intent)`` is a pure function returning a new immutable
``CollectionState``. Handlers are registered per intent type with
``@handles``; an intent type without a handler fails at import time, and an
object outside the ``Intent`` union raises ``TypeError``.

Id-based intents never fail. A missing id returns the input state object
itself, so ``reduce(s, i) is s`` means "nothing happened".
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, get_args

from snapcards.collection.intents import (
    AddCard,
    AddFolder,
    DeleteCard,
    DeleteFolder,
    IncrementCorrect,
    IncrementWrong,
    Intent,
    MoveToFolder,
    SetCards,
    SetError,
    SetFolders,
    SetLoading,
    ToggleFavorite,
    UpdateCard,
    UpdateFolder,
)
from snapcards.core.models import Card, Folder


@dataclass(frozen=True)
class CollectionState:
    """Root aggregate: every card and folder plus load/error flags."""

    cards: tuple[Card, ...] = ()
    folders: tuple[Folder, ...] = ()
    is_loading: bool = True
    error: str | None = None

    def find_card(self, card_id: str) -> Card | None:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def find_folder(self, folder_id: str) -> Folder | None:
        for folder in self.folders:
            if folder.id == folder_id:
                return folder
        return None


INITIAL_STATE = CollectionState()

Handler = Callable[[CollectionState, Any], CollectionState]

# Handler registry - populated by @handles decorator
HANDLERS: dict[type, Handler] = {}


def handles(intent_type: type):
    """Decorator to register the handler for one intent type."""
    def decorator(func: Handler) -> Handler:
        HANDLERS[intent_type] = func
        return func
    return decorator


def reduce(state: CollectionState, intent: Intent) -> CollectionState:
    """Apply one intent and return the resulting state."""
    handler = HANDLERS.get(type(intent))
    if handler is None:
        raise TypeError(f"Unknown intent: {type(intent).__name__}")
    return handler(state, intent)


# =============================================================================
# Helpers
# =============================================================================


def _map_card(
    state: CollectionState,
    card_id: str,
    change: Callable[[Card], Card],
) -> CollectionState:
    """Apply ``change`` to the card with ``card_id``; unchanged state if absent."""
    found = False
    cards = []
    for card in state.cards:
        if card.id == card_id:
            found = True
            card = change(card)
        cards.append(card)
    if not found:
        return state
    return replace(state, cards=tuple(cards))


# =============================================================================
# Load / bookkeeping
# =============================================================================


@handles(SetCards)
def _set_cards(state: CollectionState, intent: SetCards) -> CollectionState:
    return replace(state, cards=tuple(intent.cards), is_loading=False)


@handles(SetFolders)
def _set_folders(state: CollectionState, intent: SetFolders) -> CollectionState:
    return replace(state, folders=tuple(intent.folders))


@handles(SetLoading)
def _set_loading(state: CollectionState, intent: SetLoading) -> CollectionState:
    return replace(state, is_loading=intent.is_loading)


@handles(SetError)
def _set_error(state: CollectionState, intent: SetError) -> CollectionState:
    return replace(state, error=intent.error)


# =============================================================================
# Cards
# =============================================================================


@handles(AddCard)
def _add_card(state: CollectionState, intent: AddCard) -> CollectionState:
    # Duplicate ids are not checked; see DESIGN.md
    return replace(state, cards=state.cards + (intent.card,))


@handles(UpdateCard)
def _update_card(state: CollectionState, intent: UpdateCard) -> CollectionState:
    return _map_card(state, intent.card.id, lambda _old: intent.card)


@handles(DeleteCard)
def _delete_card(state: CollectionState, intent: DeleteCard) -> CollectionState:
    cards = tuple(c for c in state.cards if c.id != intent.card_id)
    if len(cards) == len(state.cards):
        return state
    return replace(state, cards=cards)


@handles(IncrementCorrect)
def _increment_correct(state: CollectionState, intent: IncrementCorrect) -> CollectionState:
    return _map_card(
        state, intent.card_id, lambda c: c.model_copy(update={"correct": c.correct + 1})
    )


@handles(IncrementWrong)
def _increment_wrong(state: CollectionState, intent: IncrementWrong) -> CollectionState:
    return _map_card(
        state, intent.card_id, lambda c: c.model_copy(update={"wrong": c.wrong + 1})
    )


@handles(ToggleFavorite)
def _toggle_favorite(state: CollectionState, intent: ToggleFavorite) -> CollectionState:
    return _map_card(
        state, intent.card_id, lambda c: c.model_copy(update={"is_favorite": not c.is_favorite})
    )


@handles(MoveToFolder)
def _move_to_folder(state: CollectionState, intent: MoveToFolder) -> CollectionState:
    return _map_card(
        state, intent.card_id, lambda c: c.model_copy(update={"folder_id": intent.folder_id})
    )


# =============================================================================
# Folders
# =============================================================================


@handles(AddFolder)
def _add_folder(state: CollectionState, intent: AddFolder) -> CollectionState:
    return replace(state, folders=state.folders + (intent.folder,))


@handles(UpdateFolder)
def _update_folder(state: CollectionState, intent: UpdateFolder) -> CollectionState:
    if state.find_folder(intent.folder.id) is None:
        return state
    folders = tuple(intent.folder if f.id == intent.folder.id else f for f in state.folders)
    return replace(state, folders=folders)


@handles(DeleteFolder)
def _delete_folder(state: CollectionState, intent: DeleteFolder) -> CollectionState:
    folders = tuple(f for f in state.folders if f.id != intent.folder_id)
    members = [c for c in state.cards if c.folder_id == intent.folder_id]
    if len(folders) == len(state.folders) and not members:
        return state
    # Unfile members in the same step so no dangling reference is ever visible
    cards = tuple(
        c.model_copy(update={"folder_id": None}) if c.folder_id == intent.folder_id else c
        for c in state.cards
    )
    return replace(state, cards=cards, folders=folders)


_missing = set(get_args(Intent)) - set(HANDLERS)
if _missing:
    raise RuntimeError(
        "Intents without a handler: " + ", ".join(sorted(t.__name__ for t in _missing))
    )
