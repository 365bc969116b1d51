"""
Intent vocabulary for the collection state engine.

Each intent is a frozen dataclass carrying its payload. ``Intent`` is the
closed union of every type the reducer accepts; the reducer checks at import
time that each member has a handler.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from snapcards.core.models import Card, Folder


# =============================================================================
# Public vocabulary (the only verbs the UI may invoke)
# =============================================================================


@dataclass(frozen=True)
class SetCards:
    """Replace all cards. Used once, for the initial load; clears isLoading."""

    cards: tuple[Card, ...]


@dataclass(frozen=True)
class SetFolders:
    """Replace all folders. Used once, for the initial load."""

    folders: tuple[Folder, ...]


@dataclass(frozen=True)
class AddCard:
    """Append a card. Caller must supply a fresh unique id."""

    card: Card


@dataclass(frozen=True)
class UpdateCard:
    card: Card


@dataclass(frozen=True)
class DeleteCard:
    card_id: str


@dataclass(frozen=True)
class IncrementCorrect:
    card_id: str


@dataclass(frozen=True)
class IncrementWrong:
    card_id: str


@dataclass(frozen=True)
class ToggleFavorite:
    card_id: str


@dataclass(frozen=True)
class AddFolder:
    folder: Folder


@dataclass(frozen=True)
class UpdateFolder:
    folder: Folder


@dataclass(frozen=True)
class DeleteFolder:
    """Remove a folder and unfile every card that referenced it."""

    folder_id: str


@dataclass(frozen=True)
class MoveToFolder:
    """File a card under ``folder_id``, or unfile it when None. Not validated."""

    card_id: str
    folder_id: str | None = None


# =============================================================================
# Internal bookkeeping (dispatched by the state container only)
# =============================================================================


@dataclass(frozen=True)
class SetLoading:
    is_loading: bool


@dataclass(frozen=True)
class SetError:
    """Record the last error description, or clear it with None."""

    error: str | None


Intent = Union[
    SetCards,
    SetFolders,
    AddCard,
    UpdateCard,
    DeleteCard,
    IncrementCorrect,
    IncrementWrong,
    ToggleFavorite,
    AddFolder,
    UpdateFolder,
    DeleteFolder,
    MoveToFolder,
    SetLoading,
    SetError,
]
