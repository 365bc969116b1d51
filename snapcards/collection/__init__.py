"""
Card Collection State Engine.

Components:
- intents: the closed vocabulary of mutations
- reducer: CollectionState and the pure reduce() function
- store: CardStore, the injectable container with autosave
- selectors: read-only filters, groupings and stats
"""

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
from snapcards.collection.reducer import INITIAL_STATE, CollectionState, reduce
from snapcards.collection.store import CardStore, InitResult

__all__ = [
    "Intent",
    "SetCards",
    "SetFolders",
    "AddCard",
    "UpdateCard",
    "DeleteCard",
    "IncrementCorrect",
    "IncrementWrong",
    "ToggleFavorite",
    "AddFolder",
    "UpdateFolder",
    "DeleteFolder",
    "MoveToFolder",
    "SetLoading",
    "SetError",
    "CollectionState",
    "INITIAL_STATE",
    "reduce",
    "CardStore",
    "InitResult",
]
