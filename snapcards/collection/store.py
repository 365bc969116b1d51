"""
Card Store: the injectable state container.

Owns the single ``CollectionState`` for the lifetime of the app, applies
intents through the reducer, notifies subscribers, and autosaves.

Lifecycle:
    store = CardStore(storage)
    await store.init()          # initial load, never raises on storage errors
    store.dispatch(AddCard(card))
    await store.flush()         # before exit, wait for pending writes

Autosave is fire-and-forget: a mutation is visible to readers before its
write starts. A single writer task persists the latest snapshot and keeps
going while newer mutations arrive, so writes never land out of order.
Write failures are recorded as a non-fatal error; the in-memory state is
never rolled back.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

from loguru import logger

from snapcards.collection.intents import (
    AddCard,
    Intent,
    SetCards,
    SetError,
    SetFolders,
    UpdateCard,
)
from snapcards.collection.reducer import INITIAL_STATE, CollectionState, reduce
from snapcards.core.errors import StorageError
from snapcards.core.models import Card, Folder
from snapcards.storage.storage_service import StorageService

Listener = Callable[[CollectionState], None]
ErrorListener = Callable[[StorageError], None]


@dataclass
class InitResult:
    """Outcome of the initial load."""

    cards_loaded: int
    folders_loaded: int
    errors: list[StorageError] = field(default_factory=list)

    @property
    def needs_onboarding(self) -> bool:
        """True when the user should be routed to card creation."""
        return self.cards_loaded == 0


class CardStore:
    """
    Single owner of the card collection.

    Args:
        storage: Storage service used for the initial load and autosave
        initial_state: Starting state (defaults to empty and loading)
    """

    def __init__(self, storage: StorageService, initial_state: CollectionState = INITIAL_STATE):
        self.storage = storage
        self._state = initial_state
        self._listeners: list[Listener] = []
        self._error_listeners: list[ErrorListener] = []
        self._writer: asyncio.Task | None = None
        self._dirty = False
        self.last_storage_error: StorageError | None = None

    @property
    def state(self) -> CollectionState:
        return self._state

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def init(self) -> InitResult:
        """
        Load cards and folders from storage.

        A key that fails to load falls back to an empty sequence and the error
        is recorded; loading always completes.
        """
        cards_result, folders_result = await asyncio.gather(
            self.storage.load(),
            self.storage.load_folders(),
            return_exceptions=True,
        )

        errors: list[StorageError] = []
        cards: list[Card] = self._unwrap(cards_result, errors)
        folders: list[Folder] = self._unwrap(folders_result, errors)

        # Folders first: SetCards ends the loading phase
        self.dispatch(SetFolders(tuple(folders)))
        self.dispatch(SetCards(tuple(cards)))

        for error in errors:
            self._report(error)

        logger.info(f"Loaded {len(cards)} cards and {len(folders)} folders")
        return InitResult(cards_loaded=len(cards), folders_loaded=len(folders), errors=errors)

    @staticmethod
    def _unwrap(result, errors: list[StorageError]) -> list:
        if isinstance(result, StorageError):
            errors.append(result)
            return []
        if isinstance(result, BaseException):
            raise result
        return result

    async def flush(self) -> None:
        """Wait until every scheduled write has finished."""
        while self._writer is not None and not self._writer.done():
            await asyncio.shield(self._writer)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def dispatch(self, intent: Intent) -> CollectionState:
        """Apply an intent, notify subscribers, and schedule a save."""
        previous = self._state
        self._state = reduce(previous, intent)
        logger.debug(f"Dispatched {type(intent).__name__}")

        if self._state is previous:
            return self._state

        for listener in list(self._listeners):
            listener(self._state)

        if self._should_persist(previous, self._state):
            self._schedule_save()
        return self._state

    def save_card(self, card: Card) -> CollectionState:
        """Editor upsert: update when the id exists, add otherwise."""
        if self._state.find_card(card.id) is not None:
            return self.dispatch(UpdateCard(card))
        return self.dispatch(AddCard(card))

    def clear_error(self) -> None:
        self.dispatch(SetError(None))

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a read-only listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_storage_error(self, listener: ErrorListener) -> Callable[[], None]:
        """Register a callback for non-fatal storage errors."""
        self._error_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._error_listeners:
                self._error_listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # Persistence
    # =========================================================================

    @staticmethod
    def _should_persist(previous: CollectionState, current: CollectionState) -> bool:
        if previous.is_loading or current.is_loading:
            return False
        return current.cards is not previous.cards or current.folders is not previous.folders

    def _schedule_save(self) -> None:
        self._dirty = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (plain synchronous caller): write now
            asyncio.run(self._write_latest())
            return

        if self._writer is None or self._writer.done():
            self._writer = loop.create_task(self._write_latest())

    async def _write_latest(self) -> None:
        while self._dirty:
            self._dirty = False
            snapshot = self._state
            await self._persist(snapshot)

    async def _persist(self, snapshot: CollectionState) -> None:
        # Keys are independent: a failed cards write must not cost the folders write
        for save, items in (
            (self.storage.save, snapshot.cards),
            (self.storage.save_folders, snapshot.folders),
        ):
            try:
                await save(items)
            except StorageError as e:
                logger.warning(f"Autosave failed, changes kept in memory only: {e}")
                self._report(e)

    def _report(self, error: StorageError) -> None:
        self.last_storage_error = error
        self.dispatch(SetError(str(error)))
        for listener in list(self._error_listeners):
            listener(error)
