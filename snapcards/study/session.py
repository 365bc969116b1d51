"""
Study Session Controller.

Turns a snapshot of the collection into a shuffled, progress-tracked quiz run
and relays "knew it" / "didn't know" outcomes to the card store.

Protocol:
    EMPTY    -- no cards; becomes ACTIVE as soon as the collection has cards
    ACTIVE   -- reveal_answer() then advance(knew_it) per card
    FINISHED -- after the last card; restart() reshuffles the live collection

The deck is a frozen snapshot: edits to the collection while a session is
ACTIVE or FINISHED do not touch the deck or position. The controller does no
I/O and never raises; out-of-protocol calls return False.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import Enum

from loguru import logger

from snapcards.collection.intents import IncrementCorrect, IncrementWrong
from snapcards.collection.reducer import CollectionState
from snapcards.collection.store import CardStore
from snapcards.core.models import Card
from snapcards.study.shuffle import shuffle


class SessionPhase(str, Enum):
    """Where the controller is in the study protocol."""

    EMPTY = "empty"
    ACTIVE = "active"
    FINISHED = "finished"


@dataclass(frozen=True)
class StudySession:
    """One pass over a shuffled deck."""

    deck: tuple[Card, ...]
    position: int = 0
    is_answer_revealed: bool = False
    is_finished: bool = False

    # Tallies for the summary screen
    known: int = 0
    unknown: int = 0

    @property
    def current_card(self) -> Card | None:
        if self.is_finished:
            return None
        return self.deck[self.position]

    @property
    def progress(self) -> float:
        """Fraction of the deck completed, 0.0 to 1.0."""
        done = self.position + (1 if self.is_finished else 0)
        return done / len(self.deck)


class StudySessionController:
    """
    Drives study sessions over a card store.

    Args:
        store: Card store to read cards from and report outcomes to
        rng: Random source for shuffling (inject a seeded one in tests)
    """

    def __init__(self, store: CardStore, rng: random.Random | None = None):
        self.store = store
        self._rng = rng or random.Random()
        self._session: StudySession | None = None
        self._unsubscribe = store.subscribe(self._on_collection_change)
        self._start(store.state.cards)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def session(self) -> StudySession | None:
        return self._session

    @property
    def phase(self) -> SessionPhase:
        if self._session is None:
            return SessionPhase.EMPTY
        if self._session.is_finished:
            return SessionPhase.FINISHED
        return SessionPhase.ACTIVE

    @property
    def progress(self) -> float:
        return self._session.progress if self._session else 0.0

    # =========================================================================
    # Protocol
    # =========================================================================

    def reveal_answer(self) -> bool:
        """Show the answer of the current card. Idempotent."""
        if self.phase is not SessionPhase.ACTIVE:
            return self._ignored("reveal_answer")
        self._session = replace(self._session, is_answer_revealed=True)
        return True

    def flip(self) -> bool:
        """Toggle between question and answer (tap-to-flip)."""
        if self.phase is not SessionPhase.ACTIVE:
            return self._ignored("flip")
        self._session = replace(
            self._session, is_answer_revealed=not self._session.is_answer_revealed
        )
        return True

    def advance(self, knew_it: bool) -> bool:
        """
        Record the outcome for the current card and move on.

        Only valid once the answer is revealed. Increments the card's counter
        through the store, then moves to the next card or finishes.
        """
        session = self._session
        if self.phase is not SessionPhase.ACTIVE or not session.is_answer_revealed:
            return self._ignored("advance")

        card = session.current_card
        if knew_it:
            self.store.dispatch(IncrementCorrect(card.id))
            session = replace(session, known=session.known + 1)
        else:
            self.store.dispatch(IncrementWrong(card.id))
            session = replace(session, unknown=session.unknown + 1)

        if session.position < len(session.deck) - 1:
            session = replace(session, position=session.position + 1, is_answer_revealed=False)
        else:
            session = replace(session, is_finished=True, is_answer_revealed=False)
            logger.info(f"Study session finished: {session.known}/{len(session.deck)} known")

        self._session = session
        return True

    def restart(self) -> SessionPhase:
        """Reshuffle the current collection and start again at the first card."""
        self._start(self.store.state.cards)
        return self.phase

    def abandon(self) -> None:
        """Discard the session and stop following the store."""
        self._unsubscribe()
        self._session = None

    # =========================================================================
    # Internals
    # =========================================================================

    def _start(self, cards: tuple[Card, ...]) -> None:
        if not cards:
            self._session = None
            return
        self._session = StudySession(deck=tuple(shuffle(cards, self._rng)))
        logger.debug(f"Study session started with {len(cards)} cards")

    def _on_collection_change(self, state: CollectionState) -> None:
        # In-progress decks are snapshots; only an empty controller picks up changes
        if self.phase is SessionPhase.EMPTY:
            self._start(state.cards)

    def _ignored(self, action: str) -> bool:
        logger.debug(f"Ignored {action} in phase {self.phase.value}")
        return False
