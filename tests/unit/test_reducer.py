"""
Unit tests for the collection reducer.

Covers every intent, the no-op behavior on missing ids, and the folder
referential-integrity guarantee.

Run: pytest tests/unit/test_reducer.py -v
"""

import random

import pytest

from snapcards.collection.intents import (
    AddCard,
    AddFolder,
    DeleteCard,
    DeleteFolder,
    IncrementCorrect,
    IncrementWrong,
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


class TestInitialLoad:
    """SetCards / SetFolders on the initial state."""

    def test_initial_state_is_loading_and_empty(self):
        assert INITIAL_STATE.is_loading is True
        assert INITIAL_STATE.cards == ()
        assert INITIAL_STATE.folders == ()
        assert INITIAL_STATE.error is None

    def test_set_cards_replaces_and_clears_loading(self, sample_cards):
        state = reduce(INITIAL_STATE, SetCards(sample_cards))
        assert state.cards == sample_cards
        assert state.is_loading is False

    def test_set_cards_accepts_list(self, sample_cards):
        state = reduce(INITIAL_STATE, SetCards(list(sample_cards)))
        assert isinstance(state.cards, tuple)
        assert [c.id for c in state.cards] == ["A", "B", "C"]

    def test_set_folders_keeps_loading(self, sample_folder):
        state = reduce(INITIAL_STATE, SetFolders((sample_folder,)))
        assert state.folders == (sample_folder,)
        assert state.is_loading is True

    def test_set_loading_and_error(self):
        state = reduce(INITIAL_STATE, SetLoading(False))
        assert state.is_loading is False
        state = reduce(state, SetError("disk full"))
        assert state.error == "disk full"
        state = reduce(state, SetError(None))
        assert state.error is None

    def test_unknown_intent_raises_type_error(self):
        with pytest.raises(TypeError):
            reduce(INITIAL_STATE, object())


class TestCardIntents:
    """Add / Update / Delete and counters."""

    def test_add_card_appends(self, loaded_state, card_factory):
        new = card_factory("D")
        state = reduce(loaded_state, AddCard(new))
        assert [c.id for c in state.cards] == ["A", "B", "C", "D"]
        # Input state is untouched
        assert len(loaded_state.cards) == 3

    def test_update_card_replaces_matching(self, loaded_state):
        edited = loaded_state.cards[1].model_copy(update={"front": "Edited"})
        state = reduce(loaded_state, UpdateCard(edited))
        assert state.find_card("B").front == "Edited"
        assert [c.id for c in state.cards] == ["A", "B", "C"]

    def test_update_missing_card_is_noop(self, loaded_state, card_factory):
        state = reduce(loaded_state, UpdateCard(card_factory("ghost")))
        assert state is loaded_state

    def test_delete_card(self, loaded_state):
        state = reduce(loaded_state, DeleteCard("B"))
        assert [c.id for c in state.cards] == ["A", "C"]

    def test_delete_missing_card_is_noop(self, loaded_state):
        assert reduce(loaded_state, DeleteCard("ghost")) is loaded_state

    def test_increment_correct_and_wrong(self, loaded_state):
        state = reduce(loaded_state, IncrementCorrect("A"))
        state = reduce(state, IncrementWrong("A"))
        state = reduce(state, IncrementCorrect("A"))
        card = state.find_card("A")
        assert (card.correct, card.wrong) == (2, 1)
        assert state.find_card("B").correct == 0

    def test_increment_missing_card_is_noop(self, loaded_state):
        assert reduce(loaded_state, IncrementCorrect("ghost")) is loaded_state
        assert reduce(loaded_state, IncrementWrong("ghost")) is loaded_state

    def test_counters_are_order_independent(self, loaded_state):
        """n corrects and m wrongs in any order give correct=n, wrong=m."""
        intents = [IncrementCorrect("C")] * 5 + [IncrementWrong("C")] * 3
        for seed in range(5):
            shuffled = list(intents)
            random.Random(seed).shuffle(shuffled)
            state = loaded_state
            for intent in shuffled:
                state = reduce(state, intent)
            card = state.find_card("C")
            assert (card.correct, card.wrong) == (5, 3)

    def test_toggle_favorite(self, loaded_state):
        state = reduce(loaded_state, ToggleFavorite("A"))
        assert state.find_card("A").is_favorite is True
        state = reduce(state, ToggleFavorite("A"))
        assert state.find_card("A").is_favorite is False

    def test_move_to_folder_and_back(self, loaded_state):
        state = reduce(loaded_state, MoveToFolder("A", "F1"))
        assert state.find_card("A").folder_id == "F1"
        state = reduce(state, MoveToFolder("A", None))
        assert state.find_card("A").folder_id is None

    def test_move_to_unknown_folder_is_not_validated(self, loaded_state):
        state = reduce(loaded_state, MoveToFolder("A", "does-not-exist"))
        assert state.find_card("A").folder_id == "does-not-exist"


class TestSequencesOfIntents:
    """Surviving ids carry their latest values, no duplicates, no ghosts."""

    def test_random_add_update_delete_sequence(self, card_factory):
        rng = random.Random(42)
        state = CollectionState(is_loading=False)
        expected: dict[str, str] = {}
        next_id = 0

        for _ in range(300):
            op = rng.choice(["add", "update", "delete"])
            if op == "add" or not expected:
                card_id = f"c{next_id}"
                next_id += 1
                state = reduce(state, AddCard(card_factory(card_id, front=f"v0-{card_id}")))
                expected[card_id] = f"v0-{card_id}"
            elif op == "update":
                card_id = rng.choice(sorted(expected))
                front = f"v{rng.randint(1, 99)}-{card_id}"
                current = state.find_card(card_id)
                state = reduce(state, UpdateCard(current.model_copy(update={"front": front})))
                expected[card_id] = front
            else:
                card_id = rng.choice(sorted(expected))
                state = reduce(state, DeleteCard(card_id))
                del expected[card_id]

        ids = [c.id for c in state.cards]
        assert len(ids) == len(set(ids))
        assert set(ids) == set(expected)
        for card in state.cards:
            assert card.front == expected[card.id]


class TestFolderIntents:
    """Folder add/update/delete and referential integrity."""

    def test_add_and_update_folder(self, loaded_state, folder_factory):
        state = reduce(loaded_state, AddFolder(folder_factory("F2", name="History")))
        assert [f.id for f in state.folders] == ["F1", "F2"]
        renamed = state.find_folder("F2").model_copy(update={"name": "World History"})
        state = reduce(state, UpdateFolder(renamed))
        assert state.find_folder("F2").name == "World History"

    def test_update_missing_folder_is_noop(self, loaded_state, folder_factory):
        assert reduce(loaded_state, UpdateFolder(folder_factory("ghost"))) is loaded_state

    def test_delete_folder_unfiles_members(self, loaded_state):
        state = reduce(loaded_state, MoveToFolder("A", "F1"))
        state = reduce(state, MoveToFolder("C", "F1"))
        state = reduce(state, DeleteFolder("F1"))

        assert state.folders == ()
        assert all(c.folder_id != "F1" for c in state.cards)
        assert state.find_card("A").folder_id is None
        assert [c.id for c in state.cards] == ["A", "B", "C"]

    def test_delete_folder_leaves_other_folders_members(self, loaded_state, folder_factory):
        state = reduce(loaded_state, AddFolder(folder_factory("F2")))
        state = reduce(state, MoveToFolder("A", "F1"))
        state = reduce(state, MoveToFolder("B", "F2"))
        state = reduce(state, DeleteFolder("F1"))
        assert state.find_card("B").folder_id == "F2"

    def test_delete_missing_folder_is_noop(self, loaded_state):
        assert reduce(loaded_state, DeleteFolder("ghost")) is loaded_state
