"""
Unit tests for the interactive study loop.

Prompts are replaced with scripted answers; the loop runs without an event
loop, so every outcome reaches storage before the next prompt.
"""

import io
import json

import pytest
from rich.console import Console
from rich.prompt import Confirm, Prompt

from snapcards.cli.study_commands import run_study
from snapcards.collection.reducer import CollectionState
from snapcards.collection.store import CardStore


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=100)


def script_prompts(monkeypatch, answers, on_ask=None):
    """Answer Confirm prompts from ``answers`` in order; Enter for every Prompt."""
    answers = list(answers)

    def confirm(question, *args, **kwargs):
        if on_ask is not None:
            on_ask(question)
        return answers.pop(0)

    monkeypatch.setattr(Prompt, "ask", lambda *args, **kwargs: "")
    monkeypatch.setattr(Confirm, "ask", confirm)


def stored_totals(kv):
    cards = json.loads(kv.get_item("flashcards") or "[]")
    return sum(c["correct"] for c in cards), sum(c["wrong"] for c in cards)


class TestRunStudy:

    def test_empty_collection_returns_none(self, storage, console, monkeypatch):
        script_prompts(monkeypatch, [])
        store = CardStore(storage, initial_state=CollectionState(is_loading=False))

        assert run_study(store, console) is None
        assert "Add some cards" in console.file.getvalue()

    def test_answers_are_saved_before_next_prompt(
        self, storage, memory_kv, loaded_state, console, rng, monkeypatch
    ):
        seen = []

        def record(question):
            seen.append((question, stored_totals(memory_kv)))

        # Three cards: knew, didn't, knew, then decline "study again"
        script_prompts(monkeypatch, [True, False, True, False], on_ask=record)
        store = CardStore(storage, initial_state=loaded_state)

        session = run_study(store, console, rng=rng)

        assert session.is_finished is True
        assert session.known == 2
        assert session.unknown == 1
        # Totals seen while each prompt was open
        assert [totals for _, totals in seen] == [(0, 0), (1, 0), (1, 1), (2, 1)]
        assert seen[-1][0] == "Study again?"
        assert stored_totals(memory_kv) == (2, 1)

    def test_study_again_reshuffles(self, storage, loaded_state, console, rng, monkeypatch):
        script_prompts(monkeypatch, [True, True, True, True, True, True, True, False])
        store = CardStore(storage, initial_state=loaded_state)

        session = run_study(store, console, rng=rng)

        assert session.is_finished is True
        assert sum(c.correct for c in store.state.cards) == 6
