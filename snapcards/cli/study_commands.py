"""
Interactive study loop for the CLI.

Reads cards through a StudySessionController: Enter reveals the answer,
then the user marks "knew it" or "didn't know". Outcomes are written to the
card store as they happen; quitting mid-session keeps the counts already
recorded.

The loop is synchronous: it runs outside any event loop, so the store
writes each outcome before the next prompt is shown.
"""
from __future__ import annotations

import random

from rich.console import Console
from rich.prompt import Confirm, Prompt

from snapcards.cli import display as ui
from snapcards.collection.store import CardStore
from snapcards.study.session import SessionPhase, StudySession, StudySessionController


def run_study(
    store: CardStore,
    console: Console,
    rng: random.Random | None = None,
) -> StudySession | None:
    """
    Run study sessions until the user declines "study again".

    Returns:
        The last session played, or None when there were no cards
    """
    controller = StudySessionController(store, rng=rng)

    if controller.phase is SessionPhase.EMPTY:
        console.print("[yellow]Add some cards to start studying![/yellow]")
        controller.abandon()
        return None

    try:
        while True:
            while controller.phase is SessionPhase.ACTIVE:
                session = controller.session
                card = session.current_card

                console.print()
                ui.render_progress(console, session)
                ui.render_question(console, card)

                Prompt.ask("Press Enter to show answer", default="", show_default=False, console=console)
                controller.reveal_answer()
                ui.render_answer(console, card)

                knew_it = Confirm.ask("Did you know it?", default=True, console=console)
                controller.advance(knew_it)

            if controller.phase is SessionPhase.FINISHED:
                ui.render_summary(console, controller.session)

            if not Confirm.ask("Study again?", default=False, console=console):
                break
            if controller.restart() is SessionPhase.EMPTY:
                console.print("[yellow]No cards left to study.[/yellow]")
                break
    finally:
        last_session = controller.session
        controller.abandon()

    return last_session
