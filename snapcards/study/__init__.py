"""
Study Session Controller: shuffled self-quiz runs over the card collection.
"""

from snapcards.study.session import SessionPhase, StudySession, StudySessionController
from snapcards.study.shuffle import shuffle

__all__ = [
    "SessionPhase",
    "StudySession",
    "StudySessionController",
    "shuffle",
]
