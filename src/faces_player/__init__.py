"""Faces quiz player with a persistent answer store."""

from .client import SessionClient
from .errors import FacesPlayerError
from .game import GameSession, GameState, QuestionResult
from .store import AnswerStore

__version__ = "0.1.0"

__all__ = [
    "AnswerStore",
    "FacesPlayerError",
    "GameSession",
    "GameState",
    "QuestionResult",
    "SessionClient",
]
