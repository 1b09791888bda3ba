"""PerfectXO package exposing the board model, minimax search, and the web application."""

from .ai import MinimaxAI, Move, minimax
from .game import Board, GameResult, InvalidMove, InvalidState, Mark
from .session import GameSession
from .ui import app

__all__ = [
    "Board",
    "GameResult",
    "GameSession",
    "InvalidMove",
    "InvalidState",
    "Mark",
    "MinimaxAI",
    "Move",
    "app",
    "minimax",
]
