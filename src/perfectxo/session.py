"""Turn controller tying the board, the human player and the computer together."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List
import logging
import threading

from .ai import MinimaxAI, Move
from .game import Board, GameResult, InvalidMove, InvalidState, Mark

logger = logging.getLogger(__name__)

HUMAN: Mark = Mark.X
COMPUTER: Mark = Mark.O

STATUS_TEXT: Dict[GameResult, str] = {
    GameResult.X_WINS: "User Wins!",
    GameResult.O_WINS: "AI Wins!",
    GameResult.DRAW: "It's a Draw!",
}


@dataclass
class GameSession:
    """One game against the computer: board, whose turn it is, and move history."""

    board: Board = field(default_factory=Board)
    ai: MinimaxAI = field(default_factory=lambda: MinimaxAI(player=COMPUTER))
    current: Mark = HUMAN
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    epoch: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def result(self) -> GameResult:
        return self.board.result()

    @property
    def finished(self) -> bool:
        return self.result is not GameResult.IN_PROGRESS

    def is_human_turn(self) -> bool:
        return not self.finished and self.current is HUMAN

    def is_computer_turn(self) -> bool:
        return not self.finished and self.current is COMPUTER

    def on_human_move(self, index: int) -> GameResult:
        if self.finished:
            raise InvalidMove("Game already finished")
        if self.current is not HUMAN:
            raise InvalidMove("It is not the player's turn")
        self.board.place(index, HUMAN)
        return self._settle(HUMAN, index)

    def compute_computer_move(self) -> Move:
        if self.finished:
            raise InvalidState("Game already finished")
        if self.current is not COMPUTER:
            raise InvalidState("It is not the computer's turn")
        move = self.ai.choose(self.board)
        if move.index is None:
            raise InvalidState("Search returned no move")
        self.board.place(move.index, COMPUTER)
        self._settle(COMPUTER, move.index)
        return move

    def advance_turn(self) -> None:
        self.current = self.current.opponent

    def reset(self) -> None:
        self.board.reset()
        self.current = HUMAN
        self.move_log.clear()
        self.ai_pending = False
        self.epoch += 1
        logger.info("Session restarted (epoch %d)", self.epoch)

    def status_text(self) -> str:
        result = self.result
        if result is not GameResult.IN_PROGRESS:
            return STATUS_TEXT[result]
        return "User's Turn" if self.current is HUMAN else "AI's Turn"

    def _settle(self, mark: Mark, index: int) -> GameResult:
        self.move_log.append({"player": mark.value, "cellIndex": index})
        # Only the mover can have just completed a line
        if self.board.has_win(mark):
            result = GameResult.X_WINS if mark is Mark.X else GameResult.O_WINS
        elif self.board.is_full():
            result = GameResult.DRAW
        else:
            self.advance_turn()
            return GameResult.IN_PROGRESS
        logger.info("Game over after %d moves: %s", len(self.move_log), result.value)
        return result
