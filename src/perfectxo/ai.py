"""Exhaustive minimax search for perfect tic-tac-toe play."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from .game import Board, InvalidState, Mark

logger = logging.getLogger(__name__)

WIN_SCORE = 10
LOSS_SCORE = -10
DRAW_SCORE = 0


@dataclass(frozen=True)
class Move:
    # None on terminal leaves
    index: Optional[int]
    score: int


@dataclass
class _Counter:
    nodes: int = 0


def minimax(board: Board, mark: Mark, _counter: Optional[_Counter] = None) -> Move:
    """Return the best move for ``mark`` with O maximizing and X minimizing.

    Terminal positions are scored from O's point of view before any move is
    tried: +10 if O has a line, -10 if X has one, 0 if the board is full.
    Moves are tried in ascending cell order and only a strictly better score
    replaces the current best, so the lowest index wins ties and the result is
    deterministic. Every mark placed during the search is cleared before the
    call returns.
    """
    if _counter is not None:
        _counter.nodes += 1

    if board.has_win(Mark.O):
        return Move(None, WIN_SCORE)
    if board.has_win(Mark.X):
        return Move(None, LOSS_SCORE)
    available = board.available_moves()
    if not available:
        return Move(None, DRAW_SCORE)

    moves: List[Move] = []
    for index in available:
        with board.occupy(index, mark):
            reply = minimax(board, mark.opponent, _counter)
        moves.append(Move(index, reply.score))

    best = moves[0]
    if mark is Mark.O:
        for move in moves[1:]:
            if move.score > best.score:
                best = move
    else:
        for move in moves[1:]:
            if move.score < best.score:
                best = move
    return best


@dataclass
class MinimaxAI:
    """Computer player that always picks a minimax-optimal cell.

    - MinimaxAI(player=Mark.O)
    - choose(board) -> Move
    """

    player: Mark = Mark.O
    last_nodes: int = field(default=0, repr=False)

    def choose(self, board: Board) -> Move:
        if board.has_win(Mark.X) or board.has_win(Mark.O):
            raise InvalidState("Game is already won")
        if not board.available_moves():
            raise InvalidState("No valid moves available")

        counter = _Counter()
        move = minimax(board, self.player, counter)
        self.last_nodes = counter.nodes
        logger.debug(
            "%s picks cell %s (score %d, %d nodes)",
            self.player.value,
            move.index,
            move.score,
            counter.nodes,
        )
        return move
