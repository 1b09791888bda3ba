"""Tests for the GameSession turn controller."""

import pytest

from boards import board_with
from perfectxo.ai import Move
from perfectxo.game import GameResult, InvalidMove, InvalidState, Mark
from perfectxo.session import GameSession


def test_new_session_waits_for_human():
    session = GameSession()
    assert session.current is Mark.X
    assert session.result is GameResult.IN_PROGRESS
    assert session.is_human_turn()
    assert session.status_text() == "User's Turn"


def test_human_then_computer_turn():
    session = GameSession()

    assert session.on_human_move(4) is GameResult.IN_PROGRESS
    assert session.current is Mark.O
    assert session.is_computer_turn()
    assert session.status_text() == "AI's Turn"

    move = session.compute_computer_move()
    assert move == Move(index=0, score=0)
    assert session.board.cells[0] is Mark.O
    assert session.current is Mark.X
    assert session.move_log == [
        {"player": "X", "cellIndex": 4},
        {"player": "O", "cellIndex": 0},
    ]


def test_human_cannot_move_twice():
    session = GameSession()
    session.on_human_move(0)
    with pytest.raises(InvalidMove):
        session.on_human_move(1)


@pytest.mark.parametrize("index", [4, 9])
def test_invalid_human_cell_rejected(index):
    session = GameSession()
    session.on_human_move(4)
    session.compute_computer_move()
    before = session.board.snapshot()
    with pytest.raises(InvalidMove):
        session.on_human_move(index)
    assert session.board.snapshot() == before
    assert session.current is Mark.X


def test_computer_cannot_move_on_human_turn():
    session = GameSession()
    with pytest.raises(InvalidState):
        session.compute_computer_move()


def test_finished_game_refuses_further_moves():
    session = GameSession(board=board_with(x=(0, 4, 8), o=(1, 2)))
    assert session.result is GameResult.X_WINS
    assert session.status_text() == "User Wins!"
    assert not session.is_computer_turn()
    with pytest.raises(InvalidMove):
        session.on_human_move(3)
    session.current = Mark.O
    with pytest.raises(InvalidState):
        session.compute_computer_move()


def test_human_winning_move_ends_game():
    session = GameSession(board=board_with(x=(0, 4), o=(1, 2)))
    assert session.on_human_move(8) is GameResult.X_WINS
    assert session.current is Mark.X
    assert not session.is_computer_turn()


def test_computer_winning_move_ends_game():
    session = GameSession(board=board_with(x=(1, 2, 5), o=(4, 8)))
    session.current = Mark.O
    move = session.compute_computer_move()
    assert move.index == 0
    assert session.result is GameResult.O_WINS
    assert session.status_text() == "AI Wins!"


def test_last_cell_draw():
    session = GameSession(board=board_with(x=(0, 2, 3, 7), o=(1, 4, 5, 6)))
    assert session.on_human_move(8) is GameResult.DRAW
    assert session.status_text() == "It's a Draw!"


def test_reset_twice_matches_reset_once():
    session = GameSession()
    session.on_human_move(4)
    session.compute_computer_move()
    session.ai_pending = True

    session.reset()
    once = (session.board.snapshot(), session.current, list(session.move_log))
    session.reset()

    assert (session.board.snapshot(), session.current, session.move_log) == once
    assert once == ((Mark.EMPTY,) * 9, Mark.X, [])
    assert session.ai_pending is False
    assert session.epoch == 2


def test_full_game_against_naive_human():
    session = GameSession()
    while session.result is GameResult.IN_PROGRESS:
        session.on_human_move(session.board.available_moves()[0])
        if session.is_computer_turn():
            session.compute_computer_move()
    assert session.result in (GameResult.DRAW, GameResult.O_WINS)


def test_computer_move_without_index_rejected():
    class _NoMoveAI:
        def choose(self, board):
            return Move(index=None, score=0)

    session = GameSession(ai=_NoMoveAI())
    session.on_human_move(4)
    with pytest.raises(InvalidState):
        session.compute_computer_move()
    assert session.board.cells[4] is Mark.X
    assert session.current is Mark.O
