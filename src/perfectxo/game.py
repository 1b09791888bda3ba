"""Board model and outcome detection for PerfectXO (3x3 tic-tac-toe)."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Tuple

BOARD_CELLS = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class InvalidMove(ValueError):
    """Placement on an occupied or out-of-range cell, or out of turn."""


class InvalidState(RuntimeError):
    """Search or computer move requested on a board that has no move to make."""


class Mark(str, Enum):
    EMPTY = " "
    X = "X"
    O = "O"  # noqa: E741

    @property
    def opponent(self) -> "Mark":
        if self is Mark.X:
            return Mark.O
        if self is Mark.O:
            return Mark.X
        raise ValueError("Empty cell has no opponent")


class GameResult(str, Enum):
    IN_PROGRESS = "in_progress"
    X_WINS = "x_wins"
    O_WINS = "o_wins"
    DRAW = "draw"


def _as_mark(value: object) -> Mark:
    if isinstance(value, Mark):
        return value
    try:
        return Mark(value)
    except ValueError as exc:
        raise InvalidMove(f"Unknown mark {value!r}") from exc


def _check_index(index: int) -> None:
    if not 0 <= index < BOARD_CELLS:
        raise InvalidMove(f"Cell {index} is off the board")


@dataclass
class Board:
    # Row-major, index 0 is the top-left cell
    cells: List[Mark] = field(default_factory=lambda: [Mark.EMPTY] * BOARD_CELLS)

    def __post_init__(self) -> None:
        if len(self.cells) != BOARD_CELLS:
            raise InvalidMove(
                f"Board needs {BOARD_CELLS} cells, got {len(self.cells)}"
            )
        self.cells = [_as_mark(c) for c in self.cells]

    def place(self, index: int, mark: Mark) -> None:
        mark = _as_mark(mark)
        if mark is Mark.EMPTY:
            raise InvalidMove("Only X or O can be placed")
        _check_index(index)
        if self.cells[index] is not Mark.EMPTY:
            raise InvalidMove(f"Cell {index} already occupied")
        self.cells[index] = mark

    def clear(self, index: int) -> None:
        _check_index(index)
        self.cells[index] = Mark.EMPTY

    @contextmanager
    def occupy(self, index: int, mark: Mark) -> Iterator[None]:
        """Place ``mark`` for the duration of the block, then clear the cell."""
        self.place(index, mark)
        try:
            yield
        finally:
            self.clear(index)

    def has_win(self, mark: Mark) -> bool:
        mark = _as_mark(mark)
        cells = self.cells
        return any(
            cells[a] is mark and cells[b] is mark and cells[c] is mark
            for a, b, c in WINNING_LINES
        )

    def is_full(self) -> bool:
        return all(c is not Mark.EMPTY for c in self.cells)

    def available_moves(self) -> List[int]:
        """Empty cell indices in ascending order."""
        return [i for i, c in enumerate(self.cells) if c is Mark.EMPTY]

    def result(self) -> GameResult:
        if self.has_win(Mark.X):
            return GameResult.X_WINS
        if self.has_win(Mark.O):
            return GameResult.O_WINS
        if self.is_full():
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    def reset(self) -> None:
        self.cells[:] = [Mark.EMPTY] * BOARD_CELLS

    def snapshot(self) -> Tuple[Mark, ...]:
        return tuple(self.cells)
