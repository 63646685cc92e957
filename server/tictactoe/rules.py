"""Win and draw detection for a single board."""
from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .board import Board, Mark


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


# Checked in this order; the first owned line decides the winner.
WINNING_LINES: tuple[tuple[int, int, int], ...] = (
    # Rows
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    # Columns
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    # Diagonals
    (0, 4, 8), (2, 4, 6),
)


def winning_line(board: Board) -> tuple[int, int, int] | None:
    """Return the first line whose three cells hold the same mark."""
    for line in WINNING_LINES:
        a, b, c = line
        if board[a] is not None and board[a] == board[b] == board[c]:
            return line
    return None


def evaluate(board: Board) -> Mark | None:
    """Return the mark owning a complete line, or None.

    A full board without a line also gives None; use is_draw() or
    game_status() to tell a draw from a game still in progress.
    """
    line = winning_line(board)
    if line is None:
        return None
    return board[line[0]]


def is_draw(board: Board) -> bool:
    return board.is_full() and evaluate(board) is None


def game_status(board: Board) -> GameStatus:
    if evaluate(board) is not None:
        return GameStatus.WON
    if board.is_full():
        return GameStatus.DRAW
    return GameStatus.IN_PROGRESS
