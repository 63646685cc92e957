"""Board history with a movable cursor for time travel."""
from __future__ import annotations

from ..board import Board, Mark, CELL_COUNT
from ..rules import GameStatus, evaluate, game_status, winning_line
from .entry import HistoryEntry


class GameHistory:
    """Owns the board snapshots of one game and the step being viewed.

    Snapshot 0 is always the empty board. Whose turn it is and who has won
    are derived from ``viewed_step`` on every read, never stored.
    """

    def __init__(self):
        self.snapshots: tuple[Board, ...] = (Board.empty(),)
        self.viewed_step = 0

    def __len__(self) -> int:
        return len(self.snapshots)

    @property
    def latest_step(self) -> int:
        return len(self.snapshots) - 1

    def apply_move(self, cell_index: int) -> bool:
        """Play the next mark at ``cell_index`` from the viewed step.

        Snapshots after the viewed step are discarded when the move succeeds.
        Returns False and leaves everything untouched when the cell is taken,
        the viewed board is already won, or the index is off the board.
        """
        kept = self.snapshots[:self.viewed_step + 1]
        current = kept[-1]
        if evaluate(current) is not None:
            return False
        if not 0 <= cell_index < CELL_COUNT or not current.is_empty_cell(cell_index):
            return False

        mark = Mark.X if self.viewed_step % 2 == 0 else Mark.O
        self.snapshots = kept + (current.place(cell_index, mark),)
        self.viewed_step = len(self.snapshots) - 1
        return True

    def jump_to(self, step: int) -> None:
        """Move the cursor to ``step`` without touching the snapshots."""
        if not 0 <= step < len(self.snapshots):
            raise ValueError(f"Step {step} not in history (0..{self.latest_step})")
        self.viewed_step = step

    def current_board(self) -> Board:
        return self.snapshots[self.viewed_step]

    def current_winner(self) -> Mark | None:
        return evaluate(self.current_board())

    def winning_line(self) -> tuple[int, int, int] | None:
        return winning_line(self.current_board())

    def is_x_next(self) -> bool:
        return self.viewed_step % 2 == 0

    def next_mark(self) -> Mark:
        return Mark.X if self.is_x_next() else Mark.O

    def status(self) -> GameStatus:
        return game_status(self.current_board())

    def status_text(self, names: dict[Mark, str] | None = None) -> str:
        """Status line for the viewed step, e.g. "Winner: X" or "Next player: O"."""
        names = names or {}
        status = self.status()
        if status is GameStatus.WON:
            winner = self.current_winner()
            return f"Winner: {names.get(winner, winner.value)}"
        if status is GameStatus.DRAW:
            return "Draw"
        mark = self.next_mark()
        return f"Next player: {names.get(mark, mark.value)}"

    def move_list(self) -> list[HistoryEntry]:
        return [HistoryEntry(step=i, is_initial=(i == 0)) for i in range(len(self.snapshots))]

    def to_dict(self, names: dict[Mark, str] | None = None) -> dict:
        winner = self.current_winner()
        line = self.winning_line()
        return {
            "board": self.current_board().to_dict()["cells"],
            "viewed_step": self.viewed_step,
            "latest_step": self.latest_step,
            "x_is_next": self.is_x_next(),
            "next_player": self.next_mark().value,
            "winner": winner.value if winner else None,
            "winning_line": list(line) if line else None,
            "game_status": self.status().value,
            "status_text": self.status_text(names),
            "moves": [e.to_dict() for e in self.move_list()],
        }
