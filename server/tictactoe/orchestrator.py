"""Game orchestrator that serializes access to one game's history."""
from __future__ import annotations
import logging
import threading

from .config import GameConfig
from .history import GameHistory

logger = logging.getLogger(__name__)


class GameOrchestrator:
    """Single owner of a GameHistory for the presentation layer.

    Every call takes the lock, so a threaded server cannot interleave the
    truncate-then-append of two moves.
    """

    def __init__(self, config: GameConfig | None = None):
        self.config = config or GameConfig()
        self.history = GameHistory()
        self._lock = threading.Lock()

    def new_game(self) -> dict:
        """Discard the current game and start from an empty board."""
        with self._lock:
            self.history = GameHistory()
            logger.info("New game started")
            return {"status": "ok", "state": self._state()}

    def apply_move(self, cell: int) -> dict:
        """Play at ``cell`` for whoever is next at the viewed step.

        Returns:
            - {"status": "ok", "state": {...}} if the move was played
            - {"status": "ignored", "reason": str, "state": {...}} otherwise
        """
        with self._lock:
            history = self.history
            mark = history.next_mark()
            from_step = history.viewed_step
            dropped = history.latest_step - from_step

            if not history.apply_move(cell):
                reason = self._rejection_reason(cell)
                logger.debug("Ignored move at cell %s (%s)", cell, reason)
                return {"status": "ignored", "reason": reason, "state": self._state()}

            if dropped:
                logger.info("Branched from step %d, dropped %d later step(s)", from_step, dropped)
            logger.debug("%s played cell %d (step %d)\n%s", mark.value, cell,
                         history.viewed_step, history.current_board().pretty())

            winner = history.current_winner()
            if winner is not None:
                logger.info("%s wins at step %d", self.config.names[winner], history.viewed_step)
            return {"status": "ok", "state": self._state()}

    def jump_to(self, step: int) -> dict:
        """Move the viewed step; history contents are left alone."""
        with self._lock:
            try:
                self.history.jump_to(step)
            except ValueError as e:
                logger.warning("Rejected jump: %s", e)
                return {"status": "error", "message": str(e)}
            logger.debug("Jumped to step %d", step)
            return {"status": "ok", "state": self._state()}

    def get_state(self) -> dict:
        with self._lock:
            return self._state()

    def get_history(self) -> list[dict]:
        """Entries for the jump-to-move menu."""
        with self._lock:
            return [e.to_dict() for e in self.history.move_list()]

    def _rejection_reason(self, cell: int) -> str:
        board = self.history.current_board()
        if self.history.current_winner() is not None:
            return "game_over"
        if not 0 <= cell < len(board):
            return "out_of_range"
        return "occupied"

    def _state(self) -> dict:
        state = self.history.to_dict(self.config.names)
        state["players"] = self.config.to_dict()["players"]
        return state
