"""Game history and time travel."""
from .entry import HistoryEntry
from .manager import GameHistory

__all__ = [
    "HistoryEntry",
    "GameHistory",
]
