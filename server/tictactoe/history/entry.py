"""Rows of the jump-to-move menu."""
from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class HistoryEntry:
    """One selectable step of the history list."""
    step: int
    is_initial: bool

    @property
    def description(self) -> str:
        if self.is_initial:
            return "Go to game start"
        return f"Go to move #{self.step}"

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "is_initial": self.is_initial,
            "description": self.description,
        }
