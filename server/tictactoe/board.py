from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


BOARD_SIZE = 3
CELL_COUNT = BOARD_SIZE * BOARD_SIZE


class Mark(Enum):
    X = "X"
    O = "O"


Cell = Mark | None


@dataclass(frozen=True)
class Board:
    """Immutable 3x3 board, cells indexed 0-8 row-major. None is an empty cell."""
    cells: tuple[Cell, ...] = field(default=(None,) * CELL_COUNT)

    def __post_init__(self):
        # Accept any iterable but store a tuple so the snapshot stays hashable
        cells = tuple(self.cells)
        object.__setattr__(self, "cells", cells)
        if len(cells) != CELL_COUNT:
            raise ValueError(f"Board needs {CELL_COUNT} cells, got {len(self.cells)}")

    @classmethod
    def empty(cls) -> Board:
        return cls()

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __len__(self) -> int:
        return CELL_COUNT

    def is_empty_cell(self, index: int) -> bool:
        return self.cells[index] is None

    def is_full(self) -> bool:
        return all(c is not None for c in self.cells)

    def place(self, index: int, mark: Mark) -> Board:
        """Return a new board with `mark` written at `index`."""
        cells = list(self.cells)
        cells[index] = mark
        return Board(tuple(cells))

    def rows(self) -> list[tuple[Cell, ...]]:
        return [self.cells[r * BOARD_SIZE:(r + 1) * BOARD_SIZE] for r in range(BOARD_SIZE)]

    def pretty(self) -> str:
        lines = [" | ".join(c.value if c else " " for c in row) for row in self.rows()]
        return "\n---------\n".join(lines)

    def to_dict(self) -> dict:
        return {"cells": [c.value if c else None for c in self.cells]}
