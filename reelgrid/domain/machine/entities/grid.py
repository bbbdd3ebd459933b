# reelgrid/domain/machine/entities/grid.py
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple


@dataclass(frozen=True)
class Grid:
    """
    Row-major grid of symbol indices. A 3-reel machine is a 1x3 grid.
    """
    rows: int
    cols: int
    cells: Tuple[int, ...]

    def __post_init__(self):
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Grid dimensions must be positive, got {self.rows}x{self.cols}")
        # Accept any sequence but always store a tuple
        object.__setattr__(self, "cells", tuple(int(c) for c in self.cells))
        if len(self.cells) != self.rows * self.cols:
            raise ValueError(
                f"Grid of {self.rows}x{self.cols} needs {self.rows * self.cols} cells, got {len(self.cells)}"
            )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Grid":
        """Build a grid from a list of equally long rows."""
        if not rows:
            raise ValueError("Grid needs at least one row")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("All grid rows must have the same length")
        return cls(len(rows), width, tuple(symbol for row in rows for symbol in row))

    def index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def row(self, row: int) -> Tuple[int, ...]:
        start = row * self.cols
        return self.cells[start:start + self.cols]

    def to_rows(self) -> List[List[int]]:
        return [list(self.row(r)) for r in range(self.rows)]

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> int:
        return self.cells[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self.cells)
