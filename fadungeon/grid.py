"""A fixed-size two-dimensional grid of tile values indexed by (x, y)."""

from __future__ import annotations

from typing import Iterator


class Grid:
    """A width by height grid of integers, addressed as ``grid[x, y]``."""

    def __init__(self, width: int, height: int, fill: int = 0) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"invalid grid size {width}x{height}")
        self.width = width
        self.height = height
        self._columns = [[fill] * height for _ in range(width)]

    def __contains__(self, position: object) -> bool:
        if not isinstance(position, tuple) or len(position) != 2:
            return False
        x, y = position
        return 0 <= x < self.width and 0 <= y < self.height

    def _check(self, x: int, y: int) -> None:
        if (x, y) not in self:
            raise IndexError(f"({x}, {y}) outside {self.width}x{self.height} grid")

    def __getitem__(self, position: tuple[int, int]) -> int:
        x, y = position
        self._check(x, y)
        return self._columns[x][y]

    def __setitem__(self, position: tuple[int, int], value: int) -> None:
        x, y = position
        self._check(x, y)
        self._columns[x][y] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (self.width, self.height, self._columns) == (
            other.width,
            other.height,
            other._columns,
        )

    def __repr__(self) -> str:
        return f"Grid({self.width}, {self.height})"

    def get(self, x: int, y: int, default: int = 0) -> int:
        """Return the value at (x, y), or ``default`` outside the grid."""
        if (x, y) not in self:
            return default
        return self._columns[x][y]

    def fill(self, value: int) -> None:
        """Set every cell to ``value``."""
        for column in self._columns:
            column[:] = [value] * self.height

    def cells(self) -> Iterator[tuple[int, int, int]]:
        """Yield ``(x, y, value)`` for every cell, x outermost."""
        for x, column in enumerate(self._columns):
            for y, value in enumerate(column):
                yield x, y, value