"""
Board state machine for the m,n,k-game.
Notes:
- Cells are stored row-major: index = x + y * width.
- After every placement the whole grid is rescanned; the first winning run
  found in row-major order (directions tried in ``DIRECTIONS`` order) is the
  one recorded for the strike-through.
- Once the game is over, placements are rejected until ``restart``.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional, Tuple

from .cell import Cell
from .errors import CellOccupied, GameEnded

Direction = Tuple[int, int]

# horizontal, vertical, diagonal down-right, diagonal down-left
DIRECTIONS: Tuple[Direction, ...] = ((1, 0), (0, 1), (1, 1), (-1, 1))

MIN_SIZE = 3
MIN_WIN_LEN = 3


class Coord(NamedTuple):
    x: int
    y: int


class WinSegment(NamedTuple):
    origin: Coord
    direction: Direction

    def coords(self, win_len: int) -> Iterator[Coord]:
        dx, dy = self.direction
        for i in range(win_len):
            yield Coord(self.origin.x + i * dx, self.origin.y + i * dy)


class GameState(Enum):
    IN_PROGRESS = "in_progress"
    CROSS_WINS = "cross_wins"
    CIRCLE_WINS = "circle_wins"
    DRAW = "draw"

    @classmethod
    def won_by(cls, cell: Cell) -> "GameState":
        if cell is Cell.CROSS:
            return cls.CROSS_WINS
        if cell is Cell.CIRCLE:
            return cls.CIRCLE_WINS
        raise ValueError(f"Empty cell cannot win: {cell}")

    @property
    def winner(self) -> Optional[Cell]:
        if self is GameState.CROSS_WINS:
            return Cell.CROSS
        if self is GameState.CIRCLE_WINS:
            return Cell.CIRCLE
        return None

    @property
    def is_over(self) -> bool:
        return self is not GameState.IN_PROGRESS


class Board:
    """W x H grid with a cursor and a K-in-a-row win condition."""

    def __init__(self, width: int, height: int, win_len: int):
        if width < MIN_SIZE or height < MIN_SIZE:
            raise ValueError(f"Board must be at least {MIN_SIZE}x{MIN_SIZE}, got {width}x{height}")
        if win_len < MIN_WIN_LEN:
            raise ValueError(f"Win length must be at least {MIN_WIN_LEN}, got {win_len}")
        self.size = Coord(width, height)
        self.win_len = win_len
        self.cells: List[Cell] = [Cell.EMPTY] * (width * height)
        self.selected = Coord(width // 2, height // 2)
        self.win: Optional[WinSegment] = None
        self._state = GameState.IN_PROGRESS

    def __repr__(self) -> str:
        return (
            f"Board(size={tuple(self.size)}, win_len={self.win_len}, "
            f"selected={tuple(self.selected)}, state={self._state.name})"
        )

    @property
    def width(self) -> int:
        return self.size.x

    @property
    def height(self) -> int:
        return self.size.y

    def cell_at(self, x: int, y: int) -> Cell:
        return self.cells[x + y * self.width]

    def empty_cells(self) -> List[Coord]:
        return [
            Coord(i % self.width, i // self.width)
            for i, c in enumerate(self.cells)
            if c is Cell.EMPTY
        ]

    def state(self) -> GameState:
        return self._state

    def copy(self) -> "Board":
        other = Board.__new__(Board)
        other.size = self.size
        other.win_len = self.win_len
        other.cells = self.cells[:]
        other.selected = self.selected
        other.win = self.win
        other._state = self._state
        return other

    def restart(self) -> None:
        """Clear all marks and the result; the cursor stays where it is."""
        self.cells = [Cell.EMPTY] * (self.width * self.height)
        self._state = GameState.IN_PROGRESS
        self.win = None

    def set(self, cell: Cell, x: int, y: int) -> GameState:
        """Place ``cell`` at (x, y) and return the recomputed game state.

        Raises GameEnded when the game is already decided and CellOccupied
        when the target is taken; the board is left untouched in both cases.
        """
        # Empty marks and off-board coordinates are caller bugs, not game events.
        if cell is Cell.EMPTY:
            raise ValueError("Cannot place an empty cell")
        if not self._in_bounds(x, y):
            raise ValueError(f"Coordinate ({x}, {y}) outside {self.width}x{self.height} board")
        if self._state.is_over:
            raise GameEnded()
        idx = x + y * self.width
        if self.cells[idx] is not Cell.EMPTY:
            raise CellOccupied(x, y)

        self.cells[idx] = cell
        self._state = self._check_state()
        logging.debug("placed %s at (%d, %d) -> %s", cell.symbol, x, y, self._state.name)
        return self._state

    def set_selected(self, cell: Cell) -> GameState:
        return self.set(cell, self.selected.x, self.selected.y)

    def select(self, coord: Tuple[int, int]) -> None:
        x, y = coord
        if not self._in_bounds(x, y):
            raise ValueError(f"Coordinate ({x}, {y}) outside {self.width}x{self.height} board")
        self.selected = Coord(x, y)

    def up(self) -> None:
        self.selected = Coord(self.selected.x, max(self.selected.y - 1, 0))

    def down(self) -> None:
        self.selected = Coord(self.selected.x, min(self.selected.y + 1, self.height - 1))

    def left(self) -> None:
        self.selected = Coord(max(self.selected.x - 1, 0), self.selected.y)

    def right(self) -> None:
        self.selected = Coord(min(self.selected.x + 1, self.width - 1), self.selected.y)

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _fits(self, x: int, y: int, direction: Direction) -> bool:
        k = self.win_len
        dx, dy = direction
        if dx == 1 and x + k > self.width:
            return False
        if dx == -1 and x + 1 < k:
            return False
        if dy == 1 and y + k > self.height:
            return False
        return True

    def _check_state(self) -> GameState:
        self.win = None
        full = True
        for y in range(self.height):
            for x in range(self.width):
                cell = self.cell_at(x, y)
                if cell is Cell.EMPTY:
                    full = False
                    continue
                for d in DIRECTIONS:
                    if self._fits(x, y, d) and self._run_matches(x, y, d, cell):
                        self.win = WinSegment(Coord(x, y), d)
                        return GameState.won_by(cell)
        return GameState.DRAW if full else GameState.IN_PROGRESS

    def _run_matches(self, x: int, y: int, direction: Direction, cell: Cell) -> bool:
        dx, dy = direction
        for i in range(1, self.win_len):
            if self.cell_at(x + i * dx, y + i * dy) is not cell:
                return False
        return True
