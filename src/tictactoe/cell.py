"""
Cell values for the m,n,k-game.
Notes:
- A board is a flat list of cells; EMPTY marks a free square.
- X always starts; ``next`` flips the turn after a successful placement.
"""
from enum import Enum


class Cell(Enum):
    CROSS = "X"
    CIRCLE = "O"
    EMPTY = ""

    def next(self) -> "Cell":
        """Mark of the player moving after this one."""
        if self is Cell.CROSS:
            return Cell.CIRCLE
        return Cell.CROSS

    @property
    def symbol(self) -> str:
        return self.value
