"""tictactoe package.

Generalized tic-tac-toe (m,n,k-game) for the terminal: a board engine, a
box-drawing renderer and a keyboard-driven controller.

Convenience imports are exposed for common workflows.
"""

from .app import App, compose_frame
from .board import Board, Coord, GameState, WinSegment
from .buffer import Buffer, Color
from .cell import Cell
from .render import render_board

__all__ = [
    "App",
    "Board",
    "Buffer",
    "Cell",
    "Color",
    "Coord",
    "GameState",
    "WinSegment",
    "compose_frame",
    "render_board",
]
