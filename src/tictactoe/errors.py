"""
Error kinds shared by the board, the terminal layer and the CLI.

The set is closed: callers may rely on every failure being one of the
classes below.
"""
from __future__ import annotations


class TicTacToeError(Exception):
    """Base class for every error raised by the game."""


class TerminalIOError(TicTacToeError):
    """Terminal or back-buffer I/O failed."""

    def __init__(self, cause: Exception):
        super().__init__(str(cause))
        self.cause = cause


class CellOccupied(TicTacToeError):
    def __init__(self, x: int, y: int):
        super().__init__(f"cell ({x}, {y}) is not empty")
        self.x = x
        self.y = y


class GameEnded(TicTacToeError):
    def __init__(self) -> None:
        super().__init__("game ended")


class Exit(TicTacToeError):
    """Raised to unwind the event loop on a clean shutdown."""

    def __init__(self) -> None:
        super().__init__("exit")


class MessageError(TicTacToeError):
    """User-facing message, e.g. an invalid command line."""

    def __init__(self, text: str):
        super().__init__(text)
        self.text = text
