"""
App controller: turns input events into board operations and frames.

The controller tracks whose turn it is; the board decides whether a
placement is legal. Rejected placements leave the turn unchanged.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Tuple

from .board import Board, GameState
from .buffer import Buffer, Color
from .cell import Cell
from .errors import CellOccupied, Exit, GameEnded
from .events import Event, Key, Resize
from .render import MARK_COLORS, board_height, board_width, render_board

Span = Tuple[str, Color]

SMALL_SCREEN = ("Terminal too small!", "You have to increase terminal size")


class Screen(Protocol):
    def size(self) -> Tuple[int, int]: ...

    def present(self, buffer: Buffer) -> None: ...


class EventSource(Protocol):
    def poll(self, timeout: float) -> Optional[Event]: ...


def status_spans(board: Board, player: Cell) -> List[Span]:
    """Banner under the board: whose turn it is, who won, or a draw."""
    state = board.state()
    if state is GameState.DRAW:
        return [("Draw!", Color.DEFAULT)]
    if state.winner is not None:
        mark, msg = state.winner, "wins!"
    else:
        mark, msg = player, "turn."
    return [(mark.symbol, MARK_COLORS[mark]), (" " + msg, Color.DEFAULT)]


def compose_frame(board: Board, player: Cell, cols: int, rows: int) -> Buffer:
    """Lay out one full-terminal frame: centred board plus status line."""
    buffer = Buffer(cols, rows)
    width = board_width(board)
    height = board_height(board) + 1
    if cols < width or rows < height:
        _small_screen(buffer)
        return buffer

    ox = (cols - width) // 2
    oy = (rows - height) // 2
    render_board(board, buffer, (ox, oy))

    spans = status_spans(board, player)
    text_len = sum(len(text) for text, _ in spans)
    x = ox + (width - text_len) // 2
    y = oy + height - 1
    for text, color in spans:
        buffer.set_str_styled(text, x, y, color)
        x += len(text)
    return buffer


def _small_screen(buffer: Buffer) -> None:
    top = (buffer.height - len(SMALL_SCREEN)) // 2
    for i, line in enumerate(SMALL_SCREEN):
        x = max((buffer.width - len(line)) // 2, 0)
        buffer.set_str_styled(line, x, top + i, bold=(i == 0))


class App:
    def __init__(self, board: Board, screen: Screen):
        self.board = board
        self.screen = screen
        self.player = Cell.CROSS

    def run(self, events: EventSource, poll_interval: float = 0.1) -> None:
        """Render, then handle events until one raises (normally Exit)."""
        self.render()
        while True:
            event = events.poll(poll_interval)
            if event is not None:
                self.handle(event)

    def handle(self, event: Event) -> None:
        if isinstance(event, Resize):
            logging.debug("resize to %dx%d", event.width, event.height)
        elif event is Key.UP:
            self.board.up()
        elif event is Key.DOWN:
            self.board.down()
        elif event is Key.LEFT:
            self.board.left()
        elif event is Key.RIGHT:
            self.board.right()
        elif event is Key.CONFIRM:
            self._confirm()
        elif event is Key.RESTART:
            self.board.restart()
            self.player = Cell.CROSS
            logging.info("game restarted")
        elif event is Key.QUIT:
            raise Exit()
        else:
            return
        self.render()

    def render(self) -> Buffer:
        cols, rows = self.screen.size()
        frame = compose_frame(self.board.copy(), self.player, cols, rows)
        self.screen.present(frame)
        return frame

    def _confirm(self) -> None:
        try:
            state = self.board.set_selected(self.player)
        except (CellOccupied, GameEnded) as e:
            logging.debug("placement rejected: %s", e)
            return
        self.player = self.player.next()
        if state.is_over:
            logging.info("game over: %s", state.name)
