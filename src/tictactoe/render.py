"""
Box-drawing renderer for a Board.

Geometry: every board cell is 4 columns x 2 rows of characters plus a
shared border, so a W x H board takes (4W + 1) x (2H + 1) characters and
cell (x, y) has its mark at (4x + 2, 2y + 1) relative to the origin.

Layers are painted in a fixed order, later ones over earlier ones:
inner grid, outer frame, marks, cursor frame, strike-through.
Rendering only reads the board.
"""
from __future__ import annotations

from typing import Tuple

from .board import Board, Coord, WinSegment
from .buffer import Buffer, Color
from .cell import Cell

CELL_W = 4
CELL_H = 2

MARK_COLORS = {
    Cell.CROSS: Color.GREEN,
    Cell.CIRCLE: Color.RED,
    Cell.EMPTY: Color.DEFAULT,
}


def board_width(board: Board) -> int:
    return board.width * CELL_W + 1


def board_height(board: Board) -> int:
    return board.height * CELL_H + 1


def render_board(board: Board, buffer: Buffer, origin: Tuple[int, int] = (0, 0)) -> None:
    ox, oy = origin
    _render_inner(board, buffer, ox, oy)
    _render_outer(board, buffer, ox, oy)
    _render_cells(board, buffer, ox, oy)
    _render_selected(board, buffer, ox, oy)
    if board.win is not None:
        _render_win(board, buffer, ox, oy, board.win)


def cursor_frame(board: Board) -> Tuple[str, str]:
    """Top and bottom rows of the cursor frame, joined to the light border."""
    x, y = board.selected
    last_x = x + 1 == board.width
    last_y = y + 1 == board.height
    if x == 0 and y == 0:
        return "┏━━━┱", "┡━━━╃"
    if x == 0 and last_y:
        return "┢━━━╅", "┗━━━┹"
    if last_x and y == 0:
        return "┲━━━┓", "╄━━━┩"
    if last_x and last_y:
        return "╆━━━┪", "┺━━━┛"
    if y == 0:
        return "┲━━━┱", "╄━━━╃"
    if last_y:
        return "╆━━━╅", "┺━━━┹"
    if x == 0:
        return "┢━━━╅", "┡━━━╃"
    if last_x:
        return "╆━━━┪", "╄━━━┩"
    return "╆━━━╅", "╄━━━╃"


def _render_inner(board: Board, buffer: Buffer, ox: int, oy: int) -> None:
    line = "───┼" * board.width
    for y in range(1, board.height):
        buffer.set_str_styled(line, ox + 1, oy + y * CELL_H, Color.GRAY)

    line = "   │" * board.width
    for y in range(board.height):
        buffer.set_str_styled(line, ox + 1, oy + y * CELL_H + 1, Color.GRAY)


def _render_outer(board: Board, buffer: Buffer, ox: int, oy: int) -> None:
    bottom = board.height * CELL_H
    right = board.width * CELL_W

    buffer.set_str_styled("───┬" * board.width, ox + 1, oy, Color.GRAY)
    buffer.set_str_styled("───┴" * board.width, ox + 1, oy + bottom, Color.GRAY)

    for y in range(board.height):
        row = oy + y * CELL_H
        _border_part(buffer, "│", ox, row + 1)
        _border_part(buffer, "├", ox, row + 2)
        _border_part(buffer, "│", ox + right, row + 1)
        _border_part(buffer, "┤", ox + right, row + 2)

    _border_part(buffer, "┌", ox, oy)
    _border_part(buffer, "┐", ox + right, oy)
    _border_part(buffer, "┘", ox + right, oy + bottom)
    _border_part(buffer, "└", ox, oy + bottom)


def _border_part(buffer: Buffer, ch: str, x: int, y: int) -> None:
    buffer.set_val(ch, x, y)
    buffer.set_fg(Color.GRAY, x, y)


def _render_cells(board: Board, buffer: Buffer, ox: int, oy: int) -> None:
    for y in range(board.height):
        for x in range(board.width):
            cell = board.cell_at(x, y)
            if cell is Cell.EMPTY:
                continue
            buffer.set_str_styled(
                cell.symbol,
                ox + x * CELL_W + 2,
                oy + y * CELL_H + 1,
                MARK_COLORS[cell],
            )


def _render_selected(board: Board, buffer: Buffer, ox: int, oy: int) -> None:
    sx = ox + board.selected.x * CELL_W
    sy = oy + board.selected.y * CELL_H
    top, bottom = cursor_frame(board)
    buffer.set_str_styled(top, sx, sy, bold=True)
    buffer.set_str_styled(bottom, sx, sy + 2, bold=True)
    buffer.set_str_styled("┃", sx, sy + 1, bold=True)
    buffer.set_str_styled("┃", sx + CELL_W, sy + 1, bold=True)


def _render_win(board: Board, buffer: Buffer, ox: int, oy: int, win: WinSegment) -> None:
    color = MARK_COLORS[board.cell_at(*win.origin)]
    direction = win.direction
    if direction == (1, 0):
        _cross_horizontal(board, buffer, ox, oy, win.origin, color)
    elif direction == (0, 1):
        _cross_line(board, buffer, ox, oy, win, color, "|", " ", " ", (2, 0))
    elif direction == (1, 1):
        _cross_line(board, buffer, ox, oy, win, color, "\\", "`", "⹁", (0, 0))
    elif direction == (-1, 1):
        _cross_line(board, buffer, ox, oy, win, color, "/", ",", "'", (4, 0))


def _cross_horizontal(
    board: Board, buffer: Buffer, ox: int, oy: int, origin: Coord, color: Color
) -> None:
    x = ox + origin.x * CELL_W + 1
    y = oy + origin.y * CELL_H + 1
    for i in range(board.win_len * 2):
        _paint(buffer, "-", color, x + i * 2, y)


def _cross_line(
    board: Board,
    buffer: Buffer,
    ox: int,
    oy: int,
    win: WinSegment,
    color: Color,
    line: str,
    left: str,
    right: str,
    offset: Tuple[int, int],
) -> None:
    """Draw ``line`` through the run, flanking each mark with filler glyphs.

    The line glyph lands on the K + 1 border crossings (step 4 columns,
    2 rows); the fillers sit one column left and right of each mark.
    """
    dx, dy = win.direction
    x = ox + win.origin.x * CELL_W + offset[0]
    y = oy + win.origin.y * CELL_H + offset[1]
    for _ in range(board.win_len):
        _paint(buffer, line, color, x, y)
        x += dx * 2
        y += dy
        _paint(buffer, left, color, x - 1, y)
        _paint(buffer, right, color, x + 1, y)
        x += dx * 2
        y += dy
    _paint(buffer, line, color, x, y)


def _paint(buffer: Buffer, ch: str, color: Color, x: int, y: int) -> None:
    buffer.set_val(ch, x, y)
    buffer.set_fg(color, x, y)
