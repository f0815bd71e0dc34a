"""
Character back-buffer.

A frame is a grid of character cells, each with a foreground colour and a
bold flag. Everything is drawn into the buffer first and then written to
the terminal in one go with ``to_ansi``.
"""
from __future__ import annotations

from enum import IntEnum
from typing import List, Optional

import numpy as np


class Color(IntEnum):
    DEFAULT = 0
    GRAY = 1
    GREEN = 2
    RED = 3


SGR_FG = {
    Color.DEFAULT: 39,
    Color.GRAY: 90,
    Color.GREEN: 32,
    Color.RED: 31,
}


class Buffer:
    def __init__(self, width: int, height: int):
        self.width = max(width, 0)
        self.height = max(height, 0)
        self.chars = np.full((self.height, self.width), " ", dtype="<U1")
        self.fg = np.zeros((self.height, self.width), dtype=np.int8)
        self.bold = np.zeros((self.height, self.width), dtype=bool)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Buffer):
            return NotImplemented
        return (
            self.chars.shape == other.chars.shape
            and np.array_equal(self.chars, other.chars)
            and np.array_equal(self.fg, other.fg)
            and np.array_equal(self.bold, other.bold)
        )

    def __repr__(self) -> str:
        return f"Buffer({self.width}x{self.height})"

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    # Writes outside the buffer are dropped silently.
    def set_val(self, ch: str, x: int, y: int) -> None:
        if self.contains(x, y):
            self.chars[y, x] = ch

    def set_fg(self, color: Color, x: int, y: int) -> None:
        if self.contains(x, y):
            self.fg[y, x] = int(color)

    def set_bold(self, bold: bool, x: int, y: int) -> None:
        if self.contains(x, y):
            self.bold[y, x] = bold

    def set_str(self, text: str, x: int, y: int) -> None:
        for i, ch in enumerate(text):
            self.set_val(ch, x + i, y)

    def set_str_styled(
        self,
        text: str,
        x: int,
        y: int,
        fg: Color = Color.DEFAULT,
        bold: bool = False,
    ) -> None:
        for i, ch in enumerate(text):
            self.set_val(ch, x + i, y)
            self.set_fg(fg, x + i, y)
            self.set_bold(bold, x + i, y)

    def get(self, x: int, y: int) -> str:
        return str(self.chars[y, x])

    def color_at(self, x: int, y: int) -> Color:
        return Color(int(self.fg[y, x]))

    def lines(self) -> List[str]:
        return ["".join(row) for row in self.chars]

    def to_ansi(self) -> str:
        """Serialise the whole frame with cursor addressing and SGR colours."""
        out: List[str] = []
        for y in range(self.height):
            out.append(f"\x1b[{y + 1};1H")
            cur_fg: Optional[int] = None
            cur_bold: Optional[bool] = None
            for x in range(self.width):
                fg = int(self.fg[y, x])
                bold = bool(self.bold[y, x])
                if bold != cur_bold:
                    out.append("\x1b[1m" if bold else "\x1b[22m")
                    cur_bold = bold
                if fg != cur_fg:
                    out.append(f"\x1b[{SGR_FG[Color(fg)]}m")
                    cur_fg = fg
                out.append(str(self.chars[y, x]))
        out.append("\x1b[0m")
        return "".join(out)
