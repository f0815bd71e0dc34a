"""
Terminal plumbing: raw key decoding, input polling, frame output and the
scoped full-screen session.

The session owns three pieces of process-wide state (alternate screen,
raw input mode, hidden cursor) and gives all of them back on every exit
path, exceptions included.
"""
from __future__ import annotations

import codecs
import logging
import os
import signal
import sys
import termios
import tty
from collections import deque
from contextlib import contextmanager
from select import select
from typing import Callable, Deque, Iterator, List, Optional, TextIO, Tuple

from .buffer import Buffer
from .errors import Exit, TerminalIOError
from .events import Event, Key, Resize

ENTER_SCREEN = "\x1b[?1049h\x1b[2J\x1b[?25l"
LEAVE_SCREEN = "\x1b[?1049l\x1b[?25h"

# How long to wait for the rest of an escape sequence before treating a
# lone ESC as a key press.
ESC_GRACE = 0.05

ARROWS = {"A": Key.UP, "B": Key.DOWN, "C": Key.RIGHT, "D": Key.LEFT}

CHAR_KEYS = {
    "\r": Key.CONFIRM,
    "\n": Key.CONFIRM,
    "k": Key.UP,
    "j": Key.DOWN,
    "l": Key.RIGHT,
    "h": Key.LEFT,
    "r": Key.RESTART,
    "R": Key.RESTART,
    "q": Key.QUIT,
    "\x03": Key.QUIT,  # Ctrl-C arrives as a byte in raw mode
}


def decode_keys(buf: str, final: bool = True) -> Tuple[List[Key], str]:
    """Parse raw terminal input into keys.

    Returns (keys, remaining). With ``final=False`` an incomplete escape
    sequence at the end is kept in ``remaining`` for the next read; with
    ``final=True`` a trailing lone ESC counts as Quit.
    """
    out: List[Key] = []
    i = 0
    n = len(buf)
    while i < n:
        c = buf[i]
        if c != "\x1b":
            out.append(CHAR_KEYS.get(c, Key.OTHER))
            i += 1
            continue

        if i + 1 >= n:
            if not final:
                break
            out.append(Key.QUIT)
            i += 1
            continue

        n1 = buf[i + 1]
        if n1 == "O":
            # SS3: ESC O <final>
            if i + 2 >= n:
                if not final:
                    break
                out.append(Key.OTHER)
                i = n
                continue
            out.append(ARROWS.get(buf[i + 2], Key.OTHER))
            i += 3
            continue
        if n1 == "[":
            # CSI: ESC [ <params> <final byte in @..~>
            j = i + 2
            while j < n and not ("@" <= buf[j] <= "~"):
                j += 1
            if j >= n:
                if not final:
                    break
                out.append(Key.OTHER)
                i = n
                continue
            out.append(ARROWS.get(buf[j], Key.OTHER) if j == i + 2 else Key.OTHER)
            i = j + 1
            continue

        # ESC followed by an ordinary character: the ESC itself was pressed.
        out.append(Key.QUIT)
        i += 1
    return out, buf[i:]


class KeyReader:
    """Polls a raw-mode file descriptor for key presses and size changes."""

    def __init__(self, fd: int, size: Optional[Callable[[], Tuple[int, int]]] = None):
        self.fd = fd
        self._size = size
        self._last_size = size() if size is not None else None
        self._pending: Deque[Event] = deque()
        self._buf = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def poll(self, timeout: float) -> Optional[Event]:
        """Return the next event, waiting at most ``timeout`` seconds."""
        if self._pending:
            return self._pending.popleft()

        resize = self._check_resize()
        if resize is not None:
            return resize

        if not self._wait(timeout):
            return None
        self._buf += self._read()
        keys, self._buf = decode_keys(self._buf, final=False)
        if self._buf and not self._wait(ESC_GRACE):
            tail, self._buf = decode_keys(self._buf, final=True)
            keys.extend(tail)
        self._pending.extend(keys)
        if self._pending:
            return self._pending.popleft()
        return None

    def _check_resize(self) -> Optional[Resize]:
        if self._size is None:
            return None
        current = self._size()
        if current == self._last_size:
            return None
        self._last_size = current
        logging.debug("terminal resized to %dx%d", *current)
        return Resize(*current)

    def _wait(self, timeout: float) -> bool:
        try:
            ready, _w, _e = select([self.fd], [], [], timeout)
        except OSError as e:
            raise TerminalIOError(e) from e
        return bool(ready)

    def _read(self) -> str:
        try:
            data = os.read(self.fd, 4096)
        except OSError as e:
            raise TerminalIOError(e) from e
        if not data:
            # select keeps reporting a closed input as ready
            raise TerminalIOError(EOFError("end of input"))
        return self._decoder.decode(data)


class Terminal:
    """Output side of the session: size query and frame presentation."""

    def __init__(self, stream: Optional[TextIO] = None, fd: Optional[int] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.fd = fd

    def size(self) -> Tuple[int, int]:
        fd = self.fd if self.fd is not None else self.stream.fileno()
        try:
            sz = os.get_terminal_size(fd)
        except OSError as e:
            raise TerminalIOError(e) from e
        return sz.columns, sz.lines

    def write(self, text: str) -> None:
        try:
            self.stream.write(text)
            self.stream.flush()
        except OSError as e:
            raise TerminalIOError(e) from e

    def present(self, buffer: Buffer) -> None:
        self.write(buffer.to_ansi())


def _raise_exit(signum, frame) -> None:
    raise Exit()


@contextmanager
def terminal_session(
    stream: Optional[TextIO] = None, in_fd: Optional[int] = None
) -> Iterator[Terminal]:
    """Enter the full-screen raw-mode session and always restore on exit."""
    term = Terminal(stream)
    fd = sys.stdin.fileno() if in_fd is None else in_fd
    try:
        saved = termios.tcgetattr(fd)
    except (OSError, termios.error) as e:
        raise TerminalIOError(e) from e

    term.write(ENTER_SCREEN)
    old_handler = signal.signal(signal.SIGTERM, _raise_exit)
    logging.debug("terminal session acquired")
    try:
        try:
            tty.setraw(fd)
        except (OSError, termios.error) as e:
            raise TerminalIOError(e) from e
        yield term
    finally:
        signal.signal(signal.SIGTERM, old_handler)
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        except (OSError, termios.error) as e:
            raise TerminalIOError(e) from e
        finally:
            term.write(LEAVE_SCREEN)
            logging.debug("terminal session released")
