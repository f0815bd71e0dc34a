from __future__ import annotations

import argparse
import logging
import os
import sys
from importlib import metadata
from pathlib import Path
from typing import List, NoReturn, Optional, Tuple

from . import config
from .app import App
from .board import MIN_SIZE, MIN_WIN_LEN, Board
from .errors import Exit, MessageError, TicTacToeError
from .term import KeyReader, terminal_session

MAX_DEFAULT_WIN_LEN = 5

RED = "\x1b[31m"
RESET = "\x1b[0m"


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that reports problems as MessageError instead of exiting 2."""

    def error(self, message: str) -> NoReturn:
        raise MessageError(message)


def build_parser() -> ArgumentParser:
    p = ArgumentParser(
        prog="tictactoe",
        description="Generalized tic-tac-toe in the terminal: get K marks in a row on a W x H grid.",
        epilog="Keys: arrows or h/j/k/l move, Enter places, r restarts, q or Esc quits.",
    )
    p.add_argument(
        "-s",
        "--size",
        nargs=2,
        type=int,
        metavar=("W", "H"),
        default=None,
        help="Board width and height (default: fit the terminal)",
    )
    p.add_argument(
        "-w",
        "--win",
        type=int,
        metavar="K",
        default=None,
        help=f"Marks in a row needed to win (default: min(max(W, H), {MAX_DEFAULT_WIN_LEN}))",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write logs to this file (default: $TTT_LOG_FILE, otherwise warnings only)",
    )
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print the detected terminal size, output encoding and resulting board, then exit",
    )
    return p


def validate_args(ns: argparse.Namespace) -> None:
    if ns.size is not None:
        w, h = ns.size
        if w < MIN_SIZE or h < MIN_SIZE:
            raise MessageError(f"minimum supported size is {MIN_SIZE}")
    if ns.win is not None and ns.win < MIN_WIN_LEN:
        raise MessageError(f"minimum supported win length is {MIN_WIN_LEN}")


def fit_size(term_size: Optional[Tuple[int, int]], floor: int) -> Tuple[int, int]:
    """Largest board the terminal can show, but never smaller than ``floor``."""
    if term_size is None:
        return floor, floor
    cols, rows = term_size
    return max(max(cols - 1, 0) // 4, floor), max(max(rows - 2, 0) // 2, floor)


def resolve_game(
    size: Optional[Tuple[int, int]],
    win_len: Optional[int],
    term_size: Optional[Tuple[int, int]],
) -> Tuple[int, int, int]:
    """Fill in omitted board dimensions and win length."""
    if size is not None:
        w, h = size
    else:
        w, h = fit_size(term_size, max(win_len or MIN_SIZE, MIN_SIZE))
    if win_len is None:
        win_len = min(max(w, h), MAX_DEFAULT_WIN_LEN)
    return w, h, win_len


def _query_terminal_size() -> Optional[Tuple[int, int]]:
    try:
        sz = os.get_terminal_size(sys.stdout.fileno())
    except (OSError, ValueError):
        return None
    return sz.columns, sz.lines


def _setup_logging(verbose: bool, log_file: Optional[Path]) -> None:
    log_file = log_file or config.log_file()
    if log_file is None:
        # Nothing may reach the screen while the game owns it.
        logging.basicConfig(level=logging.WARNING, format="[%(levelname)s] %(message)s")
        return
    logging.basicConfig(
        filename=str(log_file),
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


def _installed_version() -> str:
    try:
        return metadata.version("tictactoe")
    except metadata.PackageNotFoundError:
        return "unknown"


def _print_info(size: Optional[Tuple[int, int]], win_len: Optional[int]) -> None:
    """Report what the game would see if started with these arguments."""
    term = _query_terminal_size()
    encoding = sys.stdout.encoding or "unknown"
    utf8 = encoding.lower().replace("-", "") == "utf8"
    print("terminal=" + ("%dx%d" % term if term else "none"))
    print(f"encoding={encoding} utf8={'yes' if utf8 else 'no'}")
    print("board=%dx%d win=%d" % resolve_game(size, win_len, term))


def print_error(err: TicTacToeError) -> None:
    print(f"{RED}Error: {err}{RESET}", file=sys.stderr)


def play(w: int, h: int, win_len: int) -> None:
    board = Board(w, h, win_len)
    interval = config.poll_interval()
    with terminal_session() as term:
        app = App(board, term)
        app.run(KeyReader(sys.stdin.fileno(), term.size), interval)


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    try:
        ns = parser.parse_args(argv)
        validate_args(ns)
    except MessageError as e:
        print_error(e)
        return 1
    _setup_logging(ns.verbose, ns.log_file)

    size = tuple(ns.size) if ns.size is not None else None
    if ns.version:
        print(_installed_version())
        return 0
    if ns.info:
        _print_info(size, ns.win)
        return 0

    w, h, win_len = resolve_game(size, ns.win, _query_terminal_size())
    logging.info("starting %dx%d game, win length %d", w, h, win_len)

    try:
        play(w, h, win_len)
    except (Exit, KeyboardInterrupt):
        logging.info("quit")
        return 0
    except TicTacToeError as e:
        logging.info("fatal: %s", e)
        print_error(e)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
