from typing import List, Optional, Tuple

import pytest

from tictactoe.app import App, compose_frame, status_spans
from tictactoe.board import Board, Coord, GameState, WinSegment
from tictactoe.buffer import Buffer, Color
from tictactoe.cell import Cell
from tictactoe.errors import Exit
from tictactoe.events import Event, Key, Resize


class FakeScreen:
    def __init__(self, size: Tuple[int, int] = (40, 12)):
        self._size = size
        self.frames: List[Buffer] = []

    def size(self) -> Tuple[int, int]:
        return self._size

    def present(self, buffer: Buffer) -> None:
        self.frames.append(buffer)


class ScriptedEvents:
    def __init__(self, events: List[Optional[Event]]):
        self.events = list(events)
        self.timeouts: List[float] = []

    def poll(self, timeout: float) -> Optional[Event]:
        self.timeouts.append(timeout)
        if not self.events:
            return Key.QUIT
        return self.events.pop(0)


def feed(app: App, events: List[Event]) -> None:
    for e in events:
        app.handle(e)


def banner(frame: Buffer) -> str:
    """First non-empty line that is not part of the grid."""
    for line in frame.lines():
        text = line.strip()
        if text and not any(ch in text for ch in "┌└│├┏┗┃┢┡┲┺╆╄"):
            return text
    return ""


SCENARIO_CROSS_TOP_ROW = [
    Key.LEFT, Key.UP, Key.CONFIRM,
    Key.DOWN, Key.CONFIRM,
    Key.UP, Key.RIGHT, Key.CONFIRM,
    Key.DOWN, Key.CONFIRM,
    Key.UP, Key.RIGHT, Key.CONFIRM,
]


def test_cross_wins_top_row():
    screen = FakeScreen()
    app = App(Board(3, 3, 3), screen)
    feed(app, SCENARIO_CROSS_TOP_ROW)
    assert app.board.state() is GameState.CROSS_WINS
    assert app.board.win == WinSegment(Coord(0, 0), (1, 0))
    assert status_spans(app.board, app.player) == [("X", Color.GREEN), (" wins!", Color.DEFAULT)]
    assert banner(screen.frames[-1]) == "X wins!"
    assert len(screen.frames) == len(SCENARIO_CROSS_TOP_ROW)


def test_enter_after_win_is_rejected_until_restart():
    app = App(Board(3, 3, 3), FakeScreen())
    feed(app, SCENARIO_CROSS_TOP_ROW)
    player = app.player
    cells = app.board.cells[:]
    feed(app, [Key.DOWN, Key.CONFIRM, Key.LEFT, Key.CONFIRM])
    assert app.board.cells == cells
    assert app.player is player
    assert app.board.state() is GameState.CROSS_WINS

    selected = app.board.selected
    app.handle(Key.RESTART)
    assert all(c is Cell.EMPTY for c in app.board.cells)
    assert app.board.state() is GameState.IN_PROGRESS
    assert app.board.win is None
    assert app.player is Cell.CROSS
    assert app.board.selected == selected


def test_occupied_cell_keeps_turn():
    app = App(Board(3, 3, 3), FakeScreen())
    app.handle(Key.CONFIRM)
    assert app.player is Cell.CIRCLE
    app.handle(Key.CONFIRM)
    assert app.player is Cell.CIRCLE
    assert app.board.cell_at(1, 1) is Cell.CROSS
    app.handle(Key.DOWN)
    app.handle(Key.CONFIRM)
    assert app.board.cell_at(1, 2) is Cell.CIRCLE
    assert app.player is Cell.CROSS


def test_turn_banner_colours():
    b = Board(3, 3, 3)
    assert status_spans(b, Cell.CROSS) == [("X", Color.GREEN), (" turn.", Color.DEFAULT)]
    assert status_spans(b, Cell.CIRCLE) == [("O", Color.RED), (" turn.", Color.DEFAULT)]


def test_draw_banner():
    b = Board(3, 3, 3)
    player = Cell.CROSS
    for x, y in [(0, 0), (1, 0), (2, 0), (1, 1), (0, 1), (2, 1), (1, 2), (0, 2), (2, 2)]:
        b.set(player, x, y)
        player = player.next()
    assert status_spans(b, player) == [("Draw!", Color.DEFAULT)]
    assert banner(compose_frame(b, player, 40, 12)) == "Draw!"


def test_frame_is_centred_with_status_line():
    b = Board(3, 3, 3)
    frame = compose_frame(b, Cell.CROSS, 21, 10)
    lines = frame.lines()
    # 13x8 block centred in 21x10: origin (4, 1)
    assert lines[1][4:17] == "┌───┬───┬───┐"
    assert lines[7][4:17] == "└───┴───┴───┘"
    assert lines[8].strip() == "X turn."
    x = lines[8].index("X")
    assert frame.color_at(x, 8) is Color.GREEN


def test_small_terminal_shows_placeholder():
    frame = compose_frame(Board(5, 5, 4), Cell.CROSS, 60, 11)
    text = [line.strip() for line in frame.lines() if line.strip()]
    assert text == ["Terminal too small!", "You have to increase terminal size"]
    y = frame.lines().index(next(l for l in frame.lines() if "Terminal too small!" in l))
    x = frame.lines()[y].index("T")
    assert frame.bold[y, x]


def test_exact_fit_is_not_too_small():
    frame = compose_frame(Board(3, 3, 3), Cell.CROSS, 13, 8)
    assert frame.lines()[0] == "┌───┬───┬───┐"
    assert frame.lines()[7].strip() == "X turn."


def test_quit_raises_exit():
    app = App(Board(3, 3, 3), FakeScreen())
    with pytest.raises(Exit):
        app.handle(Key.QUIT)


def test_other_keys_are_ignored_without_render():
    screen = FakeScreen()
    app = App(Board(3, 3, 3), screen)
    app.handle(Key.OTHER)
    assert screen.frames == []
    app.handle(Resize(50, 20))
    assert len(screen.frames) == 1


def test_resize_relayouts_with_new_size():
    screen = FakeScreen((40, 12))
    app = App(Board(3, 3, 3), screen)
    app.render()
    screen._size = (10, 4)
    app.handle(Resize(10, 4))
    assert screen.frames[-1].width == 10
    assert any(l.startswith("Terminal") for l in screen.frames[-1].lines())


def test_run_renders_first_and_stops_on_quit():
    screen = FakeScreen()
    app = App(Board(3, 3, 3), screen)
    events = ScriptedEvents([None, Key.CONFIRM, None, Key.RIGHT])
    with pytest.raises(Exit):
        app.run(events, poll_interval=0.05)
    # initial render + confirm + right
    assert len(screen.frames) == 3
    assert app.board.cell_at(1, 1) is Cell.CROSS
    assert app.board.selected == (2, 1)
    assert set(events.timeouts) == {0.05}


def test_render_does_not_mutate_board():
    app = App(Board(3, 3, 3), FakeScreen())
    app.handle(Key.CONFIRM)
    before = (app.board.cells[:], app.board.selected, app.board.state())
    first = app.render()
    second = app.render()
    assert first == second
    assert (app.board.cells, app.board.selected, app.board.state()) == before
