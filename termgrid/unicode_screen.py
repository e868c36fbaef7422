"""Screen for UTF-8 terminals: a cell grid and its curses front end."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from .keymap import bg_index, color_pair_number, fg_index, fg_is_bold, read_event
from .screen_base import (
    Bg,
    Ctrl,
    Event,
    EventKind,
    Fg,
    Key,
    KeyKind,
    Point,
    Range1d,
    Rect,
    Screen,
    ScreenError,
    Vector,
    graphemes,
)

try:
    import curses
except ImportError:  # pragma: no cover - platforms without curses
    curses = None  # type: ignore[assignment]

__all__ = ["CCHARW_MAX", "UnicodeGrid", "UnicodeScreen"]

CCHARW_MAX = 5

_I16_MAX = 0x7FFF


def _sat(value: int) -> int:
    return max(-0x8000, min(_I16_MAX, value))


@dataclass
class _Cell:
    """One column; empty text marks the continuation of a wide character."""

    text: str = " "
    attr: Optional[Tuple[Fg, Bg]] = None


def _start_text(line: List[_Cell], x: int) -> None:
    if x <= 0 or x >= len(line) or line[x].text:
        return
    while x > 0:
        x -= 1
        cell = line[x]
        stop = bool(cell.text)
        cell.text = " "
        if stop:
            break


def _end_text(line: List[_Cell], x: int) -> None:
    if x <= 0:
        return
    while x < len(line) and not line[x].text:
        line[x].text = " "
        x += 1


class UnicodeGrid:
    """In-memory contents of a screen whose cells hold character clusters."""

    def __init__(self, width: int, height: int) -> None:
        self._cells: List[_Cell] = []
        self._width = 0
        self._height = 0
        self._invalidated: List[bool] = []
        self.resize(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def resize(self, width: int, height: int) -> None:
        """Change the size, keeping the leading cells and clearing row flags."""
        if width < 0 or height < 0:
            raise ValueError("grid size must not be negative")
        length = width * height
        del self._cells[length:]
        self._cells.extend(_Cell() for _ in range(length - len(self._cells)))
        self._width = width
        self._height = height
        self._invalidated = [False] * height

    def _row(self, y: int) -> List[_Cell]:
        return self._cells[y * self._width:(y + 1) * self._width]

    def _invalidate_all(self) -> None:
        self._invalidated = [True] * self._height

    def _check_range(self, name: str, r: Range1d) -> None:
        if not 0 <= r.start < r.end <= self._width:
            raise ValueError(f"invalid {name} range {r}")

    def out(self, p: Point, fg: Fg, bg: Bg, text: str, hard: Range1d, soft: Range1d) -> Range1d:
        """Write text at ``p``; ``hard`` clips columns, ``soft`` clips the text itself."""
        if not 0 <= p.y < self._height:
            raise ValueError(f"row {p.y} out of range")
        self._check_range("hard", hard)
        self._check_range("soft", soft)
        if soft.end <= p.x:
            return Range1d(0, 0)
        text_end = _sat(soft.end - p.x)
        text_start = 0 if soft.start <= p.x else _sat(soft.start - p.x)
        line = self._row(p.y)
        self._invalidated[p.y] = True
        attr = (fg, bg)
        x0: Optional[int] = None
        x = p.x
        n = 0
        for span, w in graphemes(text):
            if x >= hard.end or n >= text_end:
                break
            n = _sat(n + w)
            if n <= text_start:
                x = min(hard.end, _sat(x + w))
                continue
            if x < hard.start:
                x = min(hard.end, _sat(x + w))
                if x > hard.start:
                    _start_text(line, hard.start)
                    x0 = hard.start
                    for cell in line[hard.start:x]:
                        cell.text = " "
                continue
            if x0 is None:
                _start_text(line, x)
                x0 = x
            next_x = min(hard.end, _sat(x + w))
            if next_x - x < w:
                for cell in line[x:next_x]:
                    cell.text = " "
                x = next_x
                break
            head = line[x]
            head.text = text[span.start:span.stop][:CCHARW_MAX]
            head.attr = attr
            for cell in line[x + 1:next_x]:
                cell.text = ""
            x = next_x
        if x0 is None:
            return Range1d(0, 0)
        _end_text(line, x)
        return Range1d(x0, x)

    def row_text(self, y: int) -> str:
        """The visible text of row ``y``."""
        if not 0 <= y < self._height:
            raise IndexError(f"row {y} out of range")
        return "".join(cell.text for cell in self._row(y))

    def take_invalidated(self) -> List[int]:
        """Rows written since the last call, clearing their flags."""
        rows = [y for y, flag in enumerate(self._invalidated) if flag]
        self._invalidated = [False] * self._height
        return rows


def _checked(name: str, func: Callable[..., Any], *args: Any) -> Any:
    try:
        return func(*args)
    except (curses.error, ValueError) as e:
        raise ScreenError(name) from e


def _init_settings(stdscr: Any) -> None:
    _checked("cbreak", curses.cbreak)
    _checked("noecho", curses.noecho)
    _checked("nonl", curses.nonl)
    _checked("start_color", curses.start_color)
    _checked("use_default_colors", curses.use_default_colors)
    for fg in Fg:
        for bg in Bg:
            _checked("init_pair", curses.init_pair, color_pair_number(fg, bg), fg_index(fg), bg_index(bg))
    curses.set_escdelay(0)
    _checked("keypad", stdscr.keypad, True)
    curses.mousemask(curses.BUTTON1_PRESSED | curses.BUTTON1_RELEASED)


def _curses_attr(attr: Optional[Tuple[Fg, Bg]]) -> int:
    if attr is None:
        return curses.A_NORMAL
    fg, bg = attr
    value = curses.color_pair(color_pair_number(fg, bg))
    if fg_is_bold(fg):
        value |= curses.A_BOLD
    return value


class UnicodeScreen(Screen):
    """A curses screen for terminals using UTF-8."""

    def __init__(self, max_size: Optional[Tuple[int, int]] = None) -> None:
        if curses is None:
            raise ScreenError("curses is not available")
        self._max_size = max_size
        self._closed = False
        self._stdscr = _checked("initscr", curses.initscr)
        try:
            _init_settings(self._stdscr)
            size = self.size()
            self._grid = UnicodeGrid(size.x, size.y)
            self._lines: List[Any] = []
            self._resize()
        except BaseException:
            self._closed = True
            try:
                curses.endwin()
            except curses.error:
                pass
            raise

    def _resize(self) -> None:
        size = self.size()
        self._grid.resize(size.x, size.y)
        lines = []
        for y in range(size.y):
            window = _checked("newwin", curses.newwin, 1, 0, y, 0)
            _checked("keypad", window.keypad, True)
            lines.append(window)
        self._lines = lines

    def size(self) -> Vector:
        rows, cols = self._stdscr.getmaxyx()
        x = max(0, min(_I16_MAX, cols))
        y = max(0, min(_I16_MAX, rows))
        if self._max_size is not None:
            x = min(self._max_size[0], x)
            y = min(self._max_size[1], y)
        return Vector(x, y)

    def out(self, p: Point, fg: Fg, bg: Bg, text: str, hard: Range1d, soft: Range1d) -> Range1d:
        return self._grid.out(p, fg, bg, text, hard, soft)

    def _flush(self) -> None:
        for y in self._grid.take_invalidated():
            if self._grid.width == 0:
                continue
            window = self._lines[y]
            _checked("wmove", window.move, 0, 0)
            for cell in self._grid._row(y):
                if not cell.text:
                    continue
                window.attrset(_curses_attr(cell.attr))
                try:
                    window.addstr(cell.text)
                except curses.error:
                    pass
            _checked("wnoutrefresh", window.noutrefresh)
        _checked("doupdate", curses.doupdate)

    def update(self, cursor: Optional[Point], wait: bool) -> Optional[Event]:
        _checked("curs_set", curses.curs_set, 0)
        self._flush()
        if cursor is not None and not Rect(Point(0, 0), self.size()).contains(cursor):
            cursor = None
        if cursor is not None:
            window = self._lines[cursor.y]
            _checked("wmove", window.move, 0, cursor.x)
            _checked("curs_set", curses.curs_set, 1)
        elif self._lines and self._grid.width != 0:
            window = self._lines[0]
            _checked("wmove", window.move, 0, 0)
        else:
            window = self._stdscr
        _checked("nodelay", window.nodelay, not wait)

        def getch() -> Any:
            try:
                return window.get_wch()
            except curses.error:
                return None

        def get_mouse() -> Optional[Tuple[int, int, bool]]:
            try:
                _, x, y, _, bstate = curses.getmouse()
            except curses.error:
                return None
            return x, y, bool(bstate & curses.BUTTON1_PRESSED)

        event = read_event(getch, lambda: _checked("nodelay", window.nodelay, True), get_mouse)
        if event is not None:
            if event.kind is EventKind.RESIZE:
                self._resize()
            elif event.key == Key(KeyKind.CTRL, Ctrl.L):
                for line in self._lines:
                    line.clearok(True)
                self._grid._invalidate_all()
        return event

    def close(self) -> None:
        """Restore the terminal."""
        if self._closed:
            return
        self._closed = True
        _checked("endwin", curses.endwin)

    def __enter__(self) -> "UnicodeScreen":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        try:
            self.close()
        except ScreenError:
            if exc_type is None:
                raise
        return False