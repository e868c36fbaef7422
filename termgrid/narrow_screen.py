"""Screen for terminals with a single-byte character set: a cell grid and its curses front end."""

from __future__ import annotations

import codecs
import locale
import unicodedata
from itertools import islice
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .keymap import read_event
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
    char_width,
    graphemes,
)
from .unicode_screen import _checked, _curses_attr, _init_settings

try:
    import curses
except ImportError:  # pragma: no cover - platforms without curses
    curses = None  # type: ignore[assignment]

__all__ = [
    "A_ALTCHARSET",
    "encode_char",
    "decode_char",
    "NarrowGrid",
    "NarrowScreen",
]

A_ALTCHARSET = 1 << 22

_I16_MAX = 0x7FFF

_SPACE = (ord(" "), None)

_ACS: Dict[str, int] = {
    "→": 43,
    "←": 44,
    "↑": 45,
    "↓": 46,
    "█": 48,
    "♦": 96,
    "▒": 97,
    "°": 102,
    "±": 103,
    "░": 104,
    "␋": 105,
    "┘": 106,
    "┐": 107,
    "┌": 108,
    "└": 109,
    "┼": 110,
    "⎺": 111,
    "⎻": 112,
    "─": 113,
    "⎼": 114,
    "⎽": 115,
    "├": 116,
    "┤": 117,
    "┴": 118,
    "┬": 119,
    "│": 120,
    "≤": 121,
    "≥": 122,
    "π": 123,
    "≠": 124,
    "£": 125,
    "·": 126,
}

_REPLACEMENT = A_ALTCHARSET | 96

Cell = Tuple[int, Optional[Tuple[Fg, Bg]]]


def _sat(value: int) -> int:
    return max(-0x8000, min(_I16_MAX, value))


def encode_char(c: str, encoding: str) -> Optional[int]:
    """Cell code of a character: an alternate-charset glyph or a single byte.

    Returns None when the character has no single-byte form in ``encoding``.
    """
    acs = _ACS.get(c)
    if acs is not None:
        return A_ALTCHARSET | acs
    try:
        encoded = c.encode(encoding)
    except UnicodeEncodeError:
        return None
    return encoded[0] if len(encoded) == 1 else None


def decode_char(b: int, encoding: str) -> str:
    """The character a single input byte stands for in ``encoding``."""
    decoded = bytes([b]).decode(encoding)
    if not decoded:
        raise ValueError(f"byte {b:#x} does not decode to a character")
    return decoded[0]


class NarrowGrid:
    """In-memory contents of a screen whose cells hold single-byte codes."""

    def __init__(self, width: int, height: int, encoding: str) -> None:
        codecs.lookup(encoding)
        self._encoding = encoding
        self._cells: List[Cell] = []
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

    @property
    def encoding(self) -> str:
        return self._encoding

    def resize(self, width: int, height: int) -> None:
        """Change the size, keeping the leading cells and clearing row flags."""
        if width < 0 or height < 0:
            raise ValueError("grid size must not be negative")
        length = width * height
        del self._cells[length:]
        self._cells.extend([_SPACE] * (length - len(self._cells)))
        self._width = width
        self._height = height
        self._invalidated = [False] * height

    def _invalidate_all(self) -> None:
        self._invalidated = [True] * self._height

    def _check_range(self, name: str, r: Range1d) -> None:
        if not 0 <= r.start < r.end <= self._width:
            raise ValueError(f"invalid {name} range {r}")

    def _codes(self, text: str) -> Iterator[int]:
        for span, _ in graphemes(text):
            c = unicodedata.normalize("NFC", text[span.start:span.stop])[0]
            code = encode_char(c, self._encoding)
            if code is None:
                yield from [_REPLACEMENT] * char_width(c)
            else:
                yield code

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
        base = p.y * self._width
        self._invalidated[p.y] = True
        attr = (fg, bg)
        before_hard_start = min(p.x, hard.start)
        before_text_start = 0
        x0 = max(hard.start, p.x)
        x = x0
        for code in islice(self._codes(text), text_end):
            if x >= hard.end:
                break
            past_text_start = before_text_start >= text_start
            if not past_text_start:
                before_text_start += 1
            past_hard_start = before_hard_start >= hard.start
            if not past_hard_start:
                before_hard_start += 1
            if past_text_start and past_hard_start:
                self._cells[base + x] = (code, attr)
            x += 1
        return Range1d(x0, x)

    def row_cells(self, y: int) -> List[Cell]:
        """The ``(code, colours)`` pairs of row ``y``; colours are None for blank cells."""
        if not 0 <= y < self._height:
            raise IndexError(f"row {y} out of range")
        return self._cells[y * self._width:(y + 1) * self._width]

    def take_invalidated(self) -> List[int]:
        """Rows written since the last call, clearing their flags."""
        rows = [y for y, flag in enumerate(self._invalidated) if flag]
        self._invalidated = [False] * self._height
        return rows


def _locale_encoding() -> str:
    try:
        codeset = locale.nl_langinfo(locale.CODESET)
    except (AttributeError, ValueError) as e:
        raise ScreenError("nl_langinfo") from e
    try:
        codecs.lookup(codeset)
    except LookupError as e:
        raise ScreenError(f"unsupported character set {codeset!r}") from e
    return codeset


class NarrowScreen(Screen):
    """A curses screen for terminals using a single-byte character set."""

    def __init__(self, max_size: Optional[Tuple[int, int]] = None) -> None:
        if curses is None:
            raise ScreenError("curses is not available")
        self._encoding = _locale_encoding()
        self._max_size = max_size
        self._closed = False
        self._stdscr = _checked("initscr", curses.initscr)
        try:
            _init_settings(self._stdscr)
            size = self.size()
            self._grid = NarrowGrid(size.x, size.y, self._encoding)
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
            for code, attr in self._grid.row_cells(y):
                extra = curses.A_ALTCHARSET if code & A_ALTCHARSET else 0
                try:
                    window.addch(code & 0xFF, extra | _curses_attr(attr))
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
        encoding = self._encoding

        def getch() -> Any:
            c = window.getch()
            if c == -1:
                return None
            if c & 0x100 == 0:
                return decode_char(c & 0xFF, encoding)
            return c

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

    def __enter__(self) -> "NarrowScreen":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        try:
            self.close()
        except ScreenError:
            if exc_type is None:
                raise
        return False