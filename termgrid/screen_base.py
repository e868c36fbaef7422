"""Platform-independent text screen primitives: geometry, colours, keys, events."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from wcwidth import wcwidth

__all__ = [
    "Point",
    "Vector",
    "Range1d",
    "Rect",
    "HAlign",
    "VAlign",
    "char_width",
    "text_width",
    "trim_text",
    "is_text_fit_in",
    "Graphemes",
    "graphemes",
    "Bg",
    "Fg",
    "fg_from_bg",
    "bg_from_fg",
    "Ctrl",
    "KeyKind",
    "Key",
    "EventKind",
    "Event",
    "ScreenError",
    "OutOfMemoryError",
    "Screen",
]


def _wrap_i16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


@dataclass(frozen=True)
class Vector:
    """A two-dimensional size or offset."""

    x: int
    y: int


@dataclass(frozen=True)
class Point:
    """A position on the screen."""

    x: int
    y: int


@dataclass(frozen=True)
class Range1d:
    """A half-open range of columns."""

    start: int
    end: int


@dataclass(frozen=True)
class Rect:
    """A rectangle given by its top-left corner and its size."""

    tl: Point
    size: Vector

    def contains(self, p: Point) -> bool:
        """Whether the point lies inside the rectangle."""
        dx = p.x - self.tl.x
        dy = p.y - self.tl.y
        return 0 <= dx < self.size.x and 0 <= dy < self.size.y


class HAlign(enum.Enum):
    LEFT = "Left"
    CENTER = "Center"
    RIGHT = "Right"


class VAlign(enum.Enum):
    TOP = "Top"
    CENTER = "Center"
    BOTTOM = "Bottom"


def _unicode_width(c: str) -> Optional[int]:
    w = wcwidth(c)
    return None if w < 0 else w


def char_width(c: str) -> int:
    """Number of terminal columns taken by a single character."""
    if c == "\0":
        return 0
    return _unicode_width(c) or 0


def text_width(s: str) -> int:
    """Number of terminal columns taken by a string (16-bit wrapping)."""
    total = 0
    for c in s:
        total = _wrap_i16(total + char_width(c))
    return total


def _is_trimmable(c: str) -> bool:
    return c == " " or char_width(c) == 0


def trim_text(s: str) -> str:
    """Strip spaces and zero-width characters from both ends."""
    start, end = 0, len(s)
    while start < end and _is_trimmable(s[start]):
        start += 1
    while end > start and _is_trimmable(s[end - 1]):
        end -= 1
    return s[start:end]


def is_text_fit_in(w: int, s: str) -> bool:
    """Whether the text fits into ``w`` columns (``w`` taken as unsigned 16-bit)."""
    remaining = w & 0xFFFF
    for c in s:
        remaining -= char_width(c)
        if remaining < 0:
            return False
    return True


class Graphemes:
    """Iterator over visible clusters of a string as ``(range, width)`` pairs.

    A cluster is a character with non-zero width followed by the zero-width
    characters attached to it. Ranges index characters of the string.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._start = 0
        self._end = len(text)

    def __iter__(self) -> "Graphemes":
        return self

    def __next__(self) -> Tuple[range, int]:
        text = self._text
        i = self._start
        while True:
            if i >= self._end:
                self._start = self._end
                raise StopIteration
            c = text[i]
            w = _unicode_width(c)
            if c != "\0" and w:
                break
            i += 1
        end = i + 1
        while end < self._end:
            c = text[end]
            if c == "\0" or _unicode_width(c) != 0:
                break
            end += 1
        self._start = end
        return range(i, end), w

    def next_back(self) -> Optional[Tuple[range, int]]:
        """Take the last remaining cluster, or return None when there is none."""
        text = self._text
        k = self._end
        while True:
            k -= 1
            if k < self._start:
                return None
            c = text[k]
            w = _unicode_width(c)
            if c == "\0" or w is None:
                continue
            last = k
            while w == 0:
                k -= 1
                if k < self._start:
                    return None
                c = text[k]
                w = _unicode_width(c)
                if c == "\0" or w is None:
                    break
            else:
                self._end = k
                return range(k, last + 1), w


def graphemes(text: str) -> Graphemes:
    """Iterate over the visible clusters of ``text``."""
    return Graphemes(text)


class _NamedEnum(enum.Enum):
    def __str__(self) -> str:
        return self.value


class Bg(_NamedEnum):
    NONE = "None"
    BLACK = "Black"
    RED = "Red"
    GREEN = "Green"
    BROWN = "Brown"
    BLUE = "Blue"
    MAGENTA = "Magenta"
    CYAN = "Cyan"
    LIGHT_GRAY = "LightGray"


class Fg(_NamedEnum):
    BLACK = "Black"
    RED = "Red"
    GREEN = "Green"
    BROWN = "Brown"
    BLUE = "Blue"
    MAGENTA = "Magenta"
    CYAN = "Cyan"
    LIGHT_GRAY = "LightGray"
    DARK_GRAY = "DarkGray"
    BRIGHT_RED = "BrightRed"
    BRIGHT_GREEN = "BrightGreen"
    YELLOW = "Yellow"
    BRIGHT_BLUE = "BrightBlue"
    BRIGHT_MAGENTA = "BrightMagenta"
    BRIGHT_CYAN = "BrightCyan"
    WHITE = "White"


_SHARED_COLORS = (
    "Black", "Red", "Green", "Brown", "Blue", "Magenta", "Cyan", "LightGray",
)


def fg_from_bg(bg: Bg) -> Fg:
    """The foreground colour matching a background colour."""
    if bg.value not in _SHARED_COLORS:
        raise ValueError(f"background {bg} has no foreground counterpart")
    return Fg(bg.value)


def bg_from_fg(fg: Fg) -> Bg:
    """The background colour matching a foreground colour."""
    if fg.value not in _SHARED_COLORS:
        raise ValueError(f"foreground {fg} has no background counterpart")
    return Bg(fg.value)


class Ctrl(enum.Enum):
    AT = enum.auto()
    A = enum.auto()
    B = enum.auto()
    C = enum.auto()
    D = enum.auto()
    E = enum.auto()
    F = enum.auto()
    G = enum.auto()
    J = enum.auto()
    K = enum.auto()
    L = enum.auto()
    N = enum.auto()
    O = enum.auto()  # noqa: E741
    P = enum.auto()
    Q = enum.auto()
    R = enum.auto()
    S = enum.auto()
    T = enum.auto()
    U = enum.auto()
    V = enum.auto()
    W = enum.auto()
    X = enum.auto()
    Y = enum.auto()
    Z = enum.auto()
    BACKSLASH = enum.auto()
    BRACKET = enum.auto()
    CARET = enum.auto()
    UNDERSCORE = enum.auto()


class KeyKind(enum.Enum):
    CHAR = enum.auto()
    ALT = enum.auto()
    CTRL = enum.auto()
    ENTER = enum.auto()
    ESCAPE = enum.auto()
    DOWN = enum.auto()
    UP = enum.auto()
    LEFT = enum.auto()
    RIGHT = enum.auto()
    HOME = enum.auto()
    END = enum.auto()
    BACKSPACE = enum.auto()
    DELETE = enum.auto()
    INSERT = enum.auto()
    PAGE_DOWN = enum.auto()
    PAGE_UP = enum.auto()
    TAB = enum.auto()
    F1 = enum.auto()
    F2 = enum.auto()
    F3 = enum.auto()
    F4 = enum.auto()
    F5 = enum.auto()
    F6 = enum.auto()
    F7 = enum.auto()
    F8 = enum.auto()
    F9 = enum.auto()
    F10 = enum.auto()
    F11 = enum.auto()
    F12 = enum.auto()


@dataclass(frozen=True)
class Key:
    """A key press; ``value`` holds the character or the Ctrl combination."""

    kind: KeyKind
    value: Union[str, Ctrl, None] = None

    def __post_init__(self) -> None:
        if self.kind in (KeyKind.CHAR, KeyKind.ALT):
            if not isinstance(self.value, str) or len(self.value) != 1:
                raise ValueError(f"{self.kind.name} key needs a single character")
        elif self.kind is KeyKind.CTRL:
            if not isinstance(self.value, Ctrl):
                raise ValueError("CTRL key needs a Ctrl value")
        elif self.value is not None:
            raise ValueError(f"{self.kind.name} key takes no value")


class EventKind(enum.Enum):
    RESIZE = enum.auto()
    KEY = enum.auto()
    LMB_DOWN = enum.auto()
    LMB_UP = enum.auto()


@dataclass(frozen=True)
class Event:
    """An input event; key events carry a repeat count from 1 to 65535."""

    kind: EventKind
    key: Optional[Key] = None
    count: int = 1
    point: Optional[Point] = None

    def __post_init__(self) -> None:
        if self.kind is EventKind.KEY:
            if not isinstance(self.key, Key):
                raise ValueError("key event needs a key")
            if not 1 <= self.count <= 0xFFFF:
                raise ValueError("key repeat count must be in 1..65535")
            if self.point is not None:
                raise ValueError("key event takes no point")
        elif self.kind in (EventKind.LMB_DOWN, EventKind.LMB_UP):
            if not isinstance(self.point, Point):
                raise ValueError("mouse event needs a point")
            if self.key is not None:
                raise ValueError("mouse event takes no key")
        elif self.key is not None or self.point is not None:
            raise ValueError("resize event takes no key or point")


class ScreenError(Exception):
    """A failure reported by the screen backend."""


class OutOfMemoryError(ScreenError):
    """The screen buffer could not be allocated."""

    def __init__(self, message: str = "out of memory") -> None:
        super().__init__(message)


class Screen(ABC):
    """A text screen that can be drawn to and polled for events."""

    @abstractmethod
    def size(self) -> Vector:
        """Current size of the screen in cells."""

    @abstractmethod
    def out(
        self,
        p: Point,
        fg: Fg,
        bg: Bg,
        text: str,
        hard: Range1d,
        soft: Range1d,
    ) -> Range1d:
        """Draw text at ``p`` clipped to ``hard`` and ``soft``; return the touched columns."""

    @abstractmethod
    def update(self, cursor: Optional[Point], wait: bool) -> Optional[Event]:
        """Flush drawing, place the cursor and read one event."""