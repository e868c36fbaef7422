"""Curses colour numbering and translation of raw terminal input into events."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple, Union

from .screen_base import Bg, Ctrl, Event, EventKind, Fg, Key, KeyKind, Point

__all__ = [
    "COLOR_BLACK",
    "COLOR_RED",
    "COLOR_GREEN",
    "COLOR_YELLOW",
    "COLOR_BLUE",
    "COLOR_MAGENTA",
    "COLOR_CYAN",
    "COLOR_WHITE",
    "KEY_CODE_YES",
    "KEY_DOWN",
    "KEY_UP",
    "KEY_LEFT",
    "KEY_RIGHT",
    "KEY_HOME",
    "KEY_BACKSPACE",
    "KEY_F0",
    "KEY_DC",
    "KEY_IC",
    "KEY_NPAGE",
    "KEY_PPAGE",
    "KEY_END",
    "KEY_RESIZE",
    "KEY_MOUSE",
    "bg_index",
    "fg_index",
    "fg_is_bold",
    "color_pair_number",
    "key_f",
    "read_event",
]

COLOR_BLACK = 0
COLOR_RED = 1
COLOR_GREEN = 2
COLOR_YELLOW = 3
COLOR_BLUE = 4
COLOR_MAGENTA = 5
COLOR_CYAN = 6
COLOR_WHITE = 7

KEY_CODE_YES = 256
KEY_DOWN = 258
KEY_UP = 259
KEY_LEFT = 260
KEY_RIGHT = 261
KEY_HOME = 262
KEY_BACKSPACE = 263
KEY_F0 = 264
KEY_DC = 330
KEY_IC = 331
KEY_NPAGE = 338
KEY_PPAGE = 339
KEY_END = 360
KEY_RESIZE = 410
KEY_MOUSE = 0o631

RawInput = Union[int, str, None]
MouseState = Optional[Tuple[int, int, bool]]

_BG_INDEX: Dict[Bg, int] = {
    Bg.NONE: -1,
    Bg.BLACK: COLOR_BLACK,
    Bg.RED: COLOR_RED,
    Bg.GREEN: COLOR_GREEN,
    Bg.BROWN: COLOR_YELLOW,
    Bg.BLUE: COLOR_BLUE,
    Bg.MAGENTA: COLOR_MAGENTA,
    Bg.CYAN: COLOR_CYAN,
    Bg.LIGHT_GRAY: COLOR_WHITE,
}

_FG_INDEX: Dict[Fg, int] = {
    Fg.BLACK: COLOR_BLACK,
    Fg.DARK_GRAY: COLOR_BLACK,
    Fg.RED: COLOR_RED,
    Fg.BRIGHT_RED: COLOR_RED,
    Fg.GREEN: COLOR_GREEN,
    Fg.BRIGHT_GREEN: COLOR_GREEN,
    Fg.BROWN: COLOR_YELLOW,
    Fg.YELLOW: COLOR_YELLOW,
    Fg.BLUE: COLOR_BLUE,
    Fg.BRIGHT_BLUE: COLOR_BLUE,
    Fg.MAGENTA: COLOR_MAGENTA,
    Fg.BRIGHT_MAGENTA: COLOR_MAGENTA,
    Fg.CYAN: COLOR_CYAN,
    Fg.BRIGHT_CYAN: COLOR_CYAN,
    Fg.LIGHT_GRAY: COLOR_WHITE,
    Fg.WHITE: COLOR_WHITE,
}

_BOLD_FG = frozenset({
    Fg.DARK_GRAY,
    Fg.BRIGHT_RED,
    Fg.BRIGHT_GREEN,
    Fg.YELLOW,
    Fg.BRIGHT_BLUE,
    Fg.BRIGHT_MAGENTA,
    Fg.BRIGHT_CYAN,
    Fg.WHITE,
})


def bg_index(bg: Bg) -> int:
    """Curses colour number of a background; -1 is the terminal default."""
    return _BG_INDEX[bg]


def fg_index(fg: Fg) -> int:
    """Curses colour number of a foreground (bright colours share the base number)."""
    return _FG_INDEX[fg]


def fg_is_bold(fg: Fg) -> bool:
    """Whether the foreground is drawn with the bold attribute."""
    return fg in _BOLD_FG


def color_pair_number(fg: Fg, bg: Bg) -> int:
    """The colour pair registered for a foreground and background."""
    return 1 + (bg_index(bg) + 1) * 8 + fg_index(fg)


def key_f(n: int) -> int:
    """Curses key code of function key ``n``."""
    return KEY_F0 + n


def _wrap_i16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


_KEY_CODES: Dict[int, KeyKind] = {
    KEY_DOWN: KeyKind.DOWN,
    KEY_UP: KeyKind.UP,
    KEY_LEFT: KeyKind.LEFT,
    KEY_RIGHT: KeyKind.RIGHT,
    KEY_HOME: KeyKind.HOME,
    KEY_END: KeyKind.END,
    KEY_BACKSPACE: KeyKind.BACKSPACE,
    KEY_DC: KeyKind.DELETE,
    KEY_IC: KeyKind.INSERT,
    KEY_NPAGE: KeyKind.PAGE_DOWN,
    KEY_PPAGE: KeyKind.PAGE_UP,
}
_KEY_CODES.update({key_f(n): KeyKind[f"F{n}"] for n in range(1, 13)})


def _build_char_keys() -> Dict[str, Key]:
    keys: Dict[str, Key] = {
        member.name and chr(ord(member.name) - 64): Key(KeyKind.CTRL, member)
        for member in Ctrl
        if len(member.name) == 1
    }
    keys["\0"] = Key(KeyKind.CTRL, Ctrl.AT)
    keys["\x1c"] = Key(KeyKind.CTRL, Ctrl.BACKSLASH)
    keys["\x1d"] = Key(KeyKind.CTRL, Ctrl.BRACKET)
    keys["\x1e"] = Key(KeyKind.CTRL, Ctrl.CARET)
    keys["\x1f"] = Key(KeyKind.CTRL, Ctrl.UNDERSCORE)
    keys["\x08"] = Key(KeyKind.BACKSPACE)
    keys["\t"] = Key(KeyKind.TAB)
    keys["\r"] = Key(KeyKind.ENTER)
    keys["\x7f"] = Key(KeyKind.BACKSPACE)
    return keys


_CHAR_KEYS = _build_char_keys()


def _key_event(key: Key) -> Event:
    return Event(EventKind.KEY, key)


def read_event(
    getch: Callable[[], RawInput],
    set_nodelay: Callable[[], None],
    get_mouse: Callable[[], MouseState],
) -> Optional[Event]:
    """Read one event.

    ``getch`` returns None when there is no input, an int for a curses key code
    or a one-character string. ``set_nodelay`` switches input to non-blocking
    mode before the character following Escape is read. ``get_mouse`` returns
    ``(x, y, button1_pressed)`` or None when the mouse state cannot be read.
    """
    raw = getch()
    if raw is None:
        return None
    if isinstance(raw, int):
        if raw == KEY_RESIZE:
            return Event(EventKind.RESIZE)
        if raw == KEY_MOUSE:
            mouse = get_mouse()
            if mouse is None:
                return None
            x, y, pressed = mouse
            kind = EventKind.LMB_DOWN if pressed else EventKind.LMB_UP
            return Event(kind, point=Point(_wrap_i16(x), _wrap_i16(y)))
        kind = _KEY_CODES.get(raw)
        return None if kind is None else _key_event(Key(kind))
    if raw == "\x1b":
        set_nodelay()
        following = getch()
        if isinstance(following, str):
            if following < " " or following == "\x7f":
                return None
            return _key_event(Key(KeyKind.ALT, following))
        return _key_event(Key(KeyKind.ESCAPE))
    key = _CHAR_KEYS.get(raw)
    return _key_event(key if key is not None else Key(KeyKind.CHAR, raw))