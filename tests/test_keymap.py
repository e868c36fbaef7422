import pytest

from termgrid.keymap import (
    COLOR_BLACK,
    COLOR_WHITE,
    COLOR_YELLOW,
    KEY_DOWN,
    KEY_F0,
    KEY_MOUSE,
    KEY_RESIZE,
    KEY_UP,
    bg_index,
    color_pair_number,
    fg_index,
    fg_is_bold,
    key_f,
    read_event,
)
from termgrid.screen_base import Bg, Ctrl, Event, EventKind, Fg, Key, KeyKind, Point, bg_from_fg


class FakeInput:
    def __init__(self, *items, mouse=None):
        self.items = list(items)
        self.mouse = mouse
        self.nodelay_calls = 0

    def getch(self):
        return self.items.pop(0) if self.items else None

    def set_nodelay(self):
        self.nodelay_calls += 1

    def get_mouse(self):
        return self.mouse

    def read(self):
        return read_event(self.getch, self.set_nodelay, self.get_mouse)


def key_event(kind, value=None):
    return Event(EventKind.KEY, Key(kind, value))


def test_bg_index_source_values():
    assert bg_index(Bg.NONE) == -1
    assert bg_index(Bg.BROWN) == COLOR_YELLOW
    assert bg_index(Bg.LIGHT_GRAY) == COLOR_WHITE


@pytest.mark.parametrize("fg", list(Fg))
def test_bright_colours_share_index_and_are_bold(fg):
    bold = fg_is_bold(fg)
    try:
        bg = bg_from_fg(fg)
    except ValueError:
        assert bold
    else:
        assert not bold
        assert fg_index(fg) == bg_index(bg)


def test_dark_gray_is_bold_black():
    assert fg_index(Fg.DARK_GRAY) == COLOR_BLACK
    assert fg_is_bold(Fg.DARK_GRAY)


def test_color_pair_numbers_in_range_and_distinct_per_base_colour():
    pairs = {}
    for fg in Fg:
        for bg in Bg:
            n = color_pair_number(fg, bg)
            assert 1 <= n <= 72
            pairs.setdefault((fg_index(fg), bg_index(bg)), set()).add(n)
    assert all(len(ns) == 1 for ns in pairs.values())
    assert len({next(iter(ns)) for ns in pairs.values()}) == len(pairs)


def test_color_pair_default_background_black():
    assert color_pair_number(Fg.BLACK, Bg.NONE) == 1


def test_key_f_base():
    assert key_f(0) == KEY_F0


def test_no_input():
    inp = FakeInput()
    assert read_event(inp.getch, inp.set_nodelay, inp.get_mouse) is None
    assert inp.nodelay_calls == 0


def test_resize():
    assert FakeInput(KEY_RESIZE).read() == Event(EventKind.RESIZE)


def test_arrow_keys():
    assert FakeInput(KEY_DOWN).read() == key_event(KeyKind.DOWN)
    assert FakeInput(KEY_UP).read() == key_event(KeyKind.UP)


@pytest.mark.parametrize("n", range(1, 13))
def test_function_keys(n):
    assert FakeInput(key_f(n)).read() == key_event(KeyKind[f"F{n}"])


def test_unknown_code_ignored():
    assert FakeInput(key_f(13)).read() is None


def test_mouse_press_and_release():
    assert FakeInput(KEY_MOUSE, mouse=(3, 4, True)).read() == Event(EventKind.LMB_DOWN, point=Point(3, 4))
    assert FakeInput(KEY_MOUSE, mouse=(5, 6, False)).read() == Event(EventKind.LMB_UP, point=Point(5, 6))


def test_mouse_error():
    inp = FakeInput(KEY_MOUSE, mouse=None)
    assert read_event(inp.getch, inp.set_nodelay, inp.get_mouse) is None
    assert inp.items == []


def test_alt_char():
    inp = FakeInput("\x1b", "x")
    assert inp.read() == key_event(KeyKind.ALT, "x")
    assert inp.nodelay_calls == 1


@pytest.mark.parametrize("following", [None, KEY_UP])
def test_plain_escape(following):
    assert FakeInput("\x1b", following).read() == key_event(KeyKind.ESCAPE)


@pytest.mark.parametrize("following", ["\x01", "\x7f", "\x1f"])
def test_escape_with_control_dropped(following):
    inp = FakeInput("\x1b", following)
    assert read_event(inp.getch, inp.set_nodelay, inp.get_mouse) is None
    assert inp.nodelay_calls == 1


@pytest.mark.parametrize(
    "char, key",
    [
        ("\r", Key(KeyKind.ENTER)),
        ("\t", Key(KeyKind.TAB)),
        ("\x7f", Key(KeyKind.BACKSPACE)),
        ("\x08", Key(KeyKind.BACKSPACE)),
        ("\n", Key(KeyKind.CTRL, Ctrl.J)),
        ("\0", Key(KeyKind.CTRL, Ctrl.AT)),
        ("\x1c", Key(KeyKind.CTRL, Ctrl.BACKSLASH)),
        ("\x1f", Key(KeyKind.CTRL, Ctrl.UNDERSCORE)),
        ("a", Key(KeyKind.CHAR, "a")),
        ("ж", Key(KeyKind.CHAR, "ж")),
    ],
)
def test_char_keys(char, key):
    assert FakeInput(char).read() == Event(EventKind.KEY, key)


@pytest.mark.parametrize("ctrl", [c for c in Ctrl if len(c.name) == 1])
def test_ctrl_letters(ctrl):
    char = chr(ord(ctrl.name) - ord("A") + 1)
    assert FakeInput(char).read() == key_event(KeyKind.CTRL, ctrl)