import pytest
from hypothesis import given, strategies as st

from termgrid.screen_base import (
    Bg,
    Ctrl,
    Event,
    EventKind,
    Fg,
    Key,
    KeyKind,
    OutOfMemoryError,
    Point,
    Range1d,
    Rect,
    Screen,
    ScreenError,
    Vector,
    bg_from_fg,
    char_width,
    fg_from_bg,
    graphemes,
    is_text_fit_in,
    text_width,
    trim_text,
)


def test_null_char_has_zero_width():
    assert char_width("\0") == 0


def test_wide_char_is_wider_than_ascii():
    assert char_width("中") > char_width("a")
    assert text_width("中文") == 2 * char_width("中")


def test_combining_mark_adds_no_width():
    assert text_width("e\u0301") == text_width("e")


@given(st.text(alphabet="abcdefXYZ 019", max_size=40))
def test_ascii_width_is_length(s):
    assert text_width(s) == len(s)


def test_trim_text_strips_spaces_and_zero_width():
    assert trim_text("  ab  ") == "ab"
    assert trim_text("\u0301 x y\u0301 ") == "x y"
    assert trim_text("   ") == ""


def test_is_text_fit_in():
    s = "abc"
    assert is_text_fit_in(len(s), s) is True
    assert is_text_fit_in(len(s) - 1, s) is False
    assert is_text_fit_in(-1, s) is True


def test_graphemes_groups_combining_marks():
    text = "e\u0301x"
    items = list(graphemes(text))
    assert [text[r.start:r.stop] for r, _ in items] == ["e\u0301", "x"]
    assert [w for _, w in items] == [char_width("e"), char_width("x")]


def test_graphemes_skips_leading_zero_width_and_nulls():
    text = "\u0301\0a"
    items = list(graphemes(text))
    assert [text[r.start:r.stop] for r, _ in items] == ["a"]


_ALPHABET = ["a", "b", "中", "\u0301", "\0", "\x01", " "]


@given(st.lists(st.sampled_from(_ALPHABET), max_size=20).map("".join))
def test_graphemes_back_matches_forward(text):
    forward = list(graphemes(text))
    it = graphemes(text)
    backward = []
    while (item := it.next_back()) is not None:
        backward.append(item)
    assert backward[::-1] == forward


@given(st.lists(st.sampled_from(["a", "中", "\u0301", " "]), max_size=20).map("".join))
def test_graphemes_widths_sum_to_text_width(text):
    assert sum(w for _, w in graphemes(text)) == text_width(text)


def test_graphemes_front_and_back_do_not_overlap():
    text = "abc"
    it = graphemes(text)
    first, _ = next(it)
    last, _ = it.next_back()
    rest = list(it)
    assert text[first.start:first.stop] == "a"
    assert text[last.start:last.stop] == "c"
    assert [text[r.start:r.stop] for r, _ in rest] == ["b"]
    assert it.next_back() is None


def test_color_names_round_trip():
    assert str(Bg.LIGHT_GRAY) == "LightGray"
    for bg in Bg:
        assert Bg(str(bg)) is bg
    for fg in Fg:
        assert Fg(str(fg)) is fg


def test_color_conversions_round_trip():
    for bg in Bg:
        if bg is Bg.NONE:
            continue
        assert bg_from_fg(fg_from_bg(bg)) is bg


def test_color_conversion_errors():
    with pytest.raises(ValueError):
        fg_from_bg(Bg.NONE)
    with pytest.raises(ValueError):
        bg_from_fg(Fg.WHITE)
    with pytest.raises(ValueError):
        bg_from_fg(Fg.DARK_GRAY)


def test_key_validation():
    assert Key(KeyKind.CHAR, "x").value == "x"
    assert Key(KeyKind.CTRL, Ctrl.L).value is Ctrl.L
    with pytest.raises(ValueError):
        Key(KeyKind.CHAR)
    with pytest.raises(ValueError):
        Key(KeyKind.ALT, "ab")
    with pytest.raises(ValueError):
        Key(KeyKind.CTRL, "l")
    with pytest.raises(ValueError):
        Key(KeyKind.ENTER, "x")


def test_keys_compare_by_value():
    assert Key(KeyKind.ALT, "q") == Key(KeyKind.ALT, "q")
    assert Key(KeyKind.ALT, "q") != Key(KeyKind.CHAR, "q")


def test_event_validation():
    event = Event(EventKind.KEY, key=Key(KeyKind.TAB))
    assert event.count == 1
    assert Event(EventKind.LMB_DOWN, point=Point(1, 2)).point == Point(1, 2)
    with pytest.raises(ValueError):
        Event(EventKind.KEY)
    with pytest.raises(ValueError):
        Event(EventKind.KEY, key=Key(KeyKind.TAB), count=0)
    with pytest.raises(ValueError):
        Event(EventKind.LMB_UP)
    with pytest.raises(ValueError):
        Event(EventKind.RESIZE, key=Key(KeyKind.TAB))


def test_rect_contains():
    rect = Rect(Point(2, 3), Vector(4, 5))
    assert rect.contains(Point(2, 3))
    assert rect.contains(Point(5, 7))
    assert not rect.contains(Point(6, 3))
    assert not rect.contains(Point(2, 8))
    assert not rect.contains(Point(1, 3))
    assert not Rect(Point(0, 0), Vector(0, 0)).contains(Point(0, 0))


def test_out_of_memory_error_message():
    err = OutOfMemoryError()
    assert str(err) == "out of memory"
    with pytest.raises(ScreenError):
        raise err


def test_screen_is_abstract():
    with pytest.raises(TypeError):
        Screen()


def test_screen_subclass_contract():
    class Dummy(Screen):
        def size(self):
            return Vector(10, 2)

        def out(self, p, fg, bg, text, hard, soft):
            return Range1d(p.x, p.x + text_width(text))

        def update(self, cursor, wait):
            return None

    screen = Dummy()
    assert screen.size() == Vector(10, 2)
    assert screen.out(Point(1, 0), Fg.RED, Bg.NONE, "ab", Range1d(0, 10), Range1d(0, 10)) == Range1d(1, 3)
    assert screen.update(None, False) is None