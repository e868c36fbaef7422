# termgrid

A small toolkit for drawing on a character-cell terminal.

## What is in it

- `termgrid.screen_base` holds the geometry types and colours:
  - Geometry: `Point`, `Vector`, `Range1d` and `Rect`. `Rect` has a `contains` method.
  - Colours: `Fg` has 16 foreground colours. `Bg` has 8 background colours plus `Bg.NONE`. `fg_from_bg` and `bg_from_fg` convert between the eight shared colours and raise `ValueError` for the others.
  - Input: keys are `Key(KeyKind, value)` and `Ctrl`. Input events are `Event(EventKind, key=..., count=..., point=...)`.
  - Text helpers that know about wide characters:
    - `char_width` and `text_width` give display widths.
    - `trim_text` strips spaces and zero-width characters from both ends.
    - `is_text_fit_in` tells whether text fits a column count.
    - `graphemes(text)` yields `(range, width)` for each visible cluster. A cluster is a base character plus its zero-width marks. `Graphemes.next_back()` takes clusters from the end instead.
  - The abstract `Screen` interface, with `size()`, `out(...)` and `update(...)`, and the errors `ScreenError` and `OutOfMemoryError`.
- `termgrid.labels` handles hotkey labels:
  - In `"~O~pen"` the text between tildes is the hotkey. `"~~"` inside a label stands for a literal tilde.
  - `label_width` gives the display width and `label` gives the lower-cased hotkey character.
  - `TextWrapping` and `TextAlign` are also here. `text_align_from_halign` and `halign_from_text_align` convert between `TextAlign` and `HAlign`, with `None` meaning justify.
- `termgrid.arena` provides `Registry`. It stores items under `Handle`s and reuses the most recently freed slot first.
- `termgrid.keymap` holds the curses colour-pair numbering: `bg_index`, `fg_index`, `fg_is_bold`, `color_pair_number` and `key_f`. Its `read_event` turns raw input from three callables into an `Event`:
  - `getch` returns `None`, a key code, or a one-character string.
  - `set_nodelay` switches input to non-blocking mode.
  - `get_mouse` returns the mouse state.
- Two curses screens:
  - `termgrid.unicode_screen.UnicodeScreen` is for UTF-8 locales.
  - `termgrid.narrow_screen.NarrowScreen` is for single-byte locales. It maps line-drawing characters to the alternate character set. Characters it cannot encode are shown as diamonds, as wide as the character.

  Each screen draws into an in-memory grid (`UnicodeGrid` / `NarrowGrid`). A grid works without a terminal.
- `termgrid.terminal.init(max_size=None)` sets the locale from the environment. It returns a `UnicodeScreen` when the locale's character set is `UTF-8`, and a `NarrowScreen` otherwise.

## Opening a terminal screen

```python
from termgrid.terminal import init
from termgrid.screen_base import Point, Range1d, Fg, Bg

with init() as screen:
    size = screen.size()
    row = Range1d(0, size.x)
    screen.out(Point(0, 0), Fg.YELLOW, Bg.BLUE, "Hello, terminal", row, row)
    event = screen.update(None, True)   # draw, then wait for one event
```

`out(p, fg, bg, text, hard, soft)` writes `text` at `p`:

- `hard` is the range of screen columns that may be touched.
- `soft` limits which of the text's own columns are shown.
- The return value is the `Range1d` of columns it actually wrote.
- It raises `ValueError` when the row or either range lies outside the screen.

`update(cursor, wait)`:

- flushes changed rows;
- places the cursor, or hides it when `cursor` is `None` or off-screen;
- returns the next `Event`, or `None` when `wait` is false and nothing is pending.

A resize event resizes the grid. Ctrl+L forces a full redraw.

Only one screen may be open at a time. Leaving the `with` block, or calling `close()`, restores the terminal. Curses failures raise `ScreenError`, and so does running where `curses` is unavailable.

## Drawing off-screen

```python
from termgrid.unicode_screen import UnicodeGrid
from termgrid.screen_base import Point, Range1d, Fg, Bg

grid = UnicodeGrid(10, 2)
row = Range1d(0, 10)
grid.out(Point(2, 0), Fg.WHITE, Bg.BLACK, "漢字", row, row)
grid.row_text(0)          # '  漢字    '
grid.take_invalidated()   # [0]; rows written since the last call
```

`NarrowGrid(width, height, encoding)` works the same way. Its `row_cells(y)` returns `(code, colours)` pairs. `encode_char` and `decode_char` convert single characters for a given encoding.

## Labels

```python
from termgrid.labels import label, label_width

label("~F~ile")        # 'f'
label_width("~F~ile")  # 4
label("Plain")         # None
```

## Registry

```python
from termgrid.arena import Registry

timers = Registry()
handle = timers.insert(lambda h: ("alarm", h))   # insert returns the second value
timers[handle]              # 'alarm'
timers.remove(handle)       # 'alarm'; the slot is reused by the next insert
timers.items().is_empty()   # True
```

## What it does not do

termgrid provides screens and drawing primitives only. It has no widgets, no layout and no application or event loop: you call `update` yourself. It has no command-line program.