"""Hotkey labels and text layout options."""

from __future__ import annotations

import enum
from typing import Iterator, Optional, Tuple

from .screen_base import HAlign, text_width

__all__ = [
    "label_width",
    "label",
    "TextWrapping",
    "TextAlign",
    "text_align_from_halign",
    "halign_from_text_align",
]


def _wrap_i16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


def _segments(text: str) -> Iterator[Tuple[bool, str]]:
    """Yield ``(is_hotkey, visible_text)`` for each ``~``-separated part.

    A ``~`` toggles hotkey mode; ``~~`` stands for a literal ``~``.
    """
    parts = text.split("~")
    last_index = len(parts) - 1
    hotkey = False
    for index, part in enumerate(parts):
        first = index == 0
        if not first and part:
            hotkey = not hotkey
        visible = "~" if not first and index != last_index and not part else part
        yield hotkey, visible
        if not first and not part:
            hotkey = not hotkey


def label_width(text: str) -> int:
    """Columns taken by a label once its ``~`` markers are removed."""
    width = 0
    for _, visible in _segments(text):
        width = _wrap_i16(width + text_width(visible))
    return width


def label(text: str) -> Optional[str]:
    """The lower-cased hotkey character of a label, if it has one."""
    for hotkey, visible in _segments(text):
        if hotkey and visible:
            return visible[0].lower()[0]
    return None


class TextWrapping(enum.Enum):
    NO_WRAP = "NoWrap"
    WRAP = "Wrap"
    WRAP_WITH_OVERFLOW = "WrapWithOverflow"


class TextAlign(enum.Enum):
    LEFT = "Left"
    CENTER = "Center"
    RIGHT = "Right"
    JUSTIFY = "Justify"


_FROM_HALIGN = {
    HAlign.LEFT: TextAlign.LEFT,
    HAlign.CENTER: TextAlign.CENTER,
    HAlign.RIGHT: TextAlign.RIGHT,
    None: TextAlign.JUSTIFY,
}

_TO_HALIGN = {value: key for key, value in _FROM_HALIGN.items()}


def text_align_from_halign(value: Optional[HAlign]) -> TextAlign:
    """Text alignment for a horizontal alignment; None means justify."""
    return _FROM_HALIGN[value]


def halign_from_text_align(value: TextAlign) -> Optional[HAlign]:
    """Horizontal alignment for a text alignment; justify gives None."""
    return _TO_HALIGN[value]