"""Opening a curses screen suited to the terminal's character set."""

from __future__ import annotations

import locale
from typing import Optional, Tuple

from .narrow_screen import NarrowScreen
from .screen_base import Screen
from .unicode_screen import UnicodeScreen

__all__ = ["is_utf8_locale", "init"]


def is_utf8_locale(codeset: str) -> bool:
    """Whether the locale's character set name is exactly ``UTF-8``."""
    return codeset == "UTF-8"


def init(max_size: Optional[Tuple[int, int]] = None) -> Screen:
    """Set up the locale and open a screen for the terminal.

    Only one screen may be open at a time; close it before opening another.
    """
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        pass
    if is_utf8_locale(locale.nl_langinfo(locale.CODESET)):
        return UnicodeScreen(max_size)
    return NarrowScreen(max_size)